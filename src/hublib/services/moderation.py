# src/hublib/services/moderation.py
"""Auto-moderation of community suggestions.

A suggestion starts ``pending``. After every vote the engine compares the
net score against the approval threshold for the suggestion type, then (when
downvotes are considered) the downvote count against the rejection
threshold. Approval is checked first. Automation never leaves a terminal
state; only an admin override does.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session

from hublib.core.errors import InvalidInputError, NotFoundError
from hublib.core.settings import settings
from hublib.db.time import utcnow
from hublib.models import AdminConfig, Suggestion, User
from hublib.models.suggestion import (
    SUGGESTION_STATUS_APPROVED,
    SUGGESTION_STATUS_PENDING,
    SUGGESTION_STATUS_REJECTED,
    SUGGESTION_TYPES,
    TERMINAL_STATUSES,
)

logger = logging.getLogger(__name__)

AUTO_APPROVAL_ENABLED_KEY = "auto_approval_enabled"
CONSIDER_DOWNVOTES_KEY = "consider_downvotes"
APPROVAL_THRESHOLD_PREFIX = "auto_approval_vote_threshold_"
REJECTION_THRESHOLD_PREFIX = "auto_rejection_downvote_threshold_"

TOGGLE_KEYS = frozenset({AUTO_APPROVAL_ENABLED_KEY, CONSIDER_DOWNVOTES_KEY})
THRESHOLD_KEYS = frozenset(
    f"{prefix}{suggestion_type}"
    for prefix in (APPROVAL_THRESHOLD_PREFIX, REJECTION_THRESHOLD_PREFIX)
    for suggestion_type in SUGGESTION_TYPES
)
CONFIG_KEYS = TOGGLE_KEYS | THRESHOLD_KEYS

_TRUE_VALUES = frozenset({"true", "1", "yes", "on"})
_FALSE_VALUES = frozenset({"false", "0", "no", "off"})


def _parse_bool(raw: str) -> bool | None:
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return None


def _parse_threshold(raw: str) -> int | None:
    try:
        value = int(raw.strip())
    except ValueError:
        return None
    return value if value >= 0 else None


@dataclass(frozen=True)
class ModerationConfig:
    """Thresholds and toggles the engine evaluates against."""

    auto_approval_enabled: bool = True
    consider_downvotes: bool = True
    approval_thresholds: Mapping[str, int] = field(default_factory=dict)
    rejection_thresholds: Mapping[str, int] = field(default_factory=dict)
    default_approval_threshold: int = 5
    default_rejection_threshold: int = 3

    def approval_threshold(self, suggestion_type: str) -> int:
        """Minimum net score that approves a suggestion of this type."""
        return self.approval_thresholds.get(suggestion_type, self.default_approval_threshold)

    def rejection_threshold(self, suggestion_type: str) -> int:
        """Minimum downvote count that (with a negative score) rejects."""
        return self.rejection_thresholds.get(suggestion_type, self.default_rejection_threshold)

    @classmethod
    def from_entries(cls, entries: Mapping[str, str]) -> ModerationConfig:
        """Build a config from stored key/value pairs over the settings defaults.

        Unparseable stored values fall back to the default and are logged.
        """
        def toggle(key: str, default: bool) -> bool:
            raw = entries.get(key)
            if raw is None:
                return default
            parsed = _parse_bool(raw)
            if parsed is None:
                logger.warning("Ignoring invalid admin config %s=%r", key, raw)
                return default
            return parsed

        approval: dict[str, int] = {}
        rejection: dict[str, int] = {}
        for suggestion_type in SUGGESTION_TYPES:
            for prefix, target in (
                (APPROVAL_THRESHOLD_PREFIX, approval),
                (REJECTION_THRESHOLD_PREFIX, rejection),
            ):
                key = f"{prefix}{suggestion_type}"
                raw = entries.get(key)
                if raw is None:
                    continue
                value = _parse_threshold(raw)
                if value is None:
                    logger.warning("Ignoring invalid admin config %s=%r", key, raw)
                    continue
                target[suggestion_type] = value

        return cls(
            auto_approval_enabled=toggle(
                AUTO_APPROVAL_ENABLED_KEY,
                settings.default_auto_approval_enabled,
            ),
            consider_downvotes=toggle(CONSIDER_DOWNVOTES_KEY, settings.default_consider_downvotes),
            approval_thresholds=approval,
            rejection_thresholds=rejection,
            default_approval_threshold=settings.default_approval_vote_threshold,
            default_rejection_threshold=settings.default_rejection_downvote_threshold,
        )


class ModerationConfigProvider(Protocol):
    """Source of the moderation config read at the start of each operation."""

    def load(self) -> ModerationConfig:
        """Return the current config."""


class DatabaseModerationConfigProvider:
    """Reads ``admin_config`` rows through the request session."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def load(self) -> ModerationConfig:
        rows = self._db.execute(
            select(AdminConfig.key, AdminConfig.value).where(AdminConfig.key.in_(CONFIG_KEYS))
        ).all()
        return ModerationConfig.from_entries({key: value for key, value in rows})


class StaticModerationConfigProvider:
    """Returns a fixed config; used by tests and scripts."""

    def __init__(self, config: ModerationConfig) -> None:
        self._config = config

    def load(self) -> ModerationConfig:
        return self._config


def decide_transition(
    *,
    status: str,
    suggestion_type: str,
    upvotes: int,
    downvotes: int,
    config: ModerationConfig,
) -> str | None:
    """Return the status automation moves to, or None to stay put."""
    if status in TERMINAL_STATUSES:
        return None
    if not config.auto_approval_enabled:
        return None

    score = upvotes - downvotes
    if score >= config.approval_threshold(suggestion_type):
        return SUGGESTION_STATUS_APPROVED
    if (
        config.consider_downvotes
        and downvotes >= config.rejection_threshold(suggestion_type)
        and score < 0
    ):
        return SUGGESTION_STATUS_REJECTED
    return None


class ModerationService:
    """Service applying moderation transitions to suggestions."""

    @staticmethod
    def evaluate_suggestion(
        suggestion: Suggestion,
        *,
        upvotes: int,
        downvotes: int,
        config: ModerationConfig,
        now: datetime | None = None,
    ) -> bool:
        """Apply an automatic transition, if any, without committing.

        System decisions stamp ``reviewed_at`` and leave ``reviewed_by`` empty.

        Returns:
            True when the status changed.
        """
        new_status = decide_transition(
            status=suggestion.status,
            suggestion_type=suggestion.type,
            upvotes=upvotes,
            downvotes=downvotes,
            config=config,
        )
        if new_status is None:
            return False

        suggestion.status = new_status
        suggestion.reviewed_at = now or utcnow()
        suggestion.reviewed_by = None
        logger.info(
            "Suggestion %s auto-%s (up=%d, down=%d)",
            suggestion.id,
            new_status,
            upvotes,
            downvotes,
        )
        return True

    @staticmethod
    def override_status(
        db: Session,
        *,
        suggestion_id: int,
        status: str,
        admin: User,
        now: datetime | None = None,
    ) -> Suggestion:
        """Force a suggestion into ``status`` on behalf of an admin."""
        if status not in (
            SUGGESTION_STATUS_PENDING,
            SUGGESTION_STATUS_APPROVED,
            SUGGESTION_STATUS_REJECTED,
        ):
            raise InvalidInputError(f"Unknown status {status!r}", field="status")

        suggestion = db.get(Suggestion, suggestion_id)
        if suggestion is None:
            raise NotFoundError("Suggestion not found", code="SUGGESTION_NOT_FOUND")

        previous = suggestion.status
        suggestion.status = status
        suggestion.reviewed_at = now or utcnow()
        suggestion.reviewed_by = admin.id
        db.commit()
        db.refresh(suggestion)
        logger.info(
            "Suggestion %s moved %s -> %s by admin %s",
            suggestion_id,
            previous,
            status,
            admin.id,
        )
        return suggestion

    @staticmethod
    def list_config(db: Session) -> list[AdminConfig]:
        """Return every stored config row ordered by key."""
        return list(db.scalars(select(AdminConfig).order_by(AdminConfig.key)))

    @staticmethod
    def set_config_value(
        db: Session,
        *,
        key: str,
        value: bool | int | str,
        description: str | None = None,
    ) -> AdminConfig:
        """Validate and upsert one moderation config key.

        Raises:
            InvalidInputError: If the key is unknown or the value does not
                fit it (toggles take booleans, thresholds non-negative ints).
        """
        stored = normalize_config_value(key, value)
        row = db.scalars(select(AdminConfig).where(AdminConfig.key == key)).first()
        if row is None:
            row = AdminConfig(key=key, value=stored, description=description)
            db.add(row)
        else:
            row.value = stored
            if description is not None:
                row.description = description
        db.commit()
        db.refresh(row)
        logger.info("Admin config %s set to %s", key, stored)
        return row


def normalize_config_value(key: str, value: bool | int | str) -> str:
    """Return the text form stored for ``value`` under ``key``."""
    if key not in CONFIG_KEYS:
        raise InvalidInputError(f"Unknown configuration key {key!r}", field="key")

    if key in TOGGLE_KEYS:
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, str):
            parsed = _parse_bool(value)
            if parsed is not None:
                return "true" if parsed else "false"
        raise InvalidInputError(f"{key} expects true or false", field="value")

    # bool is an int subclass; reject it explicitly for thresholds.
    if isinstance(value, bool):
        raise InvalidInputError(f"{key} expects a non-negative integer", field="value")
    if isinstance(value, int):
        threshold: int | None = value if value >= 0 else None
    else:
        threshold = _parse_threshold(value)
    if threshold is None:
        raise InvalidInputError(f"{key} expects a non-negative integer", field="value")
    return str(threshold)


def get_moderation_config(db: Session) -> ModerationConfig:
    """Load the config currently stored in ``db``."""
    return DatabaseModerationConfigProvider(db).load()
