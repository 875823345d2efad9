# src/hublib/api/v1/endpoints/admin.py
"""Admin endpoints: moderation config and the suggestion queue."""

from typing import Annotated

from fastapi import APIRouter, Query
from sqlalchemy.orm import Session

from hublib.core.settings import settings
from hublib.models import Suggestion, User
from hublib.models.suggestion import (
    SUGGESTION_STATUS_APPROVED,
    SUGGESTION_STATUS_PENDING,
    SUGGESTION_STATUS_REJECTED,
    SUGGESTION_TYPES,
)
from hublib.schemas.admin import (
    AdminConfigEntry,
    AdminConfigResponse,
    AdminConfigUpdate,
    ModerationConfigResponse,
)
from hublib.schemas.common import PageMeta
from hublib.schemas.suggestion import (
    SuggestionListResponse,
    SuggestionResponse,
    SuggestionStatus,
    SuggestionType,
)
from hublib.services import suggestions as suggestion_service
from hublib.services.cache import CacheInvalidator, invalidate_suggestion
from hublib.services.moderation import ModerationConfig, ModerationService

from ..dependencies import AdminUserDep, CacheDep, ModerationConfigDep, SessionDep

router = APIRouter(prefix="/admin", tags=["admin"])


def _effective(config: ModerationConfig) -> ModerationConfigResponse:
    return ModerationConfigResponse(
        auto_approval_enabled=config.auto_approval_enabled,
        consider_downvotes=config.consider_downvotes,
        approval_thresholds={t: config.approval_threshold(t) for t in SUGGESTION_TYPES},
        rejection_thresholds={t: config.rejection_threshold(t) for t in SUGGESTION_TYPES},
    )


@router.get("/config", response_model=AdminConfigResponse)
async def get_config(
    _admin: AdminUserDep,
    db: SessionDep,
    config_provider: ModerationConfigDep,
) -> AdminConfigResponse:
    """Return stored config rows and the effective moderation settings."""
    entries = ModerationService.list_config(db)
    return AdminConfigResponse(
        entries=[AdminConfigEntry.model_validate(row) for row in entries],
        effective=_effective(config_provider.load()),
    )


@router.put("/config/{key}", response_model=AdminConfigEntry)
async def set_config(
    key: str,
    update: AdminConfigUpdate,
    _admin: AdminUserDep,
    db: SessionDep,
) -> AdminConfigEntry:
    """Create or replace one config key after validating its value."""
    row = ModerationService.set_config_value(
        db,
        key=key,
        value=update.value,
        description=update.description,
    )
    return AdminConfigEntry.model_validate(row)


@router.get("/suggestions", response_model=SuggestionListResponse)
async def moderation_queue(
    _admin: AdminUserDep,
    db: SessionDep,
    status_filter: Annotated[SuggestionStatus, Query(alias="status")] = "pending",
    type: SuggestionType | None = None,  # noqa: A002
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = settings.default_page_size,
) -> SuggestionListResponse:
    """List suggestions awaiting review, oldest first."""
    result = suggestion_service.list_suggestions(
        db,
        suggestion_type=type,
        status=status_filter,
        sort_by="created_at",
        sort_order="asc",
        page=page,
        limit=limit,
    )
    return SuggestionListResponse(
        suggestions=[SuggestionResponse.model_validate(item) for item in result.items],
        pagination=PageMeta.build(page=result.page, limit=result.limit, total=result.total),
    )


def _override(
    db: Session,
    suggestion_id: int,
    status: str,
    admin: User,
    cache: CacheInvalidator,
) -> Suggestion:
    suggestion = ModerationService.override_status(
        db,
        suggestion_id=suggestion_id,
        status=status,
        admin=admin,
    )
    invalidate_suggestion(cache, suggestion_id)
    return suggestion


@router.put("/suggestions/{suggestion_id}/approve", response_model=SuggestionResponse)
async def approve_suggestion(
    suggestion_id: int,
    admin: AdminUserDep,
    db: SessionDep,
    cache: CacheDep,
) -> Suggestion:
    """Approve a suggestion regardless of its votes."""
    return _override(db, suggestion_id, SUGGESTION_STATUS_APPROVED, admin, cache)


@router.put("/suggestions/{suggestion_id}/reject", response_model=SuggestionResponse)
async def reject_suggestion(
    suggestion_id: int,
    admin: AdminUserDep,
    db: SessionDep,
    cache: CacheDep,
) -> Suggestion:
    """Reject a suggestion regardless of its votes."""
    return _override(db, suggestion_id, SUGGESTION_STATUS_REJECTED, admin, cache)


@router.put("/suggestions/{suggestion_id}/reset", response_model=SuggestionResponse)
async def reset_suggestion(
    suggestion_id: int,
    admin: AdminUserDep,
    db: SessionDep,
    cache: CacheDep,
) -> Suggestion:
    """Move a reviewed suggestion back to pending."""
    return _override(db, suggestion_id, SUGGESTION_STATUS_PENDING, admin, cache)


@router.post("/suggestions/{suggestion_id}/evaluate", response_model=SuggestionResponse)
async def evaluate_suggestion(
    suggestion_id: int,
    _admin: AdminUserDep,
    db: SessionDep,
    cache: CacheDep,
    config_provider: ModerationConfigDep,
) -> Suggestion:
    """Re-run auto-moderation with the current thresholds."""
    suggestion, _changed = suggestion_service.reevaluate_suggestion(
        db,
        suggestion_id=suggestion_id,
        config=config_provider.load(),
        cache=cache,
    )
    return suggestion
