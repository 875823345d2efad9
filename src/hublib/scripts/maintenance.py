# src/hublib/scripts/maintenance.py
"""
Operator maintenance tasks.

Expired shares and permissions are ignored by every access check, so purging
them is optional housekeeping rather than a correctness requirement. Run:

  python -m hublib.scripts.maintenance purge-expired [--dry-run]
  python -m hublib.scripts.maintenance create-user alice --role admin
  python -m hublib.scripts.maintenance mint-token 1
  python -m hublib.scripts.maintenance seed-config
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from hublib.core.errors import HubLibError
from hublib.core.logging import configure_logging
from hublib.core.security import create_access_token
from hublib.core.settings import settings
from hublib.db.session import SessionLocal
from hublib.db.time import utcnow
from hublib.models import AdminConfig, ResourcePermission, ResourceShare, User
from hublib.models.suggestion import SUGGESTION_TYPES
from hublib.models.user import USER_ROLES
from hublib.services.moderation import (
    APPROVAL_THRESHOLD_PREFIX,
    AUTO_APPROVAL_ENABLED_KEY,
    CONSIDER_DOWNVOTES_KEY,
    REJECTION_THRESHOLD_PREFIX,
    ModerationService,
)
from hublib.services.users import get_user_or_404

logger = logging.getLogger(__name__)


def purge_expired_grants(
    db: Session,
    *,
    now: datetime | None = None,
    dry_run: bool = False,
) -> tuple[int, int]:
    """Delete shares and permissions whose expiry has passed.

    Returns:
        ``(shares, permissions)`` removed, or that would be removed when
        ``dry_run`` is set.
    """
    now = now or utcnow()
    share_filter = (ResourceShare.expires_at.is_not(None), ResourceShare.expires_at <= now)
    permission_filter = (
        ResourcePermission.expires_at.is_not(None),
        ResourcePermission.expires_at <= now,
    )

    if dry_run:
        shares = db.scalar(select(func.count(ResourceShare.id)).where(*share_filter)) or 0
        permissions = (
            db.scalar(select(func.count(ResourcePermission.id)).where(*permission_filter)) or 0
        )
        return int(shares), int(permissions)

    shares = db.execute(
        delete(ResourceShare).where(*share_filter).execution_options(synchronize_session=False)
    ).rowcount
    permissions = db.execute(
        delete(ResourcePermission)
        .where(*permission_filter)
        .execution_options(synchronize_session=False)
    ).rowcount
    db.commit()
    logger.info("Purged %d expired shares and %d expired permissions", shares, permissions)
    return int(shares or 0), int(permissions or 0)


def create_user(db: Session, *, username: str, role: str, full_name: str | None = None) -> User:
    """Provision a local profile, e.g. for development."""
    user = User(username=username, role=role, full_name=full_name)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def seed_moderation_config(db: Session) -> list[AdminConfig]:
    """Store the settings defaults for every moderation key not yet set."""
    defaults: dict[str, bool | int] = {
        AUTO_APPROVAL_ENABLED_KEY: settings.default_auto_approval_enabled,
        CONSIDER_DOWNVOTES_KEY: settings.default_consider_downvotes,
    }
    for suggestion_type in SUGGESTION_TYPES:
        defaults[f"{APPROVAL_THRESHOLD_PREFIX}{suggestion_type}"] = (
            settings.default_approval_vote_threshold
        )
        defaults[f"{REJECTION_THRESHOLD_PREFIX}{suggestion_type}"] = (
            settings.default_rejection_downvote_threshold
        )

    existing = set(db.scalars(select(AdminConfig.key)))
    created = []
    for key, value in defaults.items():
        if key in existing:
            continue
        created.append(ModerationService.set_config_value(db, key=key, value=value))
    return created


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="HubLib maintenance tasks")
    sub = parser.add_subparsers(dest="command", required=True)

    purge = sub.add_parser("purge-expired", help="Delete expired shares and permissions")
    purge.add_argument("--dry-run", action="store_true", help="Only count what would go")

    user = sub.add_parser("create-user", help="Create a local user profile")
    user.add_argument("username")
    user.add_argument("--role", choices=USER_ROLES, default="user")
    user.add_argument("--full-name", default=None)

    token = sub.add_parser("mint-token", help="Print a bearer token for a user id")
    token.add_argument("user_id", type=int)

    sub.add_parser("seed-config", help="Store default moderation thresholds")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run one maintenance command; returns the process exit code."""
    args = _build_parser().parse_args(argv)
    configure_logging()

    db = SessionLocal()
    try:
        if args.command == "purge-expired":
            shares, permissions = purge_expired_grants(db, dry_run=args.dry_run)
            verb = "Would remove" if args.dry_run else "Removed"
            print(f"{verb} {shares} shares and {permissions} permissions")
        elif args.command == "create-user":
            created = create_user(
                db, username=args.username, role=args.role, full_name=args.full_name
            )
            print(f"Created user {created.id} ({created.username}, {created.role})")
        elif args.command == "mint-token":
            get_user_or_404(db, args.user_id)
            print(create_access_token(args.user_id))
        elif args.command == "seed-config":
            rows = seed_moderation_config(db)
            print(f"Stored {len(rows)} default config values")
    except HubLibError as exc:
        print(f"[maintenance] ERROR: {exc.message}", file=sys.stderr)
        return 1
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
