"""User groups that resources can be shared with."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hublib.core.errors import ConflictError, ForbiddenError, NotFoundError
from hublib.db.time import utcnow
from hublib.models import Group, GroupMember, Resource, ResourceShare, User
from hublib.models.group import GROUP_ROLE_ADMIN
from hublib.models.resource import VISIBILITY_PRIVATE
from hublib.services.visibility import is_active

logger = logging.getLogger(__name__)


def get_group_or_404(db: Session, group_id: int) -> Group:
    """Load a group or raise :class:`NotFoundError`."""
    group = db.get(Group, group_id)
    if group is None:
        raise NotFoundError("Group not found", code="GROUP_NOT_FOUND")
    return group


def _membership(db: Session, group_id: int, user_id: int) -> GroupMember | None:
    return db.scalars(
        select(GroupMember).where(GroupMember.group_id == group_id, GroupMember.user_id == user_id)
    ).first()


def _ensure_can_manage(db: Session, group: Group, user: User) -> None:
    if group.owner_id == user.id or user.is_admin:
        return
    member = _membership(db, group.id, user.id)
    if member is None or member.role != GROUP_ROLE_ADMIN:
        raise ForbiddenError("Only the owner or a group admin can manage this group")


def create_group(db: Session, *, owner: User, name: str, description: str | None) -> Group:
    """Create a group; the owner joins it as an admin member."""
    group = Group(name=name, description=description, owner_id=owner.id)
    group.members.append(GroupMember(user_id=owner.id, role=GROUP_ROLE_ADMIN))
    db.add(group)
    db.commit()
    db.refresh(group)
    logger.info("Group %s created by user %s", group.id, owner.id)
    return group


def list_my_groups(db: Session, *, user: User) -> list[Group]:
    """Return the groups ``user`` belongs to."""
    stmt = (
        select(Group)
        .join(GroupMember, GroupMember.group_id == Group.id)
        .where(GroupMember.user_id == user.id)
        .order_by(Group.name, Group.id)
    )
    return list(db.scalars(stmt))


def update_group(db: Session, *, group_id: int, user: User, changes: dict[str, Any]) -> Group:
    """Rename or re-describe a group."""
    group = get_group_or_404(db, group_id)
    _ensure_can_manage(db, group, user)
    for field_name, value in changes.items():
        if field_name == "name" and value is None:
            continue
        setattr(group, field_name, value)
    db.commit()
    db.refresh(group)
    return group


def delete_group(db: Session, *, group_id: int, user: User) -> None:
    """Delete a group and its memberships.

    Shares naming the group remain as inert rows.
    """
    group = get_group_or_404(db, group_id)
    if group.owner_id != user.id and not user.is_admin:
        raise ForbiddenError("Only the owner can delete this group")
    db.delete(group)
    db.commit()
    logger.info("Group %s deleted by user %s", group_id, user.id)


def list_members(db: Session, *, group_id: int) -> list[GroupMember]:
    """Return the memberships of a group."""
    get_group_or_404(db, group_id)
    stmt = (
        select(GroupMember)
        .where(GroupMember.group_id == group_id)
        .order_by(GroupMember.joined_at, GroupMember.id)
    )
    return list(db.scalars(stmt))


def add_member(db: Session, *, group_id: int, actor: User, user_id: int, role: str) -> GroupMember:
    """Add ``user_id`` to a group.

    Raises:
        ConflictError: If the user is already a member.
    """
    group = get_group_or_404(db, group_id)
    _ensure_can_manage(db, group, actor)
    if db.get(User, user_id) is None:
        raise NotFoundError("User not found", code="USER_NOT_FOUND")
    if _membership(db, group_id, user_id) is not None:
        raise ConflictError("User is already a member of this group", code="ALREADY_MEMBER")

    member = GroupMember(group_id=group_id, user_id=user_id, role=role)
    db.add(member)
    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise ConflictError("User is already a member of this group", code="ALREADY_MEMBER") from err
    db.refresh(member)
    logger.info("User %s added to group %s", user_id, group_id)
    return member


def remove_member(db: Session, *, group_id: int, actor: User, user_id: int) -> None:
    """Remove a member; users may always remove themselves."""
    group = get_group_or_404(db, group_id)
    if actor.id != user_id:
        _ensure_can_manage(db, group, actor)
    member = _membership(db, group_id, user_id)
    if member is None:
        raise NotFoundError("Membership not found", code="MEMBER_NOT_FOUND")
    db.delete(member)
    db.commit()
    logger.info("User %s removed from group %s", user_id, group_id)


def list_group_resources(db: Session, *, group_id: int, user: User) -> list[Resource]:
    """Return the resources currently shared with a group, newest first.

    Only members, the owner and admins may look. Grants on private resources
    are ignored here as they are for access checks.
    """
    group = get_group_or_404(db, group_id)
    if group.owner_id != user.id and not user.is_admin and _membership(db, group_id, user.id) is None:
        raise ForbiddenError("You are not a member of this group", code="NOT_MEMBER")

    now = utcnow()
    shared_with_group = exists().where(
        ResourceShare.resource_id == Resource.id,
        ResourceShare.shared_with_group_id == group_id,
        is_active(ResourceShare.expires_at, now),
    )
    stmt = (
        select(Resource)
        .where(Resource.visibility != VISIBILITY_PRIVATE, shared_with_group)
        .order_by(Resource.created_at.desc(), Resource.id.desc())
    )
    return list(db.scalars(stmt))
