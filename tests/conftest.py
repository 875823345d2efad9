# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-hublib")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["CACHE_ENABLED"] = "false"

from hublib.api.v1.dependencies import get_cache  # noqa: E402
from hublib.core.security import create_access_token  # noqa: E402
from hublib.db.session import Base  # noqa: E402
from hublib.db.session import get_db as app_get_session  # noqa: E402
from hublib.main import app as fastapi_app  # noqa: E402
from hublib.models import Group, GroupMember, Resource, Suggestion, User  # noqa: E402
from hublib.services.moderation import ModerationConfig  # noqa: E402

TEST_DB_URL = "sqlite://"


class RecordingCache:
    """Cache invalidator that remembers what it was asked to drop."""

    def __init__(self) -> None:
        self.keys: list[str] = []
        self.patterns: list[str] = []

    def invalidate(self, key: str) -> None:
        self.keys.append(key)

    def invalidate_pattern(self, pattern: str) -> None:
        self.patterns.append(pattern)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Services commit, so every test starts from empty tables.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def cache() -> RecordingCache:
    return RecordingCache()


@pytest.fixture(autouse=True)
def override_dependencies(app: FastAPI, db_session: Session, cache: RecordingCache) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_cache] = lambda: cache
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_cache, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory persisting users with unique usernames."""
    created = {"n": 0}

    def _make(username: str | None = None, role: str = "user") -> User:
        created["n"] += 1
        user = User(username=username or f"user{created['n']}", role=role)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture()
def owner(make_user: Callable[..., User]) -> User:
    return make_user("owner")


@pytest.fixture()
def other_user(make_user: Callable[..., User]) -> User:
    return make_user("other")


@pytest.fixture()
def third_user(make_user: Callable[..., User]) -> User:
    return make_user("third")


@pytest.fixture()
def admin_user(make_user: Callable[..., User]) -> User:
    return make_user("admin", role="admin")


def auth_headers(user: User) -> dict[str, str]:
    """Return bearer headers for ``user``."""
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def owner_headers(owner: User) -> dict[str, str]:
    return auth_headers(owner)


@pytest.fixture()
def other_headers(other_user: User) -> dict[str, str]:
    return auth_headers(other_user)


@pytest.fixture()
def third_headers(third_user: User) -> dict[str, str]:
    return auth_headers(third_user)


@pytest.fixture()
def admin_headers(admin_user: User) -> dict[str, str]:
    return auth_headers(admin_user)


@pytest.fixture()
def make_resource(db_session: Session) -> Callable[..., Resource]:
    """Return a factory persisting resources directly."""

    def _make(owner: User, *, visibility: str = "public", title: str = "Resource", **fields) -> Resource:
        tags = fields.pop("tags", [])
        resource = Resource(
            owner_id=owner.id,
            title=title,
            description=fields.pop("description", f"About {title}"),
            visibility=visibility,
            **fields,
        )
        resource.tags = tags
        db_session.add(resource)
        db_session.commit()
        db_session.refresh(resource)
        return resource

    return _make


@pytest.fixture()
def make_group(db_session: Session) -> Callable[..., Group]:
    """Return a factory persisting a group with the given members."""

    def _make(owner: User, *members: User, name: str = "Team") -> Group:
        group = Group(name=name, owner_id=owner.id)
        group.members.append(GroupMember(user_id=owner.id, role="admin"))
        for member in members:
            group.members.append(GroupMember(user_id=member.id))
        db_session.add(group)
        db_session.commit()
        db_session.refresh(group)
        return group

    return _make


@pytest.fixture()
def make_suggestion(db_session: Session) -> Callable[..., Suggestion]:
    """Return a factory persisting pending suggestions."""

    def _make(author: User, *, name: str = "Machine Learning", type: str = "category") -> Suggestion:
        suggestion = Suggestion(name=name, type=type, suggested_by=author.id)
        db_session.add(suggestion)
        db_session.commit()
        db_session.refresh(suggestion)
        return suggestion

    return _make


@pytest.fixture()
def moderation_config() -> ModerationConfig:
    """Thresholds matching the stock defaults: approve at +5, reject at 3 downvotes."""
    return ModerationConfig(
        auto_approval_enabled=True,
        consider_downvotes=True,
        approval_thresholds={"category": 5},
        rejection_thresholds={"category": 3},
    )
