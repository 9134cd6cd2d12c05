# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import UTC, datetime, timedelta
from itertools import count
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SENDGRID_API_KEY", "")

from threadboard.core.security import create_access_token, hash_password  # noqa: E402
from threadboard.db.session import Base  # noqa: E402
from threadboard.db.session import get_db as app_get_session  # noqa: E402
from threadboard.main import app as fastapi_app  # noqa: E402
from threadboard.models import Discussion, Reply, User  # noqa: E402

TEST_DB_URL = "sqlite://"
BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)

_USER_COUNTER = count(1)


@pytest.fixture()
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
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory that persists users with a known password."""

    def _make_user(
        username: str | None = None,
        *,
        password: str = "secret-password",
        email: str | None = None,
        email_notifications: bool = True,
    ) -> User:
        user = User(
            username=username or f"user{next(_USER_COUNTER)}",
            password_hash=hash_password(password, iterations=1_000),
            email=email,
            email_notifications=email_notifications,
            is_online=False,
            last_seen=BASE_TIME,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def alice(make_user: Callable[..., User]) -> User:
    return make_user("alice", email="alice@example.com")


@pytest.fixture()
def bob(make_user: Callable[..., User]) -> User:
    return make_user("bob", email="bob@example.com")


@pytest.fixture()
def carol(make_user: Callable[..., User]) -> User:
    return make_user("carol")


def auth_headers(user: User) -> dict[str, str]:
    """Return authorization headers for ``user``."""
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def alice_headers(alice: User) -> dict[str, str]:
    return auth_headers(alice)


@pytest.fixture()
def bob_headers(bob: User) -> dict[str, str]:
    return auth_headers(bob)


def add_discussion(
    db: Session,
    owner: User,
    *,
    title: str = "How do I prune tomatoes?",
    content: str = "Looking for advice.",
    minutes: int = 0,
    helpful_count: int = 0,
    **extra: Any,
) -> Discussion:
    """Persist a discussion created ``minutes`` after the base time."""
    discussion = Discussion(
        user_id=owner.id,
        title=title,
        content=content,
        image_paths=extra.pop("image_paths", []),
        captions=extra.pop("captions", []),
        helpful_count=helpful_count,
        created_at=BASE_TIME + timedelta(minutes=minutes),
        **extra,
    )
    db.add(discussion)
    db.commit()
    db.refresh(discussion)
    return discussion


def add_reply(
    db: Session,
    author: User,
    discussion: Discussion,
    *,
    parent: Reply | None = None,
    content: str = "A reply",
    minutes: int = 1,
) -> Reply:
    """Persist a reply created ``minutes`` after the base time."""
    reply = Reply(
        user_id=author.id,
        discussion_id=discussion.id,
        parent_id=parent.id if parent is not None else None,
        content=content,
        image_paths=[],
        captions=[],
        helpful_count=0,
        created_at=BASE_TIME + timedelta(minutes=minutes),
    )
    db.add(reply)
    db.commit()
    db.refresh(reply)
    return reply


@pytest.fixture()
def discussion(db_session: Session, alice: User) -> Discussion:
    """A discussion owned by alice."""
    return add_discussion(db_session, alice)
