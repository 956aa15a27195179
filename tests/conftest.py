# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import datetime
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-the-forum-suite")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from nurture_forum.core.security import create_access_token
from nurture_forum.core.settings import Settings
from nurture_forum.db.session import Base
from nurture_forum.db.session import get_db as app_get_session
from nurture_forum.db.time import utcnow
from nurture_forum.main import app as fastapi_app
from nurture_forum.models import Comment, Post, Profile, User

TEST_DB_URL = "sqlite://"


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite needs to leave transaction control to SQLAlchemy for SAVEPOINT to work.
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn) -> None:
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    # Service commits release a savepoint; the outer transaction is rolled back at the end.
    session = Session(
        bind=connection,
        autoflush=False,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )
    try:
        yield session
    finally:
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


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
        app.dependency_overrides.clear()


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Provide a Settings instance aligned with runtime configuration."""
    return Settings()


def _create_user(
    db_session: Session,
    username: str | None,
    city: str | None,
    forum_uid: str | None,
) -> User:
    user = User(username=username, current_city=city, forum_uid=forum_uid)
    db_session.add(user)
    db_session.flush()
    db_session.refresh(user)
    return user


@pytest.fixture()
def author(db_session: Session) -> User:
    """Account that writes most of the posts in a test."""
    return _create_user(db_session, "amina", "Lahore", "uid-author")


@pytest.fixture()
def viewer(db_session: Session) -> User:
    """Second account, living in a different city."""
    return _create_user(db_session, "bilal", "Karachi", "uid-viewer")


@pytest.fixture()
def neighbour(db_session: Session) -> User:
    """Third account, in the same city as ``author``."""
    return _create_user(db_session, "sana", "Lahore", "uid-neighbour")


@pytest.fixture()
def make_headers() -> Callable[[User], dict[str, str]]:
    def _make(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _make


@pytest.fixture()
def author_headers(author: User, make_headers) -> dict[str, str]:
    return make_headers(author)


@pytest.fixture()
def viewer_headers(viewer: User, make_headers) -> dict[str, str]:
    return make_headers(viewer)


@pytest.fixture()
def neighbour_headers(neighbour: User, make_headers) -> dict[str, str]:
    return make_headers(neighbour)


@pytest.fixture()
def make_post(db_session: Session) -> Callable[..., Post]:
    """Return a factory that stores a post directly, bypassing the API."""

    def _make(user: User, **overrides: Any) -> Post:
        fields: dict[str, Any] = {
            "user_id": user.forum_uid,
            "title": "Bedtime routines",
            "content": "What helped your little one settle at night?",
            "category": "sleep",
            "media_urls": [],
            "is_anonymous": False,
            "post_type": "query",
            "feed_type": "global",
            "city": None,
        }
        fields.update(overrides)
        post = Post(**fields)
        db_session.add(post)
        db_session.flush()
        return post

    return _make


@pytest.fixture()
def post(make_post, author: User) -> Post:
    """A global post written by ``author``."""
    return make_post(author)


@pytest.fixture()
def make_comment(db_session: Session) -> Callable[..., Comment]:
    def _make(
        post: Post,
        user: User,
        content: str = "Same here, following this thread",
        parent: Comment | None = None,
        created_at: datetime | None = None,
    ) -> Comment:
        comment = Comment(
            post_id=post.id,
            user_id=user.forum_uid,
            parent_id=parent.id if parent else None,
            content=content,
            created_at=created_at or utcnow(),
        )
        db_session.add(comment)
        db_session.flush()
        return comment

    return _make


@pytest.fixture()
def profiles(db_session: Session, author: User, viewer: User, neighbour: User) -> list[Profile]:
    """Profile rows for the three standard accounts."""
    rows = [
        Profile(id=user.forum_uid, username=user.username, current_city=user.current_city)
        for user in (author, viewer, neighbour)
    ]
    db_session.add_all(rows)
    db_session.flush()
    return rows
