from __future__ import annotations

import os
from collections.abc import Generator, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

os.environ.setdefault("PYTEST_RUNNING", "true")
os.environ.setdefault("SECRET_KEY", "askboard-test-secret")
os.environ.setdefault("DAILY_QUESTION_LIMIT", "2")

from askboard.api.v1.dependencies import get_notifier_dep
from askboard.db.session import Base, build_engine
from askboard.db.session import get_db as app_get_session
from askboard.main import app as fastapi_app
from askboard.models import Profile, Question
from askboard.services.notifier import ChangeNotifier
from tests.factories import auth_headers, make_profile, make_question

TEST_DB_URL = "sqlite://"


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite needs explicit BEGIN for SAVEPOINT-based test isolation.
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
    """Session whose commits and rollbacks only touch SAVEPOINTs.

    The outer transaction is rolled back after each test, so fixtures may
    commit freely.
    """
    connection = engine.connect()
    transaction = connection.begin()
    session = Session(
        bind=connection,
        join_transaction_mode="create_savepoint",
        expire_on_commit=False,
        autoflush=False,
    )
    try:
        yield session
    finally:
        session.close()
        if transaction.is_active:
            transaction.rollback()
        connection.close()


@pytest.fixture()
def file_engine(tmp_path) -> Generator[Engine, None, None]:
    """A file-backed SQLite engine with foreign keys on, for multi-connection tests."""
    engine = build_engine(f"sqlite:///{tmp_path}/askboard.db")
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def notifier() -> ChangeNotifier:
    """A private notifier so tests never share subscribers."""
    return ChangeNotifier(queue_size=16)


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI, db_session: Session, notifier: ChangeNotifier
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_notifier_dep] = lambda: notifier
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_notifier_dep, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def member(db_session: Session) -> Profile:
    """A plain user."""
    return make_profile(db_session, role="user", username="member")


@pytest.fixture()
def other_member(db_session: Session) -> Profile:
    """A second plain user."""
    return make_profile(db_session, role="user", username="other")


@pytest.fixture()
def admin(db_session: Session) -> Profile:
    """A privileged user."""
    return make_profile(db_session, role="admin", username="admin")


@pytest.fixture()
def question(db_session: Session, member: Profile) -> Question:
    """A question with no votes."""
    return make_question(db_session, member)


@pytest.fixture()
def member_headers(member: Profile) -> dict[str, str]:
    return auth_headers(member)


@pytest.fixture()
def other_headers(other_member: Profile) -> dict[str, str]:
    return auth_headers(other_member)


@pytest.fixture()
def admin_headers(admin: Profile) -> dict[str, str]:
    return auth_headers(admin)
