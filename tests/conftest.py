from __future__ import annotations

import os
import subprocess
import tempfile
import time
from collections.abc import Generator
from pathlib import Path

import psycopg
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

SQLITE_PATH = Path(tempfile.gettempdir()) / "tutormarket_test.db"

os.environ["APP_ENV"] = "test"
os.environ["LOG_LEVEL"] = "INFO"
os.environ["STRICT_CONSTRAINT_BOOTSTRAP"] = "false"
os.environ["DATABASE_URL"] = f"sqlite:///{SQLITE_PATH}"

INSIDE_DOCKER = os.getenv("INSIDE_DOCKER") == "1"
PG_HOST = os.getenv("TEST_DB_HOST", "db" if INSIDE_DOCKER else "localhost")
PG_CREDENTIALS = os.getenv("TEST_DB_CREDENTIALS", "tutor_user:tutor_pass")
PG_TEST_DATABASE = "tutormarket_test"
DB_AUTOSTART = os.getenv("TEST_DB_AUTOSTART") == "1"
DOCKER_COMPOSE_CMD = os.getenv("DOCKER_COMPOSE_CMD", "docker-compose")

from tutormarket.db.base import Base  # noqa: E402
from tutormarket.db.initializer import create_database_schema  # noqa: E402
from tutormarket.db.session import SessionLocal, build_engine, engine  # noqa: E402
from tutormarket.main import create_app  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def create_test_database() -> None:
    engine.dispose()
    SQLITE_PATH.unlink(missing_ok=True)
    create_database_schema()


@pytest.fixture()
def session_scope() -> Generator[Session, None, None]:
    session = SessionLocal()
    try:
        yield session
        session.rollback()
        _clear_tables(session)
        session.commit()
    finally:
        session.close()


@pytest.fixture()
def client() -> Generator[TestClient, None, None]:
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="session")
def postgres_engine() -> Generator[Engine, None, None]:
    """Engine on a scratch PostgreSQL database; skips when no server is reachable."""

    if DB_AUTOSTART and not INSIDE_DOCKER:
        subprocess.run([DOCKER_COMPOSE_CMD, "up", "-d", "db"], check=True)
        _wait_for_postgres()

    admin_dsn = f"postgresql://{PG_CREDENTIALS}@{PG_HOST}:5432/postgres"
    try:
        connection = psycopg.connect(admin_dsn, connect_timeout=3, autocommit=True)
    except psycopg.OperationalError as exc:
        pytest.skip(f"PostgreSQL is not reachable at {PG_HOST}: {exc}")

    with connection:
        connection.execute(f"DROP DATABASE IF EXISTS {PG_TEST_DATABASE} WITH (FORCE)")
        connection.execute(f"CREATE DATABASE {PG_TEST_DATABASE}")

    pg_engine = build_engine(f"postgresql+psycopg://{PG_CREDENTIALS}@{PG_HOST}:5432/{PG_TEST_DATABASE}")
    create_database_schema(pg_engine, strict=True)
    try:
        yield pg_engine
    finally:
        pg_engine.dispose()
        if DB_AUTOSTART and not INSIDE_DOCKER:
            subprocess.run([DOCKER_COMPOSE_CMD, "stop", "db"], check=True)


@pytest.fixture()
def pg_session(postgres_engine: Engine) -> Generator[Session, None, None]:
    session = Session(postgres_engine, autoflush=False, expire_on_commit=False)
    try:
        yield session
    finally:
        session.rollback()
        session.execute(text("TRUNCATE meeting, course, category, user_roles, users, address RESTART IDENTITY CASCADE"))
        session.commit()
        session.close()


def _clear_tables(session: Session) -> None:
    for table in reversed(Base.metadata.sorted_tables):
        if table.name == "roles":
            continue
        session.execute(table.delete())


def _wait_for_postgres(timeout: float = 15.0) -> None:
    deadline = time.time() + timeout
    while time.time() < deadline:
        try:
            with psycopg.connect(f"postgresql://{PG_CREDENTIALS}@{PG_HOST}:5432/postgres"):
                return
        except psycopg.OperationalError:
            time.sleep(0.5)
    raise RuntimeError("PostgreSQL service did not become available")
