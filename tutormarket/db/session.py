from __future__ import annotations

from collections.abc import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from tutormarket.core.config import get_settings


settings = get_settings()


def build_engine(database_url: str) -> Engine:
    """Create an engine.

    SQLite connections get foreign keys switched on, and every transaction
    starts with ``BEGIN IMMEDIATE``: the first read of a session already holds
    the write lock, so the meeting overlap check and the insert that follows
    it cannot interleave with another writer.
    """

    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    new_engine = create_engine(database_url, echo=False, future=True, connect_args=connect_args)

    if new_engine.dialect.name == "sqlite":

        @event.listens_for(new_engine, "connect")
        def _configure_connection(dbapi_connection, _connection_record) -> None:
            # pysqlite would otherwise defer BEGIN until the first write.
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        @event.listens_for(new_engine, "begin")
        def _begin_immediate(connection) -> None:
            connection.exec_driver_sql("BEGIN IMMEDIATE")

    return new_engine


engine = build_engine(settings.database_url)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False, future=True)


def get_session() -> Generator[Session, None, None]:
    """FastAPI dependency that yields a database session."""

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
