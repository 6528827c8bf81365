"""Async SQLAlchemy engine and session factory construction.

Nothing here runs at import time: the application lifespan (or a CLI
command, or a test fixture) builds the engine and owns its disposal.
"""

from __future__ import annotations

from pathlib import Path

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

_SQLITE_PREFIX = "sqlite+aiosqlite:///"


def _use_immediate_transactions(engine: AsyncEngine) -> None:
    """Open SQLite transactions with BEGIN IMMEDIATE.

    Writers then queue on the database lock instead of failing with
    "database is locked" when two transactions try to upgrade at once, and
    SAVEPOINT works inside the session.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_engine_for(database_url: str, echo: bool = False) -> AsyncEngine:
    if database_url.startswith(_SQLITE_PREFIX):
        db_path = database_url.replace(_SQLITE_PREFIX, "")
        if db_path and db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    engine = create_async_engine(database_url, echo=echo)
    if engine.dialect.name == "sqlite":
        _use_immediate_transactions(engine)
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def create_tables(engine: AsyncEngine) -> None:
    from skipjobs.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db(request: Request):
    """FastAPI dependency that yields an async DB session."""
    factory = request.app.state.session_factory
    async with factory() as session:
        yield session
