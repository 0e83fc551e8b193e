"""
palmport.infra.database.engine – async SQLAlchemy 2.0 engine, session factory, schema setup.

The engine and session factory are built once by the application lifespan and
kept on ``app.state``; nothing here caches them at module level.

On first run, ensure_database_exists() can create the target PostgreSQL
database if it does not exist (connects to "postgres", then CREATE DATABASE).
"""
from __future__ import annotations

import logging
import re
from typing import Optional
from urllib.parse import urlparse, urlunparse

import asyncpg
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from palmport.config import DatabaseConfig, load_database_config

# Ensure all ORM models are registered with Base.metadata before create_all()
import palmport.infra.database.models  # noqa: F401
from palmport.infra.database.models.base import Base

logger = logging.getLogger(__name__)

# Database names we are willing to interpolate into CREATE DATABASE
_DBNAME_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


def _make_async_url(url: str) -> str:
    """Convert postgresql:// or postgres:// to postgresql+asyncpg://."""
    for prefix in ("postgresql://", "postgres://"):
        if url.startswith(prefix) and "+asyncpg" not in url:
            return url.replace(prefix, "postgresql+asyncpg://", 1)
    return url


def _parse_db_name_and_postgres_url(url: str) -> tuple[str, str]:
    """Return the target database name and a DSN pointing at the 'postgres' maintenance DB."""
    parsed = urlparse(url.replace("+asyncpg", ""))
    dbname = (parsed.path or "/postgres").strip("/").split("?")[0] or "postgres"
    postgres_url = urlunparse((parsed.scheme, parsed.netloc, "/postgres", parsed.params, parsed.query, parsed.fragment))
    return dbname, postgres_url


async def ensure_database_exists(config: Optional[DatabaseConfig] = None) -> None:
    """Create the target PostgreSQL database when missing. No-op for SQLite."""
    config = config or load_database_config()
    if config.is_sqlite:
        return
    dbname, postgres_url = _parse_db_name_and_postgres_url(config.url)
    if dbname == "postgres":
        return
    if not _DBNAME_PATTERN.match(dbname):
        logger.warning("ensure_database_exists: skipping unsafe database name %r", dbname)
        return
    try:
        conn = await asyncpg.connect(postgres_url)
    except (OSError, asyncpg.PostgresError) as exc:
        logger.debug("ensure_database_exists: cannot reach postgres (%s), skipping", exc)
        return
    try:
        row = await conn.fetchval("SELECT 1 FROM pg_database WHERE datname = $1", dbname)
        if row is None:
            await conn.execute(f'CREATE DATABASE "{dbname}"')
            logger.info("Database created: %s", dbname)
    finally:
        await conn.close()


def _enable_sqlite_savepoints(engine: AsyncEngine) -> None:
    """Let SQLAlchemy, not pysqlite, emit BEGIN so SAVEPOINT/ROLLBACK TO work."""

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def build_engine(config: Optional[DatabaseConfig] = None) -> AsyncEngine:
    """
    Create the async SQLAlchemy engine.

    PostgreSQL gets a tuned pool; SQLite (local dev and tests) uses NullPool.
    """
    config = config or load_database_config()
    url = _make_async_url(config.url)

    if config.is_sqlite:
        engine = create_async_engine(url, echo=config.echo, poolclass=NullPool)
        _enable_sqlite_savepoints(engine)
        logger.info("AsyncEngine created for SQLite (NullPool)")
        return engine

    engine = create_async_engine(
        url,
        echo=config.echo,
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_timeout=config.pool_timeout,
        pool_recycle=config.pool_recycle,
        pool_pre_ping=True,
        connect_args={
            "server_settings": {
                "application_name": config.application_name,
                "jit": "off",
            }
        },
    )
    logger.info(
        "AsyncEngine created: pool_size=%d max_overflow=%d",
        config.pool_size, config.max_overflow,
    )
    return engine


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the async session factory bound to *engine*."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def init_db(engine: AsyncEngine, *, drop_all: bool = False) -> None:
    """Create all ORM tables. For dev/test; production schemas are migrated separately."""
    async with engine.begin() as conn:
        if drop_all:
            logger.warning("Dropping all ORM tables (drop_all=True)")
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database initialised successfully")
