"""Table metadata and async engine setup for the posts store."""

from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    event,
    func,
)
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from blog_posts_api.config import Settings

log = structlog.get_logger()

metadata = MetaData()

categories = Table(
    "categories",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(255), nullable=False, unique=True),
)

statuses = Table(
    "statuses",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("status", String(64), nullable=False, unique=True),
)

posts = Table(
    "posts",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("title", String(255), nullable=False),
    Column("image", Text, nullable=False),
    Column("category_id", Integer, ForeignKey("categories.id"), nullable=False),
    Column("description", Text, nullable=False),
    Column("content", Text, nullable=False),
    Column("status_id", Integer, ForeignKey("statuses.id"), nullable=False),
    Column("date", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("likes_count", Integer, nullable=False, server_default="0"),
)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the shared async engine (and its connection pool) from settings.

    SQLite gets its foreign-key enforcement switched on per connection so that
    referential integrity behaves the same as on PostgreSQL.
    """
    kwargs: dict[str, Any] = {"echo": settings.db_echo}
    if settings.database_driver.startswith("postgresql"):
        kwargs |= {
            "pool_size": settings.db_pool_size,
            "max_overflow": settings.db_max_overflow,
            "pool_timeout": settings.db_pool_timeout,
            "pool_pre_ping": True,
        }
    engine = create_async_engine(settings.database_url, **kwargs)
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


async def create_tables(engine: AsyncEngine) -> None:
    """Create any missing tables. Existing tables are left untouched."""
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    await log.ainfo("tables_ensured", tables=sorted(metadata.tables))
