"""Shared test constants, fixtures, and factory functions."""

from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncEngine

from blog_posts_api.config import Settings
from blog_posts_api.database import categories, create_engine, create_tables, statuses
from blog_posts_api.main import app
from blog_posts_api.models import PostPayload
from blog_posts_api.repository import PostRepository

# -- Constants --

CATEGORIES = {1: "Cat", 2: "General", 3: "Inspiration"}
STATUSES = {1: "draft", 2: "publish"}

CAT_ID = 1
GENERAL_ID = 2
INSPIRATION_ID = 3
DRAFT_ID = 1
PUBLISH_ID = 2

MISSING_POST_ID = 9999

POST_PAYLOAD: dict[str, Any] = {
    "title": "Understanding Cat Behavior",
    "image": "https://images.example.com/cat.jpg",
    "category_id": CAT_ID,
    "description": "Why cats knock things off tables.",
    "content": "Cats are curious creatures who like to test gravity.",
    "status_id": PUBLISH_ID,
}


# -- Factories --


def sqlite_url(path: Path) -> str:
    return f"sqlite+aiosqlite:///{path}"


def make_settings(**overrides: Any) -> Settings:
    """Create a Settings instance with test defaults. Override any field."""
    defaults: dict[str, Any] = {"database_url": "sqlite+aiosqlite:///:memory:"}
    return Settings(**(defaults | overrides))  # type: ignore[call-arg]


def make_payload(**overrides: Any) -> PostPayload:
    """Create a PostPayload with test defaults. Override any field."""
    return PostPayload(**(POST_PAYLOAD | overrides))


async def seed_posts(repository: PostRepository, count: int, **overrides: Any) -> list[int]:
    """Insert ``count`` posts titled "Post 1".."Post N"; return their ids in insert order."""
    ids: list[int] = []
    for n in range(1, count + 1):
        ids.append(await repository.create(make_payload(title=f"Post {n}", **overrides)))
    return ids


# -- Fixtures --


@pytest.fixture
def env_vars(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Set required env vars for Settings."""
    monkeypatch.setenv("DATABASE_URL", sqlite_url(tmp_path / "env.db"))


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    """A fresh SQLite database with the schema and reference data loaded."""
    engine = create_engine(make_settings(database_url=sqlite_url(tmp_path / "posts.db")))
    await create_tables(engine)
    async with engine.begin() as conn:
        await conn.execute(
            insert(categories), [{"id": k, "name": v} for k, v in CATEGORIES.items()]
        )
        await conn.execute(insert(statuses), [{"id": k, "status": v} for k, v in STATUSES.items()])
    yield engine
    await engine.dispose()


@pytest.fixture
def repository(engine: AsyncEngine) -> PostRepository:
    return PostRepository(engine)


@pytest.fixture
async def client(repository: PostRepository) -> AsyncIterator[AsyncClient]:
    """AsyncClient wired to the FastAPI app with a test repository."""
    app.state.repository = repository
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
