"""Post persistence over a shared async SQLAlchemy engine."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import structlog
from sqlalchemy import Executable
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from blog_posts_api.errors import Operation, PostNotFoundError, StoreError
from blog_posts_api.metrics import store_errors_total
from blog_posts_api.models import Post, PostPayload
from blog_posts_api.pagination import PageRequest
from blog_posts_api.queries import (
    count_posts,
    delete_post,
    insert_post,
    post_filters,
    select_post,
    select_post_page,
    update_post,
)

log = structlog.get_logger()


@asynccontextmanager
async def _store_errors(operation: Operation, **context: Any) -> AsyncIterator[None]:
    """Log and wrap driver/store failures as StoreError; other errors pass through."""
    try:
        yield
    except (SQLAlchemyError, OSError, OverflowError) as exc:
        store_errors_total.add(1, {"operation": operation})
        await log.aexception("post_store_error", operation=operation, **context)
        raise StoreError(operation) from exc


class PostRepository:
    """CRUD and paginated search for posts.

    Each call checks a connection out of the engine's pool and returns it when
    done; nothing is held between calls.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    async def _fetch_posts(self, stmt: Executable) -> list[Post]:
        async with self._engine.connect() as conn:
            result = await conn.execute(stmt)
            return [Post.model_validate(dict(row)) for row in result.mappings()]

    async def _fetch_count(self, stmt: Executable) -> int:
        async with self._engine.connect() as conn:
            return int((await conn.execute(stmt)).scalar_one())

    async def create(self, payload: PostPayload) -> int:
        """Insert a post and return its generated id."""
        async with _store_errors("create", title=payload.title):
            async with self._engine.begin() as conn:
                result = await conn.execute(insert_post(payload))
                post_id = int(result.inserted_primary_key[0])
        await log.ainfo("post_created", post_id=post_id)
        return post_id

    async def list_page(
        self,
        page: PageRequest,
        category: str | None = None,
        keyword: str | None = None,
    ) -> tuple[list[Post], int]:
        """Return one page of matching posts and the total match count.

        The page and the count are read concurrently on separate connections,
        not in one snapshot, so a concurrent write can make them disagree.
        """
        filters = post_filters(category, keyword)
        async with _store_errors("list", category=category, keyword=keyword):
            rows, total = await asyncio.gather(
                self._fetch_posts(select_post_page(filters, page)),
                self._fetch_count(count_posts(filters)),
            )
        return rows, total

    async def get(self, post_id: int) -> Post:
        async with _store_errors("read", post_id=post_id):
            found = await self._fetch_posts(select_post(post_id))
        if not found:
            raise PostNotFoundError(post_id, "read")
        return found[0]

    async def update(self, post_id: int, payload: PostPayload) -> None:
        async with _store_errors("update", post_id=post_id):
            async with self._engine.begin() as conn:
                result = await conn.execute(update_post(post_id, payload))
                matched = result.rowcount
        if matched == 0:
            raise PostNotFoundError(post_id, "update")
        await log.ainfo("post_updated", post_id=post_id)

    async def delete(self, post_id: int) -> None:
        async with _store_errors("delete", post_id=post_id):
            async with self._engine.begin() as conn:
                result = await conn.execute(delete_post(post_id))
                matched = result.rowcount
        if matched == 0:
            raise PostNotFoundError(post_id, "delete")
        await log.ainfo("post_deleted", post_id=post_id)
