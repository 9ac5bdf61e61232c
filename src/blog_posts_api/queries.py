"""Statement builders for post reads and writes.

List filtering goes through one predicate builder, :func:`post_filters`, whose
clauses feed both the page query and the count query so the two never drift
apart.
"""

from __future__ import annotations

from sqlalchemy import (
    ColumnElement,
    Delete,
    Insert,
    Select,
    Update,
    delete,
    func,
    insert,
    or_,
    select,
    update,
)

from blog_posts_api.database import categories, posts, statuses
from blog_posts_api.models import PostPayload
from blog_posts_api.pagination import PageRequest

_POST_JOIN = posts.join(categories, posts.c.category_id == categories.c.id).join(
    statuses, posts.c.status_id == statuses.c.id
)

_POST_COLUMNS = (
    posts.c.id,
    posts.c.image,
    categories.c.name.label("category"),
    posts.c.title,
    posts.c.description,
    posts.c.date,
    posts.c.content,
    statuses.c.status,
    posts.c.likes_count,
)


def _contains(column: ColumnElement[str], term: str) -> ColumnElement[bool]:
    # Case-insensitive substring test; % and _ in the term match literally.
    return column.icontains(term, autoescape=True)


def post_filters(
    category: str | None = None, keyword: str | None = None
) -> list[ColumnElement[bool]]:
    """Build the list of independent filter clauses; callers AND them together.

    Empty strings count as "no filter".
    """
    clauses: list[ColumnElement[bool]] = []
    if category:
        clauses.append(_contains(categories.c.name, category))
    if keyword:
        clauses.append(
            or_(
                _contains(posts.c.title, keyword),
                _contains(posts.c.description, keyword),
                _contains(posts.c.content, keyword),
            )
        )
    return clauses


def select_post_page(filters: list[ColumnElement[bool]], page: PageRequest) -> Select:
    """Newest first; id breaks ties between equal dates so pages are stable."""
    return (
        select(*_POST_COLUMNS)
        .select_from(_POST_JOIN)
        .where(*filters)
        .order_by(posts.c.date.desc(), posts.c.id.desc())
        .limit(page.limit)
        .offset(page.offset)
    )


def count_posts(filters: list[ColumnElement[bool]]) -> Select:
    return select(func.count()).select_from(_POST_JOIN).where(*filters)


def select_post(post_id: int) -> Select:
    return select(*_POST_COLUMNS).select_from(_POST_JOIN).where(posts.c.id == post_id)


def insert_post(payload: PostPayload) -> Insert:
    return insert(posts).values(**payload.model_dump())


def update_post(post_id: int, payload: PostPayload) -> Update:
    """Full replace of the mutable fields; id, date and likes_count are untouched."""
    return update(posts).where(posts.c.id == post_id).values(**payload.model_dump())


def delete_post(post_id: int) -> Delete:
    return delete(posts).where(posts.c.id == post_id)
