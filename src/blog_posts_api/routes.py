"""HTTP endpoints for the posts resource."""

from typing import Annotated

from fastapi import APIRouter, Path, Query, Request

from blog_posts_api.metrics import post_list_results, post_requests_total
from blog_posts_api.models import Message, PostDetail, PostPage, PostPayload
from blog_posts_api.pagination import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    MAX_PAGE,
    PageRequest,
    page_info,
)
from blog_posts_api.repository import PostRepository

router = APIRouter(prefix="/posts", tags=["posts"])

# Largest id a BIGINT-backed store can hold.
MAX_POST_ID = 2**63 - 1
PostId = Annotated[int, Path(le=MAX_POST_ID)]


def _repository(request: Request) -> PostRepository:
    repository: PostRepository = request.app.state.repository
    return repository


@router.post("", status_code=201, response_model=Message)
async def create_post(request: Request, payload: PostPayload) -> Message:
    await _repository(request).create(payload)
    post_requests_total.add(1, {"operation": "create", "outcome": "ok"})
    return Message(message="Post created successfully")


@router.get("", response_model=PostPage, response_model_exclude_none=True)
async def list_posts(
    request: Request,
    category: str = "",
    keyword: str = "",
    page: int = Query(default=DEFAULT_PAGE, le=MAX_PAGE),
    limit: int = Query(default=DEFAULT_LIMIT),
) -> PostPage:
    page_request = PageRequest.normalize(page, limit)
    posts, total = await _repository(request).list_page(
        page_request, category=category or None, keyword=keyword or None
    )
    info = page_info(page_request, total)
    post_requests_total.add(1, {"operation": "list", "outcome": "ok"})
    post_list_results.record(len(posts))
    return PostPage(
        total_posts=info.total,
        total_pages=info.total_pages,
        current_page=info.current_page,
        limit=info.limit,
        posts=posts,
        next_page=info.next_page,
        previous_page=info.previous_page,
    )


@router.get("/{post_id}", response_model=PostDetail)
async def read_post(request: Request, post_id: PostId) -> PostDetail:
    post = await _repository(request).get(post_id)
    post_requests_total.add(1, {"operation": "read", "outcome": "ok"})
    return PostDetail(data=post)


@router.put("/{post_id}", response_model=Message)
async def replace_post(request: Request, post_id: PostId, payload: PostPayload) -> Message:
    await _repository(request).update(post_id, payload)
    post_requests_total.add(1, {"operation": "update", "outcome": "ok"})
    return Message(message="Updated post successfully")


@router.delete("/{post_id}", response_model=Message)
async def remove_post(request: Request, post_id: PostId) -> Message:
    await _repository(request).delete(post_id)
    post_requests_total.add(1, {"operation": "delete", "outcome": "ok"})
    return Message(message="Deleted post successfully")
