"""Pydantic models for post requests and responses."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PostPayload(BaseModel):
    """Body of create and full-replace update requests."""

    model_config = ConfigDict(strict=True, extra="ignore")

    title: str = Field(min_length=1, description="Post title")
    image: str = Field(min_length=1, description="Cover image URL")
    category_id: int = Field(gt=0, description="ID of an existing category")
    description: str = Field(min_length=1, description="Short summary shown in listings")
    content: str = Field(min_length=1, description="Full post body")
    status_id: int = Field(gt=0, description="ID of an existing status")


class Post(BaseModel):
    """A post joined with its category name and status label."""

    id: int
    image: str
    category: str = Field(description="Category name")
    title: str
    description: str
    date: datetime = Field(description="Creation timestamp, assigned by the store")
    content: str
    status: str = Field(description="Status label, e.g. draft or published")
    likes_count: int


class PostDetail(BaseModel):
    data: Post


class PostPage(BaseModel):
    """One page of a post listing plus navigation hints.

    ``nextPage``/``previousPage`` are left out of the response when there is no
    such page.
    """

    model_config = ConfigDict(populate_by_name=True)

    total_posts: int = Field(alias="totalPosts")
    total_pages: int = Field(alias="totalPages")
    current_page: int = Field(alias="currentPage")
    limit: int
    posts: list[Post]
    next_page: int | None = Field(default=None, alias="nextPage")
    previous_page: int | None = Field(default=None, alias="previousPage")


class Message(BaseModel):
    message: str
