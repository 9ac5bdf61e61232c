"""Offset/limit pagination arithmetic for post listings."""

import math

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 6
MAX_LIMIT = 100
# Keeps the row offset within a signed 64-bit integer.
MAX_PAGE = 2**63 // MAX_LIMIT


class PageRequest(BaseModel):
    """A normalized page request: page >= 1 and 1 <= limit <= MAX_LIMIT."""

    model_config = ConfigDict(frozen=True)

    page: int = Field(ge=1)
    limit: int = Field(ge=1, le=MAX_LIMIT)

    @classmethod
    def normalize(cls, page: int = DEFAULT_PAGE, limit: int = DEFAULT_LIMIT) -> "PageRequest":
        """Clamp raw query values into range instead of rejecting them."""
        return cls(page=max(1, page), limit=max(1, min(MAX_LIMIT, limit)))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class PageInfo(BaseModel):
    """Pagination metadata for a page of ``total`` matching rows."""

    model_config = ConfigDict(frozen=True)

    total: int
    total_pages: int
    current_page: int
    limit: int
    next_page: int | None = None
    previous_page: int | None = None


def page_info(request: PageRequest, total: int) -> PageInfo:
    """Compute page counts and navigation hints.

    ``next_page`` is set only when rows remain past this page and
    ``previous_page`` only when this page skipped rows. A page past the end
    still points back to the page before it.
    """
    offset = request.offset
    return PageInfo(
        total=total,
        total_pages=math.ceil(total / request.limit),
        current_page=request.page,
        limit=request.limit,
        next_page=request.page + 1 if offset + request.limit < total else None,
        previous_page=request.page - 1 if offset > 0 else None,
    )
