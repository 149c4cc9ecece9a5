"""
Pagination utilities for list operations.

The FactorialHR API is paged with 1-based ``page`` and ``limit`` parameters
(limit capped at 100).
"""

import math
from typing import Awaitable, Callable, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

from ..observability.logging import StructuredLogger

T = TypeVar('T')

logger = StructuredLogger("pagination")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 100
MAX_LIMIT = 100


class PaginationParams(BaseModel):
    page: int = Field(default=DEFAULT_PAGE, ge=1)
    limit: int = Field(default=DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)


class PaginationMeta(BaseModel):
    page: int
    limit: int
    total: Optional[int] = None
    total_pages: Optional[int] = None
    has_next_page: Optional[bool] = None
    has_previous_page: Optional[bool] = None


class PaginatedResponse(BaseModel, Generic[T]):
    data: List[T]
    meta: PaginationMeta


def build_pagination_params(page: Optional[int] = None, limit: Optional[int] = None) -> PaginationParams:
    """Clamp user input to a valid page (>= 1) and limit (1..100)."""
    page = max(1, page if page is not None else DEFAULT_PAGE)
    limit = min(max(1, limit if limit is not None else DEFAULT_LIMIT), MAX_LIMIT)
    return PaginationParams(page=page, limit=limit)


def calculate_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def calculate_total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit)


def create_pagination_meta(page: int, limit: int, item_count: int, total: Optional[int] = None) -> PaginationMeta:
    """
    Create pagination metadata.

    Without a known total, a full page is taken to mean more pages exist.
    """
    if total is not None:
        total_pages = calculate_total_pages(total, limit)
        return PaginationMeta(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next_page=page < total_pages,
            has_previous_page=page > 1,
        )

    return PaginationMeta(
        page=page,
        limit=limit,
        has_next_page=item_count == limit,
        has_previous_page=page > 1,
    )


def paginate_response(data: List[T], page: int, limit: int, total: Optional[int] = None) -> PaginatedResponse[T]:
    return PaginatedResponse(data=data, meta=create_pagination_meta(page, limit, len(data), total))


def format_pagination_info(meta: PaginationMeta) -> str:
    """Format pagination info for a tool response, e.g. "Page 2 of 3 (150 total items)"."""
    parts = [f"Page {meta.page}"]

    if meta.total_pages:
        parts.append(f"of {meta.total_pages}")
    if meta.total is not None:
        parts.append(f"({meta.total} total items)")
    if meta.has_next_page:
        parts.append("- More pages available")

    return " ".join(parts)


def slice_for_pagination(data: List[T], params: PaginationParams) -> PaginatedResponse[T]:
    """Page a fully-fetched list client-side."""
    offset = calculate_offset(params.page, params.limit)
    return paginate_response(data[offset:offset + params.limit], params.page, params.limit, len(data))


async def fetch_all_pages(
    fetcher: Callable[[PaginationParams], Awaitable[PaginatedResponse[T]]],
    max_pages: int = 10
) -> List[T]:
    """
    Fetch pages until there is no next page or ``max_pages`` is reached.
    """
    all_data: List[T] = []
    page = 1
    has_more = True

    while has_more and page <= max_pages:
        response = await fetcher(PaginationParams(page=page, limit=MAX_LIMIT))
        all_data.extend(response.data)
        has_more = bool(response.meta.has_next_page)
        page += 1

    if has_more:
        logger.warning(f"Stopped fetching at page {max_pages}. More data may be available.")

    return all_data
