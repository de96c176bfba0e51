"""Page/limit query handling and pagination metadata."""

from dataclasses import dataclass
from typing import Optional

from fastapi import Query, Request

from licensedb.core.config import settings
from licensedb.schemas.common import PaginationMeta


@dataclass(frozen=True)
class PageRequest:
    """Requested page, 1-indexed."""

    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def get_page_request(
    page: int = Query(1, ge=1, description="Page number"),
    limit: Optional[int] = Query(None, ge=1, description="Number of records per page"),
) -> PageRequest:
    """FastAPI dependency reading ``page`` and ``limit`` query parameters."""
    if limit is None:
        limit = settings.default_page_limit
    return PageRequest(page=page, limit=min(limit, settings.max_page_limit))


def build_pagination_meta(request: Request, page: PageRequest, total: int) -> PaginationMeta:
    """Build pagination metadata with links to the neighbouring pages.

    Args:
        request: Incoming request, used as the base for page links
        page: Page that was served
        total: Total number of matching records

    Returns:
        PaginationMeta for the response envelope
    """
    next_url = None
    if page.offset + page.limit < total:
        next_url = str(request.url.include_query_params(page=page.page + 1, limit=page.limit))

    previous_url = None
    if page.page > 1:
        previous_url = str(request.url.include_query_params(page=page.page - 1, limit=page.limit))

    return PaginationMeta(
        resource_count=total,
        page=page.page,
        limit=page.limit,
        next=next_url,
        previous=previous_url,
    )
