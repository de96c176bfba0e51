"""Shared response envelopes."""

from typing import Optional

from pydantic import BaseModel, Field


class PaginationMeta(BaseModel):
    """Pagination details attached to every collection response."""

    resource_count: int = Field(..., description="Total number of matching records")
    page: int = Field(default=1, description="Current page number")
    limit: int = Field(..., description="Maximum number of records per page")
    next: Optional[str] = Field(None, description="URL of the next page, if any")
    previous: Optional[str] = Field(None, description="URL of the previous page, if any")


class ErrorResponse(BaseModel):
    """Body returned for every failed request."""

    status: int = Field(..., description="HTTP status code")
    message: str = Field(..., description="Human readable summary")
    error: str = Field(..., description="Underlying reason")
    path: str = Field(..., description="Request path")
    timestamp: str = Field(..., description="RFC3339 time the error was produced")
