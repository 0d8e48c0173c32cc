from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Generic, List, Literal, Optional, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from member_search.core.errors import InvalidPageRequest

T = TypeVar("T")

SortDirection = Literal["asc", "desc"]


class SortOrder(BaseModel):
    """One ORDER BY term, referring to a sortable field by name."""
    model_config = ConfigDict(frozen=True)

    field: str = Field(..., description="Sortable field name")
    direction: SortDirection = Field("asc", description="asc or desc")


# PUBLIC_INTERFACE
def parse_sort(values: Sequence[str]) -> List[SortOrder]:
    """
    Parse ``field[,direction]`` strings (e.g. ``age,desc``) into SortOrder terms.

    Raises:
        InvalidPageRequest: for an empty field or an unknown direction.
    """
    orders: List[SortOrder] = []
    for raw in values:
        prop, _, direction = raw.partition(",")
        prop = prop.strip()
        direction = (direction.strip() or "asc").lower()
        if not prop:
            raise InvalidPageRequest(f"Sort term {raw!r} has no field")
        if direction not in ("asc", "desc"):
            raise InvalidPageRequest(f"Sort direction must be asc or desc, got {direction!r}")
        orders.append(SortOrder(field=prop, direction=direction))
    return orders


class PageRequest(BaseModel):
    """
    Offset/limit window plus optional sort.

    Bounds are checked by the pager (InvalidPageRequest) rather than by pydantic so
    that a bad window surfaces as a domain error, not a validation error.
    """
    model_config = ConfigDict(frozen=True)

    offset: int = Field(0, description="Number of records to skip")
    limit: int = Field(20, description="Max number of records to return")
    sort: List[SortOrder] = Field(default_factory=list, description="ORDER BY terms")

    @classmethod
    def of_page(cls, page: int, size: int, sort: Sequence[SortOrder] = ()) -> "PageRequest":
        """Build a request from a zero-based page number and page size."""
        return cls(offset=page * size, limit=size, sort=list(sort))


class PageMetadata(BaseModel):
    """Values derived from the total element count and the requested window."""
    offset: int
    limit: int
    page_number: int = Field(..., description="Zero-based page index")
    total_pages: int
    has_next: bool
    has_previous: bool
    is_first: bool
    is_last: bool

    @classmethod
    def build(cls, page_request: PageRequest, total_elements: int) -> "PageMetadata":
        offset, limit = page_request.offset, page_request.limit
        has_next = offset + limit < total_elements
        return cls(
            offset=offset,
            limit=limit,
            page_number=offset // limit,
            total_pages=math.ceil(total_elements / limit),
            has_next=has_next,
            has_previous=offset > 0,
            is_first=offset == 0,
            is_last=not has_next,
        )


class Page(BaseModel, Generic[T]):
    """A window of results with the total element count and page metadata."""
    content: List[T] = Field(default_factory=list)
    total_elements: int = Field(..., ge=0)
    metadata: PageMetadata

    @classmethod
    def of(cls, content: Sequence[T], page_request: PageRequest, total_elements: int) -> "Page[T]":
        return cls(
            content=list(content),
            total_elements=total_elements,
            metadata=PageMetadata.build(page_request, total_elements),
        )


class MessageResponse(BaseModel):
    """Standard message response."""
    message: str = Field(..., description="Human readable message")
    details: Optional[dict] = Field(default=None, description="Optional extra data")


class AffectedRows(BaseModel):
    """Result of a bulk UPDATE/DELETE."""
    affected: int = Field(..., ge=0, description="Number of rows changed")


class ErrorInfo(BaseModel):
    """Structured error description."""
    type: str = Field(..., description="Machine-readable error type code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[Any] = Field(default=None, description="Optional error details (e.g., validation issues)")


# PUBLIC_INTERFACE
class ErrorResponse(BaseModel):
    """Standardized API error envelope returned by exception handlers."""
    status: int = Field(..., description="HTTP status code")
    error: ErrorInfo = Field(..., description="Error details")
    correlation_id: Optional[str] = Field(default=None, description="Request correlation ID")
    path: Optional[str] = Field(default=None, description="Request path")
    method: Optional[str] = Field(default=None, description="HTTP method")
    timestamp: datetime = Field(..., description="Error timestamp (UTC)")
