"""
Offset/limit paging with a pluggable total-count strategy.

The content query and the count query are built by the caller from the same
predicate and joins; the pager windows the first, and either runs the second or,
under ``CountStrategy.OPTIMIZED``, derives the total from the first page when the
whole result fits in it.
"""
from __future__ import annotations

import enum
import logging
from typing import Any, Callable, List, Mapping, Sequence, TypeVar

from sqlalchemy import ColumnElement, Row, Select

from member_search.core.errors import InvalidPageRequest, QueryError
from member_search.repositories.base import BaseRepository
from member_search.schemas.common import Page, PageRequest, SortOrder

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CountStrategy(str, enum.Enum):
    """How a pager obtains the total element count."""

    ALWAYS = "always"
    OPTIMIZED = "optimized"


# PUBLIC_INTERFACE
def validate_page_request(page_request: PageRequest) -> None:
    """Reject a window the store should never see."""
    if page_request.limit <= 0:
        raise InvalidPageRequest(f"limit must be positive, got {page_request.limit}")
    if page_request.offset < 0:
        raise InvalidPageRequest(f"offset must not be negative, got {page_request.offset}")


# PUBLIC_INTERFACE
def resolve_order_by(
    sort: Sequence[SortOrder],
    sortable: Mapping[str, ColumnElement[Any]],
    default: Sequence[ColumnElement[Any]],
) -> List[ColumnElement[Any]]:
    """
    Turn named sort orders into ORDER BY clauses.

    Unknown field names raise QueryError before any statement runs. The ``default``
    clauses are appended as tie-breakers so paging stays deterministic.
    """
    clauses: List[ColumnElement[Any]] = []
    for order in sort:
        column = sortable.get(order.field)
        if column is None:
            allowed = ", ".join(sorted(sortable))
            raise QueryError(f"Cannot sort by {order.field!r}; sortable fields: {allowed}")
        clauses.append(column.desc() if order.direction == "desc" else column.asc())
    clauses.extend(default)
    return clauses


def _can_skip_count(page_request: PageRequest, content_size: int) -> bool:
    # Whole result set fits in the first page, so its size is the total.
    return page_request.offset == 0 and content_size < page_request.limit


class Pager(BaseRepository):
    """Runs a windowed content query and resolves the total element count."""

    async def fetch_page(
        self,
        content_stmt: Select,
        count_stmt: Select,
        page_request: PageRequest,
        *,
        row_factory: Callable[[Row], T],
        count_strategy: CountStrategy = CountStrategy.ALWAYS,
    ) -> Page[T]:
        """
        Fetch one page.

        Parameters:
            content_stmt: ordered SELECT producing the rows; offset/limit are applied here
            count_stmt: SELECT returning a single count over the same predicate and joins
            page_request: the window
            row_factory: converts each result Row to the page's element type
            count_strategy: ALWAYS runs count_stmt; OPTIMIZED skips it when the
                first page is not full
        Raises:
            InvalidPageRequest: non-positive limit or negative offset, before any query
            QueryError / StoreUnavailable: from either query; a failed count fails the page
        """
        validate_page_request(page_request)

        windowed = content_stmt.offset(page_request.offset).limit(page_request.limit)
        result = await self.execute(windowed)
        content = [row_factory(row) for row in result]

        if count_strategy is CountStrategy.OPTIMIZED and _can_skip_count(page_request, len(content)):
            logger.debug(
                "Count query skipped: %d rows on first page (limit %d)",
                len(content),
                page_request.limit,
            )
            total = len(content)
        else:
            total = await self.scalar_one(count_stmt)
            logger.debug("Count query returned %d (strategy=%s)", total, count_strategy.value)

        return Page.of(content, page_request, total)
