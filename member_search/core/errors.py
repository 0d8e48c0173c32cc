"""
Error taxonomy for query composition and paged retrieval.

Repositories raise these; the API layer maps them onto HTTP responses. Nothing in
this package retries or substitutes defaults for a failed query.
"""
from __future__ import annotations

from sqlalchemy import exc as sa_exc


class MemberSearchError(Exception):
    """Base class for errors raised by the member search layer."""

    error_type = "member_search_error"


class InvalidPageRequest(MemberSearchError, ValueError):
    """Raised for a non-positive limit or a negative offset, before any store call."""

    error_type = "invalid_page_request"


class QueryError(MemberSearchError):
    """Raised when a statement does not fit the schema (unknown field, bad construct)."""

    error_type = "query_error"


class StoreUnavailable(MemberSearchError):
    """Raised when the database cannot be reached. Callers decide whether to retry."""

    error_type = "store_unavailable"


class NotFound(MemberSearchError):
    """Raised when a referenced member or team does not exist."""

    error_type = "not_found"


def _is_connectivity_error(err: BaseException) -> bool:
    if isinstance(err, (sa_exc.DisconnectionError, sa_exc.TimeoutError, OSError)):
        return True
    if isinstance(err, sa_exc.DBAPIError):
        if err.connection_invalidated:
            return True
        return isinstance(err.orig, OSError)
    return False


# PUBLIC_INTERFACE
def translate_db_error(err: BaseException) -> MemberSearchError:
    """
    Map a SQLAlchemy/driver exception onto the service error taxonomy.

    Connectivity failures become StoreUnavailable; every other SQLAlchemy error
    (compile errors, argument errors, schema mismatches reported by the database)
    becomes QueryError. Errors already in the taxonomy are returned unchanged.
    """
    if isinstance(err, MemberSearchError):
        return err
    if _is_connectivity_error(err):
        return StoreUnavailable(f"Database unavailable: {err}")
    return QueryError(f"Query failed: {err}")
