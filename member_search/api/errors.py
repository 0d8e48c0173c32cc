"""
Exception handlers rendering every failure as an ErrorResponse envelope.

Domain errors map to fixed statuses; anything unexpected becomes a 500 without
leaking the traceback to the client.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Type

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from member_search.core.errors import (
    InvalidPageRequest,
    MemberSearchError,
    NotFound,
    QueryError,
    StoreUnavailable,
)
from member_search.schemas.common import ErrorInfo, ErrorResponse

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: Dict[Type[MemberSearchError], int] = {
    InvalidPageRequest: 400,
    QueryError: 400,
    NotFound: 404,
    StoreUnavailable: 503,
}


def status_for(exc: MemberSearchError) -> int:
    for cls in type(exc).__mro__:
        if cls in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[cls]
    return 500


def error_response(
    request: Request,
    status_code: int,
    error_type: str,
    message: str,
    details: Optional[Any] = None,
) -> JSONResponse:
    body = ErrorResponse(
        status=status_code,
        error=ErrorInfo(type=error_type, message=message, details=details),
        correlation_id=getattr(request.state, "correlation_id", None),
        path=request.url.path,
        method=request.method,
        timestamp=datetime.now(tz=timezone.utc),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def _validation_details(exc: RequestValidationError) -> List[Dict[str, Any]]:
    # ctx may hold the raised exception object, which is not JSON serializable
    return [{k: v for k, v in err.items() if k != "ctx"} for err in exc.errors()]


async def _domain_error(request: Request, exc: MemberSearchError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc)
    else:
        logger.info("Rejected %s %s (%s): %s", request.method, request.url.path, exc.error_type, exc)
    return error_response(request, status_code, exc.error_type, str(exc))


async def _http_error(request: Request, exc: HTTPException) -> JSONResponse:
    if isinstance(exc.detail, str):
        return error_response(request, exc.status_code, "http_error", exc.detail)
    return error_response(request, exc.status_code, "http_error", "HTTP Error", exc.detail)


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(
        request, 422, "validation_error", "Request validation failed", _validation_details(exc)
    )


async def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(request, 500, "internal_error", "An unexpected error occurred")


# PUBLIC_INTERFACE
def register_exception_handlers(app: FastAPI) -> None:
    """Install the error envelope handlers on ``app``."""
    app.add_exception_handler(MemberSearchError, _domain_error)
    app.add_exception_handler(HTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(Exception, _unexpected_error)
