"""
Logging setup shared by the API and the command line entry points.

Every record carries a ``correlation_id`` attribute. Inside an HTTP request it is
the id bound by the request middleware; elsewhere it is ``-``.
"""
from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional, Union

correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | cid=%(correlation_id)s | %(message)s"

_HANDLER_NAME = "member_search"


def get_correlation_id() -> Optional[str]:
    return correlation_id_var.get()


@contextmanager
def bind_correlation_id(value: str) -> Iterator[str]:
    """Bind ``value`` as the correlation id for the enclosed block."""
    token = correlation_id_var.set(value)
    try:
        yield value
    finally:
        correlation_id_var.reset(token)


class LoggingContextFilter(logging.Filter):
    """Copies the bound correlation id onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        record.correlation_id = get_correlation_id() or "-"
        return True


# PUBLIC_INTERFACE
def configure_logging(level: Union[int, str] = logging.INFO) -> logging.Handler:
    """
    Install a single stdout handler on the root logger.

    Handlers installed earlier (basicConfig, a previous call) are replaced, so
    calling this more than once does not duplicate output.
    """
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT))
    handler.addFilter(LoggingContextFilter())

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)
    return handler
