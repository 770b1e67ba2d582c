"""
Request-scoped identifiers.

Each HTTP request gets a short id (taken from the ``X-Request-ID`` header or
generated) that is attached to log records, error bodies and Sentry events.
"""

import uuid
from contextvars import ContextVar

REQUEST_ID_HEADER = "X-Request-ID"

_request_id: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    """Return a fresh 12-character hexadecimal request id."""
    return uuid.uuid4().hex[:12]


def current_request_id() -> str:
    """Request id bound to the running context, or "" outside a request."""
    return _request_id.get()


def bind_request_id(request_id: str) -> None:
    _request_id.set(request_id)
