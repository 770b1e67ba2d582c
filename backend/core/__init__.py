"""Cross-cutting infrastructure: logging, request ids and error reporting."""

from core.logging_config import configure_logging
from core.request_context import (
    REQUEST_ID_HEADER,
    bind_request_id,
    current_request_id,
    new_request_id,
)
from core.sentry_config import init_sentry

__all__ = [
    "REQUEST_ID_HEADER",
    "bind_request_id",
    "configure_logging",
    "current_request_id",
    "init_sentry",
    "new_request_id",
]
