"""Rate limiter configuration module.

This module is separate from main.py to avoid circular imports when routers
need to access the limiter. Limits are keyed on the client address and use
a fixed window per endpoint.
"""

import math
import time

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.requests import Request

# Create rate limiter - imported by routers and main.py
limiter = Limiter(key_func=get_remote_address)


def retry_after_seconds(request: Request, exc: RateLimitExceeded) -> int:
    """Seconds until the exhausted window resets (at least 1)."""
    view_rate_limit = getattr(request.state, "view_rate_limit", None)
    if view_rate_limit is None:
        return int(exc.limit.limit.get_expiry())

    limit_item, identifiers = view_rate_limit
    reset_time, _remaining = limiter.limiter.get_window_stats(limit_item, *identifiers)
    return max(1, math.ceil(reset_time - time.time()))
