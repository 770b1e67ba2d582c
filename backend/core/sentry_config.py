"""
Sentry error reporting.

Disabled unless ``SENTRY_DSN`` is set. Events are scrubbed of student
identity data (email, national id, bearer tokens, uploaded form bodies)
before they leave the process.
"""

import os
from typing import Any

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.loguru import LoguruIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from sentry_sdk.types import Event, Hint

FILTERED = "[Filtered]"
SENSITIVE_HEADERS = ("authorization", "cookie")
SENSITIVE_FIELDS = ("password", "national_id", "nationalId", "token", "email")
UNTRACED_PATHS = ("/api/health",)
SECURITY_PATH_PREFIXES = ("/api/admin", "/api/login", "/api/signup")


def _before_send(event: Event, hint: Hint) -> Event | None:
    """Strip personal data from an error event."""
    user = event.get("user")
    if user:
        for key in ("email", "username", "ip_address"):
            user.pop(key, None)

    request = event.get("request")
    if request and isinstance(request, dict):
        request.pop("cookies", None)

        headers = request.get("headers")
        if isinstance(headers, dict):
            for name in list(headers):
                if name.lower() in SENSITIVE_HEADERS:
                    headers[name] = FILTERED

        data = request.get("data")
        if isinstance(data, dict):
            for name in data:
                if name in SENSITIVE_FIELDS:
                    data[name] = FILTERED
        elif data:
            # Multipart bodies carry ID scans; never forward them
            request["data"] = FILTERED

    return event


def _traces_sampler(sampling_context: dict[str, Any]) -> float:
    """Sample auth and admin traffic more heavily than the rest."""
    if sampling_context.get("parent_sampled") is True:
        return 1.0

    path = sampling_context.get("asgi_scope", {}).get("path", "")
    if path in UNTRACED_PATHS:
        return 0.0
    if path.startswith(SECURITY_PATH_PREFIXES):
        return 0.5
    return 0.1


def init_sentry() -> bool:
    """
    Initialise the Sentry SDK if a DSN is configured.

    Must run before the FastAPI app is created so the integration can hook in.

    Returns:
        True when Sentry was initialised.
    """
    dsn = os.getenv("SENTRY_DSN")
    if not dsn:
        return False

    sentry_sdk.init(
        dsn=dsn,
        environment=os.getenv("ENVIRONMENT", "development"),
        release=os.getenv("SENTRY_RELEASE", "unknown"),
        send_default_pii=False,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
            LoguruIntegration(),
        ],
        traces_sampler=_traces_sampler,
        sample_rate=1.0,
        before_send=_before_send,
        attach_stacktrace=True,
        max_breadcrumbs=50,
    )
    return True
