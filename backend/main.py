# ruff: noqa: E402
# E402 disabled: load_dotenv() must run before other imports for Sentry DSN

import os
import time
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager

from dotenv import load_dotenv

load_dotenv()

import sentry_sdk
from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from core.logging_config import configure_logging
from core.request_context import (
    REQUEST_ID_HEADER,
    bind_request_id,
    current_request_id,
    new_request_id,
)
from core.sentry_config import init_sentry
from helpers.rate_limiter import limiter, retry_after_seconds
from models.config import settings
from models.exceptions import (
    AlreadyExistsException,
    AuthenticationException,
    BusinessRuleException,
    DomainException,
    InvalidTokenException,
    NotFoundException,
    PermissionDeniedException,
    StorageException,
)
from repositories.database import Base, engine
from routers import admin_router, auth_router, profile_router, public_router

# Initialize Sentry BEFORE app creation
init_sentry()

# Configure logging with Loguru
configure_logging(os.getenv("ENVIRONMENT", "development"))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler.

    - Create tables when `AUTO_CREATE_DB` is enabled.
    - Seed faculties/departments and the admin account (skipped under test).
    """
    if settings.ENVIRONMENT != "test":
        if settings.AUTO_CREATE_DB:
            logger.info("AUTO_CREATE_DB enabled; creating database tables")
            Base.metadata.create_all(bind=engine)

        from init_db import init_db

        init_db(create_tables=False)

    yield


app = FastAPI(title=f"{settings.PROJECT_NAME} API", lifespan=lifespan)

# Attach rate limiter to app
app.state.limiter = limiter


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Bind a request id to the context, Sentry and the response headers."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or new_request_id()
        bind_request_id(request_id)
        request.state.request_id = request_id
        sentry_sdk.set_tag("request_id", request_id)

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log all incoming requests with performance monitoring."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start_time = time.perf_counter()

        response = await call_next(request)

        duration = time.perf_counter() - start_time
        logger.info(
            f"{request.method} {request.url.path} "
            f"status={response.status_code} duration={duration:.3f}s"
        )

        if duration > settings.SLOW_REQUEST_THRESHOLD:
            logger.warning(
                f"Slow request: {request.method} {request.url.path} "
                f"took {duration:.2f}s (threshold: {settings.SLOW_REQUEST_THRESHOLD}s)"
            )

        response.headers["X-Response-Time"] = f"{duration:.3f}s"
        return response


# Middleware runs in reverse order of registration: request id wraps logging
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(RequestIdMiddleware)

# In development, allow all origins for mobile/network testing
cors_origins = ["*"] if settings.ENVIRONMENT == "development" else settings.CORS_ORIGINS
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=settings.ENVIRONMENT != "development",
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[REQUEST_ID_HEADER, "Retry-After"],
)


def _request_id_for(request: Request, exc: Exception | None = None) -> str:
    if isinstance(exc, DomainException):
        return exc.request_id
    return (
        getattr(request.state, "request_id", None)
        or current_request_id()
        or new_request_id()
    )


def error_response(
    request: Request,
    status_code: int,
    message: str,
    request_id: str,
    headers: dict[str, str] | None = None,
    **extra: object,
) -> JSONResponse:
    """Uniform error body: status, message, path and request id."""
    content: dict[str, object] = {
        "status": "ERROR",
        "message": message,
        "path": request.url.path,
        "request_id": request_id,
    }
    content.update(extra)
    response_headers = {REQUEST_ID_HEADER: request_id}
    if headers:
        response_headers.update(headers)
    return JSONResponse(
        status_code=status_code, content=content, headers=response_headers
    )


def _domain_error(
    request: Request, exc: DomainException, status_code: int
) -> JSONResponse:
    sentry_sdk.set_tag("request_id", exc.request_id)
    sentry_sdk.set_tag("exception_type", exc.__class__.__name__)
    logger.warning(
        f"{exc.__class__.__name__}: {exc.message!r} "
        f"({request.method} {request.url.path})"
    )
    return error_response(request, status_code, exc.message, exc.request_id)


# Global unhandled exception handler (returns generic 500 and logs details)
@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch all unhandled exceptions with full Sentry capture."""
    request_id = _request_id_for(request)

    sentry_sdk.set_tag("request_id", request_id)
    sentry_sdk.capture_exception(exc)

    # repr() keeps braces in the message away from loguru's formatter
    logger.exception(
        f"Unhandled exception: {exc!r} ({request.method} {request.url.path})"
    )

    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred",
        request_id,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Framework-raised HTTP errors (missing bearer token, unknown route)."""
    return error_response(
        request,
        exc.status_code,
        str(exc.detail),
        _request_id_for(request),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Field-level validation failures as a ``{field: message}`` map."""
    errors: dict[str, str] = {}
    for error in exc.errors():
        loc = [str(p) for p in error.get("loc", ()) if p not in ("body", "query", "path")]
        field = ".".join(loc) or "request"
        ctx_error = (error.get("ctx") or {}).get("error")
        message = str(ctx_error) if ctx_error is not None else error.get("msg", "")
        errors.setdefault(field, message)

    logger.info(f"Validation failed on {request.url.path}: {sorted(errors)}")
    return error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        "Validation failed",
        _request_id_for(request),
        errors=errors,
    )


@app.exception_handler(RateLimitExceeded)
async def rate_limit_exceeded_handler(
    request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """429 with a Retry-After hint in both header and body."""
    retry_after = retry_after_seconds(request, exc)
    client_host = request.client.host if request.client else "unknown"
    logger.warning(f"Rate limit exceeded on {request.url.path} by {client_host}")
    return error_response(
        request,
        status.HTTP_429_TOO_MANY_REQUESTS,
        "Too many requests. Please try again later.",
        _request_id_for(request),
        headers={"Retry-After": str(retry_after)},
        retryAfter=retry_after,
    )


# Centralized domain exception handlers
@app.exception_handler(NotFoundException)
async def not_found_exception_handler(
    request: Request, exc: NotFoundException
) -> JSONResponse:
    return _domain_error(request, exc, status.HTTP_404_NOT_FOUND)


@app.exception_handler(AuthenticationException)
async def authentication_exception_handler(
    request: Request, exc: AuthenticationException
) -> JSONResponse:
    response = _domain_error(request, exc, status.HTTP_401_UNAUTHORIZED)
    response.headers["WWW-Authenticate"] = "Bearer"
    return response


@app.exception_handler(PermissionDeniedException)
async def permission_denied_exception_handler(
    request: Request, exc: PermissionDeniedException
) -> JSONResponse:
    return _domain_error(request, exc, status.HTTP_403_FORBIDDEN)


@app.exception_handler(AlreadyExistsException)
async def already_exists_exception_handler(
    request: Request, exc: AlreadyExistsException
) -> JSONResponse:
    return _domain_error(request, exc, status.HTTP_409_CONFLICT)


@app.exception_handler(BusinessRuleException)
async def business_rule_exception_handler(
    request: Request, exc: BusinessRuleException
) -> JSONResponse:
    return _domain_error(request, exc, status.HTTP_400_BAD_REQUEST)


@app.exception_handler(InvalidTokenException)
async def invalid_token_exception_handler(
    request: Request, exc: InvalidTokenException
) -> JSONResponse:
    return _domain_error(request, exc, status.HTTP_400_BAD_REQUEST)


@app.exception_handler(StorageException)
async def storage_exception_handler(
    request: Request, exc: StorageException
) -> JSONResponse:
    sentry_sdk.capture_exception(exc)
    return _domain_error(request, exc, status.HTTP_503_SERVICE_UNAVAILABLE)


@app.exception_handler(DomainException)
async def domain_exception_handler(
    request: Request, exc: DomainException
) -> JSONResponse:
    """Fallback for domain exceptions without a more specific handler."""
    return _domain_error(request, exc, status.HTTP_400_BAD_REQUEST)


app.include_router(auth_router.router, prefix="/api")
app.include_router(admin_router.router, prefix="/api")
app.include_router(profile_router.router, prefix="/api")
app.include_router(public_router.router, prefix="/api")


@app.get("/api/health")
def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "healthy"}
