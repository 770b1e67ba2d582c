"""
Custom domain exceptions for the application.

These exceptions are raised by the service layer and converted to HTTP responses
by the centralized exception handlers in main.py, so services never deal with
status codes.

The authentication module (auth.py) also uses these domain exceptions to remain
HTTP-agnostic, allowing reuse from init_db.py and other non-HTTP entry points.
"""

from typing import Any

from core.request_context import current_request_id, new_request_id


class DomainException(Exception):
    """
    Base class for all domain exceptions.

    Attributes:
        message: Human-readable error message.
        request_id: Id of the request that raised it (generated outside a request).
    """

    def __init__(self, message: str, request_id: str | None = None):
        self.message = message
        self.request_id = request_id or current_request_id() or new_request_id()
        super().__init__(self.message)


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    pass


class PermissionDeniedException(DomainException):
    """Raised when the caller lacks the required permissions."""

    pass


class AuthenticationException(DomainException):
    """Raised when authentication fails."""

    pass


class AlreadyExistsException(DomainException):
    """Raised when trying to create a resource that already exists."""

    pass


class BusinessRuleException(DomainException):
    """Raised when a business rule is violated."""

    pass


class InvalidTokenException(DomainException):
    """Raised when a one-time token is absent, wrong or stale."""

    pass


class StorageException(DomainException):
    """Raised when the object store cannot complete an operation."""

    pass


# Specific exceptions


class ResourceNotFoundException(NotFoundException):
    """A lookup by a named field found nothing."""

    def __init__(self, resource: str, field: str, value: Any) -> None:
        super().__init__(f"{resource} not found with {field}: '{value}'")
        self.resource = resource
        self.field = field
        self.value = value


class DuplicateResourceException(AlreadyExistsException):
    """A unique field value is already taken."""

    def __init__(self, resource: str, field: str, value: Any) -> None:
        super().__init__(f"{resource} already exists with {field}: '{value}'")
        self.resource = resource
        self.field = field
        self.value = value


class InvalidCredentialsException(AuthenticationException):
    """Unknown identifier or wrong password; the message never says which."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class InvalidStateException(BusinessRuleException):
    """The entity is not in a state that allows the requested operation."""

    pass


class ContentModerationException(InvalidStateException):
    """Submitted text contains banned words."""

    def __init__(self, violations: dict[str, list[str]]) -> None:
        fields = ", ".join(violations)
        words: list[str] = []
        for matched in violations.values():
            for word in matched:
                if word not in words:
                    words.append(word)
        super().__init__(
            "Content moderation violation: Inappropriate language detected in "
            f"field(s): {fields}. Banned words: {', '.join(words)}"
        )
        self.violations = violations


class VerificationTokenInvalidException(InvalidTokenException):
    """Email verification token does not match the stored one."""

    def __init__(self, message: str = "Invalid verification token"):
        super().__init__(message)


class VerificationTokenExpiredException(InvalidTokenException):
    """Email verification token is older than its lifetime."""

    def __init__(self, message: str = "Verification token has expired"):
        super().__init__(message)


class InvalidFileException(BusinessRuleException):
    """Uploaded file is empty, too large or of an unsupported type."""

    pass
