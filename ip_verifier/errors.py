from enum import Enum

from fastapi import status

INTERNAL_ERROR_MESSAGE = "An internal error occurred"


class ErrorCategory(str, Enum):
    """Failure categories understood by the HTTP layer."""

    validation = "validation"
    not_found = "not_found"  # reserved, nothing raises it yet
    internal = "internal"


HTTP_STATUS_BY_CATEGORY: dict[ErrorCategory, int] = {
    ErrorCategory.validation: status.HTTP_400_BAD_REQUEST,
    ErrorCategory.not_found: status.HTTP_404_NOT_FOUND,
    ErrorCategory.internal: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class AppError(Exception):
    """Base application error for the IP verifier service.

    Carries a category, a user-facing message and optionally the lower-level
    exception that caused it. Only the message is ever sent to clients; the
    cause is kept for logging.
    """

    def __init__(self, category: ErrorCategory, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.category = category
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(category={self.category.value!r}, message={self.message!r}, cause={self.cause!r})"

    @property
    def http_status(self) -> int:
        return HTTP_STATUS_BY_CATEGORY.get(self.category, status.HTTP_500_INTERNAL_SERVER_ERROR)


def validation_error(message: str, cause: BaseException | None = None) -> AppError:
    """Malformed or semantically invalid caller input (400)."""
    return AppError(ErrorCategory.validation, message, cause)


def not_found_error(message: str, cause: BaseException | None = None) -> AppError:
    """Requested resource does not exist (404)."""
    return AppError(ErrorCategory.not_found, message, cause)


def internal_error(message: str, cause: BaseException | None = None) -> AppError:
    """Failure inside the service or its GeoIP database (500)."""
    return AppError(ErrorCategory.internal, message, cause)


def get_http_status(exc: BaseException) -> int:
    """HTTP status for any exception; unclassified errors are internal."""
    if isinstance(exc, AppError):
        return exc.http_status
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def get_message(exc: BaseException) -> str:
    """User-facing message for any exception, never the wrapped cause."""
    if isinstance(exc, AppError):
        return exc.message
    return INTERNAL_ERROR_MESSAGE


def is_validation_error(exc: BaseException) -> bool:
    return isinstance(exc, AppError) and exc.category is ErrorCategory.validation


def is_not_found_error(exc: BaseException) -> bool:
    return isinstance(exc, AppError) and exc.category is ErrorCategory.not_found


def is_internal_error(exc: BaseException) -> bool:
    return isinstance(exc, AppError) and exc.category is ErrorCategory.internal
