from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ip_verifier.errors import INTERNAL_ERROR_MESSAGE, AppError, ErrorCategory
from ip_verifier.logger import logger


def format_decode_errors(errors: list[dict[str, Any]]) -> str:
    """Render decoder errors as one line, e.g. "body.allowed_countries: Field required"."""
    parts = []
    for error in errors:
        loc = ".".join(str(part) for part in error.get("loc", ()))
        msg = error.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "invalid request body"


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request body decode failures.

    The decoder's own message is returned to the caller so that a missing
    field or malformed JSON can be told apart from a rejected IP address.
    """
    errors = list(exc.errors())
    logger.info(f"Request decode error path={request.url.path} method={request.method} errors={errors}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": format_decode_errors(errors)},
    )


async def app_error_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    """Map an AppError to its HTTP status; only the user-facing message is sent."""
    if exc.category is ErrorCategory.internal:
        logger.error(
            "Internal error while processing request "
            f"path={request.url.path} method={request.method} error={exc}",
            exc_info=exc.cause,
        )
    else:
        logger.info(
            f"Request rejected category={exc.category.value} "
            f"path={request.url.path} method={request.method} error={exc}"
        )
    return JSONResponse(status_code=exc.http_status, content={"error": exc.message})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected errors to return a structured 500 response."""
    logger.exception(
        "Unhandled exception while processing request: "
        f"{repr(exc)} path={request.url.path} method={request.method}"
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": INTERNAL_ERROR_MESSAGE},
    )
