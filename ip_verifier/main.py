import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from geoip2.database import Reader
from maxminddb import InvalidDatabaseError

from ip_verifier.config import get_settings
from ip_verifier.errors import AppError
from ip_verifier.exception_handlers import (
    app_error_exception_handler,
    request_validation_exception_handler,
    unhandled_exception_handler,
)
from ip_verifier.logger import logger
from ip_verifier.models.request_models import VerifyRequest
from ip_verifier.models.response_models import ErrorResponse, HealthResponse, VerifyResponse
from ip_verifier.repositories.geoip_repo import GeoIPRepo
from ip_verifier.services.ip_verifier_service import IPVerifierService

HEALTHY = "healthy"
UNHEALTHY = "unhealthy"
DATABASE_UNAVAILABLE_MESSAGE = "GeoIP database unavailable"

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the GeoIP database for the lifetime of the process.

    The reader is shared read-only by every request and closed on shutdown.
    """
    try:
        reader = Reader(settings.geoip_db_path)
    except (OSError, InvalidDatabaseError, ValueError) as exc:
        logger.error(f"Failed to open GeoIP database path={settings.geoip_db_path} error={exc!r}")
        raise

    with reader:
        app.state.ip_verifier_service = IPVerifierService(GeoIPRepo(reader))
        logger.info(
            "Started IP Verifier Service "
            f"address={settings.address} environment={settings.environment} "
            f"database={settings.geoip_db_path}"
        )
        yield
        logger.info("Shutting down IP Verifier Service")

    logger.info("GeoIP database closed")


app = FastAPI(
    title="IP Verifier Service",
    version="0.1.0",
    description="Checks whether an IP address geolocates to one of a list of allowed countries.",
    lifespan=lifespan,
)


def get_ip_verifier_service(request: Request) -> IPVerifierService:
    """Dependency to provide the IPVerifierService created at startup.

    Before startup has run there is no database, so a service without a
    reader is returned: lookups fail as internal errors and the health
    check reports unhealthy.
    """
    service = getattr(request.app.state, "ip_verifier_service", None)
    if service is None:
        logger.warning("IP verifier service requested before the GeoIP database was opened")
        return IPVerifierService(GeoIPRepo(None))
    return service


# Register global exception handlers using the shared handlers module.
app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
app.add_exception_handler(AppError, app_error_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)


@app.middleware("http")
async def enforce_request_deadline(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Fail requests that take longer than the configured write timeout."""
    try:
        return await asyncio.wait_for(call_next(request), timeout=settings.write_timeout)
    except asyncio.TimeoutError:
        logger.error(
            "Request deadline exceeded "
            f"path={request.url.path} method={request.method} timeout={settings.write_timeout}s"
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"error": "request timed out"},
        )


@app.get(
    "/api/v1/health",
    tags=["health"],
    response_model=HealthResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    responses={status.HTTP_503_SERVICE_UNAVAILABLE: {"model": HealthResponse}},
    summary="Health check",
)
async def health(
    response: Response,
    service: Annotated[IPVerifierService, Depends(get_ip_verifier_service)],
) -> HealthResponse:
    """Report whether the GeoIP database can serve lookups."""
    try:
        await service.health_check()
    except AppError as exc:
        logger.error(f"Health check failed error={exc}")
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status=UNHEALTHY, message=DATABASE_UNAVAILABLE_MESSAGE)

    return HealthResponse(status=HEALTHY)


@app.post(
    "/api/v1/ip-verifier",
    response_model=VerifyResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
    tags=["ip"],
    summary="Check whether an IP address is located in one of the allowed countries.",
)
async def verify_ip(
    request: Request,
    body: VerifyRequest,
    service: Annotated[IPVerifierService, Depends(get_ip_verifier_service)],
) -> VerifyResponse:
    """Resolve the country of `body.ip` and report whether it is in `body.allowed_countries`.

    Failures are raised as AppError and turned into `{"error": ...}` responses
    by the registered exception handlers.
    """
    logger.info(
        "Verifying IP "
        f"path={request.url.path} method={request.method} ip={body.ip} "
        f"allowed_countries={body.allowed_countries}"
    )
    result = await service.verify_ip(body.ip, body.allowed_countries)
    logger.info(f"IP verified ip={result.ip} country={result.country} allowed={result.allowed}")

    # An empty country is omitted from the response body.
    return VerifyResponse(ip=result.ip, country=result.country or None, allowed=result.allowed)
