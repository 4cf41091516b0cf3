from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Response model for the health check endpoint."""

    status: str
    message: str | None = None


class VerifyResponse(BaseModel):
    """Response model for IP verification.

    `country` is left out of the JSON body when the database has no country for the address.
    """

    ip: str
    country: str | None = None
    allowed: bool


class ErrorResponse(BaseModel):
    """Body returned for every failed verification request."""

    error: str
