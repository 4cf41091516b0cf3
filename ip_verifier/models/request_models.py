from pydantic import BaseModel, Field


class VerifyRequest(BaseModel):
    """Request body for IP verification.

    Both fields are required and may not be null. An explicitly empty
    `allowed_countries` list is accepted here and rejected by the service;
    `ip` is only checked for being a string, the repository validates it as
    an address.
    """

    ip: str = Field(
        description="IPv4 or IPv6 address to verify.",
        examples=["8.8.8.8", "2001:4860:4860::8888"],
    )
    allowed_countries: list[str] = Field(
        description="ISO 3166-1 alpha-2 country codes that are allowed. Matched case-sensitively.",
        examples=[["US", "CA"]],
    )
