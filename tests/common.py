from types import SimpleNamespace
from typing import Any

from geoip2.errors import AddressNotFoundError

from ip_verifier.models.common import VerifyResult
from ip_verifier.repositories.base import BaseIPVerifierRepo


class FakeReader:
    """Minimal stand-in for geoip2.database.Reader.

    Addresses are looked up by their string form; unknown addresses raise
    AddressNotFoundError like the real reader does.
    """

    def __init__(self, countries: dict[str, str | None] | None = None, exc: Exception | None = None) -> None:
        self._countries = countries or {}
        self._exc = exc
        self.calls: list[Any] = []
        self.closed = False

    def country(self, ip_address: Any) -> SimpleNamespace:
        self.calls.append(ip_address)
        if self._exc is not None:
            raise self._exc
        key = str(ip_address)
        if key not in self._countries:
            raise AddressNotFoundError(f"The address {key} is not in the database.")
        return SimpleNamespace(country=SimpleNamespace(iso_code=self._countries[key]))

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class FakeRepo(BaseIPVerifierRepo):
    """Repository double returning a fixed country or raising a configured exception."""

    def __init__(self, country: str = "US", exc: Exception | None = None) -> None:
        self._country = country
        self._exc = exc
        self.calls: list[str] = []

    async def resolve_country(self, ip_address: str) -> str:
        self.calls.append(ip_address)
        if self._exc is not None:
            raise self._exc
        return self._country

    async def health_check(self) -> None:
        if self._exc is not None:
            raise self._exc


class FakeService:
    """Service double for the HTTP layer tests."""

    def __init__(self, result: VerifyResult | None = None, exc: Exception | None = None) -> None:
        self._result = result
        self._exc = exc
        self.calls: list[tuple[str, list[str]]] = []

    async def verify_ip(self, ip: str, allowed_countries: list[str]) -> VerifyResult | None:
        self.calls.append((ip, list(allowed_countries)))
        if self._exc is not None:
            raise self._exc
        return self._result

    async def health_check(self) -> None:
        if self._exc is not None:
            raise self._exc
