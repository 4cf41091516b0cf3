from collections.abc import Sequence

from ip_verifier.errors import validation_error
from ip_verifier.models.common import VerifyResult
from ip_verifier.repositories.base import BaseIPVerifierRepo


class IPVerifierService:
    """Decides whether an IP address belongs to one of the allowed countries."""

    def __init__(self, repo: BaseIPVerifierRepo) -> None:
        self._repo = repo

    async def verify_ip(self, ip: str, allowed_countries: Sequence[str]) -> VerifyResult:
        """Resolve the country of `ip` and check it against `allowed_countries`.

        The allow-list is checked before any lookup happens. Country codes are
        compared exactly, so "us" does not match "US". Repository errors are
        propagated unchanged.
        """
        if not allowed_countries:
            raise validation_error("allowed_countries cannot be empty")

        country = await self._repo.resolve_country(ip)

        return VerifyResult(
            ip=ip,
            country=country,
            allowed=is_allowed(country, allowed_countries),
        )

    async def health_check(self) -> None:
        await self._repo.health_check()


def is_allowed(country: str, allowed_countries: Sequence[str]) -> bool:
    return any(allowed == country for allowed in allowed_countries)
