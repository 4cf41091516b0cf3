from abc import ABC, abstractmethod


class BaseIPVerifierRepo(ABC):
    """Abstract base for IP-to-country data access.

    Implementations must raise `AppError` (never their backend's own
    exceptions) so that the service and HTTP layers stay backend-agnostic.
    """

    @abstractmethod
    async def resolve_country(self, ip_address: str) -> str:
        """Return the ISO country code for an IP address, possibly empty."""
        raise NotImplementedError

    @abstractmethod
    async def health_check(self) -> None:
        """Raise if the backing database cannot serve lookups."""
        raise NotImplementedError
