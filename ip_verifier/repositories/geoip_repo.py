import ipaddress

from geoip2.database import Reader
from geoip2.errors import GeoIP2Error
from maxminddb import InvalidDatabaseError

from ip_verifier.errors import internal_error, validation_error
from ip_verifier.logger import logger
from ip_verifier.repositories.base import BaseIPVerifierRepo

HEALTH_CHECK_IP = "8.8.8.8"

# Closed readers raise ValueError, a City database queried as Country raises TypeError.
PROVIDER_ERRORS = (GeoIP2Error, InvalidDatabaseError, ValueError, TypeError, OSError)


def parse_ip(value: str) -> ipaddress.IPv4Address | ipaddress.IPv6Address:
    """Parse an IPv4 or IPv6 literal, raising a validation error otherwise."""
    try:
        address = ipaddress.ip_address(value)
    except ValueError:
        raise validation_error(f"invalid IP address: {value}") from None

    # Zone IDs ("fe80::1%eth0") are not part of a plain address literal.
    if isinstance(address, ipaddress.IPv6Address) and address.scope_id is not None:
        raise validation_error(f"invalid IP address: {value}") from None
    return address


class GeoIPRepo(BaseIPVerifierRepo):
    """Country lookups against a MaxMind GeoIP2/GeoLite2 database.

    The reader is opened once by the application and shared read-only across
    requests; this class never opens or closes it.
    """

    def __init__(self, reader: Reader | None) -> None:
        self._reader = reader

    async def resolve_country(self, ip_address: str) -> str:
        """Return the ISO country code for `ip_address`.

        An address the database has no country for yields "" rather than an
        error. Database failures, including addresses missing from the
        database, are reported as internal errors wrapping the original.
        """
        address = parse_ip(ip_address)
        reader = self._require_reader()

        try:
            record = reader.country(address)
        except PROVIDER_ERRORS as exc:
            logger.warning(f"GeoIP lookup failed ip={ip_address} error={exc!r}")
            raise internal_error("failed to resolve country for IP address", exc) from exc

        return record.country.iso_code or ""

    async def health_check(self) -> None:
        """Look up a well-known public address to prove the database is readable."""
        reader = self._require_reader()
        try:
            reader.country(HEALTH_CHECK_IP)
        except PROVIDER_ERRORS as exc:
            raise internal_error("GeoIP database health check failed", exc) from exc

    def _require_reader(self) -> Reader:
        if self._reader is None:
            raise internal_error("GeoIP database is not initialized")
        return self._reader
