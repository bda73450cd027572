"""
Whois/geolocation resolution for client addresses.

Private addresses are answered locally with a fixed record. Public
addresses are looked up in the :class:`~whatsmyip.cache.LookupCache` and,
on a miss, fetched from an ip-api.com compatible endpoint
(``GET <base>/<address>`` returning JSON).
"""

import logging
from typing import Optional, Protocol
from urllib.parse import quote

import httpx
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from .cache import LookupCache
from .classify import is_private_ip

logger = logging.getLogger(__name__)

DEFAULT_WHOIS_URL = "http://ip-api.com/json"
DEFAULT_TIMEOUT = 5.0


class OwnershipInfo(BaseModel):
    """
    Geolocation and network ownership of an address, as reported by
    ip-api.com. Missing or null fields default to empty values, unknown
    fields are ignored. Instances are frozen because they are shared
    through the cache.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    status: str = ""
    message: str = ""
    country: str = ""
    country_code: str = Field(default="", alias="countryCode")
    region_code: str = Field(default="", alias="region")
    region_name: str = Field(default="", alias="regionName")
    city: str = ""
    zip_code: str = Field(default="", alias="zip")
    lat: float = 0.0
    lon: float = 0.0
    timezone: str = ""
    isp: str = ""
    org: str = ""
    asn: str = Field(default="", alias="as")

    @field_validator("*", mode="before")
    @classmethod
    def _null_as_default(cls, value, info: ValidationInfo):
        if value is None:
            return cls.model_fields[info.field_name].default
        return value


PRIVATE_OWNERSHIP = OwnershipInfo(
    status="success",
    message="Private IP address",
    region_name="Local",
)


class WhoisLookupError(Exception):
    """The provider could not be reached or answered with unusable data."""

    def __init__(self, address: str, reason: str):
        super().__init__(f"whois lookup for {address} failed: {reason}")
        self.address = address
        self.reason = reason


class WhoisProvider(Protocol):
    def fetch(self, address: str) -> OwnershipInfo:
        ...


class LookupService(Protocol):
    def lookup(self, address: str) -> OwnershipInfo:
        ...


class HttpWhoisProvider:
    """
    Fetches ownership records over HTTP with a hard per-request timeout.

    Args:
        base_url: Endpoint the address is appended to as a path segment.
        timeout: Seconds allowed for the whole exchange.
        client: Pre-built ``httpx.Client``; when given, its own timeout and
                transport are used and the caller keeps ownership of it.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_WHOIS_URL,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.Client] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(timeout=timeout)

    def url_for(self, address: str) -> str:
        return f"{self.base_url}/{quote(address, safe=':')}"

    def fetch(self, address: str) -> OwnershipInfo:
        logger.info("Fetching whois info for IP: %s", address)
        try:
            response = self._client.get(self.url_for(address))
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise WhoisLookupError(address, str(exc) or type(exc).__name__) from exc

        try:
            return OwnershipInfo.model_validate_json(response.content)
        except ValidationError as exc:
            raise WhoisLookupError(address, f"unreadable response: {exc}") from exc

    def close(self) -> None:
        if self._owns_client:
            self._client.close()


class WhoisResolver:
    """
    Resolves an address to an :class:`OwnershipInfo`.

    Order: private short-circuit, cache, provider. Only successful
    provider answers are cached; a failure propagates as
    :class:`WhoisLookupError` and the next lookup for the same address
    calls the provider again. Concurrent misses for one address are not
    coalesced.
    """

    def __init__(self, provider: WhoisProvider, cache: LookupCache[OwnershipInfo]):
        self.provider = provider
        self.cache = cache

    def lookup(self, address: str) -> OwnershipInfo:
        if is_private_ip(address):
            return PRIVATE_OWNERSHIP

        cached = self.cache.get(address)
        if cached is not None:
            logger.debug("Cache hit for IP: %s", address)
            return cached

        info = self.provider.fetch(address)
        self.cache.set(address, info)
        logger.debug("Cached whois info for IP: %s", address)
        return info


__all__ = [
    "DEFAULT_TIMEOUT",
    "DEFAULT_WHOIS_URL",
    "HttpWhoisProvider",
    "LookupService",
    "OwnershipInfo",
    "PRIVATE_OWNERSHIP",
    "WhoisLookupError",
    "WhoisProvider",
    "WhoisResolver",
]
