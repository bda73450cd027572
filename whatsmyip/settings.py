from typing import FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .cache import DEFAULT_PURGE_INTERVAL, DEFAULT_TTL
from .headers import parse_header_list
from .whois import DEFAULT_TIMEOUT, DEFAULT_WHOIS_URL


class Settings(BaseModel):
    """
    Runtime configuration of the service.

    Header lists may be given as a comma-separated string or as an
    iterable of names; either way they end up as a lower-cased frozenset.
    """

    model_config = ConfigDict(frozen=True)

    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=1, le=65535)
    include_headers: FrozenSet[str] = frozenset()
    exclude_headers: FrozenSet[str] = frozenset()
    whois_base_url: str = DEFAULT_WHOIS_URL
    whois_timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    cache_ttl: float = Field(default=DEFAULT_TTL, gt=0)
    cache_purge_interval: float = DEFAULT_PURGE_INTERVAL
    proxy_count: Optional[int] = Field(default=None, ge=0)
    proxy_list: List[str] = Field(default_factory=list)
    log_level: str = "INFO"

    @field_validator("include_headers", "exclude_headers", mode="before")
    @classmethod
    def _normalize_header_names(cls, value):
        if value is None:
            return frozenset()
        if isinstance(value, str):
            return parse_header_list(value)
        return parse_header_list(",".join(value))

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()


__all__ = ["Settings"]
