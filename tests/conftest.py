from typing import Dict, List, Optional

import pytest

from whatsmyip.cache import LookupCache
from whatsmyip.whois import OwnershipInfo, WhoisLookupError

STUB_OWNERSHIP = OwnershipInfo(
    status="success",
    country="TestCountry",
    country_code="TC",
    city="TestCity",
    isp="TestISP",
    org="TestOrg",
)


class StubWhoisProvider:
    """Answers every fetch with a fixed record, or fails for chosen addresses."""

    def __init__(self, failing: Optional[List[str]] = None):
        self.failing = set(failing or [])
        self.calls: List[str] = []

    def fetch(self, address: str) -> OwnershipInfo:
        self.calls.append(address)
        if address in self.failing:
            raise WhoisLookupError(address, "timed out")
        return STUB_OWNERSHIP


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> LookupCache:
    return LookupCache(default_ttl=3600, purge_interval=0, clock=clock)


@pytest.fixture
def provider() -> StubWhoisProvider:
    return StubWhoisProvider()


def header_dict(pairs) -> Dict[str, List[str]]:
    grouped: Dict[str, List[str]] = {}
    for name, value in pairs:
        grouped.setdefault(name, []).append(value)
    return grouped
