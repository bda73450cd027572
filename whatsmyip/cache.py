import logging
import threading
import time
from typing import Callable, Dict, Generic, Hashable, NamedTuple, Optional, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")

DEFAULT_TTL = 60 * 60
DEFAULT_PURGE_INTERVAL = 10 * 60


class _Entry(NamedTuple):
    value: object
    expires_at: float


class LookupCache(Generic[V]):
    """
    In-memory key/value store whose entries expire after a fixed lifetime.

    Expired entries are never returned: ``get`` checks the deadline on
    every read, and a background sweep started with ``start()`` drops
    stale entries every ``purge_interval`` seconds so memory stays
    bounded even for keys that are never read again.

    Example:
        >>> cache = LookupCache(default_ttl=3600, purge_interval=600)
        >>> cache.start()
        >>> cache.set("203.0.113.9", info)
        >>> cache.get("203.0.113.9") is info
        True
        >>> cache.close()
    """

    def __init__(
        self,
        default_ttl: float = DEFAULT_TTL,
        purge_interval: float = DEFAULT_PURGE_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            default_ttl: Lifetime in seconds of entries stored without an
                         explicit ``ttl``.
            purge_interval: Seconds between background sweeps. Zero or a
                            negative value disables the sweep thread.
            clock: Monotonic time source, replaceable in tests.
        """
        self.default_ttl = default_ttl
        self.purge_interval = purge_interval
        self._clock = clock
        self._entries: Dict[Hashable, _Entry] = {}
        self._lock = threading.Lock()
        self._stopped = threading.Event()
        self._sweeper: Optional[threading.Thread] = None

    def get(self, key: Hashable) -> Optional[V]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                del self._entries[key]
                return None
            return entry.value  # type: ignore[return-value]

    def set(self, key: Hashable, value: V, ttl: Optional[float] = None) -> None:
        lifetime = self.default_ttl if ttl is None else ttl
        with self._lock:
            self._entries[key] = _Entry(value, self._clock() + lifetime)

    def delete(self, key: Hashable) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def purge_expired(self) -> int:
        """Drop every expired entry and return how many were removed."""
        with self._lock:
            now = self._clock()
            stale = [key for key, entry in self._entries.items() if entry.expires_at <= now]
            for key in stale:
                del self._entries[key]
        if stale:
            logger.debug("Purged %d expired cache entries", len(stale))
        return len(stale)

    def start(self) -> None:
        """Start the background sweep thread. Calling it twice is a no-op."""
        if self.purge_interval <= 0 or self._sweeper is not None:
            return
        self._stopped.clear()
        self._sweeper = threading.Thread(
            target=self._sweep, name="lookup-cache-sweeper", daemon=True
        )
        self._sweeper.start()

    def close(self) -> None:
        """Stop the sweep thread and forget every entry."""
        self._stopped.set()
        if self._sweeper is not None:
            self._sweeper.join()
            self._sweeper = None
        with self._lock:
            self._entries.clear()

    def _sweep(self) -> None:
        while not self._stopped.wait(self.purge_interval):
            self.purge_expired()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key) is not None


__all__ = ["DEFAULT_PURGE_INTERVAL", "DEFAULT_TTL", "LookupCache"]
