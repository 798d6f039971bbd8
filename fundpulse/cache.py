"""In-memory TTL cache for derived responses (NAV history, calculator data)."""

import logging
import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_TTL = 5 * 60  # seconds
SWEEP_INTERVAL = 60  # seconds


class TTLCache:
    """
    Key -> (value, expiry) map.

    Expired entries are removed lazily on access and in bulk by sweep(),
    which the scheduler runs every SWEEP_INTERVAL seconds so keys that are
    set but never read again do not accumulate.
    """

    def __init__(self, default_ttl: float = DEFAULT_TTL,
                 clock: Callable[[], float] = time.monotonic):
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None if absent or expired."""
        with self._lock:
            item = self._entries.get(key)
            if item is None:
                return None
            value, expiry = item
            if self._clock() < expiry:
                return value
            del self._entries[key]
            return None

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        if ttl is None:
            ttl = self.default_ttl
        with self._lock:
            self._entries[key] = (value, self._clock() + ttl)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def sweep(self) -> int:
        """Purge every expired entry. Returns the number removed."""
        now = self._clock()
        with self._lock:
            expired = [k for k, (_, expiry) in self._entries.items() if now >= expiry]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug(f"Cache sweep removed {len(expired)} expired entries")
        return len(expired)

    def __contains__(self, key: str) -> bool:
        # Raw storage check, no expiry evaluation
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
