"""Traversal cache - memoized dependency orders keyed by root script.

Entries are immutable tuples replaced wholesale on recompute, so readers
never observe a partially written entry. Concurrent misses for the same
root may each compute; the last write wins.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum

from ..errors import InvalidConfigurationError
from ..models import Sprocket

logger = logging.getLogger(__name__)


class CacheDurationKind(Enum):
    DISABLED = "disabled"
    INDEFINITE = "indefinite"
    EXPLICIT = "explicit"


@dataclass(frozen=True)
class CacheDuration:
    """How long a traversal result may be served from cache.

    Use the constructors rather than building instances directly:
        CacheDuration.disabled()     never store, always recompute
        CacheDuration.indefinite()   never expire within the process
        CacheDuration.of(30)         expire strictly after 30 seconds
    """

    kind: CacheDurationKind
    seconds: float = 0.0

    @classmethod
    def disabled(cls) -> CacheDuration:
        return cls(CacheDurationKind.DISABLED)

    @classmethod
    def indefinite(cls) -> CacheDuration:
        return cls(CacheDurationKind.INDEFINITE)

    @classmethod
    def of(cls, value: float | timedelta) -> CacheDuration:
        """Explicit duration. Zero is the same as disabled."""
        seconds = value.total_seconds() if isinstance(value, timedelta) else float(value)
        if seconds < 0:
            raise InvalidConfigurationError(f"Cache duration must not be negative: {value}")
        if seconds == 0:
            return cls.disabled()
        return cls(CacheDurationKind.EXPLICIT, seconds)

    @classmethod
    def parse(cls, value: str | float | timedelta) -> CacheDuration:
        """Parse a configuration value: "disabled", "indefinite" or seconds.

        Examples:
            >>> CacheDuration.parse("indefinite").kind
            <CacheDurationKind.INDEFINITE: 'indefinite'>
            >>> CacheDuration.parse("90").seconds
            90.0
        """
        if isinstance(value, str):
            text = value.strip().lower()
            if text in ("disabled", "none", "off"):
                return cls.disabled()
            if text in ("indefinite", "maximum", "forever"):
                return cls.indefinite()
            try:
                return cls.of(float(text))
            except ValueError:
                raise InvalidConfigurationError(f"Invalid cache duration: {value!r}") from None
        return cls.of(value)

    @property
    def is_disabled(self) -> bool:
        return self.kind is CacheDurationKind.DISABLED

    def is_expired(self, age: float) -> bool:
        """True if an entry of the given age (seconds) may no longer be served."""
        if self.kind is CacheDurationKind.INDEFINITE:
            return False
        if self.kind is CacheDurationKind.DISABLED:
            return True
        return age > self.seconds

    def __str__(self) -> str:
        if self.kind is CacheDurationKind.EXPLICIT:
            return f"{self.seconds:g}s"
        return self.kind.value


@dataclass(frozen=True)
class CacheEntry:
    sprockets: tuple[Sprocket, ...]
    computed_at: float


class TraversalCache:
    """Thread-safe map of root Sprocket to its flattened dependency order."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[Sprocket, CacheEntry] = {}
        self._hits = 0
        self._misses = 0

    def get_or_compute(
        self,
        root: Sprocket,
        duration: CacheDuration,
        compute: Callable[[], list[Sprocket]],
    ) -> list[Sprocket]:
        """Return the cached order for root, computing and storing it on a miss.

        Args:
            root: Root script the order belongs to
            duration: Effective time-to-live, evaluated on this access
            compute: Produces the order on a miss (exceptions propagate, nothing is stored)
        """
        if not duration.is_disabled:
            with self._lock:
                entry = self._entries.get(root)
            if entry is not None and not duration.is_expired(self._clock() - entry.computed_at):
                with self._lock:
                    self._hits += 1
                logger.debug(f"Traversal cache hit for {root.path}")
                return list(entry.sprockets)

        with self._lock:
            self._misses += 1
        logger.debug(f"Traversal cache miss for {root.path} (ttl {duration})")
        result = tuple(compute())

        if not duration.is_disabled:
            with self._lock:
                self._entries[root] = CacheEntry(sprockets=result, computed_at=self._clock())

        return list(result)

    def invalidate(self, root: Sprocket) -> bool:
        """Drop the entry for root. Returns True if one existed."""
        with self._lock:
            return self._entries.pop(root, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        logger.debug("Traversal cache cleared")

    def stats(self) -> dict[str, int]:
        return {"entries": len(self._entries), "hits": self._hits, "misses": self._misses}

    def __len__(self) -> int:
        return len(self._entries)
