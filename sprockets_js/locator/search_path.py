"""Ordered search path for script lookup.

Probe order (application paths override bundled library paths):
1. Application locations, most recently added first
2. Library locations, most recently added first

The first location that can supply the bytes wins.
"""

from __future__ import annotations

import logging
import threading

from ..errors import InvalidConfigurationError
from ..errors import ResourceNotFoundError
from ..models import SearchLocation
from .sources import ByteSource

logger = logging.getLogger(__name__)


class SearchPathRegistry:
    """Registry of search locations with front-insert priority.

    The location list is replaced, never mutated in place, so readers always
    see a complete snapshot even while configuration code adds paths.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._locations: tuple[SearchLocation, ...] = ()
        self._origins: dict[str, tuple[ByteSource, bool]] = {}

    @property
    def locations(self) -> tuple[SearchLocation, ...]:
        """All locations in registration priority order (most recent first)."""
        return self._locations

    def add_location(self, origin: ByteSource, base_path: str = "", library: bool = True) -> SearchLocation:
        """Insert a location at the front of the search path.

        The origin is also registered by name so explicit references can reach it.
        """
        if origin is None:
            raise InvalidConfigurationError("Search location origin must not be None")

        location = SearchLocation(origin=origin, base_path=base_path or "", library=library)
        with self._lock:
            self._locations = (location, *self._locations)
            self._bind_origin(origin, library)
        logger.debug(f"Added search location {location}")
        return location

    def add_library_path(self, origin: ByteSource, base_path: str = "") -> SearchLocation:
        return self.add_location(origin, base_path, library=True)

    def add_application_path(self, origin: ByteSource, base_path: str = "") -> SearchLocation:
        return self.add_location(origin, base_path, library=False)

    def register_origin(self, origin: ByteSource, library: bool = True) -> None:
        """Make an origin reachable by explicit references without searching it."""
        with self._lock:
            self._bind_origin(origin, library)

    def _bind_origin(self, origin: ByteSource, library: bool) -> None:
        """Register origin by name; the latest registration wins. Caller holds the lock."""
        previous = self._origins.get(origin.name)
        if previous is not None and previous[0] is not origin:
            logger.warning(f"Origin name '{origin.name}' now refers to {origin!r}, replacing {previous[0]!r}")
        self._origins[origin.name] = (origin, library)

    def origin(self, name: str) -> tuple[ByteSource, bool] | None:
        """Look up a registered origin and its library flag by name."""
        return self._origins.get(name)

    def probe_order(self) -> list[SearchLocation]:
        """Locations in the order resolve() tries them."""
        locations = self._locations
        return [loc for loc in locations if not loc.library] + [loc for loc in locations if loc.library]

    def resolve(self, logical_path: str) -> tuple[bytes, SearchLocation]:
        """Find the first location able to supply logical_path.

        Returns:
            Tuple of (content bytes, location that supplied them)

        Raises:
            ResourceNotFoundError: No location could supply the path
        """
        for location in self.probe_order():
            full_path = location.join(logical_path)
            if full_path is None:
                logger.warning(f"Path traversal attempt blocked: {logical_path}")
                break

            try:
                content = location.origin.read(full_path)
            except ResourceNotFoundError:
                continue

            logger.debug(f"Found {logical_path} in {location}")
            return content, location

        logger.debug(f"{logical_path} not found in {len(self._locations)} search locations")
        raise ResourceNotFoundError(logical_path)

    def copy(self) -> SearchPathRegistry:
        """Independent registry with the same locations and origins."""
        clone = SearchPathRegistry()
        with self._lock:
            clone._locations = self._locations
            clone._origins = dict(self._origins)
        return clone

    def __len__(self) -> int:
        return len(self._locations)

    def __repr__(self) -> str:
        return f"SearchPathRegistry({len(self._locations)} locations)"
