"""Data models for dependency resolution."""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from posixpath import normpath
from typing import TYPE_CHECKING

from .errors import InvalidConfigurationError

if TYPE_CHECKING:
    from .locator.sources import ByteSource


@dataclass(frozen=True)
class SearchLocation:
    """A place where script bytes may be found.

    Attributes:
        origin: Byte source supplying the bytes (directory, package, memory)
        base_path: Prefix joined to every logical path ("" means origin root)
        library: True when registered by the engine, False for host application paths
    """

    origin: ByteSource
    base_path: str = ""
    library: bool = True

    def join(self, path: str) -> str | None:
        """Join base_path and path, or return None if path escapes the location."""
        path = path.lstrip("/")
        if not path or ".." in path.split("/"):
            return None
        base = self.base_path.strip("/")
        return normpath(f"{base}/{path}") if base else normpath(path)

    def __str__(self) -> str:
        kind = "library" if self.library else "application"
        return f"{self.origin.name}:{self.base_path or '/'} ({kind})"


@dataclass(frozen=True)
class Sprocket:
    """One locatable script.

    Identity is the (library, path) pair. ``location`` remembers where the
    bytes were found and is ignored by equality and hashing.
    """

    library: bool
    path: str
    location: SearchLocation | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not self.path:
            raise InvalidConfigurationError("Sprocket path must not be empty")

    @property
    def full_path(self) -> str:
        """Path within the origin, including the location's base path."""
        if self.location is None:
            return self.path
        return self.location.join(self.path) or self.path

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True)
class DependencyReference:
    """A raw dependency as written in a require directive.

    Bare names have ``origin`` None and are looked up on the search path;
    explicit references name the origin directly.
    """

    path: str
    origin: str | None = None
    line_number: int | None = None

    @property
    def is_explicit(self) -> bool:
        return self.origin is not None

    def __str__(self) -> str:
        if self.origin is not None:
            return f"<{self.origin}:{self.path}>"
        return f'"{self.path}"'
