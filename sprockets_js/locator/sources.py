"""Byte sources - where script bytes actually come from.

Concrete implementations of the ByteSource protocol:
- FileSource: A directory on the local filesystem
- PackageSource: Data files shipped inside an installed Python package
- MemorySource: An in-memory mapping (embedding hosts, tests)
"""

from __future__ import annotations

import importlib.resources
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol
from typing import runtime_checkable

from ..errors import ResourceNotFoundError

logger = logging.getLogger(__name__)


@runtime_checkable
class ByteSource(Protocol):
    """Protocol for origins that can materialize a path to bytes."""

    name: str

    def read(self, full_path: str) -> bytes:
        """Read the bytes stored at full_path.

        Raises:
            ResourceNotFoundError: Nothing is stored at full_path
        """
        ...


class FileSource:
    """Local filesystem directory source."""

    def __init__(self, root: str | Path, name: str | None = None):
        """Initialize with a directory root.

        Args:
            root: Absolute or relative directory path (file:// prefix allowed)
            name: Origin name used by explicit references (default: directory name)
        """
        if isinstance(root, str):
            if root.startswith("file://"):
                root = root[7:]
            root = Path(root)

        self.root = root.resolve()
        self.name = name or self.root.name

    def read(self, full_path: str) -> bytes:
        candidate = (self.root / full_path).resolve()

        # Symlinks or odd paths must not lead outside the root
        if not candidate.is_relative_to(self.root):
            logger.warning(f"Path outside of {self.root} refused: {full_path}")
            raise ResourceNotFoundError(full_path, self.name)

        try:
            return candidate.read_bytes()
        except OSError as e:
            logger.debug(f"Cannot read {candidate}: {e}")
            raise ResourceNotFoundError(full_path, self.name) from e

    def __repr__(self) -> str:
        return f"FileSource({self.root})"


class PackageSource:
    """Data files inside an installed Python package.

    The Python counterpart of a classpath root: resources are read through
    importlib.resources, so zipped installs work too.
    """

    def __init__(self, package: str, name: str | None = None):
        """Initialize with a package name.

        Args:
            package: Importable package name (e.g. "sprockets_js")
            name: Origin name used by explicit references (default: package name)
        """
        self.package = package
        self.name = name or package

    def read(self, full_path: str) -> bytes:
        try:
            resource = importlib.resources.files(self.package).joinpath(full_path)
            if not resource.is_file():
                raise ResourceNotFoundError(full_path, self.name)
            return resource.read_bytes()
        except (ModuleNotFoundError, TypeError, OSError) as e:
            logger.debug(f"Cannot read {full_path} from package {self.package}: {e}")
            raise ResourceNotFoundError(full_path, self.name) from e

    def __repr__(self) -> str:
        return f"PackageSource({self.package})"


class MemorySource:
    """In-memory source backed by a mapping of path to content."""

    def __init__(self, files: Mapping[str, str | bytes] | None = None, name: str = "memory"):
        self.name = name
        self.files: dict[str, bytes] = {}
        for path, content in (files or {}).items():
            self.write(path, content)

    def write(self, path: str, content: str | bytes) -> None:
        """Store (or replace) content at path."""
        if isinstance(content, str):
            content = content.encode("utf-8")
        self.files[path.lstrip("/")] = content

    def read(self, full_path: str) -> bytes:
        try:
            return self.files[full_path.lstrip("/")]
        except KeyError:
            raise ResourceNotFoundError(full_path, self.name) from None

    def __repr__(self) -> str:
        return f"MemorySource({self.name}, {len(self.files)} files)"
