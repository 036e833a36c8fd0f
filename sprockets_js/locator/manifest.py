"""Precomputed dependency manifests.

A manifest maps root script paths to their already flattened order, so a
deployment can skip directive parsing entirely:

    version: 1
    roots:
      app.js:
        - {path: utils.js, library: true, origin: sprockets, base_path: data/lib/sprockets-utils}
        - {path: app.js, library: false, origin: app}
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

import yaml
from pydantic import BaseModel
from pydantic import Field

from ..errors import InvalidConfigurationError
from ..errors import UnresolvedDependencyError
from ..models import SearchLocation
from ..models import Sprocket

if TYPE_CHECKING:
    from ..settings import ResolutionSettings

logger = logging.getLogger(__name__)


class ManifestEntry(BaseModel):
    """One script in a precomputed order."""

    path: str = Field(..., min_length=1, description="Logical script path")
    library: bool = Field(default=True, description="Bundled library script")
    origin: str | None = Field(None, description="Name of the origin that supplied the script")
    base_path: str = Field(default="", description="Base path of the supplying search location")

    @classmethod
    def from_sprocket(cls, sprocket: Sprocket) -> ManifestEntry:
        location = sprocket.location
        return cls(
            path=sprocket.path,
            library=sprocket.library,
            origin=location.origin.name if location else None,
            base_path=location.base_path if location else "",
        )


class Manifest(BaseModel):
    """Root path to flattened dependency order."""

    version: int = Field(default=1, description="Manifest format version")
    roots: dict[str, list[ManifestEntry]] = Field(default_factory=dict)


def load_manifest(path: Path) -> Manifest:
    """Load and validate a manifest file.

    Raises:
        InvalidConfigurationError: Missing file or invalid content
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return Manifest.model_validate(data)
    except (OSError, yaml.YAMLError, ValueError) as e:
        raise InvalidConfigurationError(f"Cannot load manifest {path}: {e}") from e


def write_manifest(manifest: Manifest, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(manifest.model_dump(), f, default_flow_style=False, sort_keys=False)


def build_manifest(settings: ResolutionSettings, roots: Iterable[Sprocket | str]) -> Manifest:
    """Resolve each root with the settings' locator and record the orders."""
    manifest = Manifest()
    for root in roots:
        sprockets = settings.locate(root)
        manifest.roots[sprockets[-1].path] = [ManifestEntry.from_sprocket(s) for s in sprockets]
    logger.debug(f"Built manifest with {len(manifest.roots)} roots")
    return manifest


class ManifestDependencyLocator:
    """Answers from a precomputed manifest; nothing is parsed at runtime."""

    def __init__(self, manifest: Manifest):
        self.manifest = manifest

    @classmethod
    def from_file(cls, path: Path) -> ManifestDependencyLocator:
        return cls(load_manifest(path))

    def locate(self, root: Sprocket, settings: ResolutionSettings) -> list[Sprocket]:
        entries = self.manifest.roots.get(root.path)
        if entries is None:
            raise UnresolvedDependencyError(root)
        return [self._to_sprocket(entry, settings) for entry in entries]

    def _to_sprocket(self, entry: ManifestEntry, settings: ResolutionSettings) -> Sprocket:
        location = None
        if entry.origin is not None:
            registered = settings.search_path.origin(entry.origin)
            if registered is not None:
                location = SearchLocation(origin=registered[0], base_path=entry.base_path, library=entry.library)
            else:
                logger.debug(f"Manifest origin '{entry.origin}' is not registered")
        return Sprocket(entry.library, entry.path, location)

    def __repr__(self) -> str:
        return f"ManifestDependencyLocator({len(self.manifest.roots)} roots)"
