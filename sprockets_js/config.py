"""YAML configuration files for resolution settings.

Scope priority (most specific wins):
1. local (.sprockets/settings.local.yaml) - gitignored, machine-specific
2. project (.sprockets/settings.yaml) - committed, team-shared
3. global (~/.sprockets/settings.yaml) - user defaults

Library and application paths are lists, so they are replaced rather than
merged when a more specific scope sets them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from typing import Literal

import yaml
from pydantic import BaseModel
from pydantic import Field
from pydantic import ValidationError
from pydantic import field_validator

from .errors import InvalidConfigurationError
from .locator.cache import CacheDuration
from .locator.directives import DirectiveParser
from .locator.directives import ScanPolicy
from .locator.manifest import ManifestDependencyLocator
from .locator.resolver import DefaultDependencyLocator
from .locator.resolver import NullDependencyLocator
from .locator.sources import ByteSource
from .locator.sources import FileSource
from .locator.sources import PackageSource
from .models import SearchLocation
from .models import Sprocket
from .settings import RuntimeMode
from .settings import SettingsBuilder
from .settings import bundled_library

logger = logging.getLogger(__name__)

Scope = Literal["local", "project", "global"]


@dataclass
class SettingsPaths:
    """Standard paths for settings files."""

    global_settings: Path
    project_settings: Path
    local_settings: Path

    @classmethod
    def default(cls) -> SettingsPaths:
        return cls(
            global_settings=Path.home() / ".sprockets" / "settings.yaml",
            project_settings=Path.cwd() / ".sprockets" / "settings.yaml",
            local_settings=Path.cwd() / ".sprockets" / "settings.local.yaml",
        )


class LocationConfig(BaseModel):
    """A search location: a directory, or a base path inside a package."""

    path: str = Field(default="", description="Directory, or base path when package is set")
    package: str | None = Field(None, description="Installed package holding the scripts")
    name: str | None = Field(None, description="Origin name for <name:path> references")

    def to_origin(self, base_dir: Path) -> tuple[ByteSource, str]:
        """Build the origin and the base path to register it with."""
        if self.package:
            return PackageSource(self.package, name=self.name), self.path
        root = Path(self.path).expanduser()
        if not root.is_absolute():
            root = base_dir / root
        return FileSource(root, name=self.name), ""


class WellKnownConfig(BaseModel):
    """Shared library overrides. An explicit null stops managing the resource."""

    dom_library: str | None = None
    widget_library: str | None = None
    widget_stylesheet: str | None = None


class ResolutionConfig(BaseModel):
    """Validated contents of the merged settings files."""

    mode: RuntimeMode = RuntimeMode.DEVELOPMENT
    cache: str | float | None = Field(None, description="disabled, indefinite or seconds; unset follows mode")
    locator: Literal["default", "null", "manifest"] = "default"
    manifest: str | None = Field(None, description="Manifest file for the manifest locator")
    scan: ScanPolicy = ScanPolicy.HEADER
    library_paths: list[LocationConfig] = Field(default_factory=list)
    application_paths: list[LocationConfig] = Field(default_factory=list)
    well_known: WellKnownConfig = Field(default_factory=WellKnownConfig)

    @field_validator("library_paths", "application_paths", mode="before")
    @classmethod
    def _expand_strings(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [{"path": item} if isinstance(item, str) else item for item in value]
        return value

    def to_builder(self, base_dir: Path | None = None) -> SettingsBuilder:
        """Turn the configuration into a builder on top of the defaults.

        Args:
            base_dir: Directory relative paths are resolved against (default: CWD)
        """
        base_dir = base_dir or Path.cwd()
        builder = SettingsBuilder.defaults()

        for location in self.library_paths:
            builder.add_library_path(*location.to_origin(base_dir))
        for location in self.application_paths:
            builder.add_application_path(*location.to_origin(base_dir))

        if self.cache is not None:
            builder.set_cache_duration(CacheDuration.parse(self.cache))

        if self.locator == "null":
            builder.set_locator(NullDependencyLocator())
        elif self.locator == "manifest":
            if not self.manifest:
                raise InvalidConfigurationError("locator 'manifest' requires a manifest file")
            builder.set_locator(ManifestDependencyLocator.from_file(base_dir / self.manifest))
        else:
            builder.set_locator(DefaultDependencyLocator(DirectiveParser(self.scan)))

        overrides = self.well_known
        for key in overrides.model_fields_set:
            value = getattr(overrides, key)
            setattr(builder, key, self._shared_resource(value, builder) if value else None)

        return builder

    @staticmethod
    def _shared_resource(value: str, builder: SettingsBuilder) -> Sprocket:
        """A "origin:path" value names a registered origin; a plain path is bundled data."""
        if ":" in value:
            name, path = value.split(":", 1)
            registered = builder.search_path.origin(name)
            if registered is None:
                raise InvalidConfigurationError(f"Unknown origin '{name}' in {value!r}")
            origin, library = registered
            return Sprocket(library, path, SearchLocation(origin=origin, library=library))
        return bundled_library(value)


class ConfigLoader:
    """Reads and merges the scoped settings files."""

    def __init__(self, paths: SettingsPaths | None = None) -> None:
        self.paths = paths or SettingsPaths.default()

    def get_merged_settings(self) -> dict[str, Any]:
        """Load and merge settings from all scopes."""
        result: dict[str, Any] = {}
        for scope in ("global", "project", "local"):
            result = self._deep_merge(result, self._read_scope(scope))
        return result

    def load(self) -> ResolutionConfig:
        """Merged settings, validated.

        Raises:
            InvalidConfigurationError: A settings file is malformed
        """
        try:
            return ResolutionConfig.model_validate(self.get_merged_settings())
        except ValidationError as e:
            raise InvalidConfigurationError(f"Invalid settings: {e}") from e

    def _get_scope_path(self, scope: Scope) -> Path:
        return {
            "local": self.paths.local_settings,
            "project": self.paths.project_settings,
            "global": self.paths.global_settings,
        }[scope]

    def _read_scope(self, scope: Scope) -> dict[str, Any]:
        """Read settings from a specific scope."""
        path = self._get_scope_path(scope)
        if not path.exists():
            return {}
        try:
            with open(path, encoding="utf-8") as f:
                content = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise InvalidConfigurationError(f"Cannot read {path}: {e}") from e
        if not isinstance(content, dict):
            raise InvalidConfigurationError(f"{path} must contain a mapping")
        logger.debug(f"Loaded {scope} settings from {path}")
        return content

    def _deep_merge(self, base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dicts, overlay wins."""
        result = base.copy()
        for key, value in overlay.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result
