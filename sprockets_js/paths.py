"""Factories wiring configuration files and CLI options into settings."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from .config import ConfigLoader
from .config import SettingsPaths
from .locator.sources import FileSource
from .settings import Application
from .settings import ResolutionSettings
from .settings import RuntimeMode

logger = logging.getLogger(__name__)


def create_config_loader(project_dir: Path | None = None) -> ConfigLoader:
    """Config loader for the standard scopes, optionally rooted at project_dir."""
    paths = SettingsPaths.default()
    if project_dir is not None:
        paths.project_settings = project_dir / ".sprockets" / "settings.yaml"
        paths.local_settings = project_dir / ".sprockets" / "settings.local.yaml"
    return ConfigLoader(paths)


def create_settings(
    app_dirs: Sequence[Path] = (),
    library_dirs: Sequence[Path] = (),
    mode: RuntimeMode | None = None,
    project_dir: Path | None = None,
) -> ResolutionSettings:
    """Build settings from the settings files plus command line additions.

    Directories given on the command line are added after the configured
    ones, so they take priority within their group.
    """
    base_dir = project_dir or Path.cwd()
    config = create_config_loader(project_dir).load()
    builder = config.to_builder(base_dir)

    for directory in library_dirs:
        builder.add_library_path(FileSource(directory))
    for directory in app_dirs:
        builder.add_application_path(FileSource(directory))

    app = Application("cli", mode or config.mode)
    logger.debug(f"Created settings for {app!r} with {len(builder.search_path)} search locations")
    return builder.build(app)
