"""Resolution settings - search path, locator, shared libraries, cache policy.

Settings belong to a host application. Obtain them through the registry:

    app = Application("shop", RuntimeMode.DEPLOYMENT)
    settings = get_settings(app)             # default settings, created once
    order = settings.locate("app.js")

Most hosts are served well by the defaults. To change them, configure a
SettingsBuilder before traffic starts and register the result:

    builder = SettingsBuilder.defaults()
    builder.add_application_path(FileSource("src/main/js", name="app"))
    builder.set_dom_library(None)            # host includes jQuery itself
    register_settings(app, builder.build(app))
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import Protocol

from .errors import InvalidConfigurationError
from .errors import UnresolvedDependencyError
from .locator.cache import CacheDuration
from .locator.cache import TraversalCache
from .locator.directives import normalize_script_path
from .locator.resolver import DefaultDependencyLocator
from .locator.resolver import DependencyLocator
from .locator.search_path import SearchPathRegistry
from .locator.sources import ByteSource
from .locator.sources import PackageSource
from .models import SearchLocation
from .models import Sprocket

logger = logging.getLogger(__name__)

BUNDLED_PACKAGE = "sprockets_js"
BUNDLED_ORIGIN = "sprockets"

# Registered in this order; the last one has the highest priority
DEFAULT_LIBRARY_PATHS = (
    "data",
    "data/lib/cookies",
    "data/lib/sprockets-utils",
    "data/lib/strftime",
)

# Shipped under data/; read through bundled_library()
DEFAULT_DOM_LIBRARY = "lib/jquery-3.6.1/jquery-3.6.1.min.js"
DEFAULT_WIDGET_LIBRARY = "lib/jquery-ui-1.13.2/jquery-ui.min.js"
DEFAULT_WIDGET_STYLESHEET = "lib/jquery-ui-1.13.2/themes/base/jquery-ui.min.css"


class RuntimeMode(Enum):
    """Host runtime mode; drives the default traversal cache duration."""

    DEVELOPMENT = "development"
    DEPLOYMENT = "deployment"


class HostApplication(Protocol):
    """Anything exposing the host's current runtime mode."""

    runtime_mode: RuntimeMode


class Application:
    """Minimal host application. The mode may change while running."""

    def __init__(self, name: str = "default", runtime_mode: RuntimeMode = RuntimeMode.DEVELOPMENT):
        self.name = name
        self.runtime_mode = runtime_mode

    def __repr__(self) -> str:
        return f"Application({self.name}, {self.runtime_mode.value})"


def bundled_library(path: str) -> Sprocket:
    """Reference to a file shipped inside this package's data directory."""
    origin = PackageSource(BUNDLED_PACKAGE, name=BUNDLED_ORIGIN)
    return Sprocket(True, path, SearchLocation(origin=origin, base_path="data"))


@dataclass(frozen=True)
class ResolutionSettings:
    """Finalized settings for one host application. Build with SettingsBuilder."""

    app: HostApplication
    search_path: SearchPathRegistry
    locator: DependencyLocator
    dom_library: Sprocket | None = None
    widget_library: Sprocket | None = None
    widget_stylesheet: Sprocket | None = None
    cache_duration_override: CacheDuration | None = None
    traversal_cache: TraversalCache = field(default_factory=TraversalCache, compare=False)

    @property
    def locations(self) -> tuple[SearchLocation, ...]:
        """Registered search locations, most recently added first."""
        return self.search_path.locations

    def cache_duration(self) -> CacheDuration:
        """Effective traversal cache duration, evaluated on every call.

        An explicit override wins. Otherwise caching is disabled in development
        (edits show up immediately) and indefinite in deployment.
        """
        if self.cache_duration_override is not None:
            return self.cache_duration_override
        if self.app.runtime_mode is RuntimeMode.DEPLOYMENT:
            return CacheDuration.indefinite()
        return CacheDuration.disabled()

    def locate(self, root: Sprocket | str) -> list[Sprocket]:
        """Resolve root with the active locator. Strings name application scripts."""
        if isinstance(root, str):
            try:
                root = Sprocket(False, normalize_script_path(root))
            except ValueError as e:
                raise UnresolvedDependencyError(root) from e
        return self.locator.locate(root, self)

    def shared_scripts(self) -> list[Sprocket]:
        """Managed shared scripts, in the order they must be emitted."""
        return [s for s in (self.dom_library, self.widget_library) if s is not None]

    def shared_stylesheets(self) -> list[Sprocket]:
        """Managed shared stylesheets, emitted alongside shared_scripts()."""
        return [s for s in (self.widget_stylesheet,) if s is not None]


class SettingsBuilder:
    """Mutable configuration that produces immutable ResolutionSettings."""

    def __init__(self) -> None:
        self.search_path = SearchPathRegistry()
        self.locator: DependencyLocator = DefaultDependencyLocator()
        self.dom_library: Sprocket | None = None
        self.widget_library: Sprocket | None = None
        self.widget_stylesheet: Sprocket | None = None
        self.cache_duration: CacheDuration | None = None

    @classmethod
    def defaults(cls) -> SettingsBuilder:
        """Builder preloaded with the bundled library paths and shared libraries."""
        builder = cls()
        origin = PackageSource(BUNDLED_PACKAGE, name=BUNDLED_ORIGIN)
        for base_path in DEFAULT_LIBRARY_PATHS:
            builder.add_library_path(origin, base_path)

        builder.dom_library = bundled_library(DEFAULT_DOM_LIBRARY)
        builder.widget_library = bundled_library(DEFAULT_WIDGET_LIBRARY)
        builder.widget_stylesheet = bundled_library(DEFAULT_WIDGET_STYLESHEET)
        return builder

    def set_locator(self, locator: DependencyLocator) -> None:
        if locator is None:
            raise InvalidConfigurationError("Dependency locator must not be None")
        self.locator = locator

    def add_library_path(self, origin: ByteSource, base_path: str = "") -> None:
        """Add a library location with the highest library priority."""
        self.search_path.add_library_path(origin, base_path)

    def add_application_path(self, origin: ByteSource, base_path: str = "") -> None:
        """Add an application location; these are probed before any library location."""
        self.search_path.add_application_path(origin, base_path)

    def register_origin(self, origin: ByteSource, library: bool = False) -> None:
        """Make an origin reachable by <name:path> references only."""
        self.search_path.register_origin(origin, library)

    def set_dom_library(self, sprocket: Sprocket | None) -> None:
        """None means the host manages the DOM library itself."""
        self.dom_library = sprocket

    def set_widget_library(self, sprocket: Sprocket | None) -> None:
        self.widget_library = sprocket

    def set_widget_stylesheet(self, sprocket: Sprocket | None) -> None:
        self.widget_stylesheet = sprocket

    def set_cache_duration(self, duration: CacheDuration | None) -> None:
        """Explicit override; None restores the runtime-mode default."""
        self.cache_duration = duration

    def build(self, app: HostApplication) -> ResolutionSettings:
        if app is None:
            raise InvalidConfigurationError("Settings require a host application")
        return ResolutionSettings(
            app=app,
            search_path=self.search_path.copy(),
            locator=self.locator,
            dom_library=self.dom_library,
            widget_library=self.widget_library,
            widget_stylesheet=self.widget_stylesheet,
            cache_duration_override=self.cache_duration,
        )


class SettingsRegistry:
    """One ResolutionSettings per host application, created lazily.

    Entries live until remove() is called for the application.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._settings: dict[HostApplication, ResolutionSettings] = {}

    def get(self, app: HostApplication) -> ResolutionSettings:
        if app is None:
            raise InvalidConfigurationError("No host application given")
        with self._lock:
            settings = self._settings.get(app)
            if settings is None:
                settings = SettingsBuilder.defaults().build(app)
                self._settings[app] = settings
                logger.debug(f"Created default resolution settings for {app!r}")
            return settings

    def register(self, app: HostApplication, settings: ResolutionSettings) -> None:
        if settings is None:
            raise InvalidConfigurationError("Settings must not be None")
        with self._lock:
            self._settings[app] = settings

    def remove(self, app: HostApplication) -> None:
        with self._lock:
            self._settings.pop(app, None)


# Singleton instance
_registry = SettingsRegistry()


def get_settings(app: HostApplication) -> ResolutionSettings:
    """Settings for app from the process-wide registry."""
    return _registry.get(app)


def register_settings(app: HostApplication, settings: ResolutionSettings) -> None:
    """Install custom settings for app in the process-wide registry."""
    _registry.register(app, settings)
