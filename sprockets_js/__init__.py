"""sprockets-js - dependency resolution for //= require directives.

Finds a script on an ordered search path, follows its require directives,
and returns every script it needs in dependency order, caching the result
according to the host's runtime mode.
"""

from .errors import CycleDetectedError
from .errors import DirectiveSyntaxError
from .errors import InvalidConfigurationError
from .errors import ResolutionError
from .errors import ResourceNotFoundError
from .errors import SprocketsError
from .errors import UnresolvedDependencyError
from .locator import CacheDuration
from .locator import FileSource
from .locator import MemorySource
from .locator import PackageSource
from .models import DependencyReference
from .models import SearchLocation
from .models import Sprocket
from .settings import Application
from .settings import ResolutionSettings
from .settings import RuntimeMode
from .settings import SettingsBuilder
from .settings import SettingsRegistry
from .settings import get_settings
from .settings import register_settings

__all__ = [
    "Application",
    "CacheDuration",
    "CycleDetectedError",
    "DependencyReference",
    "DirectiveSyntaxError",
    "FileSource",
    "InvalidConfigurationError",
    "MemorySource",
    "PackageSource",
    "ResolutionError",
    "ResolutionSettings",
    "ResourceNotFoundError",
    "RuntimeMode",
    "SearchLocation",
    "SettingsBuilder",
    "SettingsRegistry",
    "SprocketsError",
    "UnresolvedDependencyError",
    "get_settings",
    "register_settings",
]
