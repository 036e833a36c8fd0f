"""Dependency locator - search path, directive parsing, graph resolution, caching."""

from .cache import CacheDuration
from .cache import TraversalCache
from .directives import DirectiveParser
from .directives import ScanPolicy
from .manifest import ManifestDependencyLocator
from .resolver import DefaultDependencyLocator
from .resolver import DependencyGraph
from .resolver import DependencyLocator
from .resolver import NullDependencyLocator
from .search_path import SearchPathRegistry
from .sources import ByteSource
from .sources import FileSource
from .sources import MemorySource
from .sources import PackageSource

__all__ = [
    "ByteSource",
    "CacheDuration",
    "DefaultDependencyLocator",
    "DependencyGraph",
    "DependencyLocator",
    "DirectiveParser",
    "FileSource",
    "ManifestDependencyLocator",
    "MemorySource",
    "NullDependencyLocator",
    "PackageSource",
    "ScanPolicy",
    "SearchPathRegistry",
    "TraversalCache",
]
