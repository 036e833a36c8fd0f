"""Exceptions raised while locating and resolving JavaScript dependencies."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import DependencyReference
    from .models import Sprocket


class SprocketsError(Exception):
    """Base class for every error raised by sprockets-js."""


class ResourceNotFoundError(SprocketsError):
    """Raised when a single search location cannot supply a path.

    Only a signal to keep probing; it never escapes a resolution.
    """

    def __init__(self, path: str, origin: str | None = None):
        self.path = path
        self.origin = origin
        where = f" in {origin}" if origin else ""
        super().__init__(f"Resource not found{where}: {path}")


class InvalidConfigurationError(SprocketsError):
    """Raised when settings are given a disallowed value."""


class ResolutionError(SprocketsError):
    """Fatal failure of a dependency resolution. No partial result exists."""


class UnresolvedDependencyError(ResolutionError):
    """Raised when a referenced script cannot be found anywhere."""

    def __init__(self, reference: DependencyReference | Sprocket | str, required_by: Sprocket | None = None):
        self.reference = reference
        self.required_by = required_by
        message = f"Unable to resolve dependency {reference}"
        if required_by is not None:
            message += f" (required by {required_by.path})"
        super().__init__(message)


class CycleDetectedError(ResolutionError):
    """Raised when a require chain leads back to a script still being visited."""

    def __init__(self, chain: list[Sprocket]):
        self.chain = chain
        super().__init__("Circular dependency: " + " -> ".join(s.path for s in chain))


class DirectiveSyntaxError(ResolutionError):
    """Raised for a require directive that matches neither reference form."""

    def __init__(self, line_number: int, line: str, source: str | None = None):
        self.line_number = line_number
        self.line = line
        self.source = source
        where = f"{source}:" if source else "line "
        super().__init__(f"Malformed require directive at {where}{line_number}: {line.strip()}")
