"""Dependency resolution - directive graph to flattened script order.

DependencyGraph walks require directives depth first and emits scripts in
post-order, so every dependency precedes its dependents and each script
appears once. Locators wrap that traversal with a caching policy:
- DefaultDependencyLocator: graph traversal through the traversal cache
- NullDependencyLocator: the root alone, nothing is read
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING
from typing import Protocol

from ..errors import CycleDetectedError
from ..errors import ResourceNotFoundError
from ..errors import UnresolvedDependencyError
from ..models import DependencyReference
from ..models import SearchLocation
from ..models import Sprocket
from .directives import DirectiveParser
from .search_path import SearchPathRegistry

if TYPE_CHECKING:
    from ..settings import ResolutionSettings

logger = logging.getLogger(__name__)


class DependencyLocator(Protocol):
    """Protocol for strategies that turn a root script into an ordered script list."""

    def locate(self, root: Sprocket, settings: ResolutionSettings) -> list[Sprocket]:
        """Return root and its transitive dependencies, dependencies first.

        Raises:
            ResolutionError: The dependency declarations are broken
        """
        ...


class DependencyGraph:
    """One traversal over the require directives reachable from a root."""

    def __init__(self, search_path: SearchPathRegistry, parser: DirectiveParser | None = None):
        self.search_path = search_path
        self.parser = parser or DirectiveParser()

    def flatten(self, root: Sprocket) -> list[Sprocket]:
        """Resolve root into a duplicate-free, dependencies-first list.

        The walk keeps its own stack of open scripts, so chain depth is not
        bounded by the interpreter's recursion limit.

        Raises:
            UnresolvedDependencyError: A script or reference cannot be found
            CycleDetectedError: A require chain leads back to itself
            DirectiveSyntaxError: A malformed require directive
        """
        node, content = self._load_root(root)

        order: list[Sprocket] = []
        visited: set[Sprocket] = set()
        visiting: set[Sprocket] = set()
        stack: list[tuple[Sprocket, Iterator[DependencyReference]]] = []

        self._open(node, content, None, visiting, stack)

        while stack:
            current, references = stack[-1]
            reference = next(references, None)

            if reference is None:
                stack.pop()
                visiting.discard(current)
                visited.add(current)
                order.append(current)
                continue

            child, child_content = self.resolve_reference(reference, current)
            if child in visited:
                continue
            if child in visiting:
                chain = [frame[0] for frame in stack]
                raise CycleDetectedError(chain[chain.index(child) :] + [child])

            self._open(child, child_content, current, visiting, stack)

        logger.debug(f"Resolved {root.path} to {len(order)} scripts")
        return order

    def _open(
        self,
        node: Sprocket,
        content: bytes,
        parent: Sprocket | None,
        visiting: set[Sprocket],
        stack: list[tuple[Sprocket, Iterator[DependencyReference]]],
    ) -> None:
        """Parse node and push it onto the walk stack."""
        try:
            references = self.parser.parse(content, source=node.full_path)
        except UnicodeDecodeError as e:
            logger.debug(f"{node.full_path} is not valid UTF-8: {e}")
            raise UnresolvedDependencyError(node, parent) from e

        visiting.add(node)
        stack.append((node, iter(references)))

    def resolve_reference(self, reference: DependencyReference, required_by: Sprocket | None = None) -> tuple[Sprocket, bytes]:
        """Turn a raw reference into a concrete Sprocket and its content.

        Bare names follow the search path precedence and take the library flag
        of the location that supplied them. Explicit references read the named
        origin directly and take that origin's flag.
        """
        if reference.origin is None:
            try:
                content, location = self.search_path.resolve(reference.path)
            except ResourceNotFoundError:
                raise UnresolvedDependencyError(reference, required_by) from None
            return Sprocket(location.library, reference.path, location), content

        registered = self.search_path.origin(reference.origin)
        if registered is None:
            logger.debug(f"Unknown origin '{reference.origin}' in {reference}")
            raise UnresolvedDependencyError(reference, required_by)

        origin, library = registered
        location = SearchLocation(origin=origin, library=library)
        full_path = location.join(reference.path)
        if full_path is None:
            logger.warning(f"Path traversal attempt blocked: {reference}")
            raise UnresolvedDependencyError(reference, required_by)

        try:
            content = origin.read(full_path)
        except ResourceNotFoundError:
            raise UnresolvedDependencyError(reference, required_by) from None
        return Sprocket(library, reference.path, location), content

    def _load_root(self, root: Sprocket) -> tuple[Sprocket, bytes]:
        """Read the root, looking it up on the search path unless it knows its location."""
        if root.location is not None:
            full_path = root.location.join(root.path)
            try:
                if full_path is None:
                    raise ResourceNotFoundError(root.path, root.location.origin.name)
                return root, root.location.origin.read(full_path)
            except ResourceNotFoundError:
                raise UnresolvedDependencyError(root) from None

        try:
            content, location = self.search_path.resolve(root.path)
        except ResourceNotFoundError:
            raise UnresolvedDependencyError(root) from None
        return Sprocket(location.library, root.path, location), content


class DefaultDependencyLocator:
    """Graph traversal through the settings' traversal cache."""

    def __init__(self, parser: DirectiveParser | None = None):
        self.parser = parser or DirectiveParser()

    def locate(self, root: Sprocket, settings: ResolutionSettings) -> list[Sprocket]:
        graph = DependencyGraph(settings.search_path, self.parser)
        return settings.traversal_cache.get_or_compute(
            root,
            settings.cache_duration(),
            lambda: graph.flatten(root),
        )

    def __repr__(self) -> str:
        return f"DefaultDependencyLocator({self.parser.scan_policy.value})"


class NullDependencyLocator:
    """Returns the root alone, for hosts that concatenate scripts themselves."""

    def locate(self, root: Sprocket, settings: ResolutionSettings) -> list[Sprocket]:
        return [root]

    def __repr__(self) -> str:
        return "NullDependencyLocator()"
