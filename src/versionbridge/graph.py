"""Directed graph of schema versions and the converters between them."""

from collections import deque
from collections.abc import Awaitable, Callable, Hashable, Iterator
from dataclasses import dataclass
from typing import Any

import structlog

from versionbridge.exceptions import PathNotFoundError

logger = structlog.get_logger(__name__)

ConverterFn = Callable[[Any], Any | Awaitable[Any]]


@dataclass(frozen=True)
class ConverterEdge:
    """One directed conversion step between two versions."""

    from_version: Hashable
    to_version: Hashable
    convert: ConverterFn


@dataclass(frozen=True)
class ConversionPath:
    """Ordered sequence of edges linking a source version to a target version.

    An empty path means the record is already at the requested version.
    """

    edges: tuple[ConverterEdge, ...] = ()

    def __len__(self) -> int:
        return len(self.edges)

    def __iter__(self) -> Iterator[ConverterEdge]:
        return iter(self.edges)

    @property
    def versions(self) -> list[Hashable]:
        """Versions visited along the path, including both endpoints."""
        if not self.edges:
            return []
        return [self.edges[0].from_version, *(edge.to_version for edge in self.edges)]


class VersionGraph:
    """Holds known versions and the directed converter edges between them.

    Edges are kept per source version in first-registration order, which makes
    breadth-first search deterministic when several shortest paths exist.
    """

    def __init__(self) -> None:
        """Initialize an empty graph."""
        self._adjacency: dict[Hashable, dict[Hashable, ConverterEdge]] = {}

    def add_edge(
        self,
        from_version: Hashable,
        to_version: Hashable,
        forward: ConverterFn,
        back: ConverterFn | None = None,
    ) -> None:
        """Register a converter between two versions.

        Registering the same directed pair again replaces its converter but
        keeps the edge's original position in the search order.

        Args:
            from_version: Version the forward converter reads
            to_version: Version the forward converter produces
            forward: Converter from ``from_version`` to ``to_version``
            back: Optional inverse converter, adds the reverse edge
        """
        self._put(from_version, to_version, forward)
        if back is not None:
            self._put(to_version, from_version, back)

        logger.debug(
            "Registered converter",
            from_version=from_version,
            to_version=to_version,
            bidirectional=back is not None,
        )

    def _put(self, from_version: Hashable, to_version: Hashable, convert: ConverterFn) -> None:
        # Every mentioned version is a vertex, even one with only incoming edges
        self._adjacency.setdefault(to_version, {})
        targets = self._adjacency.setdefault(from_version, {})
        if to_version in targets:
            logger.debug(
                "Replaced converter",
                from_version=from_version,
                to_version=to_version,
                replaced=True,
            )
        targets[to_version] = ConverterEdge(from_version, to_version, convert)

    def shortest_path(self, from_version: Hashable, to_version: Hashable) -> ConversionPath:
        """Find the path with the fewest edges between two versions.

        Args:
            from_version: Starting version
            to_version: Target version

        Returns:
            ConversionPath: Edges to apply in order (empty when versions are equal)

        Raises:
            PathNotFoundError: If ``to_version`` is unreachable from ``from_version``
        """
        if from_version == to_version:
            return ConversionPath()

        try:
            known = from_version in self._adjacency and to_version in self._adjacency
        except TypeError as e:
            # Unhashable values can never be registered versions
            raise PathNotFoundError(from_version, to_version) from e
        if not known:
            raise PathNotFoundError(from_version, to_version)

        # Breadth-first search; each vertex remembers the edge that reached it
        came_from: dict[Hashable, ConverterEdge | None] = {from_version: None}
        queue: deque[Hashable] = deque([from_version])

        while queue:
            current = queue.popleft()
            for neighbor, edge in self._adjacency[current].items():
                if neighbor in came_from:
                    continue
                came_from[neighbor] = edge
                if neighbor == to_version:
                    return self._unwind(came_from, to_version)
                queue.append(neighbor)

        raise PathNotFoundError(from_version, to_version)

    @staticmethod
    def _unwind(
        came_from: dict[Hashable, ConverterEdge | None], to_version: Hashable
    ) -> ConversionPath:
        edges: list[ConverterEdge] = []
        edge = came_from[to_version]
        while edge is not None:
            edges.append(edge)
            edge = came_from[edge.from_version]
        edges.reverse()
        return ConversionPath(tuple(edges))

    def has_path(self, from_version: Hashable, to_version: Hashable) -> bool:
        """Check whether ``to_version`` is reachable from ``from_version``."""
        try:
            self.shortest_path(from_version, to_version)
        except PathNotFoundError:
            return False
        return True

    def all_versions(self) -> set[Hashable]:
        """Return every version with at least one incident edge."""
        return set(self._adjacency)

    def edges(self) -> list[ConverterEdge]:
        """Return all directed edges in registration order."""
        return [edge for targets in self._adjacency.values() for edge in targets.values()]

    def __contains__(self, version: object) -> bool:
        return version in self._adjacency

    def __len__(self) -> int:
        return len(self._adjacency)
