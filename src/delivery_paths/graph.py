from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional, Tuple

from .errors import DuplicateNode, InvalidWeight, UnknownNode

if TYPE_CHECKING:
    from .pathfinding import DeliveryEstimate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Edge:
    target: int
    weight: int


class LocationGraph:
    """In-memory weighted undirected graph of named delivery locations.

    Locations are addressed by name and stored under dense integer handles in
    ``range(node_count)``. Removing a location compacts the handle space, so a
    handle is only stable until the next removal. Each location owns an ordered
    list of ``Edge`` entries; parallel routes between the same pair are kept as
    separate entries, and a self-loop is stored as a single entry.
    """

    def __init__(self) -> None:
        self._index: Dict[str, int] = {}
        self._names: List[str] = []
        self._adjacency: List[List[Edge]] = []
        self._lock = threading.RLock()

    @contextmanager
    def locked(self) -> Iterator["LocationGraph"]:
        """Hold exclusive access to the whole structure."""

        with self._lock:
            yield self

    @property
    def node_count(self) -> int:
        return len(self._names)

    @property
    def adjacency(self) -> List[List[Edge]]:
        with self._lock:
            return [list(edges) for edges in self._adjacency]

    def __len__(self) -> int:
        return self.node_count

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def add_node(self, name: str) -> int:
        with self._lock:
            if name in self._index:
                raise DuplicateNode(name)
            handle = len(self._names)
            self._index[name] = handle
            self._names.append(name)
            self._adjacency.append([])
        logger.info("location_added name=%s handle=%s", name, handle)
        return handle

    def remove_node(self, name: str) -> None:
        with self._lock:
            removed = self.index_of(name)
            del self._adjacency[removed]
            for position, edges in enumerate(self._adjacency):
                self._adjacency[position] = [
                    Edge(target=edge.target - 1 if edge.target > removed else edge.target, weight=edge.weight)
                    for edge in edges
                    if edge.target != removed
                ]
            del self._names[removed]
            del self._index[name]
            for handle in range(removed, len(self._names)):
                self._index[self._names[handle]] = handle
        logger.info("location_removed name=%s handle=%s", name, removed)

    def add_edge(self, source: str, target: str, weight: int) -> None:
        with self._lock:
            u = self.index_of(source)
            v = self.index_of(target)
            if isinstance(weight, bool) or not isinstance(weight, int) or weight < 0:
                raise InvalidWeight(weight)
            self._adjacency[u].append(Edge(target=v, weight=weight))
            if u != v:
                self._adjacency[v].append(Edge(target=u, weight=weight))
        logger.info("route_added source=%s target=%s weight=%s", source, target, weight)

    def remove_edge(self, source: str, target: str) -> int:
        """Drop every route between the two locations and return how many there were."""

        with self._lock:
            u = self.index_of(source)
            v = self.index_of(target)
            kept = [edge for edge in self._adjacency[u] if edge.target != v]
            removed = len(self._adjacency[u]) - len(kept)
            self._adjacency[u] = kept
            if u != v:
                self._adjacency[v] = [edge for edge in self._adjacency[v] if edge.target != u]
        logger.info("route_removed source=%s target=%s count=%s", source, target, removed)
        return removed

    def list_nodes(self) -> List[str]:
        with self._lock:
            return list(self._names)

    def index_of(self, name: str) -> int:
        handle = self._index.get(name)
        if handle is None:
            raise UnknownNode(name)
        return handle

    def name_of(self, handle: int) -> str:
        if not 0 <= handle < len(self._names):
            raise IndexError(f"No location with handle {handle}")
        return self._names[handle]

    def edges_of(self, handle: int) -> Tuple[Edge, ...]:
        return tuple(self._adjacency[handle])

    def neighbors(self, name: str) -> List[Tuple[str, int]]:
        with self._lock:
            handle = self.index_of(name)
            return [(self._names[edge.target], edge.weight) for edge in self._adjacency[handle]]

    def degree(self, name: str) -> int:
        with self._lock:
            return len(self._adjacency[self.index_of(name)])

    def routes(self) -> List[Tuple[str, str, int]]:
        """Every undirected route once, listed from its lower-handle endpoint."""

        with self._lock:
            return [
                (self._names[handle], self._names[edge.target], edge.weight)
                for handle, edges in enumerate(self._adjacency)
                for edge in edges
                if edge.target >= handle
            ]

    def shortest_paths_from(self, start: str, cost_factor: Optional[int] = None) -> List["DeliveryEstimate"]:
        from .pathfinding import shortest_paths_from

        return shortest_paths_from(self, start, cost_factor=cost_factor)

    def traverse_from(self, start: str) -> List[str]:
        from .pathfinding import traverse_from

        return traverse_from(self, start)
