from __future__ import annotations

import heapq
import logging
from collections import deque
from dataclasses import dataclass
from math import inf
from typing import Dict, List, Optional

from .config import get_cost_factor
from .graph import LocationGraph

logger = logging.getLogger(__name__)


@dataclass
class DeliveryEstimate:
    name: str
    distance: Optional[int]
    cost: Optional[int]

    @property
    def reachable(self) -> bool:
        return self.distance is not None

    def as_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "reachable": self.reachable,
            "distance": self.distance,
            "cost": self.cost,
        }


def shortest_paths_from(
    graph: LocationGraph,
    start: str,
    cost_factor: Optional[int] = None,
) -> List[DeliveryEstimate]:
    """Dijkstra distances from ``start`` to every location, in handle order.

    Unreachable locations are reported with ``distance`` and ``cost`` of None.
    """

    factor = get_cost_factor() if cost_factor is None else cost_factor
    with graph.locked():
        source = graph.index_of(start)
        dist: List[float] = [inf] * graph.node_count
        dist[source] = 0
        queue: List[tuple[int, int]] = [(0, source)]

        while queue:
            distance, node = heapq.heappop(queue)
            if distance > dist[node]:
                continue
            for edge in graph.edges_of(node):
                candidate = distance + edge.weight
                if candidate < dist[edge.target]:
                    dist[edge.target] = candidate
                    heapq.heappush(queue, (candidate, edge.target))

        estimates: List[DeliveryEstimate] = []
        for handle, distance in enumerate(dist):
            name = graph.name_of(handle)
            if distance == inf:
                estimates.append(DeliveryEstimate(name=name, distance=None, cost=None))
            else:
                estimates.append(DeliveryEstimate(name=name, distance=int(distance), cost=int(distance) * factor))

    logger.debug(
        "shortest_paths start=%s reachable=%s total=%s",
        start,
        sum(1 for estimate in estimates if estimate.reachable),
        len(estimates),
    )
    return estimates


def traverse_from(graph: LocationGraph, start: str) -> List[str]:
    """Breadth-first delivery order from ``start``; unreachable locations are omitted."""

    with graph.locked():
        source = graph.index_of(start)
        visited = [False] * graph.node_count
        visited[source] = True
        queue = deque([source])
        order: List[str] = []

        while queue:
            node = queue.popleft()
            order.append(graph.name_of(node))
            for edge in graph.edges_of(node):
                if not visited[edge.target]:
                    visited[edge.target] = True
                    queue.append(edge.target)

    logger.debug("traversal start=%s visited=%s", start, len(order))
    return order
