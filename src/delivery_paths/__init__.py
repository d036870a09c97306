from .config import DEFAULT_COST_FACTOR, get_cost_factor
from .errors import DuplicateNode, GraphError, InvalidWeight, UnknownNode
from .graph import Edge, LocationGraph
from .pathfinding import DeliveryEstimate, shortest_paths_from, traverse_from

__all__ = [
    "LocationGraph",
    "Edge",
    "GraphError",
    "DuplicateNode",
    "UnknownNode",
    "InvalidWeight",
    "DeliveryEstimate",
    "shortest_paths_from",
    "traverse_from",
    "DEFAULT_COST_FACTOR",
    "get_cost_factor",
]
