from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from .config import get_cost_factor
from .errors import DuplicateNode, UnknownNode
from .graph import LocationGraph
from .pathfinding import shortest_paths_from, traverse_from

logger = logging.getLogger(__name__)


class LocationPayload(BaseModel):
    name: str


class RoutePayload(BaseModel):
    source: str
    target: str
    weight: int = Field(ge=0)


def create_app(graph: Optional[LocationGraph] = None, cost_factor: Optional[int] = None) -> FastAPI:
    app = FastAPI(title="Delivery Paths")
    graph = graph if graph is not None else LocationGraph()
    factor = cost_factor if cost_factor is not None else get_cost_factor()
    logger.info("delivery_paths_app_created cost_factor=%s", factor)

    @app.get("/api/locations")
    def list_locations() -> Dict[str, object]:
        return {"locations": graph.list_nodes()}

    @app.post("/api/locations")
    def add_location(payload: LocationPayload) -> Dict[str, object]:
        _ensure_non_empty(payload.name, "name")
        try:
            handle = graph.add_node(payload.name)
        except DuplicateNode as exc:
            _raise_graph_error(exc)
        return {"status": "ok", "name": payload.name, "handle": handle}

    @app.delete("/api/locations/{name}")
    def remove_location(name: str) -> Dict[str, object]:
        try:
            graph.remove_node(name)
        except UnknownNode as exc:
            _raise_graph_error(exc)
        return {"status": "ok", "name": name}

    @app.post("/api/routes")
    def add_route(payload: RoutePayload) -> Dict[str, object]:
        try:
            graph.add_edge(payload.source, payload.target, payload.weight)
        except (KeyError, ValueError) as exc:
            _raise_graph_error(exc)
        return {
            "status": "ok",
            "route": {"source": payload.source, "target": payload.target, "weight": payload.weight},
        }

    @app.delete("/api/routes")
    def remove_route(
        source: str = Query(...),
        target: str = Query(...),
    ) -> Dict[str, object]:
        try:
            removed = graph.remove_edge(source, target)
        except UnknownNode as exc:
            _raise_graph_error(exc)
        return {"status": "ok", "source": source, "target": target, "removed": removed}

    @app.get("/api/graph")
    def get_graph() -> Dict[str, object]:
        with graph.locked():
            return {
                "locations": graph.list_nodes(),
                "routes": _serialise_routes(graph),
            }

    @app.get("/api/plan")
    def plan(start: str = Query(...)) -> Dict[str, Any]:
        try:
            estimates = shortest_paths_from(graph, start, cost_factor=factor)
        except UnknownNode as exc:
            _raise_graph_error(exc)
        return {
            "start": start,
            "cost_factor": factor,
            "estimates": [estimate.as_dict() for estimate in estimates],
        }

    @app.get("/api/simulate")
    def simulate(start: str = Query(...)) -> Dict[str, Any]:
        try:
            order = traverse_from(graph, start)
        except UnknownNode as exc:
            _raise_graph_error(exc)
        return {"start": start, "order": order}

    return app


def _serialise_routes(graph: LocationGraph) -> List[Dict[str, object]]:
    return [
        {"source": source, "target": target, "weight": weight}
        for source, target, weight in graph.routes()
    ]


def _ensure_non_empty(value: str, field_name: str) -> None:
    if not value or not value.strip():
        raise HTTPException(status_code=400, detail=f"{field_name} cannot be empty")


def _raise_graph_error(exc: Exception) -> None:
    if isinstance(exc, KeyError):
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    if isinstance(exc, DuplicateNode):
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    raise HTTPException(status_code=400, detail=str(exc)) from exc
