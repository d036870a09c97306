import pytest
from fastapi import HTTPException
from pydantic import ValidationError

import delivery_paths.web as web_module
from delivery_paths import LocationGraph


def _endpoint(app, path: str, method: str):
    return next(
        route.endpoint
        for route in app.routes
        if getattr(route, "path", None) == path and method in getattr(route, "methods", set())
    )


@pytest.fixture
def app():
    graph = LocationGraph()
    for name in ("A", "B", "C"):
        graph.add_node(name)
    graph.add_edge("A", "B", 2)
    graph.add_edge("B", "C", 3)
    return web_module.create_app(graph, cost_factor=5)


def test_plan_endpoint_reports_distances_and_cost(app):
    result = _endpoint(app, "/api/plan", "GET")(start="A")
    assert result["cost_factor"] == 5
    assert result["estimates"] == [
        {"name": "A", "reachable": True, "distance": 0, "cost": 0},
        {"name": "B", "reachable": True, "distance": 2, "cost": 10},
        {"name": "C", "reachable": True, "distance": 5, "cost": 25},
    ]


def test_simulate_endpoint(app):
    assert _endpoint(app, "/api/simulate", "GET")(start="A") == {"start": "A", "order": ["A", "B", "C"]}


def test_unknown_start_maps_to_404(app):
    with pytest.raises(HTTPException) as info:
        _endpoint(app, "/api/plan", "GET")(start="Z")
    assert info.value.status_code == 404
    assert info.value.detail == "Unknown location: Z"


def test_location_lifecycle(app):
    add = _endpoint(app, "/api/locations", "POST")
    remove = _endpoint(app, "/api/locations/{name}", "DELETE")
    listing = _endpoint(app, "/api/locations", "GET")

    assert add(web_module.LocationPayload(name="D")) == {"status": "ok", "name": "D", "handle": 3}
    with pytest.raises(HTTPException) as info:
        add(web_module.LocationPayload(name="D"))
    assert info.value.status_code == 409
    with pytest.raises(HTTPException) as info:
        add(web_module.LocationPayload(name="  "))
    assert info.value.status_code == 400

    remove("A")
    assert listing() == {"locations": ["B", "C", "D"]}
    with pytest.raises(HTTPException) as info:
        remove("A")
    assert info.value.status_code == 404


def test_route_endpoints_and_graph_view(app):
    add_route = _endpoint(app, "/api/routes", "POST")
    remove_route = _endpoint(app, "/api/routes", "DELETE")
    graph_view = _endpoint(app, "/api/graph", "GET")

    add_route(web_module.RoutePayload(source="A", target="C", weight=1))
    add_route(web_module.RoutePayload(source="C", target="A", weight=4))
    assert graph_view()["routes"] == [
        {"source": "A", "target": "B", "weight": 2},
        {"source": "A", "target": "C", "weight": 1},
        {"source": "A", "target": "C", "weight": 4},
        {"source": "B", "target": "C", "weight": 3},
    ]

    assert remove_route(source="C", target="A")["removed"] == 2
    assert remove_route(source="C", target="A")["removed"] == 0
    with pytest.raises(HTTPException) as info:
        add_route(web_module.RoutePayload(source="A", target="Z", weight=1))
    assert info.value.status_code == 404


def test_route_payload_rejects_negative_weight():
    with pytest.raises(ValidationError):
        web_module.RoutePayload(source="A", target="B", weight=-1)


def test_create_app_reads_cost_factor_from_environment(monkeypatch):
    monkeypatch.setenv("DELIVERY_COST_FACTOR", "7")
    graph = LocationGraph()
    graph.add_node("A")
    graph.add_node("B")
    graph.add_edge("A", "B", 2)
    app = web_module.create_app(graph)
    result = _endpoint(app, "/api/plan", "GET")(start="A")
    assert result["estimates"][1]["cost"] == 14
