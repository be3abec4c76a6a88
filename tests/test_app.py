"""
API tests through the Flask test client.
"""

import threading

import pytest

from algorithms import ShortestPathEngine
from main import WorkspaceRegistry, create_app


@pytest.fixture
def app():
    return create_app({"TESTING": True, "AUTORUN_INTERVAL_MS": 500})


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


def build_triangle(client):
    for a, b, w in [("A", "B", 5), ("B", "C", 10), ("A", "C", 20)]:
        resp = client.post("/api/graph/edge", json={"a": a, "b": b, "weight": w})
        assert resp.status_code == 200


def test_graph_editing(client):
    build_triangle(client)
    client.post("/api/graph/node", json={"id": "D", "label": "Dock"})
    graph = client.get("/api/graph").get_json()["graph"]
    assert {n["id"] for n in graph["nodes"]} == {"A", "B", "C", "D"}
    assert len(graph["edges"]) == 3

    client.delete("/api/graph/node/B")
    graph = client.get("/api/graph").get_json()["graph"]
    assert len(graph["edges"]) == 1

    client.delete("/api/graph/edge", json={"a": "C", "b": "A"})
    graph = client.post("/api/graph/reset").get_json()["graph"]
    assert graph == {"nodes": [], "edges": []}


def test_bad_edges_are_rejected(client):
    assert client.post("/api/graph/edge", json={"a": "A", "b": "B", "weight": -1}).status_code == 400
    assert client.post("/api/graph/edge", json={"a": "A", "b": "A", "weight": 2}).status_code == 400
    assert client.post("/api/graph/edge", json={"a": "A", "b": "B", "weight": "x"}).status_code == 400
    assert client.post("/api/graph/node", json={}).status_code == 400


@pytest.mark.parametrize("weight", ["nan", "inf", "-inf", 0])
def test_non_finite_edge_weights_are_rejected(client, weight):
    resp = client.post("/api/graph/edge", json={"a": "A", "b": "B", "weight": weight})
    assert resp.status_code == 400
    assert client.get("/api/graph").get_json()["graph"]["edges"] == []


@pytest.mark.parametrize("text", ["A: B(nan) C(5)", "A: B(inf)", "A: B(2)\nB: C(-3)"])
def test_import_rejects_non_finite_weights(client, text):
    client.post("/api/graph/edge", json={"a": "X", "b": "Y", "weight": 1})
    resp = client.post("/api/graph/import", json={"text": text})
    assert resp.status_code == 400
    graph = client.get("/api/graph").get_json()["graph"]
    assert graph["edges"] == [{"a": "X", "b": "Y", "weight": 1}]


def test_load_example_and_import(client):
    resp = client.post("/api/graph/example", json={"name": "detour"})
    labels = {n["id"]: n["label"] for n in resp.get_json()["graph"]["nodes"]}
    assert labels["0"] == "Home"
    assert client.post("/api/graph/example", json={"name": "nope"}).status_code == 400

    resp = client.post("/api/graph/import", json={"text": "A: B(5) C(20)\nB: C(10)"})
    assert len(resp.get_json()["graph"]["edges"]) == 3
    assert client.post("/api/graph/import", json={"text": "nonsense"}).status_code == 400


def test_run_and_navigate(client):
    build_triangle(client)
    state = client.post("/api/run", json={"start": "A", "finish": "C"}).get_json()
    assert state["mode"] == "running"
    assert state["cursor"] == 0
    assert state["length"] == 20
    assert state["step"]["decision"]["kind"] == "initialized"
    assert not state["can_prev"] and state["can_next"]

    state = client.post("/api/step/next").get_json()
    assert state["mode"] == "paused"
    assert state["cursor"] == 1

    state = client.post("/api/step/prev").get_json()
    assert state["cursor"] == 0

    state = client.post("/api/step/end").get_json()
    assert state["finished"]
    assert state["result"] == {"path": ["A", "B", "C"], "total_cost": 15, "no_path": False}
    assert state["metrics"]["total_steps"] == 20

    state = client.post("/api/step/stop").get_json()
    assert state["mode"] == "idle"
    assert state["step"] is None


def test_run_with_missing_node(client):
    build_triangle(client)
    resp = client.post("/api/run", json={"start": "A", "finish": "Z"})
    assert resp.status_code == 400
    assert "error" in resp.get_json()
    assert client.post("/api/run", json={"start": "A", "finish": "C"}).status_code == 200


def test_run_on_empty_graph(client):
    assert client.post("/api/run", json={"start": "A", "finish": "B"}).status_code == 400


@pytest.mark.parametrize("body", [
    {"start": ["A"], "finish": "C"},
    {"start": "A", "finish": {"id": "C"}},
    {"start": "A", "finish": 3},
    {"start": "A"},
])
def test_run_rejects_non_string_endpoints(client, body):
    build_triangle(client)
    resp = client.post("/api/run", json=body)
    assert resp.status_code == 400
    assert "error" in resp.get_json()


def test_prediction_start_rejects_non_string_endpoints(client):
    build_triangle(client)
    resp = client.post("/api/predict/start", json={"start": ["A"], "finish": "C"})
    assert resp.status_code == 400
    assert client.get("/api/predict").get_json() == {"active": False}


def test_navigation_without_run_is_harmless(client):
    for url in ["/api/step/next", "/api/step/prev", "/api/step/end", "/api/step/toggle"]:
        state = client.post(url).get_json()
        assert state["mode"] == "idle"
        assert state["cursor"] is None


def test_no_path_run(client):
    client.post("/api/graph/node", json={"id": "X"})
    client.post("/api/graph/node", json={"id": "Y"})
    client.post("/api/run", json={"start": "X", "finish": "Y"})
    state = client.post("/api/step/end").get_json()
    assert state["result"]["no_path"]
    assert state["result"]["path"] == []
    assert state["step"]["costs"]["Y"] == "Infinity"


def test_speed_and_toggle(client):
    build_triangle(client)
    client.post("/api/run", json={"start": "A", "finish": "C"})
    assert client.post("/api/speed", json={"preset": "fast"}).get_json()["interval_ms"] == 250
    assert client.post("/api/speed", json={"interval_ms": 800}).get_json()["interval_ms"] == 800
    assert client.post("/api/speed", json={"preset": "warp"}).status_code == 400
    assert client.post("/api/speed", json={}).status_code == 400

    assert client.post("/api/step/toggle").get_json()["mode"] == "paused"
    assert client.post("/api/step/toggle").get_json()["mode"] == "running"

    assert client.post("/api/step/pause").get_json()["mode"] == "paused"
    assert client.post("/api/step/resume").get_json()["mode"] == "running"
    client.post("/api/step/end")
    assert client.post("/api/step/resume").get_json()["mode"] == "paused"


def test_state_poll_returns_current_frame(client):
    build_triangle(client)
    client.post("/api/run", json={"start": "A", "finish": "C"})
    state = client.get("/api/state").get_json()
    assert state["mode"] == "running"
    assert state["step"]["explanation"]


def test_editing_the_graph_ends_the_run(client):
    build_triangle(client)
    client.post("/api/run", json={"start": "A", "finish": "C"})
    client.post("/api/graph/node", json={"id": "E"})
    assert client.get("/api/state").get_json()["mode"] == "idle"


def test_prediction_flow(client):
    build_triangle(client)
    state = client.post("/api/predict/start", json={"start": "A", "finish": "C"}).get_json()
    assert state["path"] == ["A"]
    assert state["cost"] == 0
    assert sorted(state["candidates"]) == ["B", "C"]

    client.post("/api/predict/extend", json={"node": "B"})
    state = client.post("/api/predict/extend", json={"node": "C"}).get_json()
    assert state["cost"] == 15

    state = client.post("/api/predict/retract").get_json()
    assert state["path"] == ["A", "B"]
    assert state["cost"] == 5

    client.post("/api/predict/extend", json={"node": "C"})
    client.post("/api/run", json={})
    state = client.post("/api/step/end").get_json()
    assert state["prediction"]["cost"] == 15
    assert state["prediction"]["is_optimal"]


def test_prediction_rejects_non_neighbour(client):
    build_triangle(client)
    client.post("/api/graph/node", json={"id": "D"})
    client.post("/api/predict/start", json={"start": "A", "finish": "C"})
    resp = client.post("/api/predict/extend", json={"node": "D"})
    assert resp.status_code == 400
    assert client.get("/api/predict").get_json()["path"] == ["A"]


def test_prediction_endpoints_need_start(client):
    build_triangle(client)
    assert client.get("/api/predict").get_json() == {"active": False}
    assert client.post("/api/predict/extend", json={"node": "B"}).status_code == 409
    assert client.post("/api/predict/start", json={"start": "A", "finish": "Q"}).status_code == 400


# ---------------------------------------------------------------------------
# Workspace registry
# ---------------------------------------------------------------------------
def test_registry_is_bounded():
    app = create_app({"TESTING": True, "MAX_WORKSPACES": 3})
    for _ in range(10):
        assert app.test_client().get("/api/graph").status_code == 200
    assert len(app.extensions["workspaces"]) == 3


def test_registry_evicts_least_recently_used(clock):
    reg = WorkspaceRegistry(max_size=2, ttl_s=60, clock=clock)
    a, ws_a = reg.get(None)
    b, _ = reg.get(None)
    reg.get(a)
    c, _ = reg.get(None)
    assert a in reg and c in reg
    assert b not in reg
    assert reg.get(a) == (a, ws_a)


def test_registry_drops_idle_workspaces(clock):
    reg = WorkspaceRegistry(max_size=10, ttl_s=60, clock=clock)
    old, _ = reg.get(None)
    clock.advance(30)
    recent, _ = reg.get(None)
    clock.advance(45)
    reg.get(recent)
    assert old not in reg
    assert recent in reg

    token, _ = reg.get(old)
    assert token != old
    assert len(reg) == 2


def test_evicted_workspace_stops_playback(clock, triangle):
    reg = WorkspaceRegistry(max_size=1, ttl_s=60, clock=clock)
    _, ws = reg.get(None)
    ws.playback.start(ShortestPathEngine(triangle, "A", "C").run())
    assert ws.scheduler.pending == 1
    reg.get(None)
    assert ws.playback.mode.value == "idle"
    assert ws.scheduler.pending == 0


def test_session_keeps_its_workspace(client):
    client.post("/api/graph/node", json={"id": "A"})
    client.post("/api/graph/node", json={"id": "B"})
    nodes = client.get("/api/graph").get_json()["graph"]["nodes"]
    assert [n["id"] for n in nodes] == ["A", "B"]


def test_requests_wait_for_the_workspace_lock(app):
    client = app.test_client()
    client.get("/api/graph")
    with client.session_transaction() as sess:
        token = sess["workspace"]
    _, ws = app.extensions["workspaces"].get(token)

    responses = []
    worker = threading.Thread(
        target=lambda: responses.append(client.post("/api/graph/node", json={"id": "A"}))
    )
    with ws.lock:
        worker.start()
        worker.join(timeout=0.2)
        assert worker.is_alive()
        assert ws.graph.is_empty()
    worker.join(timeout=5)

    assert not worker.is_alive()
    assert responses[0].status_code == 200
    assert ws.graph.has_node("A")
