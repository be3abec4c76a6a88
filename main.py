"""
main.py — Dijkstra Stepper Flask App
=====================================
JSON API that wires the graph editor, the Dijkstra engine, playback and
prediction mode together for a browser front end.

Routes:
  GET    /api/graph                – current graph (nodes, edges, labels)
  POST   /api/graph/node           – add node            {id, label?}
  DELETE /api/graph/node/<id>      – remove node + its edges
  POST   /api/graph/edge           – add / overwrite edge {a, b, weight}
  DELETE /api/graph/edge           – remove edge          {a, b}
  POST   /api/graph/reset          – clear the graph
  POST   /api/graph/example        – load a pre-made graph {name}
  POST   /api/graph/import         – import adjacency-list text {text}
  POST   /api/run                  – run Dijkstra and start playback {start, finish}
  POST   /api/step/next            – one step forward (pauses)
  POST   /api/step/prev            – one step back (pauses)
  POST   /api/step/end             – skip to the final snapshot
  POST   /api/step/stop            – leave playback
  POST   /api/step/pause           – stop auto-advance, keep the cursor
  POST   /api/step/resume          – restart auto-advance (refused at the end)
  POST   /api/step/toggle          – pause / resume auto-advance
  POST   /api/speed                – {preset} or {interval_ms}
  GET    /api/state                – ticks auto-advance, returns the current frame
  POST   /api/predict/start        – enter prediction mode {start, finish}
  POST   /api/predict/extend       – add a node to the prediction {node}
  POST   /api/predict/retract      – drop the last node
  GET    /api/predict              – prediction path, cost, legal next nodes

State management:
  Each browser session gets a token in the Flask session cookie.  The
  token keys an in-memory Workspace (graph, playback controller,
  prediction, last recorder) held in a per-app WorkspaceRegistry.  The
  registry is bounded: workspaces idle for longer than WORKSPACE_TTL_S
  are dropped, and past MAX_WORKSPACES the least recently used one goes.
  Every route body runs under its workspace's lock.  Auto-advance is
  cooperative: the front end polls /api/state and every poll ticks the
  workspace's scheduler.
"""

import functools
import logging
import math
import secrets
import threading
import time
from collections import OrderedDict
from dataclasses import asdict
from typing import Callable, Optional, Tuple

from flask import Flask, abort, current_app, jsonify, request, session

from graph import WeightedGraph, list_examples, load_example
from algorithms import RunInputError
from engine import (
    AdjacencyError,
    DEFAULT_AUTORUN_MS,
    PlaybackController,
    PredictionEvaluator,
    Recorder,
    SPEED_PRESETS,
    TickScheduler,
    compare_prediction,
    snapshot_to_dict,
)

logger = logging.getLogger(__name__)

MAX_WORKSPACES  = 256
WORKSPACE_TTL_S = 3600


# ---------------------------------------------------------------------------
# Workspace — one per browser session
# ---------------------------------------------------------------------------
class Workspace:
    def __init__(self, interval_ms: int = DEFAULT_AUTORUN_MS):
        self.graph      = WeightedGraph()
        self.scheduler  = TickScheduler()
        self.playback   = PlaybackController(self.scheduler, interval_ms=interval_ms)
        self.prediction = PredictionEvaluator(self.graph)
        self.recorder:  Optional[Recorder] = None
        self.finish:    Optional[str]      = None
        self.lock       = threading.RLock()

    def end_run(self) -> None:
        self.playback.stop()
        self.prediction.reset()
        self.recorder = None
        self.finish   = None


class WorkspaceRegistry:
    """
    Token → Workspace map, least recently used first.

    `get()` sweeps idle entries, then either touches the token's workspace
    or creates a fresh one under a new token, evicting the oldest entries
    while the registry is full.
    """

    def __init__(
        self,
        max_size: int = MAX_WORKSPACES,
        ttl_s: float = WORKSPACE_TTL_S,
        interval_ms: int = DEFAULT_AUTORUN_MS,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size    = max_size
        self.ttl_s       = ttl_s
        self.interval_ms = interval_ms
        self._clock      = clock
        self._entries: "OrderedDict[str, Tuple[Workspace, float]]" = OrderedDict()
        self._lock       = threading.Lock()

    def get(self, token: Optional[str]) -> Tuple[str, Workspace]:
        now = self._clock()
        with self._lock:
            self._expire(now)
            if token is not None and token in self._entries:
                ws, _ = self._entries.pop(token)
            else:
                token = secrets.token_hex(16)
                ws = Workspace(self.interval_ms)
                while len(self._entries) >= self.max_size:
                    self._evict(next(iter(self._entries)), "registry full")
            self._entries[token] = (ws, now)
            return token, ws

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, token) -> bool:
        return token in self._entries

    def _expire(self, now: float) -> None:
        while self._entries:
            token, (_, last_seen) = next(iter(self._entries.items()))
            if now - last_seen <= self.ttl_s:
                break
            self._evict(token, "idle")

    def _evict(self, token: str, reason: str) -> None:
        ws, _ = self._entries.pop(token)
        ws.playback.stop()
        logger.info("evicted workspace %s… (%s)", token[:8], reason)


def get_workspace() -> Workspace:
    registry: WorkspaceRegistry = current_app.extensions["workspaces"]
    token, ws = registry.get(session.get("workspace"))
    session["workspace"] = token
    return ws


def with_workspace(view):
    """Pass the session's workspace to the view and hold its lock throughout."""
    @functools.wraps(view)
    def wrapper(*args, **kwargs):
        ws = get_workspace()
        with ws.lock:
            return view(ws, *args, **kwargs)
    return wrapper


def _body() -> dict:
    return request.get_json(silent=True) or {}


def _error(message: str, status: int = 400):
    logger.warning("request rejected: %s", message)
    return jsonify({"error": message}), status


def _valid_weight(weight: float) -> bool:
    return math.isfinite(weight) and weight > 0


def _node_ids(*values) -> bool:
    return all(isinstance(v, str) and v for v in values)


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------
def playback_state(ws: Workspace) -> dict:
    pb = ws.playback
    state = {
        "mode":        pb.mode.value,
        "cursor":      pb.cursor,
        "length":      pb.length,
        "interval_ms": pb.interval_ms,
        "can_prev":    pb.is_active and not pb.at_start,
        "can_next":    pb.is_active and not pb.at_end,
        "finished":    pb.at_end,
        "step":        None,
    }
    snapshot = pb.current_snapshot
    if snapshot is not None and ws.recorder is not None:
        run = ws.recorder.run
        state["step"] = snapshot_to_dict(snapshot, run.start, ws.recorder.graph)
        if pb.at_end:
            state["result"] = {
                "path":       list(run.result.path),
                "total_cost": run.result.total_cost,
                "no_path":    run.no_path,
            }
            state["metrics"] = asdict(ws.recorder.metrics)
            if ws.prediction.is_active:
                cmp = compare_prediction(ws.prediction, run)
                state["prediction"] = {
                    "path":                list(cmp.predicted_path),
                    "cost":                cmp.predicted_cost,
                    "reaches_destination": cmp.reaches_destination,
                    "is_optimal":          cmp.is_optimal,
                    "difference":          cmp.difference,
                }
    return state


def prediction_state(ws: Workspace) -> dict:
    pred = ws.prediction
    if not pred.is_active:
        return {"active": False}
    return {
        "active":     True,
        "path":       list(pred.path),
        "cost":       pred.current_cost(),
        "candidates": pred.candidates(),
        "finish":     ws.finish,
    }


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------
def create_app(config: Optional[dict] = None) -> Flask:
    app = Flask(__name__)
    app.config.from_mapping(
        SECRET_KEY=secrets.token_hex(32),
        AUTORUN_INTERVAL_MS=DEFAULT_AUTORUN_MS,
        MAX_WORKSPACES=MAX_WORKSPACES,
        WORKSPACE_TTL_S=WORKSPACE_TTL_S,
        LOG_LEVEL="INFO",
    )
    app.config.from_prefixed_env("STEPPER")
    if config:
        app.config.update(config)

    app.extensions["workspaces"] = WorkspaceRegistry(
        max_size=app.config["MAX_WORKSPACES"],
        ttl_s=app.config["WORKSPACE_TTL_S"],
        interval_ms=app.config["AUTORUN_INTERVAL_MS"],
    )

    _register_graph_routes(app)
    _register_run_routes(app)
    _register_prediction_routes(app)
    return app


# ---------------------------------------------------------------------------
# API: Graph editing
# ---------------------------------------------------------------------------
def _register_graph_routes(app: Flask) -> None:

    def graph_changed(ws: Workspace):
        # an edit invalidates any run or prediction built on the old graph
        ws.end_run()
        return jsonify({"graph": ws.graph.to_dict()})

    @app.get("/api/graph")
    @with_workspace
    def api_graph(ws):
        return jsonify({"graph": ws.graph.to_dict(), "examples": list_examples()})

    @app.post("/api/graph/node")
    @with_workspace
    def api_add_node(ws):
        data = _body()
        node_id = data.get("id")
        if not node_id:
            return _error("Node id is required")
        ws.graph.add_node(str(node_id), label=data.get("label"))
        return graph_changed(ws)

    @app.delete("/api/graph/node/<node_id>")
    @with_workspace
    def api_remove_node(ws, node_id):
        ws.graph.remove_node(node_id)
        return graph_changed(ws)

    @app.post("/api/graph/edge")
    @with_workspace
    def api_add_edge(ws):
        data = _body()
        a, b = data.get("a"), data.get("b")
        try:
            weight = float(data.get("weight", 1))
        except (TypeError, ValueError):
            return _error("Weight must be a number")
        if not a or not b or a == b:
            return _error("An edge needs two different endpoints")
        if not _valid_weight(weight):
            return _error("Weight must be a positive finite number")
        ws.graph.add_edge(str(a), str(b), weight)
        return graph_changed(ws)

    @app.delete("/api/graph/edge")
    @with_workspace
    def api_remove_edge(ws):
        data = _body()
        ws.graph.remove_edge(str(data.get("a")), str(data.get("b")))
        return graph_changed(ws)

    @app.post("/api/graph/reset")
    @with_workspace
    def api_reset_graph(ws):
        ws.graph.reset()
        return graph_changed(ws)

    @app.post("/api/graph/example")
    @with_workspace
    def api_load_example(ws):
        g = load_example(_body().get("name", ""))
        if g is None:
            return _error("Unknown example")
        ws.graph.reset()
        for nid in g.node_ids():
            ws.graph.add_node(nid, label=g.label_of(nid))
        for a, b, w in g.edges():
            ws.graph.add_edge(a, b, w)
        return graph_changed(ws)

    @app.post("/api/graph/import")
    @with_workspace
    def api_import_graph(ws):
        try:
            g = WeightedGraph.from_adjacency_list(_body().get("text", ""))
        except ValueError as e:
            return _error(str(e))
        if not all(_valid_weight(w) for _, _, w in g.edges()):
            return _error("Weights must be positive finite numbers")
        ws.graph.reset()
        for nid in g.node_ids():
            ws.graph.add_node(nid)
        for a, b, w in g.edges():
            ws.graph.add_edge(a, b, w)
        return graph_changed(ws)


# ---------------------------------------------------------------------------
# API: Run & step navigation
# ---------------------------------------------------------------------------
def _register_run_routes(app: Flask) -> None:

    @app.post("/api/run")
    @with_workspace
    def api_run(ws):
        data = _body()
        start  = data.get("start")
        finish = data.get("finish", ws.finish)

        # in prediction mode the run uses the prediction's endpoints
        if ws.prediction.is_active:
            start = ws.prediction.path[0]
            finish = ws.finish

        if not _node_ids(start, finish):
            return _error("start and finish must be node ids")

        rec = Recorder()
        try:
            rec.start(ws.graph, start, finish)
        except RunInputError as e:
            return _error(str(e))
        rec.run_to_completion()

        ws.recorder = rec
        ws.finish   = finish
        ws.playback.start(rec.run)
        return jsonify(playback_state(ws))

    @app.post("/api/step/next")
    @with_workspace
    def api_step_next(ws):
        ws.playback.step_forward()
        return jsonify(playback_state(ws))

    @app.post("/api/step/prev")
    @with_workspace
    def api_step_prev(ws):
        ws.playback.step_backward()
        return jsonify(playback_state(ws))

    @app.post("/api/step/end")
    @with_workspace
    def api_step_end(ws):
        ws.playback.skip_to_end()
        return jsonify(playback_state(ws))

    @app.post("/api/step/stop")
    @with_workspace
    def api_step_stop(ws):
        ws.end_run()
        return jsonify(playback_state(ws))

    @app.post("/api/step/pause")
    @with_workspace
    def api_step_pause(ws):
        ws.playback.pause()
        return jsonify(playback_state(ws))

    @app.post("/api/step/resume")
    @with_workspace
    def api_step_resume(ws):
        ws.playback.resume()
        return jsonify(playback_state(ws))

    @app.post("/api/step/toggle")
    @with_workspace
    def api_step_toggle(ws):
        ws.playback.toggle()
        return jsonify(playback_state(ws))

    @app.post("/api/speed")
    @with_workspace
    def api_speed(ws):
        data = _body()
        if "preset" in data:
            if data["preset"] not in SPEED_PRESETS:
                return _error("Unknown speed preset")
            ws.playback.set_speed(data["preset"])
        elif "interval_ms" in data:
            try:
                ws.playback.set_autorun_interval(int(data["interval_ms"]))
            except (TypeError, ValueError):
                return _error("interval_ms must be an integer")
        else:
            return _error("Give a preset or interval_ms")
        return jsonify(playback_state(ws))

    @app.get("/api/state")
    @with_workspace
    def api_state(ws):
        ws.scheduler.tick()
        return jsonify(playback_state(ws))


# ---------------------------------------------------------------------------
# API: Prediction mode
# ---------------------------------------------------------------------------
def _register_prediction_routes(app: Flask) -> None:

    @app.post("/api/predict/start")
    @with_workspace
    def api_predict_start(ws):
        data = _body()
        start, finish = data.get("start"), data.get("finish")
        if not _node_ids(start, finish):
            return _error("start and finish must be node ids")
        for node in (start, finish):
            if not ws.graph.has_node(node):
                return _error(f"Node {node!r} is not in the graph")
        ws.end_run()
        ws.prediction.start(start)
        ws.finish = finish
        return jsonify(prediction_state(ws))

    @app.post("/api/predict/extend")
    @with_workspace
    def api_predict_extend(ws):
        if not ws.prediction.is_active:
            abort(409)
        try:
            ws.prediction.extend(str(_body().get("node")))
        except AdjacencyError as e:
            return _error(str(e))
        return jsonify(prediction_state(ws))

    @app.post("/api/predict/retract")
    @with_workspace
    def api_predict_retract(ws):
        if not ws.prediction.is_active:
            abort(409)
        ws.prediction.retract()
        return jsonify(prediction_state(ws))

    @app.get("/api/predict")
    @with_workspace
    def api_predict(ws):
        return jsonify(prediction_state(ws))


# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app = create_app()
    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    app.run(debug=True, port=5000)
