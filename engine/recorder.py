"""
recorder.py — Run Recorder & Analytics
========================================
Records a complete Dijkstra run (all snapshots), then computes the
analytics the UI shows once the run is over.

Usage:
    rec = Recorder()
    rec.start(graph=g, start="A", finish="C")   # raises RunInputError on bad input
    rec.run_to_completion()                     # exhausts the engine
    metrics = rec.get_metrics()                 # the analytics card
    rec.export()                                # JSON-ready dump for the front end
"""

import logging
import time
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional

from graph import WeightedGraph
from algorithms import (
    AlgorithmSnapshot,
    DijkstraRun,
    PSEUDOCODE,
    ShortestPathEngine,
    UNREACHED,
    explain,
)
from algorithms.decisions import EvaluatingNeighbor, ImprovementApplied, Visiting

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Metrics dataclass — what the Analytics panel renders
# ---------------------------------------------------------------------------
@dataclass
class RunMetrics:
    start:                str   = ""
    finish:               str   = ""
    nodes_visited:        int   = 0      # distinct nodes taken off the frontier
    neighbours_evaluated: int   = 0
    improvements:         int   = 0
    path_length:          int   = 0      # number of edges on the final path
    path_cost:            float = 0.0
    total_steps:          int   = 0      # number of snapshots
    wall_time_ms:         float = 0.0
    path_found:           bool  = False


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder:
    """
    Attributes:
        run     : The DijkstraRun (available after run_to_completion).
        metrics : Computed RunMetrics (available after run_to_completion).
    """

    def __init__(self):
        self.run:     Optional[DijkstraRun] = None
        self.metrics: Optional[RunMetrics]  = None

        self._engine: Optional[ShortestPathEngine] = None
        self.graph:   Optional[WeightedGraph]      = None

    # ------------------------------------------------------------------
    # Setup & run
    # ------------------------------------------------------------------
    def start(self, graph: WeightedGraph, start: str, finish: str) -> None:
        """Validate inputs and prepare the engine.  Nothing is computed yet."""
        self._engine = ShortestPathEngine(graph, start, finish)
        self.graph   = graph.copy()
        self.run     = None
        self.metrics = None

    def run_to_completion(self) -> RunMetrics:
        """Exhaust the engine, keep every snapshot, compute metrics."""
        if self._engine is None:
            raise RuntimeError("Call start() first.")

        t0 = time.monotonic()
        self.run = self._engine.run()
        wall_ms = (time.monotonic() - t0) * 1000
        self._engine = None

        self.metrics = self._compute_metrics(wall_ms)
        logger.debug("run metrics: %s", self.metrics)
        return self.metrics

    def get_metrics(self) -> Optional[RunMetrics]:
        return self.metrics

    # ------------------------------------------------------------------
    # Export (JSON-ready)
    # ------------------------------------------------------------------
    def export(self) -> Dict[str, Any]:
        if self.run is None:
            raise RuntimeError("Nothing recorded yet.")
        return {
            "start":     self.run.start,
            "finish":    self.run.finish,
            "graph":     self.graph.to_dict(),
            "metrics":   asdict(self.metrics),
            "result":    {"path": list(self.run.result.path), "total_cost": self.run.result.total_cost},
            "steps":     [snapshot_to_dict(s, self.run.start, self.graph) for s in self.run.snapshots],
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _compute_metrics(self, wall_ms: float) -> RunMetrics:
        run = self.run
        decisions = [s.decision for s in run.snapshots]

        visited = {d.node for d in decisions if isinstance(d, Visiting)}
        path    = run.result.path

        return RunMetrics(
            start=run.start,
            finish=run.finish,
            nodes_visited=len(visited),
            neighbours_evaluated=sum(isinstance(d, EvaluatingNeighbor) for d in decisions),
            improvements=sum(isinstance(d, ImprovementApplied) for d in decisions),
            path_length=len(path) - 1 if len(path) > 1 else 0,
            path_cost=run.result.total_cost if run.result.found else 0.0,
            total_steps=len(run.snapshots),
            wall_time_ms=round(wall_ms, 2),
            path_found=run.result.found,
        )


# ---------------------------------------------------------------------------
# Snapshot → dict
# ---------------------------------------------------------------------------
def _json_cost(value):
    return "Infinity" if value is UNREACHED else value


def snapshot_to_dict(
    snapshot: AlgorithmSnapshot,
    start: str,
    graph: Optional[WeightedGraph] = None,
) -> Dict[str, Any]:
    """
    Everything the renderer needs for one frame.  Unreached costs are
    written as the string "Infinity" (JSON has no infinity literal).
    """
    label = graph.label_of if graph is not None else None
    order: Optional[List[str]] = graph.node_ids() if graph is not None else None
    decision = {k: _json_cost(v) for k, v in snapshot.decision.to_dict().items()}

    return {
        "index":           snapshot.index,
        "current":         snapshot.current,
        "costs":           {n: _json_cost(c) for n, c in snapshot.costs.items()},
        "frontier":        [{"node": e.node, "priority": e.priority} for e in snapshot.frontier],
        "predecessors":    dict(snapshot.predecessors),
        "decision":        decision,
        "is_terminal":     snapshot.is_terminal,
        "pseudocode_line": snapshot.decision.pseudocode_line,
        "pseudocode":      PSEUDOCODE[snapshot.decision.pseudocode_line],
        "explanation":     explain(snapshot, start, label),
        "table": [
            {
                "node":        row.node,
                "label":       label(row.node) if label else row.node,
                "cost":        "Infinity" if row.cost == float("inf") else row.cost,
                "priority":    row.priority,
                "predecessor": row.predecessor,
                "is_current":  row.is_current,
                "is_neighbor": row.is_neighbor,
            }
            for row in snapshot.table(order)
        ],
    }
