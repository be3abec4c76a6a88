"""
prediction.py — Prediction Mode
================================
Before watching the algorithm, the learner can click out the path they
think is cheapest.  The evaluator keeps that path and its cost; it knows
nothing about highlighting or rendering.

Design decisions:
  - The path always starts at the run's start node and can never be
    emptied: `retract()` refuses to remove the start.
  - `extend()` checks adjacency itself and raises AdjacencyError rather
    than summing a weight that doesn't exist.  The UI only offers
    `candidates()` anyway, so this only fires on a buggy caller.
  - Cost is recomputed from the graph on every call, using the same
    `WeightedGraph.weight` lookup the engine's adjacency copy came from.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from graph import WeightedGraph
from algorithms import DijkstraRun

logger = logging.getLogger(__name__)


class AdjacencyError(ValueError):
    """Tried to extend the prediction to a node that isn't a neighbour."""


class PredictionEvaluator:
    def __init__(self, graph: WeightedGraph):
        self.graph = graph
        self._path: List[str] = []

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------
    def start(self, start_node: str) -> None:
        if not self.graph.has_node(start_node):
            raise ValueError(f"Start node {start_node!r} is not in the graph.")
        self._path = [start_node]

    def extend(self, node: str) -> None:
        last = self._require_started()
        if not self.graph.has_edge(last, node):
            logger.warning("rejected prediction step %s → %s: not adjacent", last, node)
            raise AdjacencyError(f"{node!r} is not a neighbour of {last!r}.")
        self._path.append(node)

    def retract(self) -> Optional[str]:
        """Drop the last node.  The start node stays; returns None in that case."""
        self._require_started()
        if len(self._path) <= 1:
            return None
        return self._path.pop()

    def reset(self) -> None:
        self._path = []

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def current_cost(self) -> float:
        self._require_started()
        total = 0
        for a, b in zip(self._path, self._path[1:]):
            w = self.graph.weight(a, b)
            if w is None:
                # the graph was edited underneath an existing prediction
                raise AdjacencyError(f"Edge {a!r}–{b!r} no longer exists.")
            total += w
        return total

    def candidates(self) -> List[str]:
        """Neighbours of the last node: the only legal next clicks."""
        return [nbr for nbr, _ in self.graph.neighbours(self._require_started())]

    @property
    def path(self) -> Tuple[str, ...]:
        return tuple(self._path)

    @property
    def last(self) -> Optional[str]:
        return self._path[-1] if self._path else None

    @property
    def is_active(self) -> bool:
        return bool(self._path)

    def _require_started(self) -> str:
        if not self._path:
            raise RuntimeError("Call start() first.")
        return self._path[-1]


# ---------------------------------------------------------------------------
# Prediction vs. algorithm
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class PredictionComparison:
    predicted_path:      Tuple[str, ...]
    predicted_cost:      float
    optimal_path:        Tuple[str, ...]
    optimal_cost:        Optional[float]   # None when there is no path
    reaches_destination: bool

    @property
    def is_optimal(self) -> bool:
        return (
            self.reaches_destination
            and self.optimal_cost is not None
            and self.predicted_cost == self.optimal_cost
        )

    @property
    def difference(self) -> Optional[float]:
        """How much more the prediction costs than the optimum."""
        if not self.reaches_destination or self.optimal_cost is None:
            return None
        return self.predicted_cost - self.optimal_cost


def compare_prediction(prediction: PredictionEvaluator, run: DijkstraRun) -> PredictionComparison:
    found = run.result.found
    return PredictionComparison(
        predicted_path=prediction.path,
        predicted_cost=prediction.current_cost(),
        optimal_path=run.result.path,
        optimal_cost=run.result.total_cost if found else None,
        reaches_destination=prediction.last == run.finish,
    )
