"""
dijkstra.py — Instrumented Dijkstra
====================================
Generator-based Dijkstra over a WeightedGraph.  Yields an
AlgorithmSnapshot at every decision point:

  1. Initialised cost table / frontier          →  Initialized
  2. Peek the cheapest frontier entry            →  Visiting
  3. Each neighbour of the current node          →  EvaluatingNeighbor
  4. Strictly cheaper route found (before write) →  ImprovementFound
  5. Tables + frontier updated                   →  ImprovementApplied
  6. Not cheaper                                 →  NoImprovement
  7. Finish node dequeued                        →  DestinationReached
  8. Walk back along predecessors                →  PathBacktrackStep (per node)
  9. Path reversed, cost known                   →  Completed
 10. Frontier empty, finish never dequeued       →  NoPathFound

The frontier is a sorted list rather than a heap so that ties are broken
by insertion order, and stale entries are visited again exactly as they
were queued.  Revisiting is harmless: the strict `<` means a finalised
node can never be improved.

Correctness note: Dijkstra requires non-negative weights.  The engine
does not check; the graph editor only accepts positive weights.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Generator, List, Optional, Tuple

from graph import WeightedGraph
from algorithms.cost import Cost, UNREACHED
from algorithms.frontier import PriorityFrontier
from algorithms.step import AlgorithmSnapshot
from algorithms.decisions import (
    Decision,
    Initialized,
    Visiting,
    EvaluatingNeighbor,
    ImprovementFound,
    ImprovementApplied,
    NoImprovement,
    DestinationReached,
    PathBacktrackStep,
    Completed,
    NoPathFound,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def Dijkstra(graph, start, finish):",                      # 0
    "    cost ← {v: ∞ for v in V};  cost[start] ← 0",           # 1
    "    prev ← {v: None for v in V};  frontier ← [(start, 0)]",  # 2
    "    while frontier is not empty:",                          # 3
    "        current ← frontier.pop_min()",                      # 4
    "        if current == finish:",                             # 5
    "            walk prev[] from finish back to start",         # 6
    "            return reversed(path), cost[finish]",           # 7
    "        for neighbour in adj(current):",                    # 8
    "            new_cost ← cost[current] + w(current, neighbour)",  # 9
    "            if new_cost < cost[neighbour]:",                # 10
    "                cost[neighbour] ← new_cost;  prev[neighbour] ← current",  # 11
    "                frontier.push((neighbour, new_cost))",      # 12
    "    return NOT FOUND",                                      # 13
]


class RunInputError(ValueError):
    """Start / finish missing from the graph, or the graph is empty."""


@dataclass(frozen=True)
class RunResult:
    path:       Tuple[str, ...] = ()
    total_cost: float           = 0.0

    @property
    def found(self) -> bool:
        return bool(self.path)


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def dijkstra(
    graph: WeightedGraph,
    start: str,
    finish: str,
) -> Generator[AlgorithmSnapshot, None, RunResult]:
    """
    Validate the inputs now, then return the snapshot generator.

    The generator's return value (StopIteration.value) is the RunResult.
    """
    _validate(graph, start, finish)
    return _search(graph.adjacency(), start, finish)


def _validate(graph: WeightedGraph, start: str, finish: str) -> None:
    if graph.is_empty():
        raise RunInputError("Graph is empty: add some nodes before running.")
    missing = [n for n in (start, finish) if not graph.has_node(n)]
    if missing:
        raise RunInputError(f"Node(s) not in graph: {', '.join(map(repr, missing))}")


def _search(
    adj: Dict[str, Dict[str, float]],
    start: str,
    finish: str,
) -> Generator[AlgorithmSnapshot, None, RunResult]:

    cost:     Dict[str, Cost]          = {nid: UNREACHED for nid in adj}
    prev:     Dict[str, Optional[str]] = {nid: None for nid in adj}
    frontier: PriorityFrontier         = PriorityFrontier()
    current:  Optional[str]            = None
    index = 0

    def snap(decision: Decision) -> AlgorithmSnapshot:
        nonlocal index
        s = AlgorithmSnapshot.capture(index, cost, frontier.entries(), prev, current, decision)
        index += 1
        return s

    # --- init ---
    cost[start] = 0
    frontier.insert(start, 0)
    yield snap(Initialized())

    # --- main loop ---
    while not frontier.is_empty():
        head = frontier.peek_min()
        current = head.node
        # snapshot before dequeue so the frontier still shows the head
        yield snap(Visiting(node=current, priority=head.priority))
        frontier.extract_min()

        if current == finish:
            yield snap(DestinationReached(node=current, cost=cost[current]))

            reversed_path: List[str] = []
            while current is not None:
                reversed_path.append(current)
                yield snap(PathBacktrackStep(node=current, partial=tuple(reversed_path)))
                if prev[current] is None:
                    break
                current = prev[current]

            path = tuple(reversed(reversed_path))
            result = RunResult(path=path, total_cost=cost[finish])
            yield snap(Completed(path=path, total_cost=result.total_cost))
            return result

        for nbr, weight in adj[current].items():
            new_cost = cost[current] + weight
            yield snap(EvaluatingNeighbor(neighbor=nbr, weight=weight, cost_to_neighbor=new_cost))

            if new_cost < cost[nbr]:
                yield snap(ImprovementFound(neighbor=nbr, cost_to_neighbor=new_cost, previous_cost=cost[nbr]))
                cost[nbr] = new_cost
                prev[nbr] = current
                frontier.insert(nbr, new_cost)
                yield snap(ImprovementApplied(neighbor=nbr, cost_to_neighbor=new_cost))
            else:
                yield snap(NoImprovement(neighbor=nbr, cost_to_neighbor=new_cost, best_cost=cost[nbr]))

    # --- not found ---
    yield snap(NoPathFound())
    return RunResult()


# ---------------------------------------------------------------------------
# Run-to-completion wrapper
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class DijkstraRun:
    start:     str
    finish:    str
    snapshots: Tuple[AlgorithmSnapshot, ...]
    result:    RunResult

    @property
    def last_index(self) -> int:
        return len(self.snapshots) - 1

    @property
    def final(self) -> AlgorithmSnapshot:
        return self.snapshots[-1]

    @property
    def no_path(self) -> bool:
        return isinstance(self.final.decision, NoPathFound)

    def __len__(self) -> int:
        return len(self.snapshots)


class ShortestPathEngine:
    """
    Exhausts the generator up front: every snapshot is computed before
    playback begins, trading memory for free rewinding.

        run = ShortestPathEngine(graph, "A", "C").run()
        run.result.path          # ("A", "B", "C")
        run.snapshots[0].kind    # "initialized"
    """

    def __init__(self, graph: WeightedGraph, start: str, finish: str):
        self._gen   = dijkstra(graph, start, finish)
        self.start  = start
        self.finish = finish

    def run(self) -> DijkstraRun:
        if self._gen is None:
            raise RuntimeError("ShortestPathEngine.run() can only be called once.")
        snapshots: List[AlgorithmSnapshot] = []
        gen, self._gen = self._gen, None
        while True:
            try:
                snapshots.append(next(gen))
            except StopIteration as stop:
                result = stop.value
                break
        logger.info(
            "dijkstra %s → %s: %d snapshots, %s",
            self.start, self.finish, len(snapshots),
            f"cost {result.total_cost}" if result.found else "no path",
        )
        return DijkstraRun(self.start, self.finish, tuple(snapshots), result)
