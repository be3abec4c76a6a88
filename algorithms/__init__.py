"""
algorithms/
-----------
The instrumented shortest-path engine.

    from algorithms import ShortestPathEngine, dijkstra, PSEUDOCODE
    from algorithms import AlgorithmSnapshot, PriorityFrontier, UNREACHED

`dijkstra()` is the raw generator (one snapshot per decision);
`ShortestPathEngine` runs it to completion and hands back a DijkstraRun.
"""

from algorithms.cost      import UNREACHED, as_number, is_reached
from algorithms.frontier  import PriorityFrontier, FrontierEntry
from algorithms.step      import AlgorithmSnapshot, TableRow
from algorithms.explain   import explain
from algorithms.dijkstra  import (
    PSEUDOCODE,
    RunInputError,
    RunResult,
    DijkstraRun,
    ShortestPathEngine,
    dijkstra,
)
from algorithms import decisions

__all__ = [
    "UNREACHED",
    "as_number",
    "is_reached",
    "PriorityFrontier",
    "FrontierEntry",
    "AlgorithmSnapshot",
    "TableRow",
    "explain",
    "PSEUDOCODE",
    "RunInputError",
    "RunResult",
    "DijkstraRun",
    "ShortestPathEngine",
    "dijkstra",
    "decisions",
]
