"""
decisions.py — What the algorithm is doing right now
=====================================================
Every snapshot carries exactly one decision.  The set is closed: these ten
classes are the only states the instrumented Dijkstra run can be in, and
each carries only the fields that make sense for that state.

Each class also exposes:
  • kind            – stable string tag (used by the JSON API / renderer)
  • pseudocode_line – index into `algorithms.dijkstra.PSEUDOCODE`
  • is_terminal     – True for the two states a run can end in
"""

from dataclasses import dataclass, fields
from typing import Any, ClassVar, Dict, Tuple, Union

from algorithms.cost import Cost


@dataclass(frozen=True)
class _Decision:
    kind:            ClassVar[str]  = ""
    pseudocode_line: ClassVar[int]  = 0
    is_terminal:     ClassVar[bool] = False

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"kind": self.kind}
        for f in fields(self):
            value = getattr(self, f.name)
            data[f.name] = list(value) if isinstance(value, tuple) else value
        return data


@dataclass(frozen=True)
class Initialized(_Decision):
    kind            = "initialized"
    pseudocode_line = 2


@dataclass(frozen=True)
class Visiting(_Decision):
    kind            = "visiting"
    pseudocode_line = 4

    node:     str
    priority: float


@dataclass(frozen=True)
class EvaluatingNeighbor(_Decision):
    kind            = "evaluating_neighbor"
    pseudocode_line = 9

    neighbor:         str
    weight:           float
    cost_to_neighbor: float


@dataclass(frozen=True)
class ImprovementFound(_Decision):
    kind            = "improvement_found"
    pseudocode_line = 10

    neighbor:         str
    cost_to_neighbor: float
    previous_cost:    Cost


@dataclass(frozen=True)
class ImprovementApplied(_Decision):
    kind            = "improvement_applied"
    pseudocode_line = 12

    neighbor:         str
    cost_to_neighbor: float


@dataclass(frozen=True)
class NoImprovement(_Decision):
    kind            = "no_improvement"
    pseudocode_line = 10

    neighbor:         str
    cost_to_neighbor: float
    best_cost:        float


@dataclass(frozen=True)
class DestinationReached(_Decision):
    kind            = "destination_reached"
    pseudocode_line = 5

    node: str
    cost: float


@dataclass(frozen=True)
class PathBacktrackStep(_Decision):
    kind            = "path_backtrack_step"
    pseudocode_line = 6

    node:    str
    partial: Tuple[str, ...]   # still reversed: finish first


@dataclass(frozen=True)
class Completed(_Decision):
    kind            = "completed"
    pseudocode_line = 7
    is_terminal     = True

    path:       Tuple[str, ...]
    total_cost: float


@dataclass(frozen=True)
class NoPathFound(_Decision):
    kind            = "no_path_found"
    pseudocode_line = 13
    is_terminal     = True


Decision = Union[
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
]
