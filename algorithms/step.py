"""
step.py — Algorithm Snapshot
=============================
The Dijkstra generator yields one AlgorithmSnapshot per decision.  A
snapshot is a frozen-in-time picture of everything the visualizer needs
to render one frame:

    • The cost table       (best-known distance from the start, per node)
    • The frontier         (priority-queue contents, lowest first)
    • The predecessor table (back-pointers used to rebuild the path)
    • The current node
    • The decision being made, as one of the classes in `decisions.py`

Design decisions:
  - Snapshots are SELF-CONTAINED.  `capture()` builds fresh dicts from the
    live run state and wraps them in read-only mapping proxies, so the
    playback controller can jump to any snapshot in any order and nothing
    the run does afterwards can leak in.
  - Unreached costs are stored as the `UNREACHED` sentinel and reported
    as `inf` through `cost_of()`.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from algorithms.cost import Cost, UNREACHED, as_number
from algorithms.decisions import Decision
from algorithms.frontier import FrontierEntry


@dataclass(frozen=True)
class TableRow:
    """One line of the per-node table shown next to the graph."""
    node:        str
    cost:        float
    priority:    Optional[float]
    predecessor: Optional[str]
    is_current:  bool
    is_neighbor: bool


@dataclass(frozen=True)
class AlgorithmSnapshot:
    """
    Attributes:
        index        : 0-based position of this snapshot in the run.
        costs        : {node_id: cost or UNREACHED}  (read-only)
        frontier     : Frontier entries, lowest priority first.
        predecessors : {node_id: predecessor_id or None}  (read-only)
        current      : Node under consideration, None before the first visit.
        decision     : What the algorithm is doing at this instant.
    """

    index:        int
    costs:        Mapping[str, Cost]
    frontier:     Tuple[FrontierEntry, ...]
    predecessors: Mapping[str, Optional[str]]
    current:      Optional[str]
    decision:     Decision

    @classmethod
    def capture(
        cls,
        index: int,
        costs: Dict[str, Cost],
        frontier: Iterable[FrontierEntry],
        predecessors: Dict[str, Optional[str]],
        current: Optional[str],
        decision: Decision,
    ) -> "AlgorithmSnapshot":
        return cls(
            index=index,
            costs=MappingProxyType(dict(costs)),
            frontier=tuple(frontier),
            predecessors=MappingProxyType(dict(predecessors)),
            current=current,
            decision=decision,
        )

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------
    @property
    def kind(self) -> str:
        return self.decision.kind

    @property
    def is_terminal(self) -> bool:
        return self.decision.is_terminal

    def cost_of(self, node_id: str) -> float:
        """Best-known cost; unreached nodes report `inf`."""
        return as_number(self.costs.get(node_id, UNREACHED))

    def priority_of(self, node_id: str) -> Optional[float]:
        """Lowest priority this node holds in the frontier, if any."""
        for entry in self.frontier:
            if entry.node == node_id:
                return entry.priority
        return None

    def frontier_nodes(self) -> List[str]:
        return [e.node for e in self.frontier]

    def path_to(self, node_id: str) -> List[str]:
        """Follow predecessor pointers back from node_id, returned start-first."""
        path: List[str] = []
        cur: Optional[str] = node_id
        while cur is not None:
            path.append(cur)
            cur = self.predecessors.get(cur)
        path.reverse()
        return path

    def table(self, node_order: Optional[Iterable[str]] = None) -> List[TableRow]:
        neighbor = getattr(self.decision, "neighbor", None)
        return [
            TableRow(
                node=nid,
                cost=self.cost_of(nid),
                priority=self.priority_of(nid),
                predecessor=self.predecessors.get(nid),
                is_current=nid == self.current,
                is_neighbor=nid == neighbor,
            )
            for nid in (node_order if node_order is not None else self.costs)
        ]
