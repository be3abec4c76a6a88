"""
frontier.py — Priority Frontier
================================
The "check list" of Dijkstra: nodes that are known but not yet finalised,
ordered by their best-known cost.

Design decisions:
  - A plain list kept sorted by priority.  `insert` appends then re-sorts
    with Python's stable sort, so entries with equal priority come out in
    the order they went in.  That keeps replays deterministic.
  - No decrease-key.  A node whose cost improves is inserted again; the
    older entry stays behind as a stale duplicate.  The cost table, not
    the frontier, is authoritative.
  - Entries are frozen so snapshots can hold them without copying.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class FrontierEntry:
    node:     str
    priority: float


class PriorityFrontier:
    def __init__(self):
        self._values: List[FrontierEntry] = []

    def insert(self, node: str, priority: float) -> None:
        self._values.append(FrontierEntry(node, priority))
        self._values.sort(key=lambda e: e.priority)

    def extract_min(self) -> Optional[FrontierEntry]:
        if not self._values:
            return None
        return self._values.pop(0)

    def peek_min(self) -> Optional[FrontierEntry]:
        if not self._values:
            return None
        return self._values[0]

    def is_empty(self) -> bool:
        return not self._values

    def entries(self) -> Tuple[FrontierEntry, ...]:
        """Current contents, lowest priority first."""
        return tuple(self._values)

    def clear(self) -> None:
        self._values.clear()

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        inner = ", ".join(f"{e.node}:{e.priority}" for e in self._values)
        return f"PriorityFrontier([{inner}])"
