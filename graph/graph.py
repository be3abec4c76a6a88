"""
graph.py — Weighted Undirected Graph
=====================================
Single source of truth for the graph the learner builds.  The host UI
mutates it; the Dijkstra engine only ever reads a copy of it.

Responsibilities:
  1. CRUD on nodes & edges                  (add / remove / reset)
  2. Adjacency queries                      (neighbours, weight, …)
  3. Import from an adjacency-list string   (text → graph)

Design decisions:
  - Storage is a plain nested dict  `_adj[node_id][neighbour_id] → weight`.
    Every edge is written in both directions so the relation is always
    symmetric; `add_edge` on an existing pair simply overwrites the weight.
  - Mutations never raise.  Removing something that is not there is a
    no-op, adding an edge auto-creates missing endpoints.
  - Labels live beside the adjacency map.  Ids are what algorithms see,
    labels are what the learner sees.
"""

from typing import Dict, List, Tuple, Optional, Iterator


class WeightedGraph:
    """
    Attributes:
        _adj    : {node_id: {neighbour_id: weight}}
        _labels : {node_id: display label}
    """

    def __init__(self):
        self._adj:    Dict[str, Dict[str, float]] = {}
        self._labels: Dict[str, str]              = {}

    # ==================================================================
    # NODE CRUD
    # ==================================================================
    def add_node(self, node_id: str, label: Optional[str] = None) -> None:
        self._adj.setdefault(node_id, {})
        if label is not None:
            self._labels[node_id] = label

    def remove_node(self, node_id: str) -> None:
        if node_id not in self._adj:
            return
        # remove every edge touching this node
        for nbr in list(self._adj[node_id]):
            self.remove_edge(node_id, nbr)
        del self._adj[node_id]
        self._labels.pop(node_id, None)

    # ==================================================================
    # EDGE CRUD
    # ==================================================================
    def add_edge(self, a: str, b: str, weight: float) -> None:
        self.add_node(a)
        self.add_node(b)
        self._adj[a][b] = weight
        self._adj[b][a] = weight

    def remove_edge(self, a: str, b: str) -> None:
        self._adj.get(a, {}).pop(b, None)
        self._adj.get(b, {}).pop(a, None)

    def reset(self) -> None:
        self._adj.clear()
        self._labels.clear()

    # ==================================================================
    # ADJACENCY QUERIES
    # ==================================================================
    def has_node(self, node_id: str) -> bool:
        return node_id in self._adj

    def has_edge(self, a: str, b: str) -> bool:
        return b in self._adj.get(a, {})

    def weight(self, a: str, b: str) -> Optional[float]:
        """Weight of the a ↔ b edge, None if they are not adjacent."""
        return self._adj.get(a, {}).get(b)

    def neighbours(self, node_id: str) -> List[Tuple[str, float]]:
        """Return [(neighbour_id, weight)] in insertion order."""
        return list(self._adj.get(node_id, {}).items())

    def edges(self) -> Iterator[Tuple[str, str, float]]:
        """Each undirected edge exactly once, as (a, b, weight)."""
        seen = set()
        for a, nbrs in self._adj.items():
            for b, w in nbrs.items():
                key = frozenset((a, b))
                if key in seen:
                    continue
                seen.add(key)
                yield a, b, w

    def label_of(self, node_id: str) -> str:
        return self._labels.get(node_id, node_id)

    def adjacency(self) -> Dict[str, Dict[str, float]]:
        """Independent copy of the adjacency map."""
        return {nid: dict(nbrs) for nid, nbrs in self._adj.items()}

    def copy(self) -> "WeightedGraph":
        g = WeightedGraph()
        g._adj    = self.adjacency()
        g._labels = dict(self._labels)
        return g

    # ==================================================================
    # IMPORT
    # ==================================================================
    @classmethod
    def from_adjacency_list(cls, text: str) -> "WeightedGraph":
        """
        Parse a simple text adjacency list.

        Supported formats (one node per line):
            A: B(5) C(20)       → A–B weight 5, A–C weight 20
            B -> C(10)          → alternate arrow syntax
            D:                  → isolated node

        A target without an explicit weight gets weight 1.  Repeating an
        edge on the other endpoint's line overwrites it with the same value.
        """
        g = cls()
        for line in text.strip().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            if ":" in line:
                src, rest = line.split(":", 1)
            elif "->" in line:
                src, rest = line.split("->", 1)
            else:
                raise ValueError(f"Cannot parse adjacency line: {line!r}")

            src = src.strip()
            g.add_node(src)

            for token in rest.replace(",", " ").split():
                if "(" in token and token.endswith(")"):
                    tgt, w_str = token[:-1].split("(", 1)
                    weight = float(w_str)
                else:
                    tgt, weight = token, 1.0
                g.add_edge(src, tgt, weight)
        return g

    # ==================================================================
    # UTILITY
    # ==================================================================
    def node_ids(self) -> List[str]:
        return list(self._adj.keys())

    def node_count(self) -> int:
        return len(self._adj)

    def edge_count(self) -> int:
        return sum(1 for _ in self.edges())

    def is_empty(self) -> bool:
        return not self._adj

    def to_dict(self) -> dict:
        return {
            "nodes": [{"id": nid, "label": self.label_of(nid)} for nid in self._adj],
            "edges": [{"a": a, "b": b, "weight": w} for a, b, w in self.edges()],
        }

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._adj

    def __repr__(self) -> str:
        return f"WeightedGraph(nodes={self.node_count()}, edges={self.edge_count()})"
