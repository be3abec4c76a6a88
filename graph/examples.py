"""
examples.py — Pre-made Graphs
=============================
The "Load Example" button.  Each entry is an adjacency-list string in the
format understood by `WeightedGraph.from_adjacency_list`, plus labels so
the learner sees place names instead of ids.
"""

from typing import Dict, List, Optional

from graph.graph import WeightedGraph


EXAMPLE_GRAPHS: Dict[str, dict] = {
    "triangle": {
        "adjacency": """
            A: B(5) C(20)
            B: C(10)
        """,
        "labels": {},
    },
    "detour": {
        "adjacency": """
            0: 1(4) 2(1)
            1: 3(1)
            2: 1(2) 3(5)
            3: 4(3)
        """,
        "labels": {"0": "Home", "1": "Park", "2": "Shop", "3": "School", "4": "Library"},
    },
    "islands": {
        "adjacency": """
            0: 1(2) 2(6)
            1: 2(3)
            3: 4(1)
        """,
        "labels": {"0": "North", "1": "East", "2": "West", "3": "Harbour", "4": "Lighthouse"},
    },
    "grid": {
        "adjacency": """
            0: 1(7) 3(2)
            1: 2(1) 4(3)
            2: 5(8)
            3: 4(6) 6(1)
            4: 5(2) 7(4)
            5: 8(1)
            6: 7(9)
            7: 8(2)
        """,
        "labels": {},
    },
}


def list_examples() -> List[str]:
    return list(EXAMPLE_GRAPHS.keys())


def load_example(name: str) -> Optional[WeightedGraph]:
    """Build a fresh WeightedGraph for the named example, or None."""
    entry = EXAMPLE_GRAPHS.get(name)
    if entry is None:
        return None
    g = WeightedGraph.from_adjacency_list(entry["adjacency"])
    for node_id, label in entry["labels"].items():
        g.add_node(node_id, label=label)
    return g
