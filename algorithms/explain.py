"""
explain.py — Learning Mode text
================================
Turns a snapshot into the plain-English "what is happening and why"
paragraph shown beside the graph.  Pure function of the snapshot plus a
label lookup; it never touches the run.
"""

from typing import Callable, Optional

from algorithms.cost import as_number
from algorithms.step import AlgorithmSnapshot
from algorithms.decisions import (
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


def _fmt(value) -> str:
    number = as_number(value)
    if number == float("inf"):
        return "∞"
    if float(number).is_integer():
        return str(int(number))
    return f"{number:g}"


def explain(
    snapshot: AlgorithmSnapshot,
    start: str,
    label: Optional[Callable[[str], str]] = None,
) -> str:
    name = label or (lambda nid: nid)
    d = snapshot.decision
    cur = snapshot.current

    if isinstance(d, Initialized):
        return (
            f"Initialised the tables. Every node starts at cost ∞ except the start "
            f"'{name(start)}' at 0, which is the only entry in the frontier."
        )

    if isinstance(d, Visiting):
        return (
            f"Take the frontier entry with the lowest priority: '{name(d.node)}' "
            f"(priority {_fmt(d.priority)})."
        )

    if isinstance(d, EvaluatingNeighbor):
        return (
            f"Neighbour '{name(d.neighbor)}' of '{name(cur)}': cost from '{name(start)}' "
            f"via '{name(cur)}' = {_fmt(snapshot.cost_of(cur))} + {_fmt(d.weight)} = "
            f"{_fmt(d.cost_to_neighbor)}; best known so far = "
            f"{_fmt(snapshot.cost_of(d.neighbor))}."
        )

    if isinstance(d, ImprovementFound):
        return (
            f"Since {_fmt(d.cost_to_neighbor)} < {_fmt(d.previous_cost)}, the route through "
            f"'{name(cur)}' is cheaper: update '{name(d.neighbor)}'."
        )

    if isinstance(d, ImprovementApplied):
        return (
            f"Updated '{name(d.neighbor)}': cost {_fmt(d.cost_to_neighbor)}, reached from "
            f"'{name(cur)}', queued at priority {_fmt(d.cost_to_neighbor)}."
        )

    if isinstance(d, NoImprovement):
        return (
            f"Since {_fmt(d.cost_to_neighbor)} is not < {_fmt(d.best_cost)}, "
            f"'{name(d.neighbor)}' keeps its current entry."
        )

    if isinstance(d, DestinationReached):
        return (
            f"Current node '{name(d.node)}' is the destination, so its cost "
            f"{_fmt(d.cost)} is final: we've found a solution!"
        )

    if isinstance(d, PathBacktrackStep):
        trail = " ← ".join(name(n) for n in d.partial)
        return (
            f"Walk back from the destination through the predecessor table. "
            f"At '{name(d.node)}'; collected so far: {trail}."
        )

    if isinstance(d, Completed):
        route = " → ".join(name(n) for n in d.path)
        return f"Reverse the list and we have the shortest path (cost = {_fmt(d.total_cost)}): {route}."

    if isinstance(d, NoPathFound):
        return (
            "The frontier is empty and the destination was never reached. "
            "No edges connect it to the start, so there is no path."
        )

    raise TypeError(f"Unknown decision: {d!r}")
