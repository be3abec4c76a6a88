"""
cost.py — The "unreached" cost sentinel
========================================
Every node except the source starts the run with an unknown distance.
Rather than storing `float("inf")` (which silently turns into `null` or
`Infinity` depending on who serialises it) the cost table stores the
`UNREACHED` singleton:

    • it compares greater than every number, so `new_cost < cost[nbr]`
      needs no special case;
    • `float(UNREACHED)` is `inf`, which is what inspectors report;
    • it is immutable and never equal to a number.
"""

import math
from functools import total_ordering
from numbers import Real
from typing import Union


@total_ordering
class _Unreached:
    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __eq__(self, other) -> bool:
        return other is self

    def __lt__(self, other) -> bool:
        if other is self:
            return False
        if isinstance(other, Real):
            return False
        return NotImplemented

    def __gt__(self, other) -> bool:
        if other is self:
            return False
        if isinstance(other, Real):
            return True
        return NotImplemented

    def __hash__(self) -> int:
        return hash("UNREACHED")

    def __float__(self) -> float:
        return math.inf

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __reduce__(self):
        return (_Unreached, ())

    def __repr__(self) -> str:
        return "UNREACHED"

    def __str__(self) -> str:
        return "∞"


UNREACHED = _Unreached()

Cost = Union[float, _Unreached]


def as_number(cost: Cost) -> float:
    """Numeric view of a cost table entry: unreached → inf."""
    return math.inf if cost is UNREACHED else cost


def is_reached(cost: Cost) -> bool:
    return cost is not UNREACHED
