"""
Unit tests for PriorityFrontier and the UNREACHED cost sentinel.
"""

import copy
import math

from algorithms import PriorityFrontier, FrontierEntry, UNREACHED, as_number, is_reached


def test_extract_min_returns_lowest_priority():
    f = PriorityFrontier()
    f.insert("C", 20)
    f.insert("A", 0)
    f.insert("B", 5)
    assert f.extract_min() == FrontierEntry("A", 0)
    assert f.extract_min() == FrontierEntry("B", 5)
    assert f.extract_min() == FrontierEntry("C", 20)
    assert f.is_empty()


def test_ties_come_out_in_insertion_order():
    f = PriorityFrontier()
    for node in ["X", "Y", "Z"]:
        f.insert(node, 3)
    f.insert("W", 1)
    assert [e.node for e in f.entries()] == ["W", "X", "Y", "Z"]


def test_empty_frontier_returns_none():
    f = PriorityFrontier()
    assert f.extract_min() is None
    assert f.peek_min() is None
    assert len(f) == 0


def test_peek_does_not_remove():
    f = PriorityFrontier()
    f.insert("A", 1)
    assert f.peek_min() == FrontierEntry("A", 1)
    assert len(f) == 1


def test_duplicate_entries_are_kept():
    f = PriorityFrontier()
    f.insert("C", 20)
    f.insert("C", 15)
    assert f.entries() == (FrontierEntry("C", 15), FrontierEntry("C", 20))


def test_entries_is_a_copy():
    f = PriorityFrontier()
    f.insert("A", 1)
    held = f.entries()
    f.extract_min()
    assert held == (FrontierEntry("A", 1),)


# ---------------------------------------------------------------------------
# UNREACHED
# ---------------------------------------------------------------------------
def test_unreached_is_larger_than_any_number():
    assert 10 ** 12 < UNREACHED
    assert UNREACHED > 0.5
    assert not (UNREACHED < 3)
    assert not (7 >= UNREACHED)
    assert sorted([UNREACHED, 3, 1.5]) == [1.5, 3, UNREACHED]


def test_unreached_equals_only_itself():
    assert UNREACHED == UNREACHED
    assert UNREACHED != math.inf
    assert not (UNREACHED > UNREACHED)


def test_unreached_reports_infinity():
    assert float(UNREACHED) == math.inf
    assert as_number(UNREACHED) == math.inf
    assert as_number(4) == 4
    assert not is_reached(UNREACHED)
    assert is_reached(0)


def test_unreached_survives_copying():
    assert copy.deepcopy(UNREACHED) is UNREACHED
    assert copy.copy({"A": UNREACHED})["A"] is UNREACHED
