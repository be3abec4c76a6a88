import pytest

from graph import WeightedGraph


class FakeClock:
    """Hand-cranked replacement for time.monotonic."""

    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def triangle() -> WeightedGraph:
    # A–B (5), B–C (10), A–C (20)
    g = WeightedGraph()
    g.add_edge("A", "B", 5)
    g.add_edge("B", "C", 10)
    g.add_edge("A", "C", 20)
    return g


@pytest.fixture
def disconnected() -> WeightedGraph:
    g = WeightedGraph()
    g.add_node("X")
    g.add_node("Y")
    return g


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
