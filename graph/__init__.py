"""
graph/
-----
Core data layer.  Public API:

    from graph import WeightedGraph
    from graph import EXAMPLE_GRAPHS, load_example
"""

from graph.graph    import WeightedGraph
from graph.examples import EXAMPLE_GRAPHS, list_examples, load_example

__all__ = [
    "WeightedGraph",
    "EXAMPLE_GRAPHS",
    "list_examples",
    "load_example",
]
