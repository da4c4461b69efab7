"""
Pytest configuration for WikiGraph tests.

Puts the project root on sys.path so the top-level modules import directly.
"""

import sys
import os

import networkx as nx
import pytest

_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)


@pytest.fixture
def star_graph():
    """Article 'Root' linking to 'Leaf 0' .. 'Leaf 14'."""
    from graph_model import build_graph
    return build_graph("Root", [f"Leaf {i}" for i in range(15)])


@pytest.fixture
def pair_graph():
    graph = nx.DiGraph()
    graph.add_node("a", label="A")
    graph.add_node("b", label="B")
    graph.add_edge("a", "b")
    return graph
