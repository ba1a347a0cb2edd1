"""
Finite Graph Loading Tests
==========================

Run: python -m pytest tests/core/test_graph.py -v
"""

import pytest

from lattice_codes.builders import FiniteGraph, parse_graph, load_graph
from lattice_codes.spec import GraphLoadError, FILE_OPEN, INVALID_FORMAT


def test_parse_path_graph():
    """F1.1: vertices numbered by first appearance, adjacency sorted."""
    g = parse_graph("b:a\nb:c  c:d\n")
    assert g.labels == ["b", "a", "c", "d"]
    assert g.adj == [[1, 2], [0], [0, 3], [2]]
    assert len(g) == 4


def test_repeated_edges_collapse():
    """F1.2: a:b and b:a are the same edge."""
    g = parse_graph("a:b b:a a:b")
    assert g.adj == [[1], [0]]


def test_solution_sorted_labels():
    """F1.3: solution() lists detector labels in sorted order."""
    g = parse_graph("z:y y:x")
    g.detectors.update({0, 2})
    assert g.solution() == ["x", "z"]


@pytest.mark.parametrize("text,match", [
    ("a:a", "reflexive"),
    ("ab", "without a ':'"),
    ("a:b:c", "multiple ':'"),
    (":b", "empty vertex label"),
    ("a:", "empty vertex label"),
])
def test_invalid_format(text, match):
    """F1.4: malformed edge lists."""
    with pytest.raises(GraphLoadError, match=match) as exc:
        parse_graph(text)
    assert exc.value.reason == INVALID_FORMAT


def test_mismatched_construction():
    """F1.5: labels and adjacency must line up."""
    with pytest.raises(ValueError):
        FiniteGraph(["a"], [])


def test_load(tmp_path):
    """F1.6: load_graph from disk, FILE_OPEN when missing."""
    path = tmp_path / "p4.txt"
    path.write_text("a:b b:c c:d\n")
    assert len(load_graph(path)) == 4

    with pytest.raises(GraphLoadError) as exc:
        load_graph(tmp_path / "missing.txt")
    assert exc.value.reason == FILE_OPEN
