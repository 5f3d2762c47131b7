# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

import pytest

from regkeeper.core.dag import ResourceGraph
from regkeeper.core.exceptions import DAGCycleError, DAGError, DAGValidationError


def _graph(*nodes):
    graph = ResourceGraph()
    for node in nodes:
        graph.add_node(node)
    return graph


def test_simple_graph():
    """Test basic level computation"""
    graph = _graph("a", "b")
    graph.add_edge("a", "b")

    assert graph.get_execution_levels() == [["a"], ["b"]]
    assert graph.direct_dependents_of("a") == ["b"]


def test_parallel_levels():
    """Test independent resources share a level"""
    graph = _graph("a", "b", "c")
    graph.add_edge("a", "c")
    graph.add_edge("b", "c")

    levels = graph.get_execution_levels()
    assert levels == [["a", "b"], ["c"]]


def test_levels_keep_insertion_order():
    graph = _graph("z", "y", "x")
    assert graph.get_execution_levels() == [["z", "y", "x"]]


def test_cycle_detection():
    """Test that cycles are detected"""
    graph = _graph("a", "b", "c")
    graph.add_edge("a", "b")
    graph.add_edge("b", "c")
    graph.add_edge("c", "a")

    with pytest.raises(DAGCycleError, match="Cycle detected") as exc_info:
        graph.get_execution_levels()

    cycle = exc_info.value.cycle
    assert cycle[0] == cycle[-1]
    assert set(cycle) == {"a", "b", "c"}


def test_unknown_node():
    """Test edges to unknown nodes are rejected"""
    graph = _graph("a")

    with pytest.raises(DAGValidationError, match="unknown resource"):
        graph.add_edge("a", "missing")


def test_self_edge():
    graph = _graph("a")
    with pytest.raises(DAGError, match="cannot depend on itself"):
        graph.add_edge("a", "a")


def test_duplicate_edges_and_nodes():
    """Test adding the same node or edge twice is a no-op"""
    graph = _graph("a", "b", "a")
    graph.add_edge("a", "b")
    graph.add_edge("a", "b")

    assert list(graph.graph) == ["a", "b"]
    assert graph.direct_dependents_of("a") == ["b"]
    assert graph.find_cycle() is None
