"""Helpers to materialize call graphs and test coverage as NetworkX views."""

from __future__ import annotations

import logging

import networkx as nx

from testtopology.models.call_graph import CallGraph
from testtopology.models.results import ReachType

log = logging.getLogger(__name__)

TEST_PART = 0
FUNCTION_PART = 1


def node_for_test(test_id: str) -> tuple[str, str]:
    """Return the bipartite node key for a test."""
    return ("t", test_id)


def node_for_function(function_id: str) -> tuple[str, str]:
    """Return the bipartite node key for a function."""
    return ("f", function_id)


def call_digraph(graph: CallGraph) -> nx.DiGraph:
    """
    Build a call graph `DiGraph` of caller -> candidate callee edges.

    Every function becomes a node. Each call site contributes one edge per
    resolved candidate, so polymorphic calls fan out; candidates unknown to
    the graph still appear as leaf nodes.

    Parameters
    ----------
    graph : CallGraph
        Call graph supplied by the external builder.

    Returns
    -------
    nx.DiGraph
        Directed call graph keyed by function id.
    """
    digraph = nx.DiGraph()
    for func_id, func in graph.functions.items():
        digraph.add_node(func_id, file=func.file, name=func.name)
        for callee in func.callee_ids():
            digraph.add_edge(func_id, callee)
    log.debug(
        "Call graph view: %d nodes, %d edges",
        digraph.number_of_nodes(),
        digraph.number_of_edges(),
    )
    return digraph


def new_test_function_bipartite() -> nx.Graph:
    """
    Return an empty test <-> function bipartite graph.

    Test nodes are keyed as ("t", test_id); function nodes as ("f", function_id).

    Returns
    -------
    nx.Graph
        Empty undirected graph.
    """
    return nx.Graph()


def add_test(graph: nx.Graph, test_id: str) -> None:
    """Ensure a test node exists, even when it reaches no function."""
    node = node_for_test(test_id)
    if not graph.has_node(node):
        graph.add_node(node, bipartite=TEST_PART)


def add_coverage_edge(
    graph: nx.Graph,
    test_id: str,
    function_id: str,
    reach: ReachType,
    *,
    resolution_confidence: float | None = None,
) -> None:
    """
    Record that a test reaches a function.

    A direct edge is never downgraded to transitive. Re-adding an existing
    edge is a no-op apart from that upgrade.

    Parameters
    ----------
    graph :
        Bipartite test <-> function graph.
    test_id :
        Identifier of the covering test.
    function_id :
        Identifier of the covered function.
    reach :
        How the test reaches the function.
    resolution_confidence :
        Confidence of the name resolution behind a direct edge.
    """
    t_node = node_for_test(test_id)
    f_node = node_for_function(function_id)
    add_test(graph, test_id)
    if not graph.has_node(f_node):
        graph.add_node(f_node, bipartite=FUNCTION_PART)
    if graph.has_edge(t_node, f_node):
        attrs = graph[t_node][f_node]
        if reach is ReachType.DIRECT and attrs["reach"] is not ReachType.DIRECT:
            attrs["reach"] = ReachType.DIRECT
            attrs["resolution_confidence"] = resolution_confidence
        return
    graph.add_edge(t_node, f_node, reach=reach, resolution_confidence=resolution_confidence)


def neighbors_of(graph: nx.Graph, node: tuple[str, str]) -> set[str]:
    """
    Return ids adjacent to ``node`` in the bipartite graph.

    Returns
    -------
    set[str]
        Neighbor ids (function ids for a test node, test ids for a function node).
    """
    if not graph.has_node(node):
        return set()
    return {neighbor_id for _, neighbor_id in graph.neighbors(node)}


__all__ = [
    "FUNCTION_PART",
    "TEST_PART",
    "add_coverage_edge",
    "add_test",
    "call_digraph",
    "neighbors_of",
    "new_test_function_bipartite",
    "node_for_function",
    "node_for_test",
]
