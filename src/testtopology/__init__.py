"""Test topology: map tests to the production functions they exercise."""

from testtopology.analytics.tests.analyzer import (
    TestTopologyAnalyzer,
    create_test_topology_analyzer,
)
from testtopology.config import TopologyConfig, UncoveredOptions
from testtopology.ingestion.call_graph_loader import load_call_graph

__all__ = [
    "TestTopologyAnalyzer",
    "TopologyConfig",
    "UncoveredOptions",
    "create_test_topology_analyzer",
    "load_call_graph",
]
