"""Test topology analytics: mapping, coverage, risk, selection, and rollups."""

from testtopology.analytics.tests.analyzer import (
    TestTopologyAnalyzer,
    create_test_topology_analyzer,
)
from testtopology.analytics.tests.mapping import TestRef, TopologyIndex, build_mappings

__all__ = [
    "TestRef",
    "TestTopologyAnalyzer",
    "TopologyIndex",
    "build_mappings",
    "create_test_topology_analyzer",
]
