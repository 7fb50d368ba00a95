"""Data contracts consumed and produced by the topology engine."""

from testtopology.models.call_graph import CallGraph, CallSite, FunctionNode
from testtopology.models.extraction import (
    AssertionInfo,
    FixtureInfo,
    Language,
    MockStatement,
    SetupBlock,
    TestCase,
    TestExtraction,
    TestFramework,
    TestQualitySignals,
    make_test_id,
)
from testtopology.models.results import (
    FunctionCoverageInfo,
    HighMockRatioTest,
    MinimumTestSet,
    MockAnalysis,
    MockedModule,
    ReachType,
    SelectedTest,
    TestCoverage,
    TestCoverageInfo,
    TestTopologyResult,
    TestTopologySummary,
    UncoveredFunction,
    UncoveredReason,
)

__all__ = [
    "AssertionInfo",
    "CallGraph",
    "CallSite",
    "FixtureInfo",
    "FunctionCoverageInfo",
    "FunctionNode",
    "HighMockRatioTest",
    "Language",
    "MinimumTestSet",
    "MockAnalysis",
    "MockStatement",
    "MockedModule",
    "ReachType",
    "SelectedTest",
    "SetupBlock",
    "TestCase",
    "TestCoverage",
    "TestCoverageInfo",
    "TestExtraction",
    "TestFramework",
    "TestQualitySignals",
    "TestTopologyResult",
    "TestTopologySummary",
    "UncoveredFunction",
    "UncoveredReason",
    "make_test_id",
]
