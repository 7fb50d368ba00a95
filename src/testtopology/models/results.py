"""Derived query results; ephemeral and never persisted."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Literal

from testtopology.models.extraction import TestExtraction, TestFramework


class ReachType(StrEnum):
    """How a test reaches a production function."""

    DIRECT = "direct"
    TRANSITIVE = "transitive"


UncoveredReason = Literal["dead-code", "framework-hook", "trivial"]


@dataclass(frozen=True)
class TestCoverageInfo:
    """A test covering at least one function of a source file."""

    __test__ = False

    test_id: str
    test_file: str
    test_name: str
    reach_type: ReachType
    depth: int
    confidence: float
    covered_functions: tuple[str, ...]
    resolution_confidence: float | None = None


@dataclass(frozen=True)
class FunctionCoverageInfo:
    """Coverage state of a single function."""

    function_id: str
    name: str
    line: int
    is_covered: bool
    covering_tests: tuple[str, ...]
    is_mocked_only: bool


@dataclass(frozen=True)
class TestCoverage:
    """Coverage of one source file by the test suite."""

    __test__ = False

    source_file: str
    tests: tuple[TestCoverageInfo, ...]
    functions: tuple[FunctionCoverageInfo, ...]
    coverage_percent: int


@dataclass(frozen=True)
class UncoveredFunction:
    """A production function that no test reaches."""

    function_id: str
    name: str
    qualified_name: str
    file: str
    line: int
    possible_reasons: tuple[UncoveredReason, ...]
    risk_score: int
    is_entry_point: bool
    accesses_sensitive_data: bool


@dataclass(frozen=True)
class SelectedTest:
    """A test chosen for a change set, with one justification."""

    test_id: str
    file: str
    qualified_name: str
    reason: str


@dataclass(frozen=True)
class MinimumTestSet:
    """Tests to run for a set of changed files."""

    tests: tuple[SelectedTest, ...]
    total_tests: int
    selected_tests: int
    time_saved: str
    changed_code_coverage: int


@dataclass(frozen=True)
class HighMockRatioTest:
    """A test whose mock ratio marks it as potentially brittle."""

    file: str
    test_name: str
    mock_ratio: float


@dataclass(frozen=True)
class MockedModule:
    """A module and how many mocks target it."""

    module: str
    count: int


@dataclass(frozen=True)
class MockAnalysis:
    """Mock usage across all stored extractions."""

    total_mocks: int
    external_mocks: int
    internal_mocks: int
    external_percent: int
    internal_percent: int
    avg_mock_ratio: float
    high_mock_ratio_tests: tuple[HighMockRatioTest, ...]
    top_mocked_modules: tuple[MockedModule, ...]


@dataclass(frozen=True)
class TestTopologySummary:
    """Project-wide rollup of the test topology."""

    __test__ = False

    test_files: int
    test_cases: int
    covered_files: int
    total_files: int
    coverage_percent: int
    covered_functions: int
    total_functions: int
    function_coverage_percent: int
    avg_mock_ratio: float
    avg_quality_score: int
    by_framework: dict[TestFramework, int]


@dataclass(frozen=True)
class TestTopologyResult:
    """Everything a full analysis run produces."""

    __test__ = False

    extractions: tuple[TestExtraction, ...]
    coverage: dict[str, TestCoverage] = field(default_factory=dict)
    mock_analysis: MockAnalysis | None = None
    summary: TestTopologySummary | None = None


__all__ = [
    "FunctionCoverageInfo",
    "HighMockRatioTest",
    "MinimumTestSet",
    "MockAnalysis",
    "MockedModule",
    "ReachType",
    "SelectedTest",
    "TestCoverage",
    "TestCoverageInfo",
    "TestTopologyResult",
    "TestTopologySummary",
    "UncoveredFunction",
    "UncoveredReason",
]
