"""Extractor protocol, registry, and shared quality heuristics."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Protocol

from testtopology.ingestion.paths import file_extension
from testtopology.models.extraction import (
    AssertionInfo,
    Language,
    MockStatement,
    TestExtraction,
    TestQualitySignals,
)
from testtopology.utils.numbers import round_half_up

BASE_QUALITY_SCORE = 50
HIGH_MOCK_RATIO = 0.7
MODERATE_MOCK_RATIO = 0.5
MANY_ASSERTIONS = 3

# Calls that belong to test frameworks rather than code under test.
FRAMEWORK_CALLS: frozenset[str] = frozenset(
    {
        "describe", "it", "test", "expect", "beforeEach", "afterEach",
        "beforeAll", "afterAll", "jest", "vi", "mock", "spyOn",
        "pytest", "fixture", "mark", "parametrize",
        "assertEquals", "assertTrue", "assertFalse", "assertNull",
        "assertNotNull", "assertThrows", "verify", "when",
        "Assert", "Fact", "Theory", "Mock", "Setup", "createMock",
    }
)  # fmt: skip


class TestExtractor(Protocol):
    """Capability implemented by each per-language test extractor."""

    __test__ = False

    @property
    def language(self) -> Language:
        """Language handled by this extractor."""
        ...

    @property
    def extensions(self) -> Sequence[str]:
        """Lower-cased file extensions (without dot) this extractor accepts."""
        ...

    def extract(self, content: str, path: str) -> TestExtraction | None:
        """Extract tests from ``content``; None when the source cannot be parsed."""
        ...


class ExtractorRegistry:
    """Registry for test extractors keyed by file extension."""

    def __init__(self, extractors: Iterable[TestExtractor] = ()) -> None:
        self._by_extension: dict[str, TestExtractor] = {}
        for extractor in extractors:
            self.register(extractor)

    def register(self, extractor: TestExtractor) -> None:
        """
        Register an extractor for each of its extensions.

        Raises
        ------
        ValueError
            If an extractor is already registered for one of the extensions.
        """
        for ext in extractor.extensions:
            key = ext.lower().lstrip(".")
            if key in self._by_extension:
                message = f"Extractor already registered for extension {key!r}"
                raise ValueError(message)
            self._by_extension[key] = extractor

    def for_path(self, path: str) -> TestExtractor | None:
        """
        Return the extractor responsible for ``path``.

        Returns
        -------
        TestExtractor | None
            Registered extractor, or None for unsupported extensions.
        """
        return self._by_extension.get(file_extension(path))

    def extensions(self) -> list[str]:
        """Return every registered extension."""
        return sorted(self._by_extension)


def is_framework_call(name: str) -> bool:
    """Return True for calls that belong to the test framework itself."""
    return name in FRAMEWORK_CALLS


def calculate_quality(
    assertions: Sequence[AssertionInfo],
    mocks: Sequence[MockStatement],
    direct_calls: Sequence[str],
) -> TestQualitySignals:
    """
    Derive quality signals for one test.

    The mock ratio is mocks / (mocks + real calls). The score starts at 50,
    rewards assertions, error cases and edge cases, penalises heavy mocking and
    missing assertions, and is clamped to [0, 100].

    Returns
    -------
    TestQualitySignals
        Signals stored on the test case.
    """
    assertion_count = len(assertions)
    has_error_cases = any(a.is_error_assertion for a in assertions)
    has_edge_cases = any(a.is_edge_case_assertion for a in assertions)
    total_calls = len(mocks) + len(direct_calls)
    mock_ratio = len(mocks) / total_calls if total_calls else 0.0

    score = BASE_QUALITY_SCORE
    if assertion_count >= 1:
        score += 10
    if assertion_count >= MANY_ASSERTIONS:
        score += 10
    if has_error_cases:
        score += 15
    if has_edge_cases:
        score += 10
    if mock_ratio > HIGH_MOCK_RATIO:
        score -= 15
    elif mock_ratio > MODERATE_MOCK_RATIO:
        score -= 5
    if assertion_count == 0:
        score -= 20

    return TestQualitySignals(
        assertion_count=assertion_count,
        has_error_cases=has_error_cases,
        has_edge_cases=has_edge_cases,
        mock_ratio=round_half_up(mock_ratio, 2),
        setup_ratio=0.0,
        score=max(0, min(100, score)),
    )


__all__ = [
    "FRAMEWORK_CALLS",
    "ExtractorRegistry",
    "TestExtractor",
    "calculate_quality",
    "is_framework_call",
]
