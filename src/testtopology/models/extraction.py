"""Test extraction records produced by per-language extractors."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Literal


class TestFramework(StrEnum):
    """Test frameworks recognised across the supported language ecosystems."""

    __test__ = False

    JEST = "jest"
    VITEST = "vitest"
    MOCHA = "mocha"
    AVA = "ava"
    TAPE = "tape"
    PYTEST = "pytest"
    UNITTEST = "unittest"
    NOSE = "nose"
    JUNIT4 = "junit4"
    JUNIT5 = "junit5"
    TESTNG = "testng"
    XUNIT = "xunit"
    NUNIT = "nunit"
    MSTEST = "mstest"
    PHPUNIT = "phpunit"
    PEST = "pest"
    CODECEPTION = "codeception"
    UNKNOWN = "unknown"


Language = Literal["typescript", "javascript", "python", "java", "csharp", "php"]
SetupKind = Literal["beforeEach", "afterEach", "beforeAll", "afterAll", "setUp", "tearDown"]


@dataclass(frozen=True)
class AssertionInfo:
    """A single assertion inside a test body."""

    matcher: str
    line: int
    is_error_assertion: bool = False
    is_edge_case_assertion: bool = False


@dataclass(frozen=True)
class TestQualitySignals:
    """
    Quality signals computed by the extractor for one test.

    The engine reads these values but never recomputes them.
    """

    __test__ = False

    assertion_count: int = 0
    has_error_cases: bool = False
    has_edge_cases: bool = False
    mock_ratio: float = 0.0
    setup_ratio: float = 0.0
    score: int = 50


@dataclass
class TestCase:
    """
    A test case extracted from a test file.

    ``direct_calls`` holds unresolved call-site names as written in the test
    body. ``transitive_calls`` is owned by the mapping builder and is reset on
    every rebuild.
    """

    __test__ = False

    id: str
    name: str
    qualified_name: str
    file: str
    line: int
    parent_block: str | None = None
    direct_calls: list[str] = field(default_factory=list)
    transitive_calls: list[str] = field(default_factory=list)
    assertions: list[AssertionInfo] = field(default_factory=list)
    quality: TestQualitySignals = field(default_factory=TestQualitySignals)


@dataclass(frozen=True)
class MockStatement:
    """A mock, stub, spy, or patch statement."""

    target: str
    mock_type: str
    line: int
    is_external: bool
    has_implementation: bool | None = None


@dataclass(frozen=True)
class SetupBlock:
    """A setup or teardown hook and the calls it makes."""

    kind: SetupKind
    line: int
    calls: tuple[str, ...] = ()


@dataclass(frozen=True)
class FixtureInfo:
    """A fixture definition, e.g. a pytest fixture."""

    name: str
    scope: str
    line: int
    provides: str | None = None


@dataclass
class TestExtraction:
    """All test facts extracted from one test file."""

    __test__ = False

    file: str
    framework: TestFramework
    language: Language
    test_cases: list[TestCase] = field(default_factory=list)
    mocks: list[MockStatement] = field(default_factory=list)
    setup_blocks: list[SetupBlock] = field(default_factory=list)
    fixtures: list[FixtureInfo] | None = None


def make_test_id(file: str, name: str, line: int) -> str:
    """
    Build the canonical ``file:name:line`` test identifier.

    Returns
    -------
    str
        Identifier unique within a test suite.
    """
    return f"{file}:{name}:{line}"


__all__ = [
    "AssertionInfo",
    "FixtureInfo",
    "Language",
    "MockStatement",
    "SetupBlock",
    "SetupKind",
    "TestCase",
    "TestExtraction",
    "TestFramework",
    "TestQualitySignals",
    "make_test_id",
]
