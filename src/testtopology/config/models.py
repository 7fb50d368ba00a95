"""
Configuration models for the test topology engine.

These Pydantic models carry the heuristic constants used by the mapping,
coverage, risk, and selection stages so callers can tune them per run without
patching module globals.
"""

from __future__ import annotations

import os
import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

RiskLevel = Literal["low", "medium", "high"]

DEFAULT_TEST_FILE_PATTERNS: tuple[str, ...] = (
    r"\.test\.",
    r"\.spec\.",
    r"_test\.",
    r"test_",
    r"tests?/",
    r"specs?/",
    r"__tests__/",
)
DEFAULT_FRAMEWORK_HOOKS: tuple[str, ...] = (
    "componentDidMount",
    "useEffect",
    "ngOnInit",
    "setUp",
    "tearDown",
)
DEFAULT_TRIVIAL_PREFIXES: tuple[str, ...] = ("get", "set")


class RiskWeights(BaseModel):
    """
    Additive weights used to score untested functions.

    Scores start at ``base`` and are capped at ``cap``.
    """

    model_config = ConfigDict(frozen=True)

    base: int = Field(30, description="Score every uncovered function starts from")
    entry_point: int = Field(30, description="Bonus for externally reachable functions")
    data_access: int = Field(20, description="Bonus for functions tagged with data access")
    fan_in: int = Field(15, description="Bonus when callers exceed fan_in_limit")
    fan_out: int = Field(10, description="Bonus when outgoing calls exceed fan_out_limit")
    fan_in_limit: int = Field(5, description="Caller count above which fan_in applies")
    fan_out_limit: int = Field(10, description="Call count above which fan_out applies")
    cap: int = Field(100, description="Upper bound on the final score")


class TopologyConfig(BaseModel):
    """
    Tunable constants for a test topology run.

    Typical construction:

        cfg = TopologyConfig.default()
        cfg = TopologyConfig(ms_per_test=250)
    """

    model_config = ConfigDict(frozen=True)

    direct_confidence: float = Field(0.9, ge=0.0, le=1.0)
    transitive_confidence: float = Field(0.6, ge=0.0, le=1.0)
    direct_depth: int = Field(1, ge=1)
    transitive_depth: int = Field(2, ge=1)

    risk: RiskWeights = Field(default_factory=RiskWeights)
    risk_thresholds: dict[RiskLevel, int] = Field(
        default_factory=lambda: {"low": 0, "medium": 30, "high": 60},
        description="Minimum risk score admitted for each requested level",
    )
    framework_hooks: tuple[str, ...] = DEFAULT_FRAMEWORK_HOOKS
    trivial_prefixes: tuple[str, ...] = DEFAULT_TRIVIAL_PREFIXES
    test_file_patterns: tuple[str, ...] = DEFAULT_TEST_FILE_PATTERNS

    ms_per_test: int = Field(100, ge=0, description="Estimated runtime of a single test")
    high_mock_ratio: float = Field(0.7, ge=0.0, le=1.0)
    top_mocked_modules: int = Field(10, ge=0)
    uncovered_limit: int = Field(50, ge=0)

    @field_validator("test_file_patterns")
    @classmethod
    def _check_patterns(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        """
        Reject patterns that do not compile as regular expressions.

        Returns
        -------
        tuple[str, ...]
            The validated patterns.

        Raises
        ------
        ValueError
            If any pattern is not a valid regular expression.
        """
        for pattern in value:
            try:
                re.compile(pattern)
            except re.error as exc:
                message = f"Invalid test file pattern {pattern!r}: {exc}"
                raise ValueError(message) from exc
        return value

    @classmethod
    def default(cls) -> TopologyConfig:
        """
        Return the stock configuration.

        Returns
        -------
        TopologyConfig
            Configuration populated with default heuristics.
        """
        return cls()

    @classmethod
    def from_env(cls) -> TopologyConfig:
        """
        Construct a TopologyConfig with overrides from environment variables.

        Recognised variables are ``TESTTOPOLOGY_MS_PER_TEST``,
        ``TESTTOPOLOGY_HIGH_MOCK_RATIO`` and ``TESTTOPOLOGY_UNCOVERED_LIMIT``.

        Returns
        -------
        TopologyConfig
            Validated configuration populated from environment values.

        Raises
        ------
        pydantic.ValidationError
            When a variable does not parse as its field type or is out of range.
        """
        env_fields = {
            "ms_per_test": "TESTTOPOLOGY_MS_PER_TEST",
            "high_mock_ratio": "TESTTOPOLOGY_HIGH_MOCK_RATIO",
            "uncovered_limit": "TESTTOPOLOGY_UNCOVERED_LIMIT",
        }
        overrides = {
            field_name: os.environ[env_name]
            for field_name, env_name in env_fields.items()
            if env_name in os.environ
        }
        return cls.model_validate(overrides)


class UncoveredOptions(BaseModel):
    """Query options for the uncovered function finder."""

    model_config = ConfigDict(frozen=True)

    min_risk: RiskLevel = "low"
    limit: int = Field(50, ge=0)
    include_reasons: bool = True
