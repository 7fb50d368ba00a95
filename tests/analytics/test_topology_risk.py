"""Tests for risk scoring and the uncovered function finder."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from testtopology.analytics.tests.mapping import build_mappings
from testtopology.analytics.tests.risk import (
    calculate_risk_score,
    get_uncovered_functions,
    infer_uncovered_reasons,
)
from testtopology.config import TopologyConfig, UncoveredOptions
from testtopology.models.call_graph import CallGraph
from tests._helpers.builders import (
    CaseSpec,
    FunctionSpec,
    Suite,
    build_call_graph,
    build_extraction,
)

ENTRY_POINT_SCORE = 60
FAN_IN_SCORE = 45
CAPPED_SCORE = 100


@pytest.fixture
def risk_graph() -> CallGraph:
    """Provide an entry point with two callees and a heavily called helper.

    Returns
    -------
    CallGraph
        Graph with f1 (entry point) and f2 (twelve callers).
    """
    return build_call_graph(
        [
            FunctionSpec("f1", "src/app.py", calls=[["x"], ["y"]]),
            FunctionSpec("f2", "src/util.py", called_by=[f"c{i}" for i in range(12)]),
        ],
        entry_points=["f1"],
    )


def test_ranks_entry_point_above_fan_in(risk_graph: CallGraph, cfg: TopologyConfig) -> None:
    """Untested entry points outrank heavily called helpers."""
    index = build_mappings({}, risk_graph)
    result = get_uncovered_functions(index, risk_graph, UncoveredOptions(min_risk="low"), cfg)
    if [item.function_id for item in result] != ["f1", "f2"]:
        pytest.fail(f"Unexpected order {[item.function_id for item in result]}")
    if result[0].risk_score != ENTRY_POINT_SCORE or result[1].risk_score != FAN_IN_SCORE:
        pytest.fail(f"Unexpected scores {[item.risk_score for item in result]}")
    if not result[0].is_entry_point or result[0].possible_reasons:
        pytest.fail(f"Entry point should carry no reasons: {result[0]}")


def test_min_risk_and_limit_filter(risk_graph: CallGraph, cfg: TopologyConfig) -> None:
    """Thresholds drop low scorers and the limit truncates the ranking."""
    index = build_mappings({}, risk_graph)
    high = get_uncovered_functions(index, risk_graph, UncoveredOptions(min_risk="high"), cfg)
    if [item.function_id for item in high] != ["f1"]:
        pytest.fail(f"High threshold should keep only f1: {high}")
    limited = get_uncovered_functions(index, risk_graph, UncoveredOptions(limit=1), cfg)
    if len(limited) != 1:
        pytest.fail(f"Limit should truncate to one result: {limited}")


def test_covered_and_test_file_functions_are_skipped(cfg: TopologyConfig) -> None:
    """Covered functions and functions living in test files are not reported."""
    graph = build_call_graph(
        [
            FunctionSpec("f1", "src/app.py"),
            FunctionSpec("f2", "src/util.py"),
            FunctionSpec("make_user", "tests/factories.py"),
        ]
    )
    suite = Suite(call_graph=graph).add(
        build_extraction("tests/test_app.py", [CaseSpec("test_app", calls=["f1"], line=1)])
    )
    index = build_mappings(suite.extractions, graph)
    result = get_uncovered_functions(index, graph, UncoveredOptions(), cfg)
    if [item.function_id for item in result] != ["f2"]:
        pytest.fail(f"Only f2 should remain uncovered: {result}")


def test_reasons_can_co_occur(cfg: TopologyConfig) -> None:
    """A lonely setter named like a lifecycle hook gets every reason."""
    graph = build_call_graph([FunctionSpec("setUpDatabase", "src/db.py")])
    reasons = infer_uncovered_reasons(graph.functions["setUpDatabase"], graph, cfg)
    if reasons != ("dead-code", "framework-hook", "trivial"):
        pytest.fail(f"Unexpected reasons {reasons}")


def test_reasons_can_be_suppressed(cfg: TopologyConfig) -> None:
    """include_reasons=False leaves possible_reasons empty."""
    graph = build_call_graph([FunctionSpec("getName", "src/user.py")])
    index = build_mappings({}, graph)
    options = UncoveredOptions(include_reasons=False)
    result = get_uncovered_functions(index, graph, options, cfg)
    if result[0].possible_reasons:
        pytest.fail(f"Reasons should be suppressed: {result[0]}")


def test_score_is_capped(cfg: TopologyConfig) -> None:
    """Every bonus at once still scores at most the cap."""
    graph = build_call_graph(
        [
            FunctionSpec(
                "hub",
                "src/hub.py",
                calls=[[f"callee{i}"] for i in range(11)],
                called_by=[f"caller{i}" for i in range(6)],
                data_access=["users"],
            )
        ],
        entry_points=["hub"],
    )
    if calculate_risk_score(graph.functions["hub"], graph, cfg) != CAPPED_SCORE:
        pytest.fail("Score should be capped at 100")


def test_no_call_graph_yields_empty_list(cfg: TopologyConfig) -> None:
    """Without a call graph nothing can be reported."""
    index = build_mappings({}, None)
    if get_uncovered_functions(index, None, UncoveredOptions(), cfg):
        pytest.fail("Expected no uncovered functions without a call graph")


def test_invalid_min_risk_is_rejected() -> None:
    """Unknown risk levels fail validation."""
    with pytest.raises(ValidationError):
        UncoveredOptions(min_risk="critical")
