"""Pytest configuration for the test topology suite."""

from __future__ import annotations

import pytest

from testtopology.config import TopologyConfig
from testtopology.models.call_graph import CallGraph
from tests._helpers.builders import FunctionSpec, build_call_graph


@pytest.fixture
def cfg() -> TopologyConfig:
    """Provide the stock topology configuration.

    Returns
    -------
    TopologyConfig
        Default heuristics.
    """
    return TopologyConfig.default()


@pytest.fixture
def chain_graph() -> CallGraph:
    """Provide a small graph where api.handle -> core.process -> core.store.

    Returns
    -------
    CallGraph
        Three-function chain plus an isolated helper, across two files.
    """
    return build_call_graph(
        [
            FunctionSpec("api.handle", "src/api.py", calls=[["core.process"]]),
            FunctionSpec(
                "core.process",
                "src/core.py",
                start_line=10,
                calls=[["core.store"]],
                called_by=["api.handle"],
            ),
            FunctionSpec("core.store", "src/core.py", start_line=20, called_by=["core.process"]),
            FunctionSpec("core.helper", "src/core.py", start_line=30),
        ],
        entry_points=["api.handle"],
    )
