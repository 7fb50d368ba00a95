"""Configuration models for the test topology engine.

Preferred Import Patterns
-------------------------
    from testtopology.config import TopologyConfig

    cfg = TopologyConfig.default()
    cfg = TopologyConfig(ms_per_test=250)
"""

from testtopology.config.models import (
    DEFAULT_FRAMEWORK_HOOKS,
    DEFAULT_TEST_FILE_PATTERNS,
    DEFAULT_TRIVIAL_PREFIXES,
    RiskLevel,
    RiskWeights,
    TopologyConfig,
    UncoveredOptions,
)

__all__ = [
    "DEFAULT_FRAMEWORK_HOOKS",
    "DEFAULT_TEST_FILE_PATTERNS",
    "DEFAULT_TRIVIAL_PREFIXES",
    "RiskLevel",
    "RiskWeights",
    "TopologyConfig",
    "UncoveredOptions",
]
