"""Per-language test extractors and their registry."""

from __future__ import annotations

from testtopology.ingestion.extractors.base import (
    FRAMEWORK_CALLS,
    ExtractorRegistry,
    TestExtractor,
    calculate_quality,
    is_framework_call,
)
from testtopology.ingestion.extractors.python import PythonTestExtractor


def default_registry() -> ExtractorRegistry:
    """Return a registry holding every built-in extractor."""
    return ExtractorRegistry([PythonTestExtractor()])


__all__ = [
    "FRAMEWORK_CALLS",
    "ExtractorRegistry",
    "PythonTestExtractor",
    "TestExtractor",
    "calculate_quality",
    "default_registry",
    "is_framework_call",
]
