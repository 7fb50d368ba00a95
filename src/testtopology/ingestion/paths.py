"""Path utilities to normalize file paths and classify test files."""

from __future__ import annotations

import re
from collections.abc import Iterable
from functools import lru_cache
from pathlib import PurePosixPath

from testtopology.config.models import DEFAULT_TEST_FILE_PATTERNS

__all__ = [
    "TestFileClassifier",
    "file_extension",
    "is_test_file",
    "normalize_rel_path",
    "parent_dir",
]


def normalize_rel_path(path: str) -> str:
    """Return a POSIX-style path (keeps subdirs, strips backslashes).

    Returns
    -------
    str
        Normalized path with forward slashes.
    """
    return path.replace("\\", "/")


def parent_dir(path: str) -> str:
    """Return the directory portion of a path, or ``""`` for bare file names.

    Returns
    -------
    str
        Directory containing ``path`` without a trailing slash.
    """
    normalized = normalize_rel_path(path)
    head, sep, _ = normalized.rpartition("/")
    return head if sep else ""


def file_extension(path: str) -> str:
    """Return the lower-cased extension without the dot (``""`` when absent).

    Returns
    -------
    str
        Extension such as ``"py"`` or ``"ts"``.
    """
    return PurePosixPath(normalize_rel_path(path)).suffix.lstrip(".").lower()


class TestFileClassifier:
    """Classify paths as test files using case-insensitive regex heuristics."""

    __test__ = False

    def __init__(self, patterns: Iterable[str] = DEFAULT_TEST_FILE_PATTERNS) -> None:
        self._patterns = tuple(re.compile(pattern, re.IGNORECASE) for pattern in patterns)

    def __call__(self, path: str) -> bool:
        """Return True when ``path`` looks like a test file."""
        normalized = normalize_rel_path(path)
        return any(pattern.search(normalized) for pattern in self._patterns)


@lru_cache(maxsize=1)
def _default_classifier() -> TestFileClassifier:
    return TestFileClassifier()


def is_test_file(path: str) -> bool:
    """Classify ``path`` with the default test file patterns.

    Returns
    -------
    bool
        True when the path matches any default test pattern.
    """
    return _default_classifier()(path)
