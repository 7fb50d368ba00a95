"""Extract test cases, mocks, fixtures, and setup hooks from Python test files."""

from __future__ import annotations

import ast
import logging
import sys
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import TypeAlias

from testtopology.ingestion.extractors.base import calculate_quality, is_framework_call
from testtopology.models.extraction import (
    AssertionInfo,
    FixtureInfo,
    Language,
    MockStatement,
    SetupBlock,
    SetupKind,
    TestCase,
    TestExtraction,
    TestFramework,
    make_test_id,
)

log = logging.getLogger(__name__)

FRAMEWORK_IMPORTS: dict[str, TestFramework] = {
    "pytest": TestFramework.PYTEST,
    "unittest": TestFramework.UNITTEST,
    "nose": TestFramework.NOSE,
}

SETUP_HOOKS: dict[str, SetupKind] = {
    "setUp": "setUp",
    "tearDown": "tearDown",
    "setUpClass": "beforeAll",
    "tearDownClass": "afterAll",
    "setup_method": "beforeEach",
    "teardown_method": "afterEach",
    "setup_class": "beforeAll",
    "teardown_class": "afterAll",
}

THIRD_PARTY_MODULES: frozenset[str] = frozenset(
    {
        "requests", "numpy", "pandas", "django", "flask", "fastapi",
        "sqlalchemy", "celery", "redis", "boto3", "aiohttp", "httpx",
    }
)  # fmt: skip

INLINE_MOCK_FACTORIES: frozenset[str] = frozenset({"Mock", "MagicMock", "AsyncMock"})

FunctionDef: TypeAlias = ast.FunctionDef | ast.AsyncFunctionDef


@dataclass
class _ModuleFacts:
    """Facts gathered in one pass over a parsed module."""

    functions: list[tuple[FunctionDef, str | None]] = field(default_factory=list)
    imports: list[str] = field(default_factory=list)
    has_testcase_base: bool = False


def is_external_module(target: str) -> bool:
    """
    Return True when a mock target lives outside the project under test.

    Standard-library modules and a short list of common third-party packages
    count as external.

    Returns
    -------
    bool
        Whether the first dotted segment names an external module.
    """
    root = target.split(".", maxsplit=1)[0]
    return root in sys.stdlib_module_names or root in THIRD_PARTY_MODULES


class PythonTestExtractor:
    """Test extractor for pytest, unittest, and nose suites."""

    __test__ = False

    @property
    def language(self) -> Language:
        """Language handled by this extractor."""
        return "python"

    @property
    def extensions(self) -> Sequence[str]:
        """File extensions handled by this extractor."""
        return ("py",)

    def extract(self, content: str, path: str) -> TestExtraction | None:
        """
        Parse ``content`` and extract its tests.

        Parameters
        ----------
        content : str
            Python source text.
        path : str
            Repo-relative path used for test ids and the ``file`` fields.

        Returns
        -------
        TestExtraction | None
            Extraction for the file, or None when the source does not parse.
        """
        try:
            tree = ast.parse(content, filename=path)
        except SyntaxError as exc:
            log.warning("Failed to parse %s: %s", path, exc)
            return None

        facts = _collect_module_facts(tree)
        framework = detect_framework(tree, facts)
        mocks = extract_mocks(tree)

        test_cases: list[TestCase] = []
        setup_blocks: list[SetupBlock] = []
        for func, class_name in facts.functions:
            kind = SETUP_HOOKS.get(func.name)
            if kind is not None:
                setup_blocks.append(
                    SetupBlock(kind=kind, line=func.lineno, calls=tuple(extract_calls(func.body)))
                )
            if func.name.startswith("test"):
                test_cases.append(_build_test_case(func, class_name, path, mocks))

        fixtures = extract_fixtures(facts) if framework is TestFramework.PYTEST else None
        log.debug(
            "Extracted %d tests and %d mocks from %s (%s)",
            len(test_cases),
            len(mocks),
            path,
            framework,
        )
        return TestExtraction(
            file=path,
            framework=framework,
            language="python",
            test_cases=test_cases,
            mocks=mocks,
            setup_blocks=setup_blocks,
            fixtures=fixtures,
        )


def detect_framework(tree: ast.Module, facts: _ModuleFacts | None = None) -> TestFramework:
    """
    Infer the test framework of a module.

    The first import of a known framework wins; ``unittest.mock`` imports do
    not count as unittest. Without a framework import, pytest fixtures imply
    pytest, ``TestCase`` subclasses imply unittest, and bare ``test_``
    functions imply pytest.

    Returns
    -------
    TestFramework
        Detected framework, or ``TestFramework.UNKNOWN``.
    """
    facts = facts or _collect_module_facts(tree)
    for module in facts.imports:
        framework = FRAMEWORK_IMPORTS.get(module)
        if framework is not None:
            return framework
    if any(_fixture_decorator(func) is not None for func, _ in facts.functions):
        return TestFramework.PYTEST
    if facts.has_testcase_base:
        return TestFramework.UNITTEST
    if any(func.name.startswith("test_") for func, _ in facts.functions):
        return TestFramework.PYTEST
    return TestFramework.UNKNOWN


def extract_calls(body: Sequence[ast.stmt]) -> list[str]:
    """
    Return the distinct call names in ``body`` in source order.

    Method calls contribute their attribute name. Calls that belong to the
    test framework are dropped.

    Returns
    -------
    list[str]
        Unresolved call-site names.
    """
    calls = [node for stmt in body for node in ast.walk(stmt) if isinstance(node, ast.Call)]
    calls.sort(key=lambda node: (node.lineno, node.col_offset))
    names: list[str] = []
    for call in calls:
        name = _call_name(call.func)
        if name is None or is_framework_call(name) or name in names:
            continue
        names.append(name)
    return names


def extract_assertions(body: Sequence[ast.stmt]) -> list[AssertionInfo]:
    """
    Collect ``assert`` statements, raises contexts, and ``self.assert*`` calls.

    Returns
    -------
    list[AssertionInfo]
        Assertions ordered by line.
    """
    found: list[AssertionInfo] = []
    for stmt in body:
        for node in ast.walk(stmt):
            if isinstance(node, ast.Assert):
                text = ast.unparse(node)
                found.append(
                    AssertionInfo(
                        matcher="assert",
                        line=node.lineno,
                        is_error_assertion="raises" in text or "Exception" in text,
                        is_edge_case_assertion=(
                            "None" in text or "== []" in text or "== {}" in text
                        ),
                    )
                )
            elif isinstance(node, (ast.With, ast.AsyncWith)) and _with_expects_raise(node):
                found.append(
                    AssertionInfo(matcher="raises", line=node.lineno, is_error_assertion=True)
                )
            elif (
                isinstance(node, ast.Call)
                and isinstance(node.func, ast.Attribute)
                and node.func.attr.startswith("assert")
            ):
                matcher = node.func.attr
                found.append(
                    AssertionInfo(
                        matcher=matcher,
                        line=node.lineno,
                        is_error_assertion="Raises" in matcher,
                        is_edge_case_assertion="None" in matcher or "Empty" in matcher,
                    )
                )
    found.sort(key=lambda a: a.line)
    return found


def extract_mocks(tree: ast.Module) -> list[MockStatement]:
    """
    Collect patch decorators, patch calls, and inline mock objects.

    Returns
    -------
    list[MockStatement]
        Mocks ordered by line.
    """
    mocks: list[MockStatement] = []
    decorator_calls: set[int] = set()
    for node in ast.walk(tree):
        if not isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
            continue
        for decorator in node.decorator_list:
            if not isinstance(decorator, ast.Call):
                continue
            mock = _patch_mock(decorator, decorated=True)
            if mock is not None:
                decorator_calls.add(id(decorator))
                mocks.append(mock)

    for node in ast.walk(tree):
        if not isinstance(node, ast.Call) or id(node) in decorator_calls:
            continue
        mock = _patch_mock(node, decorated=False)
        if mock is None and _call_name(node.func) in INLINE_MOCK_FACTORIES:
            mock = MockStatement(
                target="inline_mock",
                mock_type=_call_name(node.func) or "Mock",
                line=node.lineno,
                is_external=False,
            )
        if mock is not None:
            mocks.append(mock)

    mocks.sort(key=lambda m: m.line)
    return mocks


def extract_fixtures(facts: _ModuleFacts) -> list[FixtureInfo]:
    """
    Collect pytest fixtures and their declared scope.

    Returns
    -------
    list[FixtureInfo]
        Fixtures ordered by line; scope defaults to ``"function"``.
    """
    fixtures: list[FixtureInfo] = []
    for func, _ in facts.functions:
        decorator = _fixture_decorator(func)
        if decorator is None:
            continue
        scope = "function"
        if isinstance(decorator, ast.Call):
            for keyword in decorator.keywords:
                if keyword.arg == "scope" and isinstance(keyword.value, ast.Constant):
                    scope = str(keyword.value.value)
        fixtures.append(FixtureInfo(name=func.name, scope=scope, line=_first_line(func)))
    fixtures.sort(key=lambda f: f.line)
    return fixtures


def _build_test_case(
    func: FunctionDef,
    class_name: str | None,
    path: str,
    mocks: Sequence[MockStatement],
) -> TestCase:
    direct_calls = extract_calls(func.body)
    assertions = extract_assertions(func.body)
    start = _first_line(func)
    end = func.end_lineno or func.lineno
    own_mocks = [m for m in mocks if start <= m.line <= end]
    return TestCase(
        id=make_test_id(path, func.name, func.lineno),
        name=func.name,
        qualified_name=f"{class_name}.{func.name}" if class_name else func.name,
        file=path,
        line=func.lineno,
        parent_block=class_name,
        direct_calls=direct_calls,
        assertions=assertions,
        quality=calculate_quality(assertions, own_mocks, direct_calls),
    )


def _collect_module_facts(tree: ast.Module) -> _ModuleFacts:
    facts = _ModuleFacts(functions=list(_iter_functions(tree.body, None)))
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            facts.imports.extend(
                alias.name.split(".", maxsplit=1)[0]
                for alias in node.names
                if alias.name != "unittest.mock"
            )
        elif isinstance(node, ast.ImportFrom) and node.module and node.module != "unittest.mock":
            facts.imports.append(node.module.split(".", maxsplit=1)[0])
        elif isinstance(node, ast.ClassDef):
            facts.has_testcase_base = facts.has_testcase_base or any(
                _call_name(base) == "TestCase" for base in node.bases
            )
    return facts


def _iter_functions(
    body: Sequence[ast.stmt], class_name: str | None
) -> Iterator[tuple[FunctionDef, str | None]]:
    for stmt in body:
        if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)):
            yield stmt, class_name
        elif isinstance(stmt, ast.ClassDef):
            yield from _iter_functions(stmt.body, stmt.name)


def _call_name(func: ast.AST) -> str | None:
    if isinstance(func, ast.Name):
        return func.id
    if isinstance(func, ast.Attribute):
        return func.attr
    return None


def _dotted_name(node: ast.AST) -> str | None:
    parts: list[str] = []
    while isinstance(node, ast.Attribute):
        parts.append(node.attr)
        node = node.value
    if not isinstance(node, ast.Name):
        return None
    parts.append(node.id)
    return ".".join(reversed(parts))


def _string_arg(call: ast.Call, position: int) -> str | None:
    if len(call.args) <= position:
        return None
    arg = call.args[position]
    if isinstance(arg, ast.Constant) and isinstance(arg.value, str):
        return arg.value
    return None


def _patch_mock(call: ast.Call, *, decorated: bool) -> MockStatement | None:
    dotted = _dotted_name(call.func)
    if dotted is None:
        return None
    prefix = "@" if decorated else ""
    if dotted in {"patch", "mock.patch", "unittest.mock.patch", "mocker.patch"}:
        target = _string_arg(call, 0)
        if target is None:
            return None
        mock_type = "mocker.patch" if dotted == "mocker.patch" else f"{prefix}patch"
        return MockStatement(
            target=target,
            mock_type=mock_type,
            line=call.lineno,
            is_external=is_external_module(target),
        )
    if dotted in {"patch.object", "mock.patch.object", "mocker.patch.object"}:
        owner = _dotted_name(call.args[0]) if call.args else None
        attr = _string_arg(call, 1)
        if owner is None or attr is None:
            return None
        return MockStatement(
            target=f"{owner}.{attr}",
            mock_type=f"{prefix}patch.object",
            line=call.lineno,
            is_external=False,
        )
    return None


def _with_expects_raise(node: ast.With | ast.AsyncWith) -> bool:
    for item in node.items:
        expr = item.context_expr
        if not isinstance(expr, ast.Call):
            continue
        if _dotted_name(expr.func) == "pytest.raises" or _call_name(expr.func) == "assertRaises":
            return True
    return False


def _fixture_decorator(func: FunctionDef) -> ast.expr | None:
    for decorator in func.decorator_list:
        target = decorator.func if isinstance(decorator, ast.Call) else decorator
        if _call_name(target) == "fixture":
            return decorator
    return None


def _first_line(func: FunctionDef) -> int:
    return min([func.lineno, *(d.lineno for d in func.decorator_list)])


__all__ = [
    "PythonTestExtractor",
    "detect_framework",
    "extract_assertions",
    "extract_calls",
    "extract_fixtures",
    "extract_mocks",
    "is_external_module",
]
