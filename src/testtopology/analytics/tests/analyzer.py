"""
Test topology analyzer: one owned index per analysis run.

Required call order is ingest (``extract_from_file`` / ``add_extraction``),
then ``set_call_graph``, then ``build_mappings``, then queries. Queries read the
index produced by the most recent ``build_mappings`` call.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from testtopology.analytics.tests.coverage import get_coverage
from testtopology.analytics.tests.mapping import TopologyIndex, build_mappings
from testtopology.analytics.tests.mocks import analyze_mocks
from testtopology.analytics.tests.risk import get_uncovered_functions
from testtopology.analytics.tests.selection import get_minimum_test_set
from testtopology.analytics.tests.summary import get_summary
from testtopology.config.models import RiskLevel, TopologyConfig, UncoveredOptions
from testtopology.ingestion.extractors import ExtractorRegistry, default_registry
from testtopology.ingestion.paths import TestFileClassifier, normalize_rel_path
from testtopology.models.call_graph import CallGraph
from testtopology.models.extraction import TestExtraction, make_test_id
from testtopology.models.results import (
    MinimumTestSet,
    MockAnalysis,
    TestCoverage,
    TestTopologyResult,
    TestTopologySummary,
    UncoveredFunction,
)

log = logging.getLogger(__name__)


class TestTopologyAnalyzer:
    """
    Map tests to the production functions they exercise.

    Parameters
    ----------
    registry : ExtractorRegistry | None
        Extractors used by ``extract_from_file``; defaults to the built-ins.
    cfg : TopologyConfig | None
        Heuristic constants; defaults to ``TopologyConfig.default()``.
    """

    __test__ = False

    def __init__(
        self,
        registry: ExtractorRegistry | None = None,
        cfg: TopologyConfig | None = None,
    ) -> None:
        self.registry = registry if registry is not None else default_registry()
        self.cfg = cfg or TopologyConfig.default()
        self._extractions: dict[str, TestExtraction] = {}
        self._call_graph: CallGraph | None = None
        self._index = TopologyIndex()

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------
    def extract_from_file(self, content: str, path: str) -> TestExtraction | None:
        """
        Extract tests from one file and store the result under its path.

        Parameters
        ----------
        content : str
            Source text of the test file.
        path : str
            Repo-relative path; test ids and ``file`` fields are rewritten to it.

        Returns
        -------
        TestExtraction | None
            Stored extraction, or None for unsupported or unparsable files.
        """
        rel_path = normalize_rel_path(path)
        extractor = self.registry.for_path(rel_path)
        if extractor is None:
            log.debug("No extractor registered for %s", rel_path)
            return None
        extraction = extractor.extract(content, rel_path)
        if extraction is None:
            return None
        extraction.file = rel_path
        for case in extraction.test_cases:
            case.file = rel_path
            case.id = make_test_id(rel_path, case.name, case.line)
        self._extractions[rel_path] = extraction
        return extraction

    def add_extraction(self, extraction: TestExtraction) -> None:
        """Store a pre-built extraction, replacing any earlier one for its file."""
        self._extractions[normalize_rel_path(extraction.file)] = extraction

    def set_call_graph(self, call_graph: CallGraph) -> None:
        """
        Set the call graph of the code under test.

        Replacing the graph does not rebuild the index; call
        ``build_mappings`` afterwards.
        """
        self._call_graph = call_graph

    def build_mappings(self) -> None:
        """Rebuild the test <-> function index from every stored extraction."""
        self._index = build_mappings(self._extractions, self._call_graph)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_coverage(self, source_file: str) -> TestCoverage | None:
        """Return coverage for ``source_file``; None without a call graph."""
        return get_coverage(self._index, self._call_graph, source_file, self.cfg)

    def get_uncovered_functions(
        self,
        min_risk: RiskLevel = "low",
        limit: int | None = None,
        *,
        include_reasons: bool = True,
    ) -> list[UncoveredFunction]:
        """
        Return untested production functions ranked by risk.

        Raises
        ------
        pydantic.ValidationError
            When ``min_risk`` or ``limit`` is invalid.
        """
        options = UncoveredOptions(
            min_risk=min_risk,
            limit=self.cfg.uncovered_limit if limit is None else limit,
            include_reasons=include_reasons,
        )
        return get_uncovered_functions(self._index, self._call_graph, options, self.cfg)

    def get_minimum_test_set(self, changed_files: Iterable[str]) -> MinimumTestSet:
        """Select the tests affected by ``changed_files``."""
        return get_minimum_test_set(
            self._index, self._call_graph, self._extractions, changed_files, self.cfg
        )

    def analyze_mocks(self) -> MockAnalysis:
        """Aggregate mock usage across stored extractions."""
        return analyze_mocks(self._extractions, self.cfg)

    def get_summary(self) -> TestTopologySummary:
        """Summarise the suite and its coverage of the call graph."""
        return get_summary(self._index, self._call_graph, self._extractions, self.cfg)

    def analyze(self) -> TestTopologyResult:
        """
        Rebuild the index and run every report.

        Returns
        -------
        TestTopologyResult
            Extractions, coverage for each non-test source file, mock analysis,
            and the summary.
        """
        self.build_mappings()
        coverage: dict[str, TestCoverage] = {}
        if self._call_graph is not None:
            is_test_file = TestFileClassifier(self.cfg.test_file_patterns)
            files = sorted({func.file for func in self._call_graph.functions.values()})
            for source_file in files:
                if is_test_file(source_file):
                    continue
                report = self.get_coverage(source_file)
                if report is not None:
                    coverage[source_file] = report
        return TestTopologyResult(
            extractions=tuple(self._extractions.values()),
            coverage=coverage,
            mock_analysis=self.analyze_mocks(),
            summary=self.get_summary(),
        )

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    @property
    def extractions(self) -> Mapping[str, TestExtraction]:
        """Stored extractions keyed by test file path."""
        return MappingProxyType(self._extractions)

    @property
    def call_graph(self) -> CallGraph | None:
        """Call graph set by ``set_call_graph``."""
        return self._call_graph

    @property
    def index(self) -> TopologyIndex:
        """Index produced by the most recent ``build_mappings`` call."""
        return self._index

    @property
    def test_to_functions(self) -> dict[str, set[str]]:
        """Test id to reached function ids."""
        return self._index.test_to_functions

    @property
    def function_to_tests(self) -> dict[str, set[str]]:
        """Function id to covering test ids."""
        return self._index.function_to_tests


def create_test_topology_analyzer(cfg: TopologyConfig | None = None) -> TestTopologyAnalyzer:
    """
    Create an analyzer wired with the built-in extractors.

    Returns
    -------
    TestTopologyAnalyzer
        Fresh analyzer with an empty index.
    """
    return TestTopologyAnalyzer(registry=default_registry(), cfg=cfg)


__all__ = ["TestTopologyAnalyzer", "create_test_topology_analyzer"]
