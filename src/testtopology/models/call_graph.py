"""Call graph records supplied by an external call-graph builder."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True)
class CallSite:
    """
    One outgoing call from a function.

    Polymorphic call sites resolve to several candidate callees.
    """

    resolved_candidates: tuple[str, ...] = ()
    callee_name: str | None = None
    line: int | None = None


@dataclass(frozen=True)
class FunctionNode:
    """A production function known to the call graph."""

    id: str
    name: str
    qualified_name: str
    file: str
    start_line: int
    calls: tuple[CallSite, ...] = ()
    called_by: tuple[str, ...] = ()
    data_access: tuple[str, ...] = ()

    def callee_ids(self) -> Iterator[str]:
        """
        Yield every resolved candidate across all call sites.

        Yields
        ------
        str
            Candidate function ids, in call-site order.
        """
        for call in self.calls:
            yield from call.resolved_candidates


@dataclass(frozen=True)
class CallGraph:
    """
    Functions and entry points of the code under test.

    Treated as read-only once handed to the analyzer.
    """

    functions: Mapping[str, FunctionNode] = field(default_factory=dict)
    entry_points: frozenset[str] = frozenset()

    def is_entry_point(self, function_id: str) -> bool:
        """Return True when the function is designated externally reachable."""
        return function_id in self.entry_points

    def get(self, function_id: str) -> FunctionNode | None:
        """Return the function node for ``function_id`` when known."""
        return self.functions.get(function_id)


__all__ = ["CallGraph", "CallSite", "FunctionNode"]
