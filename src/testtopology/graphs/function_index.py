"""Lookup structure for resolving call-site names to call-graph functions."""

from __future__ import annotations

from collections.abc import Iterable

from testtopology.ingestion.paths import normalize_rel_path, parent_dir
from testtopology.models.call_graph import CallGraph, FunctionNode


class FunctionNameIndex:
    """
    Index call-graph functions by short name and dotted qualified-name suffix.

    A function ``pkg.mod.Service.run`` named ``run`` is reachable under the keys
    ``run``, ``Service.run``, ``mod.Service.run`` and ``pkg.mod.Service.run``.
    """

    def __init__(self, functions: Iterable[FunctionNode]) -> None:
        self._by_key: dict[str, list[FunctionNode]] = {}
        for func in functions:
            for key in _keys_for(func):
                self._by_key.setdefault(key, []).append(func)

        for bucket in self._by_key.values():
            bucket.sort(key=lambda f: (normalize_rel_path(f.file), f.start_line, f.id))

    @classmethod
    def from_call_graph(cls, graph: CallGraph | None) -> FunctionNameIndex:
        """
        Build an index over every function of ``graph``.

        Returns
        -------
        FunctionNameIndex
            Index over the graph; empty when no graph is given.
        """
        if graph is None:
            return cls(())
        return cls(graph.functions.values())

    def candidates(self, call_name: str) -> list[FunctionNode]:
        """
        Return functions matching a raw call-site name.

        Returns
        -------
        list[FunctionNode]
            Matches ordered by file, start line and id (empty when missing).
        """
        return list(self._by_key.get(call_name, ()))

    def in_file(self, call_name: str, rel_path: str) -> list[FunctionNode]:
        """
        Return matches defined in ``rel_path``.

        Returns
        -------
        list[FunctionNode]
            Matches whose file equals ``rel_path``.
        """
        target = normalize_rel_path(rel_path)
        return [f for f in self.candidates(call_name) if normalize_rel_path(f.file) == target]

    def in_directory(self, call_name: str, rel_path: str) -> list[FunctionNode]:
        """
        Return matches defined in the same directory as ``rel_path``.

        Returns
        -------
        list[FunctionNode]
            Matches whose parent directory equals the caller's.
        """
        directory = parent_dir(rel_path)
        return [f for f in self.candidates(call_name) if parent_dir(f.file) == directory]


def _keys_for(func: FunctionNode) -> list[str]:
    keys = [func.name]
    parts = func.qualified_name.split(".") if func.qualified_name else []
    keys.extend(".".join(parts[idx:]) for idx in range(len(parts)))
    return [key for key in dict.fromkeys(keys) if key]


__all__ = ["FunctionNameIndex"]
