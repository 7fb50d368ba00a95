"""
Load call-graph payloads produced by an external call-graph builder.

Payloads are JSON-like mappings of the form::

    {
        "functions": {"<id>": {"name": ..., "qualifiedName": ..., "file": ...,
                               "startLine": ..., "calls": [...], "calledBy": [...],
                               "dataAccess": [...]}},
        "entryPoints": ["<id>", ...],
    }

Keys may be camelCase or snake_case. ``dataAccess`` entries may be plain tags
or objects carrying a ``table`` field.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from testtopology.ingestion.paths import normalize_rel_path
from testtopology.models.call_graph import CallGraph, CallSite, FunctionNode

log = logging.getLogger(__name__)


class _PayloadModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class CallSitePayload(_PayloadModel):
    """One outgoing call site with its resolved candidates."""

    resolved_candidates: list[str] = Field(default_factory=list)
    callee_name: str | None = None
    line: int | None = None


class FunctionPayload(_PayloadModel):
    """A function entry of the payload."""

    id: str | None = None
    name: str
    qualified_name: str | None = None
    file: str
    start_line: int = 0
    calls: list[CallSitePayload] = Field(default_factory=list)
    called_by: list[str] = Field(default_factory=list)
    data_access: list[str] = Field(default_factory=list)

    @field_validator("data_access", mode="before")
    @classmethod
    def _coerce_data_access(cls, value: object) -> object:
        if not isinstance(value, list):
            return value
        return [item.get("table", "") if isinstance(item, Mapping) else item for item in value]


class CallGraphPayload(_PayloadModel):
    """Top-level call-graph payload."""

    functions: dict[str, FunctionPayload] = Field(default_factory=dict)
    entry_points: list[str] = Field(default_factory=list)


def load_call_graph(payload: Mapping[str, object]) -> CallGraph:
    """
    Validate ``payload`` and convert it to a ``CallGraph``.

    Parameters
    ----------
    payload : Mapping[str, object]
        Decoded JSON payload.

    Returns
    -------
    CallGraph
        Immutable call graph keyed by function id.

    Raises
    ------
    pydantic.ValidationError
        When the payload does not match the expected shape.
    """
    parsed = CallGraphPayload.model_validate(payload)
    functions: dict[str, FunctionNode] = {}
    for key, func in parsed.functions.items():
        func_id = func.id or key
        functions[func_id] = FunctionNode(
            id=func_id,
            name=func.name,
            qualified_name=func.qualified_name or func.name,
            file=normalize_rel_path(func.file),
            start_line=func.start_line,
            calls=tuple(
                CallSite(
                    resolved_candidates=tuple(call.resolved_candidates),
                    callee_name=call.callee_name,
                    line=call.line,
                )
                for call in func.calls
            ),
            called_by=tuple(func.called_by),
            data_access=tuple(tag for tag in func.data_access if tag),
        )
    unknown_entries = [eid for eid in parsed.entry_points if eid not in functions]
    if unknown_entries:
        log.debug("Ignoring %d entry points with no function node", len(unknown_entries))
    log.info("Loaded call graph with %d functions", len(functions))
    return CallGraph(
        functions=functions,
        entry_points=frozenset(eid for eid in parsed.entry_points if eid in functions),
    )


__all__ = ["CallGraphPayload", "CallSitePayload", "FunctionPayload", "load_call_graph"]
