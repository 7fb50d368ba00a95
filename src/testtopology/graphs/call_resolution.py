"""Pure resolution logic mapping test call-site names to call-graph functions."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from testtopology.graphs.function_index import FunctionNameIndex

log = logging.getLogger(__name__)

UNIQUE_CONFIDENCE = 1.0
SAME_FILE_CONFIDENCE = 0.8
SAME_DIRECTORY_CONFIDENCE = 0.7
AMBIGUOUS_CONFIDENCE = 0.4


@dataclass(frozen=True)
class ResolutionResult:
    """Structured outcome for a single call-site resolution attempt."""

    function_id: str | None
    resolved_via: str
    confidence: float

    @property
    def is_resolved(self) -> bool:
        """Return True when a function id was found."""
        return self.function_id is not None

    @property
    def is_ambiguous(self) -> bool:
        """Return True when several candidates remained after every tie-break."""
        return self.resolved_via == "ambiguous"


UNRESOLVED = ResolutionResult(function_id=None, resolved_via="unresolved", confidence=0.0)


def resolve_call(call_name: str, caller_file: str, index: FunctionNameIndex) -> ResolutionResult:
    """
    Resolve a raw call-site name to a function id.

    Resolution precedence: unique name -> same file -> same directory -> ambiguous pick.
    A name matches a function when it equals the function name, its qualified
    name, or a dotted suffix of the qualified name.

    Parameters
    ----------
    call_name : str
        Call-site name as written in the test body (e.g. ``"parse"`` or ``"Parser.parse"``).
    caller_file : str
        Path of the test file containing the call.
    index : FunctionNameIndex
        Name index over the current call graph.

    Returns
    -------
    ResolutionResult
        Structured resolution outcome with function id, provenance, and confidence.
    """
    candidates = index.candidates(call_name)
    if not candidates:
        log.debug("Unresolved call %r from %s", call_name, caller_file)
        return UNRESOLVED
    if len(candidates) == 1:
        return ResolutionResult(
            function_id=candidates[0].id,
            resolved_via="unique_name",
            confidence=UNIQUE_CONFIDENCE,
        )

    same_file = index.in_file(call_name, caller_file)
    if len(same_file) == 1:
        return ResolutionResult(
            function_id=same_file[0].id,
            resolved_via="same_file",
            confidence=SAME_FILE_CONFIDENCE,
        )

    same_dir = index.in_directory(call_name, caller_file)
    if len(same_dir) == 1:
        return ResolutionResult(
            function_id=same_dir[0].id,
            resolved_via="same_directory",
            confidence=SAME_DIRECTORY_CONFIDENCE,
        )

    narrowed = same_file or same_dir or candidates
    log.debug(
        "Ambiguous call %r from %s: %d candidates, picked %s",
        call_name,
        caller_file,
        len(narrowed),
        narrowed[0].id,
    )
    return ResolutionResult(
        function_id=narrowed[0].id,
        resolved_via="ambiguous",
        confidence=AMBIGUOUS_CONFIDENCE,
    )


__all__ = ["UNRESOLVED", "ResolutionResult", "resolve_call"]
