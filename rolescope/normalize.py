"""Text recovery heuristics.

This module contains the deterministic parsing logic applied to raw model output:
- markdown fence stripping
- locating exactly one JSON object among prose and duplicated output
- a strict JSON parse with one bounded repair-and-retry

Nothing here knows about job postings; field semantics live in `reconcile.py`.
Keeping these heuristics centralized makes the pipeline predictable and testable.
"""

from __future__ import annotations

import json
import re
from enum import Enum
from typing import Any, Dict, Tuple

from .errors import InvalidJsonError, MalformedInputError
from .log import get_logger

log = get_logger(__name__)

# ``` or ```json, plus the newline that usually follows the opening marker.
FENCE_RE = re.compile(r"```(?:json)?[ \t]*\n?", flags=re.IGNORECASE)

_WHITESPACE = " \t\r\n"
_STRING_FOLLOWERS = ",:]}"


class ParseState(Enum):
    """The two states of the lenient parser. There is no third attempt."""

    STRICT = "strict"
    REPAIRED = "repaired"


def strip_code_fences(text: str) -> str:
    """Remove triple-backtick fences (optionally tagged json), keeping what they wrap.

    Text without a triple backtick is returned untouched, so single backticks
    inside values survive.
    """
    if "```" not in text:
        return text
    return FENCE_RE.sub("", text).strip()


def _string_end(text: str, start: int) -> Tuple[int, bool]:
    """Return (index after the closing quote, terminated) for the literal opening at `start`."""
    i = start + 1
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == '"':
            return i + 1, True
        i += 1
    return n, False


def _next_significant(text: str, start: int) -> int:
    i = start
    while i < len(text) and text[i] in _WHITESPACE:
        i += 1
    return i


def _find_duplicate_marker(text: str, start: int) -> int:
    """Index of the first newline directly followed by `{` at top level, or -1.

    Markers inside string literals or nested containers are not duplicates.
    """
    depth = 0
    i = start
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == '"':
            i, _ = _string_end(text, i)
            continue
        if ch in "{[":
            depth += 1
        elif ch in "}]":
            depth = max(depth - 1, 0)
        elif ch == "\n" and depth == 0 and text.startswith("{", i + 1):
            return i
        i += 1
    return -1


def find_object_span(text: str) -> Tuple[int, int]:
    """Locate one candidate object as (start inclusive, end exclusive).

    Two rules, applied in order:
    1. A top-level newline followed by another `{` marks a duplicate; the span
       ends there.
    2. Otherwise the span runs to the last `}` in the text.

    Trailing whitespace is excluded from the span. When no `}` follows the
    start, the span runs to the end of the text and the parser decides.
    """
    start = text.find("{")
    if start == -1:
        raise MalformedInputError(text)

    marker = _find_duplicate_marker(text, start)
    if marker != -1:
        log.debug("Duplicate object detected at offset %d; keeping the first", marker + 1)
        end = marker
    else:
        last = text.rfind("}")
        end = last + 1 if last >= start else len(text)

    while end > start and text[end - 1] in _WHITESPACE:
        end -= 1
    log.debug("Candidate object span [%d, %d) of %d chars", start, end, len(text))
    return start, end


def slice_object(text: str) -> str:
    start, end = find_object_span(text)
    return text[start:end]


def repair_json(text: str) -> str:
    """Apply the single best-effort repair pass.

    - A string literal followed by something other than `,` `:` `]` `}` gets a
      comma after its closing quote (missing separator).
    - A value ending in `}` `]` or a bare literal that is followed by a string
      gets a comma as well.
    - A comma directly before `]` or `}` (whitespace allowed) is dropped.

    The pass is lexical: string contents are copied verbatim.
    """
    out = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == '"':
            end, terminated = _string_end(text, i)
            out.append(text[i:end])
            nxt = _next_significant(text, end)
            if terminated and nxt < n and text[nxt] not in _STRING_FOLLOWERS:
                out.append(",")
            i = end
            continue
        if ch == ",":
            nxt = _next_significant(text, i + 1)
            if nxt < n and text[nxt] in "]}":
                i += 1
                continue
        out.append(ch)
        if ch in "}]" or ch.isalnum():
            nxt = _next_significant(text, i + 1)
            if nxt < n and text[nxt] == '"':
                out.append(",")
        i += 1
    return "".join(out)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant {name!r}")


def _loads_object(text: str) -> Dict[str, Any]:
    data = json.loads(text, parse_constant=_reject_constant)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def parse_lenient(span: str) -> Dict[str, Any]:
    """Parse `span` strictly, then once more after `repair_json`; raise InvalidJsonError if both fail."""
    errors: Dict[ParseState, str] = {}
    for state in ParseState:
        candidate = span if state is ParseState.STRICT else repair_json(span)
        try:
            data = _loads_object(candidate)
        except (ValueError, RecursionError) as exc:
            # RecursionError: nesting deeper than the decoder's recursion limit
            errors[state] = str(exc)
            if state is ParseState.STRICT:
                log.warning("JSON parse error (%s); attempting to clean and retry", exc)
            continue
        if state is ParseState.REPAIRED:
            log.info("Successfully parsed after cleaning")
        return data

    log.error("Failed to parse even after cleaning: %s", errors[ParseState.REPAIRED])
    raise InvalidJsonError(errors[ParseState.STRICT], errors[ParseState.REPAIRED])
