"""Locate a JSON object embedded in free-form model output."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Tuple


class JSONExtractionError(ValueError):
    pass


def find_json_object(text: str) -> Optional[str]:
    """
    Return the first complete ``{...}`` span in ``text``.

    Braces are counted at any depth in a single pass. Inside string literals
    braces are ignored and backslash escapes are honoured, so ``{"a": "}"}``
    is returned whole. Text before the first ``{`` is skipped unexamined.
    When an outer brace never closes, the earliest-starting object that did
    close inside it is returned.
    """
    start = text.find("{")
    if start == -1:
        return None

    open_braces: List[int] = []
    closed: Optional[Tuple[int, int]] = None
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            open_braces.append(index)
        elif char == "}" and open_braces:
            opened = open_braces.pop()
            if not open_braces:
                return text[opened:index + 1]
            if closed is None or opened < closed[0]:
                closed = (opened, index)

    if closed is None:
        return None
    return text[closed[0]:closed[1] + 1]


def extract_json_object(text: Optional[str]) -> Dict[str, Any]:
    if not isinstance(text, str):
        raise JSONExtractionError("content is not text")

    candidate = find_json_object(text)
    if candidate is None:
        raise JSONExtractionError("no balanced JSON object found")

    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise JSONExtractionError(f"invalid JSON object: {exc}") from exc

    if not isinstance(parsed, dict):  # pragma: no cover
        raise JSONExtractionError("extracted value is not an object")
    return parsed
