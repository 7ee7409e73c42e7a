"""Locate and decode a JSON array embedded in free-form model output."""

from __future__ import annotations

import json
from typing import Any, Iterator, List, Optional


class JSONArrayNotFoundError(ValueError):
    """No decodable JSON array exists in the text."""


def extract_json_array(text: str) -> List[Any]:
    """Return the first balanced, decodable JSON array found in ``text``.

    Text before and after the array is ignored, so conversational preambles
    and trailing remarks from the model are tolerated. Bracketed spans that
    are balanced but do not decode (``[note]``) are skipped and scanning
    continues from the next opening bracket.
    """

    if not text:
        raise JSONArrayNotFoundError("empty response")

    last_error: Optional[json.JSONDecodeError] = None
    for start, end in _balanced_spans(text):
        try:
            value = json.loads(text[start:end])
        except json.JSONDecodeError as exc:
            last_error = exc
            continue
        if isinstance(value, list):
            return value
    if last_error is not None:
        raise JSONArrayNotFoundError(f"no valid JSON array: {last_error}") from last_error
    raise JSONArrayNotFoundError("no JSON array in response")


def _balanced_spans(text: str) -> Iterator[tuple[int, int]]:
    """Yield ``(start, end)`` for each ``[`` whose matching ``]`` exists."""

    start = text.find("[")
    while start != -1:
        end = _matching_bracket(text, start)
        if end is not None:
            yield start, end
        start = text.find("[", start + 1)


def _matching_bracket(text: str, start: int) -> Optional[int]:
    depth = 0
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
        elif char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            if depth == 0:
                return index + 1
    return None
