"""Pull the JSON payload out of raw model text."""

from __future__ import annotations

import json
import re
from typing import Any

_FENCED_RE = re.compile(r"```(?:json)?\s*\n?(\{[\s\S]*?\})\s*\n?```")

_decoder = json.JSONDecoder()


def _last_object(text: str) -> dict[str, Any]:
    """Decode every top-level ``{...}`` in ``text`` and return the last one.

    Objects quoted inside a leading trace are skipped over; the answer object
    comes after them.
    """
    found: dict[str, Any] | None = None
    error: json.JSONDecodeError | None = None
    i = text.find("{")
    while i != -1:
        try:
            obj, end = _decoder.raw_decode(text, i)
        except json.JSONDecodeError as e:
            error = e
            i = text.find("{", i + 1)
            continue
        if isinstance(obj, dict):
            found = obj
        i = text.find("{", end)

    if found is not None:
        return found
    if error is not None:
        raise ValueError(f"model response contains malformed JSON: {error}")
    raise ValueError("no JSON object found in model response")


def extract_json(text: str) -> Any:
    """Return the JSON object contained in ``text``.

    Accepts a bare object, an object inside markdown fences, or an object
    surrounded by prose (e.g. a leading "Thought:" trace that may itself
    quote JSON). Raises ValueError when nothing parses.
    """
    stripped = text.strip()
    if not stripped:
        raise ValueError("model response is empty")

    try:
        return json.loads(stripped)
    except json.JSONDecodeError:
        pass

    match = _FENCED_RE.search(stripped)
    if match:
        try:
            return json.loads(match.group(1))
        except json.JSONDecodeError:
            pass

    return _last_object(stripped)
