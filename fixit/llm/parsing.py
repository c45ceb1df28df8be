# FILE: fixit/llm/parsing.py
"""
JSON extraction from model output.

Models wrap JSON in prose and code fences. These helpers pull out the first
balanced {...} object (braces inside JSON strings are ignored) and parse it,
with one light repair pass for trailing commas.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, Optional

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\s*```$")
_TRAILING_COMMA = re.compile(r",\s*([}\]])")


def extract_json_object(text: str) -> Optional[str]:
    """Return the first balanced {...} substring of text, or None."""
    if not text:
        return None

    t = _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", text.strip()))

    start = t.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escape = False

    for i in range(start, len(t)):
        ch = t[i]
        if escape:
            escape = False
            continue
        if ch == "\\":
            escape = True
            continue
        if ch == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return t[start : i + 1]
    return None


def parse_json_object(text: str) -> Optional[Dict[str, Any]]:
    """Extract and parse the first JSON object in text. None when there is none."""
    candidate = extract_json_object(text)
    if candidate is None:
        return None

    for attempt in (candidate, _TRAILING_COMMA.sub(r"\1", candidate)):
        try:
            data = json.loads(attempt)
        except json.JSONDecodeError:
            continue
        return data if isinstance(data, dict) else None
    return None
