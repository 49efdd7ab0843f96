"""Shared utilities for parsing LLM responses."""

from __future__ import annotations

import json
import re
from typing import Any, Optional

_LEADING_FENCE_RE = re.compile(r"^```(?:json)?\s*\n?", re.IGNORECASE)
_TRAILING_FENCE_RE = re.compile(r"\n?```\s*$")
_JSON_OBJECT_RE = re.compile(r"(\{[\s\S]*\})")


def strip_code_fences(text: str) -> str:
    """Remove a leading ``` (optionally ```json) and a trailing ```."""
    text = _LEADING_FENCE_RE.sub("", text, count=1)
    text = _TRAILING_FENCE_RE.sub("", text, count=1)
    return text.strip()


def parse_json_from_text(text: str) -> Optional[Any]:
    """Parse JSON from an LLM response, handling code fences and preamble text.

    Tries in order:
    1. Strip markdown code fences
    2. json.loads on the span from the first '{' to the last '}'
    3. json.loads on the whole cleaned text when there is no such span
    4. Return None
    """
    if not text:
        return None

    cleaned = strip_code_fences(text)
    match = _JSON_OBJECT_RE.search(cleaned)
    candidate = match.group(1) if match else cleaned

    try:
        return json.loads(candidate)
    except (json.JSONDecodeError, ValueError):
        return None
