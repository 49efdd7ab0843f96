"""
Answer Parser

Reconciles free-form agent output with the AgentAnswer schema.

- Markdown fences are stripped and the first {...} span is parsed
- Wrong-typed fields fall back to their schema defaults
- Unparseable output yields a sentinel answer (notes="parse_error") plus a
  200-character preview of the text; parsing never raises

"found" is computed here, not taken from the agent: the extracted name must
equal the expected provider's name after normalization. If it does not, the
whole corpus is scanned for a provider with the same normalized name. That
fallback only says "some provider by this name exists"; when two providers
share a normalized name it reports found=True for the wrong one.
"""

import re
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from ..common.llm_utils import parse_json_from_text
from ..common.schemas import AgentAnswer, provider_display_name

PARSE_ERROR_NOTE = "parse_error"
PARSE_ERROR_PREVIEW_CHARS = 200

_HONORIFIC_RE = re.compile(r"^dr(?:\.\s*|\s+)")
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class ParsedAnswer:
    """Parser output: the answer and, on failure, a diagnostic preview"""
    answer: AgentAnswer
    parse_error: Optional[str] = None


def normalize_name(name: str) -> str:
    """Lowercase, drop a leading "Dr."/"Dr " and collapse whitespace"""
    name = name.strip().lower()
    name = _HONORIFIC_RE.sub("", name)
    return _WHITESPACE_RE.sub(" ", name).strip()


def sentinel_answer() -> AgentAnswer:
    return AgentAnswer(
        provider_name=None,
        found=False,
        extracted_attributes={},
        notes=PARSE_ERROR_NOTE,
    )


def _string_or_none(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value.strip() or None
    return None


def name_in_corpus(name: str, corpus: Iterable[Any]) -> bool:
    """True when any provider's normalized display name equals `name`'s"""
    wanted = normalize_name(name)
    for provider in corpus:
        full_name = provider_display_name(provider)
        if full_name and normalize_name(full_name) == wanted:
            return True
    return False


def is_found(
    agent_provider_name: Optional[str],
    expected_provider_name: Optional[str],
    corpus: Iterable[Any] = (),
) -> bool:
    """Identity match against the expected name, then the corpus fallback"""
    if not agent_provider_name:
        return False
    if expected_provider_name and (
        normalize_name(agent_provider_name) == normalize_name(expected_provider_name)
    ):
        return True
    return name_in_corpus(agent_provider_name, corpus)


def parse_agent_answer(
    output_text: str,
    expected_provider_name: Optional[str] = None,
    corpus: Iterable[Any] = (),
) -> ParsedAnswer:
    """
    Parse agent output into an AgentAnswer.

    Args:
        output_text: Raw text returned by the agent
        expected_provider_name: Name of the provider the query targets
        corpus: Providers (models or dicts) for the name-existence fallback

    Returns:
        ParsedAnswer; parse_error is set only when no JSON object was found
    """
    text = output_text or ""
    parsed = parse_json_from_text(text)

    if not isinstance(parsed, dict):
        return ParsedAnswer(
            answer=sentinel_answer(),
            parse_error=text[:PARSE_ERROR_PREVIEW_CHARS],
        )

    agent_provider_name = _string_or_none(parsed.get("provider_name"))
    if agent_provider_name is None:
        agent_provider_name = _string_or_none(parsed.get("provider_id"))

    extracted = parsed.get("extracted_attributes")
    notes = parsed.get("notes")

    answer = AgentAnswer(
        provider_name=agent_provider_name,
        found=is_found(agent_provider_name, expected_provider_name, corpus),
        extracted_attributes=extracted if isinstance(extracted, dict) else {},
        notes=notes if isinstance(notes, str) else None,
    )
    return ParsedAnswer(answer=answer, parse_error=None)
