"""
Tokenizer

Lowercases, replaces non-word characters with spaces and splits on
whitespace. Used by the free-text overlap criterion of the search engine.
"""

import re
from typing import List, Set

from ..common.schemas import ProviderRecord

_NON_WORD_RE = re.compile(r"[^\w\s]")


def tokenize(text: str) -> List[str]:
    """Normalize text into lowercase word tokens"""
    if not text:
        return []
    return [t for t in _NON_WORD_RE.sub(" ", text.lower()).split() if t]


def provider_tokens(provider: ProviderRecord) -> Set[str]:
    """Token set over name, specialties, city, state and source"""
    tokens: Set[str] = set()
    if provider.provider_name:
        tokens.update(tokenize(provider.provider_name))
    for specialty in provider.specialties or []:
        tokens.update(tokenize(specialty))
    if provider.location:
        if provider.location.city:
            tokens.update(tokenize(provider.location.city))
        if provider.location.state:
            tokens.update(tokenize(provider.location.state))
    if provider.source:
        tokens.update(tokenize(provider.source))
    return tokens


def text_overlap(query_text: str, provider: ProviderRecord) -> float:
    """
    Fraction of distinct query tokens found in the provider's token set.

    Returns 0.0 when the query has no tokens.
    """
    query_tokens = set(tokenize(query_text))
    if not query_tokens:
        return 0.0

    tokens = provider_tokens(provider)
    matches = sum(1 for token in query_tokens if token in tokens)
    return matches / len(query_tokens)
