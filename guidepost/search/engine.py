"""
Search Engine

Scores and ranks the provider corpus against a structured or free-text query.
This is the "web search" the agents are shown.

Scoring is additive over independently weighted criteria:

    specialty 10, city 5, state 3, insurance 5, language 2,
    accepting_new_patients 1, telehealth_available 1,
    free-text overlap 0-5

Results are ordered by score descending, then provider name ascending.
No randomness is involved, so identical inputs give identical rankings.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

from ..common.schemas import (
    DirectoryProvider,
    GeneratedQuery,
    Location,
    ProviderRecord,
)
from .corpus import CorpusStore, get_corpus_store
from .tokenizer import text_overlap

logger = logging.getLogger("guidepost.search.engine")

SPECIALTY_WEIGHT = 10
CITY_WEIGHT = 5
STATE_WEIGHT = 3
INSURANCE_WEIGHT = 5
LANGUAGE_WEIGHT = 2
ACCEPTING_NEW_PATIENTS_WEIGHT = 1
TELEHEALTH_WEIGHT = 1
TEXT_OVERLAP_WEIGHT = 5

DEFAULT_LIMIT = 10


@dataclass(frozen=True)
class SearchInput:
    """Search criteria; every field is optional"""
    text: Optional[str] = None
    specialty: Optional[str] = None
    location: Optional[Location] = None
    insurance: Optional[str] = None
    language: Optional[str] = None
    accepting_new_patients: Optional[bool] = None
    telehealth_available: Optional[bool] = None

    @classmethod
    def from_query(cls, query: GeneratedQuery) -> "SearchInput":
        """Build from a generated query (its text plus structured fields)"""
        location = None
        if query.city or query.state:
            location = Location(city=query.city, state=query.state)
        return cls(
            text=query.query_text,
            specialty=query.specialty,
            location=location,
            insurance=query.insurance,
            language=query.language,
        )

    @classmethod
    def from_directory_provider(
        cls,
        text: Optional[str],
        provider: Optional[DirectoryProvider],
    ) -> "SearchInput":
        """Build from query text plus the first value of each provider attribute"""
        if provider is None:
            return cls(text=text)
        attrs = provider.attributes
        return cls(
            text=text,
            specialty=_first(attrs.specialties),
            location=attrs.location,
            insurance=_first(attrs.insurance_accepted),
            language=_first(attrs.languages),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SearchInput":
        location = data.get("location")
        return cls(
            text=data.get("text"),
            specialty=data.get("specialty"),
            location=Location.model_validate(location) if location else None,
            insurance=data.get("insurance"),
            language=data.get("language"),
            accepting_new_patients=data.get("accepting_new_patients"),
            telehealth_available=data.get("telehealth_available"),
        )

    @classmethod
    def coerce(cls, value: Union["SearchInput", GeneratedQuery, Dict[str, Any]]) -> "SearchInput":
        """Accept a SearchInput, a GeneratedQuery or a plain dict of either"""
        if isinstance(value, SearchInput):
            return value
        if isinstance(value, GeneratedQuery):
            return cls.from_query(value)
        if isinstance(value, dict):
            if "query_text" in value and "provider_id" in value:
                return cls.from_query(GeneratedQuery.model_validate(value))
            return cls.from_dict(value)
        raise TypeError(f"Cannot build SearchInput from {type(value).__name__}")


@dataclass
class SearchResult:
    """A scored provider with the criteria it matched"""
    provider: ProviderRecord
    score: float
    reasons: List[str] = field(default_factory=list)

    @property
    def provider_name(self) -> str:
        return self.provider.display_name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "provider": self.provider.model_dump(mode="json", exclude_none=True),
            "score": self.score,
            "reasons": list(self.reasons),
        }


def _first(values: Optional[List[str]]) -> Optional[str]:
    return values[0] if values else None


def _contains_casefold(values: Optional[List[str]], wanted: str) -> bool:
    wanted = wanted.lower()
    return any(v.lower() == wanted for v in values or [])


def score_provider(query: SearchInput, provider: ProviderRecord) -> SearchResult:
    """Score one provider; reasons follow the fixed criterion order"""
    score = 0.0
    reasons: List[str] = []
    location = provider.location

    if query.specialty and _contains_casefold(provider.specialties, query.specialty):
        score += SPECIALTY_WEIGHT
        reasons.append(f"specialty:{query.specialty}")

    if query.location and query.location.city and location and location.city:
        if query.location.city.lower() == location.city.lower():
            score += CITY_WEIGHT
            reasons.append(f"city:{location.city}")

    if query.location and query.location.state and location and location.state:
        if query.location.state.lower() == location.state.lower():
            score += STATE_WEIGHT
            reasons.append(f"state:{location.state}")

    if query.insurance and _contains_casefold(provider.insurance_accepted, query.insurance):
        score += INSURANCE_WEIGHT
        reasons.append(f"insurance:{query.insurance}")

    if query.language and _contains_casefold(provider.languages, query.language):
        score += LANGUAGE_WEIGHT
        reasons.append(f"language:{query.language}")

    if query.accepting_new_patients is True and provider.accepting_new_patients is True:
        score += ACCEPTING_NEW_PATIENTS_WEIGHT
        reasons.append("accepting_new_patients:true")

    if query.telehealth_available is True and provider.telehealth_available is True:
        score += TELEHEALTH_WEIGHT
        reasons.append("telehealth_available:true")

    if query.text:
        overlap = text_overlap(query.text, provider)
        text_score = overlap * TEXT_OVERLAP_WEIGHT
        score += text_score
        if text_score > 0:
            reasons.append(f"text_overlap:{overlap * 100:.0f}%")

    return SearchResult(provider=provider, score=score, reasons=reasons)


def _rank_key(result: SearchResult):
    name = result.provider_name
    return (-result.score, name.casefold(), name)


def search(
    query: SearchInput,
    corpus: Sequence[ProviderRecord],
    limit: int = DEFAULT_LIMIT,
) -> List[SearchResult]:
    """
    Rank the corpus against the query.

    Args:
        query: Search criteria
        corpus: Providers to score
        limit: Maximum number of results

    Returns:
        Top `limit` results by score descending, name ascending on ties
    """
    if limit <= 0 or not corpus:
        return []

    scored = [score_provider(query, provider) for provider in corpus]
    scored.sort(key=_rank_key)
    return scored[:limit]


def search_providers(
    query: Union[SearchInput, GeneratedQuery, Dict[str, Any]],
    limit: int = DEFAULT_LIMIT,
    store: Optional[CorpusStore] = None,
) -> List[SearchResult]:
    """Search the process-wide web corpus"""
    store = store or get_corpus_store()
    search_input = SearchInput.coerce(query)
    results = search(search_input, store.web_providers, limit)
    logger.debug(
        "Search %r returned %d results (top score %.2f)",
        search_input.text,
        len(results),
        results[0].score if results else 0.0,
    )
    return results
