"""
Query Generator

Builds lookup queries from directory providers:

    "<prefix> <specialty> in <city>, <state> who accepts <insurance> and speaks <language>"

Only the parts present on the provider are included. Random choices come
from an injectable random.Random so results are reproducible in tests.
"""

import json
import random
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from ..common.schemas import DirectoryProvider, GeneratedQuery, QueryTemplateConfig

DEFAULT_SLICE_SIZE = 10


def load_template_config(path: Union[str, Path]) -> QueryTemplateConfig:
    """Load prefixes and attribute catalogue from a JSON file"""
    with open(path, encoding="utf-8") as f:
        return QueryTemplateConfig.model_validate(json.load(f))


def build_query_text(prefix: str, provider: DirectoryProvider) -> str:
    attrs = provider.attributes
    parts = []
    if attrs.specialties:
        parts.append(attrs.specialties[0])
    if attrs.location:
        parts.append(f"in {attrs.location.city}, {attrs.location.state}")
    if attrs.insurance_accepted:
        parts.append(f"who accepts {attrs.insurance_accepted[0]}")
    if attrs.languages:
        parts.append(f"and speaks {attrs.languages[0]}")
    return f"{prefix} {' '.join(parts)}"


def generate_queries(
    config: QueryTemplateConfig,
    providers: Sequence[DirectoryProvider],
    count: int,
    rng: Optional[random.Random] = None,
) -> List[GeneratedQuery]:
    """
    Generate up to `count` queries, cycling through providers.

    At most len(providers) * len(prefixes) queries are produced. Query IDs
    are stable: q_0001, q_0002, ...
    """
    rng = rng or random.Random()
    prefixes = config.prefixes
    if not providers or not prefixes:
        return []

    total = min(count, len(providers) * len(prefixes))
    queries = []
    for i in range(total):
        provider = providers[i % len(providers)]
        prefix = rng.choice(prefixes)
        attrs = provider.attributes
        location = attrs.location

        queries.append(GeneratedQuery(
            query_id=f"q_{i + 1:04d}",
            query_text=build_query_text(prefix, provider),
            prefix=prefix,
            provider_id=provider.provider_id,
            city=location.city if location else None,
            state=location.state if location else None,
            specialty=attrs.specialties[0] if attrs.specialties else None,
            language=attrs.languages[0] if attrs.languages else None,
            insurance=attrs.insurance_accepted[0] if attrs.insurance_accepted else None,
        ))
    return queries


def get_provider_slice(
    query_provider_id: Optional[str],
    providers: Sequence[DirectoryProvider],
    size: int = DEFAULT_SLICE_SIZE,
    rng: Optional[random.Random] = None,
) -> List[DirectoryProvider]:
    """The query's own provider first, then random others up to `size`"""
    rng = rng or random.Random()
    selected: List[DirectoryProvider] = []

    if query_provider_id:
        for provider in providers:
            if provider.provider_id == query_provider_id:
                selected.append(provider)
                break

    used = {p.provider_id for p in selected}
    remaining = [p for p in providers if p.provider_id not in used]
    rng.shuffle(remaining)
    selected.extend(remaining[: max(0, size - len(selected))])
    return selected


def format_provider_for_prompt(provider: DirectoryProvider) -> Dict[str, Any]:
    """Projection of a directory provider with the searchable attributes only"""
    attrs = provider.attributes
    return {
        "provider_id": provider.provider_id,
        "first": provider.first,
        "last": provider.last,
        "attributes": {
            "location": attrs.location.model_dump() if attrs.location else None,
            "specialties": attrs.specialties,
            "languages": attrs.languages,
            "accepting_new_patients": attrs.accepting_new_patients,
            "telehealth_available": attrs.telehealth_available,
            "insurance_accepted": attrs.insurance_accepted,
        },
    }
