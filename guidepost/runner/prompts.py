"""
Prompt Templates

The agent sees the simulated web results as a JSON array between fixed
markers and must answer with JSON only.
"""

import json
from typing import Optional, Sequence

from ..search.engine import SearchResult

RESULTS_START = "=== SIMULATED_WEB_RESULTS ==="
RESULTS_END = "=== END_SIMULATED_WEB_RESULTS ==="

ANSWER_SCHEMA = """{
  "provider_name": "string or null",
  "found": boolean,
  "extracted_attributes": {
    "location": { "city": "string", "state": "string" } | null,
    "specialties": ["string"] | null,
    "languages": ["string"] | null,
    "accepting_new_patients": boolean | null,
    "telehealth_available": boolean | null,
    "insurance_accepted": ["string"] | null
  },
  "notes": "string or null"
}"""


EXPECTED_PROVIDER_PROMPT = """Execute this healthcare provider search query and analyze the results:

Query: {query_text}
Expected Provider Name: {expected}

{results_start}
{results}
{results_end}

Instructions:
1. Use ONLY the providers listed in SIMULATED_WEB_RESULTS above as your web search findings. Do not invent providers.
2. Parse the results to determine if the expected provider name "{expected}" appears anywhere in the returned provider list.
3. CRITICAL: Set "found": true ONLY if the expected provider name "{expected}" appears in the query results. Use case-insensitive matching and ignore "Dr." prefix and extra spaces. Any other provider names appearing in the results should NOT trigger "found": true.
4. Set "provider_name" to the name from the results that matches the expected provider name (if found), otherwise null.
5. Extract attributes (location, specialties, languages, accepting_new_patients, telehealth_available, insurance_accepted) from the query results for whichever providers appear, but remember that "found" must only reflect whether the expected provider name appears.
6. Do not infer or invent any attributes that are not explicitly present in the query results.
7. In the notes field, describe whether the expected provider was found in the query results and include any relevant context from the search.

Return ONLY valid JSON matching this exact schema:
{schema}

Return JSON only, no other text."""


OPEN_PROMPT = """Execute this healthcare provider search query and analyze the results:

Query: {query_text}

{results_start}
{results}
{results_end}

Instructions:
1. Use ONLY the providers listed in SIMULATED_WEB_RESULTS above as your web search findings. Do not invent providers.
2. Parse the results to identify any provider names that appear in the returned data.
3. Set "found": true if you can identify a specific provider from the results, false otherwise.
4. Extract attributes (location, specialties, languages, accepting_new_patients, telehealth_available, insurance_accepted) ONLY from data present in the search results.
5. Do not infer or invent any attributes that are not explicitly present in the results.
6. Include optional reasoning in the notes field.

Return ONLY valid JSON matching this exact schema:
{schema}

Return JSON only, no other text."""


def format_search_results(results: Sequence[SearchResult]) -> str:
    """Render results as the indented JSON array embedded in prompts"""
    if not results:
        return "[]"

    formatted = []
    for result in results:
        provider = result.provider
        formatted.append({
            "provider_name": provider.provider_name,
            "specialties": provider.specialties or [],
            "location": provider.location.model_dump() if provider.location else None,
            "languages": provider.languages or [],
            "insurance_accepted": provider.insurance_accepted or [],
            "accepting_new_patients": provider.accepting_new_patients,
            "telehealth_available": provider.telehealth_available,
            "source": provider.source or None,
            "score": result.score,
            "match_reasons": list(result.reasons),
        })
    return json.dumps(formatted, indent=2)


def build_prompt(
    query_text: str,
    expected_provider_name: Optional[str],
    results: Sequence[SearchResult],
) -> str:
    """Prompt for one query; the expected-provider variant when a name is known"""
    template = EXPECTED_PROVIDER_PROMPT if expected_provider_name else OPEN_PROMPT
    return template.format(
        query_text=query_text,
        expected=expected_provider_name or "",
        results_start=RESULTS_START,
        results=format_search_results(results),
        results_end=RESULTS_END,
        schema=ANSWER_SCHEMA,
    )
