"""
Tests for the simulated web search

Tests tokenization, weighted scoring, ranking and the corpus store.
"""

import json

import pytest

from guidepost.common.schemas import GeneratedQuery, Location, ProviderRecord
from guidepost.search import (
    CorpusStore,
    SearchInput,
    get_corpus_store,
    reset_corpus_store,
    score_provider,
    search,
    search_providers,
    text_overlap,
    tokenize,
)


class TestTokenizer:
    def test_lowercases_and_strips_punctuation(self):
        assert tokenize("Dermatology in Cambridge, MA!") == ["dermatology", "in", "cambridge", "ma"]

    def test_empty_string(self):
        assert tokenize("") == []

    def test_punctuation_only(self):
        assert tokenize("?!, ...") == []

    def test_overlap_fraction(self):
        provider = ProviderRecord(
            provider_name="Dr. Ava Patel",
            specialties=["Dermatology"],
            location={"city": "Cambridge", "state": "MA"},
        )
        # "dermatology", "cambridge" match; "best", "doctor" do not
        assert text_overlap("best dermatology doctor Cambridge", provider) == pytest.approx(0.5)

    def test_overlap_counts_distinct_query_tokens(self):
        provider = ProviderRecord(provider_name="Ava Patel")
        assert text_overlap("ava ava ava bob", provider) == pytest.approx(0.5)

    def test_overlap_empty_query_is_zero(self):
        provider = ProviderRecord(provider_name="Ava Patel")
        assert text_overlap("", provider) == 0.0
        assert text_overlap("!!!", provider) == 0.0

    def test_overlap_includes_source(self):
        provider = ProviderRecord(provider_name="Ava Patel", source="healthgrades")
        assert text_overlap("healthgrades", provider) == 1.0


class TestScoring:
    def test_empty_input_scores_zero(self, web_corpus):
        for provider in web_corpus:
            result = score_provider(SearchInput(), provider)
            assert result.score == 0
            assert result.reasons == []

    def test_specialty_match_is_case_insensitive(self, web_corpus):
        result = score_provider(SearchInput(specialty="dermatology"), web_corpus[0])
        assert result.score >= 10
        assert result.reasons == ["specialty:dermatology"]

    def test_each_weight(self, web_corpus):
        provider = web_corpus[0]
        cases = [
            (SearchInput(location=Location(city="cambridge")), 5, "city:Cambridge"),
            (SearchInput(location=Location(state="ma")), 3, "state:MA"),
            (SearchInput(insurance="AETNA"), 5, "insurance:AETNA"),
            (SearchInput(language="hindi"), 2, "language:hindi"),
            (SearchInput(accepting_new_patients=True), 1, "accepting_new_patients:true"),
        ]
        for query, weight, reason in cases:
            result = score_provider(query, provider)
            assert result.score == weight
            assert result.reasons == [reason]

    def test_telehealth_requires_both_flags(self, web_corpus):
        assert score_provider(SearchInput(telehealth_available=True), web_corpus[0]).score == 0
        assert score_provider(SearchInput(telehealth_available=True), web_corpus[1]).score == 1
        assert score_provider(SearchInput(telehealth_available=False), web_corpus[1]).score == 0

    def test_reasons_follow_criterion_order(self, web_corpus):
        query = SearchInput(
            text="Patel",
            specialty="Dermatology",
            location=Location(city="Cambridge", state="MA"),
            insurance="Aetna",
            language="English",
            accepting_new_patients=True,
        )
        result = score_provider(query, web_corpus[0])
        assert [r.split(":")[0] for r in result.reasons] == [
            "specialty", "city", "state", "insurance", "language",
            "accepting_new_patients", "text_overlap",
        ]
        assert result.score == pytest.approx(10 + 5 + 3 + 5 + 2 + 1 + 5)
        assert result.reasons[-1] == "text_overlap:100%"

    def test_missing_provider_fields_contribute_zero(self):
        bare = ProviderRecord(provider_name="Dr. Nobody")
        query = SearchInput(
            specialty="Dermatology",
            location=Location(city="Cambridge", state="MA"),
            insurance="Aetna",
            language="English",
            accepting_new_patients=True,
            telehealth_available=True,
        )
        assert score_provider(query, bare).score == 0

    def test_text_overlap_reason_rounds_percent(self, web_corpus):
        result = score_provider(SearchInput(text="cardiology boston xyz"), web_corpus[1])
        assert result.reasons == ["text_overlap:67%"]
        assert result.score == pytest.approx(5 * 2 / 3)


class TestRanking:
    def test_orders_by_score(self, web_corpus):
        results = search(SearchInput(specialty="Cardiology"), web_corpus, limit=3)
        assert results[0].provider.provider_name == "Dr. Liam Chen"

    def test_ties_break_by_name_ascending(self):
        corpus = [
            ProviderRecord(provider_name="Dr. Zed"),
            ProviderRecord(provider_name="dr. Bea"),
            ProviderRecord(provider_name="Dr. Amy"),
        ]
        results = search(SearchInput(), corpus, limit=10)
        assert [r.provider.provider_name for r in results] == ["Dr. Amy", "dr. Bea", "Dr. Zed"]

    def test_empty_corpus(self):
        assert search(SearchInput(text="anything"), [], limit=5) == []

    def test_limit_larger_than_corpus(self, web_corpus):
        assert len(search(SearchInput(), web_corpus, limit=50)) == len(web_corpus)

    def test_limit_truncates(self, web_corpus):
        assert len(search(SearchInput(), web_corpus, limit=2)) == 2

    def test_deterministic(self, web_corpus):
        query = SearchInput(text="doctor in MA", location=Location(state="MA"))
        first = [(r.provider.provider_name, r.score) for r in search(query, web_corpus)]
        second = [(r.provider.provider_name, r.score) for r in search(query, list(reversed(web_corpus)))]
        assert first == second

    def test_dermatologist_in_cambridge_end_to_end(self, web_corpus):
        query = GeneratedQuery(
            query_id="q_0001",
            query_text="Dermatologist in Cambridge accepting Aetna",
            provider_id="p_001",
            city="Cambridge",
            state="MA",
            specialty="Dermatology",
            insurance="Aetna",
        )
        results = search(SearchInput.from_query(query), web_corpus, limit=15)

        top = results[0]
        assert top.provider.provider_name == "Dr. Ava Patel"
        assert "specialty:Dermatology" in top.reasons
        assert "city:Cambridge" in top.reasons
        assert "insurance:Aetna" in top.reasons

    def test_to_dict(self, web_corpus):
        result = search(SearchInput(specialty="Dermatology"), web_corpus, limit=1)[0]
        data = result.to_dict()
        assert data["provider"]["provider_name"] == "Dr. Ava Patel"
        assert data["score"] == 10
        assert data["reasons"] == ["specialty:Dermatology"]


class TestSearchInput:
    def test_from_query_sets_location_when_city_or_state(self):
        query = GeneratedQuery(query_id="q", query_text="x", state="MA")
        search_input = SearchInput.from_query(query)
        assert search_input.location == Location(city=None, state="MA")
        assert search_input.text == "x"

    def test_from_query_without_location(self):
        query = GeneratedQuery(query_id="q", query_text="x")
        assert SearchInput.from_query(query).location is None

    def test_from_directory_provider_uses_first_values(self, directory):
        search_input = SearchInput.from_directory_provider("dermatologist", directory[0])
        assert search_input.specialty == "Dermatology"
        assert search_input.insurance == "Aetna"
        assert search_input.language == "English"
        assert search_input.location.city == "Cambridge"

    def test_from_directory_provider_none(self):
        assert SearchInput.from_directory_provider("text", None) == SearchInput(text="text")

    def test_coerce_dict_generated_query(self):
        search_input = SearchInput.coerce({
            "query_id": "q", "query_text": "derm", "provider_id": "p", "city": "Cambridge",
        })
        assert search_input.text == "derm"
        assert search_input.location.city == "Cambridge"

    def test_coerce_plain_dict(self):
        search_input = SearchInput.coerce({"text": "derm", "location": {"state": "MA"}})
        assert search_input.location.state == "MA"

    def test_coerce_rejects_other_types(self):
        with pytest.raises(TypeError):
            SearchInput.coerce(42)


class TestCorpusStore:
    def _write(self, path, lines):
        path.write_text("\n".join(lines) + "\n")

    def test_loads_and_skips_bad_lines(self, tmp_path):
        web = tmp_path / "fake_web_providers.jsonl"
        self._write(web, [
            json.dumps({"provider_name": "Dr. A", "specialties": ["Dermatology"]}),
            "{not json",
            "",
            json.dumps({"provider_name": "Dr. B", "specialties": "not-a-list"}),
            json.dumps({"provider_name": "Dr. C"}),
        ])
        store = CorpusStore(data_config=_data_config(web_providers_path=str(web)))

        names = [p.provider_name for p in store.web_providers]
        assert names == ["Dr. A", "Dr. C"]

    def test_non_utf8_line_is_skipped(self, tmp_path):
        web = tmp_path / "fake_web_providers.jsonl"
        web.write_bytes(
            json.dumps({"provider_name": "Dr. A"}).encode() + b"\n"
            + b'{"provider_name": "Dr. \xff\xfe"}\n'
            + json.dumps({"provider_name": "Dr. C"}).encode() + b"\n"
        )
        store = CorpusStore(data_config=_data_config(web_providers_path=str(web)))

        assert [p.provider_name for p in store.web_providers] == ["Dr. A", "Dr. C"]

    def test_missing_file_yields_empty(self, tmp_path):
        store = CorpusStore(data_config=_data_config(
            providers_path=str(tmp_path / "missing.jsonl"),
        ))
        assert store.directory == []

    def test_cached_until_reset(self, tmp_path):
        web = tmp_path / "fake_web_providers.jsonl"
        self._write(web, [json.dumps({"provider_name": "Dr. A"})])
        store = CorpusStore(data_config=_data_config(web_providers_path=str(web)))
        assert len(store.web_providers) == 1

        self._write(web, [json.dumps({"provider_name": "Dr. A"}), json.dumps({"provider_name": "Dr. B"})])
        assert len(store.web_providers) == 1

        store.reset()
        assert len(store.web_providers) == 2

    def test_data_dir_resolution(self, tmp_path):
        self._write(tmp_path / "providers.jsonl", [
            json.dumps({"provider_id": "p_1", "first": "Ava", "last": "Patel"}),
        ])
        store = CorpusStore(data_config=_data_config(data_dir=str(tmp_path)))
        assert store.find_directory_provider("p_1").full_name == "Ava Patel"
        assert store.find_directory_provider("p_404") is None

    def test_singleton_and_reset(self):
        first = get_corpus_store()
        assert get_corpus_store() is first
        reset_corpus_store()
        assert get_corpus_store() is not first

    def test_search_providers_uses_store(self, store):
        results = search_providers({"text": "cardiology"}, limit=1, store=store)
        assert results[0].provider.provider_name == "Dr. Liam Chen"


def _data_config(**kwargs):
    from guidepost.common.config import DataConfig
    return DataConfig(**kwargs)
