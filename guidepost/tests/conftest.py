"""Shared fixtures: a small provider directory and web corpus."""

import pytest

from guidepost.common.config import HarnessConfig
from guidepost.common.schemas import DirectoryProvider, ProviderRecord
from guidepost.search.corpus import CorpusStore, reset_corpus_store


@pytest.fixture
def web_corpus():
    return [
        ProviderRecord(
            provider_name="Dr. Ava Patel",
            specialties=["Dermatology"],
            location={"city": "Cambridge", "state": "MA"},
            languages=["English", "Hindi"],
            insurance_accepted=["Aetna", "Cigna"],
            accepting_new_patients=True,
            telehealth_available=False,
            source="healthgrades",
        ),
        ProviderRecord(
            provider_name="Dr. Liam Chen",
            specialties=["Cardiology"],
            location={"city": "Boston", "state": "MA"},
            languages=["English", "Mandarin"],
            insurance_accepted=["UnitedHealthcare"],
            accepting_new_patients=False,
            telehealth_available=True,
            source="zocdoc",
        ),
        ProviderRecord(
            provider_name="Dr. Mia Garcia",
            specialties=["Family Medicine"],
            location={"city": "Austin", "state": "TX"},
            languages=["Spanish", "English"],
            insurance_accepted=["Blue Cross Blue Shield"],
            accepting_new_patients=True,
            telehealth_available=True,
            source="vitals",
        ),
    ]


@pytest.fixture
def directory():
    return [
        DirectoryProvider(
            provider_id="p_001",
            first="Ava",
            last="Patel",
            gender="female",
            attributes={
                "location": {"city": "Cambridge", "state": "MA"},
                "specialties": ["Dermatology"],
                "languages": ["English"],
                "insurance_accepted": ["Aetna"],
                "accepting_new_patients": True,
            },
        ),
        DirectoryProvider(
            provider_id="p_002",
            first="Liam",
            last="Chen",
            gender="male",
            attributes={
                "location": {"city": "Boston", "state": "MA"},
                "specialties": ["Cardiology"],
                "languages": ["Mandarin"],
                "insurance_accepted": ["UnitedHealthcare"],
            },
        ),
        DirectoryProvider(provider_id="p_003", first="Noah", last="Kim"),
    ]


@pytest.fixture
def store(directory, web_corpus):
    return CorpusStore(directory=directory, web_providers=web_corpus)


@pytest.fixture
def harness_config():
    config = HarnessConfig()
    config.agents.retry_delay = 0.0
    return config


@pytest.fixture(autouse=True)
def _isolate_corpus_singleton():
    reset_corpus_store()
    yield
    reset_corpus_store()
