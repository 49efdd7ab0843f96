"""
Provider Record Schemas

Two provider shapes live in the harness:
- ProviderRecord: a flat "web search" listing used as the search corpus
- DirectoryProvider: the ground-truth directory entry a query is built from

Both are immutable once loaded.
"""

from typing import Any, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class Location(BaseModel):
    """City/state pair"""
    model_config = ConfigDict(frozen=True)

    city: Optional[str] = None
    state: Optional[str] = None


class ProviderRecord(BaseModel):
    """A provider listing in the simulated web search corpus"""
    model_config = ConfigDict(frozen=True, extra="ignore")

    provider_name: Optional[str] = None
    specialties: Optional[List[str]] = None
    location: Optional[Location] = None
    languages: Optional[List[str]] = None
    insurance_accepted: Optional[List[str]] = None
    accepting_new_patients: Optional[bool] = None
    telehealth_available: Optional[bool] = None
    source: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.provider_name or ""


class ProviderAttributes(BaseModel):
    """Attributes of a directory provider"""
    model_config = ConfigDict(frozen=True, extra="ignore")

    location: Optional[Location] = None
    specialties: Optional[List[str]] = None
    accepting_new_patients: Optional[bool] = None
    languages: Optional[List[str]] = None
    telehealth_available: Optional[bool] = None
    age_groups: Optional[List[str]] = None
    insurance_accepted: Optional[List[str]] = None
    hospital_affiliations: Optional[List[str]] = None
    next_available_days: Optional[int] = None
    board_certified: Optional[bool] = None
    years_in_practice: Optional[int] = None
    license_state: Optional[str] = None


class DirectoryProvider(BaseModel):
    """A provider in the synthetic directory (the query's ground truth)"""
    model_config = ConfigDict(frozen=True, extra="ignore")

    provider_id: str
    first: str = ""
    last: str = ""
    gender: str = ""
    attributes: ProviderAttributes = Field(default_factory=ProviderAttributes)

    @property
    def full_name(self) -> Optional[str]:
        name = f"{self.first or ''} {self.last or ''}".strip()
        return name or None


def provider_display_name(provider: Union[ProviderRecord, DirectoryProvider, dict, Any]) -> Optional[str]:
    """
    Name of a provider in either shape.

    Prefers provider_name, then "first last". Accepts models or raw dicts.
    """
    if isinstance(provider, dict):
        name = provider.get("provider_name")
        first = provider.get("first") or ""
        last = provider.get("last") or ""
    else:
        name = getattr(provider, "provider_name", None)
        first = getattr(provider, "first", "") or ""
        last = getattr(provider, "last", "") or ""

    if name:
        return name
    if first or last:
        return f"{first} {last}".strip() or None
    return None
