"""
Agent Run Schemas

A run is one recorded invocation of one agent against one query.
Runs and answers are immutable after creation.
"""

import random
import string
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


AgentKind = Literal["openai", "xai", "gemini"]


class AgentSpec(BaseModel):
    """An agent to run: vendor + model"""
    agent: AgentKind
    model: str


class GeneratedQuery(BaseModel):
    """A lookup query generated from a directory provider"""
    model_config = ConfigDict(extra="ignore")

    query_id: str
    query_text: str
    prefix: Optional[str] = None
    provider_id: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    specialty: Optional[str] = None
    language: Optional[str] = None
    insurance: Optional[str] = None


class QueryTemplateConfig(BaseModel):
    """Prefixes and attribute catalogue used to generate queries"""
    model_config = ConfigDict(extra="ignore")

    version: str = "1"
    prefixes: List[str] = Field(default_factory=list)
    provider_attributes: List[Dict[str, Any]] = Field(default_factory=list)


class AgentAnswer(BaseModel):
    """Structured answer parsed from an agent's output text"""
    model_config = ConfigDict(frozen=True)

    provider_name: Optional[str] = None
    found: bool = False
    extracted_attributes: Dict[str, Any] = Field(default_factory=dict)
    # Kept for consumers of the older answer schema
    competitor_mentions: List[str] = Field(default_factory=list)
    confidence: Optional[float] = None
    notes: Optional[str] = None


class RequestContext(BaseModel):
    """What the agent was asked"""
    model_config = ConfigDict(frozen=True)

    query_text: str
    candidate_provider_ids: List[str] = Field(default_factory=list)


class AgentRun(BaseModel):
    """One recorded agent invocation"""
    model_config = ConfigDict(frozen=True)

    run_id: str
    query_id: str
    agent: str
    model: str
    latency_ms: int
    output_text: str = ""
    agent_answer: Optional[AgentAnswer] = None
    error: Optional[str] = None
    raw_response: Any = None
    request_context: Optional[RequestContext] = None
    search_results: Optional[List[Dict[str, Any]]] = None
    created_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )


_BASE36 = string.digits + string.ascii_lowercase


def generate_run_id(rng: Optional[random.Random] = None) -> str:
    """Generate a run ID: run_<epoch ms>_<9 base36 chars>"""
    rng = rng or random
    suffix = "".join(rng.choice(_BASE36) for _ in range(9))
    return f"run_{int(time.time() * 1000)}_{suffix}"
