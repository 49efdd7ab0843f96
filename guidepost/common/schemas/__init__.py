"""
Guidepost Schemas

Provider records, queries, agent answers and run records.
"""

from .provider_record import (
    Location,
    ProviderRecord,
    ProviderAttributes,
    DirectoryProvider,
    provider_display_name,
)
from .agent_run import (
    AgentKind,
    AgentSpec,
    GeneratedQuery,
    QueryTemplateConfig,
    AgentAnswer,
    RequestContext,
    AgentRun,
    generate_run_id,
)

__all__ = [
    "Location",
    "ProviderRecord",
    "ProviderAttributes",
    "DirectoryProvider",
    "provider_display_name",
    "AgentKind",
    "AgentSpec",
    "GeneratedQuery",
    "QueryTemplateConfig",
    "AgentAnswer",
    "RequestContext",
    "AgentRun",
    "generate_run_id",
]
