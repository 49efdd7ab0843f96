"""
Agent Adapters

One REST adapter per agent kind, all sharing a single call contract:

    await get_adapter("openai", config).invoke(prompt=..., model=...)
        -> AdapterResponse(output_text, raw)

Dispatch is a registry keyed by agent kind.
"""

from typing import Dict, Optional, Type

import httpx

from ..common.config import AgentsConfig, load_config
from .base import AdapterResponse, HTTPAdapter
from .errors import (
    AdapterError,
    AdapterHTTPError,
    AdapterNetworkError,
    AdapterTimeoutError,
    MissingCredentialError,
    UnknownAgentError,
)
from .gemini import GeminiAdapter
from .openai import OpenAIAdapter
from .xai import XAIAdapter

ADAPTERS: Dict[str, Type[HTTPAdapter]] = {
    OpenAIAdapter.kind: OpenAIAdapter,
    XAIAdapter.kind: XAIAdapter,
    GeminiAdapter.kind: GeminiAdapter,
}


def get_adapter(
    kind: str,
    config: Optional[AgentsConfig] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> HTTPAdapter:
    """Build the adapter for an agent kind from its configuration"""
    adapter_cls = ADAPTERS.get(kind)
    if adapter_cls is None:
        raise UnknownAgentError(kind)

    config = config or load_config().agents
    agent_config = config.for_kind(kind)
    return adapter_cls(
        api_key=agent_config.api_key,
        timeout=agent_config.timeout,
        retry_delay=config.retry_delay,
        client=client,
    )


def has_api_key(kind: str, config: Optional[AgentsConfig] = None) -> bool:
    """True when a credential is configured for the agent kind"""
    if kind not in ADAPTERS:
        return False
    config = config or load_config().agents
    return bool(config.for_kind(kind).api_key)


async def invoke(
    kind: str,
    prompt: str,
    model: str,
    config: Optional[AgentsConfig] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> AdapterResponse:
    """Call one agent and return its extracted text plus raw body"""
    return await get_adapter(kind, config, client).invoke(prompt=prompt, model=model)


__all__ = [
    "ADAPTERS",
    "AdapterResponse",
    "HTTPAdapter",
    "OpenAIAdapter",
    "XAIAdapter",
    "GeminiAdapter",
    "AdapterError",
    "AdapterHTTPError",
    "AdapterNetworkError",
    "AdapterTimeoutError",
    "MissingCredentialError",
    "UnknownAgentError",
    "get_adapter",
    "has_api_key",
    "invoke",
]
