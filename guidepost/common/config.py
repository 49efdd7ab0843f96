"""
Configuration Management for Guidepost

Loads configuration from ~/.guidepost/config.json and environment variables.
"""

import os
import json
import logging
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional

logger = logging.getLogger("guidepost.common.config")

# Default config paths
CONFIG_DIR = Path.home() / ".guidepost"
CONFIG_PATH = CONFIG_DIR / "config.json"

AGENT_KINDS = ("openai", "xai", "gemini")


@dataclass
class AgentConfig:
    """Credentials and call policy for one agent kind"""
    api_key: str = ""
    model: str = ""
    timeout: float = 15.0


@dataclass
class AgentsConfig:
    """Per-agent configuration plus the shared retry delay"""
    openai: AgentConfig = field(
        default_factory=lambda: AgentConfig(model="gpt-4.1-mini", timeout=15.0)
    )
    xai: AgentConfig = field(
        default_factory=lambda: AgentConfig(model="grok-2", timeout=60.0)
    )
    gemini: AgentConfig = field(
        default_factory=lambda: AgentConfig(model="gemini-1.5-pro", timeout=15.0)
    )
    retry_delay: float = 1.0

    def for_kind(self, kind: str) -> AgentConfig:
        if kind not in AGENT_KINDS:
            raise ValueError(f"Unknown agent: {kind}")
        return getattr(self, kind)


@dataclass
class SearchConfig:
    """Simulated web search configuration"""
    limit: int = 15


@dataclass
class DataConfig:
    """Locations of the flat data files"""
    data_dir: str = ""
    providers_path: str = ""
    web_providers_path: str = ""
    runs_path: str = ""


@dataclass
class ServerConfig:
    """HTTP service configuration"""
    host: str = "0.0.0.0"
    port: int = 8787


@dataclass
class HarnessConfig:
    """Main Guidepost configuration"""
    agents: AgentsConfig = field(default_factory=AgentsConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    data: DataConfig = field(default_factory=DataConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    _env_sourced_keys: set = field(default_factory=set, repr=False)


def _parse_agent_config(data: dict, kind: str, default: AgentConfig) -> AgentConfig:
    """Parse one agent section, keeping defaults for absent keys"""
    agent_data = data.get(kind, {})
    return AgentConfig(
        api_key=agent_data.get("api_key", default.api_key),
        model=agent_data.get("model", default.model),
        timeout=float(agent_data.get("timeout", default.timeout)),
    )


def _parse_agents_config(data: dict) -> AgentsConfig:
    """Parse agents section from config dict"""
    agents_data = data.get("agents", {})
    defaults = AgentsConfig()
    return AgentsConfig(
        openai=_parse_agent_config(agents_data, "openai", defaults.openai),
        xai=_parse_agent_config(agents_data, "xai", defaults.xai),
        gemini=_parse_agent_config(agents_data, "gemini", defaults.gemini),
        retry_delay=float(agents_data.get("retry_delay", defaults.retry_delay)),
    )


def _parse_search_config(data: dict) -> SearchConfig:
    """Parse search section from config dict"""
    search_data = data.get("search", {})
    return SearchConfig(limit=int(search_data.get("limit", 15)))


def _parse_data_config(data: dict) -> DataConfig:
    """Parse data section from config dict"""
    data_section = data.get("data", {})
    return DataConfig(
        data_dir=data_section.get("data_dir", ""),
        providers_path=data_section.get("providers_path", ""),
        web_providers_path=data_section.get("web_providers_path", ""),
        runs_path=data_section.get("runs_path", ""),
    )


def _parse_server_config(data: dict) -> ServerConfig:
    """Parse server section from config dict"""
    server_data = data.get("server", {})
    return ServerConfig(
        host=server_data.get("host", "0.0.0.0"),
        port=int(server_data.get("port", 8787)),
    )


def load_config(config_path: Optional[Path] = None) -> HarnessConfig:
    """
    Load configuration from file and environment variables.

    Priority (highest to lowest):
    1. Environment variables
    2. Config file (~/.guidepost/config.json)
    3. Default values
    """
    config = HarnessConfig()
    path = config_path or CONFIG_PATH

    if path.exists():
        try:
            with open(path) as f:
                data = json.load(f)

            config.agents = _parse_agents_config(data)
            config.search = _parse_search_config(data)
            config.data = _parse_data_config(data)
            config.server = _parse_server_config(data)
        except (json.JSONDecodeError, IOError, ValueError, TypeError) as e:
            logger.warning("Failed to load config file %s: %s", path, e)
            config = HarnessConfig()

    # Agent env var overrides (track env-sourced keys so they are never saved)
    _env_agent_map = {
        "OPENAI_API_KEY": ("openai", "api_key"),
        "OPENAI_MODEL": ("openai", "model"),
        "XAI_API_KEY": ("xai", "api_key"),
        "XAI_MODEL": ("xai", "model"),
        "GOOGLE_API_KEY": ("gemini", "api_key"),
        "GEMINI_API_KEY": ("gemini", "api_key"),
        "GEMINI_MODEL": ("gemini", "model"),
    }
    for env_var, (kind, attr) in _env_agent_map.items():
        val = os.getenv(env_var)
        if val:
            setattr(config.agents.for_kind(kind), attr, val)
            config._env_sourced_keys.add(f"{kind}.{attr}")

    for kind in AGENT_KINDS:
        val = os.getenv(f"{kind.upper()}_TIMEOUT")
        if val:
            config.agents.for_kind(kind).timeout = float(val)

    if os.getenv("GUIDEPOST_RETRY_DELAY"):
        config.agents.retry_delay = float(os.getenv("GUIDEPOST_RETRY_DELAY"))
    if os.getenv("GUIDEPOST_SEARCH_LIMIT"):
        config.search.limit = int(os.getenv("GUIDEPOST_SEARCH_LIMIT"))
    if os.getenv("GUIDEPOST_PORT"):
        config.server.port = int(os.getenv("GUIDEPOST_PORT"))

    _env_data_map = {
        "GUIDEPOST_DATA_DIR": "data_dir",
        "GUIDEPOST_PROVIDERS_PATH": "providers_path",
        "GUIDEPOST_WEB_PROVIDERS_PATH": "web_providers_path",
        "GUIDEPOST_RUNS_PATH": "runs_path",
    }
    for env_var, attr in _env_data_map.items():
        val = os.getenv(env_var)
        if val:
            setattr(config.data, attr, val)

    return config


def save_config(config: HarnessConfig, config_path: Optional[Path] = None) -> None:
    """Save configuration to file.

    API keys that were sourced from environment variables are written as
    empty strings so that secrets are not persisted to disk.
    """
    path = config_path or CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)

    env_sourced = getattr(config, "_env_sourced_keys", set())

    agents_section = {"retry_delay": config.agents.retry_delay}
    for kind in AGENT_KINDS:
        agent = config.agents.for_kind(kind)
        agents_section[kind] = {
            "api_key": "" if f"{kind}.api_key" in env_sourced else agent.api_key,
            "model": agent.model,
            "timeout": agent.timeout,
        }

    data = {
        "agents": agents_section,
        "search": {"limit": config.search.limit},
        "data": {
            "data_dir": config.data.data_dir,
            "providers_path": config.data.providers_path,
            "web_providers_path": config.data.web_providers_path,
            "runs_path": config.data.runs_path,
        },
        "server": {
            "host": config.server.host,
            "port": config.server.port,
        },
    }

    with open(path, "w") as f:
        json.dump(data, f, indent=2)

    # Set secure permissions
    path.chmod(0o600)
