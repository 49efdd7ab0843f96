"""Tests for config loading, env overrides and persistence."""

import json
import os
import pytest
from unittest.mock import patch

_ENV_VARS = [
    "OPENAI_API_KEY", "OPENAI_MODEL", "OPENAI_TIMEOUT",
    "XAI_API_KEY", "XAI_MODEL", "XAI_TIMEOUT",
    "GOOGLE_API_KEY", "GEMINI_API_KEY", "GEMINI_MODEL", "GEMINI_TIMEOUT",
    "GUIDEPOST_RETRY_DELAY", "GUIDEPOST_SEARCH_LIMIT", "GUIDEPOST_PORT",
    "GUIDEPOST_DATA_DIR", "GUIDEPOST_PROVIDERS_PATH",
    "GUIDEPOST_WEB_PROVIDERS_PATH", "GUIDEPOST_RUNS_PATH",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)


class TestDefaults:
    def test_agent_defaults(self):
        from guidepost.common.config import HarnessConfig
        cfg = HarnessConfig()
        assert cfg.agents.openai.timeout == 15.0
        assert cfg.agents.gemini.timeout == 15.0
        assert cfg.agents.xai.timeout == 60.0
        assert cfg.agents.retry_delay == 1.0
        assert cfg.agents.openai.api_key == ""

    def test_search_and_server_defaults(self):
        from guidepost.common.config import HarnessConfig
        cfg = HarnessConfig()
        assert cfg.search.limit == 15
        assert cfg.server.port == 8787

    def test_for_kind_unknown(self):
        from guidepost.common.config import AgentsConfig
        with pytest.raises(ValueError, match="Unknown agent: claude"):
            AgentsConfig().for_kind("claude")


class TestLoadConfig:
    def test_missing_file_uses_defaults(self, tmp_path):
        from guidepost.common.config import load_config
        cfg = load_config(tmp_path / "nope.json")
        assert cfg.agents.openai.model == "gpt-4.1-mini"
        assert cfg.search.limit == 15

    def test_file_values(self, tmp_path):
        from guidepost.common.config import load_config
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({
            "agents": {
                "openai": {"api_key": "sk-file", "model": "gpt-4o"},
                "retry_delay": 0.5,
            },
            "search": {"limit": 5},
            "data": {"data_dir": "/srv/data"},
        }))

        with patch("guidepost.common.config.CONFIG_PATH", config_file):
            cfg = load_config()

        assert cfg.agents.openai.api_key == "sk-file"
        assert cfg.agents.openai.model == "gpt-4o"
        assert cfg.agents.openai.timeout == 15.0
        assert cfg.agents.xai.timeout == 60.0
        assert cfg.agents.retry_delay == 0.5
        assert cfg.search.limit == 5
        assert cfg.data.data_dir == "/srv/data"

    def test_corrupt_file_falls_back(self, tmp_path, caplog):
        from guidepost.common.config import load_config
        config_file = tmp_path / "config.json"
        config_file.write_text("{broken")

        cfg = load_config(config_file)

        assert cfg.agents.openai.model == "gpt-4.1-mini"
        assert "Failed to load config file" in caplog.text

    def test_env_overrides_file(self, tmp_path):
        from guidepost.common.config import load_config
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"agents": {"xai": {"api_key": "xai-file"}}}))

        env = {
            "XAI_API_KEY": "xai-env",
            "XAI_TIMEOUT": "30",
            "GUIDEPOST_SEARCH_LIMIT": "7",
            "GUIDEPOST_RUNS_PATH": "/tmp/runs.jsonl",
        }
        with patch.dict(os.environ, env, clear=False):
            cfg = load_config(config_file)

        assert cfg.agents.xai.api_key == "xai-env"
        assert cfg.agents.xai.timeout == 30.0
        assert cfg.search.limit == 7
        assert cfg.data.runs_path == "/tmp/runs.jsonl"
        assert "xai.api_key" in cfg._env_sourced_keys

    def test_gemini_key_aliases(self, tmp_path):
        from guidepost.common.config import load_config
        with patch.dict(os.environ, {"GOOGLE_API_KEY": "g-1"}, clear=False):
            assert load_config(tmp_path / "none.json").agents.gemini.api_key == "g-1"
        with patch.dict(os.environ, {"GOOGLE_API_KEY": "g-1", "GEMINI_API_KEY": "g-2"}, clear=False):
            assert load_config(tmp_path / "none.json").agents.gemini.api_key == "g-2"


class TestSaveConfig:
    def test_save_config_omits_env_keys(self, tmp_path):
        from guidepost.common.config import load_config, save_config
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"agents": {"gemini": {"api_key": "g-file"}}}))

        with patch.dict(os.environ, {"OPENAI_API_KEY": "sk-env"}, clear=False):
            cfg = load_config(config_file)
        save_config(cfg, config_file)

        saved = json.loads(config_file.read_text())
        assert saved["agents"]["openai"]["api_key"] == ""
        assert saved["agents"]["gemini"]["api_key"] == "g-file"

    def test_save_sets_permissions(self, tmp_path):
        from guidepost.common.config import HarnessConfig, save_config
        config_file = tmp_path / "sub" / "config.json"
        save_config(HarnessConfig(), config_file)
        assert oct(config_file.stat().st_mode & 0o777) == "0o600"

    def test_round_trip(self, tmp_path):
        from guidepost.common.config import HarnessConfig, load_config, save_config
        config_file = tmp_path / "config.json"
        cfg = HarnessConfig()
        cfg.agents.xai.model = "grok-3"
        cfg.server.port = 9000
        save_config(cfg, config_file)

        loaded = load_config(config_file)
        assert loaded.agents.xai.model == "grok-3"
        assert loaded.server.port == 9000
