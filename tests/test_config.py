import tempfile
from pathlib import Path

import pytest

from ai_readiness.config import AppConfig, FetchConfig, LlmConfig, load_config


class TestConfig:
    def test_defaults(self):
        config = load_config()
        assert isinstance(config, AppConfig)
        assert config.fetch.robots_timeout == 5
        assert config.fetch.verify_timeout == 5
        assert config.fetch.sitemap_timeout == 10
        assert config.fetch.max_sitemap_depth == 5
        assert config.llm.model == "moonshotai/kimi-k2-instruct"
        assert config.services.readiness_url is None
        assert config.server.port == 5000
        assert config.log_level == "INFO"

    def test_load_yaml(self):
        yaml_text = """
fetch:
  sitemap_timeout: 20
  max_sitemap_depth: 2
llm:
  model: "llama-3.1-8b-instant"
  api_key_env: "MY_LLM_KEY"
services:
  readiness_url: "http://localhost:3000/api/ai-readiness"
server:
  port: 8080
logging:
  level: debug
"""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.yml"
            path.write_text(yaml_text, encoding="utf-8")
            config = load_config(path)

        assert config.fetch.sitemap_timeout == 20
        assert config.fetch.max_sitemap_depth == 2
        assert config.fetch.robots_timeout == 5
        assert config.llm.model == "llama-3.1-8b-instant"
        assert config.llm.api_key_env == "MY_LLM_KEY"
        assert config.services.readiness_url == "http://localhost:3000/api/ai-readiness"
        assert config.services.insights_url is None
        assert config.server.port == 8080
        assert config.log_level == "DEBUG"

    def test_empty_file_gives_defaults(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.yml"
            path.write_text("", encoding="utf-8")
            assert load_config(path) == AppConfig()

    def test_invalid_config_raises(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.yml"
            path.write_text("server:\n  port: 0\n", encoding="utf-8")
            with pytest.raises(ValueError, match="server.port"):
                load_config(path)
            # validation can be skipped
            assert load_config(path, validate=False).server.port == 0

    def test_root_must_be_mapping(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.yml"
            path.write_text("- a\n- b\n", encoding="utf-8")
            with pytest.raises(ValueError, match="mapping"):
                load_config(path)


class TestApiKey:
    def test_env_variable(self, monkeypatch):
        monkeypatch.setenv("GROQ_API_KEY", "gsk-123")
        assert LlmConfig().resolved_api_key() == "gsk-123"

    def test_explicit_key_wins(self, monkeypatch):
        monkeypatch.setenv("GROQ_API_KEY", "gsk-123")
        assert LlmConfig(api_key="explicit").resolved_api_key() == "explicit"

    def test_missing_key(self, monkeypatch):
        monkeypatch.delenv("GROQ_API_KEY", raising=False)
        assert LlmConfig().resolved_api_key() is None

    def test_blank_env_is_missing(self, monkeypatch):
        monkeypatch.setenv("GROQ_API_KEY", "   ")
        assert LlmConfig().resolved_api_key() is None


def test_fetch_config_defaults():
    fetch = FetchConfig()
    assert fetch.user_agent.startswith("ai-readiness/")
