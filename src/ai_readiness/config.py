from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .validators import validate_config_basic

DEFAULT_USER_AGENT = "ai-readiness/0.1.0 (+llms.txt generator)"


@dataclass
class FetchConfig:
    robots_timeout: float = 5.0
    verify_timeout: float = 5.0
    sitemap_timeout: float = 10.0
    # Safety cap on sitemap-index nesting; real trees are 1-2 levels deep
    max_sitemap_depth: int = 5
    user_agent: str = DEFAULT_USER_AGENT


@dataclass
class LlmConfig:
    api_key: Optional[str] = None
    api_key_env: str = "GROQ_API_KEY"
    base_url: str = "https://api.groq.com/openai/v1"
    model: str = "moonshotai/kimi-k2-instruct"
    temperature: float = 0.7
    max_tokens: int = 2000
    timeout: float = 60.0

    def resolved_api_key(self) -> Optional[str]:
        """Explicit key from config, else the configured environment variable."""
        if self.api_key:
            return self.api_key
        value = os.environ.get(self.api_key_env, "").strip()
        return value or None


@dataclass
class ServicesConfig:
    # Page-scoring service: POST {url} -> {success, overallScore, checks, metadata}
    readiness_url: Optional[str] = None
    # LLM insight service: POST {url, htmlContent, currentChecks}
    insights_url: Optional[str] = None
    timeout: float = 60.0


@dataclass
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 5000


@dataclass
class AppConfig:
    fetch: FetchConfig = field(default_factory=FetchConfig)
    llm: LlmConfig = field(default_factory=LlmConfig)
    services: ServicesConfig = field(default_factory=ServicesConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    log_level: str = "INFO"


def _load_raw_config(path: Path) -> Dict[str, Any]:
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError("Config root must be a mapping")
    return data


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def config_from_dict(raw: Dict[str, Any]) -> AppConfig:
    fetch_raw = raw.get("fetch") or {}
    fetch = FetchConfig(
        robots_timeout=float(fetch_raw.get("robots_timeout", 5)),
        verify_timeout=float(fetch_raw.get("verify_timeout", 5)),
        sitemap_timeout=float(fetch_raw.get("sitemap_timeout", 10)),
        max_sitemap_depth=int(fetch_raw.get("max_sitemap_depth", 5)),
        user_agent=str(fetch_raw.get("user_agent", DEFAULT_USER_AGENT)),
    )

    llm_raw = raw.get("llm") or {}
    defaults = LlmConfig()
    llm = LlmConfig(
        api_key=_optional_str(llm_raw.get("api_key")),
        api_key_env=str(llm_raw.get("api_key_env", defaults.api_key_env)),
        base_url=str(llm_raw.get("base_url", defaults.base_url)),
        model=str(llm_raw.get("model", defaults.model)),
        temperature=float(llm_raw.get("temperature", defaults.temperature)),
        max_tokens=int(llm_raw.get("max_tokens", defaults.max_tokens)),
        timeout=float(llm_raw.get("timeout", defaults.timeout)),
    )

    services_raw = raw.get("services") or {}
    services = ServicesConfig(
        readiness_url=_optional_str(services_raw.get("readiness_url")),
        insights_url=_optional_str(services_raw.get("insights_url")),
        timeout=float(services_raw.get("timeout", 60)),
    )

    server_raw = raw.get("server") or {}
    server = ServerConfig(
        host=str(server_raw.get("host", "127.0.0.1")),
        port=int(server_raw.get("port", 5000)),
    )

    logging_raw = raw.get("logging") or {}
    log_level = str(logging_raw.get("level", "INFO")).upper()

    return AppConfig(
        fetch=fetch,
        llm=llm,
        services=services,
        server=server,
        log_level=log_level,
    )


def load_config(path: Optional[Path] = None, validate: bool = True) -> AppConfig:
    """
    Load configuration from a YAML file.
    Without a path, built-in defaults are returned (credentials still come
    from the environment).
    """
    if path is None:
        return AppConfig()

    raw = _load_raw_config(Path(path))

    if validate:
        errors = validate_config_basic(raw)
        if errors:
            raise ValueError("\n".join(errors))

    return config_from_dict(raw)
