"""
Input and configuration validation helpers
"""
from __future__ import annotations

from typing import Any, List, Optional, Tuple
from urllib.parse import urlparse

from .errors import InvalidInputError

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def normalize_input_url(url: str) -> str:
    """
    Prefix ``https://`` when the user typed a bare domain.
    "example.com" -> "https://example.com"
    """
    url = (url or "").strip()
    if not url.lower().startswith(("http://", "https://")):
        url = "https://" + url
    return url


def validate_url(url: str) -> Tuple[bool, str]:
    """
    Check that a URL is an absolute http(s) URL with a host.

    Returns:
        (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL must not be empty"

    url = url.strip()
    if not url:
        return False, "URL must not be empty"

    try:
        parsed = urlparse(url)
        # Raises ValueError for a non-numeric or out-of-range port
        parsed.port
    except ValueError as e:
        return False, f"Invalid URL: {e}"

    if not parsed.scheme:
        return False, f"URL is missing a scheme: {url}"
    if parsed.scheme.lower() not in ("http", "https"):
        return False, f"URL scheme must be http or https: {url}"
    if not parsed.netloc or not parsed.hostname:
        return False, f"URL is missing a host: {url}"
    if any(ch.isspace() for ch in parsed.netloc):
        return False, f"URL host contains whitespace: {url}"
    return True, ""


def resolve_site_url(raw_url: Any) -> str:
    """Normalize user input into an absolute http(s) URL or raise InvalidInputError."""
    if not raw_url or (isinstance(raw_url, str) and not raw_url.strip()):
        raise InvalidInputError("URL is required")
    if not isinstance(raw_url, str):
        raise InvalidInputError("Invalid URL format")
    url = normalize_input_url(raw_url)
    is_valid, _ = validate_url(url)
    if not is_valid:
        raise InvalidInputError("Invalid URL format")
    return url


def _validate_positive_number(value: Any, name: str) -> Optional[str]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return f"'{name}' must be a number"
    if number <= 0:
        return f"'{name}' must be greater than 0"
    return None


def validate_config_basic(config_dict: dict) -> List[str]:
    """
    Validate the structure of a raw YAML config mapping.

    Returns:
        List of error messages (empty list means valid)
    """
    errors: List[str] = []

    if not isinstance(config_dict, dict):
        errors.append("Config file must be a YAML mapping")
        return errors

    for section in ("fetch", "llm", "services", "server", "logging"):
        value = config_dict.get(section)
        if value is not None and not isinstance(value, dict):
            errors.append(f"'{section}' must be a mapping")
    if errors:
        return errors

    fetch = config_dict.get("fetch") or {}
    for key in ("robots_timeout", "verify_timeout", "sitemap_timeout"):
        if key in fetch:
            msg = _validate_positive_number(fetch[key], f"fetch.{key}")
            if msg:
                errors.append(msg)
    if "max_sitemap_depth" in fetch:
        depth = fetch["max_sitemap_depth"]
        if not isinstance(depth, int) or isinstance(depth, bool) or depth < 1:
            errors.append("'fetch.max_sitemap_depth' must be a positive integer")

    llm = config_dict.get("llm") or {}
    if "base_url" in llm:
        is_valid, msg = validate_url(str(llm["base_url"]))
        if not is_valid:
            errors.append(f"'llm.base_url' {msg}")
    if "max_tokens" in llm:
        msg = _validate_positive_number(llm["max_tokens"], "llm.max_tokens")
        if msg:
            errors.append(msg)
    if "temperature" in llm:
        try:
            temperature = float(llm["temperature"])
            if not 0 <= temperature <= 2:
                errors.append("'llm.temperature' must be between 0 and 2")
        except (TypeError, ValueError):
            errors.append("'llm.temperature' must be a number")

    services = config_dict.get("services") or {}
    for key in ("readiness_url", "insights_url"):
        url = services.get(key)
        if url:
            is_valid, msg = validate_url(str(url))
            if not is_valid:
                errors.append(f"'services.{key}' {msg}")

    server = config_dict.get("server") or {}
    if "port" in server:
        port = server["port"]
        if not isinstance(port, int) or isinstance(port, bool) or not 0 < port < 65536:
            errors.append("'server.port' must be an integer between 1 and 65535")

    logging_cfg = config_dict.get("logging") or {}
    level = logging_cfg.get("level")
    if level is not None and str(level).upper() not in _LOG_LEVELS:
        errors.append(f"'logging.level' must be one of {', '.join(_LOG_LEVELS)}")

    return errors
