"""
Text-generation client (OpenAI-compatible chat completions).

Used as a single-attempt, best-effort collaborator: any failure is raised
as ``GenerationError`` so the caller can fall back.
"""
from __future__ import annotations

from typing import Optional

from openai import OpenAI

from .config import LlmConfig
from .errors import GenerationError
from .logger import get_logger

logger = get_logger(__name__)


class TextGenerator:
    """Callable ``(system_prompt, user_prompt) -> text`` backed by the openai SDK."""

    def __init__(self, config: LlmConfig, client: Optional[OpenAI] = None) -> None:
        self.config = config
        if client is None:
            api_key = config.resolved_api_key()
            if not api_key:
                raise GenerationError(
                    f"No API key configured (set {config.api_key_env} or llm.api_key)"
                )
            # max_retries=0: one attempt only, failures go to the fallback
            client = OpenAI(
                api_key=api_key,
                base_url=config.base_url,
                timeout=config.timeout,
                max_retries=0,
            )
        self.client = client

    def __call__(self, system_prompt: str, user_prompt: str) -> str:
        try:
            response = self.client.chat.completions.create(
                model=self.config.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
            )
        except Exception as e:  # noqa: BLE001
            logger.error(f"Text generation API error: {e}")
            raise GenerationError(str(e)) from e

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise GenerationError(f"Malformed completion payload: {e}") from e
        if not content or not content.strip():
            raise GenerationError("Empty completion")
        return content


def build_text_generator(config: LlmConfig) -> Optional[TextGenerator]:
    """Text generator for the configured provider, or None without credentials."""
    if not config.resolved_api_key():
        logger.info(
            f"{config.api_key_env} not set; llms.txt will use the built-in template"
        )
        return None
    return TextGenerator(config)
