from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Tuple
from urllib.parse import urlparse

from .logger import get_logger
from .url_utils import strip_www, trim_path

logger = get_logger(__name__)

# (system_prompt, user_prompt) -> generated text
TextGeneratorFn = Callable[[str, str], str]

PROMPT_URL_LIMIT = 50
FALLBACK_PAGE_LIMIT = 30

SYSTEM_PROMPT = (
    "You are an expert at generating llms.txt files. Generate a well-structured "
    "llms.txt file following the exact format specified. Use markdown-style "
    "formatting with titles, descriptions, sections, and bullet points."
)

_FENCE_RE = re.compile(r"```(?:txt|llms-txt)?\n?")


@dataclass
class ManifestPage:
    title: str
    url: str
    path: str


def title_from_path(path: str) -> str:
    """
    "about-us" -> "About Us", "api-v2" -> "Api V2", "" -> "Home".
    Only the first letter of each word is upper-cased.
    """
    title = " ".join(word[:1].upper() + word[1:] for word in path.split("-"))
    return title or "Home"


def _manifest_page(url: str) -> ManifestPage:
    try:
        path = trim_path(urlparse(url).path)
    except ValueError:
        return ManifestPage(title=url, url=url, path=url)
    return ManifestPage(title=title_from_path(path), url=url, path=path)


def build_fallback_llms_txt(level1_urls: List[str], domain: str) -> str:
    """
    Deterministic llms.txt built from URL paths alone, used when no text
    generator is available or when it fails.
    """
    pages = [_manifest_page(u) for u in level1_urls]
    home_page = next((p for p in pages if not p.path), None)
    other_pages = [p for p in pages if p.path]
    site = strip_www(domain)

    lines: List[str] = [f"# {site}", ""]

    if home_page:
        lines.extend([f"> Main website for {site}", ""])

    lines.extend(
        [
            "This llms.txt file provides information about the website structure for AI systems.",
            "",
        ]
    )

    if home_page:
        lines.extend(["## Home", "", f"- [Home]({home_page.url}): Main landing page", ""])

    if other_pages:
        lines.extend(["## Main Pages", ""])
        for page in other_pages[:FALLBACK_PAGE_LIMIT]:
            lines.append(f"- [{page.title}]({page.url}): {page.path} page")
        if len(other_pages) > FALLBACK_PAGE_LIMIT:
            lines.extend(["", f"... and {len(other_pages) - FALLBACK_PAGE_LIMIT} more pages"])

    lines.extend(
        [
            "",
            "## AI Usage",
            "",
            "This website allows AI systems to crawl and index its content for training purposes.",
        ]
    )
    return "\n".join(lines) + "\n"


def build_generation_prompt(level1_urls: List[str], domain: str) -> Tuple[str, str]:
    """System/user prompt pair sent to the text generator."""
    shown = "\n".join(level1_urls[:PROMPT_URL_LIMIT])
    more = ""
    if len(level1_urls) > PROMPT_URL_LIMIT:
        more = f"\n... and {len(level1_urls) - PROMPT_URL_LIMIT} more pages"

    user_prompt = f"""Generate an llms.txt file for the domain {domain} based on these level 1 pages:

{shown}
{more}

IMPORTANT: Follow this exact format:

# Title

> Optional description goes here

Optional details go here

## Section name

- [Link title](https://link_url): Optional link details

Requirements:
1. Start with a # Title (the main title for the website)
2. Add an optional description using > quote format
3. Add optional details as plain text
4. Create sections using ## Section name
5. List links using - [Link title](url): Optional details format
6. Group related pages into logical sections
7. Use descriptive link titles based on the URL path
8. Keep it concise but informative

Generate only the llms.txt content in the exact format above, no markdown code blocks or explanations."""
    return SYSTEM_PROMPT, user_prompt


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text or "").strip()


def generate_llms_txt_content(
    level1_urls: List[str],
    domain: str,
    text_generator: Optional[TextGeneratorFn] = None,
) -> str:
    """
    Produce the llms.txt body for a site. Never raises: a missing generator,
    a failed call or an empty answer all yield the deterministic fallback.
    """
    if text_generator is not None:
        system_prompt, user_prompt = build_generation_prompt(level1_urls, domain)
        try:
            content = strip_code_fences(text_generator(system_prompt, user_prompt))
        except Exception as e:  # noqa: BLE001
            logger.warning(f"LLM generation failed, using fallback template: {e}")
        else:
            if content:
                return content
            logger.warning("LLM returned empty content, using fallback template")

    return build_fallback_llms_txt(level1_urls, domain)


def write_llms_txt(content: str, output_path: Path) -> None:
    # Ensure output directory exists
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(content, encoding="utf-8")
    logger.info(f"Wrote llms.txt to {output_path}")
