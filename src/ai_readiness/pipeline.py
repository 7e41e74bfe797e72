"""
End-to-end llms.txt generation for one site:
locate sitemap -> collect URLs -> keep level-1 pages -> build manifest.

Each call is a fresh, stateless traversal.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import requests

from .config import AppConfig
from .errors import EmptySitemapError, NoLevel1UrlsError, SitemapResolutionError
from .filters import filter_level1_urls
from .generator import TextGeneratorFn, generate_llms_txt_content
from .locator import ERROR_NOT_ACCESSIBLE, locate_sitemap
from .logger import get_logger
from .sitemap import collect_sitemap_urls
from .url_utils import origin_of
from .validators import resolve_site_url

logger = get_logger(__name__)

RESPONSE_URL_LIMIT = 100
SAMPLE_URL_LIMIT = 5


@dataclass
class LlmsTxtResult:
    content: str
    total_urls: int
    level1_urls: List[str]
    sitemap_url: str
    sitemap_source: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "content": self.content,
            "stats": {
                "totalUrls": self.total_urls,
                "level1Urls": len(self.level1_urls),
                "sitemapUrl": self.sitemap_url,
            },
            "level1Urls": self.level1_urls[:RESPONSE_URL_LIMIT],
        }


def _resolution_message(error_type: str, sitemap_url: str) -> str:
    if error_type == ERROR_NOT_ACCESSIBLE:
        return (
            f"The sitemap declared in robots.txt ({sitemap_url}) is not accessible "
            "or is not a valid XML sitemap."
        )
    return (
        f"No sitemap found. robots.txt does not declare one and {sitemap_url} "
        "is missing or is not a valid XML sitemap."
    )


def generate_llms_txt(
    raw_url: Optional[str],
    session: requests.Session,
    config: Optional[AppConfig] = None,
    text_generator: Optional[TextGeneratorFn] = None,
) -> LlmsTxtResult:
    """
    Generate llms.txt for the site behind ``raw_url``.

    Raises:
        InvalidInputError: missing or malformed URL
        SitemapResolutionError: sitemap not found / not accessible
        EmptySitemapError: sitemap tree yielded no page URLs
        NoLevel1UrlsError: no same-site single-segment pages
    """
    config = config or AppConfig()
    fetch = config.fetch

    url = resolve_site_url(raw_url)
    base_url = origin_of(url)
    domain = urlparse(url).hostname or ""
    session.headers.update({"User-Agent": fetch.user_agent})

    logger.info("[LLMS-TXT] Step 1/4: Finding sitemap.xml...")
    located = locate_sitemap(
        base_url,
        session,
        robots_timeout=fetch.robots_timeout,
        verify_timeout=fetch.verify_timeout,
    )
    if not located.verified:
        error_type = located.error_type or ""
        raise SitemapResolutionError(
            _resolution_message(error_type, located.sitemap_url),
            error_type=error_type,
            details=located.diagnostics,
            sitemap_url=located.sitemap_url,
            sitemap_source=located.source,
        )

    logger.info("[LLMS-TXT] Step 2/4: Collecting URLs from sitemap...")
    all_urls = collect_sitemap_urls(
        located.sitemap_url,
        base_url,
        session,
        set(),
        timeout=fetch.sitemap_timeout,
        max_depth=fetch.max_sitemap_depth,
    )
    if not all_urls:
        details = list(located.diagnostics)
        details.append(f"No page URLs found in {located.sitemap_url} or its nested sitemaps")
        raise EmptySitemapError(
            "No URLs found in sitemap. Please ensure the website has a valid sitemap.xml file.",
            details=details,
            sitemap_url=located.sitemap_url,
        )
    logger.info(f"[LLMS-TXT] Collected {len(all_urls)} URLs from sitemap")

    logger.info("[LLMS-TXT] Step 3/4: Filtering to level 1 paths...")
    level1_urls = filter_level1_urls(all_urls, base_url)
    if not level1_urls:
        raise NoLevel1UrlsError(
            "No level 1 paths found. The sitemap may only contain nested paths.",
            total_urls=len(all_urls),
            sample_urls=all_urls[:SAMPLE_URL_LIMIT],
        )
    logger.info(f"[LLMS-TXT] Filtered to {len(level1_urls)} level 1 paths")

    logger.info("[LLMS-TXT] Step 4/4: Generating llms.txt...")
    content = generate_llms_txt_content(level1_urls, domain, text_generator)
    logger.info("[LLMS-TXT] Generation complete")

    return LlmsTxtResult(
        content=content,
        total_urls=len(all_urls),
        level1_urls=level1_urls,
        sitemap_url=located.sitemap_url,
        sitemap_source=located.source,
    )
