from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Set

import requests

from .logger import get_logger

logger = get_logger(__name__)

# Lenient <loc> scan: producers vary in namespace prefixes and whitespace,
# so sitemaps are not run through a strict XML parser.
_LOC_RE = re.compile(r"<loc>(.*?)</loc>", re.IGNORECASE)

_XML_MARKERS = ("<?xml", "<urlset", "<sitemapindex")

DEFAULT_SITEMAP_TIMEOUT = 10
DEFAULT_MAX_DEPTH = 5


@dataclass
class ParsedSitemap:
    page_urls: List[str] = field(default_factory=list)
    nested_sitemap_urls: List[str] = field(default_factory=list)
    is_index: bool = False


def looks_like_sitemap_xml(text: str) -> bool:
    """Content sniff shared by the locator and the collector."""
    text = text or ""
    return any(marker in text for marker in _XML_MARKERS)


def is_sitemap_index(xml_text: str) -> bool:
    return "<sitemapindex" in xml_text or "<sitemap>" in xml_text


def extract_locs(xml_text: str) -> List[str]:
    return [m.strip() for m in _LOC_RE.findall(xml_text or "")]


def parse_sitemap_xml(xml_text: str) -> ParsedSitemap:
    """
    Split a sitemap document into page URLs and nested sitemap URLs.

    - Sitemap index: only <loc> values ending in ".xml" are kept (as nested
      sitemaps); anything else under an index is dropped.
    - Leaf sitemap: <loc> values ending in ".xml" are queued as nested
      sitemaps (misclassified index), everything else is a page URL.
    """
    xml_text = xml_text or ""
    result = ParsedSitemap(is_index=is_sitemap_index(xml_text))

    for loc in extract_locs(xml_text):
        if loc.endswith(".xml"):
            result.nested_sitemap_urls.append(loc)
        elif not result.is_index:
            result.page_urls.append(loc)

    return result


def fetch_sitemap_text(url: str, session: requests.Session, timeout: float) -> str:
    resp = session.get(url, timeout=timeout)
    resp.raise_for_status()
    return resp.text or ""


def collect_sitemap_urls(
    sitemap_url: str,
    base_url: str,
    session: requests.Session,
    visited: Optional[Set[str]] = None,
    *,
    timeout: float = DEFAULT_SITEMAP_TIMEOUT,
    max_depth: int = DEFAULT_MAX_DEPTH,
    _depth: int = 0,
) -> List[str]:
    """
    Recursively collect page URLs from a sitemap (or sitemap index) tree.

    Nested sitemaps are walked depth-first in document order, and page URLs
    come back in first-discovery order. Duplicates across different leaf
    sitemaps are kept. ``visited`` guarantees that no sitemap URL is fetched
    twice within one traversal, which also stops index cycles.

    A node that fails to fetch, times out or does not look like XML
    contributes no URLs; the error is logged and the traversal continues.

    Args:
        sitemap_url: Sitemap to fetch
        base_url: Origin of the site being collected, used for log context
        session: requests session used for every fetch
        visited: Sitemap URLs already fetched in this traversal
        timeout: Per-fetch timeout in seconds
        max_depth: Nesting levels followed below the root sitemap
    """
    if visited is None:
        visited = set()
    if sitemap_url in visited:
        logger.debug(f"Sitemap already visited, skipping: {sitemap_url}")
        return []
    visited.add(sitemap_url)

    try:
        xml_text = fetch_sitemap_text(sitemap_url, session, timeout)
    except Exception as e:  # noqa: BLE001
        logger.warning(f"Failed to fetch sitemap {sitemap_url}: {e}")
        return []

    if not looks_like_sitemap_xml(xml_text):
        logger.warning(f"Not a valid XML sitemap: {sitemap_url}")
        return []

    parsed = parse_sitemap_xml(xml_text)
    urls: List[str] = list(parsed.page_urls)
    logger.debug(
        f"Parsed {sitemap_url} for {base_url}: {len(parsed.page_urls)} page URLs, "
        f"{len(parsed.nested_sitemap_urls)} nested sitemaps"
    )

    if parsed.nested_sitemap_urls and _depth >= max_depth:
        logger.warning(
            f"Sitemap nesting deeper than {max_depth} levels at {sitemap_url}; "
            f"skipping {len(parsed.nested_sitemap_urls)} nested sitemap(s)"
        )
        return urls

    for nested in parsed.nested_sitemap_urls:
        urls.extend(
            collect_sitemap_urls(
                nested,
                base_url,
                session,
                visited,
                timeout=timeout,
                max_depth=max_depth,
                _depth=_depth + 1,
            )
        )
    return urls
