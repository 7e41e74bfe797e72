from __future__ import annotations

from typing import Iterable, List
from urllib.parse import urlparse

from .logger import get_logger
from .url_utils import hostname_of, hosts_match, path_segments
from .validators import normalize_input_url

logger = get_logger(__name__)


def is_level1_url(url: str, domain_host: str) -> bool:
    """
    A level-1 URL is on the target site and has exactly one path segment:
      https://example.com/about-us     -> True
      https://example.com/blog/post-1  -> False
      https://example.com/             -> False
    Unparseable URLs are never level 1.
    """
    host = hostname_of(url)
    if host is None or not hosts_match(host, domain_host):
        return False
    return len(path_segments(urlparse(url.strip()).path)) == 1


def filter_level1_urls(urls: Iterable[str], domain_origin: str) -> List[str]:
    """
    Keep only same-site URLs with exactly one path segment.
    Input order is preserved and duplicates pass through unchanged.
    """
    # Accept both an origin ("https://example.com") and a bare host ("example.com")
    domain_host = hostname_of(normalize_input_url(domain_origin))
    if domain_host is None:
        logger.warning(f"Cannot determine hostname of {domain_origin}; no URLs kept")
        return []

    return [u for u in urls if is_level1_url(u, domain_host)]
