"""
Sitemap discovery: robots.txt ``Sitemap:`` directive first, then the
conventional /sitemap.xml, followed by a reachability/content check.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import requests

from .logger import get_logger
from .sitemap import looks_like_sitemap_xml

logger = get_logger(__name__)

SOURCE_ROBOTS = "robots.txt"
SOURCE_STANDARD = "standard-location"

ERROR_NOT_ACCESSIBLE = "sitemap_not_accessible"
ERROR_NOT_FOUND = "sitemap_not_found"

DEFAULT_ROBOTS_TIMEOUT = 5
DEFAULT_VERIFY_TIMEOUT = 5


@dataclass(frozen=True)
class SitemapReference:
    url: str
    source: str


@dataclass
class LocateResult:
    reference: SitemapReference
    verified: bool
    diagnostics: List[str] = field(default_factory=list)

    @property
    def sitemap_url(self) -> str:
        return self.reference.url

    @property
    def source(self) -> str:
        return self.reference.source

    @property
    def error_type(self) -> Optional[str]:
        if self.verified:
            return None
        if self.reference.source == SOURCE_ROBOTS:
            return ERROR_NOT_ACCESSIBLE
        return ERROR_NOT_FOUND


def sitemap_from_robots(
    base_url: str, session: requests.Session, timeout: float = DEFAULT_ROBOTS_TIMEOUT
) -> Tuple[Optional[str], List[str]]:
    """
    Return the first ``Sitemap:`` URL declared in robots.txt, if any,
    together with diagnostics describing what was found.
    """
    robots_url = f"{base_url}/robots.txt"
    diagnostics: List[str] = []
    try:
        resp = session.get(robots_url, timeout=timeout)
    except Exception as e:  # noqa: BLE001
        logger.info(f"Could not fetch robots.txt: {e}")
        diagnostics.append(f"Could not fetch {robots_url}: {e}")
        return None, diagnostics

    if not resp.ok:
        diagnostics.append(f"{robots_url} returned HTTP {resp.status_code}")
        return None, diagnostics

    for line in (resp.text or "").splitlines():
        line = line.strip()
        if line.lower().startswith("sitemap:"):
            sitemap_url = line.split(":", 1)[1].strip()
            if sitemap_url:
                return sitemap_url, diagnostics

    diagnostics.append(f"No Sitemap directive found in {robots_url}")
    return None, diagnostics


def verify_sitemap(
    url: str, session: requests.Session, timeout: float = DEFAULT_VERIFY_TIMEOUT
) -> Tuple[bool, Optional[str]]:
    """Check that the sitemap responds with success and XML-looking content."""
    try:
        resp = session.get(url, timeout=timeout)
    except Exception as e:  # noqa: BLE001
        return False, f"Could not fetch sitemap at {url}: {e}"

    if not resp.ok:
        return False, f"Sitemap at {url} returned HTTP {resp.status_code}"
    if not looks_like_sitemap_xml(resp.text or ""):
        return False, f"Content at {url} is not a valid XML sitemap"
    return True, None


def locate_sitemap(
    base_url: str,
    session: requests.Session,
    *,
    robots_timeout: float = DEFAULT_ROBOTS_TIMEOUT,
    verify_timeout: float = DEFAULT_VERIFY_TIMEOUT,
) -> LocateResult:
    """
    Determine the sitemap URL for a site origin.

    robots.txt is consulted first; without a directive (or when robots.txt
    is unreachable) the standard ``/sitemap.xml`` is used. The chosen
    candidate is then verified. A failed verification is terminal: the
    result comes back with ``verified=False`` and the diagnostics trail,
    and ``error_type`` tells which lookup path failed.
    """
    base_url = base_url.rstrip("/")
    sitemap_url, diagnostics = sitemap_from_robots(base_url, session, robots_timeout)

    if sitemap_url:
        reference = SitemapReference(url=sitemap_url, source=SOURCE_ROBOTS)
        logger.info(f"Found sitemap in robots.txt: {sitemap_url}")
    else:
        reference = SitemapReference(url=f"{base_url}/sitemap.xml", source=SOURCE_STANDARD)
        logger.info(f"Sitemap not in robots.txt, using default: {reference.url}")

    ok, problem = verify_sitemap(reference.url, session, verify_timeout)
    if not ok:
        logger.warning(problem)
        diagnostics.append(problem)

    return LocateResult(reference=reference, verified=ok, diagnostics=diagnostics)
