from __future__ import annotations

from typing import List, Optional
from urllib.parse import urlparse


def origin_of(url: str) -> str:
    """scheme://host[:port] of an absolute URL, without userinfo or trailing slash."""
    parsed = urlparse(url.strip())
    scheme = (parsed.scheme or "https").lower()
    host = (parsed.hostname or "").lower()
    if ":" in host:
        host = f"[{host}]"
    if parsed.port is not None and (scheme, parsed.port) not in (("http", 80), ("https", 443)):
        return f"{scheme}://{host}:{parsed.port}"
    return f"{scheme}://{host}"


def hostname_of(url: str) -> Optional[str]:
    """
    Lower-cased hostname of an absolute URL, or None when the URL has
    no usable host (relative URL, bad port, malformed IPv6 literal...).
    """
    try:
        parsed = urlparse(url.strip())
        # Accessing .port validates it and raises ValueError when bogus
        parsed.port
    except ValueError:
        return None
    if not parsed.scheme or not parsed.hostname:
        return None
    return parsed.hostname.lower()


def strip_www(host: str) -> str:
    host = (host or "").lower()
    if host.startswith("www."):
        return host[len("www."):]
    return host


def hosts_match(candidate: str, domain: str) -> bool:
    """
    Same-site check for level-1 filtering.
    Only the ``www.`` prefix is interchangeable, any other subdomain is a
    different site:
      example.com == example.com
      www.example.com ~ example.com (both directions)
      blog.example.com != example.com
    """
    candidate = (candidate or "").lower()
    domain = (domain or "").lower()
    if not candidate or not domain:
        return False
    return (
        candidate == domain
        or candidate == "www." + domain
        or "www." + candidate == domain
    )


def trim_path(path: str) -> str:
    """Path with leading and trailing slashes removed."""
    return (path or "").strip("/")


def path_segments(path: str) -> List[str]:
    """Non-empty path segments: '/about-us/' -> ['about-us'], '/' -> []."""
    return [seg for seg in trim_path(path).split("/") if seg]
