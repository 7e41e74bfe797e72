import requests

from ai_readiness.locator import (
    ERROR_NOT_ACCESSIBLE,
    ERROR_NOT_FOUND,
    SOURCE_ROBOTS,
    SOURCE_STANDARD,
    SitemapReference,
    locate_sitemap,
    sitemap_from_robots,
)

from conftest import FakeResponse, FakeSession, urlset

BASE = "https://example.com"


def test_robots_directive_is_used():
    session = FakeSession(
        {
            f"{BASE}/robots.txt": FakeResponse(
                "User-agent: *\nDisallow: /admin\nSitemap: https://example.com/sitemap_index.xml\n"
            ),
            f"{BASE}/sitemap_index.xml": FakeResponse(urlset(f"{BASE}/about")),
        }
    )
    result = locate_sitemap(BASE, session)
    assert result.verified is True
    assert result.reference == SitemapReference(f"{BASE}/sitemap_index.xml", SOURCE_ROBOTS)
    assert result.error_type is None


def test_directive_is_case_insensitive_and_first_wins():
    session = FakeSession(
        {
            f"{BASE}/robots.txt": FakeResponse(
                "sitemap:   https://example.com/first.xml  \nSITEMAP: https://example.com/second.xml\n"
            ),
        }
    )
    url, diagnostics = sitemap_from_robots(BASE, session)
    assert url == "https://example.com/first.xml"
    assert diagnostics == []


def test_missing_directive_falls_back_to_standard_location():
    session = FakeSession(
        {
            f"{BASE}/robots.txt": FakeResponse("User-agent: *\nAllow: /\n"),
            f"{BASE}/sitemap.xml": FakeResponse(urlset(f"{BASE}/about")),
        }
    )
    result = locate_sitemap(BASE, session)
    assert result.verified is True
    assert result.sitemap_url == f"{BASE}/sitemap.xml"
    assert result.source == SOURCE_STANDARD
    assert any("No Sitemap directive" in d for d in result.diagnostics)


def test_unreachable_robots_falls_back():
    session = FakeSession(
        {
            f"{BASE}/robots.txt": requests.ConnectionError("connection refused"),
            f"{BASE}/sitemap.xml": FakeResponse(urlset(f"{BASE}/about")),
        }
    )
    result = locate_sitemap(BASE, session)
    assert result.verified is True
    assert result.source == SOURCE_STANDARD
    assert any("Could not fetch" in d for d in result.diagnostics)


def test_trailing_slash_on_base_is_ignored():
    session = FakeSession({f"{BASE}/sitemap.xml": FakeResponse(urlset(f"{BASE}/about"))})
    result = locate_sitemap(BASE + "/", session)
    assert result.sitemap_url == f"{BASE}/sitemap.xml"
    assert session.fetched(f"{BASE}/robots.txt") == 1


def test_standard_location_missing_is_not_found():
    session = FakeSession({f"{BASE}/robots.txt": FakeResponse("User-agent: *\n")})
    result = locate_sitemap(BASE, session)
    assert result.verified is False
    assert result.error_type == ERROR_NOT_FOUND
    assert any("HTTP 404" in d for d in result.diagnostics)


def test_robots_sitemap_not_xml_is_not_accessible():
    session = FakeSession(
        {
            f"{BASE}/robots.txt": FakeResponse("Sitemap: https://example.com/map.xml\n"),
            f"{BASE}/map.xml": FakeResponse("<html><body>Login required</body></html>"),
        }
    )
    result = locate_sitemap(BASE, session)
    assert result.verified is False
    assert result.error_type == ERROR_NOT_ACCESSIBLE
    assert result.sitemap_url == f"{BASE}/map.xml"
    # No further fallback to /sitemap.xml
    assert session.fetched(f"{BASE}/sitemap.xml") == 0


def test_verification_timeout_is_reported():
    session = FakeSession(
        {
            f"{BASE}/robots.txt": FakeResponse(""),
            f"{BASE}/sitemap.xml": requests.Timeout("timed out"),
        }
    )
    result = locate_sitemap(BASE, session)
    assert result.verified is False
    assert result.error_type == ERROR_NOT_FOUND
    assert any("timed out" in d for d in result.diagnostics)


def test_robots_and_verification_timeouts():
    session = FakeSession(
        {
            f"{BASE}/robots.txt": FakeResponse(f"Sitemap: {BASE}/sitemap.xml\n"),
            f"{BASE}/sitemap.xml": FakeResponse(urlset(f"{BASE}/about")),
        }
    )
    locate_sitemap(BASE, session)
    assert session.timeouts == [(f"{BASE}/robots.txt", 5), (f"{BASE}/sitemap.xml", 5)]

    session = FakeSession({f"{BASE}/sitemap.xml": FakeResponse(urlset(f"{BASE}/about"))})
    locate_sitemap(BASE, session, robots_timeout=2, verify_timeout=3)
    assert session.timeouts == [(f"{BASE}/robots.txt", 2), (f"{BASE}/sitemap.xml", 3)]
