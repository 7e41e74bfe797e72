"""
Shared fixtures: an in-process stand-in for requests.Session so tests run
without network access.
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import pytest
import requests

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))


class FakeResponse:
    def __init__(self, text: str = "", status_code: int = 200, json_data: Any = None):
        self.text = text
        self.status_code = status_code
        self._json = json_data

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def raise_for_status(self) -> None:
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def json(self) -> Any:
        if self._json is None:
            raise ValueError("No JSON body")
        return self._json


Route = Union[FakeResponse, Exception]


class FakeSession:
    """
    Maps URLs to canned responses (or exceptions to raise).
    Unknown URLs answer 404.
    """

    def __init__(self, routes: Optional[Dict[str, Route]] = None):
        self.routes: Dict[str, Route] = dict(routes or {})
        self.headers: Dict[str, str] = {}
        self.calls: List[Tuple[str, str, Any]] = []
        self.timeouts: List[Tuple[str, Optional[float]]] = []
        self.closed = False

    def _respond(self, method: str, url: str, payload: Any = None) -> FakeResponse:
        self.calls.append((method, url, payload))
        route = self.routes.get(url)
        if route is None:
            return FakeResponse("Not Found", status_code=404)
        if isinstance(route, Exception):
            raise route
        return route

    def get(self, url: str, timeout: Optional[float] = None, **kwargs) -> FakeResponse:
        self.timeouts.append((url, timeout))
        return self._respond("GET", url)

    def post(self, url: str, json: Any = None, timeout: Optional[float] = None, **kwargs):
        self.timeouts.append((url, timeout))
        return self._respond("POST", url, json)

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeSession":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def fetched(self, url: str) -> int:
        return sum(1 for method, u, _ in self.calls if method == "GET" and u == url)


def urlset(*locs: str) -> str:
    entries = "".join(f"<url><loc>{loc}</loc></url>" for loc in locs)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">{entries}</urlset>'
    )


def sitemapindex(*locs: str) -> str:
    entries = "".join(f"<sitemap><loc>{loc}</loc></sitemap>" for loc in locs)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<sitemapindex xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">{entries}</sitemapindex>'
    )


@pytest.fixture
def make_session():
    def _make(routes: Optional[Dict[str, Route]] = None) -> FakeSession:
        return FakeSession(routes)

    return _make
