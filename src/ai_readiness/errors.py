"""
Error taxonomy for llms.txt generation and combined analysis.

Each error knows the HTTP status it maps to and the JSON body the web
layer returns, so the CLI and the Flask app report failures the same way.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional


class AIReadinessError(Exception):
    """Base class for user-visible failures."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


class InvalidInputError(AIReadinessError):
    """Missing or malformed URL in the request."""

    status_code = 400


class SitemapResolutionError(AIReadinessError):
    """The sitemap could not be located or failed verification."""

    status_code = 404

    def __init__(
        self,
        message: str,
        *,
        error_type: str,
        details: List[str],
        sitemap_url: str,
        sitemap_source: str,
    ) -> None:
        super().__init__(message)
        self.error_type = error_type
        self.details = list(details)
        self.sitemap_url = sitemap_url
        self.sitemap_source = sitemap_source

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.message,
            "errorType": self.error_type,
            "errorDetails": self.details,
            "sitemapUrl": self.sitemap_url,
            "sitemapSource": self.sitemap_source,
        }


class EmptySitemapError(AIReadinessError):
    """The sitemap tree was reachable but yielded no page URLs."""

    status_code = 404
    error_type = "empty_sitemap"

    def __init__(self, message: str, *, details: List[str], sitemap_url: str) -> None:
        super().__init__(message)
        self.details = list(details)
        self.sitemap_url = sitemap_url

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.message,
            "errorType": self.error_type,
            "errorDetails": self.details,
            "sitemapUrl": self.sitemap_url,
        }


class NoLevel1UrlsError(AIReadinessError):
    """URLs were collected but none is a level-1 page of the site."""

    status_code = 404

    def __init__(self, message: str, *, total_urls: int, sample_urls: List[str]) -> None:
        super().__init__(message)
        self.total_urls = total_urls
        self.sample_urls = list(sample_urls)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.message,
            "totalUrls": self.total_urls,
            "sampleUrls": self.sample_urls,
        }


class ServiceError(AIReadinessError):
    """An external analysis service failed or is not configured."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 500,
        details: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"error": self.message}
        if self.details is not None:
            data["details"] = self.details
        return data


class GenerationError(Exception):
    """The text-generation call failed or returned an unusable payload.

    Never surfaced to callers: the manifest generator falls back instead.
    """
