"""
Clients for the external page-scoring and LLM-insight services, and the
combined analysis that chains them.
"""
from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import requests

from .config import ServicesConfig
from .errors import ServiceError
from .logger import get_logger
from .validators import resolve_site_url

logger = get_logger(__name__)

EMPTY_INSIGHTS: Dict[str, Any] = {
    "success": False,
    "insights": [],
    "overallAIReadiness": "",
    "topPriorities": [],
}


def _error_payload(resp: requests.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return {"error": "Unknown error"}


class ReadinessClient:
    """JSON-over-HTTP client for the two analysis services."""

    def __init__(self, config: ServicesConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()

    def score_page(self, url: str, html_content: Optional[str] = None) -> Dict[str, Any]:
        """
        POST {url, htmlContent?} to the page-scoring service.
        Returns {success, overallScore, checks[], metadata, htmlContent?}.
        """
        if not self.config.readiness_url:
            raise ServiceError("AI readiness service is not configured", status_code=503)

        payload: Dict[str, Any] = {"url": url}
        if html_content is not None:
            payload["htmlContent"] = html_content

        try:
            resp = self.session.post(
                self.config.readiness_url, json=payload, timeout=self.config.timeout
            )
        except requests.RequestException as e:
            raise ServiceError(
                "Failed to call AI readiness endpoint", status_code=500, details=str(e)
            ) from e

        if not resp.ok:
            details = _error_payload(resp)
            logger.error(f"[ANALYZE] ai-readiness failed: {details}")
            raise ServiceError(
                "AI readiness analysis failed", status_code=resp.status_code, details=details
            )
        return resp.json()

    def fetch_insights(
        self, url: str, html_content: str, current_checks: list
    ) -> Dict[str, Any]:
        """
        POST {url, htmlContent, currentChecks} to the insight service.
        Best effort: any failure yields an empty insight payload.
        """
        if not self.config.insights_url:
            logger.info("[ANALYZE] Insight service not configured; skipping")
            return dict(EMPTY_INSIGHTS)

        try:
            resp = self.session.post(
                self.config.insights_url,
                json={
                    "url": url,
                    "htmlContent": html_content,
                    "currentChecks": current_checks,
                },
                timeout=self.config.timeout,
            )
            if not resp.ok:
                logger.error(f"[ANALYZE] ai-analysis failed: {_error_payload(resp)}")
                logger.info("[ANALYZE] Continuing with readiness data only...")
                return dict(EMPTY_INSIGHTS)
            analysis = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"[ANALYZE] Failed to call ai-analysis endpoint: {e}")
            logger.info("[ANALYZE] Continuing with readiness data only...")
            return dict(EMPTY_INSIGHTS)

        if not isinstance(analysis, dict):
            logger.error(f"[ANALYZE] Unexpected ai-analysis payload: {type(analysis).__name__}")
            return dict(EMPTY_INSIGHTS)
        return analysis


def analyze_site(raw_url: Optional[str], client: ReadinessClient) -> Dict[str, Any]:
    """
    Run page scoring, then feed its checks into the insight service, and
    merge both into one response. Only scoring failures are fatal.
    """
    url = resolve_site_url(raw_url)

    logger.info(f"[ANALYZE] Starting combined analysis for: {url}")
    start = time.monotonic()

    logger.info("[ANALYZE] Step 1/2: Calling ai-readiness endpoint...")
    readiness = client.score_page(url)
    logger.info(
        f"[ANALYZE] Step 1/2: ai-readiness completed in "
        f"{int((time.monotonic() - start) * 1000)}ms"
    )

    logger.info("[ANALYZE] Step 2/2: Calling ai-analysis endpoint...")
    analysis_start = time.monotonic()
    analysis = client.fetch_insights(
        url,
        readiness.get("htmlContent") or "",
        readiness.get("checks") or [],
    )
    logger.info(
        f"[ANALYZE] Step 2/2: ai-analysis completed in "
        f"{int((time.monotonic() - analysis_start) * 1000)}ms"
    )

    duration_ms = int((time.monotonic() - start) * 1000)
    logger.info(f"[ANALYZE] Total analysis time: {duration_ms}ms")

    return {
        "success": True,
        "url": url,
        "overallScore": readiness.get("overallScore"),
        "checks": readiness.get("checks") or [],
        "metadata": readiness.get("metadata") or {},
        "insights": analysis.get("insights") or [],
        "overallAIReadiness": analysis.get("overallAIReadiness") or "",
        "topPriorities": analysis.get("topPriorities") or [],
        "analyzedAt": datetime.now(timezone.utc).isoformat(),
        "analysisDuration": duration_ms,
    }
