# integrations/insights_client.py

"""
HTTP client for the IDP Insights API
Used by dashboards that poll reports with the shared idp-token.
Timeout + graceful fallback only - NO RETRIES, callers re-poll.
"""

import requests
from typing import Any, Optional
from dataclasses import dataclass
from time import perf_counter
import logging

logger = logging.getLogger(__name__)


@dataclass
class InsightsResponse:
    """Outcome of one report request"""
    success: bool
    data: Optional[Any]
    error: Optional[str]
    status_code: Optional[int]
    duration_ms: Optional[float]
    timed_out: bool = False


class InsightsClient:
    """
    Read-only client for /insights/<report_name>
    """

    DEFAULT_TIMEOUT = 10.0  # seconds
    TOKEN_HEADER = "idp-token"

    def __init__(self, base_url: str, api_key: str, timeout: float = DEFAULT_TIMEOUT,
                 session: Optional[requests.Session] = None):
        """
        Args:
            base_url: API root (e.g., "https://cms.example.org")
            api_key: Shared secret configured on the platform
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get(self, path: str, timeout: Optional[float] = None,
             authenticated: bool = True) -> InsightsResponse:
        url = f"{self.base_url}{path}"
        request_timeout = timeout or self.timeout
        headers = {"Accept": "application/json"}
        if authenticated:
            headers[self.TOKEN_HEADER] = self.api_key
        start = perf_counter()

        def elapsed():
            return (perf_counter() - start) * 1000

        try:
            response = self.session.get(url, headers=headers, timeout=request_timeout)
        except requests.Timeout:
            logger.error("Insights timeout: %s (%.0fms)", url, elapsed())
            return InsightsResponse(
                success=False,
                data=None,
                error=f"Request timed out after {request_timeout}s",
                status_code=None,
                duration_ms=elapsed(),
                timed_out=True,
            )
        except requests.RequestException as e:
            logger.error("Insights connection error: %s - %s", url, e)
            return InsightsResponse(
                success=False,
                data=None,
                error=f"Connection failed: {str(e)[:200]}",
                status_code=None,
                duration_ms=elapsed(),
            )

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.status_code == 200:
            logger.info("Insights success: %s (%.0fms)", url, elapsed())
            return InsightsResponse(
                success=True,
                data=body,
                error=None,
                status_code=200,
                duration_ms=elapsed(),
            )

        message = body.get("error") if isinstance(body, dict) else None
        logger.warning("Insights error: %s - Status %d", url, response.status_code)
        return InsightsResponse(
            success=False,
            data=None,
            error=message or f"HTTP {response.status_code}: {response.text[:200]}",
            status_code=response.status_code,
            duration_ms=elapsed(),
        )

    def fetch_report(self, report_name: str) -> InsightsResponse:
        """Fetch one report, e.g. "Modules" or "Metadata"."""
        return self._get(f"/insights/{report_name}")

    def health_check(self) -> bool:
        """True if the API answers /health"""
        return self._get("/health", timeout=2.0, authenticated=False).success
