"""
Async client for the reporting backend.

Requests carry the session's bearer token. A response whose payload says
`status: "fallback"` raises the cached-data notice instead of failing, and
state-changing requests raise the request status ribbon.
"""

import asyncio
from typing import Any, Dict, List, Optional, Tuple

import httpx

from flashdash.apps.access.session import SessionContext
from flashdash.apps.reports.notices import NoticeBoard
from flashdash.apps.reports.schemas import (
    ComparisonDataset,
    DashboardSummary,
    SectionDataset,
    SyncStatus,
    fallback_section,
    fallback_summary,
    merge_summary,
    normalize_section,
    normalize_sync_status,
    visible_sections,
)
from flashdash.config.settings import settings
from flashdash.utils.logger import get_logger

logger = get_logger(__name__)

REPORTS_TIMEOUT_SECONDS = 20.0


class ReportsClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[SessionContext] = None,
        notices: Optional[NoticeBoard] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = REPORTS_TIMEOUT_SECONDS,
    ):
        self.base_url = (base_url or settings.REPORTS_API_BASE).rstrip("/")
        self.session = session
        self.notices = notices or NoticeBoard()
        self.timeout = timeout
        self._transport = transport
        self.sync_status = SyncStatus()

    def _headers(self) -> Dict[str, str]:
        return self.session.auth_header() if self.session else {}

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        notify: bool = False,
        silent: bool = False,
    ) -> Any:
        """
        Send one request and return the decoded JSON body.

        Non-GET requests (or GETs with notify=True) report their outcome on
        the status ribbon unless silent=True. HTTP errors, transport errors and
        non-JSON bodies (ValueError) are re-raised after the ribbon is updated.
        """
        method = method.upper()
        announce = (method != "GET" or notify) and not silent

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    method, path, params=params, json=json, headers=self._headers()
                )
                response.raise_for_status()
            payload = response.json() if response.content else None
        except httpx.HTTPStatusError as e:
            message = _error_message(e.response)
            logger.warning(f"{method} {path} failed with {e.response.status_code}: {message}")
            if announce:
                self.notices.push_status("error", message)
            raise
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {e!r}")
            if announce:
                self.notices.push_status("error", "Request failed")
            raise
        except ValueError:
            logger.warning(f"{method} {path} returned a body that is not JSON")
            if announce:
                self.notices.push_status("error", "Unexpected response from server")
            raise

        if isinstance(payload, dict) and payload.get("status") == "fallback":
            self.notices.push_fallback(payload.get("message"))

        if announce:
            message = payload.get("message") if isinstance(payload, dict) else None
            self.notices.push_status("success", message or "Request completed")
        return payload

    async def fetch_section(
        self, section: str, range_filter: str = "today"
    ) -> SectionDataset | ComparisonDataset:
        """Load one section; any failure, unreadable shapes included, yields the placeholder."""
        try:
            payload = await self.request("GET", f"/api/reports/{section}", params={"range": range_filter})
            return normalize_section(section, payload)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Section {section} unavailable, showing placeholder: {e}")
            return fallback_section(section)

    async def fetch_reports(
        self, role: Optional[str], range_filter: str = "today"
    ) -> Dict[str, SectionDataset | ComparisonDataset]:
        """Fetch every section the role can see, concurrently."""
        sections = visible_sections(role)
        results: List[Tuple[str, Any]] = await asyncio.gather(
            *(self._labelled(section, range_filter) for section in sections)
        )
        return dict(results)

    async def _labelled(self, section: str, range_filter: str) -> Tuple[str, Any]:
        return section, await self.fetch_section(section, range_filter)

    async def fetch_dashboard_summary(self, role: Optional[str]) -> DashboardSummary:
        """Summary merged over the role's fallback; the fallback alone on failure."""
        try:
            payload = await self.request("GET", "/api/dashboard/summary", params={"role": role})
            return merge_summary(payload, role)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Dashboard summary unavailable, showing fallback: {e}")
            return fallback_summary(role)

    async def fetch_sync_status(self) -> SyncStatus:
        try:
            payload = await self.request("GET", "/api/forthcrm/sync/status")
            self.sync_status = normalize_sync_status(payload, self.sync_status)
        except (httpx.HTTPError, ValueError):
            self.sync_status = SyncStatus(
                active=False, last_success=self.sync_status.last_success, error=True
            )
        return self.sync_status


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or f"HTTP {response.status_code}")
    return f"HTTP {response.status_code}"
