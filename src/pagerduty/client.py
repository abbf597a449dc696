"""HTTP client for the incident service: paginated fetch and resolve.

Pagination model
────────────────
  page 0      — fetched synchronously; yields ``limit`` and ``total``
  empty page  — terminal, no further requests
  pages 1..n  — offsets ``limit, 2·limit, …`` below ``total``, fetched
                concurrently and joined all-or-nothing; results are
                re-ordered by offset, never by arrival time
"""

from __future__ import annotations

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Any

import httpx

from src.contracts.alert import Alert, AlertPage
from src.contracts.enums import IncidentStatus
from src.pagerduty.query import build_incidents_query, incidents_url, resolve_url
from src.shared.errors import DecodeError, TransportError
from src.shared.settings import ServiceSettings

log = logging.getLogger(__name__)


class ServiceClient:
    """Thin wrapper around ``httpx.Client`` bound to one organisation.

    Use as a context manager so the underlying connection pool is closed::

        with ServiceClient(settings) as client:
            alerts = client.fetch_open_alerts(since, None, IncidentStatus.TRIGGERED, ["id"])
    """

    def __init__(
        self,
        settings: ServiceSettings,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self._http = httpx.Client(
            headers={"Authorization": f"Token token={settings.token}"},
            timeout=settings.request_timeout_sec,
            transport=transport,
        )

    def __enter__(self) -> ServiceClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    # ── Low-level requests ───────────────────────────────────────────────

    def _page_url(
        self,
        offset: int,
        since: date | None,
        until: date | None,
        status: IncidentStatus | None,
        fields: list[str] | None,
    ) -> str:
        query = build_incidents_query(
            self.settings.timezone,
            self.settings.timezone_short,
            offset,
            since=since,
            until=until,
            status=status,
            fields=fields,
        )
        return incidents_url(self.settings.api_root, query)

    def _get(self, url: str) -> bytes:
        try:
            resp = self._http.get(url)
            resp.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(f"GET {url} failed: {exc}") from exc
        return resp.content

    @staticmethod
    def _parse_page(body: bytes) -> AlertPage:
        log.debug("response: %s", body.decode("utf-8", errors="replace"))
        try:
            obj = json.loads(body)
        except ValueError as exc:
            raise DecodeError(f"response body is not valid JSON: {exc}") from exc
        return AlertPage.from_dict(obj)

    def get_page(
        self,
        offset: int,
        since: date | None = None,
        until: date | None = None,
        status: IncidentStatus | None = None,
        fields: list[str] | None = None,
    ) -> AlertPage:
        """Fetch and decode the page starting at *offset*."""
        return self._parse_page(self._get(self._page_url(offset, since, until, status, fields)))

    # ── Public API ───────────────────────────────────────────────────────

    def fetch_open_alerts(
        self,
        since: date | None,
        until: date | None,
        status: IncidentStatus | None,
        fields: list[str] | None,
    ) -> list[Alert]:
        """Fetch every page of matching incidents and return them in page order.

        Raises:
            TransportError: if any page request fails (no partial results).
            DecodeError: if any page body is not a valid envelope.
        """
        first = self.get_page(0, since, until, status, fields)
        if not first.items:
            log.info("No incidents returned (total=%d)", first.total)
            return []
        if first.limit <= 0:
            raise DecodeError(f"non-empty page reports limit={first.limit}")

        offsets = list(range(first.limit, first.total, first.limit))
        log.info(
            "First page: %d incidents, total=%d, limit=%d — %d more page(s) to fetch",
            len(first.items), first.total, first.limit, len(offsets),
        )

        result = list(first.items)
        for page in self._fetch_concurrently(offsets, since, until, status, fields):
            result.extend(page.items)

        log.info("Fetched %d incidents", len(result))
        return result

    def _fetch_concurrently(
        self,
        offsets: list[int],
        since: date | None,
        until: date | None,
        status: IncidentStatus | None,
        fields: list[str] | None,
    ) -> list[AlertPage]:
        """Fetch *offsets* in parallel; return pages in the order of *offsets*."""
        if not offsets:
            return []

        workers = min(len(offsets), self.settings.max_parallel_pages)
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="page")
        try:
            futures = [
                executor.submit(self.get_page, off, since, until, status, fields)
                for off in offsets
            ]
            # Iterating in submission order keeps output offset-ascending;
            # the first exception propagates and aborts the join.
            return [f.result() for f in futures]
        finally:
            executor.shutdown(wait=True, cancel_futures=True)

    def resolve(self, alert_id: str, requester_id: str) -> int:
        """Mark *alert_id* resolved; return the HTTP status code.

        The status is logged but not interpreted; only transport-level
        failures raise.
        """
        url = resolve_url(self.settings.api_root, alert_id, requester_id)
        try:
            resp = self._http.put(url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(f"PUT {url} failed: {exc}") from exc
        log.info("Resolve #%s => %d %s", alert_id, resp.status_code, resp.reason_phrase)
        return resp.status_code
