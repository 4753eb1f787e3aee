"""Scrape provider contract and its Firecrawl implementation.

Fetching, rendering and HTML-to-markdown conversion all happen on the
Firecrawl side; this module only speaks its REST API and turns the JSON into
:class:`ScrapedDocument` records.  Crawl results are handed back as decoded
JSON so the caller can validate each page on its own.
"""

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional, Protocol, Sequence

import httpx
from pydantic import ValidationError

from web_extractor.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_SECONDS
from web_extractor.errors import ScrapeProviderError
from web_extractor.models.document import ScrapedDocument

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 2.0
DEFAULT_CRAWL_TIMEOUT_SECONDS = 300.0

_SCRAPE_PATH = "/v1/scrape"
_CRAWL_PATH = "/v1/crawl"
_FAILED_CRAWL_STATUSES = {"failed", "cancelled"}


class ScrapeProvider(Protocol):
    """Remote service that scrapes one URL or crawls a site."""

    async def scrape(
        self,
        url: str,
        *,
        formats: Sequence[str],
        only_main_content: bool = True,
        wait_for: Optional[int] = None,
    ) -> ScrapedDocument:
        """Scrape a single *url*.

        Raises:
            ScrapeProviderError: if the call fails for any reason.
        """
        ...

    async def crawl(
        self,
        url: str,
        *,
        limit: int,
        max_depth: int,
        allow_subdomains: bool,
        allow_external_links: bool,
        formats: Sequence[str],
        only_main_content: bool = True,
    ) -> List[Dict[str, Any]]:
        """Crawl from *url* and return every page record the provider collected.

        Records are plain JSON objects. A malformed record must not fail the
        whole crawl, so validation is left to the caller.

        Raises:
            ScrapeProviderError: if the crawl cannot be started or does not complete.
        """
        ...


class FirecrawlClient:
    """:class:`ScrapeProvider` backed by the Firecrawl v1 REST API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        crawl_timeout: float = DEFAULT_CRAWL_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            api_key: Firecrawl API key, sent as a bearer token
            base_url: API root (override for self-hosted Firecrawl)
            timeout: Per-request timeout in seconds
            poll_interval: Seconds between crawl status checks
            crawl_timeout: Overall seconds to wait for a crawl to finish
            transport: Optional httpx transport (used by tests)
        """
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._poll_interval = poll_interval
        self._crawl_timeout = crawl_timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            headers={
                "Authorization": f"Bearer {self._api_key}",
                "Content-Type": "application/json",
            },
            transport=self._transport,
        )

    async def scrape(
        self,
        url: str,
        *,
        formats: Sequence[str],
        only_main_content: bool = True,
        wait_for: Optional[int] = None,
    ) -> ScrapedDocument:
        payload: Dict[str, Any] = {
            "url": url,
            "formats": list(formats),
            "onlyMainContent": only_main_content,
        }
        if wait_for:
            payload["waitFor"] = wait_for

        async with self._client() as client:
            body = await self._request(client, "POST", _SCRAPE_PATH, json=payload)

        logger.debug("Firecrawl scrape succeeded for %s", url)
        return _to_document(body.get("data") or {})

    async def crawl(
        self,
        url: str,
        *,
        limit: int,
        max_depth: int,
        allow_subdomains: bool,
        allow_external_links: bool,
        formats: Sequence[str],
        only_main_content: bool = True,
    ) -> List[Dict[str, Any]]:
        payload: Dict[str, Any] = {
            "url": url,
            "limit": limit,
            "maxDepth": max_depth,
            "allowSubdomains": allow_subdomains,
            "allowExternalLinks": allow_external_links,
            "scrapeOptions": {
                "formats": list(formats),
                "onlyMainContent": only_main_content,
            },
        }

        async with self._client() as client:
            body = await self._request(client, "POST", _CRAWL_PATH, json=payload)
            job_id = body.get("id")
            if not job_id:
                raise ScrapeProviderError("Firecrawl did not return a crawl job id")
            logger.debug("Firecrawl crawl job %s started for %s", job_id, url)
            records = await self._wait_for_crawl(client, job_id)

        return records

    async def _wait_for_crawl(self, client: httpx.AsyncClient, job_id: str) -> List[dict]:
        """Poll the crawl job until it completes, then gather every result page."""
        deadline = time.monotonic() + self._crawl_timeout
        status_path = f"{_CRAWL_PATH}/{job_id}"

        while True:
            body = await self._request(client, "GET", status_path)
            status = body.get("status")
            if status == "completed":
                break
            if status in _FAILED_CRAWL_STATUSES:
                raise ScrapeProviderError(f"Crawl job {job_id} {status}")
            if time.monotonic() >= deadline:
                raise ScrapeProviderError(
                    f"Crawl job {job_id} did not complete within {self._crawl_timeout:g}s"
                )
            logger.debug(
                "Crawl job %s is %s (%s/%s pages)",
                job_id,
                status,
                body.get("completed"),
                body.get("total"),
            )
            await asyncio.sleep(self._poll_interval)

        records: List[dict] = list(body.get("data") or [])
        # Large crawls are paginated; "next" is an absolute URL.
        next_url = body.get("next")
        while next_url:
            page = await self._request(client, "GET", next_url)
            records.extend(page.get("data") or [])
            next_url = page.get("next")
        return records

    async def _request(
        self,
        client: httpx.AsyncClient,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Send one API request and return the decoded JSON body.

        Raises:
            ScrapeProviderError: on transport errors, non-2xx responses,
                undecodable bodies, or ``"success": false`` payloads.
        """
        try:
            response = await client.request(method, path, json=json)
        except httpx.TimeoutException as exc:
            raise ScrapeProviderError(f"Firecrawl request to {path} timed out") from exc
        except httpx.HTTPError as exc:
            raise ScrapeProviderError(f"Firecrawl request to {path} failed: {exc}") from exc

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.is_error:
            detail = body.get("error") if isinstance(body, dict) else None
            raise ScrapeProviderError(
                f"Firecrawl returned HTTP {response.status_code}"
                + (f": {detail}" if detail else ""),
                status_code=response.status_code,
            )
        if not isinstance(body, dict):
            raise ScrapeProviderError(f"Firecrawl returned a non-JSON body for {path}")
        if body.get("success") is False:
            raise ScrapeProviderError(
                f"Firecrawl reported failure: {body.get('error') or 'unknown error'}",
                status_code=response.status_code,
            )
        return body


def _to_document(record: Dict[str, Any]) -> ScrapedDocument:
    try:
        return ScrapedDocument.model_validate(record)
    except ValidationError as exc:
        raise ScrapeProviderError(f"Firecrawl returned a malformed page record: {exc}") from exc
