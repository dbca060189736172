"""Fetches web pages over HTTP and hands the markup to the HTML reader.

Used by the indexing pass for the configured ``corpus_urls``.  Every
transport or status failure is reported as :class:`SourceReadError`, so a
page that cannot be fetched is skipped like an unreadable file.
"""

from __future__ import annotations

import httpx
import structlog

from semsearch.models.corpus import RawUnit
from semsearch.providers.source.html_reader import HTMLSourceReader
from semsearch.utils.errors import SourceReadError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_TIMEOUT = 10.0
_DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; semsearch/0.1)",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
}


class WebPageFetcher:
    """Downloads a URL with httpx and extracts its selected paragraphs."""

    def __init__(
        self,
        html_reader: HTMLSourceReader | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._reader = html_reader or HTMLSourceReader()
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(_DEFAULT_TIMEOUT),
            headers=_DEFAULT_HEADERS,
            follow_redirects=True,
        )

    async def fetch(self, url: str) -> RawUnit:
        """Fetch *url* and return its extracted text as a RawUnit.

        Raises
        ------
        SourceReadError
            On timeout, non-2xx status, transport error, or a page with no
            selected text.
        """
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise SourceReadError(
                message=f"timeout fetching {url}: {exc}",
                provider_name=self.get_provider_name(),
                path=url,
            ) from exc
        except httpx.HTTPStatusError as exc:
            raise SourceReadError(
                message=f"HTTP {exc.response.status_code} for {url}",
                provider_name=self.get_provider_name(),
                path=url,
            ) from exc
        except httpx.HTTPError as exc:
            raise SourceReadError(
                message=f"HTTP error fetching {url}: {exc}",
                provider_name=self.get_provider_name(),
                path=url,
            ) from exc

        unit = self._reader.parse(response.text, source_id=url, default_title=url)
        logger.info("web_page_fetched", url=url, chars=len(unit.text))
        return unit.model_copy(update={"extra": {**unit.extra, "source_type": "web", "url": url}})

    async def aclose(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._owns_client:
            await self._client.aclose()

    def get_provider_name(self) -> str:
        return "web"
