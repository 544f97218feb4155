"""Feed source for the published availability sheet.

Downloads the CSV export over HTTP(S). Transport errors and non-2xx
responses are raised as ``FetchFailed``; there is no retry here, callers
decide what to do with a failed refresh.
"""

import logging
from abc import ABC, abstractmethod

import httpx

from nextava.models import FetchFailed

logger = logging.getLogger(__name__)


class FeedSource(ABC):
    """Abstract source of raw CSV text."""

    @abstractmethod
    async def fetch_text(self) -> str:
        """Download the feed.

        Raises:
            FetchFailed: On transport errors or a non-success status.
        """
        pass

    async def close(self) -> None:
        return None


class HttpFeedSource(FeedSource):
    """httpx client for a CSV URL.

    Uses one shared ``AsyncClient`` per source, recreated if it was closed.
    """

    HEADERS = {
        "User-Agent": "NextAvaAvailability/1.0 (https://nextavahealth.com)",
        "Accept": "text/csv, text/plain;q=0.9, */*;q=0.1",
    }

    def __init__(self, url: str, timeout: float = 15.0) -> None:
        self._url = url
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @property
    def url(self) -> str:
        return self._url

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the shared HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                headers=self.HEADERS,
                follow_redirects=True,
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def fetch_text(self) -> str:
        client = self._get_client()
        try:
            response = await client.get(self._url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"[FEED] Transport error: {type(e).__name__}: {e}")
            raise FetchFailed(f"Failed to fetch data: {type(e).__name__}") from e

        if not response.is_success:
            logger.warning(f"[FEED] HTTP {response.status_code} from feed")
            raise FetchFailed(
                f"Failed to fetch data: HTTP {response.status_code}",
                status_code=response.status_code,
            )

        text = response.text
        logger.info(f"[FEED] Downloaded {len(text)} chars")
        return text
