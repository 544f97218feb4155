"""Unit tests for the HTTP feed source."""

import httpx
import pytest

from nextava.models import FetchFailed
from nextava.services.feed import HttpFeedSource

URL = "https://example.test/feed.csv"


def make_source(handler) -> HttpFeedSource:
    source = HttpFeedSource(URL)
    source._client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return source


class TestHttpFeedSourceInit:
    def test_default_timeout(self) -> None:
        source = HttpFeedSource(URL)
        assert source._timeout == 15.0
        assert source.url == URL

    def test_custom_timeout(self) -> None:
        assert HttpFeedSource(URL, timeout=3.0)._timeout == 3.0


class TestHttpFeedSourceFetch:
    @pytest.mark.asyncio
    async def test_success(self) -> None:
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, text="ClinicID\nc-1\n")

        source = make_source(handler)
        assert await source.fetch_text() == "ClinicID\nc-1\n"
        assert seen == [URL]
        await source.close()

    @pytest.mark.asyncio
    async def test_non_success_status(self) -> None:
        source = make_source(lambda request: httpx.Response(404, text="missing"))

        with pytest.raises(FetchFailed) as exc_info:
            await source.fetch_text()

        assert exc_info.value.status_code == 404
        await source.close()

    @pytest.mark.asyncio
    async def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        source = make_source(handler)

        with pytest.raises(FetchFailed) as exc_info:
            await source.fetch_text()

        assert exc_info.value.status_code is None
        await source.close()

    @pytest.mark.asyncio
    async def test_invalid_url(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.InvalidURL("Invalid non-printable ASCII character in URL")

        source = make_source(handler)

        with pytest.raises(FetchFailed):
            await source.fetch_text()
        await source.close()

    @pytest.mark.asyncio
    async def test_close_resets_client(self) -> None:
        source = make_source(lambda request: httpx.Response(200, text=""))
        await source.close()
        assert source._client is None
        assert not source._get_client().is_closed
        await source.close()
