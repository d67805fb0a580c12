# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

"""Unit tests for the fetcher.py module."""

from typing import Callable
from unittest.mock import MagicMock

import httpx
import pytest

from tests.unit.conftest import PngBytesFixture
from webicons.configs import settings
from webicons.exceptions import IconDecodeError, IconFetchError, IconTransportError
from webicons.icons.fetcher import IconFetcher, create_icon_http_client
from webicons.scrapers import PageIconScraper

ICON_URL = "https://example.com/favicon.ico"

Handler = Callable[[httpx.Request], httpx.Response]


def make_fetcher(handler: Handler, metrics_client: MagicMock) -> IconFetcher:
    """Create an IconFetcher whose requests are answered by `handler`."""
    http_client = create_icon_http_client(transport=httpx.MockTransport(handler))
    return IconFetcher(http_client=http_client, metrics_client=metrics_client)


@pytest.mark.asyncio
async def test_fetch_and_measure(metrics_client: MagicMock, png_bytes: PngBytesFixture) -> None:
    """Test that the icon bytes are returned along with their size."""
    content = png_bytes(32, 32)
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, content=content, headers={"Content-Type": "image/png"})

    fetcher = make_fetcher(handler, metrics_client)

    icon = await fetcher.fetch_and_measure(ICON_URL)

    assert icon.blob == content
    assert icon.size == 32
    assert len(requests) == 1
    assert str(requests[0].url) == ICON_URL
    assert requests[0].headers["User-Agent"] == settings.icons.fetch.user_agent
    assert "Cookie" not in requests[0].headers
    metrics_client.increment.assert_called_once_with("icons.fetch.requests")
    metrics_client.timeit.assert_called_once_with("icons.fetch.duration")

    await fetcher.close()


@pytest.mark.asyncio
@pytest.mark.parametrize("width, height", [(16, 48), (64, 20)])
async def test_fetch_and_measure_non_square(
    metrics_client: MagicMock, png_bytes: PngBytesFixture, width: int, height: int
) -> None:
    """Test that non-square icons are sized by their larger edge."""
    content = png_bytes(width, height)
    fetcher = make_fetcher(lambda request: httpx.Response(200, content=content), metrics_client)

    icon = await fetcher.fetch_and_measure(ICON_URL)

    assert icon.size == max(width, height)


@pytest.mark.asyncio
async def test_fetch_and_measure_does_not_replay_cookies(
    metrics_client: MagicMock, png_bytes: PngBytesFixture
) -> None:
    """Test that cookies set by an icon host aren't sent with later requests."""
    content = png_bytes(16, 16)
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, content=content, headers={"Set-Cookie": "session=abc"})

    fetcher = make_fetcher(handler, metrics_client)

    await fetcher.fetch_and_measure(ICON_URL)
    await fetcher.fetch_and_measure(ICON_URL)

    assert "Cookie" not in requests[1].headers


@pytest.mark.asyncio
async def test_fetch_and_measure_drops_cookies_set_on_redirect(
    metrics_client: MagicMock, png_bytes: PngBytesFixture
) -> None:
    """Test that a cookie set by a redirect hop isn't sent to the redirect target."""
    content = png_bytes(16, 16)
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.path == "/icon":
            return httpx.Response(
                302, headers={"Location": "/final.png", "Set-Cookie": "track=1; Path=/"}
            )
        return httpx.Response(200, content=content)

    fetcher = make_fetcher(handler, metrics_client)

    icon = await fetcher.fetch_and_measure("https://example.com/icon")

    assert icon.size == 16
    assert [request.url.path for request in requests] == ["/icon", "/final.png"]
    assert requests[1].headers.get("Cookie") is None


@pytest.mark.asyncio
async def test_fetch_and_measure_with_client_shared_with_scraper(
    metrics_client: MagicMock, png_bytes: PngBytesFixture
) -> None:
    """Test that cookies set while scraping a page aren't sent with icon requests."""
    content = png_bytes(16, 16)
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.path == "/page":
            return httpx.Response(
                200,
                text='<html><head><link rel="icon" href="/favicon.png"></head></html>',
                headers={"Set-Cookie": "session=abc; Path=/"},
            )
        return httpx.Response(200, content=content)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    fetcher = IconFetcher(http_client=http_client, metrics_client=metrics_client)
    place_icons, _ = await PageIconScraper(http_client).scrape("https://example.com/page")

    await fetcher.fetch_and_measure(next(iter(place_icons)))

    assert str(requests[-1].url) == "https://example.com/favicon.png"
    assert requests[-1].headers.get("Cookie") is None


@pytest.mark.asyncio
async def test_fetch_and_measure_http_error(metrics_client: MagicMock) -> None:
    """Test that a non-200 response is reported with its status code and URL."""
    fetcher = make_fetcher(lambda request: httpx.Response(404), metrics_client)

    with pytest.raises(IconFetchError) as excinfo:
        await fetcher.fetch_and_measure(ICON_URL)

    assert excinfo.value.status_code == 404
    assert excinfo.value.url == ICON_URL
    assert str(excinfo.value) == f"Got HTTP status 404 trying to load {ICON_URL}."
    metrics_client.increment.assert_any_call("icons.fetch.failures")


@pytest.mark.asyncio
async def test_fetch_and_measure_non_200_success_status(metrics_client: MagicMock) -> None:
    """Test that only a 200 status is accepted."""
    fetcher = make_fetcher(lambda request: httpx.Response(204), metrics_client)

    with pytest.raises(IconFetchError) as excinfo:
        await fetcher.fetch_and_measure(ICON_URL)

    assert excinfo.value.status_code == 204


@pytest.mark.asyncio
async def test_fetch_and_measure_timeout(metrics_client: MagicMock) -> None:
    """Test that a timeout is reported as a transport error."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    fetcher = make_fetcher(handler, metrics_client)

    with pytest.raises(IconTransportError) as excinfo:
        await fetcher.fetch_and_measure(ICON_URL)

    assert excinfo.value.url == ICON_URL
    assert ICON_URL in str(excinfo.value)
    assert "timed out" in str(excinfo.value)


@pytest.mark.asyncio
async def test_fetch_and_measure_network_error(metrics_client: MagicMock) -> None:
    """Test that a connection failure is reported as a transport error."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    fetcher = make_fetcher(handler, metrics_client)

    with pytest.raises(IconTransportError) as excinfo:
        await fetcher.fetch_and_measure(ICON_URL)

    assert "Connection refused" in str(excinfo.value)
    metrics_client.increment.assert_any_call("icons.fetch.failures")


@pytest.mark.asyncio
async def test_fetch_and_measure_undecodable_image(metrics_client: MagicMock) -> None:
    """Test that bytes which aren't an image are reported as a decode error."""
    fetcher = make_fetcher(
        lambda request: httpx.Response(200, content=b"this is not an image"), metrics_client
    )

    with pytest.raises(IconDecodeError) as excinfo:
        await fetcher.fetch_and_measure(ICON_URL)

    assert excinfo.value.url == ICON_URL
    metrics_client.increment.assert_any_call("icons.fetch.failures")


def test_create_icon_http_client_timeout() -> None:
    """Test that icon requests use the configured timeout."""
    http_client = create_icon_http_client()

    assert http_client.timeout.read == settings.icons.fetch.timeout_sec
    assert http_client.timeout.read == 10.0
    assert http_client.follow_redirects is True
