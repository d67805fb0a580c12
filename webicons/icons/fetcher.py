"""Icon fetcher downloading icons and measuring their natural size"""

import asyncio
import logging

import aiodogstatsd
import httpx
from httpx import AsyncClient

from webicons.configs import settings
from webicons.exceptions import (
    IconDecodeError,
    IconError,
    IconFetchError,
    IconTransportError,
)
from webicons.icons.models import CachedIcon
from webicons.metrics import get_metrics_client
from webicons.utils.http_client import create_anonymous_cookie_jar, create_http_client
from webicons.utils.image import Image

logger = logging.getLogger(__name__)


def create_icon_http_client(transport: httpx.AsyncBaseTransport | None = None) -> AsyncClient:
    """Create the HTTP client used for icon requests from the `icons.fetch` settings.

    Requests are anonymous: cookies set by any response, redirect hops included, are
    dropped and never sent.
    """
    fetch_settings = settings.icons.fetch
    return create_http_client(
        max_connections=fetch_settings.max_connections,
        connect_timeout=fetch_settings.connect_timeout_sec,
        request_timeout=fetch_settings.timeout_sec,
        headers={"User-Agent": fetch_settings.user_agent},
        cookies=create_anonymous_cookie_jar(),
        transport=transport,
    )


class IconFetcher:
    """Download icons and report the length of their larger edge."""

    http_client: AsyncClient
    metrics_client: aiodogstatsd.Client

    def __init__(
        self,
        http_client: AsyncClient | None = None,
        metrics_client: aiodogstatsd.Client | None = None,
    ) -> None:
        self.http_client = http_client or create_icon_http_client()
        # Icon requests are anonymous, on injected clients too.
        self.http_client.cookies = create_anonymous_cookie_jar()
        self.metrics_client = metrics_client or get_metrics_client()

    async def fetch_and_measure(self, icon_url: str) -> CachedIcon:
        """Download the icon at `icon_url` and measure it once decoded.

        Non-square icons are sized by their larger edge.

        Raises:
            - `IconFetchError` if the response status isn't 200.
            - `IconTransportError` on network errors and timeouts.
            - `IconDecodeError` if the response isn't a decodable image.
        """
        self.metrics_client.increment("icons.fetch.requests")
        with self.metrics_client.timeit("icons.fetch.duration"):
            try:
                image = await self._download_icon(icon_url)
                width, height = await self._measure_icon(icon_url, image)
            except IconError as exc:
                logger.info(f"Failed to fetch icon: {exc}")
                self.metrics_client.increment("icons.fetch.failures")
                raise

        return CachedIcon(blob=image.content, size=max(width, height))

    async def _download_icon(self, icon_url: str) -> Image:
        try:
            response = await self.http_client.get(icon_url)
        except httpx.TimeoutException as exc:
            raise IconTransportError(icon_url, "Request timed out.") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise IconTransportError(icon_url, str(exc)) from exc

        if response.status_code != 200:
            raise IconFetchError(icon_url, response.status_code)

        return Image(
            content=response.content,
            content_type=str(response.headers.get("Content-Type", "image/unknown")),
        )

    async def _measure_icon(self, icon_url: str, image: Image) -> tuple[int, int]:
        try:
            return await asyncio.to_thread(image.get_dimensions)
        except Exception as exc:
            raise IconDecodeError(icon_url, str(exc)) from exc

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        await self.http_client.aclose()
