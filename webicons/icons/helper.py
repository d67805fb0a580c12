"""Entry point to work with icons coming from different sources.

`IconsHelper` resolves the best icon of a page, either as a URL or as the icon
bytes along with their size in pixels.
"""

import logging
from typing import Any, Mapping

from httpx import AsyncClient

from webicons.cache import open_stores
from webicons.cache.protocol import StoreOpener
from webicons.configs import settings
from webicons.icons import selector
from webicons.icons.cache import IconCache
from webicons.icons.fetcher import IconFetcher
from webicons.icons.models import CachedIcon, PlaceIcons, SizeTable, WebManifestSite

logger = logging.getLogger(__name__)


class IconsHelper:
    """Resolve page icons for a display of a given density."""

    icon_cache: IconCache
    device_pixel_ratio: float

    def __init__(self, icon_cache: IconCache, device_pixel_ratio: float | None = None) -> None:
        self.icon_cache = icon_cache
        self.device_pixel_ratio = (
            device_pixel_ratio
            if device_pixel_ratio is not None
            else float(settings.icons.device_pixel_ratio)
        )

    async def get_icon(
        self,
        uri: str,
        target_size: float | None = None,
        place_icons: PlaceIcons | Mapping[str, Any] | None = None,
        site_manifest: WebManifestSite | Mapping[str, Any] | None = None,
        device_pixel_ratio: float | None = None,
    ) -> str:
        """Return the URL of the best icon for the page at `uri`.

        Args:
            - `uri`: the page URL, used for the `/favicon.ico` fallback.
            - `target_size`: the desired icon size in CSS pixels.
            - `place_icons`: the icons declared by the page `<link>` tags.
            - `site_manifest`: the web app manifest of the page and its URL.
            - `device_pixel_ratio`: overrides the density of this helper for one call.
        """
        return selector.resolve_icon_url(
            uri,
            target_size,
            place_icons,
            site_manifest,
            self._density(device_pixel_ratio),
        )

    async def get_icon_blob(
        self,
        uri: str,
        target_size: float | None = None,
        place_icons: PlaceIcons | Mapping[str, Any] | None = None,
        site_manifest: WebManifestSite | Mapping[str, Any] | None = None,
        device_pixel_ratio: float | None = None,
    ) -> CachedIcon:
        """Same as `get_icon` but return the icon bytes and their size in pixels.

        Raises:
            - `IconError` subclasses when the icon can't be read from the store or fetched.
        """
        icon_url = await self.get_icon(
            uri, target_size, place_icons, site_manifest, device_pixel_ratio
        )
        return await self.icon_cache.get_cached_or_fetch(icon_url)

    def get_best_icon_from_web_manifest(
        self,
        site_manifest: WebManifestSite | Mapping[str, Any] | None,
        target_size: float | None = None,
    ) -> str | None:
        """Return the best manifest icon URL. `target_size` is used as is, without scaling."""
        return selector.get_best_icon_from_web_manifest(
            site_manifest, target_size, self.device_pixel_ratio
        )

    def get_best_icon_from_meta_tags(
        self,
        place_icons: PlaceIcons | Mapping[str, Any] | None,
        target_size: float | None = None,
    ) -> str | None:
        """Return the best page icon URI. `target_size` is used as is, without scaling."""
        return selector.get_best_icon_from_meta_tags(
            place_icons, target_size, self.device_pixel_ratio
        )

    get_best_icon = get_best_icon_from_meta_tags

    def get_sizes(self, place_icons: PlaceIcons | Mapping[str, Any] | None) -> SizeTable:
        """Return the sizes offered by the page icons."""
        return selector.get_sizes(place_icons)

    async def close(self) -> None:
        """Flush the icon cache and release the store and HTTP resources."""
        await self.icon_cache.close()
        await self.icon_cache.fetcher.close()

    def _density(self, device_pixel_ratio: float | None) -> float:
        return self.device_pixel_ratio if device_pixel_ratio is None else device_pixel_ratio


def create_icons_helper(
    http_client: AsyncClient | None = None,
    device_pixel_ratio: float | None = None,
    store_opener: StoreOpener = open_stores,
) -> IconsHelper:
    """Create an `IconsHelper` with its cache and fetcher configured from the settings."""
    fetcher = IconFetcher(http_client=http_client)
    icon_cache = IconCache(fetcher, store_opener=store_opener)
    logger.debug(
        f"Created icons helper using the `{icon_cache.store_name}` store "
        f"({settings.icons.cache.backend} backend)"
    )
    return IconsHelper(icon_cache, device_pixel_ratio)
