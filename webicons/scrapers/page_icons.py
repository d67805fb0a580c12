"""Page icon scraper for collecting `<link>` icons and the web app manifest of a page"""

import logging
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from httpx import AsyncClient, HTTPError, InvalidURL
from pydantic import ValidationError

from webicons.icons.models import PlaceIcon, PlaceIcons, WebManifest, WebManifestSite
from webicons.icons.selector import DEPRECATED_ICON_RELS

logger = logging.getLogger(__name__)

LINK_SELECTOR: str = (
    "link[rel~=icon], link[rel=apple-touch-icon], link[rel=apple-touch-icon-precomposed]"
)

MANIFEST_SELECTOR: str = 'link[rel="manifest"]'

PARSER: str = "html.parser"


class PageIconScraper:
    """Collect the icons declared by a page and its web app manifest."""

    def __init__(self, http_client: AsyncClient) -> None:
        self.http_client = http_client

    async def scrape(self, url: str) -> tuple[PlaceIcons, WebManifestSite | None]:
        """Return the page icons of `url` and its web app manifest, if it declares one.

        Failures degrade to no icons, the favicon fallback still applies to the page.
        """
        try:
            response = await self.http_client.get(url)
        except (HTTPError, InvalidURL) as e:
            logger.info(f"Failed to fetch page {url}: {e}")
            return {}, None

        if response.status_code != 200:
            logger.info(f"Got HTTP status {response.status_code} trying to load {url}")
            return {}, None

        page_url = str(response.url)
        page = BeautifulSoup(response.text, PARSER)
        place_icons = self.scrape_place_icons(page, page_url)

        site_manifest = None
        manifest_link = page.select_one(MANIFEST_SELECTOR)
        if manifest_link is not None and manifest_link.get("href"):
            manifest_url = urljoin(page_url, str(manifest_link["href"]))
            site_manifest = await self.scrape_web_manifest(manifest_url)

        return place_icons, site_manifest

    def scrape_place_icons(self, page: BeautifulSoup, page_url: str) -> PlaceIcons:
        """Extract the `<link>` icons of a parsed page, keyed by absolute URL."""
        place_icons: PlaceIcons = {}
        for link in page.select(LINK_SELECTOR):
            href = link.get("href")
            if not href:
                continue

            uri = urljoin(page_url, str(href))
            rel = _attribute_text(link.get("rel")).lower()
            icon = place_icons.setdefault(uri, PlaceIcon(rel=rel))
            # A regular icon declaration of the same URI wins over a deprecated one.
            if icon.rel in DEPRECATED_ICON_RELS and rel not in DEPRECATED_ICON_RELS:
                icon.rel = rel
            sizes = _attribute_text(link.get("sizes"))
            if sizes:
                icon.sizes.append(sizes)

        return place_icons

    async def scrape_web_manifest(self, manifest_url: str) -> WebManifestSite | None:
        """Download a web app manifest and keep its `icons` array."""
        try:
            response = await self.http_client.get(manifest_url)
        except (HTTPError, InvalidURL) as e:
            logger.info(f"Failed to fetch manifest {manifest_url}: {e}")
            return None

        if response.status_code != 200:
            logger.info(f"Got HTTP status {response.status_code} trying to load {manifest_url}")
            return None

        try:
            manifest = response.json()
            icons = manifest.get("icons") if isinstance(manifest, dict) else None
            web_manifest = WebManifest.model_validate({"icons": icons})
        except (ValueError, ValidationError) as e:
            logger.info(f"Invalid manifest {manifest_url}: {e}")
            return None

        return WebManifestSite(web_manifest_url=str(response.url), web_manifest=web_manifest)


def _attribute_text(value: str | list[str] | None) -> str:
    # BeautifulSoup returns multi-valued attributes such as `rel` as lists.
    if value is None:
        return ""
    if isinstance(value, list):
        return " ".join(value)
    return value
