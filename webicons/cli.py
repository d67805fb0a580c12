"""Entrypoint for the command line interface."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer

from webicons.config_logging import configure_logging
from webicons.configs import settings
from webicons.exceptions import IconError
from webicons.icons.fetcher import create_icon_http_client
from webicons.icons.helper import create_icons_helper
from webicons.icons.models import CachedIcon, PlaceIcons, WebManifestSite
from webicons.metrics import configure_metrics, get_metrics_client
from webicons.scrapers import PageIconScraper

logger = logging.getLogger(__name__)

# CLI Options
size_option = typer.Option(
    None,
    "--size",
    help="Target icon size in CSS pixels, scaled by the device pixel ratio",
)

dpr_option = typer.Option(
    settings.icons.device_pixel_ratio,
    "--dpr",
    help="Device pixel ratio of the display the icon is meant for",
)

scrape_option = typer.Option(
    True,
    "--scrape/--no-scrape",
    help="Download the page to collect its declared icons and web app manifest",
)

output_option = typer.Option(
    None,
    "--output",
    help="Write the icon bytes to this file",
)

metrics_option = typer.Option(
    False,
    "--metrics",
    help="Send StatsD metrics while fetching",
)

cli = typer.Typer(
    name="webicons",
    help="Commands for resolving the best icon of a web page",
    no_args_is_help=True,
    add_completion=False,
)


@cli.callback()
def setup():
    """CLI Entrypoint"""
    configure_logging()


@cli.command()
def resolve(
    url: str,
    size: Optional[int] = size_option,
    dpr: float = dpr_option,
    scrape: bool = scrape_option,
):
    """Print the URL of the best icon for the page at URL."""
    icon_url = asyncio.run(_resolve(url, size, dpr, scrape))
    typer.echo(icon_url)


@cli.command()
def fetch(
    url: str,
    size: Optional[int] = size_option,
    dpr: float = dpr_option,
    scrape: bool = scrape_option,
    output: Optional[Path] = output_option,
    metrics: bool = metrics_option,
):
    """Fetch the best icon for the page at URL and print its URL and size."""
    try:
        icon_url, icon = asyncio.run(_fetch(url, size, dpr, scrape, metrics))
    except IconError as e:
        typer.echo(f"Failed to fetch icon: {e}", err=True)
        raise typer.Exit(code=1)

    if output is not None:
        output.write_bytes(icon.blob)
        logger.info(f"Icon written to {output}")

    typer.echo(f"{icon_url} {icon.size}")


async def _scrape(
    scraper: PageIconScraper, url: str, scrape: bool
) -> tuple[PlaceIcons, WebManifestSite | None]:
    if not scrape:
        return {}, None
    return await scraper.scrape(url)


async def _resolve(url: str, size: Optional[int], dpr: float, scrape: bool) -> str:
    async with create_icon_http_client() as http_client:
        place_icons, site_manifest = await _scrape(PageIconScraper(http_client), url, scrape)
        helper = create_icons_helper(http_client=http_client, device_pixel_ratio=dpr)
        return await helper.get_icon(url, size, place_icons, site_manifest)


async def _fetch(
    url: str, size: Optional[int], dpr: float, scrape: bool, metrics: bool
) -> tuple[str, CachedIcon]:
    if metrics:
        await configure_metrics()

    http_client = create_icon_http_client()
    helper = create_icons_helper(http_client=http_client, device_pixel_ratio=dpr)
    try:
        place_icons, site_manifest = await _scrape(PageIconScraper(http_client), url, scrape)
        icon_url = await helper.get_icon(url, size, place_icons, site_manifest)
        icon = await helper.icon_cache.get_cached_or_fetch(icon_url)
        return icon_url, icon
    finally:
        await helper.close()
        if metrics:
            await get_metrics_client().close()


if __name__ == "__main__":
    cli()
