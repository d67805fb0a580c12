"""Icon source selection.

A page may declare icons in its web app manifest and in `<link>` tags. Sources are
tried in that order and the best sized icon of the first one offering any is used.
When neither declares anything, the site's `/favicon.ico` is used.
"""

import logging
from typing import Any, Mapping
from urllib.parse import urljoin, urlparse

from webicons.icons.models import (
    IconDescriptor,
    PlaceIcons,
    SizeTable,
    WebManifestSite,
    to_place_icons,
    to_web_manifest_site,
)
from webicons.icons.sizes import build_size_table, select_preferred_size

logger = logging.getLogger(__name__)

# Icon kinds still accepted but only as a fallback.
DEPRECATED_ICON_RELS: frozenset[str] = frozenset(
    {"apple-touch-icon", "apple-touch-icon-precomposed"}
)

ICONS_DOCUMENTATION_URL: str = (
    "https://developer.mozilla.org/en-US/"
    "Apps/Build/Icon_implementation_for_apps#General_icons_for_web_apps"
)

FAVICON_PATH: str = "/favicon.ico"


def scale_target_size(target_size: float | None, device_pixel_ratio: float) -> float | None:
    """Scale the requested size by the display density. A missing or zero size stays unset."""
    if not target_size:
        return None
    return target_size * device_pixel_ratio


def get_sizes(place_icons: PlaceIcons | Mapping[str, Any] | None) -> SizeTable:
    """Return the sizes offered by the page icons and which URI offers each of them.

    The expected format is the following one:

        {
            "[uri 1]": {"sizes": ["16x16 32x32 48x48", "60x60"]},
            "[uri 2]": {"sizes": ["16x16"], "rel": "apple-touch-icon"},
        }

    A size defined by several URIs is attributed to the last one.
    """
    icons = to_place_icons(place_icons)
    return build_size_table(
        IconDescriptor(uri=uri, sizes=icon.sizes, rel=icon.rel) for uri, icon in icons.items()
    )


def get_best_icon_from_web_manifest(
    site_manifest: WebManifestSite | Mapping[str, Any] | None,
    target_size: float | None = None,
    device_pixel_ratio: float = 1.0,
) -> str | None:
    """Return the absolute URL of the best manifest icon for `target_size`, if any."""
    site = to_web_manifest_site(site_manifest)
    if site.web_manifest is None or not site.web_manifest.icons:
        return None

    icons = site.web_manifest.icons
    options = build_size_table(IconDescriptor(uri=icon.src, sizes=icon.sizes) for icon in icons)

    if options:
        preferred_size = select_preferred_size(sorted(options), target_size, device_pixel_ratio)
        icon_uri = options[preferred_size].uri
    else:
        # No size info in the whole list, use the first icon.
        icon_uri = icons[0].src

    # Icon paths must be resolved relatively to the manifest URL.
    return urljoin(site.web_manifest_url or "", icon_uri)


def get_best_icon_from_meta_tags(
    place_icons: PlaceIcons | Mapping[str, Any] | None,
    target_size: float | None = None,
    device_pixel_ratio: float = 1.0,
) -> str | None:
    """Return the URI of the best page icon for `target_size`, as declared by the page."""
    icons = to_place_icons(place_icons)
    if not icons:
        return None

    options = get_sizes(icons)
    if not options:
        # No size info in the whole list, use the first icon.
        return next(iter(icons))

    preferred_size = select_preferred_size(sorted(options), target_size, device_pixel_ratio)
    icon = options[preferred_size]

    if icon.rel in DEPRECATED_ICON_RELS:
        logger.warning(
            f"The {icon.rel} icons are being used as a fallback only. They will be "
            f"deprecated in the future. See {ICONS_DOCUMENTATION_URL}"
        )

    return icon.uri


def get_favicon_url(uri: str, target_size: float | None = None) -> str:
    """Return the `/favicon.ico` URL of the origin of `uri`.

    With a target size, a `#-moz-resolution=W,H` fragment asks for a raster of that size.
    """
    parsed = urlparse(uri)
    origin = f"{parsed.scheme}://{parsed.netloc}" if parsed.netloc else ""
    favicon_url = f"{origin}{FAVICON_PATH}"

    if target_size:
        dimension = _format_dimension(target_size)
        favicon_url = f"{favicon_url}#-moz-resolution={dimension},{dimension}"

    return favicon_url


def resolve_icon_url(
    target_uri: str,
    target_size: float | None = None,
    place_icons: PlaceIcons | Mapping[str, Any] | None = None,
    site_manifest: WebManifestSite | Mapping[str, Any] | None = None,
    device_pixel_ratio: float = 1.0,
) -> str:
    """Return the URL of the best icon for a page given its icons and web app manifest."""
    scaled_size = scale_target_size(target_size, device_pixel_ratio)
    site = to_web_manifest_site(site_manifest)
    icons = to_place_icons(place_icons)
    icon_url: str | None = None

    if site.web_manifest_url and site.web_manifest is not None:
        icon_url = get_best_icon_from_web_manifest(site, scaled_size, device_pixel_ratio)
        if icon_url:
            logger.debug(f"Icon for {target_uri} from web manifest")

    if not icon_url and icons:
        icon_url = get_best_icon_from_meta_tags(icons, scaled_size, device_pixel_ratio)
        if icon_url:
            logger.debug(f"Icon for {target_uri} from meta tags")

    if not icon_url:
        logger.debug(f"Icon for {target_uri} from favicon.ico")
        icon_url = get_favicon_url(target_uri, scaled_size)

    return icon_url


def _format_dimension(size: float) -> str:
    return str(int(size)) if float(size).is_integer() else str(size)
