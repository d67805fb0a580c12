"""Icon resolution: source selection, fetching and caching."""

from webicons.icons.cache import IconCache
from webicons.icons.fetcher import IconFetcher
from webicons.icons.helper import IconsHelper, create_icons_helper
from webicons.icons.models import (
    CachedIcon,
    IconDescriptor,
    ManifestIcon,
    PlaceIcon,
    SizeCandidate,
    WebManifest,
    WebManifestSite,
)

__all__ = [
    "CachedIcon",
    "IconCache",
    "IconDescriptor",
    "IconFetcher",
    "IconsHelper",
    "ManifestIcon",
    "PlaceIcon",
    "SizeCandidate",
    "WebManifest",
    "WebManifestSite",
    "create_icons_helper",
]
