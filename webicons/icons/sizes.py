"""Icon size parsing and ranking.

Size tokens come from `sizes` attributes of `<link>` tags and web app manifests,
e.g. "16x16 32x32". Only the width is kept, icons are assumed to be square.
"""

import logging
import re
from typing import Iterable, Sequence

from webicons.icons.models import IconDescriptor, SizeCandidate, SizeTable

logger = logging.getLogger(__name__)

# Default targets match the home screen icon size for three icons per row.
DEFAULT_TARGET_SIZE: int = 84
HIGH_DENSITY_TARGET_SIZE: int = 142

_LEADING_INTEGER = re.compile(r"\s*([+-]?\d+)")


def parse_edge_length(token: str) -> int | None:
    """Return the width of a "WxH" size token, or `None` if it can't be parsed."""
    width, separator, _ = token.partition("x")
    if not separator or not width:
        return None

    match = _LEADING_INTEGER.match(width)
    if match is None:
        return None

    value = int(match.group(1))
    return value if value > 0 else None


def split_size_tokens(sizes: str | Iterable[str]) -> list[str]:
    """Flatten size declarations into single tokens.

    Entries may hold several sizes at once, e.g. ["16x16 32x32", "48x48"].
    """
    if isinstance(sizes, str):
        return sizes.split()
    return " ".join(sizes).split()


def default_target_size(device_pixel_ratio: float = 1.0) -> int:
    """Return the target size used when the caller doesn't ask for one."""
    return HIGH_DENSITY_TARGET_SIZE if device_pixel_ratio > 1 else DEFAULT_TARGET_SIZE


def select_preferred_size(
    sorted_sizes: Sequence[int],
    target: float | None = None,
    device_pixel_ratio: float = 1.0,
) -> int:
    """Pick the smallest size reaching `target`, or the largest one if none does.

    `sorted_sizes` must be ascending and non-empty. A missing or zero target falls back
    to the density dependent default.

    Raises:
        ValueError: If `sorted_sizes` is empty.
    """
    if not sorted_sizes:
        raise ValueError("Cannot select a preferred size from an empty list")

    targeted = int(target) if target else 0
    if targeted == 0:
        targeted = default_target_size(device_pixel_ratio)

    for size in sorted_sizes:
        if size >= targeted:
            return size

    return sorted_sizes[-1]


def build_size_table(descriptors: Iterable[IconDescriptor]) -> SizeTable:
    """Map every parseable size of the descriptors to the icon declaring it.

    A size declared twice keeps the last descriptor declaring it.
    """
    table: SizeTable = {}
    for descriptor in descriptors:
        for token in split_size_tokens(descriptor.sizes):
            edge_length = parse_edge_length(token)
            if edge_length is None:
                logger.debug(f"Skipping size `{token}` of icon {descriptor.uri}")
                continue

            table[edge_length] = SizeCandidate(uri=descriptor.uri, rel=descriptor.rel)

    return table
