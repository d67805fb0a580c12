# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

"""Module for test configurations for the unit test directory."""

import io
from typing import Callable
from unittest.mock import MagicMock

import pytest
from PIL import Image as PILImage

PngBytesFixture = Callable[[int, int], bytes]


@pytest.fixture(scope="session", name="png_bytes")
def fixture_png_bytes() -> PngBytesFixture:
    """Return a function that will create PNG bytes of a given width and height."""

    def png_bytes(width: int, height: int) -> bytes:
        """Create a red PNG image of the given dimensions."""
        with io.BytesIO() as output:
            img = PILImage.new("RGB", (width, height), (255, 0, 0))
            img.save(output, format="PNG")
            return output.getvalue()

    return png_bytes


@pytest.fixture(name="metrics_client")
def fixture_metrics_client() -> MagicMock:
    """Return a mock StatsD client recording the metrics calls."""
    return MagicMock()
