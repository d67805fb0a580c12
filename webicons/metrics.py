"""StatsD client recording the icon fetch and icon cache metrics."""

import logging
from functools import cache
from typing import Mapping

import aiodogstatsd

from webicons.configs import settings

logger = logging.getLogger(__name__)

# Type definition for tags in aiodogstatsd metrics
MetricTags = Mapping[str, float | int | str]


@cache
def get_metrics_client() -> aiodogstatsd.Client:
    """Instantiate and memoize the StatsD client.

    Every metric is tagged with the configured icon cache backend.
    """
    constant_tags: MetricTags = {
        "application": settings.metrics.namespace,
        "cache_backend": settings.icons.cache.backend,
    }

    return aiodogstatsd.Client(
        host=settings.metrics.host,
        port=settings.metrics.port,
        namespace=settings.metrics.namespace,
        constant_tags=constant_tags,
    )


async def configure_metrics() -> None:
    """Connect the metrics client before icons are fetched.

    With `metrics.dev_logger`, datagrams are logged instead of sent.
    """
    client = get_metrics_client()
    if settings.metrics.dev_logger:
        client._protocol = _LocalDatagramLogger()
    await client.connect()


class _LocalDatagramLogger(aiodogstatsd.client.DatagramProtocol):
    """Datagram protocol logging the metrics instead of writing them to a socket."""

    def send(self, data: bytes) -> None:
        logger.debug("sending metrics", extra={"data": data.decode("utf8")})

    def error_received(self, exc) -> None:
        logger.exception(exc)
