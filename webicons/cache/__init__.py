"""Store adapters backing the icon cache."""

import logging

from webicons.cache.memory import MemoryAdapter
from webicons.cache.none import NoCacheAdapter
from webicons.cache.protocol import IconStore, StoreOpener
from webicons.cache.redis import RedisAdapter, create_redis_client
from webicons.configs import settings

logger = logging.getLogger(__name__)

__all__ = [
    "IconStore",
    "MemoryAdapter",
    "NoCacheAdapter",
    "RedisAdapter",
    "StoreOpener",
    "open_stores",
]


async def open_stores(name: str) -> list[IconStore]:
    """Return the stores available under `name` for the configured backend.

    Each call builds new adapters; callers are expected to keep the handle they pick.
    """
    backend = settings.icons.cache.backend
    logger.debug(f"Opening `{name}` store with the `{backend}` backend")
    match backend:
        case "memory":
            return [MemoryAdapter(name)]
        case "redis":
            client = create_redis_client(
                settings.redis.server,
                max_connections=settings.redis.max_connections,
                socket_connect_timeout=settings.redis.socket_connect_timeout_sec,
                socket_timeout=settings.redis.socket_timeout_sec,
            )
            return [RedisAdapter(name, client)]
        case "none":
            return [NoCacheAdapter(name)]
        case _:
            raise ValueError(f"Unknown icon store backend: {backend}")
