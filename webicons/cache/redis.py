"""Redis store adapter."""

from redis.asyncio import Redis, RedisError

from webicons.exceptions import CacheAdapterError


def create_redis_client(
    server: str,
    max_connections: int,
    socket_connect_timeout: int,
    socket_timeout: int,
    db: int = 0,
) -> Redis:
    """Create a redis client for the given server.

    Args:
        - `server`: the URL to the Redis endpoint.
        - `max_connections`: the maximum connections allowed in the connection pool.
        - `socket_connect_timeout`: the timeout in seconds to connect to the Redis server.
        - `socket_timeout`: the timeout in seconds to interact with the Redis server.
        - `db`: the ID (`SELECT db`) of the DB to which the client connects.
    Returns:
        - A Redis client.
    """
    client: Redis = Redis.from_url(
        server,
        db=db,
        max_connections=max_connections,
        socket_connect_timeout=socket_connect_timeout,
        socket_timeout=socket_timeout,
    )
    return client


class RedisAdapter:
    """A store adapter that keeps icon entries in Redis.

    Keys are namespaced by the store name, so several stores can share one server.
    """

    name: str
    client: Redis

    def __init__(self, name: str, client: Redis) -> None:
        self.name = name
        self.client = client

    def _key(self, key: str) -> str:
        return f"{self.name}:{key}"

    async def get(self, key: str) -> bytes | None:
        """Get the value associated with the key from Redis. Returns `None` if the key isn't in
        Redis.

        Raises:
            - `CacheAdapterError` if Redis returns an error.
        """
        try:
            return await self.client.get(self._key(key))
        except RedisError as exc:
            raise CacheAdapterError(f"Failed to get `{repr(key)}` with error: `{exc}`") from exc

    async def add(self, value: bytes, key: str) -> None:
        """Store the value under the key if the key doesn't exist yet.

        Raises:
            - `CacheAdapterError` if Redis returns an error.
        """
        try:
            await self.client.set(self._key(key), value, nx=True)
        except RedisError as exc:
            raise CacheAdapterError(f"Failed to add `{repr(key)}` with error: `{exc}`") from exc

    async def close(self) -> None:
        """Close the Redis connection."""
        # "type: ignore" was added to suppress a false alarm.
        await self.client.aclose()  # type: ignore
