"""Icon cache keeping downloaded icons in a persistent store"""

import asyncio
import logging

import aiodogstatsd
from pydantic import ValidationError

from webicons.cache import open_stores
from webicons.cache.protocol import IconStore, StoreOpener
from webicons.configs import settings
from webicons.exceptions import CacheEntryError, IconStoreError
from webicons.icons.fetcher import IconFetcher
from webicons.icons.models import CachedIcon
from webicons.metrics import get_metrics_client

logger = logging.getLogger(__name__)


class IconCache:
    """Map icon URLs to their downloaded bytes and measured size.

    The store is opened on first use and kept for the lifetime of the cache. On a miss
    the icon is returned as soon as it's fetched and decoded, and written to the store
    by a background task. Concurrent misses for the same URL share a single fetch.
    """

    fetcher: IconFetcher
    store_opener: StoreOpener
    store_name: str
    store: IconStore | None
    metrics_client: aiodogstatsd.Client

    def __init__(
        self,
        fetcher: IconFetcher,
        store_opener: StoreOpener = open_stores,
        store_name: str | None = None,
        metrics_client: aiodogstatsd.Client | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.store_opener = store_opener
        self.store_name = store_name or settings.icons.cache.store_name
        self.store = None
        self.metrics_client = metrics_client or get_metrics_client()
        self._store_lock = asyncio.Lock()
        self._in_flight: dict[str, asyncio.Task[CachedIcon]] = {}
        self._pending_writes: set[asyncio.Task[None]] = set()

    async def get_store(self) -> IconStore:
        """Return the store handle, opening it on the first call.

        Raises:
            - `IconStoreError` if no store can be opened.
        """
        if self.store is not None:
            return self.store

        async with self._store_lock:
            if self.store is None:
                try:
                    stores = await self.store_opener(self.store_name)
                except Exception as exc:
                    raise IconStoreError(
                        f"Error opening the `{self.store_name}` store: {exc}"
                    ) from exc

                if not stores:
                    raise IconStoreError(f"No `{self.store_name}` store is available")

                self.store = stores[0]

        return self.store

    async def get_cached_or_fetch(self, icon_url: str) -> CachedIcon:
        """Return the icon stored for `icon_url`, fetching it on a miss.

        Raises:
            - `IconStoreError` if the store can't be opened or read. No fetch is attempted then.
            - `IconFetchError`, `IconTransportError` or `IconDecodeError` if fetching fails.
        """
        store = await self.get_store()

        in_flight = self._in_flight.get(icon_url)
        if in_flight is not None:
            return await asyncio.shield(in_flight)

        icon = await self._lookup(store, icon_url)
        if icon is not None:
            self.metrics_client.increment("icons.cache.hit")
            return icon

        self.metrics_client.increment("icons.cache.miss")

        # Another caller may have started the fetch while the lookup was pending.
        task = self._in_flight.get(icon_url)
        if task is None:
            task = asyncio.create_task(
                self._fetch_and_persist(store, icon_url), name=f"fetch-icon:{icon_url}"
            )
            self._in_flight[icon_url] = task
            task.add_done_callback(lambda done: self._forget_in_flight(icon_url, done))

        return await asyncio.shield(task)

    async def drain(self) -> None:
        """Wait for the pending write-backs to finish."""
        while self._pending_writes:
            await asyncio.gather(*self._pending_writes)

    async def close(self) -> None:
        """Wait for the pending write-backs and close the store."""
        await self.drain()
        if self.store is not None:
            await self.store.close()
            self.store = None

    async def _lookup(self, store: IconStore, icon_url: str) -> CachedIcon | None:
        try:
            entry = await store.get(icon_url)
        except Exception as exc:
            raise IconStoreError(
                f"Failed to get icon {icon_url} from the `{self.store_name}` store: {exc}"
            ) from exc

        if entry is None:
            return None

        try:
            return CachedIcon.model_validate_json(entry)
        except ValidationError as exc:
            raise IconStoreError(
                f"Invalid entry for icon {icon_url} in the `{self.store_name}` store"
            ) from CacheEntryError(str(exc))

    async def _fetch_and_persist(self, store: IconStore, icon_url: str) -> CachedIcon:
        icon = await self.fetcher.fetch_and_measure(icon_url)

        # The caller gets the icon right away, persisting happens in the background.
        write = asyncio.create_task(
            self._write_back(store, icon_url, icon), name=f"store-icon:{icon_url}"
        )
        self._pending_writes.add(write)
        write.add_done_callback(self._pending_writes.discard)

        return icon

    async def _write_back(self, store: IconStore, icon_url: str, icon: CachedIcon) -> None:
        try:
            await store.add(icon.model_dump_json().encode(), icon_url)
        except Exception as exc:
            logger.warning(
                f"Failed to persist icon {icon_url} to the `{self.store_name}` store: {exc}"
            )
            self.metrics_client.increment("icons.cache.write_failure")

    def _forget_in_flight(self, icon_url: str, task: asyncio.Task[CachedIcon]) -> None:
        if self._in_flight.get(icon_url) is task:
            del self._in_flight[icon_url]
