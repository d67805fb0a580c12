"""Protocol for icon store adapters."""

from typing import Awaitable, Callable, Protocol


class IconStore(Protocol):
    """A protocol describing the persistent key-value store behind the icon cache."""

    name: str

    async def get(self, key: str) -> bytes | None:  # pragma: no cover
        """Get the value associated with the key. Returns `None` if the key isn't in the store.

        Raises:
            - `CacheAdapterError` for store backend errors.
        """
        ...

    async def add(self, value: bytes, key: str) -> None:  # pragma: no cover
        """Add a value under the key. An existing entry for the key is left untouched.

        Raises:
            - `CacheAdapterError` for store backend errors.
        """
        ...

    async def close(self) -> None:  # pragma: no cover
        """Close the adapter and release any underlying resources."""
        ...


# Lists the stores available under a given name, e.g. `await open_stores("icons")`.
StoreOpener = Callable[[str], Awaitable[list[IconStore]]]
