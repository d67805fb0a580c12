"""In-process store adapter backed by a dictionary."""


class MemoryAdapter:
    """A store adapter that keeps entries in memory for the lifetime of the process.

    Entries are never evicted.
    """

    name: str
    entries: dict[str, bytes]

    def __init__(self, name: str) -> None:
        self.name = name
        self.entries = {}

    async def get(self, key: str) -> bytes | None:
        """Get the value associated with the key, `None` if it isn't stored."""
        return self.entries.get(key)

    async def add(self, value: bytes, key: str) -> None:
        """Store the value unless the key is already present."""
        self.entries.setdefault(key, value)

    async def close(self) -> None:
        """Drop every entry."""
        self.entries.clear()

    def __len__(self) -> int:
        return len(self.entries)
