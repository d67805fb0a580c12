"""No-operation adapter that disables icon persistence."""


class NoCacheAdapter:
    """A store adapter that doesn't store or return anything."""

    def __init__(self, name: str) -> None:
        self.name = name

    async def get(self, key: str) -> bytes | None:  # noqa: D102
        return None

    async def add(self, value: bytes, key: str) -> None:  # noqa: D102
        pass

    async def close(self) -> None:  # noqa: D102
        pass
