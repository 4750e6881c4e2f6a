"""In-memory implementation of StateStore."""

from docflow.routing.stores.interface import StateStore


class InMemoryStateStore(StateStore):
    """In-memory implementation of StateStore for testing and development."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None
