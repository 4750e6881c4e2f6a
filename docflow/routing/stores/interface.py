"""StateStore abstract interface."""

from abc import ABC, abstractmethod

from docflow.errors import DocflowError


class StateStoreError(DocflowError):
    """Raised when the host state store cannot be read or written."""

    pass


class StateStore(ABC):
    """Key-value store for small JSON records owned by the host.

    Used to persist router and auto-session state across restarts.
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Get the JSON value for a key."""
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store a JSON value under a key."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete a key."""
        pass
