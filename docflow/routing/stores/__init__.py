"""Host state stores for router and auto-session persistence."""

from docflow.routing.stores.inmemory import InMemoryStateStore
from docflow.routing.stores.interface import StateStore, StateStoreError
from docflow.routing.stores.redis import RedisStateStore

__all__ = [
    "StateStore",
    "StateStoreError",
    "InMemoryStateStore",
    "RedisStateStore",
]
