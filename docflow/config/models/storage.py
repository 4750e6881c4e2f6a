"""Host state storage configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

StateBackendType = Literal["inmemory", "redis"]


class StorageConfig(BaseModel):
    """Configuration for the key-value store that persists small state records."""

    state_backend: StateBackendType = Field(
        default="inmemory",
        description="Backend type",
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL (redis backend only)",
    )
    key_prefix: str = Field(
        default="docflow",
        description="Prefix applied to every state key",
    )
    ttl_seconds: int | None = Field(
        default=None,
        gt=0,
        description="Optional expiry for persisted records",
    )
