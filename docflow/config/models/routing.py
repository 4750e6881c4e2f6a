"""Session routing and auto-session configuration models."""

from pydantic import BaseModel, Field


class RoutingConfig(BaseModel):
    """Session router configuration."""

    inactive_session_timeout_minutes: int = Field(
        default=30,
        gt=0,
        description="Sessions idle longer than this are dropped by cleanup",
    )
    persist_state: bool = Field(
        default=True,
        description="Persist router state to the host state store",
    )
    state_key: str = Field(
        default="conversation_session_state",
        description="State store key for router state",
    )


class AutoSessionConfig(BaseModel):
    """Auto-session configuration.

    An auto-session makes free-text input implicitly address the last
    selected agent until it times out.
    """

    enabled: bool = Field(default=True, description="Allow auto-sessions")
    timeout_minutes: int = Field(
        default=30,
        gt=0,
        description="Inactivity timeout before the auto-session expires",
    )
    state_key: str = Field(
        default="auto_session_state",
        description="State store key for the auto-session record",
    )
