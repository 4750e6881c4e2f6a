"""Input routing between active conversations and agents."""

from docflow.routing.autosession import AutoSessionStateManager
from docflow.routing.models import (
    AutoSessionContext,
    AutoSessionRecord,
    AutoSessionStats,
    RoutingResult,
    SessionMetadata,
    SessionStateSnapshot,
)
from docflow.routing.router import SessionRouter

__all__ = [
    "SessionRouter",
    "AutoSessionStateManager",
    "RoutingResult",
    "SessionMetadata",
    "SessionStateSnapshot",
    "AutoSessionContext",
    "AutoSessionRecord",
    "AutoSessionStats",
]
