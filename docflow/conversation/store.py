"""ConversationStore abstract interface."""

from abc import ABC, abstractmethod

from docflow.conversation.models import ConversationSession, ConversationTurn


class ConversationStore(ABC):
    """Abstract interface for conversation storage.

    Holds sessions, their append-only turn logs, and the pointer from each
    agent to its single active session.
    """

    @abstractmethod
    async def get_session(self, session_id: str) -> ConversationSession | None:
        """Get a session by ID."""
        pass

    @abstractmethod
    async def save_session(self, session: ConversationSession) -> str:
        """Save a session, returning its ID."""
        pass

    @abstractmethod
    async def list_sessions(self, *, active_only: bool = False) -> list[ConversationSession]:
        """List stored sessions, optionally only active ones."""
        pass

    @abstractmethod
    async def append_turn(self, turn: ConversationTurn) -> None:
        """Append a turn to its session's history."""
        pass

    @abstractmethod
    async def get_turns(self, session_id: str) -> list[ConversationTurn]:
        """Get a session's turns in recorded order."""
        pass

    @abstractmethod
    async def get_active_session_id(self, agent_name: str) -> str | None:
        """Get the active session ID for an agent."""
        pass

    @abstractmethod
    async def set_active_session_id(self, agent_name: str, session_id: str) -> None:
        """Point an agent at its active session."""
        pass

    @abstractmethod
    async def clear_active_session_id(self, agent_name: str) -> bool:
        """Release an agent's active session pointer."""
        pass
