"""In-memory implementation of ConversationStore."""

from docflow.conversation.models import ConversationSession, ConversationTurn
from docflow.conversation.store import ConversationStore


class InMemoryConversationStore(ConversationStore):
    """In-memory implementation of ConversationStore for testing and development.

    Sessions go in and come out as deep copies; only save_session changes
    what is stored.

    Sessions are kept after they end. When ``max_turns_per_session`` is
    set, the oldest turns after the opening one are dropped so the
    opening ``system`` turn always survives.
    """

    def __init__(self, max_turns_per_session: int | None = None) -> None:
        """Initialize empty storage."""
        self._sessions: dict[str, ConversationSession] = {}
        self._turns: dict[str, list[ConversationTurn]] = {}
        self._active_by_agent: dict[str, str] = {}
        self._max_turns = max_turns_per_session

    async def get_session(self, session_id: str) -> ConversationSession | None:
        """Get a copy of a session by ID."""
        session = self._sessions.get(session_id)
        return session.model_copy(deep=True) if session is not None else None

    async def save_session(self, session: ConversationSession) -> str:
        """Save a copy of a session, returning its ID."""
        self._sessions[session.session_id] = session.model_copy(deep=True)
        return session.session_id

    async def list_sessions(self, *, active_only: bool = False) -> list[ConversationSession]:
        """List stored sessions, most recently active first."""
        results = [
            session.model_copy(deep=True)
            for session in self._sessions.values()
            if not active_only or session.state.is_active
        ]
        results.sort(key=lambda x: x.last_activity, reverse=True)
        return results

    async def append_turn(self, turn: ConversationTurn) -> None:
        """Append a turn, applying the retention limit."""
        turns = self._turns.setdefault(turn.session_id, [])
        turns.append(turn)
        if self._max_turns is not None and len(turns) > self._max_turns:
            # Keep the opening turn plus the newest max_turns - 1
            del turns[1 : len(turns) - self._max_turns + 1]

    async def get_turns(self, session_id: str) -> list[ConversationTurn]:
        """Get a copy of a session's turns."""
        return list(self._turns.get(session_id, []))

    async def get_active_session_id(self, agent_name: str) -> str | None:
        """Get the active session ID for an agent."""
        return self._active_by_agent.get(agent_name)

    async def set_active_session_id(self, agent_name: str, session_id: str) -> None:
        """Point an agent at its active session."""
        self._active_by_agent[agent_name] = session_id

    async def clear_active_session_id(self, agent_name: str) -> bool:
        """Release an agent's active session pointer."""
        if agent_name in self._active_by_agent:
            del self._active_by_agent[agent_name]
            return True
        return False
