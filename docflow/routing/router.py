"""Session router: sends free-form user input to the right place.

Input goes to the active conversation when there is one. Otherwise, while
an auto-session is active, it goes to the auto-session agent's
conversation, which is resumed when the engine still has it active and
started afresh when not. With neither, the directory's current agent
answers. A stale active session (gone from the engine or no longer
accepting input) is cleared silently before falling back. A conversation
that fails mid-turn is cleared and reported as an error result; the
router never raises for routing failures.
"""

from collections.abc import Callable
from datetime import datetime, timedelta

from docflow.agents.directory import AgentDirectory, AgentNotFoundError
from docflow.config.models.routing import RoutingConfig
from docflow.conversation.engine import ConversationEngine
from docflow.conversation.models import ConversationContext, ConversationSession, utc_now
from docflow.observability.logging import get_logger
from docflow.observability.metrics import ROUTING_DECISIONS
from docflow.providers.llm import CancellationToken
from docflow.routing.autosession import AutoSessionStateManager
from docflow.routing.models import (
    AutoSessionContext,
    RoutingResult,
    SessionMetadata,
    SessionStateSnapshot,
)
from docflow.routing.stores.interface import StateStore

logger = get_logger(__name__)

NO_AGENT_ERROR = "No active agent available"


class SessionRouter:
    """Routes user input across open conversations and agents.

    Only one session is active for routing at a time. Metadata for other
    agents' sessions stays queryable by agent name after the active
    session changes.
    """

    def __init__(
        self,
        engine: ConversationEngine,
        directory: AgentDirectory,
        *,
        auto_session: AutoSessionStateManager | None = None,
        state_store: StateStore | None = None,
        config: RoutingConfig | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the router.

        Args:
            engine: Conversation engine owning the sessions
            directory: Agent directory for the fallback path
            auto_session: Implicit free-text target, if enabled
            state_store: Host store for persisting router state
            config: Routing configuration
            clock: Time source
        """
        self._engine = engine
        self._directory = directory
        self._auto_session = auto_session
        self._store = state_store
        self._config = config or RoutingConfig()
        self._clock = clock
        self._state = SessionStateSnapshot()

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    async def route_user_input(
        self, text: str, cancellation: CancellationToken | None = None
    ) -> RoutingResult:
        """Route one piece of user input."""
        logger.info(
            "routing_user_input",
            input_length=len(text),
            active_session_id=self._state.active_session_id,
        )
        try:
            session_id = self._state.active_session_id
            if session_id is not None:
                if await self._engine.is_session_active(session_id):
                    return self._record(await self._route_to_conversation(session_id, text))
                logger.warning("stale_session_cleared", session_id=session_id)
                await self.clear_active_session()

            if self._auto_session is not None:
                auto_context = await self._auto_session.get_context()
                if auto_context is not None:
                    return self._record(
                        await self._route_with_auto_session(self._auto_session, auto_context, text)
                    )

            return self._record(await self._route_to_agent(text, cancellation))
        except Exception as e:
            logger.exception("routing_failed")
            return self._record(RoutingResult(routed_to="error", error=str(e)))

    async def _route_with_auto_session(
        self,
        auto_session: AutoSessionStateManager,
        auto_context: AutoSessionContext,
        text: str,
    ) -> RoutingResult:
        """Continue, or open, the auto-session agent's conversation."""
        await auto_session.update_activity()
        session_id = auto_context.conversation_session_id
        try:
            if session_id is not None and await self._engine.is_session_active(session_id):
                await self.set_active_session(
                    session_id,
                    agent_name=auto_context.agent_name,
                    document_path=auto_context.document_path,
                    template_id=auto_context.template_id,
                )
            else:
                session = await self._open_auto_session(auto_context)
                session_id = session.session_id
                await auto_session.set_conversation_session_id(session_id)
        except Exception as e:
            logger.warning(
                "auto_session_route_failed",
                agent_name=auto_context.agent_name,
                error=str(e),
            )
            await auto_session.disable()
            return RoutingResult(
                routed_to="error",
                agent_name=auto_context.agent_name,
                error=f"Auto-session error: {e}",
            )

        logger.info(
            "routing_with_auto_session",
            agent_name=auto_context.agent_name,
            session_id=session_id,
        )
        return await self._route_to_conversation(session_id, text)

    async def _open_auto_session(self, auto_context: AutoSessionContext) -> ConversationSession:
        agent = self._directory.get_agent(auto_context.agent_name)
        if agent is None:
            raise AgentNotFoundError(auto_context.agent_name)
        context = ConversationContext(
            document_type=auto_context.template_id or agent.workflow_phase,
            document_path=auto_context.document_path,
            workflow_phase=agent.workflow_phase,
        )
        return await self._open_session(agent.name, context)

    async def _route_to_conversation(self, session_id: str, text: str) -> RoutingResult:
        try:
            response = await self._engine.continue_conversation(session_id, text)
        except Exception as e:
            logger.warning("conversation_route_failed", session_id=session_id, error=str(e))
            await self.clear_active_session()
            return RoutingResult(
                routed_to="error",
                session_id=session_id,
                error=f"Conversation error: {e}",
            )

        metadata = self._state.session_metadata.get(session_id)
        if metadata is not None:
            metadata.response_count += 1
            metadata.question_count += len(response.followup_questions)
            metadata.last_activity = self._clock()
            await self._save_state()

        return RoutingResult(
            routed_to="conversation",
            session_id=session_id,
            agent_name=metadata.agent_name if metadata else None,
            response=response,
            should_continue=len(response.followup_questions) > 0,
        )

    async def _route_to_agent(
        self, text: str, cancellation: CancellationToken | None
    ) -> RoutingResult:
        agent = self._directory.current_agent()
        if agent is None:
            return RoutingResult(routed_to="error", error=NO_AGENT_ERROR)

        logger.info("routing_to_agent", agent_name=agent.name)
        try:
            reply = await self._directory.handle_request(agent.name, text, cancellation)
        except Exception as e:
            logger.warning("agent_route_failed", agent_name=agent.name, error=str(e))
            return RoutingResult(
                routed_to="error",
                agent_name=agent.name,
                error=f"Agent error: {e}",
            )

        return RoutingResult(
            routed_to="agent",
            agent_name=agent.name,
            agent_reply=reply,
            should_continue=False,
        )

    def _record(self, result: RoutingResult) -> RoutingResult:
        ROUTING_DECISIONS.labels(routed_to=result.routed_to).inc()
        return result

    # ------------------------------------------------------------------
    # Session bookkeeping
    # ------------------------------------------------------------------

    async def start_session(
        self, agent_name: str, context: ConversationContext
    ) -> ConversationSession:
        """Start a conversation and make it the active session.

        Raises:
            ConversationError: If the engine cannot start the conversation
        """
        session = await self._open_session(agent_name, context)
        if self._auto_session is not None:
            await self._auto_session.enable(
                agent_name,
                document_path=context.document_path,
                template_id=context.document_type,
                conversation_session_id=session.session_id,
            )
        return session

    async def _open_session(
        self, agent_name: str, context: ConversationContext
    ) -> ConversationSession:
        session = await self._engine.start_conversation(agent_name, context)
        now = self._clock()
        self._state.session_metadata[session.session_id] = SessionMetadata(
            agent_name=agent_name,
            document_path=context.document_path,
            template_id=context.document_type,
            started_at=now,
            last_activity=now,
            question_count=len(session.current_question_set),
        )
        await self.set_active_session(session.session_id)
        return session

    def has_active_session(self) -> bool:
        return self._state.active_session_id is not None

    async def get_active_session(self) -> ConversationSession | None:
        session_id = self._state.active_session_id
        if session_id is None:
            return None
        return await self._engine.get_session(session_id)

    async def set_active_session(
        self,
        session_id: str,
        *,
        agent_name: str | None = None,
        document_path: str | None = None,
        template_id: str | None = None,
    ) -> None:
        """Make a session the routing target, merging any metadata given."""
        logger.info("active_session_set", session_id=session_id)
        self._state.active_session_id = session_id

        metadata = self._state.session_metadata.get(session_id)
        if metadata is None and agent_name is not None:
            now = self._clock()
            metadata = SessionMetadata(agent_name=agent_name, started_at=now, last_activity=now)
            self._state.session_metadata[session_id] = metadata

        if metadata is not None:
            if agent_name is not None:
                metadata.agent_name = agent_name
            if document_path is not None:
                metadata.document_path = document_path
            if template_id is not None:
                metadata.template_id = template_id
            metadata.last_activity = self._clock()
            self._state.sessions_by_agent[metadata.agent_name] = session_id

        await self._save_state()

    async def clear_active_session(self) -> None:
        """Forget the active session and its metadata."""
        session_id = self._state.active_session_id
        if session_id is None:
            return
        logger.info("active_session_cleared", session_id=session_id)
        metadata = self._state.session_metadata.pop(session_id, None)
        if (
            metadata is not None
            and self._state.sessions_by_agent.get(metadata.agent_name) == session_id
        ):
            del self._state.sessions_by_agent[metadata.agent_name]
        self._state.active_session_id = None
        await self._save_state()

    def get_session_metadata(self, session_id: str) -> SessionMetadata | None:
        return self._state.session_metadata.get(session_id)

    def get_session_by_agent(self, agent_name: str) -> str | None:
        return self._state.sessions_by_agent.get(agent_name)

    async def cleanup_inactive_sessions(
        self, max_inactive: timedelta | None = None
    ) -> list[str]:
        """Drop sessions idle longer than ``max_inactive``. Returns their IDs."""
        limit = max_inactive or timedelta(
            minutes=self._config.inactive_session_timeout_minutes
        )
        now = self._clock()
        removed = [
            session_id
            for session_id, metadata in self._state.session_metadata.items()
            if now - metadata.last_activity > limit
        ]
        for session_id in removed:
            metadata = self._state.session_metadata.pop(session_id)
            if self._state.sessions_by_agent.get(metadata.agent_name) == session_id:
                del self._state.sessions_by_agent[metadata.agent_name]
            if self._state.active_session_id == session_id:
                self._state.active_session_id = None
            logger.info(
                "inactive_session_removed",
                session_id=session_id,
                idle_seconds=int((now - metadata.last_activity).total_seconds()),
            )
        if removed:
            await self._save_state()
        return removed

    def get_session_state(self) -> SessionStateSnapshot:
        """A copy of the router state; mutating it does not affect the router."""
        return self._state.model_copy(deep=True)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def load_state(self) -> None:
        """Restore persisted router state. Failures leave the state empty."""
        if self._store is None or not self._config.persist_state:
            return
        try:
            raw = await self._store.get(self._config.state_key)
        except Exception:
            logger.warning("router_state_load_failed", exc_info=True)
            return
        if raw is None:
            return
        try:
            self._state = SessionStateSnapshot.model_validate_json(raw)
        except ValueError:
            logger.warning("router_state_invalid", exc_info=True)
            return
        logger.info(
            "router_state_loaded",
            active_session_id=self._state.active_session_id,
            session_count=len(self._state.session_metadata),
        )

    async def _save_state(self) -> None:
        if self._store is None or not self._config.persist_state:
            return
        try:
            await self._store.set(self._config.state_key, self._state.model_dump_json())
        except Exception:
            logger.warning("router_state_save_failed", exc_info=True)
