"""Conversation engine: session lifecycle and the per-turn decision ladder.

The engine owns every mutation of conversation state. Each public
operation either returns a result or raises a single ConversationError;
errors already typed as ConversationError pass through unchanged, anything
else is wrapped once with the operation's failure code.

Flow per turn:
1. Record the response
2. Resolve the current question (recovering from a bad index)
3. Analyze the response and merge extracted entities
4. Recompute the completion score
5. Decide: clarification > follow-ups > next question > phase completion
6. Record the agent message and return the response
"""

import asyncio
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from weakref import WeakValueDictionary

from docflow.config.models.conversation import ConversationConfig
from docflow.conversation.documents import DocumentUpdateBuilder
from docflow.conversation.errors import ConversationError, ConversationErrorCode
from docflow.conversation.interfaces import (
    ProgressTracker,
    QuestionGenerator,
    ResponseAnalyzer,
)
from docflow.conversation.models import (
    ConversationContext,
    ConversationResponse,
    ConversationSession,
    ConversationState,
    ConversationSummary,
    ConversationTurn,
    DocumentUpdate,
    ProgressStatus,
    Question,
    ResponseAnalysis,
    TurnType,
    new_id,
    utc_now,
)
from docflow.conversation.progress import InMemoryProgressTracker
from docflow.conversation.scoring import calculate_completion_score
from docflow.conversation.store import ConversationStore
from docflow.conversation.stores.inmemory import InMemoryConversationStore
from docflow.observability.logging import get_logger
from docflow.observability.metrics import (
    ACTIVE_CONVERSATIONS,
    CONVERSATION_TURNS,
    CONVERSATIONS_ENDED,
    CONVERSATIONS_STARTED,
    ERRORS,
)
from docflow.workflow.content import ContentCapture
from docflow.workflow.models import PhaseCompletionStatus, WorkflowSuggestion
from docflow.workflow.orchestrator import WorkflowOrchestrator
from docflow.workflow.phases import normalize_phase

logger = get_logger(__name__)

MINUTES_PER_QUESTION = 2
PROGRESS_NEXT_STEPS = 3

FOLLOWUP_LEADS = [
    "That's helpful! Let me dig a bit deeper.",
    "Great insight! I'd like to explore this further.",
    "Interesting! Let me ask a follow-up question.",
    "Thanks for that detail. Let me understand more about this.",
]
COMPLETION_QUESTION_TEXT = "Is there anything else you'd like to add or clarify about this topic?"
COMPLETION_MESSAGE = (
    "We're making great progress! Let me ask a few more questions "
    "to ensure we have everything we need."
)

# Turn decisions, also used as metric labels
DECISION_CLARIFICATION = "clarification"
DECISION_FOLLOWUP = "followup"
DECISION_NEXT_QUESTION = "next_question"
DECISION_PHASE_COMPLETE = "phase_complete"
DECISION_COMPLETION_QUESTION = "completion_question"
DECISION_RECOVERED = "recovered"


def estimate_session_duration(question_count: int) -> str:
    """Humanize ``question_count`` x 2 minutes."""
    total = question_count * MINUTES_PER_QUESTION
    if total < 60:
        return f"{total} minutes"
    hours, minutes = divmod(total, 60)
    return f"{hours}h {minutes}m"


class ConversationEngine:
    """Runs conversations between a user and the document-authoring agents.

    At most one active session exists per agent: starting a conversation
    for an agent ends its previous one, and starts for one agent run one at
    a time. Turns on the same session are serialized by a per-session lock.
    """

    def __init__(
        self,
        question_generator: QuestionGenerator,
        response_analyzer: ResponseAnalyzer,
        *,
        store: ConversationStore | None = None,
        orchestrator: WorkflowOrchestrator | None = None,
        content_capture: ContentCapture | None = None,
        progress_tracker: ProgressTracker | None = None,
        document_builder: DocumentUpdateBuilder | None = None,
        config: ConversationConfig | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the engine.

        Args:
            question_generator: Source of initial and follow-up questions
            response_analyzer: Judges each user response
            store: Session/turn storage (in-memory by default)
            orchestrator: Phase completion and suggestions
            content_capture: Writes document updates when a session has a
                document path
            progress_tracker: Receives progress snapshots
            document_builder: Maps answers to document section updates
            config: Conversation configuration
            clock: Time source
        """
        self._config = config or ConversationConfig()
        self._questions = question_generator
        self._analyzer = response_analyzer
        self._store = store or InMemoryConversationStore(
            max_turns_per_session=self._config.max_turns_per_session
        )
        self._content = content_capture
        self._orchestrator = orchestrator or WorkflowOrchestrator(content_capture)
        self._progress = progress_tracker or InMemoryProgressTracker()
        self._documents = document_builder or DocumentUpdateBuilder()
        self._clock = clock
        # Locks live only while some call holds or awaits them
        self._locks: WeakValueDictionary[str, asyncio.Lock] = WeakValueDictionary()
        self._agent_locks: WeakValueDictionary[str, asyncio.Lock] = WeakValueDictionary()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start_conversation(
        self, agent_name: str, context: ConversationContext
    ) -> ConversationSession:
        """Start a conversation, ending the agent's previous one if any."""
        with self._failures_as(ConversationErrorCode.START_CONVERSATION_FAILED, None):
            async with self._agent_lock_for(agent_name):
                return await self._start(agent_name, context)

    async def _start(
        self, agent_name: str, context: ConversationContext
    ) -> ConversationSession:
        previous_id = await self._store.get_active_session_id(agent_name)
        if previous_id is not None:
            if await self._store.get_session(previous_id) is None:
                await self._store.clear_active_session_id(agent_name)
            else:
                logger.info(
                    "ending_previous_session",
                    agent_name=agent_name,
                    session_id=previous_id,
                )
                async with self._lock_for(previous_id):
                    await self._end(previous_id)

        questions = await self._questions.generate_initial_questions(agent_name, context)
        phase = normalize_phase(context.workflow_phase)
        now = self._clock()
        session_id = new_id()
        session = ConversationSession(
            session_id=session_id,
            agent_name=agent_name,
            current_question_set=questions,
            state=ConversationState(
                session_id=session_id,
                agent_name=agent_name,
                phase=phase,
                document_path=context.document_path,
                template_id=context.document_type,
                last_updated=now,
            ),
            created_at=now,
            last_activity=now,
        )
        await self._store.save_session(session)
        await self._store.set_active_session_id(agent_name, session_id)
        await self._record_turn(
            session_id,
            TurnType.SYSTEM,
            f"Conversation started with {agent_name} agent for "
            f"{context.document_type} in {phase} phase",
            question_count=len(questions),
        )

        self._push_progress(
            session_id,
            current_phase=phase,
            completed_sections=[],
            pending_sections=self._orchestrator.get_phase_requirements(phase),
            next_steps=[q.text for q in questions[:PROGRESS_NEXT_STEPS]],
            estimated_time_remaining=estimate_session_duration(len(questions)),
        )

        CONVERSATIONS_STARTED.labels(agent_name=agent_name).inc()
        ACTIVE_CONVERSATIONS.labels(agent_name=agent_name).inc()
        logger.info(
            "conversation_started",
            session_id=session_id,
            agent_name=agent_name,
            phase=phase,
            question_count=len(questions),
        )
        return session

    async def continue_conversation(
        self, session_id: str, user_response: str
    ) -> ConversationResponse:
        """Process one user response and decide what the agent says next.

        Raises:
            ConversationError: SESSION_NOT_FOUND, SESSION_INACTIVE,
                NO_CURRENT_QUESTION, or CONTINUE_CONVERSATION_FAILED
        """
        with self._failures_as(ConversationErrorCode.CONTINUE_CONVERSATION_FAILED, session_id):
            async with self._lock_for(session_id):
                return await self._continue(session_id, user_response)

    async def end_conversation(self, session_id: str) -> ConversationSummary:
        """End a conversation. The session is kept, marked inactive."""
        with self._failures_as(ConversationErrorCode.END_CONVERSATION_FAILED, session_id):
            async with self._lock_for(session_id):
                return await self._end(session_id)

    async def pause_conversation(self, session_id: str) -> None:
        """Stop accepting input for a session until it is resumed."""
        with self._failures_as(ConversationErrorCode.CONTINUE_CONVERSATION_FAILED, session_id):
            async with self._lock_for(session_id):
                session = await self._require_session(session_id)
                session.state.is_active = False
                session.state.last_updated = self._clock()
                await self._store.save_session(session)
                await self._record_turn(session_id, TurnType.SYSTEM, "Conversation paused")
                logger.info("conversation_paused", session_id=session_id)

    async def resume_conversation(self, session_id: str) -> None:
        """Accept input again for a paused session.

        Questions are not regenerated. Ended sessions cannot be resumed.
        """
        with self._failures_as(ConversationErrorCode.CONTINUE_CONVERSATION_FAILED, session_id):
            async with self._lock_for(session_id):
                session = await self._require_session(session_id)
                active_id = await self._store.get_active_session_id(session.agent_name)
                if active_id != session_id:
                    raise ConversationError(
                        "Session has ended and cannot be resumed",
                        ConversationErrorCode.SESSION_INACTIVE,
                        session_id,
                    )
                now = self._clock()
                session.state.is_active = True
                session.state.last_updated = now
                session.last_activity = now
                await self._store.save_session(session)
                await self._record_turn(session_id, TurnType.SYSTEM, "Conversation resumed")
                logger.info("conversation_resumed", session_id=session_id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_session(self, session_id: str) -> ConversationSession | None:
        return await self._store.get_session(session_id)

    async def get_conversation_history(self, session_id: str) -> list[ConversationTurn]:
        return await self._store.get_turns(session_id)

    async def get_active_session(self, agent_name: str) -> ConversationSession | None:
        """The agent's current session, or None once it has ended."""
        session_id = await self._store.get_active_session_id(agent_name)
        if session_id is None:
            return None
        return await self._store.get_session(session_id)

    async def get_active_session_id(self) -> str | None:
        """ID of the most recently active session accepting input."""
        sessions = await self._store.list_sessions(active_only=True)
        return sessions[0].session_id if sessions else None

    async def is_session_active(self, session_id: str) -> bool:
        session = await self._store.get_session(session_id)
        return session is not None and session.state.is_active

    # ------------------------------------------------------------------
    # Turn processing
    # ------------------------------------------------------------------

    async def _continue(self, session_id: str, user_response: str) -> ConversationResponse:
        session = await self._require_session(session_id)
        if not session.state.is_active:
            raise ConversationError(
                "Session is not active",
                ConversationErrorCode.SESSION_INACTIVE,
                session_id,
            )

        question = session.current_question
        await self._record_turn(
            session_id,
            TurnType.RESPONSE,
            user_response,
            question_id=question.id if question else None,
        )

        if question is None:
            return await self._recover_question_index(session, user_response)

        analysis = await self._analyzer.analyze(user_response, question)
        state = session.state
        state.answered_questions[question.id] = user_response
        for entity in analysis.extracted_entities:
            state.extracted_data[entity.type] = entity.value
        state.completion_score = calculate_completion_score(state)

        document_updates = await self._document_updates(session, user_response, question)

        decision, message, next_questions, suggestions = await self._decide(
            session, user_response, question, analysis
        )

        now = self._clock()
        state.last_updated = now
        session.last_activity = now
        await self._store.save_session(session)
        await self._record_turn(
            session_id,
            TurnType.QUESTION,
            message,
            decision=decision,
            question_ids=[q.id for q in next_questions],
        )

        self._push_progress(session_id, completion_percentage=state.completion_score * 100)
        CONVERSATION_TURNS.labels(agent_name=session.agent_name, decision=decision).inc()
        logger.info(
            "conversation_turn_processed",
            session_id=session_id,
            agent_name=session.agent_name,
            decision=decision,
            response_length=len(user_response),
            completion_score=state.completion_score,
            question_index=state.current_question_index,
        )

        return ConversationResponse(
            session_id=session_id,
            agent_message=message,
            followup_questions=next_questions,
            document_updates=document_updates,
            workflow_suggestions=suggestions,
            progress_update=self._current_progress(session_id),
        )

    async def _decide(
        self,
        session: ConversationSession,
        user_response: str,
        question: Question,
        analysis: ResponseAnalysis,
    ) -> tuple[str, str, list[Question], list[WorkflowSuggestion]]:
        """First matching rule wins. Any new question set starts at index 0."""
        state = session.state

        if analysis.needs_clarification:
            clarification = Question(
                id=f"clarify_{question.id}_{new_id()[:8]}",
                text=(
                    f"Could you provide more specific details about {question.category}? "
                    f"{analysis.suggested_followups[0] if analysis.suggested_followups else ''}"
                ).strip(),
                examples=question.examples,
                required=True,
                category=question.category,
            )
            self._replace_question_set(session, [clarification])
            message = (
                "I need some clarification on your response. "
                f"{' '.join(analysis.suggested_followups)}"
            ).strip()
            return DECISION_CLARIFICATION, message, [clarification], []

        history = await self._store.get_turns(session.session_id)
        followups = await self._questions.generate_followup_questions(
            session.agent_name, user_response, history
        )
        if followups:
            self._replace_question_set(session, followups)
            lead = FOLLOWUP_LEADS[len(history) % len(FOLLOWUP_LEADS)]
            return DECISION_FOLLOWUP, f"{lead} {followups[0].text}", followups, []

        if state.current_question_index < len(session.current_question_set) - 1:
            state.current_question_index += 1
            next_question = session.current_question_set[state.current_question_index]
            return (
                DECISION_NEXT_QUESTION,
                f"Great! Now, {next_question.text}",
                [next_question],
                [],
            )

        if self._orchestrator.evaluate_session_completion(state.phase, state.completion_score):
            status = await self._phase_status(session)
            suggestion = self._orchestrator.suggest_next_phase(state.phase, status)
            message = (
                "Excellent! We've covered all the essential questions for the "
                f"{state.phase} phase. {suggestion.reason}"
            )
            return DECISION_PHASE_COMPLETE, message, [], [suggestion]

        completion_question = Question(
            id=f"completion_{new_id()[:8]}",
            text=COMPLETION_QUESTION_TEXT,
            required=False,
            category="completion",
        )
        self._replace_question_set(session, [completion_question])
        return DECISION_COMPLETION_QUESTION, COMPLETION_MESSAGE, [completion_question], []

    async def _recover_question_index(
        self, session: ConversationSession, user_response: str
    ) -> ConversationResponse:
        """Handle a response when the index points past the question set."""
        session_id = session.session_id
        if not session.current_question_set:
            raise ConversationError(
                "No current question found",
                ConversationErrorCode.NO_CURRENT_QUESTION,
                session_id,
            )

        logger.warning(
            "question_index_recovered",
            session_id=session_id,
            question_index=session.state.current_question_index,
            question_count=len(session.current_question_set),
        )
        state = session.state
        state.current_question_index = 0
        question = session.current_question_set[0]
        state.answered_questions[question.id] = user_response
        state.completion_score = calculate_completion_score(state)
        now = self._clock()
        state.last_updated = now
        session.last_activity = now
        await self._store.save_session(session)

        message = (
            "Thank you for that information. "
            f"Let me ask you another question: {question.text}"
        )
        await self._record_turn(
            session_id,
            TurnType.QUESTION,
            message,
            decision=DECISION_RECOVERED,
            question_ids=[question.id],
        )
        CONVERSATION_TURNS.labels(
            agent_name=session.agent_name, decision=DECISION_RECOVERED
        ).inc()
        return ConversationResponse(
            session_id=session_id,
            agent_message=message,
            followup_questions=[question],
            progress_update=self._current_progress(session_id),
        )

    async def _end(self, session_id: str) -> ConversationSummary:
        session = await self._require_session(session_id)
        state = session.state
        completed_at = self._clock()

        state.is_active = False
        state.last_updated = completed_at
        await self._store.save_session(session)

        was_current = await self._store.get_active_session_id(session.agent_name) == session_id
        if was_current:
            await self._store.clear_active_session_id(session.agent_name)

        turns = await self._store.get_turns(session_id)
        duration = (completed_at - session.created_at).total_seconds()
        summary = ConversationSummary(
            session_id=session_id,
            agent_name=session.agent_name,
            phase=state.phase,
            questions_asked=sum(1 for turn in turns if turn.type == TurnType.QUESTION),
            questions_answered=len(state.answered_questions),
            documents_updated=list(state.extracted_data.keys()),
            completion_score=state.completion_score,
            duration_seconds=duration,
            created_at=session.created_at,
            completed_at=completed_at,
        )
        await self._record_turn(
            session_id,
            TurnType.SYSTEM,
            f"Conversation completed. Score: {state.completion_score:.2f}, "
            f"Duration: {int(duration)}s",
        )

        if was_current:
            CONVERSATIONS_ENDED.labels(agent_name=session.agent_name).inc()
            ACTIVE_CONVERSATIONS.labels(agent_name=session.agent_name).dec()
        logger.info(
            "conversation_ended",
            session_id=session_id,
            agent_name=session.agent_name,
            completion_score=state.completion_score,
            duration_seconds=duration,
        )
        return summary

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @contextmanager
    def _failures_as(
        self, code: ConversationErrorCode, session_id: str | None
    ) -> Iterator[None]:
        """Wrap unexpected exceptions once as ``code``."""
        try:
            yield
        except ConversationError as e:
            ERRORS.labels(error_code=e.code.value).inc()
            raise
        except Exception as e:
            ERRORS.labels(error_code=code.value).inc()
            logger.exception(
                "conversation_operation_failed",
                error_code=code.value,
                session_id=session_id,
            )
            action = code.value.removesuffix("_FAILED").lower().replace("_", " ")
            raise ConversationError(
                f"Failed to {action}: {e}",
                code,
                session_id,
                recoverable=True,
            ) from e

    def _lock_for(self, session_id: str) -> asyncio.Lock:
        return self._locks.setdefault(session_id, asyncio.Lock())

    def _agent_lock_for(self, agent_name: str) -> asyncio.Lock:
        return self._agent_locks.setdefault(agent_name, asyncio.Lock())

    async def _require_session(self, session_id: str) -> ConversationSession:
        session = await self._store.get_session(session_id)
        if session is None:
            raise ConversationError(
                "Session not found",
                ConversationErrorCode.SESSION_NOT_FOUND,
                session_id,
                recoverable=False,
            )
        return session

    async def _record_turn(
        self, session_id: str, turn_type: TurnType, content: str, **metadata: object
    ) -> None:
        await self._store.append_turn(
            ConversationTurn(
                session_id=session_id,
                timestamp=self._clock(),
                type=turn_type,
                content=content,
                metadata=metadata,
            )
        )

    def _replace_question_set(
        self, session: ConversationSession, questions: list[Question]
    ) -> None:
        session.current_question_set = questions
        session.state.current_question_index = 0

    async def _document_updates(
        self, session: ConversationSession, user_response: str, question: Question
    ) -> list[DocumentUpdate]:
        """Build updates and write them when possible. Failures are non-fatal."""
        updates = self._documents.build(session.agent_name, user_response, question)
        path = session.state.document_path
        if not updates or path is None or self._content is None:
            return updates
        if not self._config.write_document_updates:
            return updates

        try:
            result = await self._content.update_document(path, updates)
        except Exception:
            logger.warning(
                "document_update_failed",
                session_id=session.session_id,
                document_path=path,
                exc_info=True,
            )
            return updates

        if not result.success:
            logger.warning(
                "document_update_rejected",
                session_id=session.session_id,
                document_path=path,
                errors=result.errors,
            )
        return updates

    async def _phase_status(self, session: ConversationSession) -> PhaseCompletionStatus:
        """Completion status used for the next-phase suggestion.

        Uses the session's document when one can be inspected; otherwise
        the conversation stands in for the document and counts as covering
        every required section at its completion score.
        """
        phase = session.state.phase
        path = session.state.document_path
        if path is not None and self._content is not None:
            return await self._orchestrator.evaluate_phase_completion(phase, path)

        required = self._orchestrator.get_phase_requirements(phase)
        return PhaseCompletionStatus(
            phase=phase,
            completion_percentage=100.0,
            required_sections=required,
            completed_sections=required,
            missing_sections=[],
            quality_score=session.state.completion_score,
        )

    def _push_progress(self, session_id: str, **updates: object) -> None:
        try:
            self._progress.update_progress(session_id, **updates)
        except Exception:
            logger.warning("progress_update_failed", session_id=session_id, exc_info=True)

    def _current_progress(self, session_id: str) -> ProgressStatus | None:
        try:
            return self._progress.calculate_progress(session_id)
        except Exception:
            logger.warning("progress_read_failed", session_id=session_id, exc_info=True)
            return None
