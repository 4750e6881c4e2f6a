"""Auto-session state: which agent free-text input implicitly addresses.

Expiry is lazy. Every read re-checks the inactivity timeout and, once it
has passed, clears the auto-session in the same call. State is persisted
to the host StateStore after every change; persistence failures are
logged and never raised.
"""

from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any

from docflow.config.models.routing import AutoSessionConfig
from docflow.conversation.models import utc_now
from docflow.observability.logging import get_logger
from docflow.routing.models import AutoSessionContext, AutoSessionRecord, AutoSessionStats
from docflow.routing.stores.interface import StateStore

logger = get_logger(__name__)


class AutoSessionStateManager:
    """Tracks the implicit target of free-text input with a timeout."""

    def __init__(
        self,
        store: StateStore | None = None,
        config: AutoSessionConfig | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._config = config or AutoSessionConfig()
        self._clock = clock
        self._record = AutoSessionRecord()

    @property
    def timeout(self) -> timedelta:
        return timedelta(minutes=self._config.timeout_minutes)

    async def load(self) -> None:
        """Restore persisted state, then drop it if it has expired."""
        if self._store is None:
            return
        try:
            raw = await self._store.get(self._config.state_key)
            if raw is not None:
                self._record = AutoSessionRecord.model_validate_json(raw)
                logger.info(
                    "auto_session_loaded",
                    is_active=self._record.is_active,
                    agent_name=self._record.context.agent_name if self._record.context else None,
                )
        except Exception:
            logger.warning("auto_session_load_failed", exc_info=True)
            return
        await self.cleanup_expired()

    async def enable(
        self,
        agent_name: str,
        document_path: str | None = None,
        template_id: str | None = None,
        conversation_session_id: str | None = None,
    ) -> None:
        """Make ``agent_name`` the implicit target. No-op when disabled."""
        if not self._config.enabled:
            logger.info("auto_session_disabled_by_config", agent_name=agent_name)
            return

        now = self._clock()
        self._record = AutoSessionRecord(
            is_active=True,
            context=AutoSessionContext(
                agent_name=agent_name,
                document_path=document_path,
                template_id=template_id,
                conversation_session_id=conversation_session_id,
                enabled_at=now,
                last_activity=now,
            ),
            message_count=0,
        )
        logger.info("auto_session_enabled", agent_name=agent_name, document_path=document_path)
        await self._save()

    async def disable(self) -> None:
        logger.info(
            "auto_session_cleared",
            was_active=self._record.is_active,
            message_count=self._record.message_count,
        )
        self._record = AutoSessionRecord()
        await self._save()

    async def is_active(self) -> bool:
        """Whether an auto-session is active, expiring it if timed out."""
        if self._record.is_active and self._record.context is not None:
            idle = self._clock() - self._record.context.last_activity
            if idle > self.timeout:
                logger.info(
                    "auto_session_timed_out",
                    idle_seconds=int(idle.total_seconds()),
                    timeout_minutes=self._config.timeout_minutes,
                )
                await self.disable()
                return False
        return self._record.is_active

    async def get_context(self) -> AutoSessionContext | None:
        if not await self.is_active():
            return None
        return self._record.context

    async def update_activity(self) -> None:
        """Record user input against the active auto-session."""
        context = self._record.context
        if self._record.is_active and context is not None:
            context.last_activity = self._clock()
            self._record.message_count += 1
            await self._save()

    async def set_conversation_session_id(self, session_id: str) -> None:
        if self._record.context is not None:
            self._record.context.conversation_session_id = session_id
            await self._save()

    async def cleanup_expired(self) -> bool:
        """Clear the auto-session if it has timed out. Returns True if cleared."""
        was_active = self._record.is_active
        return was_active and not await self.is_active()

    def get_stats(self) -> AutoSessionStats:
        context = self._record.context
        duration = None
        if self._record.is_active and context is not None:
            duration = int((self._clock() - context.enabled_at).total_seconds())
        return AutoSessionStats(
            is_active=self._record.is_active,
            agent_name=context.agent_name if context else None,
            document_path=context.document_path if context else None,
            message_count=self._record.message_count,
            session_duration_seconds=duration,
        )

    def to_record(self) -> dict[str, Any]:
        """The persisted record, keyed by alias."""
        return self._record.model_dump(mode="json", by_alias=True)

    async def _save(self) -> None:
        if self._store is None:
            return
        try:
            await self._store.set(
                self._config.state_key, self._record.model_dump_json(by_alias=True)
            )
        except Exception:
            logger.warning("auto_session_save_failed", exc_info=True)
