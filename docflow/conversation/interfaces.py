"""Collaborator contracts consumed by the conversation engine.

Each collaborator is injected into the engine at construction. Default
implementations live next to this module (questions, analysis,
progress) and in ``docflow.workflow.content``.
"""

from abc import ABC, abstractmethod
from typing import Any

from docflow.conversation.models import (
    ConversationContext,
    ConversationTurn,
    ProgressStatus,
    Question,
    ResponseAnalysis,
)


class QuestionGenerator(ABC):
    """Produces the questions an agent asks."""

    @abstractmethod
    async def generate_initial_questions(
        self, agent_name: str, context: ConversationContext
    ) -> list[Question]:
        """Get the ordered opening question set for an agent."""
        pass

    @abstractmethod
    async def generate_followup_questions(
        self,
        agent_name: str,
        last_response: str,
        history: list[ConversationTurn],
    ) -> list[Question]:
        """Get follow-up questions for a response. May be empty."""
        pass


class ResponseAnalyzer(ABC):
    """Judges a user's answer to a question."""

    @abstractmethod
    async def analyze(self, response: str, question: Question) -> ResponseAnalysis:
        """Analyze a response to the given question."""
        pass


class ProgressTracker(ABC):
    """Push/pull progress snapshots per session. Never blocks the engine."""

    @abstractmethod
    def update_progress(self, session_id: str, **updates: Any) -> None:
        """Merge field updates into the session's snapshot."""
        pass

    @abstractmethod
    def calculate_progress(self, session_id: str) -> ProgressStatus:
        """Get the session's current snapshot."""
        pass
