"""Conversation domain models.

Contains all Pydantic models for conversation state:
- Questions the agents ask
- Sessions and their mutable state
- Turns, the append-only session history
- Per-turn results (analysis, document updates, progress, responses)
"""

from docflow.conversation.models.enums import QuestionKind, TurnType, UpdateType
from docflow.conversation.models.question import Question
from docflow.conversation.models.response import (
    ConversationResponse,
    ConversationSummary,
    DocumentUpdate,
    Entity,
    ProgressStatus,
    ResponseAnalysis,
    UpdateResult,
)
from docflow.conversation.models.session import (
    ConversationContext,
    ConversationSession,
    ConversationState,
    new_id,
    utc_now,
)
from docflow.conversation.models.turn import ConversationTurn

__all__ = [
    # Enums
    "QuestionKind",
    "TurnType",
    "UpdateType",
    # Session models
    "ConversationContext",
    "ConversationSession",
    "ConversationState",
    "ConversationTurn",
    "Question",
    # Turn results
    "ConversationResponse",
    "ConversationSummary",
    "DocumentUpdate",
    "Entity",
    "ProgressStatus",
    "ResponseAnalysis",
    "UpdateResult",
    # Helpers
    "new_id",
    "utc_now",
]
