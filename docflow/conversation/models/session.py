"""Session models for the conversation domain."""

from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from docflow.conversation.models.question import Question


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


def new_id() -> str:
    """Return a fresh opaque identifier."""
    return str(uuid4())


class ConversationContext(BaseModel):
    """What a conversation is about, supplied when it starts."""

    document_type: str = Field(default="prd", description="Template/document type")
    document_path: str | None = Field(default=None, description="Target document")
    workflow_phase: str = Field(default="prd", description="Workflow phase")
    existing_content: str | None = Field(
        default=None, description="Current document content, if any"
    )
    workspace_root: str | None = Field(default=None, description="Workspace root")


class ConversationState(BaseModel):
    """Mutable state of one conversation.

    Mutated only by the conversation engine. The completion score is
    recomputed from answered_questions/extracted_data after every turn.
    """

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    session_id: str = Field(..., description="Owning session")
    agent_name: str = Field(..., description="Serving agent")
    phase: str = Field(..., description="Workflow phase")
    current_question_index: int = Field(default=0, ge=0, description="Active question")
    answered_questions: dict[str, str] = Field(
        default_factory=dict, description="question_id -> raw answer"
    )
    extracted_data: dict[str, Any] = Field(
        default_factory=dict, description="entity type -> last extracted value"
    )
    completion_score: float = Field(default=0.0, ge=0.0, le=1.0)
    is_active: bool = Field(default=True, description="Accepts input")
    last_updated: datetime = Field(default_factory=utc_now)
    document_path: str | None = Field(default=None, description="Target document")
    template_id: str | None = Field(default=None, description="Document template")


class ConversationSession(BaseModel):
    """One conversation with an agent: its question set, state and timestamps."""

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    session_id: str = Field(default_factory=new_id, description="Unique identifier")
    agent_name: str = Field(..., description="Serving agent")
    current_question_set: list[Question] = Field(
        default_factory=list, description="Questions currently being worked through"
    )
    state: ConversationState
    created_at: datetime = Field(default_factory=utc_now)
    last_activity: datetime = Field(default_factory=utc_now)

    @property
    def current_question(self) -> Question | None:
        """Question at the current index, or None when out of range."""
        index = self.state.current_question_index
        if 0 <= index < len(self.current_question_set):
            return self.current_question_set[index]
        return None
