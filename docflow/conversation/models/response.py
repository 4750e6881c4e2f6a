"""Per-turn result models: analysis, document updates, progress, responses."""

from datetime import datetime

from pydantic import BaseModel, Field

from docflow.conversation.models.enums import UpdateType
from docflow.conversation.models.question import Question
from docflow.conversation.models.session import utc_now
from docflow.workflow.models import WorkflowSuggestion


class Entity(BaseModel):
    """A typed value extracted from a user response."""

    type: str
    value: str
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    start_index: int = 0
    end_index: int = 0


class ResponseAnalysis(BaseModel):
    """What the response analyzer concluded about one answer."""

    completeness: float = Field(default=0.0, ge=0.0, le=1.0)
    clarity: float = Field(default=0.0, ge=0.0, le=1.0)
    extracted_entities: list[Entity] = Field(default_factory=list)
    suggested_followups: list[str] = Field(default_factory=list)
    needs_clarification: bool = False
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)


class DocumentUpdate(BaseModel):
    """Content to write into one document section."""

    section: str
    content: str
    update_type: UpdateType = UpdateType.APPEND
    position: int | None = None
    timestamp: datetime = Field(default_factory=utc_now)
    confidence: float = Field(default=0.8, ge=0.0, le=1.0)


class UpdateResult(BaseModel):
    """Outcome of applying document updates."""

    success: bool
    updated_sections: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    changes_summary: str = ""


class ProgressStatus(BaseModel):
    """Progress snapshot for a session."""

    current_phase: str = "prd"
    completion_percentage: float = Field(default=0.0, ge=0.0, le=100.0)
    completed_sections: list[str] = Field(default_factory=list)
    pending_sections: list[str] = Field(default_factory=list)
    next_steps: list[str] = Field(default_factory=list)
    estimated_time_remaining: str = ""


class ConversationResponse(BaseModel):
    """Everything the caller needs to render after a turn."""

    session_id: str
    agent_message: str
    followup_questions: list[Question] = Field(default_factory=list)
    document_updates: list[DocumentUpdate] = Field(default_factory=list)
    workflow_suggestions: list[WorkflowSuggestion] = Field(default_factory=list)
    progress_update: ProgressStatus | None = None


class ConversationSummary(BaseModel):
    """Final metrics recorded when a conversation ends."""

    session_id: str
    agent_name: str
    phase: str
    questions_asked: int
    questions_answered: int
    documents_updated: list[str] = Field(default_factory=list)
    completion_score: float
    duration_seconds: float
    created_at: datetime
    completed_at: datetime
