"""Routing models: session metadata, routing results, persisted state."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from docflow.agents.models import AgentReply
from docflow.conversation.models import ConversationResponse, utc_now

RoutedTo = Literal["conversation", "agent", "error"]


class SessionMetadata(BaseModel):
    """What the router knows about a session, independent of the engine."""

    model_config = ConfigDict(validate_assignment=True)

    agent_name: str
    document_path: str | None = None
    template_id: str | None = None
    started_at: datetime = Field(default_factory=utc_now)
    last_activity: datetime = Field(default_factory=utc_now)
    question_count: int = Field(default=0, ge=0)
    response_count: int = Field(default=0, ge=0)


class RoutingResult(BaseModel):
    """Where a piece of user input went and what came back."""

    routed_to: RoutedTo
    session_id: str | None = None
    agent_name: str | None = None
    response: ConversationResponse | None = None
    agent_reply: AgentReply | None = None
    error: str | None = None
    should_continue: bool = False


class SessionStateSnapshot(BaseModel):
    """Copy of the router's state, also its persisted form."""

    active_session_id: str | None = None
    sessions_by_agent: dict[str, str] = Field(default_factory=dict)
    session_metadata: dict[str, SessionMetadata] = Field(default_factory=dict)


class AutoSessionContext(BaseModel):
    """The agent free-text input is implicitly addressed to."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, validate_assignment=True
    )

    agent_name: str
    document_path: str | None = None
    template_id: str | None = None
    conversation_session_id: str | None = None
    enabled_at: datetime
    last_activity: datetime


class AutoSessionRecord(BaseModel):
    """Persisted auto-session state.

    Serialized by alias as
    ``{isActive, context: {agentName, documentPath, enabledAt, lastActivity, ...}, messageCount}``.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, validate_assignment=True
    )

    is_active: bool = False
    context: AutoSessionContext | None = None
    message_count: int = Field(default=0, ge=0)


class AutoSessionStats(BaseModel):
    """Summary of the current auto-session."""

    is_active: bool
    agent_name: str | None = None
    document_path: str | None = None
    message_count: int = 0
    session_duration_seconds: int | None = None
