"""Turn models: the append-only history of a session."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from docflow.conversation.models.enums import TurnType
from docflow.conversation.models.session import new_id, utc_now


class ConversationTurn(BaseModel):
    """One recorded event in a session's history. Never mutated."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id, description="Unique identifier")
    session_id: str = Field(..., description="Owning session")
    timestamp: datetime = Field(default_factory=utc_now)
    type: TurnType = Field(..., description="system, question or response")
    content: str = Field(..., description="Free-text content")
    metadata: dict[str, Any] = Field(default_factory=dict)
