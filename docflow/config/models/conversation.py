"""Conversation engine configuration models."""

from pydantic import BaseModel, Field


class ConversationConfig(BaseModel):
    """Conversation engine configuration.

    Scoring and completion thresholds are fixed policy and live in code;
    only operational knobs are configurable here.
    """

    max_turns_per_session: int | None = Field(
        default=None,
        gt=1,
        description=(
            "Maximum turns retained per session history. The opening system "
            "turn is always kept. None keeps the full history."
        ),
    )
    write_document_updates: bool = Field(
        default=True,
        description="Write generated document updates through content capture",
    )
