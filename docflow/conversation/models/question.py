"""Question models."""

from pydantic import BaseModel, ConfigDict, Field

from docflow.conversation.models.enums import QuestionKind


class Question(BaseModel):
    """A single question an agent asks. Immutable once generated."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique question identifier")
    text: str = Field(..., description="Prompt shown to the user")
    kind: QuestionKind = Field(
        default=QuestionKind.OPEN_ENDED, description="Expected answer form"
    )
    examples: list[str] = Field(default_factory=list, description="Example answers")
    required: bool = Field(default=True, description="Must be answered")
    category: str = Field(default="general", description="Topic category")
    priority: int = Field(default=1, ge=1, description="Lower asks first")
    followup_triggers: list[str] = Field(
        default_factory=list, description="Keywords that warrant a follow-up"
    )

    @property
    def is_enumerated(self) -> bool:
        """True for closed answer forms."""
        return self.kind != QuestionKind.OPEN_ENDED
