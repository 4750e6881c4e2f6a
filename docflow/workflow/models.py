"""Workflow phase models."""

from enum import Enum

from pydantic import BaseModel, Field, computed_field

# Fixed policy thresholds for phase readiness
COMPLETION_PERCENTAGE_THRESHOLD = 80.0
QUALITY_SCORE_THRESHOLD = 0.7


class WorkflowPhase(str, Enum):
    """Ordered authoring phases.

    PRD is the concept phase; "concept" is accepted as an alias when
    parsing phase names.
    """

    PRD = "prd"
    REQUIREMENTS = "requirements"
    DESIGN = "design"
    IMPLEMENTATION = "implementation"


class PhaseCompletionStatus(BaseModel):
    """How far a phase's document has progressed."""

    phase: str = Field(..., description="Evaluated phase")
    completion_percentage: float = Field(..., ge=0.0, le=100.0)
    required_sections: list[str] = Field(default_factory=list)
    completed_sections: list[str] = Field(default_factory=list)
    missing_sections: list[str] = Field(default_factory=list)
    quality_score: float = Field(default=0.0, ge=0.0, le=1.0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def ready_for_transition(self) -> bool:
        """Derived: enough sections present and good enough quality."""
        return (
            self.completion_percentage >= COMPLETION_PERCENTAGE_THRESHOLD
            and self.quality_score >= QUALITY_SCORE_THRESHOLD
        )


class WorkflowSuggestion(BaseModel):
    """A recommendation to move to a phase, with the agent that runs it."""

    next_phase: str = Field(..., description="Target phase")
    recommended_agent: str = Field(..., description="Agent for the target phase")
    reason: str = Field(..., description="Human-readable rationale")
    prerequisites: list[str] = Field(default_factory=list)
    estimated_duration: str = Field(default="", description="Humanized estimate")
    confidence: float = Field(..., ge=0.0, le=1.0)


class TransitionValidation(BaseModel):
    """Outcome of validating a phase transition. Warnings never block."""

    valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    prerequisites: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    skipped_phases: list[str] = Field(default_factory=list)


class TransitionResult(BaseModel):
    """Outcome of executing a phase transition."""

    success: bool
    from_phase: str
    to_phase: str
    new_agent: str
    message: str
    next_steps: list[str] = Field(default_factory=list)
