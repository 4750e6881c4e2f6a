"""Workflow orchestrator: phase completion, suggestion and transitions."""

from docflow.observability.logging import get_logger
from docflow.observability.metrics import PHASE_TRANSITIONS
from docflow.workflow.content import ContentCapture, headings_match
from docflow.workflow.models import (
    QUALITY_SCORE_THRESHOLD,
    PhaseCompletionStatus,
    TransitionResult,
    TransitionValidation,
    WorkflowSuggestion,
)
from docflow.workflow.phases import (
    DEFAULT_AGENT,
    DEFAULT_NEXT_STEPS,
    DEFAULT_PHASE_DURATION,
    PHASE_AGENTS,
    PHASE_DURATIONS,
    PHASE_NEXT_STEPS,
    PHASE_REQUIREMENTS,
    TRANSITION_PREREQUISITES,
    TRANSITION_REASONS,
    WORKFLOW_PHASES,
    normalize_phase,
    phase_index,
)

logger = get_logger(__name__)

FINAL_PHASE_CONFIDENCE = 1.0
READY_CONFIDENCE = 0.9
NOT_READY_CONFIDENCE = 0.3
UNKNOWN_PHASE = "unknown"


class WorkflowOrchestrator:
    """Owns the fixed phase order and decides phase transitions.

    Holds no per-session state. Document inspection goes through the
    injected ContentCapture; without one every document reads as empty.
    """

    def __init__(self, content_capture: ContentCapture | None = None) -> None:
        self._content = content_capture

    def get_workflow_phases(self) -> list[str]:
        """Get the ordered phase names."""
        return list(WORKFLOW_PHASES)

    def get_phase_requirements(self, phase: str) -> list[str]:
        """Get the required sections for a phase, or [] if unknown."""
        return list(PHASE_REQUIREMENTS.get(normalize_phase(phase), []))

    def get_agent_for_phase(self, phase: str) -> str:
        """Get the agent that runs a phase."""
        return PHASE_AGENTS.get(normalize_phase(phase), DEFAULT_AGENT)

    async def evaluate_phase_completion(
        self, phase: str, document_path: str
    ) -> PhaseCompletionStatus:
        """Evaluate how complete a phase's document is.

        A required section is completed when some heading contains it or
        is contained by it, ignoring case.
        """
        phase = normalize_phase(phase)
        required = self.get_phase_requirements(phase)

        headings: list[str] = []
        quality = 0.0
        if self._content is not None:
            headings = await self._content.get_sections(document_path)
            quality = await self._content.quality_score(document_path, required)

        completed = [
            section
            for section in required
            if any(headings_match(heading, section) for heading in headings)
        ]
        missing = [section for section in required if section not in completed]
        percentage = len(completed) / len(required) * 100 if required else 100.0

        status = PhaseCompletionStatus(
            phase=phase,
            completion_percentage=percentage,
            required_sections=required,
            completed_sections=completed,
            missing_sections=missing,
            quality_score=quality,
        )
        logger.debug(
            "phase_completion_evaluated",
            phase=phase,
            completion_percentage=percentage,
            quality_score=quality,
            ready=status.ready_for_transition,
        )
        return status

    def evaluate_session_completion(self, phase: str, completion_score: float) -> bool:
        """Whether a conversation's score meets the phase completion bar."""
        return completion_score >= QUALITY_SCORE_THRESHOLD

    def suggest_next_phase(
        self, phase: str, status: PhaseCompletionStatus
    ) -> WorkflowSuggestion:
        """Suggest the phase after ``phase``.

        The suggestion always points forward. When the current phase is
        not ready, confidence is low and the missing sections become the
        prerequisites.
        """
        canonical = normalize_phase(phase)
        index = phase_index(canonical)

        if index == -1 or index >= len(WORKFLOW_PHASES) - 1:
            return WorkflowSuggestion(
                next_phase=canonical,
                recommended_agent=self.get_agent_for_phase(canonical),
                reason="You are in the final phase of the workflow",
                prerequisites=[],
                estimated_duration="0 minutes",
                confidence=FINAL_PHASE_CONFIDENCE,
            )

        next_phase = WORKFLOW_PHASES[index + 1]
        if not status.ready_for_transition:
            return WorkflowSuggestion(
                next_phase=next_phase,
                recommended_agent=self.get_agent_for_phase(next_phase),
                reason=f"Complete the missing sections in {canonical} phase before proceeding",
                prerequisites=list(status.missing_sections),
                estimated_duration="",
                confidence=NOT_READY_CONFIDENCE,
            )

        return WorkflowSuggestion(
            next_phase=next_phase,
            recommended_agent=self.get_agent_for_phase(next_phase),
            reason=self._transition_reason(canonical, next_phase),
            prerequisites=[],
            estimated_duration=PHASE_DURATIONS.get(next_phase, DEFAULT_PHASE_DURATION),
            confidence=READY_CONFIDENCE,
        )

    def validate_phase_transition(
        self, from_phase: str, to_phase: str
    ) -> TransitionValidation:
        """Validate a transition. Warnings never make it invalid."""
        source = normalize_phase(from_phase)
        target = normalize_phase(to_phase)
        errors: list[str] = []
        warnings: list[str] = []
        recommendations: list[str] = []
        skipped: list[str] = []

        from_index = phase_index(source)
        to_index = phase_index(target)
        if from_index == -1:
            errors.append(f"Invalid source phase: {from_phase}")
        if to_index == -1:
            errors.append(f"Invalid target phase: {to_phase}")

        if not errors:
            if to_index < from_index:
                warnings.append(
                    "Moving backwards in the workflow - ensure this is intentional"
                )
            if to_index > from_index + 1:
                warnings.append(
                    "Skipping workflow phases - consider completing intermediate phases"
                )
                skipped = list(WORKFLOW_PHASES[from_index + 1 : to_index])
                recommendations.append(
                    f"Consider completing these phases first: {', '.join(skipped)}"
                )

        return TransitionValidation(
            valid=not errors,
            errors=errors,
            warnings=warnings,
            prerequisites=list(TRANSITION_PREREQUISITES.get((source, target), [])),
            recommendations=recommendations,
            skipped_phases=skipped,
        )

    async def execute_phase_transition(
        self, suggestion: WorkflowSuggestion
    ) -> TransitionResult:
        """Execute the transition a suggestion proposes.

        The source phase is taken to be the one immediately before the
        suggested phase.
        """
        from_phase = self._previous_phase(suggestion.next_phase)
        try:
            validation = self.validate_phase_transition(from_phase, suggestion.next_phase)
            if not validation.valid:
                result = TransitionResult(
                    success=False,
                    from_phase=from_phase,
                    to_phase=suggestion.next_phase,
                    new_agent=suggestion.recommended_agent,
                    message=f"Transition failed: {', '.join(validation.errors)}",
                )
            else:
                result = TransitionResult(
                    success=True,
                    from_phase=from_phase,
                    to_phase=suggestion.next_phase,
                    new_agent=suggestion.recommended_agent,
                    message=(
                        f"Successfully transitioned to {suggestion.next_phase} phase "
                        f"with {suggestion.recommended_agent} agent"
                    ),
                    next_steps=list(
                        PHASE_NEXT_STEPS.get(
                            normalize_phase(suggestion.next_phase), DEFAULT_NEXT_STEPS
                        )
                    ),
                )
        except Exception as e:
            logger.exception("phase_transition_failed", to_phase=suggestion.next_phase)
            result = TransitionResult(
                success=False,
                from_phase=from_phase,
                to_phase=suggestion.next_phase,
                new_agent=suggestion.recommended_agent,
                message=f"Transition failed: {e}",
            )

        PHASE_TRANSITIONS.labels(
            from_phase=result.from_phase,
            to_phase=result.to_phase,
            outcome="success" if result.success else "failed",
        ).inc()
        logger.info(
            "phase_transition_executed",
            from_phase=result.from_phase,
            to_phase=result.to_phase,
            success=result.success,
        )
        return result

    def _previous_phase(self, phase: str) -> str:
        index = phase_index(phase)
        return WORKFLOW_PHASES[index - 1] if index > 0 else UNKNOWN_PHASE

    def _transition_reason(self, from_phase: str, to_phase: str) -> str:
        return TRANSITION_REASONS.get(
            (from_phase, to_phase),
            f"Ready to transition from {from_phase} to {to_phase}",
        )
