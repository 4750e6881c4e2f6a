"""Tests for WorkflowOrchestrator."""

from pathlib import Path
from unittest.mock import patch

import pytest

from docflow.workflow.content import MarkdownContentCapture
from docflow.workflow.models import PhaseCompletionStatus, WorkflowSuggestion
from docflow.workflow.orchestrator import WorkflowOrchestrator
from docflow.workflow.phases import PHASE_REQUIREMENTS


def status(percentage: float, quality: float, missing: list[str] | None = None):
    return PhaseCompletionStatus(
        phase="prd",
        completion_percentage=percentage,
        missing_sections=missing or [],
        quality_score=quality,
    )


def write_prd(path: Path, sections: list[str], words_per_section: int = 50) -> None:
    body = " ".join(["detail"] * words_per_section)
    path.write_text(
        "\n\n".join(f"## {section}\n\n{body}" for section in sections) + "\n",
        encoding="utf-8",
    )


@pytest.fixture
def orchestrator() -> WorkflowOrchestrator:
    return WorkflowOrchestrator()


class TestPhaseTables:
    def test_phase_order(self, orchestrator):
        assert orchestrator.get_workflow_phases() == [
            "prd",
            "requirements",
            "design",
            "implementation",
        ]

    def test_concept_alias(self, orchestrator):
        assert orchestrator.get_agent_for_phase("concept") == "prd-creator"
        assert orchestrator.get_phase_requirements("concept") == PHASE_REQUIREMENTS["prd"]

    def test_unknown_phase(self, orchestrator):
        assert orchestrator.get_phase_requirements("launch") == []
        assert orchestrator.get_agent_for_phase("launch") == "prd-creator"


class TestReadiness:
    def test_ready_needs_both_thresholds(self):
        assert status(80.0, 0.7).ready_for_transition is True
        assert status(79.9, 0.9).ready_for_transition is False
        assert status(100.0, 0.69).ready_for_transition is False

    def test_session_completion_bar(self, orchestrator):
        assert orchestrator.evaluate_session_completion("prd", 0.7) is True
        assert orchestrator.evaluate_session_completion("prd", 0.69) is False


class TestEvaluatePhaseCompletion:
    """Tests for document-backed phase evaluation."""

    @pytest.mark.asyncio
    async def test_complete_document_is_ready(self, tmp_path):
        write_prd(tmp_path / "prd.md", PHASE_REQUIREMENTS["prd"])
        orchestrator = WorkflowOrchestrator(MarkdownContentCapture(tmp_path))

        result = await orchestrator.evaluate_phase_completion("prd", "prd.md")

        assert result.completion_percentage == 100.0
        assert result.missing_sections == []
        assert result.quality_score >= 0.7
        assert result.ready_for_transition is True

    @pytest.mark.asyncio
    async def test_partial_document(self, tmp_path):
        write_prd(tmp_path / "prd.md", ["Executive Summary", "User Personas"])
        orchestrator = WorkflowOrchestrator(MarkdownContentCapture(tmp_path))

        result = await orchestrator.evaluate_phase_completion("prd", "prd.md")

        assert result.completion_percentage == 40.0
        assert result.completed_sections == ["Executive Summary", "User Personas"]
        assert "Success Criteria" in result.missing_sections
        assert result.ready_for_transition is False

    @pytest.mark.asyncio
    async def test_without_content_capture_nothing_is_complete(self, orchestrator):
        result = await orchestrator.evaluate_phase_completion("design", "design.md")

        assert result.completion_percentage == 0.0
        assert result.quality_score == 0.0


class TestSuggestNextPhase:
    """Tests for forward-looking suggestions."""

    @pytest.mark.parametrize("current", ["implementation", "unknown-phase"])
    def test_final_or_unknown_phase_stays_put(self, orchestrator, current):
        for any_status in (status(0.0, 0.0), status(100.0, 1.0)):
            suggestion = orchestrator.suggest_next_phase(current, any_status)
            assert suggestion.next_phase == current
            assert suggestion.confidence == 1.0

    def test_not_ready_still_points_forward(self, orchestrator):
        suggestion = orchestrator.suggest_next_phase(
            "prd", status(40.0, 0.2, missing=["Success Criteria"])
        )

        assert suggestion.next_phase == "requirements"
        assert suggestion.recommended_agent == "requirements-gatherer"
        assert suggestion.confidence == 0.3
        assert suggestion.prerequisites == ["Success Criteria"]

    def test_ready_uses_canned_reason(self, orchestrator):
        suggestion = orchestrator.suggest_next_phase("requirements", status(100.0, 0.9))

        assert suggestion.next_phase == "design"
        assert suggestion.confidence == 0.9
        assert suggestion.reason.startswith("Requirements are well-defined")
        assert suggestion.estimated_duration == "60-90 minutes"


class TestValidatePhaseTransition:
    """Tests for transition validation."""

    def test_skipping_phases_warns_but_stays_valid(self, orchestrator):
        result = orchestrator.validate_phase_transition("prd", "implementation")

        assert result.valid is True
        assert any("Skipping" in warning for warning in result.warnings)
        assert result.skipped_phases == ["requirements", "design"]
        assert result.recommendations == [
            "Consider completing these phases first: requirements, design"
        ]

    def test_backward_transition_warns(self, orchestrator):
        result = orchestrator.validate_phase_transition("design", "prd")

        assert result.valid is True
        assert any("backwards" in warning for warning in result.warnings)

    def test_adjacent_transition_has_prerequisites(self, orchestrator):
        result = orchestrator.validate_phase_transition("concept", "requirements")

        assert result.valid is True
        assert result.warnings == []
        assert "Define target users" in result.prerequisites

    def test_unknown_phases_are_errors(self, orchestrator):
        result = orchestrator.validate_phase_transition("ideation", "launch")

        assert result.valid is False
        assert result.errors == [
            "Invalid source phase: ideation",
            "Invalid target phase: launch",
        ]


class TestExecutePhaseTransition:
    """Tests for executing a suggestion."""

    @pytest.mark.asyncio
    async def test_forward_transition(self, orchestrator):
        suggestion = WorkflowSuggestion(
            next_phase="design",
            recommended_agent="solution-architect",
            reason="ready",
            confidence=0.9,
        )

        result = await orchestrator.execute_phase_transition(suggestion)

        assert result.success is True
        assert result.from_phase == "requirements"
        assert result.to_phase == "design"
        assert "Design system architecture" in result.next_steps

    @pytest.mark.asyncio
    async def test_first_phase_has_unknown_source(self, orchestrator):
        suggestion = WorkflowSuggestion(
            next_phase="prd", recommended_agent="prd-creator", reason="", confidence=1.0
        )

        result = await orchestrator.execute_phase_transition(suggestion)

        assert result.success is False
        assert result.from_phase == "unknown"
        assert result.message == "Transition failed: Invalid source phase: unknown"

    @pytest.mark.asyncio
    async def test_exception_becomes_failed_result(self, orchestrator):
        suggestion = WorkflowSuggestion(
            next_phase="design", recommended_agent="solution-architect", reason="", confidence=0.9
        )

        with patch.object(
            orchestrator, "validate_phase_transition", side_effect=RuntimeError("boom")
        ):
            result = await orchestrator.execute_phase_transition(suggestion)

        assert result.success is False
        assert result.message == "Transition failed: boom"
