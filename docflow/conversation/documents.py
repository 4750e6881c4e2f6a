"""Turning answers into document section updates."""

from docflow.conversation.models import DocumentUpdate, Question, UpdateType

MIN_CONTENT_CHARS = 10
DEFAULT_SECTION_MAP = "prd-creator"

SECTION_MAPS: dict[str, dict[str, str]] = {
    "prd-creator": {
        "problem-definition": "Problem Statement",
        "solution-definition": "Solution Overview",
        "user-identification": "User Personas",
        "goals": "Product Objectives",
        "success-metrics": "Success Criteria",
        "constraints": "Constraints",
        "default": "Product Details",
    },
    "requirements-gatherer": {
        "user-story": "User Stories",
        "acceptance-criteria": "Acceptance Criteria",
        "functional-requirements": "Functional Requirements",
        "non-functional-requirements": "Non-Functional Requirements",
        "default": "Requirements",
    },
    "solution-architect": {
        "architecture": "Architecture",
        "components": "Components and Interfaces",
        "data": "Data Models",
        "integration": "Integrations",
        "default": "Technical Design",
    },
    "specification-writer": {
        "tasks": "Task Breakdown",
        "timeline": "Timeline",
        "resources": "Resource Planning",
        "dependencies": "Dependencies",
        "default": "Implementation Plan",
    },
}


class DocumentUpdateBuilder:
    """Maps an answered question to an append to its document section."""

    def __init__(self, section_maps: dict[str, dict[str, str]] | None = None) -> None:
        self._maps = section_maps or SECTION_MAPS

    def section_for(self, question: Question, agent_name: str) -> str:
        mapping = self._maps.get(agent_name) or SECTION_MAPS[DEFAULT_SECTION_MAP]
        return mapping.get(question.category, mapping["default"])

    def build(self, agent_name: str, response: str, question: Question) -> list[DocumentUpdate]:
        """Return at most one update; answers too short to be useful yield none."""
        text = response.strip()
        if len(text) < MIN_CONTENT_CHARS:
            return []

        label = question.category or "Response"
        if agent_name == "requirements-gatherer":
            content = f"**{label}:** {text}"
        else:
            content = text

        return [
            DocumentUpdate(
                section=self.section_for(question, agent_name),
                content=content,
                update_type=UpdateType.APPEND,
            )
        ]
