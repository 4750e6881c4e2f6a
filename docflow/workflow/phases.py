"""Static workflow tables: phase order, required sections, agents.

These tables are fixed policy. They are not configurable at runtime.
"""

from docflow.workflow.models import WorkflowPhase

WORKFLOW_PHASES: tuple[str, ...] = tuple(phase.value for phase in WorkflowPhase)

# Alternative names accepted wherever a phase name is parsed
PHASE_ALIASES: dict[str, str] = {
    "concept": WorkflowPhase.PRD.value,
}

PHASE_REQUIREMENTS: dict[str, list[str]] = {
    "prd": [
        "Executive Summary",
        "Product Objectives",
        "User Personas",
        "Functional Requirements",
        "Success Criteria",
    ],
    "requirements": [
        "Introduction",
        "Functional Requirements",
        "Non-Functional Requirements",
        "User Stories",
        "Acceptance Criteria",
    ],
    "design": [
        "Overview",
        "Architecture",
        "Components and Interfaces",
        "Data Models",
        "Error Handling",
    ],
    "implementation": [
        "Implementation Plan",
        "Task Breakdown",
        "Testing Strategy",
        "Deployment Plan",
    ],
}

PHASE_AGENTS: dict[str, str] = {
    "prd": "prd-creator",
    "requirements": "requirements-gatherer",
    "design": "solution-architect",
    "implementation": "specification-writer",
}
DEFAULT_AGENT = "prd-creator"

TRANSITION_REASONS: dict[tuple[str, str], str] = {
    ("prd", "requirements"): (
        "Your PRD is complete! Now let's gather detailed requirements using EARS format."
    ),
    ("prd", "design"): "Ready to move to technical design based on your PRD.",
    ("prd", "implementation"): "Ready to create implementation specifications.",
    ("requirements", "design"): (
        "Requirements are well-defined! Time to design the technical solution."
    ),
    ("requirements", "implementation"): "Ready to create detailed implementation plans.",
    ("design", "implementation"): (
        "Design is complete! Let's create the implementation roadmap."
    ),
}

PHASE_DURATIONS: dict[str, str] = {
    "prd": "30-45 minutes",
    "requirements": "45-60 minutes",
    "design": "60-90 minutes",
    "implementation": "30-45 minutes",
}
DEFAULT_PHASE_DURATION = "30-60 minutes"

TRANSITION_PREREQUISITES: dict[tuple[str, str], list[str]] = {
    ("prd", "requirements"): [
        "Complete product vision",
        "Define target users",
        "Identify core features",
    ],
    ("prd", "design"): ["Complete PRD", "Validate with stakeholders"],
    ("prd", "implementation"): ["Complete PRD", "Get design approval"],
    ("requirements", "design"): [
        "All user stories defined",
        "Acceptance criteria written",
        "Requirements reviewed",
    ],
    ("requirements", "implementation"): [
        "Requirements approved",
        "Technical constraints identified",
    ],
    ("design", "implementation"): [
        "Architecture approved",
        "Technical design complete",
        "Dependencies identified",
    ],
}

PHASE_NEXT_STEPS: dict[str, list[str]] = {
    "prd": [
        "Define your product vision and goals",
        "Identify target users and their needs",
        "Outline core features and functionality",
        "Establish success metrics",
    ],
    "requirements": [
        "Create detailed user stories",
        "Write acceptance criteria in EARS format",
        "Define non-functional requirements",
        "Identify edge cases and constraints",
    ],
    "design": [
        "Design system architecture",
        "Define component interfaces",
        "Create data models",
        "Plan error handling strategy",
    ],
    "implementation": [
        "Break down work into tasks",
        "Create implementation timeline",
        "Define testing approach",
        "Plan deployment strategy",
    ],
}
DEFAULT_NEXT_STEPS = ["Begin working on the next phase"]


def normalize_phase(phase: str) -> str:
    """Map a phase name or alias to its canonical name.

    Unknown names are returned unchanged (lowercased) so callers can
    report them.
    """
    key = phase.strip().lower()
    return PHASE_ALIASES.get(key, key)


def phase_index(phase: str) -> int:
    """Position of a phase in the workflow, or -1 if unknown."""
    try:
        return WORKFLOW_PHASES.index(normalize_phase(phase))
    except ValueError:
        return -1
