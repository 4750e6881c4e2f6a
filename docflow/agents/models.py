"""Agent models and the built-in roster."""

from pydantic import BaseModel, ConfigDict, Field


class Agent(BaseModel):
    """A named persona that runs one workflow phase."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Unique agent name")
    workflow_phase: str = Field(..., description="Phase the agent runs")
    description: str = Field(default="", description="One-line summary")
    system_prompt: str = Field(..., description="Prompt prepended to requests")
    enabled: bool = Field(default=True)


class AgentReply(BaseModel):
    """Prose produced by an agent for a free-text request."""

    agent_name: str
    content: str
    finish_reason: str | None = None


DEFAULT_AGENTS: list[Agent] = [
    Agent(
        name="prd-creator",
        workflow_phase="prd",
        description="Creates Product Requirements Documents from initial ideas",
        system_prompt=(
            "You are a PRD Creator agent that helps develop initial product ideas "
            "into comprehensive Product Requirements Documents."
        ),
    ),
    Agent(
        name="brainstormer",
        workflow_phase="prd",
        description="Facilitates ideation and concept exploration",
        system_prompt=(
            "You are a Brainstormer agent that facilitates ideation and concept "
            "exploration based on PRD context."
        ),
    ),
    Agent(
        name="requirements-gatherer",
        workflow_phase="requirements",
        description="Collects and structures business requirements",
        system_prompt=(
            "You are a Requirements Gatherer agent that systematically collects and "
            "structures business requirements using EARS format."
        ),
    ),
    Agent(
        name="solution-architect",
        workflow_phase="design",
        description="Designs technical solutions and architecture",
        system_prompt=(
            "You are a Solution Architect agent that designs technical solutions "
            "and system architecture."
        ),
    ),
    Agent(
        name="specification-writer",
        workflow_phase="implementation",
        description="Creates technical specifications and implementation plans",
        system_prompt=(
            "You are a Specification Writer agent that creates detailed technical "
            "specifications and implementation plans."
        ),
    ),
]
