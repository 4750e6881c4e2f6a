"""Document-authoring agents and the directory that serves them."""

from docflow.agents.directory import (
    AgentDirectory,
    AgentNotFoundError,
    AgentRequestCancelledError,
    InMemoryAgentDirectory,
)
from docflow.agents.models import DEFAULT_AGENTS, Agent, AgentReply

__all__ = [
    "Agent",
    "AgentReply",
    "DEFAULT_AGENTS",
    "AgentDirectory",
    "InMemoryAgentDirectory",
    "AgentNotFoundError",
    "AgentRequestCancelledError",
]
