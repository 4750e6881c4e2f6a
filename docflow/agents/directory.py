"""Agent directory: the router's fallback for free-text input."""

from abc import ABC, abstractmethod

from docflow.agents.models import DEFAULT_AGENTS, Agent, AgentReply
from docflow.errors import DocflowError
from docflow.observability.logging import get_logger
from docflow.providers.llm import CancellationToken, LLMMessage, LLMProvider

logger = get_logger(__name__)


class AgentNotFoundError(DocflowError):
    """Raised when an agent name is not in the directory."""

    def __init__(self, agent_name: str) -> None:
        super().__init__(f"Agent not found: {agent_name}")
        self.agent_name = agent_name


class AgentRequestCancelledError(DocflowError):
    """Raised when an agent's language-model call was cancelled."""

    def __init__(self, agent_name: str) -> None:
        super().__init__(f"Request to {agent_name} was cancelled")
        self.agent_name = agent_name


class AgentDirectory(ABC):
    """Looks up agents and hands them free-text requests."""

    @abstractmethod
    def current_agent(self) -> Agent | None:
        """Get the selected agent, if any."""
        pass

    @abstractmethod
    def get_agent(self, name: str) -> Agent | None:
        """Get an agent by name."""
        pass

    @abstractmethod
    def set_current_agent(self, name: str) -> Agent:
        """Select an agent.

        Raises:
            AgentNotFoundError: If no agent has that name
        """
        pass

    @abstractmethod
    async def handle_request(
        self,
        agent_name: str,
        text: str,
        cancellation: CancellationToken | None = None,
    ) -> AgentReply:
        """Have an agent answer a free-text request.

        Raises:
            AgentNotFoundError: If no agent has that name
            AgentRequestCancelledError: If the call was cancelled
        """
        pass


class InMemoryAgentDirectory(AgentDirectory):
    """AgentDirectory over a fixed roster, answering through an LLMProvider.

    No agent is selected until ``set_current_agent`` is called.
    """

    def __init__(
        self,
        provider: LLMProvider,
        agents: list[Agent] | None = None,
    ) -> None:
        self._provider = provider
        roster = agents if agents is not None else DEFAULT_AGENTS
        self._agents = {agent.name: agent for agent in roster if agent.enabled}
        self._current: str | None = None

    def list_agents(self) -> list[Agent]:
        return list(self._agents.values())

    def current_agent(self) -> Agent | None:
        return self._agents.get(self._current) if self._current else None

    def get_agent(self, name: str) -> Agent | None:
        return self._agents.get(name)

    def set_current_agent(self, name: str) -> Agent:
        agent = self._agents.get(name)
        if agent is None:
            raise AgentNotFoundError(name)
        self._current = name
        logger.info("current_agent_set", agent_name=name)
        return agent

    async def handle_request(
        self,
        agent_name: str,
        text: str,
        cancellation: CancellationToken | None = None,
    ) -> AgentReply:
        agent = self._agents.get(agent_name)
        if agent is None:
            raise AgentNotFoundError(agent_name)

        response = await self._provider.generate(
            [
                LLMMessage(role="system", content=agent.system_prompt),
                LLMMessage(role="user", content=text),
            ],
            cancellation=cancellation,
        )
        if response.cancelled:
            logger.info("agent_request_cancelled", agent_name=agent_name)
            raise AgentRequestCancelledError(agent_name)

        logger.debug(
            "agent_request_handled",
            agent_name=agent_name,
            input_length=len(text),
            output_length=len(response.content),
        )
        return AgentReply(
            agent_name=agent_name,
            content=response.content,
            finish_reason=response.finish_reason,
        )
