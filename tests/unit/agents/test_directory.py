"""Tests for InMemoryAgentDirectory."""

import pytest

from docflow.agents import (
    Agent,
    AgentNotFoundError,
    AgentRequestCancelledError,
    InMemoryAgentDirectory,
)
from docflow.providers.llm import CancellationToken, MockLLMProvider


@pytest.fixture
def provider() -> MockLLMProvider:
    return MockLLMProvider(default_response="Here is a first outline.")


@pytest.fixture
def directory(provider) -> InMemoryAgentDirectory:
    return InMemoryAgentDirectory(provider)


class TestRoster:
    def test_default_roster(self, directory):
        names = [agent.name for agent in directory.list_agents()]
        assert names == [
            "prd-creator",
            "brainstormer",
            "requirements-gatherer",
            "solution-architect",
            "specification-writer",
        ]

    def test_disabled_agents_hidden(self, provider):
        directory = InMemoryAgentDirectory(
            provider,
            [
                Agent(name="on", workflow_phase="prd", system_prompt="p"),
                Agent(name="off", workflow_phase="prd", system_prompt="p", enabled=False),
            ],
        )
        assert directory.get_agent("off") is None
        assert directory.get_agent("on") is not None


class TestCurrentAgent:
    def test_none_selected_initially(self, directory):
        assert directory.current_agent() is None

    def test_set_current_agent(self, directory):
        agent = directory.set_current_agent("solution-architect")

        assert agent.workflow_phase == "design"
        assert directory.current_agent() == agent

    def test_unknown_agent(self, directory):
        with pytest.raises(AgentNotFoundError, match="Agent not found: nobody"):
            directory.set_current_agent("nobody")


class TestHandleRequest:
    """Tests for handle_request."""

    @pytest.mark.asyncio
    async def test_reply_from_provider(self, directory, provider):
        reply = await directory.handle_request("prd-creator", "Draft an outline")

        assert reply.agent_name == "prd-creator"
        assert reply.content == "Here is a first outline."
        messages = provider.call_history[0]["messages"]
        assert messages[0].role == "system"
        assert messages[1].content == "Draft an outline"

    @pytest.mark.asyncio
    async def test_cancelled_request_raises(self, directory):
        token = CancellationToken()
        token.cancel()

        with pytest.raises(AgentRequestCancelledError) as exc_info:
            await directory.handle_request("prd-creator", "Draft an outline", token)

        assert str(exc_info.value) == "Request to prd-creator was cancelled"

    @pytest.mark.asyncio
    async def test_unknown_agent(self, directory):
        with pytest.raises(AgentNotFoundError):
            await directory.handle_request("nobody", "hello")
