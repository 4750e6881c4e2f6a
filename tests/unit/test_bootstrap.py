"""Tests for stack bootstrap."""

import pytest

from docflow.bootstrap import bootstrap, create_state_store
from docflow.config.models import StorageConfig
from docflow.config.settings import Settings
from docflow.conversation.models import ConversationContext
from docflow.providers.llm import MockLLMProvider
from docflow.routing.stores import InMemoryStateStore, RedisStateStore


class TestCreateStateStore:
    def test_inmemory(self):
        assert isinstance(create_state_store(StorageConfig()), InMemoryStateStore)

    def test_redis(self):
        store = create_state_store(
            StorageConfig(state_backend="redis", key_prefix="test", ttl_seconds=60)
        )
        assert isinstance(store, RedisStateStore)


class TestBootstrap:
    @pytest.mark.asyncio
    async def test_wires_stack(self, tmp_path):
        settings = Settings(workspace_root=str(tmp_path))

        stack = await bootstrap(settings)

        assert stack.settings is settings
        assert isinstance(stack.state_store, InMemoryStateStore)
        assert stack.router.has_active_session() is False

    @pytest.mark.asyncio
    async def test_conversation_through_router(self, tmp_path):
        stack = await bootstrap(
            Settings(workspace_root=str(tmp_path)),
            provider=MockLLMProvider(default_response="Happy to help"),
        )

        session = await stack.router.start_session(
            "prd-creator", ConversationContext(document_type="prd")
        )
        result = await stack.router.route_user_input(
            "Students lose track of shared expenses on group trips"
        )

        assert result.routed_to == "conversation"
        assert result.session_id == session.session_id
        assert await stack.auto_session.is_active() is True

    @pytest.mark.asyncio
    async def test_agent_fallback(self, tmp_path):
        stack = await bootstrap(
            Settings(workspace_root=str(tmp_path)),
            provider=MockLLMProvider(default_response="Happy to help"),
        )
        stack.directory.set_current_agent("brainstormer")

        result = await stack.router.route_user_input("Give me three ideas")

        assert result.routed_to == "agent"
        assert result.agent_reply.content == "Happy to help"
