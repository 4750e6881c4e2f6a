"""Tests for AutoSessionStateManager."""

import json
from unittest.mock import AsyncMock

import pytest

from docflow.config.models import AutoSessionConfig
from docflow.routing.autosession import AutoSessionStateManager
from docflow.routing.stores import InMemoryStateStore, StateStoreError
from tests.factories import FakeClock


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryStateStore:
    return InMemoryStateStore()


@pytest.fixture
def manager(store, clock) -> AutoSessionStateManager:
    return AutoSessionStateManager(store, clock=clock)


class TestEnableDisable:
    @pytest.mark.asyncio
    async def test_enable(self, manager):
        await manager.enable("prd-creator", document_path="docs/prd.md")

        assert await manager.is_active() is True
        context = await manager.get_context()
        assert context.agent_name == "prd-creator"
        assert context.document_path == "docs/prd.md"

    @pytest.mark.asyncio
    async def test_disable(self, manager):
        await manager.enable("prd-creator")
        await manager.disable()

        assert await manager.is_active() is False
        assert await manager.get_context() is None

    @pytest.mark.asyncio
    async def test_disabled_by_config(self, store, clock):
        manager = AutoSessionStateManager(store, AutoSessionConfig(enabled=False), clock)

        await manager.enable("prd-creator")

        assert await manager.is_active() is False


class TestExpiry:
    """Lazy expiry: a read after the timeout reports inactive and clears."""

    @pytest.mark.asyncio
    async def test_active_until_timeout(self, manager, clock):
        await manager.enable("prd-creator")
        clock.advance(minutes=30)

        assert await manager.is_active() is True

    @pytest.mark.asyncio
    async def test_expired_read_clears(self, manager, clock, store):
        await manager.enable("prd-creator")
        clock.advance(minutes=30, seconds=1)

        assert await manager.is_active() is False
        assert manager.get_stats().is_active is False
        persisted = json.loads(await store.get("auto_session_state"))
        assert persisted["isActive"] is False
        assert persisted["context"] is None

    @pytest.mark.asyncio
    async def test_activity_extends_session(self, manager, clock):
        await manager.enable("prd-creator")
        clock.advance(minutes=20)
        await manager.update_activity()
        clock.advance(minutes=20)

        assert await manager.is_active() is True

    @pytest.mark.asyncio
    async def test_custom_timeout(self, store, clock):
        manager = AutoSessionStateManager(store, AutoSessionConfig(timeout_minutes=5), clock)
        await manager.enable("prd-creator")
        clock.advance(minutes=6)

        assert await manager.cleanup_expired() is True
        assert await manager.cleanup_expired() is False


class TestPersistence:
    """Tests for the persisted record."""

    @pytest.mark.asyncio
    async def test_record_shape(self, manager, store):
        await manager.enable("prd-creator", document_path="docs/prd.md")
        await manager.update_activity()

        record = json.loads(await store.get("auto_session_state"))
        assert record["isActive"] is True
        assert record["messageCount"] == 1
        assert record["context"]["agentName"] == "prd-creator"
        assert record["context"]["documentPath"] == "docs/prd.md"
        assert {"enabledAt", "lastActivity"} <= set(record["context"])
        assert manager.to_record() == record

    @pytest.mark.asyncio
    async def test_survives_restart(self, store, clock):
        first = AutoSessionStateManager(store, clock=clock)
        await first.enable("solution-architect")
        await first.set_conversation_session_id("s-42")

        second = AutoSessionStateManager(store, clock=clock)
        await second.load()

        context = await second.get_context()
        assert context.agent_name == "solution-architect"
        assert context.conversation_session_id == "s-42"

    @pytest.mark.asyncio
    async def test_expired_record_dropped_on_load(self, store, clock):
        first = AutoSessionStateManager(store, clock=clock)
        await first.enable("solution-architect")
        clock.advance(hours=2)

        second = AutoSessionStateManager(store, clock=clock)
        await second.load()

        assert await second.is_active() is False

    @pytest.mark.asyncio
    async def test_store_failures_not_raised(self, clock):
        store = AsyncMock()
        store.set.side_effect = StateStoreError("redis down")
        store.get.side_effect = StateStoreError("redis down")
        manager = AutoSessionStateManager(store, clock=clock)

        await manager.load()
        await manager.enable("prd-creator")

        assert await manager.is_active() is True


class TestStats:
    @pytest.mark.asyncio
    async def test_stats(self, manager, clock):
        await manager.enable("prd-creator", document_path="docs/prd.md")
        clock.advance(minutes=3)
        await manager.update_activity()
        await manager.update_activity()

        stats = manager.get_stats()
        assert stats.is_active is True
        assert stats.agent_name == "prd-creator"
        assert stats.message_count == 2
        assert stats.session_duration_seconds == 180

    def test_stats_when_inactive(self, manager):
        stats = manager.get_stats()
        assert stats.is_active is False
        assert stats.session_duration_seconds is None
