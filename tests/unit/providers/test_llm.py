"""Tests for LLM providers."""

import asyncio

import pytest

from docflow.providers.llm import (
    FINISH_REASON_CANCELLED,
    CancellationToken,
    LLMMessage,
    LLMResponse,
    MockLLMProvider,
    ProviderError,
    RateLimitError,
)


class TestMockLLMProvider:
    """Tests for MockLLMProvider."""

    @pytest.fixture
    def provider(self) -> MockLLMProvider:
        return MockLLMProvider(default_response="Test response")

    @pytest.mark.asyncio
    async def test_generate_returns_default_response(self, provider):
        response = await provider.generate([LLMMessage(role="user", content="Hello")])

        assert isinstance(response, LLMResponse)
        assert response.content == "Test response"
        assert response.model == "mock-model"
        assert response.finish_reason == "stop"
        assert response.cancelled is False

    @pytest.mark.asyncio
    async def test_generate_custom_response(self, provider):
        provider.set_response("Summarize the PRD", "A budgeting app for students.")

        response = await provider.generate(
            [LLMMessage(role="user", content="Summarize the PRD")]
        )
        assert response.content == "A budgeting app for students."

    @pytest.mark.asyncio
    async def test_generate_tracks_call_history(self, provider):
        await provider.generate([LLMMessage(role="user", content="Hello")], temperature=0.5)

        assert len(provider.call_history) == 1
        assert provider.call_history[0]["temperature"] == 0.5

    @pytest.mark.asyncio
    async def test_cancelled_token_yields_cancelled_finish_reason(self, provider):
        token = CancellationToken()
        token.cancel()

        response = await provider.generate(
            [LLMMessage(role="user", content="Hello")], cancellation=token
        )

        assert response.finish_reason == FINISH_REASON_CANCELLED
        assert response.cancelled is True
        assert response.content == ""

    def test_provider_name(self, provider):
        assert provider.provider_name == "mock"


class TestCancellationToken:
    @pytest.mark.asyncio
    async def test_wait_released_by_cancel(self):
        token = CancellationToken()
        assert token.is_cancelled is False

        waiter = asyncio.create_task(token.wait())
        token.cancel()
        await asyncio.wait_for(waiter, timeout=1)

        assert token.is_cancelled is True


class TestProviderErrors:
    def test_rate_limit_is_provider_error(self):
        assert issubclass(RateLimitError, ProviderError)
