"""LLM data models, provider interface and error types.

This module provides the core types agents use to produce prose:
- LLMMessage: Input message format
- LLMResponse: Output response format
- TokenUsage: Token counting
- CancellationToken: Cooperative per-call cancellation
- LLMProvider: Provider interface
- Error types for different failure modes
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field

FINISH_REASON_STOP = "stop"
FINISH_REASON_CANCELLED = "cancelled"


class LLMMessage(BaseModel):
    """A message in a conversation."""

    role: str = Field(..., description="Role: system, user, or assistant")
    content: str = Field(..., description="Message content")


class TokenUsage(BaseModel):
    """Token usage statistics."""

    prompt_tokens: int = Field(..., description="Tokens in prompt")
    completion_tokens: int = Field(..., description="Tokens in completion")
    total_tokens: int = Field(..., description="Total tokens used")


class LLMResponse(BaseModel):
    """Response from an LLM call."""

    content: str = Field(..., description="Generated text")
    model: str = Field(..., description="Model used")
    finish_reason: str | None = Field(
        default=None, description="Why generation stopped"
    )
    usage: TokenUsage | None = Field(default=None, description="Token usage stats")
    metadata: dict[str, Any] = Field(
        default_factory=dict, description="Execution metadata"
    )

    @property
    def cancelled(self) -> bool:
        """Whether the call was cancelled before completing."""
        return self.finish_reason == FINISH_REASON_CANCELLED


class CancellationToken:
    """Cooperative cancellation flag threaded through to a provider call.

    Providers check the token and return a ``cancelled`` finish reason
    instead of raising.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def wait(self) -> None:
        """Block until the token is cancelled."""
        await self._event.wait()


class LLMProvider(ABC):
    """Abstract interface for text generation."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name."""
        pass

    @abstractmethod
    async def generate(
        self,
        messages: list[LLMMessage],
        *,
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        cancellation: CancellationToken | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """Generate a completion for the messages.

        Args:
            messages: Conversation so far
            model: Model override
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            cancellation: Token that aborts the call when cancelled

        Returns:
            LLMResponse; ``finish_reason`` is ``"cancelled"`` when the
            token fired before generation finished
        """
        pass


# ============================================================================
# Error Types
# ============================================================================


class ProviderError(Exception):
    """Base exception for LLM provider errors."""

    pass


class RateLimitError(ProviderError):
    """Rate limit exceeded."""

    pass


class ModelError(ProviderError):
    """Model not found or unavailable."""

    pass
