"""LLM providers for agent prose generation."""

from docflow.providers.llm.base import (
    FINISH_REASON_CANCELLED,
    FINISH_REASON_STOP,
    CancellationToken,
    LLMMessage,
    LLMProvider,
    LLMResponse,
    ModelError,
    ProviderError,
    RateLimitError,
    TokenUsage,
)
from docflow.providers.llm.mock import MockLLMProvider

__all__ = [
    # Data models
    "LLMMessage",
    "LLMResponse",
    "TokenUsage",
    "CancellationToken",
    "FINISH_REASON_CANCELLED",
    "FINISH_REASON_STOP",
    # Providers
    "LLMProvider",
    "MockLLMProvider",
    # Errors
    "ProviderError",
    "RateLimitError",
    "ModelError",
]
