"""External AI services used by agents.

Abstract interfaces for prose generation with a mock implementation for
development and tests.
"""

from docflow.providers.llm import CancellationToken, LLMProvider, MockLLMProvider

__all__ = [
    "CancellationToken",
    "LLMProvider",
    "MockLLMProvider",
]
