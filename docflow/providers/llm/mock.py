"""Mock LLM provider for testing."""

from typing import Any

from docflow.providers.llm.base import (
    FINISH_REASON_CANCELLED,
    FINISH_REASON_STOP,
    CancellationToken,
    LLMMessage,
    LLMProvider,
    LLMResponse,
    TokenUsage,
)


class MockLLMProvider(LLMProvider):
    """Mock LLM provider for testing.

    Returns configurable responses without making actual API calls.
    Useful for unit testing and development.
    """

    def __init__(
        self,
        default_response: str = "Mock response",
        default_model: str = "mock-model",
        responses: dict[str, str] | None = None,
    ):
        """Initialize mock provider.

        Args:
            default_response: Response to return when no match found
            default_model: Model name to report
            responses: Dict mapping last message content to responses
        """
        self._default_response = default_response
        self._default_model = default_model
        self._responses = responses or {}
        self._call_history: list[dict[str, Any]] = []

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "mock"

    @property
    def call_history(self) -> list[dict[str, Any]]:
        """Return history of calls for testing assertions."""
        return self._call_history

    def set_response(self, trigger: str, response: str) -> None:
        """Set a response for a specific message content."""
        self._responses[trigger] = response

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
        """Generate mock response."""
        self._call_history.append({
            "messages": messages,
            "model": model or self._default_model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "kwargs": kwargs,
        })

        if cancellation is not None and cancellation.is_cancelled:
            return LLMResponse(
                content="",
                model=model or self._default_model,
                finish_reason=FINISH_REASON_CANCELLED,
            )

        content = self._default_response
        if messages:
            last_message = messages[-1].content
            if last_message in self._responses:
                content = self._responses[last_message]

        # Truncate to max_tokens (rough approximation)
        token_limit = max_tokens * 4
        if len(content) > token_limit:
            content = content[:token_limit]

        prompt_tokens = sum(len(m.content) // 4 for m in messages)
        completion_tokens = len(content) // 4
        return LLMResponse(
            content=content,
            model=model or self._default_model,
            finish_reason=FINISH_REASON_STOP,
            usage=TokenUsage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
            ),
        )
