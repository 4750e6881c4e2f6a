"""Test factories and doubles shared across the suite."""

from tests.factories.conversation import (
    FakeClock,
    QuestionFactory,
    StubQuestionGenerator,
    StubResponseAnalyzer,
)

__all__ = [
    "FakeClock",
    "QuestionFactory",
    "StubQuestionGenerator",
    "StubResponseAnalyzer",
]
