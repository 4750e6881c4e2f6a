"""Typed errors raised by the conversation engine."""

from enum import Enum

from docflow.errors import DocflowError


class ConversationErrorCode(str, Enum):
    """Failure codes surfaced by conversation operations."""

    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    SESSION_INACTIVE = "SESSION_INACTIVE"
    NO_CURRENT_QUESTION = "NO_CURRENT_QUESTION"
    START_CONVERSATION_FAILED = "START_CONVERSATION_FAILED"
    CONTINUE_CONVERSATION_FAILED = "CONTINUE_CONVERSATION_FAILED"
    END_CONVERSATION_FAILED = "END_CONVERSATION_FAILED"


class ConversationError(DocflowError):
    """Error raised by a conversation operation.

    Carries the session it concerns and whether the caller can retry or
    restart the conversation.
    """

    def __init__(
        self,
        message: str,
        code: ConversationErrorCode,
        session_id: str | None = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.session_id = session_id
        self.recoverable = recoverable

    def __repr__(self) -> str:
        return (
            f"ConversationError(code={self.code.value!r}, "
            f"session_id={self.session_id!r}, message={self.message!r})"
        )
