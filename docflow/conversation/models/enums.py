"""Enums for the conversation domain."""

from enum import Enum


class QuestionKind(str, Enum):
    """How a question expects to be answered.

    Everything other than OPEN_ENDED is an enumerated kind.
    """

    OPEN_ENDED = "open-ended"
    MULTIPLE_CHOICE = "multiple-choice"
    STRUCTURED = "structured"
    YES_NO = "yes-no"


class TurnType(str, Enum):
    """Type of a recorded conversation turn."""

    SYSTEM = "system"
    QUESTION = "question"
    RESPONSE = "response"


class UpdateType(str, Enum):
    """How a document update is applied to its section."""

    REPLACE = "replace"
    APPEND = "append"
    PREPEND = "prepend"
    INSERT = "insert"
