"""Completion scoring for a conversation's state."""

from docflow.conversation.models import ConversationState

# A conversation counts as fully answered only after this many answers
MIN_EXPECTED_ANSWERS = 3
ANSWER_WEIGHT = 0.8
EXTRACTION_BONUS = 0.2


def calculate_completion_score(state: ConversationState) -> float:
    """Derive the completion score from answered questions and extracted data.

    The result depends only on the current contents of
    ``answered_questions`` and ``extracted_data``, so recomputing it on
    unchanged state yields the same value.

    Args:
        state: Conversation state to score

    Returns:
        Score in [0.0, 1.0]
    """
    answered = len(state.answered_questions)
    expected = max(MIN_EXPECTED_ANSWERS, answered)
    ratio = min(answered / expected, 1.0)
    bonus = EXTRACTION_BONUS if state.extracted_data else 0.0
    return min(ratio * ANSWER_WEIGHT + bonus, 1.0)
