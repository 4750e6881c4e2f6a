"""In-memory progress tracking."""

from typing import Any

from docflow.conversation.interfaces import ProgressTracker
from docflow.conversation.models import ProgressStatus

# (max remaining percentage, estimate) buckets, checked in order
REMAINING_TIME_BUCKETS: list[tuple[float, str]] = [
    (10.0, "5-10 minutes"),
    (25.0, "10-20 minutes"),
    (50.0, "20-35 minutes"),
    (75.0, "35-50 minutes"),
]
LONGEST_ESTIMATE = "50-75 minutes"


def estimate_time_remaining(completion_percentage: float) -> str:
    """Bucketed estimate of the time left from a completion percentage."""
    remaining = 100.0 - completion_percentage
    for limit, estimate in REMAINING_TIME_BUCKETS:
        if remaining <= limit:
            return estimate
    return LONGEST_ESTIMATE


class InMemoryProgressTracker(ProgressTracker):
    """ProgressTracker keeping one snapshot per session in memory.

    When an update changes the section lists, the completion percentage
    is recomputed from them. The remaining-time estimate is recomputed
    unless the update supplies one.
    """

    def __init__(self) -> None:
        self._progress: dict[str, ProgressStatus] = {}

    def calculate_progress(self, session_id: str) -> ProgressStatus:
        existing = self._progress.get(session_id)
        if existing is not None:
            return existing.model_copy(deep=True)
        return ProgressStatus(estimated_time_remaining=estimate_time_remaining(0.0))

    def update_progress(self, session_id: str, **updates: Any) -> None:
        current = self.calculate_progress(session_id)
        merged = current.model_copy(update=updates)

        if "completed_sections" in updates or "pending_sections" in updates:
            total = len(merged.completed_sections) + len(merged.pending_sections)
            merged.completion_percentage = (
                len(merged.completed_sections) / total * 100 if total else 0.0
            )

        if "estimated_time_remaining" not in updates:
            merged.estimated_time_remaining = estimate_time_remaining(
                merged.completion_percentage
            )
        # model_copy(update=) skips validation, so rebuild the snapshot
        self._progress[session_id] = ProgressStatus.model_validate(merged.model_dump())

    def clear(self, session_id: str) -> None:
        self._progress.pop(session_id, None)
