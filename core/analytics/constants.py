"""
Constants for vocabulary analytics.
"""

from __future__ import annotations

from typing import Final

from core.fsrs import State


STATE_LABELS: Final[dict[State, str]] = {
    State.NEW: "New",
    State.LEARNING: "Learning",
    State.REVIEW: "Review",
    State.RELEARNING: "Relearning",
}

SNAPSHOT_COLUMNS: Final[list[str]] = [
    "text",
    "state",
    "due",
    "stability",
    "difficulty",
    "reps",
    "lapses",
    "last_review",
    "retrievability",
]
