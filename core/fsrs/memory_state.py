"""
Memory State - FSRS Card State and Retrievability

Defines the per-item memory state and the derived quantities the scheduler
needs.

Key concepts:
- Stability (S): Days until recall probability falls to 90%
- Difficulty (D): How hard the card is to learn (1-10 scale)
- Retrievability (R): Probability of successful recall at time t
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
import math

from core.fsrs.constants import DECAY, FACTOR, State


SECONDS_PER_DAY = 86400


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Convert to aware UTC; naive values are taken as UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass
class CardState:
    """
    Memory state for a single vocabulary item.

    A CardState is owned by exactly one item and is replaced, never shared,
    when the item is reviewed.
    """
    due: datetime = field(default_factory=utc_now)

    # Long-term memory parameters
    stability: float = 0.0  # S, in days
    difficulty: float = 0.0  # D, range 1-10 once reviewed

    # Interval bookkeeping
    elapsed_days: int = 0  # Days since the previous review, at review time
    scheduled_days: int = 0  # Interval chosen at the last review

    # Review tracking
    reps: int = 0
    lapses: int = 0
    state: State = State.NEW
    last_review: Optional[datetime] = None

    @property
    def is_new(self) -> bool:
        return self.state == State.NEW


def new_card(now: Optional[datetime] = None) -> CardState:
    """
    Initialize state for a card that has never been reviewed.

    Args:
        now: Creation time, which is also the first due date (defaults to now;
            naive values are taken as UTC)

    Returns:
        CardState in phase NEW with zeroed counters
    """
    if now is None:
        now = utc_now()
    return CardState(due=as_utc(now))


def calculate_retrievability(stability: float, elapsed_days: float) -> float:
    """
    Calculate retrievability on the power forgetting curve.

    Formula: R = (1 + FACTOR * t / S) ^ DECAY

    Interpretation:
    - Immediately after review: R = 1.0
    - After S days: R = 0.9
    - Decays smoothly towards 0 afterwards

    Args:
        stability: Current stability in days
        elapsed_days: Time since last review in days

    Returns:
        Retrievability between 0 and 1
    """
    if stability <= 0:
        return 0.0
    if elapsed_days <= 0:
        return 1.0
    return math.pow(1.0 + FACTOR * elapsed_days / stability, DECAY)


def days_between(earlier: Optional[datetime], later: datetime) -> int:
    """
    Whole days from `earlier` to `later`, floored and never negative.

    Returns 0 when `earlier` is None (card never reviewed).
    """
    if earlier is None:
        return 0
    seconds = (later - earlier).total_seconds()
    return max(0, math.floor(seconds / SECONDS_PER_DAY))
