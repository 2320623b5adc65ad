"""
FSRS - Free Spaced Repetition Scheduler

Scheduling core for the vocabulary trainer.

This package implements the FSRS v4 memory model with:
- Power forgetting curve: R = (1 + FACTOR * t / S) ^ DECAY
- Interpretable memory state (Stability, Difficulty, Retrievability)
- Four learning phases: New, Learning, Review, Relearning
- Versioned serialization of card state

Quick start:
    from core import fsrs

    card = fsrs.new_card(now)

    # Preview every outcome (no side effects)
    outcomes = fsrs.next_states(card, now)

    # Commit the one the reviewer picked
    card = outcomes[fsrs.Rating.GOOD]
"""

# Core scheduler API (algorithm logic)
from core.fsrs.scheduler import (
    FSRSParameters,
    ReviewLog,
    Scheduler,
    SchedulingInfo,
    SchedulingOutcomes,
    get_default_scheduler,
    next_states,
    process_review,
)

# Serialization
from core.fsrs.serialization import (
    deserialize_card,
    serialize_card,
)

# Constants and parameters
from core.fsrs.constants import (
    Rating,
    State,
    RATINGS,
    DECAY,
    FACTOR,
    DEFAULT_WEIGHTS,
    SERIALIZATION_VERSION,
)

# Memory state
from core.fsrs.memory_state import (
    CardState,
    as_utc,
    calculate_retrievability,
    days_between,
    new_card,
)


__all__ = [
    # Core algorithm
    "FSRSParameters",
    "ReviewLog",
    "Scheduler",
    "SchedulingInfo",
    "SchedulingOutcomes",
    "get_default_scheduler",
    "next_states",
    "process_review",

    # Serialization
    "deserialize_card",
    "serialize_card",

    # Enums
    "Rating",
    "State",
    "RATINGS",

    # Memory state
    "CardState",
    "as_utc",
    "calculate_retrievability",
    "days_between",
    "new_card",

    # Parameters
    "DECAY",
    "FACTOR",
    "DEFAULT_WEIGHTS",
    "SERIALIZATION_VERSION",
]
