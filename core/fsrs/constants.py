"""
FSRS Constants and Parameters

All configurable parameters for the FSRS algorithm in one place.
Weights are the FSRS v4 population defaults.
"""

from datetime import timedelta
from enum import IntEnum


# ---- Review Outcomes ----

class Rating(IntEnum):
    """Reviewer's self-assessment of recall."""
    AGAIN = 1   # Forgot
    HARD = 2    # Recalled with serious effort
    GOOD = 3    # Recalled normally
    EASY = 4    # Recalled instantly


RATINGS = (Rating.AGAIN, Rating.HARD, Rating.GOOD, Rating.EASY)


# ---- Learning Phases ----

class State(IntEnum):
    """Learning phase of a card. Values are part of the persisted format."""
    NEW = 0
    LEARNING = 1
    REVIEW = 2
    RELEARNING = 3


# ---- Forgetting Curve ----
# R(t, S) = (1 + FACTOR * t / S) ^ DECAY, so that R(S, S) = 0.9

DECAY = -0.5
FACTOR = 19 / 81


# ---- Default Weights ----
# w[0]-w[3]   initial stability per rating (AGAIN..EASY)
# w[4]-w[5]   initial difficulty intercept / slope
# w[6]-w[7]   difficulty step / mean-reversion weight
# w[8]-w[10]  recall stability factor, stability exponent, retrievability factor
# w[11]-w[14] forget stability base, difficulty exp, stability exp, retrievability factor
# w[15]       hard penalty
# w[16]       easy bonus

DEFAULT_WEIGHTS = (
    0.4, 0.6, 2.4, 5.8,
    4.93, 0.94, 0.86, 0.01,
    1.49, 0.14, 0.94,
    2.18, 0.05, 0.34, 1.26,
    0.29, 2.61,
)

S_MIN = 0.1      # Minimum initial stability (days)
D_MIN = 1.0      # Minimum difficulty
D_MAX = 10.0     # Maximum difficulty


# ---- Short-Term Steps ----
# Cards that are not yet scheduled in whole days come back after these delays.

NEW_STEPS = {
    Rating.AGAIN: timedelta(minutes=1),
    Rating.HARD: timedelta(minutes=5),
    Rating.GOOD: timedelta(minutes=10),
}
RELEARN_AGAIN_STEP = timedelta(minutes=5)
RELEARN_HARD_STEP = timedelta(minutes=10)


# ---- Serialization ----

SERIALIZATION_VERSION = 1
