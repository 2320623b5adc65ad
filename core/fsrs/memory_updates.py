"""
Memory Updates

Implements the stability, difficulty and interval equations of the FSRS v4
memory model.

Key principles:
- Successful recall at low retrievability produces the largest stability gains
- Forgetting collapses stability, more so for difficult items
- Difficulty drifts with each rating and reverts slowly towards its default
"""

from __future__ import annotations
import math
from typing import Sequence

from core.fsrs.constants import (
    DECAY,
    FACTOR,
    S_MIN,
    D_MIN,
    D_MAX,
    Rating,
)


def clamp_difficulty(difficulty: float) -> float:
    return max(D_MIN, min(D_MAX, difficulty))


def init_stability(weights: Sequence[float], rating: Rating) -> float:
    """
    Stability after the very first review.

    Formula: S0(r) = w[r-1], floored at S_MIN
    """
    return max(weights[rating - 1], S_MIN)


def init_difficulty(weights: Sequence[float], rating: Rating) -> float:
    """
    Difficulty after the very first review.

    Formula: D0(r) = w[4] - w[5] * (r - 3), clipped to [1, 10]

    GOOD lands on w[4]; AGAIN starts harder and EASY starts easier.
    """
    return clamp_difficulty(weights[4] - weights[5] * (rating - 3))


def next_difficulty(weights: Sequence[float], difficulty: float, rating: Rating) -> float:
    """
    Update difficulty based on the review outcome.

    Formula:
        D' = w[6] step:      D - w[6] * (r - 3)
        mean reversion:      w[7] * w[4] + (1 - w[7]) * D'
        clipped to [1, 10]

    AGAIN raises difficulty the most, EASY lowers it.
    """
    stepped = difficulty - weights[6] * (rating - 3)
    reverted = weights[7] * weights[4] + (1.0 - weights[7]) * stepped
    return clamp_difficulty(reverted)


def next_recall_stability(
    weights: Sequence[float],
    difficulty: float,
    stability: float,
    retrievability: float,
    rating: Rating
) -> float:
    """
    Update stability after a successful recall (HARD/GOOD/EASY).

    Formula:
        S' = S * (1 + e^w8 * (11 - D) * S^-w9 * (e^(w10 * (1 - R)) - 1)
                   * hard_penalty * easy_bonus)

    Where:
        - (11 - D) shrinks the gain for difficult items
        - S^-w9 makes already-stable memories grow more slowly
        - (e^(w10 * (1 - R)) - 1) rewards recall that was at risk
    """
    if rating == Rating.AGAIN:
        raise ValueError("Use next_forget_stability for AGAIN")

    hard_penalty = weights[15] if rating == Rating.HARD else 1.0
    easy_bonus = weights[16] if rating == Rating.EASY else 1.0

    return stability * (
        1.0
        + math.exp(weights[8])
        * (11.0 - difficulty)
        * math.pow(stability, -weights[9])
        * (math.exp((1.0 - retrievability) * weights[10]) - 1.0)
        * hard_penalty
        * easy_bonus
    )


def next_forget_stability(
    weights: Sequence[float],
    difficulty: float,
    stability: float,
    retrievability: float
) -> float:
    """
    Update stability after forgetting (AGAIN).

    Formula:
        S' = w11 * D^-w12 * ((S + 1)^w13 - 1) * e^(w14 * (1 - R))
    """
    return (
        weights[11]
        * math.pow(difficulty, -weights[12])
        * (math.pow(stability + 1.0, weights[13]) - 1.0)
        * math.exp((1.0 - retrievability) * weights[14])
    )


def next_interval(
    stability: float,
    request_retention: float,
    maximum_interval: int
) -> int:
    """
    Days until retrievability falls to the requested retention.

    Solves R(t, S) = request_retention for t, rounded to whole days and
    clipped to [1, maximum_interval].
    """
    interval = stability / FACTOR * (math.pow(request_retention, 1.0 / DECAY) - 1.0)
    return min(max(round(interval), 1), maximum_interval)
