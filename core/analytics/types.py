"""
Types for vocabulary analytics.
"""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd


@dataclass(frozen=True)
class VocabularySummary:
    """
    Precomputed metrics for the whole collection.
    """
    total: int
    state_counts: dict[str, int]
    due_now: int
    learned: int
    lapses: int
    mean_stability: float
    reviewed_daily: pd.Series
