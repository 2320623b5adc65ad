"""
Metric computations over card snapshots.
"""

from __future__ import annotations

from datetime import datetime

import pandas as pd

from core.analytics.constants import STATE_LABELS


def compute_state_counts(snapshots_df: pd.DataFrame) -> dict[str, int]:
    """
    Number of cards in each learning phase, every phase present.
    """
    counts = {label: 0 for label in STATE_LABELS.values()}
    if snapshots_df.empty:
        return counts
    for label, count in snapshots_df["state"].value_counts().items():
        counts[label] = int(count)
    return counts


def compute_due_count(snapshots_df: pd.DataFrame, now: datetime) -> int:
    if snapshots_df.empty:
        return 0
    cutoff = pd.Timestamp(now)
    if cutoff.tzinfo is None:
        cutoff = cutoff.tz_localize("UTC")
    return int((snapshots_df["due"] <= cutoff).sum())


def compute_learned_count(snapshots_df: pd.DataFrame, r_target: float) -> int:
    """
    Reviewed cards whose retrievability is still at or above the target.
    """
    if snapshots_df.empty:
        return 0
    reviewed = snapshots_df["reps"] > 0
    return int((reviewed & (snapshots_df["retrievability"] >= r_target)).sum())


def compute_mean_stability(snapshots_df: pd.DataFrame) -> float:
    """
    Mean stability in days over reviewed cards (0 when none).
    """
    reviewed = snapshots_df[snapshots_df["reps"] > 0] if not snapshots_df.empty else snapshots_df
    if reviewed.empty:
        return 0.0
    return float(reviewed["stability"].mean())


def compute_reviewed_daily(snapshots_df: pd.DataFrame) -> pd.Series:
    """
    Cards per UTC day of their most recent review.
    """
    if snapshots_df.empty:
        return pd.Series(dtype="int64")
    last = snapshots_df["last_review"].dropna()
    if last.empty:
        return pd.Series(dtype="int64")
    return last.dt.floor("D").value_counts().sort_index().astype("int64")
