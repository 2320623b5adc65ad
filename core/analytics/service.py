"""
Service layer to assemble the vocabulary summary.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from core.analytics.metrics import (
    compute_due_count,
    compute_learned_count,
    compute_mean_stability,
    compute_reviewed_daily,
    compute_state_counts,
)
from core.analytics.queries import load_card_snapshots_df
from core.analytics.types import VocabularySummary
from core.fsrs import Scheduler, get_default_scheduler
from core.vocab import VocabularyStore


def build_vocabulary_summary(
    store: VocabularyStore,
    now: datetime,
    scheduler: Optional[Scheduler] = None
) -> VocabularySummary:
    """
    Build all summary values for the store as of `now`.

    A card counts as learned while its retrievability stays at or above the
    scheduler's request retention.
    """
    scheduler = scheduler or get_default_scheduler()
    df = load_card_snapshots_df(store, now, scheduler)

    return VocabularySummary(
        total=len(df),
        state_counts=compute_state_counts(df),
        due_now=compute_due_count(df, now),
        learned=compute_learned_count(df, scheduler.parameters.request_retention),
        lapses=int(df["lapses"].sum()) if not df.empty else 0,
        mean_stability=compute_mean_stability(df),
        reviewed_daily=compute_reviewed_daily(df),
    )
