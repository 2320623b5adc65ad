"""
Data-loading helpers for analytics.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import pandas as pd

from core.analytics.constants import SNAPSHOT_COLUMNS, STATE_LABELS
from core.fsrs import Scheduler, get_default_scheduler
from core.vocab import VocabularyStore


def load_card_snapshots_df(
    store: VocabularyStore,
    now: datetime,
    scheduler: Optional[Scheduler] = None
) -> pd.DataFrame:
    """
    Snapshot every card in the store, with retrievability as of `now`.
    """
    scheduler = scheduler or get_default_scheduler()
    rows = [
        {
            "text": item.text,
            "state": STATE_LABELS[item.card.state],
            "due": item.card.due,
            "stability": item.card.stability,
            "difficulty": item.card.difficulty,
            "reps": item.card.reps,
            "lapses": item.card.lapses,
            "last_review": item.card.last_review,
            "retrievability": scheduler.get_retrievability(item.card, now),
        }
        for item in store.items()
    ]
    if not rows:
        return pd.DataFrame(columns=SNAPSHOT_COLUMNS)

    df = pd.DataFrame(rows, columns=SNAPSHOT_COLUMNS)
    df["due"] = pd.to_datetime(df["due"], utc=True)
    df["last_review"] = pd.to_datetime(df["last_review"], utc=True)
    return df.sort_values("due").reset_index(drop=True)
