"""
Analytics package exports.
"""

from core.analytics.constants import STATE_LABELS
from core.analytics.queries import load_card_snapshots_df
from core.analytics.service import build_vocabulary_summary
from core.analytics.types import VocabularySummary

__all__ = [
    "STATE_LABELS",
    "build_vocabulary_summary",
    "load_card_snapshots_df",
    "VocabularySummary",
]
