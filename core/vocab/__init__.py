"""
Vocabulary collection, priority indexes and the store that owns them.

Quick start:
    from core.storage import MemoryStorage
    from core.vocab import VocabularyStore

    store = VocabularyStore.open(MemoryStorage())
    store.add_item("가다", "to go")
    store.save()

    store.review_item("가다", Rating.GOOD, now)
    store.due_items(10)
"""

from core.vocab.models import SerializedVocab, VocabularyItem
from core.vocab.priority_index import PriorityIndex, due_key, recency_key
from core.vocab.store import VocabularyStore

__all__ = [
    "PriorityIndex",
    "SerializedVocab",
    "VocabularyItem",
    "VocabularyStore",
    "due_key",
    "recency_key",
]
