"""
Vocabulary store.

Single owner of the vocabulary collection and its two priority indexes.
All reads and writes of vocabulary data go through a VocabularyStore.

Persistence contract:
- add_item() does NOT save; call save() to commit additions
- review_item() always saves before returning
- load() is all-or-nothing: one unreadable record aborts the whole load
"""

from __future__ import annotations

import json
import logging
import threading
from datetime import datetime
from typing import Iterator, Optional

from core import config
from core.errors import DuplicateItem, ItemNotFound
from core.fsrs import CardState, Rating, Scheduler, SchedulingOutcomes, get_default_scheduler, new_card
from core.storage import KeyValueStorage
from core.vocab.models import SerializedVocab, VocabularyItem
from core.vocab.priority_index import PriorityIndex, due_key, recency_key

logger = logging.getLogger(__name__)


class VocabularyStore:
    """
    Vocabulary collection with due and recency orderings.

    Both indexes reference the same VocabularyItem objects held in the
    collection. One re-entrant lock guards the collection and both indexes
    together so they are never observed out of sync.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        scheduler: Optional[Scheduler] = None,
        storage_key: Optional[str] = None
    ):
        self._storage = storage
        self._scheduler = scheduler or get_default_scheduler()
        self.storage_key = storage_key or config.get_storage_key()

        self._vocab: dict[str, VocabularyItem] = {}
        self._due = PriorityIndex(due_key)
        self._recent = PriorityIndex(recency_key)
        self._lock = threading.RLock()

        self.learn_language = config.get_learn_language()
        self.user_language = config.get_user_language()

    @classmethod
    def open(cls, storage: KeyValueStorage, **kwargs) -> "VocabularyStore":
        """Create a store and load its persisted collection."""
        store = cls(storage, **kwargs)
        store.load()
        return store

    def __len__(self) -> int:
        return len(self._vocab)

    def __contains__(self, text: object) -> bool:
        return text in self._vocab

    def items(self) -> Iterator[VocabularyItem]:
        with self._lock:
            snapshot = list(self._vocab.values())
        return iter(snapshot)

    # ---- Queries ----

    def lookup(self, text: str) -> Optional[VocabularyItem]:
        return self._vocab.get(text)

    def due_items(self, limit: int) -> list[VocabularyItem]:
        """Up to `limit` items with the soonest due dates, soonest first."""
        with self._lock:
            return self._due.top(limit)

    def recent_items(self, limit: int) -> list[VocabularyItem]:
        """Up to `limit` items by most recent review; unreviewed items last."""
        with self._lock:
            return self._recent.top(limit)

    # ---- Mutations ----

    def add_item(self, text: str, notes: str = "", now: Optional[datetime] = None) -> VocabularyItem:
        """
        Add a new word with a fresh card.

        Not persisted until save() is called.

        Raises:
            DuplicateItem: `text` is already in the collection
            ValueError: `text` is empty
        """
        if not text:
            raise ValueError("word text must not be empty")

        with self._lock:
            if text in self._vocab:
                raise DuplicateItem(text)

            item = VocabularyItem(text=text, notes=notes, card=new_card(now))
            self._vocab[text] = item
            self._due.insert(item)
            self._recent.insert(item)

        logger.info("Added word %r", text)
        return item

    def preview_item(self, text: str, now: datetime) -> SchedulingOutcomes[CardState]:
        """
        Card state that each rating would produce. Nothing is committed.

        Raises:
            ItemNotFound: `text` is not in the collection
        """
        with self._lock:
            item = self._require(text)
            return self._scheduler.next_states(item.card, now)

    def review_item(self, text: str, rating: Rating, now: datetime) -> VocabularyItem:
        """
        Record a review and persist the collection.

        Args:
            text: Word that was reviewed
            rating: Reviewer's outcome
            now: Review time

        Raises:
            ItemNotFound: `text` is not in the collection
        """
        rating = Rating(rating)
        with self._lock:
            item = self._require(text)
            item.card = self._scheduler.next_states(item.card, now)[rating]

            self._due.reposition(item)
            self._recent.reposition(item)

            self.save()

        logger.info(
            "Reviewed %r as %s: next due %s (%d days)",
            text,
            rating.name,
            item.card.due.isoformat(),
            item.card.scheduled_days,
        )
        return item

    # ---- Persistence ----

    def load(self) -> None:
        """
        Replace the collection with the persisted one.

        A missing document loads as an empty collection.

        Raises:
            SchemaVersionMismatch: Any record has an unsupported card version;
                the store is left unchanged
            ValueError: The document or a record is malformed, or a record
                is stored under a key other than its text
        """
        raw = self._storage.get(self.storage_key)
        serialized = json.loads(raw) if raw else {}
        if not isinstance(serialized, dict):
            raise ValueError(f"stored vocabulary under {self.storage_key!r} is not a JSON object")

        vocab: dict[str, VocabularyItem] = {}
        for key, record in serialized.items():
            item = SerializedVocab.model_validate(record).to_item()
            if item.text != key:
                raise ValueError(f"record stored under {key!r} has text {item.text!r}")
            vocab[key] = item

        with self._lock:
            self._vocab = vocab
            self._due.rebuild(vocab.values())
            self._recent.rebuild(vocab.values())

        logger.info("Loaded %d words from %r", len(vocab), self.storage_key)

    def save(self) -> None:
        """Serialize the whole collection and write it in one call."""
        with self._lock:
            serialized = {
                key: SerializedVocab.from_item(item).model_dump()
                for key, item in self._vocab.items()
            }
            self._storage.set(self.storage_key, json.dumps(serialized, ensure_ascii=False))

        logger.debug("Saved %d words to %r", len(serialized), self.storage_key)

    # ---- Helpers ----

    def _require(self, text: str) -> VocabularyItem:
        item = self._vocab.get(text)
        if item is None:
            raise ItemNotFound(text)
        return item
