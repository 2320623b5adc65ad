"""
Vocabulary item and its persisted record.

The persisted collection is a JSON object keyed by item text:

    {
      "<text>": {"text": "<text>", "notes": "...", "card": [1, due, ...]},
      ...
    }
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import BaseModel, Field

from core.fsrs import CardState, deserialize_card, new_card, serialize_card


@dataclass(eq=False)
class VocabularyItem:
    """
    A word or expression being learned.

    Compared by identity: the priority indexes hold references to the same
    item objects the store owns.
    """
    text: str
    notes: str = ""
    card: CardState = field(default_factory=new_card)


class SerializedVocab(BaseModel):
    """Pydantic schema for one persisted vocabulary record."""
    text: str = Field(min_length=1)
    notes: Optional[str] = None
    card: list[Any] = Field(min_length=1)

    @classmethod
    def from_item(cls, item: VocabularyItem) -> "SerializedVocab":
        return cls(text=item.text, notes=item.notes, card=serialize_card(item.card))

    def to_item(self) -> VocabularyItem:
        """
        Rebuild the item.

        Raises:
            SchemaVersionMismatch: The card version is unsupported
        """
        return VocabularyItem(
            text=self.text,
            notes=self.notes or "",
            card=deserialize_card(self.card),
        )
