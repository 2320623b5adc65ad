"""
Versioned serialization of card state.

A card is stored as a fixed-order list:

    [version, due, stability, difficulty, elapsed_days, scheduled_days,
     reps, lapses, state, last_review]

Timestamps are UTC ISO-8601 strings, which sort lexicographically in time
order. A card that was never reviewed stores an empty last_review. There is
exactly one supported version and no migration path: any other version tag
is rejected.
"""

from __future__ import annotations
from datetime import datetime
from typing import Any, Optional, Sequence

from core.errors import SchemaVersionMismatch
from core.fsrs.constants import SERIALIZATION_VERSION, State
from core.fsrs.memory_state import CardState, as_utc


SERIALIZED_LENGTH = 10


def format_timestamp(value: datetime) -> str:
    return as_utc(value).isoformat()


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 string; naive values are taken as UTC."""
    # fromisoformat rejects a trailing 'Z' before Python 3.11
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return as_utc(datetime.fromisoformat(value))


def serialize_card(card: CardState) -> list[Any]:
    """
    Serialize a card to its versioned list form.

    Pure and deterministic: equal cards always produce equal lists.
    """
    return [
        SERIALIZATION_VERSION,
        format_timestamp(card.due),
        card.stability,
        card.difficulty,
        card.elapsed_days,
        card.scheduled_days,
        card.reps,
        card.lapses,
        int(card.state),
        format_timestamp(card.last_review) if card.last_review is not None else "",
    ]


def deserialize_card(values: Sequence[Any]) -> CardState:
    """
    Rebuild a card from its versioned list form.

    Raises:
        SchemaVersionMismatch: The version tag is not SERIALIZATION_VERSION
        ValueError: The list is malformed
    """
    if len(values) == 0:
        raise ValueError("serialized card is empty")

    version = values[0]
    # bool is an int subclass; True must not pass as version 1
    if isinstance(version, bool) or version != SERIALIZATION_VERSION:
        raise SchemaVersionMismatch(version, SERIALIZATION_VERSION)

    if len(values) != SERIALIZED_LENGTH:
        raise ValueError(
            f"serialized card must have {SERIALIZED_LENGTH} fields, got {len(values)}"
        )

    (
        _version,
        due,
        stability,
        difficulty,
        elapsed_days,
        scheduled_days,
        reps,
        lapses,
        state,
        last_review,
    ) = values

    try:
        return CardState(
            due=parse_timestamp(due),
            stability=float(stability),
            difficulty=float(difficulty),
            elapsed_days=_as_count(elapsed_days),
            scheduled_days=_as_count(scheduled_days),
            reps=_as_count(reps),
            lapses=_as_count(lapses),
            state=State(_as_count(state)),
            last_review=_parse_optional_timestamp(last_review),
        )
    except (TypeError, AttributeError) as exc:
        raise ValueError(f"malformed serialized card: {exc}") from exc


def _parse_optional_timestamp(value: Optional[str]) -> Optional[datetime]:
    if value is None or value == "":
        return None
    return parse_timestamp(value)


def _as_count(value: Any) -> int:
    # 3.0 is accepted; 1.7 or "2" is a malformed record
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"expected a whole number, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"expected a whole number, got {value!r}")
    return int(value)
