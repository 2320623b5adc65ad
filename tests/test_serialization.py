import datetime
import json

import pytest

from core.errors import SchemaVersionMismatch
from core.fsrs import CardState, Rating, State, deserialize_card, new_card, serialize_card


UTC = datetime.timezone.utc


def test_new_card_defaults(now):
    card = new_card(now)
    assert card.state == State.NEW
    assert card.due == now
    assert card.reps == 0
    assert card.lapses == 0
    assert card.stability == 0.0
    assert card.difficulty == 0.0
    assert card.last_review is None


def test_serialized_layout(now):
    card = CardState(
        due=now + datetime.timedelta(days=3),
        stability=3.2,
        difficulty=5.5,
        elapsed_days=2,
        scheduled_days=3,
        reps=4,
        lapses=1,
        state=State.REVIEW,
        last_review=now,
    )
    values = serialize_card(card)
    assert values == [
        1,
        "2024-03-04T09:00:00+00:00",
        3.2,
        5.5,
        2,
        3,
        4,
        1,
        2,
        "2024-03-01T09:00:00+00:00",
    ]
    # Must survive a JSON trip unchanged
    assert json.loads(json.dumps(values)) == values


def test_round_trip_reviewed_card(scheduler, now):
    card = scheduler.next_states(new_card(now), now)[Rating.GOOD]
    card = scheduler.next_states(card, now + datetime.timedelta(minutes=15))[Rating.GOOD]
    assert deserialize_card(serialize_card(card)) == card


def test_round_trip_new_card(now):
    card = new_card(now)
    restored = deserialize_card(serialize_card(card))
    assert restored == card
    assert restored.last_review is None


def test_naive_creation_time_stored_as_utc(now):
    card = new_card(now.replace(tzinfo=None))
    assert card.due == now
    assert card.due.tzinfo is not None
    assert deserialize_card(serialize_card(card)) == card


def test_round_trip_through_json(scheduler, now):
    card = scheduler.next_states(new_card(now), now)[Rating.EASY]
    restored = deserialize_card(json.loads(json.dumps(serialize_card(card))))
    assert restored == card


def test_timestamps_normalized_to_utc(now):
    seoul = datetime.timezone(datetime.timedelta(hours=9))
    card = new_card(now.astimezone(seoul))
    values = serialize_card(card)
    assert values[1] == "2024-03-01T09:00:00+00:00"
    assert deserialize_card(values) == card


def test_accepts_zulu_suffix():
    values = [1, "2024-03-01T09:00:00.000Z", 1.0, 5.0, 0, 1, 1, 0, 1, "2024-02-29T09:00:00.000Z"]
    card = deserialize_card(values)
    assert card.due == datetime.datetime(2024, 3, 1, 9, 0, tzinfo=UTC)
    assert card.state == State.LEARNING


@pytest.mark.parametrize("version", [0, 2, "1", None, True])
def test_rejects_unknown_version(now, version):
    values = serialize_card(new_card(now))
    values[0] = version
    with pytest.raises(SchemaVersionMismatch):
        deserialize_card(values)


def test_version_mismatch_is_value_error(now):
    values = serialize_card(new_card(now))
    values[0] = 2
    with pytest.raises(ValueError, match="unknown card serialization version"):
        deserialize_card(values)


def test_rejects_wrong_length(now):
    values = serialize_card(new_card(now))[:-1]
    with pytest.raises(ValueError):
        deserialize_card(values)


def test_rejects_unknown_state(now):
    values = serialize_card(new_card(now))
    values[8] = 9
    with pytest.raises(ValueError):
        deserialize_card(values)


@pytest.mark.parametrize("index", [4, 5, 6, 7, 8])
def test_rejects_fractional_counts(now, index):
    values = serialize_card(new_card(now))
    values[index] = 1.7
    with pytest.raises(ValueError, match="whole number"):
        deserialize_card(values)


def test_rejects_non_numeric_counts(now):
    values = serialize_card(new_card(now))
    values[6] = "2"
    with pytest.raises(ValueError):
        deserialize_card(values)


def test_accepts_integral_floats(now):
    values = serialize_card(new_card(now))
    values[6] = 3.0
    card = deserialize_card(values)
    assert card.reps == 3
    assert isinstance(card.reps, int)
