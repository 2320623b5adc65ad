import datetime
from dataclasses import replace

import pytest

from core.fsrs import (
    CardState,
    FSRSParameters,
    RATINGS,
    Rating,
    Scheduler,
    State,
    calculate_retrievability,
    days_between,
    new_card,
)


UTC = datetime.timezone.utc


def review_card(now, stability=10.0, difficulty=5.0, days_ago=10, reps=5, lapses=1):
    last_review = now - datetime.timedelta(days=days_ago)
    return CardState(
        due=now,
        stability=stability,
        difficulty=difficulty,
        elapsed_days=7,
        scheduled_days=days_ago,
        reps=reps,
        lapses=lapses,
        state=State.REVIEW,
        last_review=last_review,
    )


def learning_card(now):
    return CardState(
        due=now,
        stability=2.4,
        difficulty=4.93,
        reps=1,
        state=State.LEARNING,
        last_review=now - datetime.timedelta(minutes=10),
    )


def sample_cards(now):
    relearning = replace(review_card(now), state=State.RELEARNING)
    return [new_card(now), learning_card(now), review_card(now), relearning]


# ---- Invariants over every phase ----

@pytest.mark.parametrize("index", range(4))
def test_reps_increment_for_every_rating(scheduler, now, index):
    card = sample_cards(now)[index]
    outcomes = scheduler.next_states(card, now)
    for rating in RATINGS:
        assert outcomes[rating].reps == card.reps + 1


@pytest.mark.parametrize("index", range(4))
def test_only_again_counts_a_lapse(scheduler, now, index):
    card = sample_cards(now)[index]
    outcomes = scheduler.next_states(card, now)
    assert outcomes[Rating.AGAIN].lapses == card.lapses + 1
    for rating in (Rating.HARD, Rating.GOOD, Rating.EASY):
        assert outcomes[rating].lapses == card.lapses


@pytest.mark.parametrize("index", range(4))
def test_due_never_before_last_review(scheduler, now, index):
    card = sample_cards(now)[index]
    for rating, next_card in scheduler.next_states(card, now).items():
        assert next_card.last_review == now
        assert next_card.due > next_card.last_review


@pytest.mark.parametrize("index", range(4))
def test_next_states_is_pure(scheduler, now, index):
    card = sample_cards(now)[index]
    before = replace(card)
    first = scheduler.next_states(card, now)
    second = scheduler.next_states(card, now)
    assert first == second
    assert card == before


def test_outcomes_indexable_by_rating(scheduler, now):
    outcomes = scheduler.next_states(new_card(now), now)
    assert outcomes[Rating.GOOD] is outcomes.good
    assert outcomes[3] is outcomes.good
    assert [rating for rating, _ in outcomes.items()] == list(RATINGS)


# ---- New cards ----

def test_new_card_seeds(scheduler, now):
    outcomes = scheduler.next_states(new_card(now), now)

    assert outcomes.again.stability == pytest.approx(0.4)
    assert outcomes.hard.stability == pytest.approx(0.6)
    assert outcomes.good.stability == pytest.approx(2.4)
    assert outcomes.easy.stability == pytest.approx(5.8)

    assert outcomes.again.difficulty == pytest.approx(6.81)
    assert outcomes.good.difficulty == pytest.approx(4.93)
    assert outcomes.easy.difficulty == pytest.approx(3.99)


def test_new_card_phases_and_steps(scheduler, now):
    outcomes = scheduler.next_states(new_card(now), now)

    for rating, minutes in ((Rating.AGAIN, 1), (Rating.HARD, 5), (Rating.GOOD, 10)):
        assert outcomes[rating].state == State.LEARNING
        assert outcomes[rating].scheduled_days == 0
        assert outcomes[rating].due == now + datetime.timedelta(minutes=minutes)

    assert outcomes.easy.state == State.REVIEW
    assert outcomes.easy.scheduled_days == 6
    assert outcomes.easy.due == now + datetime.timedelta(days=6)
    assert outcomes.easy.elapsed_days == 0


# ---- Learning / relearning ----

def test_learning_card_steps(scheduler, now):
    card = learning_card(now)
    outcomes = scheduler.next_states(card, now)

    assert outcomes.again.state == State.LEARNING
    assert outcomes.again.due == now + datetime.timedelta(minutes=5)
    assert outcomes.hard.state == State.LEARNING
    assert outcomes.hard.due == now + datetime.timedelta(minutes=10)

    assert outcomes.good.state == State.REVIEW
    assert outcomes.good.scheduled_days == 2
    assert outcomes.easy.state == State.REVIEW
    assert outcomes.easy.scheduled_days == 3

    # Short-term steps leave the memory model alone
    for rating in RATINGS:
        assert outcomes[rating].stability == card.stability
        assert outcomes[rating].difficulty == card.difficulty


def test_relearning_again_stays_relearning(scheduler, now):
    card = replace(review_card(now), state=State.RELEARNING)
    outcomes = scheduler.next_states(card, now)
    assert outcomes.again.state == State.RELEARNING
    assert outcomes.good.state == State.REVIEW


# ---- Review cards ----

def test_review_card_elapsed_days(scheduler, now):
    outcomes = scheduler.next_states(review_card(now, days_ago=10), now)
    for rating in RATINGS:
        assert outcomes[rating].elapsed_days == 10


def test_review_again_relearns(scheduler, now):
    card = review_card(now)
    again = scheduler.next_states(card, now).again
    assert again.state == State.RELEARNING
    assert again.stability < card.stability
    assert again.difficulty > card.difficulty
    assert again.scheduled_days == 0
    assert again.due == now + datetime.timedelta(minutes=5)


def test_review_intervals_ordered(scheduler, now):
    card = review_card(now)
    outcomes = scheduler.next_states(card, now)

    assert outcomes.hard.scheduled_days == 15
    assert outcomes.good.scheduled_days == 29
    assert outcomes.easy.scheduled_days == 67
    for rating in (Rating.HARD, Rating.GOOD, Rating.EASY):
        assert outcomes[rating].state == State.REVIEW
        assert outcomes[rating].stability > card.stability
        assert outcomes[rating].due == now + datetime.timedelta(days=outcomes[rating].scheduled_days)


def test_review_difficulty_direction(scheduler, now):
    card = review_card(now)
    outcomes = scheduler.next_states(card, now)
    assert outcomes.again.difficulty > outcomes.hard.difficulty > outcomes.good.difficulty
    assert outcomes.easy.difficulty < card.difficulty


def test_difficulty_clipped(scheduler, now):
    hard_card = review_card(now, difficulty=10.0)
    easy_card = review_card(now, difficulty=1.0)
    assert scheduler.next_states(hard_card, now).again.difficulty == 10.0
    assert scheduler.next_states(easy_card, now).easy.difficulty == 1.0


def test_damaged_review_card_still_schedules(scheduler, now):
    card = review_card(now, stability=0.0)
    outcomes = scheduler.next_states(card, now)
    for rating in RATINGS:
        assert outcomes[rating].due > now


def test_overdue_recall_grows_more(scheduler, now):
    on_time = scheduler.next_states(review_card(now, days_ago=10), now).good
    overdue = scheduler.next_states(review_card(now, days_ago=30), now).good
    assert overdue.stability > on_time.stability


def test_maximum_interval_respected(now):
    scheduler = Scheduler(FSRSParameters(maximum_interval=20))
    outcomes = scheduler.next_states(review_card(now, stability=500.0, days_ago=400), now)
    assert outcomes.easy.scheduled_days <= 20
    assert outcomes.good.scheduled_days <= 20


def test_higher_retention_shortens_intervals(now):
    strict = Scheduler(FSRSParameters(request_retention=0.95))
    lenient = Scheduler(FSRSParameters(request_retention=0.8))
    card = review_card(now)
    assert strict.next_states(card, now).good.scheduled_days < lenient.next_states(card, now).good.scheduled_days


def test_naive_now_treated_as_utc(scheduler, now):
    naive = now.replace(tzinfo=None)
    assert scheduler.next_states(new_card(now), naive) == scheduler.next_states(new_card(now), now)


def test_invalid_parameters():
    with pytest.raises(ValueError):
        FSRSParameters(request_retention=1.0)
    with pytest.raises(ValueError):
        FSRSParameters(maximum_interval=0)
    with pytest.raises(ValueError):
        FSRSParameters(weights=(1.0, 2.0))


# ---- Review logs and helpers ----

def test_repeat_review_logs(scheduler, now):
    card = review_card(now)
    record = scheduler.repeat(card, now)
    log = record[Rating.GOOD].review_log
    assert log.rating == Rating.GOOD
    assert log.state == State.REVIEW
    assert log.stability == card.stability
    assert log.elapsed_days == 10
    assert log.last_elapsed_days == card.elapsed_days
    assert log.scheduled_days == record.good.card.scheduled_days
    assert log.review == now


def test_process_review_matches_preview(scheduler, now):
    card = review_card(now)
    assert scheduler.process_review(card, Rating.HARD, now) == scheduler.next_states(card, now).hard


def test_retrievability(scheduler, now):
    assert scheduler.get_retrievability(new_card(now), now) == 0.0
    card = review_card(now, stability=10.0, days_ago=10)
    assert scheduler.get_retrievability(card, now) == pytest.approx(0.9)


def test_calculate_retrievability_edges():
    assert calculate_retrievability(5.0, 0) == 1.0
    assert calculate_retrievability(0.0, 3) == 0.0
    assert calculate_retrievability(5.0, 5) == pytest.approx(0.9)


def test_days_between_floors(now):
    assert days_between(None, now) == 0
    assert days_between(now - datetime.timedelta(hours=47), now) == 1
    assert days_between(now + datetime.timedelta(days=1), now) == 0
