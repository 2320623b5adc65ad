"""
Scheduler - FSRS Algorithm Logic

Pure FSRS scheduling (no storage calls, no clock reads).

Main workflow:
1. Caller supplies the current card state and the review time
2. Compute elapsed days and retrievability
3. Compute the resulting card for every possible rating
4. Caller commits the one the reviewer picked

The review time is always injected so results are reproducible.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Generic, Iterator, Optional, Sequence, Tuple, TypeVar

from core import config
from core.fsrs import memory_updates
from core.fsrs.constants import (
    DEFAULT_WEIGHTS,
    NEW_STEPS,
    RATINGS,
    RELEARN_AGAIN_STEP,
    RELEARN_HARD_STEP,
    S_MIN,
    Rating,
    State,
)
from core.fsrs.memory_state import CardState, as_utc, calculate_retrievability, days_between


T = TypeVar("T")


@dataclass(frozen=True)
class SchedulingOutcomes(Generic[T]):
    """
    One value per rating.

    Fixed record rather than a dict so every rating is always present.
    Index with a Rating: `outcomes[Rating.GOOD]`.
    """
    again: T
    hard: T
    good: T
    easy: T

    def __getitem__(self, rating: Rating) -> T:
        return getattr(self, Rating(rating).name.lower())

    def items(self) -> Iterator[Tuple[Rating, T]]:
        for rating in RATINGS:
            yield rating, self[rating]


@dataclass(frozen=True)
class ReviewLog:
    """Record of one review, describing the card as it was before."""
    rating: Rating
    state: State
    due: datetime
    stability: float
    difficulty: float
    elapsed_days: int
    last_elapsed_days: int
    scheduled_days: int
    review: datetime


@dataclass(frozen=True)
class SchedulingInfo:
    card: CardState
    review_log: ReviewLog


@dataclass(frozen=True)
class FSRSParameters:
    weights: Tuple[float, ...] = DEFAULT_WEIGHTS
    request_retention: float = config.DEFAULT_REQUEST_RETENTION
    maximum_interval: int = config.DEFAULT_MAXIMUM_INTERVAL

    def __post_init__(self):
        if len(self.weights) != len(DEFAULT_WEIGHTS):
            raise ValueError(
                f"expected {len(DEFAULT_WEIGHTS)} weights, got {len(self.weights)}"
            )
        if not 0.0 < self.request_retention < 1.0:
            raise ValueError("request_retention must be in (0, 1)")
        if self.maximum_interval < 1:
            raise ValueError("maximum_interval must be at least 1")

    @classmethod
    def from_env(cls) -> "FSRSParameters":
        """Build parameters from REQUEST_RETENTION / MAXIMUM_INTERVAL."""
        return cls(
            request_retention=config.get_request_retention(),
            maximum_interval=config.get_maximum_interval(),
        )


class Scheduler:
    """FSRS v4 scheduler with fixed parameters and no fuzz."""

    def __init__(self, parameters: Optional[FSRSParameters] = None):
        self.parameters = parameters or FSRSParameters()

    @property
    def weights(self) -> Sequence[float]:
        return self.parameters.weights

    def next_states(self, card: CardState, now: datetime) -> SchedulingOutcomes[CardState]:
        """
        Compute the card that would result from each rating.

        Args:
            card: Current card state (not modified)
            now: Review time

        Returns:
            SchedulingOutcomes of CardState
        """
        record = self.repeat(card, now)
        return SchedulingOutcomes(
            again=record.again.card,
            hard=record.hard.card,
            good=record.good.card,
            easy=record.easy.card,
        )

    def repeat(self, card: CardState, now: datetime) -> SchedulingOutcomes[SchedulingInfo]:
        """
        Compute the resulting card and review log for each rating.

        Every result has last_review = now and reps = card.reps + 1.
        AGAIN also counts one lapse.
        """
        now = as_utc(now)
        elapsed_days = 0 if card.state == State.NEW else days_between(card.last_review, now)
        base = replace(card, elapsed_days=elapsed_days, last_review=now, reps=card.reps + 1)

        if card.state == State.NEW:
            cards = self._schedule_new(base, now)
        elif card.state in (State.LEARNING, State.RELEARNING):
            cards = self._schedule_learning(card, base, now)
        else:
            cards = self._schedule_review(card, base, elapsed_days, now)

        infos = {}
        for rating in RATINGS:
            next_card = cards[rating]
            infos[rating] = SchedulingInfo(
                card=next_card,
                review_log=ReviewLog(
                    rating=rating,
                    state=card.state,
                    due=card.due,
                    stability=card.stability,
                    difficulty=card.difficulty,
                    elapsed_days=elapsed_days,
                    last_elapsed_days=card.elapsed_days,
                    scheduled_days=next_card.scheduled_days,
                    review=now,
                ),
            )

        return SchedulingOutcomes(
            again=infos[Rating.AGAIN],
            hard=infos[Rating.HARD],
            good=infos[Rating.GOOD],
            easy=infos[Rating.EASY],
        )

    def process_review(self, card: CardState, rating: Rating, now: datetime) -> CardState:
        """Return the card resulting from one rating."""
        return self.next_states(card, now)[rating]

    def get_retrievability(self, card: CardState, now: datetime) -> float:
        """Current probability of recall; 0 for cards never reviewed."""
        if card.state == State.NEW:
            return 0.0
        elapsed_days = days_between(card.last_review, as_utc(now))
        return calculate_retrievability(card.stability, elapsed_days)

    # ---- Per-phase scheduling ----

    def _schedule_new(self, base: CardState, now: datetime) -> dict:
        w = self.weights
        cards = {}
        for rating in (Rating.AGAIN, Rating.HARD, Rating.GOOD):
            cards[rating] = _outcome(
                base,
                rating,
                state=State.LEARNING,
                stability=memory_updates.init_stability(w, rating),
                difficulty=memory_updates.init_difficulty(w, rating),
                scheduled_days=0,
                due=now + NEW_STEPS[rating],
            )

        easy_stability = memory_updates.init_stability(w, Rating.EASY)
        easy_interval = self._interval(easy_stability)
        cards[Rating.EASY] = _outcome(
            base,
            Rating.EASY,
            state=State.REVIEW,
            stability=easy_stability,
            difficulty=memory_updates.init_difficulty(w, Rating.EASY),
            scheduled_days=easy_interval,
            due=now + timedelta(days=easy_interval),
        )
        return cards

    def _schedule_learning(self, card: CardState, base: CardState, now: datetime) -> dict:
        # Short-term steps do not touch the memory model
        good_interval = self._interval(card.stability)
        easy_interval = self._cap(max(self._interval(card.stability), good_interval + 1))

        return {
            Rating.AGAIN: _outcome(
                base, Rating.AGAIN, state=card.state,
                stability=card.stability, difficulty=card.difficulty,
                scheduled_days=0, due=now + RELEARN_AGAIN_STEP,
            ),
            Rating.HARD: _outcome(
                base, Rating.HARD, state=card.state,
                stability=card.stability, difficulty=card.difficulty,
                scheduled_days=0, due=now + RELEARN_HARD_STEP,
            ),
            Rating.GOOD: _outcome(
                base, Rating.GOOD, state=State.REVIEW,
                stability=card.stability, difficulty=card.difficulty,
                scheduled_days=good_interval, due=now + timedelta(days=good_interval),
            ),
            Rating.EASY: _outcome(
                base, Rating.EASY, state=State.REVIEW,
                stability=card.stability, difficulty=card.difficulty,
                scheduled_days=easy_interval, due=now + timedelta(days=easy_interval),
            ),
        }

    def _schedule_review(
        self,
        card: CardState,
        base: CardState,
        elapsed_days: int,
        now: datetime
    ) -> dict:
        w = self.weights
        # A review card always has positive stability; floor it so a damaged
        # record cannot divide by zero in the power terms.
        stability = max(card.stability, S_MIN)
        retrievability = calculate_retrievability(stability, elapsed_days)

        difficulty = {
            rating: memory_updates.next_difficulty(w, card.difficulty, rating)
            for rating in RATINGS
        }
        again_stability = memory_updates.next_forget_stability(
            w, difficulty[Rating.AGAIN], stability, retrievability
        )
        recall_stability = {
            rating: memory_updates.next_recall_stability(
                w, difficulty[rating], stability, retrievability, rating
            )
            for rating in (Rating.HARD, Rating.GOOD, Rating.EASY)
        }

        hard_interval = self._interval(recall_stability[Rating.HARD])
        good_interval = self._interval(recall_stability[Rating.GOOD])
        hard_interval = min(hard_interval, good_interval)
        good_interval = self._cap(max(good_interval, hard_interval + 1))
        easy_interval = self._cap(max(self._interval(recall_stability[Rating.EASY]), good_interval + 1))
        intervals = {
            Rating.HARD: hard_interval,
            Rating.GOOD: good_interval,
            Rating.EASY: easy_interval,
        }

        cards = {
            Rating.AGAIN: _outcome(
                base, Rating.AGAIN, state=State.RELEARNING,
                stability=again_stability, difficulty=difficulty[Rating.AGAIN],
                scheduled_days=0, due=now + RELEARN_AGAIN_STEP,
            ),
        }
        for rating, interval in intervals.items():
            cards[rating] = _outcome(
                base, rating, state=State.REVIEW,
                stability=recall_stability[rating], difficulty=difficulty[rating],
                scheduled_days=interval, due=now + timedelta(days=interval),
            )
        return cards

    def _interval(self, stability: float) -> int:
        return memory_updates.next_interval(
            stability,
            self.parameters.request_retention,
            self.parameters.maximum_interval,
        )

    def _cap(self, interval: int) -> int:
        # Keeping intervals strictly ordered can push past the cap
        return min(interval, self.parameters.maximum_interval)


def _outcome(
    base: CardState,
    rating: Rating,
    state: State,
    stability: float,
    difficulty: float,
    scheduled_days: int,
    due: datetime
) -> CardState:
    lapses = base.lapses + 1 if rating == Rating.AGAIN else base.lapses
    return replace(
        base,
        state=state,
        stability=stability,
        difficulty=difficulty,
        scheduled_days=scheduled_days,
        due=due,
        lapses=lapses,
    )


# ---- Module-level API ----

_default_scheduler: Optional[Scheduler] = None


def get_default_scheduler() -> Scheduler:
    """Scheduler built from environment settings, created on first use."""
    global _default_scheduler
    if _default_scheduler is None:
        _default_scheduler = Scheduler(FSRSParameters.from_env())
    return _default_scheduler


def next_states(card: CardState, now: datetime) -> SchedulingOutcomes[CardState]:
    return get_default_scheduler().next_states(card, now)


def process_review(card: CardState, rating: Rating, now: datetime) -> CardState:
    return get_default_scheduler().process_review(card, rating, now)
