"""
Memory State - Review Records and Derived Quantities

Defines the per-(learner, word) scheduling records for both models and the
read-only quantities derived from them.

Key concepts:
- Ease factor: multiplier controlling how quickly intervals grow
- Interval: time until the word is next due (days, may be fractional)
- Stage: discrete mastery level in the coarse model
- Due: next_review_at is at or before the current time
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional

from lahja.srs.constants import (
    DEFAULT_EASE_FACTOR,
    LEARNED_REPETITIONS,
    MASTERED_REPETITIONS,
    STAGE_ORDER,
    Stage,
    StageResult,
)


def utc_now() -> datetime:
    """Default clock for the engine."""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a timestamp to timezone-aware UTC.

    Naive values are assumed to already be UTC (SQLite drops tzinfo).
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class ReviewRecord:
    """
    Ease/interval scheduling state for one learner and one word.

    Records are immutable; the scheduler returns a new record per review.
    """
    user_id: str
    word_id: str

    ease_factor: float = DEFAULT_EASE_FACTOR
    interval_days: float = 0.0
    repetitions: int = 0  # Consecutive successes since the last lapse

    last_reviewed_at: Optional[datetime] = None
    next_review_at: Optional[datetime] = None  # None until first review (due now)


@dataclass(frozen=True)
class StageRecord:
    """
    Discrete stage scheduling state for one learner and one word.
    """
    user_id: str
    word_id: str

    stage: Stage = Stage.NEW
    last_result: Optional[StageResult] = None
    last_reviewed_at: Optional[datetime] = None
    next_review_at: Optional[datetime] = None

    # Counters kept alongside the stage for the review stats
    review_count: int = 0
    correct_count: int = 0


@dataclass(frozen=True)
class ReviewStats:
    """Minimal counters for a learner's review dashboard."""
    total_words: int
    due_count: int
    learned_count: int
    mastered_count: int
    new_count: int


def initialize_new_record(user_id: str, word_id: str) -> ReviewRecord:
    """
    Initialize state for a word that was never reviewed.

    Returns:
        ReviewRecord with ease 2.5, interval 0 and no repetitions
    """
    return ReviewRecord(user_id=user_id, word_id=word_id)


def initialize_new_stage_record(user_id: str, word_id: str) -> StageRecord:
    return StageRecord(user_id=user_id, word_id=word_id)


def is_due(next_review_at: Optional[datetime], now: Optional[datetime] = None) -> bool:
    """
    Determine if a record is due.

    A record that was never scheduled is always due.
    """
    if next_review_at is None:
        return True
    if now is None:
        now = utc_now()
    return as_utc(next_review_at) <= as_utc(now)


def get_stage_index(stage: Stage) -> int:
    return STAGE_ORDER.index(Stage.parse(stage))


def is_valid_stage(value: str) -> bool:
    return value in {stage.value for stage in STAGE_ORDER}


def stage_for_record(record: Optional[ReviewRecord]) -> Stage:
    """
    Mastery stage of an ease-model word, used to pick its exercise.

    Never-reviewed words are NEW; afterwards each consecutive success
    moves one stage up, capped at the terminal stage.
    """
    if record is None or record.last_reviewed_at is None:
        return Stage.NEW
    index = min(record.repetitions + 1, len(STAGE_ORDER) - 1)
    return STAGE_ORDER[index]


def compute_review_stats(
    records: Iterable[ReviewRecord],
    total_words: int,
    now: Optional[datetime] = None
) -> ReviewStats:
    """
    Count due, learned and mastered words for one learner.

    Args:
        records: All review records of the learner
        total_words: Number of words available in the curriculum
        now: Reference time (defaults to now)

    Returns:
        ReviewStats; new_count covers words without any record
    """
    if now is None:
        now = utc_now()

    records = list(records)
    due_count = sum(1 for r in records if is_due(r.next_review_at, now))
    learned_count = sum(1 for r in records if r.repetitions >= LEARNED_REPETITIONS)
    mastered_count = sum(1 for r in records if r.repetitions >= MASTERED_REPETITIONS)

    return ReviewStats(
        total_words=total_words,
        due_count=due_count,
        learned_count=learned_count,
        mastered_count=mastered_count,
        new_count=max(0, total_words - len(records)),
    )


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return int(value * factor + 0.5) / factor


def get_interval_display(interval_days: float) -> str:
    """
    Compact label for an interval, e.g. for rating buttons.

    Examples: "< 1m", "10m", "3h", "4d", "2mo", "1.2y"
    """
    if interval_days < 1 / 1440:
        return "< 1m"
    if interval_days < 1 / 24:
        return f"{int(_round_half_up(interval_days * 24 * 60))}m"
    if interval_days < 1:
        return f"{int(_round_half_up(interval_days * 24))}h"
    if interval_days < 30:
        return f"{int(_round_half_up(interval_days))}d"
    if interval_days < 365:
        return f"{int(_round_half_up(interval_days / 30))}mo"
    return f"{_round_half_up(interval_days / 365, 1)}y"
