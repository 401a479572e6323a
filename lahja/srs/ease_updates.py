"""
Ease/Interval Updates (SM-2 style)

Implements the continuous memory model: after every rating the ease factor,
interval and repetition count are recomputed from the previous record.

Key principles:
- Lapses shrink the interval to near-immediate re-exposure, whatever the
  previous interval was, to force relearning
- The first two successes use flat intervals (ignoring ease) to avoid
  premature long gaps
- Later successes grow the interval geometrically by the ease factor
- The ease factor never drops below MIN_EASE_FACTOR
"""

from __future__ import annotations
import logging
import math
from datetime import datetime, timedelta
from typing import Optional

from lahja.srs.constants import (
    EASE_EASY_BONUS,
    EASE_FAILURE_PENALTY,
    EASE_HARD_PENALTY,
    EASY_INTERVAL_MULTIPLIER,
    HARD_INTERVAL_MULTIPLIER,
    INTERVALS,
    MAX_INTERVAL_DAYS,
    MIN_EASE_FACTOR,
    MIN_INTERVAL_DAYS,
    PASSING_QUALITY,
    QUALITY_MAP,
    SECONDS_PER_DAY,
    Rating,
)
from lahja.srs.errors import InvariantViolation
from lahja.srs.memory_state import ReviewRecord, as_utc, get_interval_display, utc_now

logger = logging.getLogger(__name__)


def _is_finite(value: float) -> bool:
    return not (math.isnan(value) or math.isinf(value))


def clamp_interval(interval_days: float, context: str = "") -> float:
    """
    Guard an interval against negative, infinite, NaN or oversized values.

    Violations are logged and clamped into [MIN_INTERVAL_DAYS,
    MAX_INTERVAL_DAYS] so that broken state is never persisted.
    """
    where = f" ({context})" if context else ""
    if not _is_finite(interval_days) or interval_days < 0:
        violation = InvariantViolation(
            f"Invalid interval {interval_days!r}{where}; "
            f"clamped to {MIN_INTERVAL_DAYS:.6f} days"
        )
        logger.warning("%s", violation)
        return MIN_INTERVAL_DAYS
    if interval_days > MAX_INTERVAL_DAYS:
        violation = InvariantViolation(
            f"Interval {interval_days!r}{where} exceeds the maximum; "
            f"clamped to {MAX_INTERVAL_DAYS} days"
        )
        logger.warning("%s", violation)
        return float(MAX_INTERVAL_DAYS)
    return interval_days


def clamp_ease(ease_factor: float, context: str = "") -> float:
    """
    Guard the ease factor against NaN and values below the floor.
    """
    if not _is_finite(ease_factor):
        violation = InvariantViolation(
            f"Invalid ease factor {ease_factor!r}{f' ({context})' if context else ''}; "
            f"clamped to {MIN_EASE_FACTOR}"
        )
        logger.warning("%s", violation)
        return MIN_EASE_FACTOR
    return max(MIN_EASE_FACTOR, ease_factor)


def sm2_ease_adjustment(quality: int) -> float:
    """
    Classic SM-2 ease correction for a quality score.

    Formula:
        0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)

    Only applied for GOOD ratings (q = 3), where it evaluates to -0.14.
    """
    return 0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02)


def round_interval(interval_days: float) -> float:
    """
    Round intervals of a day or more to whole days (half up).

    Sub-day intervals keep minute-level precision.
    """
    if interval_days < 1:
        return interval_days
    return float(math.floor(interval_days + 0.5))


def round_ease(ease_factor: float) -> float:
    """Round to 2 decimals (half up) for stable persistence."""
    return math.floor(ease_factor * 100 + 0.5) / 100


def compute_next_review(
    rating: Rating | str,
    record: ReviewRecord,
    now: Optional[datetime] = None
) -> ReviewRecord:
    """
    Compute the next scheduling state after a rating.

    Pure function: the input record is not modified.

    Failure (again/hard):
        repetitions -> 0, ease -> max(1.3, ease - 0.2),
        interval -> 1 minute (again) or 10 minutes (hard)

    Success (good/easy):
        repetitions + 1; first and second success get a flat interval
        (4 days for easy, else 1 day); afterwards interval * ease with
        hard/easy modifiers.

    Args:
        rating: Learner rating (again, hard, good, easy)
        record: Current record (use initialize_new_record for unseen words)
        now: Review timestamp (defaults to now)

    Returns:
        New ReviewRecord with updated ease, interval, repetitions and due time

    Raises:
        InvalidInput: If the rating is not one of the four known values
    """
    rating = Rating.parse(rating)
    if now is None:
        now = utc_now()
    now = as_utc(now)

    quality = QUALITY_MAP[rating]
    context = f"{record.user_id}/{record.word_id}"

    ease = clamp_ease(record.ease_factor, context)
    previous_interval = clamp_interval(record.interval_days, context)
    repetitions = max(0, record.repetitions)

    if quality < PASSING_QUALITY:
        # Failed review - reset repetitions
        new_repetitions = 0
        new_interval = INTERVALS["again"] if rating == Rating.AGAIN else INTERVALS["hard"]
        new_ease = max(MIN_EASE_FACTOR, ease - EASE_FAILURE_PENALTY)
    else:
        new_repetitions = repetitions + 1
        new_ease = ease

        if repetitions == 0:
            new_interval = INTERVALS["first_easy"] if rating == Rating.EASY else INTERVALS["first_good"]
        elif repetitions == 1:
            new_interval = INTERVALS["second_easy"] if rating == Rating.EASY else INTERVALS["second_good"]
        else:
            new_interval = previous_interval * new_ease

            if rating == Rating.HARD:
                new_interval *= HARD_INTERVAL_MULTIPLIER
                new_ease = max(MIN_EASE_FACTOR, new_ease - EASE_HARD_PENALTY)
            elif rating == Rating.EASY:
                new_interval *= EASY_INTERVAL_MULTIPLIER
                new_ease += EASE_EASY_BONUS

        if rating == Rating.GOOD:
            new_ease = max(MIN_EASE_FACTOR, new_ease + sm2_ease_adjustment(quality))

    new_interval = round_interval(clamp_interval(new_interval, context))
    new_ease = clamp_ease(round_ease(new_ease), context)

    next_review_at = now + timedelta(seconds=new_interval * SECONDS_PER_DAY)

    logger.debug(
        "%s rated %s: ease %.2f -> %.2f, interval %.4f -> %.4f days, reps %d -> %d",
        context, rating.value, record.ease_factor, new_ease,
        record.interval_days, new_interval, record.repetitions, new_repetitions,
    )

    return ReviewRecord(
        user_id=record.user_id,
        word_id=record.word_id,
        ease_factor=new_ease,
        interval_days=new_interval,
        repetitions=new_repetitions,
        last_reviewed_at=now,
        next_review_at=next_review_at,
    )


def estimate_next_interval(rating: Rating | str, record: ReviewRecord) -> str:
    """
    Preview label of the interval a rating would produce (e.g. "4d").
    """
    result = compute_next_review(rating, record)
    return get_interval_display(result.interval_days)
