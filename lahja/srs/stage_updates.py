"""
Stage Updates (discrete model)

Implements the coarse memory model: a word sits on one of six ordered
stages, each with a fixed review interval.

Transition rules:
- correct: move up one stage (STAGE_5 absorbs further successes)
- incorrect: move down one stage, never below STAGE_1
- wrong: reset to NEW

This trades ease-factor nuance for predictability.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from lahja.srs.constants import (
    FIRST_STAGE,
    STAGE_INTERVALS,
    STAGE_ORDER,
    Stage,
    StageResult,
)
from lahja.srs.memory_state import StageRecord, as_utc, utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StageTransition:
    """Result of a stage transition."""
    new_stage: Stage
    interval_minutes: int
    next_review_at: datetime


def next_stage(stage: Stage) -> Stage:
    index = STAGE_ORDER.index(stage)
    return STAGE_ORDER[min(index + 1, len(STAGE_ORDER) - 1)]


def previous_stage(stage: Stage) -> Stage:
    index = STAGE_ORDER.index(stage)
    floor = STAGE_ORDER.index(FIRST_STAGE)
    return STAGE_ORDER[max(index - 1, floor)]


def transition_stage(
    current_stage: Stage | str,
    result: StageResult | str,
    now: Optional[datetime] = None
) -> StageTransition:
    """
    Compute the next stage and due time for a review result.

    Args:
        current_stage: Stage before the review
        result: correct, incorrect or wrong
        now: Review timestamp (defaults to now)

    Returns:
        StageTransition with the new stage, its interval and the due time

    Raises:
        InvalidInput: If the stage or result is unknown
    """
    current_stage = Stage.parse(current_stage)
    result = StageResult.parse(result)
    if now is None:
        now = utc_now()
    now = as_utc(now)

    if result == StageResult.CORRECT:
        new_stage = next_stage(current_stage)
    elif result == StageResult.INCORRECT:
        new_stage = previous_stage(current_stage)
    else:
        new_stage = Stage.NEW

    interval_minutes = STAGE_INTERVALS[new_stage]
    return StageTransition(
        new_stage=new_stage,
        interval_minutes=interval_minutes,
        next_review_at=now + timedelta(minutes=interval_minutes),
    )


def apply_stage_result(
    record: StageRecord,
    result: StageResult | str,
    now: Optional[datetime] = None
) -> StageRecord:
    """
    Apply a review result to a stage record and return the new record.
    """
    result = StageResult.parse(result)
    if now is None:
        now = utc_now()
    now = as_utc(now)

    transition = transition_stage(record.stage, result, now)

    logger.debug(
        "%s/%s %s: %s -> %s (due in %d min)",
        record.user_id, record.word_id, result.value,
        Stage.parse(record.stage).value, transition.new_stage.value,
        transition.interval_minutes,
    )

    return StageRecord(
        user_id=record.user_id,
        word_id=record.word_id,
        stage=transition.new_stage,
        last_result=result,
        last_reviewed_at=now,
        next_review_at=transition.next_review_at,
        review_count=record.review_count + 1,
        correct_count=record.correct_count + (1 if result == StageResult.CORRECT else 0),
    )
