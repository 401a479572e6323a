"""
Pool utilities for session builders.

These helpers provide shared, minimal primitives for building and reasoning
about review queues without enforcing a single scheduling policy.
"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional, TypeVar

from lahja.session_builders.pool_types import PoolState, ReviewCard, SchedulingState
from lahja.srs.memory_state import as_utc, get_stage_index


T = TypeVar("T")

# Sorts never-scheduled records ahead of every real due time
_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def fill_in_order(
    pools: dict[str, list[T]],
    order: list[str],
    target_size: Optional[int] = None
) -> list[T]:
    """
    Fill a session by walking pools in order until target_size is reached.

    A target_size of None takes every item.
    """
    session: list[T] = []
    for name in order:
        for item in pools.get(name, []):
            if target_size is not None and len(session) >= target_size:
                return session
            session.append(item)
    return session


def due_time_key(record: Optional[SchedulingState]) -> datetime:
    if record is None or record.next_review_at is None:
        return _EPOCH
    return as_utc(record.next_review_at)


def ease_queue_key(card: ReviewCard) -> tuple:
    """Never-reviewed words first, then most overdue first."""
    return (0 if card.is_new else 1, due_time_key(card.record))


def stage_queue_key(card: ReviewCard) -> tuple:
    """NEW first, then ascending stage; ties broken by due time."""
    return (get_stage_index(card.stage), due_time_key(card.record))


def update_pool_state(
    pool_state: PoolState,
    record: SchedulingState,
    now: datetime
) -> None:
    """
    Store a freshly reviewed record and re-classify its word.
    """
    if record.word_id not in pool_state.word_map:
        return
    pool_state.records[record.word_id] = record
    pool_state.move_to(record.word_id, pool_state.classify(record, now))
