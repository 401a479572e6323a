"""
Scheduler - Strategy Selection and Review Processing

Pure scheduling logic (no database calls).

Both memory models share one contract: an outcome (rating or result) and the
current state go in, a new state comes out. The host picks a strategy per
word source through configuration.

Main workflow:
1. Load the record (caller's responsibility)
2. Pick the strategy for the word's source
3. Advance the record
4. Return updated record + event data dict
"""

from __future__ import annotations
import os
from datetime import datetime
from typing import Optional, Protocol, Tuple, Union

from dotenv import load_dotenv

from lahja.srs.constants import (
    DEFAULT_SCHEDULER_BY_SOURCE,
    SCHEDULER_EASE,
    SCHEDULER_ENV_VARS,
    SCHEDULER_STAGE,
    Rating,
    StageResult,
)
from lahja.srs.ease_updates import compute_next_review
from lahja.srs.errors import InvalidInput
from lahja.srs.memory_state import (
    ReviewRecord,
    StageRecord,
    as_utc,
    initialize_new_record,
    initialize_new_stage_record,
    utc_now,
)
from lahja.srs.stage_updates import apply_stage_result

load_dotenv()


SchedulingState = Union[ReviewRecord, StageRecord]


class SchedulingStrategy(Protocol):
    """Protocol for review schedulers."""

    name: str

    def advance(self, outcome, state, now: Optional[datetime] = None):
        """Return the new state after a review outcome."""
        ...

    def new_state(self, user_id: str, word_id: str):
        """Default state for a word that was never reviewed."""
        ...

    def parse_outcome(self, outcome):
        """Validate a raw outcome value for this strategy."""
        ...


class EaseIntervalStrategy:
    """Continuous ease/interval model (SM-2 style)."""

    name = SCHEDULER_EASE

    def advance(
        self,
        outcome: Rating | str,
        state: ReviewRecord,
        now: Optional[datetime] = None
    ) -> ReviewRecord:
        return compute_next_review(outcome, state, now)

    def new_state(self, user_id: str, word_id: str) -> ReviewRecord:
        return initialize_new_record(user_id, word_id)

    def parse_outcome(self, outcome: Rating | str) -> Rating:
        return Rating.parse(outcome)


class StageStrategy:
    """Discrete six-stage model with fixed intervals."""

    name = SCHEDULER_STAGE

    def advance(
        self,
        outcome: StageResult | str,
        state: StageRecord,
        now: Optional[datetime] = None
    ) -> StageRecord:
        return apply_stage_result(state, outcome, now)

    def new_state(self, user_id: str, word_id: str) -> StageRecord:
        return initialize_new_stage_record(user_id, word_id)

    def parse_outcome(self, outcome: StageResult | str) -> StageResult:
        return StageResult.parse(outcome)


STRATEGIES = {
    SCHEDULER_EASE: EaseIntervalStrategy(),
    SCHEDULER_STAGE: StageStrategy(),
}


def get_strategy_by_name(name: str) -> SchedulingStrategy:
    try:
        return STRATEGIES[name.strip().lower()]
    except KeyError:
        raise InvalidInput(
            f"Unknown scheduler {name!r}; expected one of {sorted(STRATEGIES)}"
        ) from None


def get_strategy(source: str) -> SchedulingStrategy:
    """
    Get the configured strategy for a word source.

    Reads LAHJA_CURRICULUM_SCHEDULER / LAHJA_USER_VOCABULARY_SCHEDULER,
    falling back to the defaults in constants.

    Args:
        source: "curriculum" or "user_vocabulary"

    Returns:
        The SchedulingStrategy for this source
    """
    source = getattr(source, "value", source)
    if source not in DEFAULT_SCHEDULER_BY_SOURCE:
        raise InvalidInput(f"Unknown word source: {source!r}")
    name = os.getenv(SCHEDULER_ENV_VARS[source], DEFAULT_SCHEDULER_BY_SOURCE[source])
    return get_strategy_by_name(name)


def strategy_for_state(state: SchedulingState) -> SchedulingStrategy:
    """Strategy that owns a given record type."""
    if isinstance(state, StageRecord):
        return STRATEGIES[SCHEDULER_STAGE]
    return STRATEGIES[SCHEDULER_EASE]


def process_review(
    state: SchedulingState,
    outcome: Rating | StageResult | str,
    strategy: Optional[SchedulingStrategy] = None,
    timestamp: Optional[datetime] = None
) -> Tuple[SchedulingState, dict]:
    """
    Process a review and return the updated record + event data.

    No database calls. Caller is responsible for:
    1. Loading the record
    2. Saving the record after review
    3. Persisting the event

    Args:
        state: Current ReviewRecord or StageRecord
        outcome: Rating (ease model) or StageResult (stage model)
        strategy: Strategy to use (defaults to the one owning the record type)
        timestamp: Review timestamp (defaults to now)

    Returns:
        Tuple of (updated_record, event_data_dict)
        event_data_dict is ready to pass to database.batch_log_review_events()
    """
    if strategy is None:
        strategy = strategy_for_state(state)
    if timestamp is None:
        timestamp = utc_now()
    timestamp = as_utc(timestamp)

    parsed = strategy.parse_outcome(outcome)
    updated = strategy.advance(parsed, state, timestamp)

    event_data = {
        'user_id': state.user_id,
        'word_id': state.word_id,
        'scheduler': strategy.name,
        'timestamp': timestamp,
        'outcome': parsed.value,
        'next_review_at': updated.next_review_at,
        'source': None,  # Will be set by caller if needed
        'exercise_type': None,  # Will be set by caller if needed
        'latency_ms': None,  # Will be set by caller if needed
        'session_id': None,  # Will be set by caller if needed
        'session_position': None,  # Will be set by caller if needed
    }
    event_data.update(_state_columns(state, "before"))
    event_data.update(_state_columns(updated, "after"))

    return updated, event_data


def _state_columns(state: SchedulingState, suffix: str) -> dict:
    if isinstance(state, StageRecord):
        return {
            f'stage_{suffix}': getattr(state.stage, "value", state.stage),
            f'ease_factor_{suffix}': None,
            f'interval_days_{suffix}': None,
            f'repetitions_{suffix}': None,
        }
    return {
        f'stage_{suffix}': None,
        f'ease_factor_{suffix}': state.ease_factor,
        f'interval_days_{suffix}': state.interval_days,
        f'repetitions_{suffix}': state.repetitions,
    }
