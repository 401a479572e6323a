"""
SRS - Adaptive Review Scheduling

Main API for the review scheduling engine.

Two interchangeable memory models share one contract
(outcome + current state -> new state):
- Ease/interval model (SM-2 style) driven by again/hard/good/easy ratings
- Discrete stage model (NEW, STAGE_1..STAGE_5) driven by
  correct/incorrect/wrong results

Quick start:
    from lahja import srs

    # Initialize database
    srs.init_db()

    # Process a review (algorithm only, no DB calls)
    record, event_data = srs.process_review(record, srs.Rating.GOOD)

    # Get due records
    due = srs.get_due_review_records(user_id)
"""

# Core scheduler API (algorithm logic)
from lahja.srs.scheduler import (
    EaseIntervalStrategy,
    SchedulingStrategy,
    StageStrategy,
    get_strategy,
    get_strategy_by_name,
    process_review,
    strategy_for_state,
)
from lahja.srs.ease_updates import compute_next_review, estimate_next_interval
from lahja.srs.stage_updates import StageTransition, apply_stage_result, transition_stage

# Database API
from lahja.srs.database import (
    init_db,
    reset_db,
    is_test_mode,
    get_default_user_id,
    load_review_record,
    save_review_record,
    load_stage_record,
    save_stage_record,
    batch_save_records,
    batch_log_review_events,
    get_all_review_records,
    get_all_stage_records,
    get_due_review_records,
    get_due_stage_records,
    get_recent_events,
)

# Constants and parameters
from lahja.srs.constants import (
    Rating,
    Stage,
    StageResult,
    QUALITY_MAP,
    DEFAULT_EASE_FACTOR,
    MIN_EASE_FACTOR,
    INTERVALS,
    STAGE_ORDER,
    STAGE_INTERVALS,
    STAGE_LABELS,
)

# Errors
from lahja.srs.errors import (
    SchedulingError,
    InvalidInput,
    InvariantViolation,
    StaleRecordError,
)

# Memory state
from lahja.srs.memory_state import (
    ReviewRecord,
    StageRecord,
    ReviewStats,
    initialize_new_record,
    initialize_new_stage_record,
    is_due,
    get_stage_index,
    is_valid_stage,
    stage_for_record,
    compute_review_stats,
    get_interval_display,
)


__all__ = [
    # Core algorithm
    "process_review",
    "compute_next_review",
    "estimate_next_interval",
    "transition_stage",
    "apply_stage_result",
    "StageTransition",
    "SchedulingStrategy",
    "EaseIntervalStrategy",
    "StageStrategy",
    "get_strategy",
    "get_strategy_by_name",
    "strategy_for_state",

    # Database operations
    "init_db",
    "reset_db",
    "is_test_mode",
    "get_default_user_id",
    "load_review_record",
    "save_review_record",
    "load_stage_record",
    "save_stage_record",
    "batch_save_records",
    "batch_log_review_events",
    "get_all_review_records",
    "get_all_stage_records",
    "get_due_review_records",
    "get_due_stage_records",
    "get_recent_events",

    # Enums
    "Rating",
    "Stage",
    "StageResult",

    # Errors
    "SchedulingError",
    "InvalidInput",
    "InvariantViolation",
    "StaleRecordError",

    # Memory state
    "ReviewRecord",
    "StageRecord",
    "ReviewStats",
    "initialize_new_record",
    "initialize_new_stage_record",
    "is_due",
    "get_stage_index",
    "is_valid_stage",
    "stage_for_record",
    "compute_review_stats",
    "get_interval_display",

    # Parameters
    "QUALITY_MAP",
    "DEFAULT_EASE_FACTOR",
    "MIN_EASE_FACTOR",
    "INTERVALS",
    "STAGE_ORDER",
    "STAGE_INTERVALS",
    "STAGE_LABELS",
]
