"""Session builder modules for review queues."""

from lahja.session_builders.pool_types import PoolState, ReviewCard
from lahja.session_builders.pool_utils import fill_in_order, update_pool_state
from lahja.session_builders.review_builder import (
    build_review_pool_state,
    create_review_session,
)

__all__ = [
    "PoolState",
    "ReviewCard",
    "fill_in_order",
    "update_pool_state",
    "build_review_pool_state",
    "create_review_session",
]
