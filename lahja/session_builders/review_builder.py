"""
Review Builder - Due Queue Creation

Creates review sessions for one word source from two pools:
1. New pool: words without a record (or never reviewed)
2. Due pool: words whose next_review_at is at or before now

Queue order depends on the configured scheduler:
- ease: new words first, then most overdue first
- stage: NEW first, then ascending stage
"""

from __future__ import annotations
import logging
from datetime import datetime
from typing import Iterable, Optional

from lahja import lexicon_repo
from lahja.schemas import VocabularyWord, WordSource
from lahja.session_builders.pool_types import PoolState, ReviewCard, SchedulingState
from lahja.session_builders.pool_utils import ease_queue_key, fill_in_order, stage_queue_key
from lahja.srs import database
from lahja.srs.constants import SCHEDULER_STAGE, SESSION_SIZE
from lahja.srs.memory_state import as_utc, utc_now
from lahja.srs.scheduler import get_strategy

logger = logging.getLogger(__name__)


def load_words(user_id: str, source: str, topic_id: Optional[str] = None) -> list[VocabularyWord]:
    """
    Load the words of a source from the content store.
    """
    if WordSource(source) == WordSource.USER_VOCABULARY:
        return lexicon_repo.get_user_words(user_id)
    return lexicon_repo.get_all_words(topic_id)


def load_records(user_id: str, scheduler: str) -> list[SchedulingState]:
    """
    Load every record of the learner for the given scheduler.
    """
    if scheduler == SCHEDULER_STAGE:
        return database.get_all_stage_records(user_id)
    return database.get_all_review_records(user_id)


def build_review_pool_state(
    user_id: str,
    source: str = WordSource.CURRICULUM.value,
    words: Optional[Iterable[VocabularyWord]] = None,
    records: Optional[Iterable[SchedulingState]] = None,
    now: Optional[datetime] = None,
    topic_id: Optional[str] = None
) -> PoolState:
    """
    Build launch-scoped pool state for a word source.

    Args:
        user_id: Learner identifier
        source: "curriculum" or "user_vocabulary"
        words: Words to consider (loaded from MongoDB when omitted)
        records: Learner records (loaded from the review store when omitted)
        now: Reference time (defaults to now)
        topic_id: Restrict curriculum words to one topic

    Returns:
        PoolState with every word classified as new, due or scheduled

    Raises:
        InvalidInput: If the source or its configured scheduler is unknown
    """
    source = getattr(source, "value", source)
    scheduler = get_strategy(source).name
    now = as_utc(now or utc_now())

    if words is None:
        words = load_words(user_id, source, topic_id)
    if records is None:
        records = load_records(user_id, scheduler)

    word_map = {w.word_id: w for w in words if w.word_id}
    record_map = {r.word_id: r for r in records if r.word_id in word_map}

    pool_state = PoolState(
        user_id=user_id,
        source=source,
        scheduler=scheduler,
        word_map=word_map,
        records=record_map,
        new=set(),
        due=set(),
        scheduled=set(),
    )
    for word_id in word_map:
        pool_state.move_to(word_id, pool_state.classify(record_map.get(word_id), now))

    logger.info(
        "Pool for %s/%s (%s): %d new, %d due, %d scheduled",
        user_id, source, scheduler,
        len(pool_state.new), len(pool_state.due), len(pool_state.scheduled),
    )
    return pool_state


def create_review_session(
    pool_state: PoolState,
    session_size: Optional[int] = SESSION_SIZE
) -> list[ReviewCard]:
    """
    Create the ordered review queue from a pool state.

    Args:
        pool_state: Launch-scoped pool state
        session_size: Maximum number of cards (None = no cap)

    Returns:
        List of ReviewCard in presentation order
    """
    cards = [pool_state.card(word_id) for word_id in pool_state.new | pool_state.due]
    # Stable base order so equal keys keep the content order
    position = {word_id: i for i, word_id in enumerate(pool_state.word_map)}
    cards.sort(key=lambda c: position[c.word_id])

    if pool_state.scheduler == SCHEDULER_STAGE:
        cards.sort(key=stage_queue_key)
        return fill_in_order({"due": cards}, ["due"], session_size)

    new_cards = sorted((c for c in cards if c.is_new), key=ease_queue_key)
    due_cards = sorted((c for c in cards if not c.is_new), key=ease_queue_key)
    return fill_in_order({"new": new_cards, "due": due_cards}, ["new", "due"], session_size)
