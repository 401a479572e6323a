"""
Session lifecycle for a review session.

Holds the batch, prepares each item (exercise + options), feeds outcomes to
the memory model and buffers records and events until the session is
flushed.
"""

from __future__ import annotations

import logging
import random
import uuid
from datetime import datetime
from typing import Callable, Iterable, Optional, Sequence

from lahja import lexicon_repo
from lahja.distractors import pick_distractors, shuffle_options
from lahja.exercises import ExerciseType, has_sentence_content, option_field, pick_exercise
from lahja.schemas import DistractorWord
from lahja.session_builders import (
    PoolState,
    ReviewCard,
    build_review_pool_state,
    create_review_session,
    update_pool_state,
)
from lahja.session_types import SessionItem, SessionStats
from lahja.srs import database
from lahja.srs.constants import (
    DISTRACTOR_COUNT,
    PASSING_QUALITY,
    QUALITY_MAP,
    SCHEDULER_EASE,
    SCHEDULER_STAGE,
    SESSION_SIZE,
    Rating,
    StageResult,
)
from lahja.srs.errors import SchedulingError
from lahja.srs.memory_state import as_utc, utc_now
from lahja.srs.scheduler import get_strategy_by_name, process_review

logger = logging.getLogger(__name__)


# Outcome recorded when the learner moves on from an intro card
INTRO_OUTCOMES = {
    SCHEDULER_EASE: Rating.GOOD,
    SCHEDULER_STAGE: StageResult.CORRECT,
}
_INTRO = object()


def is_success(outcome: Rating | StageResult) -> bool:
    if isinstance(outcome, StageResult):
        return outcome == StageResult.CORRECT
    return QUALITY_MAP[outcome] >= PASSING_QUALITY


class ReviewSession:
    """
    A single review session over a fixed batch of cards.

    Persistence goes through `save_records` / `log_events`, called only on
    flush, so the controller can run against any store.
    """

    def __init__(
        self,
        user_id: str,
        cards: Iterable[ReviewCard],
        distractor_pool: Sequence[DistractorWord] = (),
        pool_state: Optional[PoolState] = None,
        clock: Callable[[], datetime] = utc_now,
        rng: Optional[random.Random] = None,
        save_records: Callable[[list], None] = database.batch_save_records,
        log_events: Callable[[list[dict]], None] = database.batch_log_review_events,
    ):
        self.user_id = user_id
        self.batch: list[ReviewCard] = list(cards)
        self.distractor_pool = list(distractor_pool)
        self.pool_state = pool_state
        self.clock = clock
        self.rng = rng
        self.save_records = save_records
        self.log_events = log_events

        self.session_id = str(uuid.uuid4())
        self.position = 0
        self.stats = SessionStats()
        self.current: Optional[SessionItem] = None
        self.start_time: Optional[datetime] = None
        self.records_buffer: list = []
        self.review_events_buffer: list[dict] = []

    @classmethod
    def for_source(
        cls,
        user_id: str,
        source: str,
        session_size: Optional[int] = SESSION_SIZE,
        topic_id: Optional[str] = None,
        clock: Callable[[], datetime] = utc_now,
        rng: Optional[random.Random] = None,
        **kwargs
    ) -> "ReviewSession":
        """
        Build a session from the learner's due queue for one word source.
        """
        pool_state = build_review_pool_state(user_id, source, now=clock(), topic_id=topic_id)
        cards = create_review_session(pool_state, session_size)
        pool = lexicon_repo.get_distractor_pool(user_id)
        return cls(user_id, cards, pool, pool_state=pool_state, clock=clock, rng=rng, **kwargs)

    # ---- Lifecycle ----

    @property
    def is_finished(self) -> bool:
        return self.position >= len(self.batch)

    @property
    def remaining(self) -> int:
        return max(0, len(self.batch) - self.position)

    def start(self) -> Optional[SessionItem]:
        """
        Start the session and return the first item (None if nothing is due).
        """
        logger.info(
            "Starting session %s for %s with %d cards",
            self.session_id, self.user_id, len(self.batch),
        )
        return self.load_next_item()

    def prepare_item(self, card: ReviewCard) -> SessionItem:
        """
        Pick the exercise for a card and build its options.

        Raises:
            SchedulingError: If the card's stage or exercise is invalid
        """
        exercise_type = pick_exercise(card.stage, has_sentence_content(card.word), self.rng)
        field = option_field(exercise_type)
        if field is None:
            return SessionItem(card=card, exercise_type=exercise_type)

        answer = getattr(card.word, field)
        distractors = pick_distractors(
            card.word.word_arabic,
            self.distractor_pool,
            card.word.topic_id,
            DISTRACTOR_COUNT,
            self.rng,
            field=field,
            answer=answer,
        )
        options = shuffle_options(answer, [getattr(d, field) for d in distractors], self.rng)
        return SessionItem(
            card=card,
            exercise_type=exercise_type,
            options=tuple(options),
            answer=answer,
        )

    def load_next_item(self) -> Optional[SessionItem]:
        """
        Load the next session item, or finish the session.
        """
        while not self.is_finished:
            card = self.batch[self.position]
            try:
                self.current = self.prepare_item(card)
            except SchedulingError as exc:
                self._skip(card, exc)
                continue
            self.start_time = self.clock()
            return self.current

        self.flush_buffers()
        self.current = None
        self.start_time = None
        return None

    def _skip(self, card: ReviewCard, exc: SchedulingError) -> None:
        logger.warning("Skipping word %s in session %s: %s", card.word_id, self.session_id, exc)
        self.stats.skipped += 1
        self.position += 1

    # ---- Outcomes ----

    def submit(self, outcome: Rating | StageResult | str) -> Optional[SessionItem]:
        """
        Process the learner's outcome for the current item and move on.

        Args:
            outcome: Rating (ease scheduler) or StageResult (stage scheduler)

        Returns:
            The next SessionItem, or None when the session is over
        """
        return self._record(outcome, counted=True)

    def continue_intro(self) -> Optional[SessionItem]:
        """
        Advance past an intro card, recording it as a success.

        Intro cards do not count toward the session stats.
        """
        return self._record(_INTRO, counted=False)

    def _record(self, outcome, counted: bool) -> Optional[SessionItem]:
        if self.current is None:
            return None

        item = self.current
        card = item.card
        now = as_utc(self.clock())

        try:
            strategy = get_strategy_by_name(card.scheduler)
            if outcome is _INTRO:
                outcome = INTRO_OUTCOMES[strategy.name]
            state = card.record if card.record is not None else strategy.new_state(self.user_id, card.word_id)
            parsed = strategy.parse_outcome(outcome)
            updated, event_data = process_review(state, parsed, strategy, now)
        except SchedulingError as exc:
            self._skip(card, exc)
            return self.load_next_item()

        latency_ms = None
        if self.start_time is not None:
            latency_ms = int((now - as_utc(self.start_time)).total_seconds() * 1000)

        event_data["source"] = card.source
        event_data["exercise_type"] = ExerciseType.parse(item.exercise_type).value
        event_data["latency_ms"] = latency_ms
        event_data["session_id"] = self.session_id
        event_data["session_position"] = self.position

        self.records_buffer.append(updated)
        self.review_events_buffer.append(event_data)

        if self.pool_state is not None:
            update_pool_state(self.pool_state, updated, now)

        if counted:
            self.stats.total += 1
            if is_success(parsed):
                self.stats.correct += 1
            else:
                self.stats.incorrect += 1

        self.position += 1
        return self.load_next_item()

    # ---- Persistence ----

    def flush_buffers(self) -> None:
        """
        Flush buffered records and events to the review store.
        """
        if self.records_buffer:
            self.save_records(self.records_buffer)
        if self.review_events_buffer:
            self.log_events(self.review_events_buffer)
        self.records_buffer = []
        self.review_events_buffer = []

    def end_session(self) -> SessionStats:
        """
        End the current session.
        """
        self.flush_buffers()
        self.current = None
        self.batch = []
        self.position = 0
        logger.info(
            "Session %s ended: %d reviewed, %d correct, %d incorrect, %d skipped",
            self.session_id, self.stats.total, self.stats.correct,
            self.stats.incorrect, self.stats.skipped,
        )
        return self.stats
