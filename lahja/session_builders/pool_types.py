"""
Typed pool models shared across session builders.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Optional, Union

from lahja.schemas import VocabularyWord
from lahja.srs.constants import Stage
from lahja.srs.memory_state import ReviewRecord, StageRecord, is_due, stage_for_record


PoolStatus = Literal["new", "due", "scheduled"]

SchedulingState = Union[ReviewRecord, StageRecord]


@dataclass(frozen=True)
class ReviewCard:
    """
    A word paired with its scheduling record for one review.

    `record` is None for words that were never reviewed.
    """
    word: VocabularyWord
    record: Optional[SchedulingState]
    scheduler: str

    @property
    def word_id(self) -> str:
        return self.word.word_id

    @property
    def source(self) -> str:
        # Unvalidated defaults keep the enum member
        return getattr(self.word.source, "value", self.word.source)

    @property
    def stage(self) -> Stage:
        """Mastery stage used to pick the exercise."""
        if isinstance(self.record, StageRecord):
            return self.record.stage
        return stage_for_record(self.record)

    @property
    def is_new(self) -> bool:
        return self.record is None or self.record.last_reviewed_at is None


@dataclass
class PoolState:
    """
    Launch-scoped pool state for one word source.
    """
    user_id: str
    source: str
    scheduler: str
    word_map: dict[str, VocabularyWord]
    records: dict[str, SchedulingState]
    new: set[str]
    due: set[str]
    scheduled: set[str]

    def move_to(self, word_id: str, target: PoolStatus) -> None:
        """
        Move a word_id to the target pool, removing it from others.
        """
        self.new.discard(word_id)
        self.due.discard(word_id)
        self.scheduled.discard(word_id)

        if target == "new":
            self.new.add(word_id)
        elif target == "due":
            self.due.add(word_id)
        elif target == "scheduled":
            self.scheduled.add(word_id)

    def classify(self, record: Optional[SchedulingState], now: datetime) -> PoolStatus:
        if record is None or record.last_reviewed_at is None:
            return "new"
        if is_due(record.next_review_at, now):
            return "due"
        return "scheduled"

    def card(self, word_id: str) -> ReviewCard:
        return ReviewCard(
            word=self.word_map[word_id],
            record=self.records.get(word_id),
            scheduler=self.scheduler,
        )
