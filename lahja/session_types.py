"""
Session item types used by the review session controller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from lahja.exercises import ExerciseType
from lahja.session_builders.pool_types import ReviewCard


@dataclass(frozen=True)
class SessionItem:
    """
    A single review step within a session batch.
    """
    card: ReviewCard
    exercise_type: ExerciseType
    options: tuple[str, ...] = ()
    answer: Optional[str] = None  # Correct option for multiple-choice exercises

    @property
    def show_answer_on_load(self) -> bool:
        return self.exercise_type == ExerciseType.INTRO


@dataclass
class SessionStats:
    """Per-session counters; intro cards are not counted."""
    total: int = 0
    correct: int = 0
    incorrect: int = 0
    skipped: int = 0

    @property
    def accuracy(self) -> float:
        return self.correct / self.total if self.total else 0.0
