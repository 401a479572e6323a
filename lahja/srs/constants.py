"""
Scheduling Constants and Parameters

All configurable parameters for both review schedulers in one place:
the ease/interval model (SM-2 style) and the discrete stage model.
"""

from __future__ import annotations

from enum import Enum

from lahja.srs.errors import InvalidInput


# ---- Learner Ratings (ease/interval model) ----

class Rating(str, Enum):
    """Learner self-assessment after a flashcard review."""
    AGAIN = "again"  # Complete failure
    HARD = "hard"    # Remembered with difficulty
    GOOD = "good"    # Correct with some hesitation
    EASY = "easy"    # Perfect recall

    @classmethod
    def parse(cls, value: "Rating | str") -> "Rating":
        """Convert a raw rating value, rejecting anything unknown."""
        try:
            return cls(value)
        except ValueError:
            raise InvalidInput(f"Unknown rating: {value!r}") from None


# SM-2 quality values (0-5)
QUALITY_MAP = {
    Rating.AGAIN: 0,
    Rating.HARD: 2,
    Rating.GOOD: 3,
    Rating.EASY: 5,
}

PASSING_QUALITY = 3


# ---- Ease Factor ----

DEFAULT_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3    # Floor that keeps intervals from collapsing
EASE_FAILURE_PENALTY = 0.2
EASE_HARD_PENALTY = 0.15
EASE_EASY_BONUS = 0.15


# ---- Intervals (days) ----

INTERVALS = {
    "again": 1 / 1440,  # 1 minute (for learning)
    "hard": 1 / 144,    # 10 minutes
    "first_good": 1,    # 1 day for first successful review
    "first_easy": 4,    # 4 days for easy on first review
    "second_good": 1,
    "second_easy": 4,
}

HARD_INTERVAL_MULTIPLIER = 0.8
EASY_INTERVAL_MULTIPLIER = 1.3

# Smallest interval the scheduler will ever hand out
MIN_INTERVAL_DAYS = INTERVALS["again"]

# Largest interval, keeps due dates inside the datetime range
MAX_INTERVAL_DAYS = 36500

SECONDS_PER_DAY = 86400


# ---- Review Stats Thresholds ----

LEARNED_REPETITIONS = 1
MASTERED_REPETITIONS = 5


# ---- Stages (discrete model) ----

class Stage(str, Enum):
    """Discrete mastery level, ordered from NEW to STAGE_5."""
    NEW = "NEW"
    STAGE_1 = "STAGE_1"
    STAGE_2 = "STAGE_2"
    STAGE_3 = "STAGE_3"
    STAGE_4 = "STAGE_4"
    STAGE_5 = "STAGE_5"

    @classmethod
    def parse(cls, value: "Stage | str") -> "Stage":
        try:
            return cls(value)
        except ValueError:
            raise InvalidInput(f"Unknown stage: {value!r}") from None


class StageResult(str, Enum):
    """Outcome of a stage-model exercise."""
    CORRECT = "correct"
    INCORRECT = "incorrect"
    WRONG = "wrong"  # Harder failure: full reset to NEW

    @classmethod
    def parse(cls, value: "StageResult | str") -> "StageResult":
        try:
            return cls(value)
        except ValueError:
            raise InvalidInput(f"Unknown review result: {value!r}") from None


STAGE_ORDER = [
    Stage.NEW,
    Stage.STAGE_1,
    Stage.STAGE_2,
    Stage.STAGE_3,
    Stage.STAGE_4,
    Stage.STAGE_5,
]

FIRST_STAGE = Stage.STAGE_1
TERMINAL_STAGE = Stage.STAGE_5

# Intervals in minutes
STAGE_INTERVALS = {
    Stage.NEW: 0,          # immediate
    Stage.STAGE_1: 10,     # 10 minutes
    Stage.STAGE_2: 1440,   # 1 day
    Stage.STAGE_3: 4320,   # 3 days
    Stage.STAGE_4: 10080,  # 7 days
    Stage.STAGE_5: 30240,  # 21 days
}

STAGE_LABELS = {
    Stage.NEW: "New",
    Stage.STAGE_1: "Stage 1",
    Stage.STAGE_2: "Stage 2",
    Stage.STAGE_3: "Stage 3",
    Stage.STAGE_4: "Stage 4",
    Stage.STAGE_5: "Stage 5",
}


# ---- Scheduler Selection ----

SCHEDULER_EASE = "ease"
SCHEDULER_STAGE = "stage"

# Defaults per word source, overridable through the environment
DEFAULT_SCHEDULER_BY_SOURCE = {
    "curriculum": SCHEDULER_EASE,
    "user_vocabulary": SCHEDULER_STAGE,
}

SCHEDULER_ENV_VARS = {
    "curriculum": "LAHJA_CURRICULUM_SCHEDULER",
    "user_vocabulary": "LAHJA_USER_VOCABULARY_SCHEDULER",
}


# ---- Session Configuration ----

SESSION_SIZE = 20        # Cards per review session
DISTRACTOR_COUNT = 3     # Wrong options per multiple-choice exercise
