"""
Exercise selection by mastery stage.

Each stage allows a set of exercise types of increasing difficulty
(recognition -> production -> listening comprehension -> free recall).
Sentence exercises are only offered when the word has sentence content.
"""

from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Final, Optional

from lahja.schemas import VocabularyWord
from lahja.srs.constants import Stage
from lahja.srs.errors import InvalidInput

logger = logging.getLogger(__name__)


class ExerciseType(str, Enum):
    """Exercise variants a card can be rendered as."""
    INTRO = "intro"                              # NEW: show word, audio, meaning, sentence
    AUDIO_TO_ARABIC = "audio_to_arabic"          # hear audio -> pick Arabic word
    ARABIC_TO_ENGLISH = "arabic_to_english"      # see Arabic -> pick English meaning
    ENGLISH_TO_ARABIC = "english_to_arabic"      # see English -> pick Arabic
    SENTENCE_CLOZE = "sentence_cloze"            # hear sentence -> pick missing word
    SENTENCE_TO_MEANING = "sentence_to_meaning"  # hear sentence -> pick English meaning

    @classmethod
    def parse(cls, value: "ExerciseType | str") -> "ExerciseType":
        try:
            return cls(value)
        except ValueError:
            raise InvalidInput(f"Unknown exercise type: {value!r}") from None


STAGE_EXERCISES: Final[dict[Stage, tuple[ExerciseType, ...]]] = {
    Stage.NEW: (ExerciseType.INTRO,),
    Stage.STAGE_1: (ExerciseType.AUDIO_TO_ARABIC,),
    Stage.STAGE_2: (ExerciseType.AUDIO_TO_ARABIC, ExerciseType.ARABIC_TO_ENGLISH),
    Stage.STAGE_3: (ExerciseType.SENTENCE_CLOZE, ExerciseType.ARABIC_TO_ENGLISH),
    Stage.STAGE_4: (ExerciseType.ENGLISH_TO_ARABIC, ExerciseType.AUDIO_TO_ARABIC),
    Stage.STAGE_5: (ExerciseType.SENTENCE_TO_MEANING,),
}

# Exercises that require sentence data
SENTENCE_EXERCISES: Final[frozenset[ExerciseType]] = frozenset({
    ExerciseType.SENTENCE_CLOZE,
    ExerciseType.SENTENCE_TO_MEANING,
})

# Word-level exercise used when every candidate needs a sentence
FALLBACK_EXERCISE: Final[ExerciseType] = ExerciseType.ARABIC_TO_ENGLISH

# Which side of the word pair the multiple-choice options show
ARABIC_OPTION_EXERCISES: Final[frozenset[ExerciseType]] = frozenset({
    ExerciseType.AUDIO_TO_ARABIC,
    ExerciseType.ENGLISH_TO_ARABIC,
    ExerciseType.SENTENCE_CLOZE,
})
ENGLISH_OPTION_EXERCISES: Final[frozenset[ExerciseType]] = frozenset({
    ExerciseType.ARABIC_TO_ENGLISH,
    ExerciseType.SENTENCE_TO_MEANING,
})


def needs_sentence(exercise_type: ExerciseType) -> bool:
    return ExerciseType.parse(exercise_type) in SENTENCE_EXERCISES


def has_sentence_content(word: VocabularyWord | dict) -> bool:
    """True when both the sentence text and its audio are present."""
    if isinstance(word, VocabularyWord):
        return word.has_sentence
    return bool(word.get("sentence_text") and word.get("sentence_audio_url"))


def candidate_exercises(stage: Stage, has_sentence: bool) -> list[ExerciseType]:
    """
    Allowed exercises for a stage after sentence gating.

    Never empty: falls back to FALLBACK_EXERCISE.
    """
    options = list(STAGE_EXERCISES[Stage.parse(stage)])

    if not has_sentence:
        options = [e for e in options if e not in SENTENCE_EXERCISES]
        if not options:
            options = [FALLBACK_EXERCISE]

    return options


def pick_exercise(
    stage: Stage,
    has_sentence: bool,
    rng: Optional[random.Random] = None
) -> ExerciseType:
    """
    Pick the exercise to render for a card.

    Called on every presentation so repeated reviews of the same word at
    the same stage vary.

    Args:
        stage: Current mastery stage of the word
        has_sentence: Whether sentence text and audio are available
        rng: Random source (defaults to the process-level generator)

    Returns:
        ExerciseType chosen uniformly among the allowed candidates

    Raises:
        InvalidInput: If the stage is unknown
    """
    options = candidate_exercises(stage, has_sentence)
    chooser = rng if rng is not None else random
    exercise = options[chooser.randrange(len(options))]
    logger.debug("Stage %s (sentence=%s) -> %s", Stage.parse(stage).value, has_sentence, exercise.value)
    return exercise


def option_field(exercise_type: ExerciseType) -> Optional[str]:
    """
    Word field shown in the options of a multiple-choice exercise.

    Returns:
        "word_arabic", "word_english", or None for non-choice exercises (intro)
    """
    exercise_type = ExerciseType.parse(exercise_type)
    if exercise_type in ARABIC_OPTION_EXERCISES:
        return "word_arabic"
    if exercise_type in ENGLISH_OPTION_EXERCISES:
        return "word_english"
    return None


def is_multiple_choice(exercise_type: ExerciseType) -> bool:
    return option_field(exercise_type) is not None
