"""
Distractor selection for multiple-choice exercises.

Picks plausible wrong options from a candidate pool, preferring words of the
same topic, and shuffles them together with the correct answer.
"""

from __future__ import annotations

import logging
import random
from typing import Optional, Sequence, TypeVar

from lahja.schemas import DistractorWord
from lahja.srs.constants import DISTRACTOR_COUNT

logger = logging.getLogger(__name__)

T = TypeVar("T")


def pick_distractors(
    correct_key: str,
    pool: Sequence[DistractorWord],
    topic_id: Optional[str] = None,
    count: int = DISTRACTOR_COUNT,
    rng: Optional[random.Random] = None,
    field: str = "word_arabic",
    answer: Optional[str] = None
) -> list[DistractorWord]:
    """
    Select up to `count` distractors from the pool, excluding the correct word.

    Priority: same-topic words first (random order), then the rest of the
    pool. Returns fewer than `count` entries when the pool is too small;
    never returns duplicates or the correct key. Entries are also distinct
    on `field`, the value shown to the learner, and never show `answer`.

    Args:
        correct_key: word_arabic of the correct answer
        pool: Candidate entries
        topic_id: Topic of the correct word (None disables topic preference)
        count: Number of distractors wanted
        rng: Random source (defaults to the process-level generator)
        field: Attribute displayed as the option text
        answer: Displayed value of the correct answer (defaults to
            correct_key when field is word_arabic)

    Returns:
        List of distinct DistractorWord entries
    """
    shuffler = rng if rng is not None else random
    if answer is None and field == "word_arabic":
        answer = correct_key

    filtered = [
        w for w in pool
        if w.word_arabic != correct_key and getattr(w, field) != answer
    ]
    if not filtered or count <= 0:
        return []

    # Bucket: same topic / different topic
    if topic_id:
        same_topic = [w for w in filtered if w.topic_id == topic_id]
        other_topic = [w for w in filtered if w.topic_id != topic_id]
    else:
        same_topic = []
        other_topic = filtered

    result: list[DistractorWord] = []
    used: set[str] = {correct_key}
    shown: set[str] = {answer} if answer is not None else set()

    for bucket in (same_topic, other_topic):
        candidates = list(bucket)
        shuffler.shuffle(candidates)
        for word in candidates:
            if len(result) >= count:
                break
            value = getattr(word, field)
            if word.word_arabic in used or value in shown:
                continue
            result.append(word)
            used.add(word.word_arabic)
            shown.add(value)

    if len(result) < count:
        logger.debug(
            "Only %d of %d distractors available for %r", len(result), count, correct_key
        )
    return result


def shuffle_options(
    correct: T,
    distractors: Sequence[T],
    rng: Optional[random.Random] = None
) -> list[T]:
    """
    Insert the correct answer into the distractors and shuffle everything.

    Uses a full Fisher-Yates shuffle so every slot is equally likely to hold
    the correct answer.
    """
    shuffler = rng if rng is not None else random

    options = [correct, *distractors]
    for i in range(len(options) - 1, 0, -1):
        j = shuffler.randrange(i + 1)
        options[i], options[j] = options[j], options[i]
    return options
