"""
Pydantic models for the vocabulary content.

These models define the structure of MongoDB documents for curriculum
words and learner-added words, and the read-only entries used to build
multiple-choice distractors.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class WordSource(str, Enum):
    """Where a word comes from; each source has its own scheduler."""
    CURRICULUM = "curriculum"            # Topic-based course words
    USER_VOCABULARY = "user_vocabulary"  # Words the learner added


class Topic(BaseModel):
    """A curriculum topic grouping related words."""
    topic_id: str
    name: str
    name_arabic: Optional[str] = None
    display_order: int = 0


class VocabularyWord(BaseModel):
    """
    A single word pair with optional example sentence.
    """
    word_id: str = Field(..., description="Unique word identifier")
    word_arabic: str = Field(..., description="Target-language word")
    word_english: str = Field(..., description="English gloss")

    topic_id: Optional[str] = Field(default=None, description="Curriculum topic (None for learner words)")
    source: WordSource = WordSource.CURRICULUM

    # Media and sentence content (optional)
    audio_url: Optional[str] = None
    sentence_text: Optional[str] = None
    sentence_english: Optional[str] = None
    sentence_audio_url: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True)  # Store enum values as strings in MongoDB

    @property
    def has_sentence(self) -> bool:
        """Sentence exercises need both the sentence text and its audio."""
        return bool(self.sentence_text and self.sentence_audio_url)

    def to_distractor(self) -> "DistractorWord":
        return DistractorWord(
            word_arabic=self.word_arabic,
            word_english=self.word_english,
            topic_id=self.topic_id,
        )


class DistractorWord(BaseModel):
    """
    Candidate wrong answer for multiple-choice exercises.

    Keyed by word_arabic; read-only input to the distractor selector.
    """
    word_arabic: str
    word_english: str
    topic_id: Optional[str] = None

    model_config = ConfigDict(frozen=True)
