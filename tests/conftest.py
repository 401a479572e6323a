import random
from datetime import datetime, timezone

import pytest

from lahja.schemas import DistractorWord, VocabularyWord
from lahja.srs import database

FIXED_NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixed UTC clock so due times are reproducible."""
    return FIXED_NOW


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture(autouse=True)
def scheduler_env(monkeypatch):
    """Tests start from the default scheduler per word source."""
    monkeypatch.delenv("LAHJA_CURRICULUM_SCHEDULER", raising=False)
    monkeypatch.delenv("LAHJA_USER_VOCABULARY_SCHEDULER", raising=False)


@pytest.fixture
def sqlite_db(tmp_path, monkeypatch):
    """Point the review store at a fresh SQLite file."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'learning_db.sqlite'}")
    monkeypatch.delenv("TEST_MODE", raising=False)
    database.dispose_engine()
    database.init_db()
    yield tmp_path
    database.dispose_engine()


@pytest.fixture
def make_word():
    def _make(word_id, arabic=None, english=None, topic_id="food", sentence=False, source="curriculum"):
        return VocabularyWord(
            word_id=word_id,
            word_arabic=arabic or f"ar-{word_id}",
            word_english=english or f"en-{word_id}",
            topic_id=topic_id,
            source=source,
            audio_url=f"https://cdn.example/{word_id}.mp3",
            sentence_text=f"sentence {word_id}" if sentence else None,
            sentence_english=f"sentence in English {word_id}" if sentence else None,
            sentence_audio_url=f"https://cdn.example/{word_id}-s.mp3" if sentence else None,
        )
    return _make


@pytest.fixture
def distractor_pool():
    """Ten entries, four of them in the 'food' topic."""
    food = [DistractorWord(word_arabic=f"food-{i}", word_english=f"food {i}", topic_id="food") for i in range(4)]
    other = [DistractorWord(word_arabic=f"home-{i}", word_english=f"home {i}", topic_id="home") for i in range(6)]
    return food + other
