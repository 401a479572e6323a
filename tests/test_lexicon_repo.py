from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from lahja import lexicon_repo
from lahja.schemas import VocabularyWord, WordSource


@pytest.fixture
def collections(monkeypatch):
    """Replace MongoDB collections with mocks keyed by name."""
    mocks = {
        lexicon_repo.WORDS_COLLECTION: MagicMock(),
        lexicon_repo.USER_WORDS_COLLECTION: MagicMock(),
    }
    monkeypatch.setattr(lexicon_repo, "get_collection", lambda name=lexicon_repo.WORDS_COLLECTION: mocks[name])
    return mocks


CURRICULUM_DOCS = [
    {
        "_id": "abc",
        "word_id": "w-1",
        "word_arabic": "marhaba",
        "word_english": "hello",
        "topic_id": "greetings",
        "audio_url": "https://cdn.example/marhaba.mp3",
        "sentence_text": "marhaba ya sadiqi",
        "sentence_audio_url": "https://cdn.example/marhaba-s.mp3",
    },
    {
        "_id": "def",
        "word_id": "w-2",
        "word_arabic": "shukran",
        "word_english": "thank you",
        "topic_id": "greetings",
    },
]


def test_get_all_words_filters_by_topic(collections):
    collections[lexicon_repo.WORDS_COLLECTION].find.return_value = CURRICULUM_DOCS

    words = lexicon_repo.get_all_words("greetings")

    collections[lexicon_repo.WORDS_COLLECTION].find.assert_called_once_with({"topic_id": "greetings"})
    assert [w.word_id for w in words] == ["w-1", "w-2"]
    assert words[0].has_sentence
    assert not words[1].has_sentence
    assert words[0].source == "curriculum"


def test_get_user_words(collections):
    collections[lexicon_repo.USER_WORDS_COLLECTION].find.return_value = [
        {"_id": "u-9", "word_arabic": "sayyara", "word_english": "car", "word_audio_url": "car.mp3"},
    ]

    words = lexicon_repo.get_user_words("amal")

    collections[lexicon_repo.USER_WORDS_COLLECTION].find.assert_called_once_with({"user_id": "amal"})
    assert words[0].word_id == "u-9"
    assert words[0].source == WordSource.USER_VOCABULARY.value
    assert words[0].audio_url == "car.mp3"
    assert words[0].topic_id is None


def test_get_word_by_id(collections):
    collection = collections[lexicon_repo.WORDS_COLLECTION]
    collection.find_one.return_value = CURRICULUM_DOCS[1]

    assert lexicon_repo.get_word_by_id("w-2").word_english == "thank you"

    collection.find_one.return_value = None
    assert lexicon_repo.get_word_by_id("missing") is None


def test_count_words(collections):
    collections[lexicon_repo.WORDS_COLLECTION].count_documents.return_value = 42

    assert lexicon_repo.count_words() == 42
    collections[lexicon_repo.WORDS_COLLECTION].count_documents.assert_called_once_with({})


def test_distractor_pool_includes_user_words_without_topic(collections):
    collections[lexicon_repo.WORDS_COLLECTION].find.return_value = CURRICULUM_DOCS
    collections[lexicon_repo.USER_WORDS_COLLECTION].find.return_value = [
        {"word_arabic": "sayyara", "word_english": "car", "topic_id": "ignored"},
    ]

    pool = lexicon_repo.get_distractor_pool("amal")

    assert [d.word_arabic for d in pool] == ["marhaba", "shukran", "sayyara"]
    assert pool[0].topic_id == "greetings"
    assert pool[2].topic_id is None


def test_distractor_pool_without_user(collections):
    collections[lexicon_repo.WORDS_COLLECTION].find.return_value = CURRICULUM_DOCS

    pool = lexicon_repo.get_distractor_pool()

    assert len(pool) == 2
    collections[lexicon_repo.USER_WORDS_COLLECTION].find.assert_not_called()


def test_get_client_requires_uri(monkeypatch):
    monkeypatch.setattr(lexicon_repo, "_client", None)
    monkeypatch.delenv("MONGO_URI", raising=False)

    with pytest.raises(ValueError):
        lexicon_repo.get_client()


def test_word_to_distractor():
    word = VocabularyWord(word_id="w", word_arabic="bab", word_english="door", topic_id="home")

    distractor = word.to_distractor()

    assert (distractor.word_arabic, distractor.word_english, distractor.topic_id) == ("bab", "door", "home")


def test_get_topics_sorted_by_display_order(collections):
    topics = MagicMock()
    topics.find.return_value.sort.return_value = [
        {"_id": "t1", "name": "Greetings", "name_arabic": "tahiyyat", "display_order": 1},
        {"topic_id": "food", "name": "Food"},
    ]
    collections[lexicon_repo.TOPICS_COLLECTION] = topics

    result = lexicon_repo.get_topics()

    topics.find.return_value.sort.assert_called_once_with("display_order", 1)
    assert [t.topic_id for t in result] == ["t1", "food"]
    assert result[1].display_order == 0


def test_schema_config():
    assert VocabularyWord.model_config["use_enum_values"] is True
    word = VocabularyWord(word_id="w", word_arabic="bab", word_english="door", source=WordSource.USER_VOCABULARY)
    assert word.source == "user_vocabulary"

    distractor = word.to_distractor()
    with pytest.raises(ValidationError):
        distractor.word_english = "gate"
