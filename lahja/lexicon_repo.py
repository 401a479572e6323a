"""
MongoDB repository for vocabulary content.

Provides functions to query curriculum words, learner-added words and the
distractor pool used by multiple-choice exercises.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pymongo import MongoClient
from pymongo.collection import Collection

from lahja.schemas import DistractorWord, Topic, VocabularyWord, WordSource

# Load environment
load_dotenv()

logger = logging.getLogger(__name__)

# Configuration
DB_NAME = os.getenv("MONGO_DB_NAME", "lahja")
WORDS_COLLECTION = "vocabulary_words"
USER_WORDS_COLLECTION = "user_vocabulary"
TOPICS_COLLECTION = "topics"

# Global connection pool (reused across requests)
_client: Optional[MongoClient] = None


# ---- Connection Management ----

def get_client() -> MongoClient:
    """
    Get the shared MongoDB client.

    Uses a persistent connection pool that's reused across requests
    to avoid a cold start on every query.
    """
    global _client

    if _client is not None:
        return _client

    mongo_uri = os.getenv("MONGO_URI")
    if not mongo_uri:
        raise ValueError("MONGO_URI not found in environment variables")

    _client = MongoClient(
        mongo_uri,
        maxPoolSize=10,  # Connection pool size
        minPoolSize=1,   # Keep at least 1 connection alive
        maxIdleTimeMS=60000  # Keep connections alive for 60 seconds
    )
    return _client


def get_collection(name: str = WORDS_COLLECTION) -> Collection:
    """
    Get a vocabulary collection by name.
    """
    return get_client()[DB_NAME][name]


# ---- Document Conversion ----

def to_vocabulary_word(doc: dict, source: WordSource = WordSource.CURRICULUM) -> VocabularyWord:
    """
    Convert a MongoDB document into a VocabularyWord.

    Learner words store their audio under `word_audio_url`.
    """
    return VocabularyWord(
        word_id=str(doc.get("word_id") or doc.get("_id")),
        word_arabic=doc["word_arabic"],
        word_english=doc["word_english"],
        topic_id=doc.get("topic_id"),
        source=source,
        audio_url=doc.get("audio_url") or doc.get("word_audio_url"),
        sentence_text=doc.get("sentence_text"),
        sentence_english=doc.get("sentence_english"),
        sentence_audio_url=doc.get("sentence_audio_url"),
    )


# ---- Query Functions ----

def get_all_words(topic_id: Optional[str] = None) -> list[VocabularyWord]:
    """
    Get all curriculum words.

    Args:
        topic_id: If provided, only return words of this topic

    Returns:
        List of VocabularyWord
    """
    collection = get_collection(WORDS_COLLECTION)

    query = {}
    if topic_id:
        query["topic_id"] = topic_id

    return [to_vocabulary_word(doc) for doc in collection.find(query)]


def get_user_words(user_id: str) -> list[VocabularyWord]:
    """
    Get all words a learner added to their own vocabulary.
    """
    collection = get_collection(USER_WORDS_COLLECTION)
    return [
        to_vocabulary_word(doc, WordSource.USER_VOCABULARY)
        for doc in collection.find({"user_id": user_id})
    ]


def get_topics() -> list[Topic]:
    """
    Get all curriculum topics in display order.
    """
    cursor = get_collection(TOPICS_COLLECTION).find({}).sort("display_order", 1)
    return [
        Topic(
            topic_id=str(doc.get("topic_id") or doc.get("_id")),
            name=doc["name"],
            name_arabic=doc.get("name_arabic"),
            display_order=doc.get("display_order", 0),
        )
        for doc in cursor
    ]


def get_word_by_id(word_id: str) -> Optional[VocabularyWord]:
    """
    Get a curriculum word by its unique word_id.

    Returns:
        VocabularyWord, or None if not found
    """
    doc = get_collection(WORDS_COLLECTION).find_one({"word_id": word_id})
    if doc is None:
        return None
    return to_vocabulary_word(doc)


def count_words(topic_id: Optional[str] = None) -> int:
    """
    Count curriculum words (optionally within one topic).
    """
    query = {"topic_id": topic_id} if topic_id else {}
    return get_collection(WORDS_COLLECTION).count_documents(query)


def get_distractor_pool(user_id: Optional[str] = None) -> list[DistractorWord]:
    """
    Build the candidate pool for multiple-choice options.

    Curriculum words keep their topic so same-topic distractors can be
    preferred; learner words join the pool without a topic.

    Args:
        user_id: If provided, include this learner's own words

    Returns:
        List of DistractorWord
    """
    projection = {"word_arabic": 1, "word_english": 1, "topic_id": 1}
    pool = [
        DistractorWord(
            word_arabic=doc["word_arabic"],
            word_english=doc["word_english"],
            topic_id=doc.get("topic_id"),
        )
        for doc in get_collection(WORDS_COLLECTION).find({}, projection)
    ]

    if user_id:
        for doc in get_collection(USER_WORDS_COLLECTION).find({"user_id": user_id}, projection):
            pool.append(DistractorWord(
                word_arabic=doc["word_arabic"],
                word_english=doc["word_english"],
            ))

    logger.debug("Distractor pool for %s: %d entries", user_id, len(pool))
    return pool

