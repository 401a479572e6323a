"""
SQLAlchemy ORM Models for the Review Store

Defines ReviewRecord, StageRecord and ReviewEvent tables.
All timestamps are stored as UTC.
"""

from sqlalchemy import Column, DateTime, Float, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class ReviewRecordModel(Base):
    """
    Persistent ease/interval state for a single (user_id, word_id) pair.
    """
    __tablename__ = 'review_records'

    user_id = Column(String(255), primary_key=True, nullable=False)
    word_id = Column(String(255), primary_key=True, nullable=False)

    ease_factor = Column(Float, nullable=False, default=2.5)
    interval_days = Column(Float, nullable=False, default=0.0)  # Fractional for sub-day steps
    repetitions = Column(Integer, nullable=False, default=0)

    last_reviewed_at = Column(DateTime(timezone=True), nullable=True)
    next_review_at = Column(DateTime(timezone=True), nullable=False, index=True)

    def __repr__(self):
        return f"<ReviewRecord({self.user_id}, {self.word_id}, reps={self.repetitions})>"


class StageRecordModel(Base):
    """
    Persistent stage state for a single (user_id, word_id) pair.
    """
    __tablename__ = 'stage_records'

    user_id = Column(String(255), primary_key=True, nullable=False)
    word_id = Column(String(255), primary_key=True, nullable=False)

    stage = Column(String(20), nullable=False, default="NEW")
    last_result = Column(String(20), nullable=True)  # correct / incorrect / wrong

    last_reviewed_at = Column(DateTime(timezone=True), nullable=True)
    next_review_at = Column(DateTime(timezone=True), nullable=False, index=True)

    review_count = Column(Integer, nullable=False, default=0)
    correct_count = Column(Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<StageRecord({self.user_id}, {self.word_id}, {self.stage})>"


class ReviewEvent(Base):
    """
    Log entry for a single review attempt.

    Captures the scheduling state before/after a review for either model.
    """
    __tablename__ = 'review_events'

    id = Column(Integer, primary_key=True, autoincrement=True)

    user_id = Column(String(255), nullable=False, index=True)
    word_id = Column(String(255), nullable=False)
    source = Column(String(50), nullable=True)  # curriculum / user_vocabulary
    scheduler = Column(String(20), nullable=False)  # ease / stage

    # Timing and outcome
    timestamp = Column(DateTime(timezone=True), nullable=False)
    outcome = Column(String(20), nullable=False)  # Rating or stage result value
    exercise_type = Column(String(50), nullable=True)
    latency_ms = Column(Integer, nullable=True)

    # State before review
    ease_factor_before = Column(Float, nullable=True)
    interval_days_before = Column(Float, nullable=True)
    repetitions_before = Column(Integer, nullable=True)
    stage_before = Column(String(20), nullable=True)

    # State after review
    ease_factor_after = Column(Float, nullable=True)
    interval_days_after = Column(Float, nullable=True)
    repetitions_after = Column(Integer, nullable=True)
    stage_after = Column(String(20), nullable=True)
    next_review_at = Column(DateTime(timezone=True), nullable=False)

    # Session context (optional)
    session_id = Column(String(255), nullable=True)
    session_position = Column(Integer, nullable=True)

    def __repr__(self):
        return f"<ReviewEvent(id={self.id}, {self.word_id}, outcome={self.outcome})>"
