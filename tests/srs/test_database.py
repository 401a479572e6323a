from datetime import timedelta

import pytest

from lahja.srs import database
from lahja.srs.constants import Rating, Stage, StageResult
from lahja.srs.errors import StaleRecordError
from lahja.srs.memory_state import (
    ReviewRecord,
    StageRecord,
    initialize_new_record,
    initialize_new_stage_record,
)
from lahja.srs.models import ReviewRecordModel
from lahja.srs.scheduler import process_review


def test_database_url_requires_env(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    with pytest.raises(ValueError):
        database.get_database_url()


def test_test_mode_swaps_database(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@localhost:5432/learning_db")
    monkeypatch.setenv("TEST_MODE", "true")

    assert database.is_test_mode()
    assert database.get_database_url().endswith("/test_learning_db")


def test_default_user_id(monkeypatch):
    monkeypatch.delenv("DEFAULT_USER_ID", raising=False)
    assert database.get_default_user_id() == "learner"
    monkeypatch.setenv("DEFAULT_USER_ID", "amal")
    assert database.get_default_user_id() == "amal"


def test_missing_record_loads_as_none(sqlite_db):
    assert database.load_review_record("u1", "nope") is None
    assert database.load_stage_record("u1", "nope") is None


def test_review_record_round_trip(sqlite_db, now):
    updated, _ = process_review(initialize_new_record("u1", "w1"), Rating.EASY, timestamp=now)

    database.save_review_record(updated)
    loaded = database.load_review_record("u1", "w1")

    assert loaded == updated
    assert loaded.next_review_at.tzinfo is not None


def test_stage_record_round_trip(sqlite_db, now):
    updated, _ = process_review(initialize_new_stage_record("u1", "w1"), "correct", timestamp=now)

    database.save_stage_record(updated)
    loaded = database.load_stage_record("u1", "w1")

    assert loaded.stage == Stage.STAGE_1
    assert loaded.last_result == StageResult.CORRECT
    assert loaded.review_count == 1
    assert loaded.next_review_at == now + timedelta(minutes=10)


def test_compare_and_swap(sqlite_db, now):
    first, _ = process_review(initialize_new_record("u1", "w1"), Rating.GOOD, timestamp=now)
    database.save_review_record(first, expected_last_reviewed_at=None)

    # A second writer that read the same (empty) state must fail
    with pytest.raises(StaleRecordError):
        database.save_review_record(first, expected_last_reviewed_at=None)

    later = now + timedelta(days=1)
    second, _ = process_review(first, Rating.GOOD, timestamp=later)
    database.save_review_record(second, expected_last_reviewed_at=first.last_reviewed_at)

    with pytest.raises(StaleRecordError):
        database.save_review_record(second, expected_last_reviewed_at=first.last_reviewed_at)

    assert database.load_review_record("u1", "w1").repetitions == 2


def test_compare_and_swap_checks_the_stored_row(sqlite_db, now):
    first, _ = process_review(initialize_new_record("u1", "w1"), Rating.GOOD, timestamp=now)
    database.save_review_record(first)

    # Writer B reads the row, writer A then commits its review
    session_b = database.get_session()
    try:
        assert session_b.get(ReviewRecordModel, ("u1", "w1")).repetitions == 1

        from_a, _ = process_review(first, Rating.EASY, timestamp=now + timedelta(days=1))
        database.save_review_record(from_a, expected_last_reviewed_at=first.last_reviewed_at)

        from_b, _ = process_review(first, Rating.AGAIN, timestamp=now + timedelta(days=1, minutes=1))
        with pytest.raises(StaleRecordError):
            database._apply_review_record(session_b, from_b, first.last_reviewed_at)
        session_b.rollback()
    finally:
        session_b.close()

    stored = database.load_review_record("u1", "w1")
    assert stored == from_a


def test_stage_compare_and_swap(sqlite_db, now):
    first, _ = process_review(initialize_new_stage_record("u1", "w1"), "correct", timestamp=now)
    database.save_stage_record(first, expected_last_reviewed_at=None)

    later = now + timedelta(minutes=10)
    second, _ = process_review(first, "correct", timestamp=later)
    database.save_stage_record(second, expected_last_reviewed_at=now)

    stale, _ = process_review(first, "wrong", timestamp=later)
    with pytest.raises(StaleRecordError):
        database.save_stage_record(stale, expected_last_reviewed_at=now)

    assert database.load_stage_record("u1", "w1").stage == Stage.STAGE_2


def test_due_queries(sqlite_db, now):
    database.batch_save_records([
        ReviewRecord("u1", "late", last_reviewed_at=now - timedelta(days=3), next_review_at=now - timedelta(days=1)),
        ReviewRecord("u1", "later", last_reviewed_at=now - timedelta(days=9), next_review_at=now - timedelta(days=5)),
        ReviewRecord("u1", "future", last_reviewed_at=now, next_review_at=now + timedelta(days=2)),
        ReviewRecord("u2", "other", last_reviewed_at=now, next_review_at=now - timedelta(days=1)),
        StageRecord("u1", "s1", stage=Stage.STAGE_2, last_reviewed_at=now, next_review_at=now),
        StageRecord("u1", "s2", stage=Stage.STAGE_4, last_reviewed_at=now, next_review_at=now + timedelta(hours=1)),
    ])

    due = database.get_due_review_records("u1", now)
    due_stages = database.get_due_stage_records("u1", now)

    assert [r.word_id for r in due] == ["later", "late"]
    assert [r.word_id for r in due_stages] == ["s1"]
    assert len(database.get_all_review_records("u1")) == 3
    assert len(database.get_all_stage_records("u1")) == 2


def test_review_events_are_logged(sqlite_db, now):
    record = initialize_new_record("u1", "w1")
    events = []
    for step, rating in enumerate([Rating.AGAIN, Rating.GOOD, Rating.EASY]):
        record, event = process_review(record, rating, timestamp=now + timedelta(minutes=step))
        event["source"] = "curriculum"
        event["session_id"] = "s-1"
        event["session_position"] = step
        events.append(event)

    database.batch_log_review_events(events)
    recent = database.get_recent_events("u1", limit=2)

    assert [e["outcome"] for e in recent] == ["easy", "good"]
    assert recent[0]["repetitions_after"] == 2
    assert recent[0]["session_position"] == 2
    assert recent[1]["ease_factor_before"] == pytest.approx(2.3)


def test_reset_db_clears_tables(sqlite_db, now):
    database.save_review_record(ReviewRecord("u1", "w1", last_reviewed_at=now, next_review_at=now))

    database.reset_db()

    assert database.get_all_review_records("u1") == []
