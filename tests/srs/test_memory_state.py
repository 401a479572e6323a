from datetime import timedelta

import pytest

from lahja.srs.constants import Stage
from lahja.srs.memory_state import (
    ReviewRecord,
    compute_review_stats,
    get_interval_display,
    get_stage_index,
    initialize_new_record,
    is_due,
    is_valid_stage,
    stage_for_record,
)


def test_new_record_defaults():
    record = initialize_new_record("u1", "w1")

    assert record.ease_factor == 2.5
    assert record.interval_days == 0
    assert record.repetitions == 0
    assert record.next_review_at is None


def test_is_due(now):
    assert is_due(None, now)
    assert is_due(now, now)
    assert is_due(now - timedelta(seconds=1), now)
    assert not is_due(now + timedelta(seconds=1), now)


def test_is_due_treats_naive_as_utc(now):
    naive = (now - timedelta(minutes=5)).replace(tzinfo=None)
    assert is_due(naive, now)


@pytest.mark.parametrize("days, label", [
    (0.0001, "< 1m"),
    (1 / 1440, "1m"),
    (1 / 144, "10m"),
    (0.25, "6h"),
    (1, "1d"),
    (29, "29d"),
    (60, "2mo"),
    (400, "1.1y"),
])
def test_interval_display(days, label):
    assert get_interval_display(days) == label


def test_sub_minute_label_only_below_one_minute():
    # "< 1m" covers under one minute, not under 1/60 day
    assert get_interval_display(1 / 1441) == "< 1m"
    assert get_interval_display(2 / 1440) == "2m"
    assert get_interval_display(1 / 144) == "10m"
    assert get_interval_display(1 / 61) != "< 1m"


def test_stage_helpers():
    assert get_stage_index(Stage.NEW) == 0
    assert get_stage_index("STAGE_5") == 5
    assert is_valid_stage("STAGE_3")
    assert not is_valid_stage("STAGE_6")


def test_stage_for_record(now):
    assert stage_for_record(None) == Stage.NEW
    assert stage_for_record(initialize_new_record("u1", "w1")) == Stage.NEW

    lapsed = ReviewRecord("u1", "w1", repetitions=0, last_reviewed_at=now)
    assert stage_for_record(lapsed) == Stage.STAGE_1

    two = ReviewRecord("u1", "w1", repetitions=2, last_reviewed_at=now)
    assert stage_for_record(two) == Stage.STAGE_3

    veteran = ReviewRecord("u1", "w1", repetitions=12, last_reviewed_at=now)
    assert stage_for_record(veteran) == Stage.STAGE_5


def test_compute_review_stats(now):
    records = [
        ReviewRecord("u1", "a", repetitions=0, last_reviewed_at=now, next_review_at=now - timedelta(minutes=1)),
        ReviewRecord("u1", "b", repetitions=2, last_reviewed_at=now, next_review_at=now + timedelta(days=3)),
        ReviewRecord("u1", "c", repetitions=6, last_reviewed_at=now, next_review_at=now + timedelta(days=40)),
    ]

    stats = compute_review_stats(records, total_words=10, now=now)

    assert stats.total_words == 10
    assert stats.due_count == 1
    assert stats.learned_count == 2
    assert stats.mastered_count == 1
    assert stats.new_count == 7
