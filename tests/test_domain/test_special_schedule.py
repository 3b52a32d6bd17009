"""
Tests for SpecialSchedule: task dates must stay inside the window
"""
from datetime import datetime, timedelta, timezone

import pytest

from lifeboard.domain.errors import ValidationError
from lifeboard.domain.special_schedule import SpecialSchedule

START = datetime(2025, 1, 1, tzinfo=timezone.utc)
END = datetime(2025, 1, 10, tzinfo=timezone.utc)


@pytest.fixture
def schedule(sample_account_id):
    return SpecialSchedule(sample_account_id, start_date=START, end_date=END)


def test_add_task_inside_and_outside(schedule):
    schedule.add_task("2025-01-05", "x")
    assert len(schedule.tasks) == 1

    with pytest.raises(ValidationError, match="within the special schedule range"):
        schedule.add_task("2025-01-15", "late")
    assert len(schedule.tasks) == 1


def test_bounds_are_inclusive(schedule):
    schedule.add_task(START, "first day")
    schedule.add_task(END, "last day")
    assert len(schedule.tasks) == 2


@pytest.mark.parametrize("moment", [START - timedelta(microseconds=1), END + timedelta(microseconds=1)])
def test_one_microsecond_outside_fails(schedule, moment):
    with pytest.raises(ValidationError):
        schedule.add_task(moment, "edge")


def test_end_before_start_rejected(sample_account_id):
    with pytest.raises(ValidationError, match="End date cannot be before start date"):
        SpecialSchedule(sample_account_id, start_date=END, end_date=START)


def test_missing_fields(schedule):
    with pytest.raises(ValidationError, match="both date and description"):
        schedule.add_task("2025-01-05", "")
    with pytest.raises(ValidationError, match="Invalid task date format"):
        schedule.add_task("not-a-date", "x")


def test_description_length_limit(schedule):
    with pytest.raises(ValidationError, match="1000 characters"):
        schedule.add_task("2025-01-05", "x" * 1001)


def test_update_task_date_checked(schedule):
    task = schedule.add_task("2025-01-05", "x")

    schedule.update_task(task.id, {"date": "2025-01-06"})
    assert task.date == datetime(2025, 1, 6, tzinfo=timezone.utc)

    with pytest.raises(ValidationError):
        schedule.update_task(task.id, {"date": "2025-02-01"})
    assert task.date == datetime(2025, 1, 6, tzinfo=timezone.utc)


def test_change_window_must_contain_tasks(schedule):
    schedule.add_task("2025-01-08", "x")

    with pytest.raises(ValidationError, match="outside the new special schedule range"):
        schedule.change_window(end_date=datetime(2025, 1, 5, tzinfo=timezone.utc))
    assert schedule.end_date == END

    schedule.change_window(end_date=datetime(2025, 1, 20, tzinfo=timezone.utc))
    assert schedule.end_date == datetime(2025, 1, 20, tzinfo=timezone.utc)


def test_add_tasks_validates_all_first(schedule):
    with pytest.raises(ValidationError):
        schedule.add_tasks([
            {"date": "2025-01-02", "description": "ok"},
            {"date": "2025-03-01", "description": "outside"},
        ])
    assert len(schedule.tasks) == 0


def test_round_trip(schedule):
    schedule.add_task("2025-01-05", "x")
    doc = schedule.to_document()
    assert SpecialSchedule.from_document(doc).to_document() == doc
