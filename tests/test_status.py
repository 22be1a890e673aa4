# -*- coding: utf-8 -*-
"""Tests for assignment, submission and attendance status derivation."""
from datetime import datetime, timedelta

import pytest

from status_server.models import (
    Assignment,
    AssignmentStatus,
    AttendanceAggregate,
    AttendanceRecord,
    AttendanceStatus,
    Submission,
    SubmissionStatus,
)
from status_server.status import (
    aggregate_attendance,
    attendance_band,
    classify_assignment,
    classify_submission,
    count_by_status,
    days_remaining,
    deadline_urgency,
    grade_percentage,
    grading_counts,
    is_late_submission,
    records_between,
    round_half_up,
    session_stats,
    summarize_submissions,
    upcoming_deadlines,
)


NOW = datetime(2024, 5, 6, 12, 0)


def attendance(*statuses: str) -> list[AttendanceRecord]:
    return [
        AttendanceRecord(date=NOW - timedelta(days=i), status=AttendanceStatus(status))
        for i, status in enumerate(statuses)
    ]


# -----------------------------
# Assignments
# -----------------------------

@pytest.mark.parametrize("offset,expected", [
    (timedelta(days=-2), AssignmentStatus.OVERDUE),
    (timedelta(days=-1), AssignmentStatus.OVERDUE),
    (timedelta(hours=-3), AssignmentStatus.DUE_SOON),
    (timedelta(0), AssignmentStatus.DUE_SOON),
    (timedelta(hours=5), AssignmentStatus.DUE_SOON),
    (timedelta(days=3), AssignmentStatus.DUE_SOON),
    (timedelta(days=3, minutes=1), AssignmentStatus.ACTIVE),
    (timedelta(days=10), AssignmentStatus.ACTIVE),
])
def test_classify_assignment(offset, expected) -> None:
    assert classify_assignment(NOW + offset, NOW) is expected


def test_due_exactly_now_is_due_soon() -> None:
    """Zero days remaining is due soon, not overdue."""
    assert days_remaining(NOW, NOW) == 0
    assert classify_assignment(NOW, NOW) is AssignmentStatus.DUE_SOON


def test_days_remaining_rounds_up() -> None:
    assert days_remaining(NOW + timedelta(hours=1), NOW) == 1
    assert days_remaining(NOW + timedelta(days=2, hours=1), NOW) == 3
    assert days_remaining(NOW - timedelta(hours=23), NOW) == 0
    assert days_remaining(NOW - timedelta(hours=25), NOW) == -1


def test_classification_changes_as_time_passes() -> None:
    due = NOW + timedelta(days=5)
    assert classify_assignment(due, NOW) is AssignmentStatus.ACTIVE
    assert classify_assignment(due, NOW + timedelta(days=3)) is AssignmentStatus.DUE_SOON
    assert classify_assignment(due, NOW + timedelta(days=7)) is AssignmentStatus.OVERDUE


@pytest.mark.parametrize("offset,colour", [
    (timedelta(days=-1), "red"),
    (timedelta(0), "red"),
    (timedelta(days=2), "orange"),
    (timedelta(days=4), "yellow"),
    (timedelta(days=6), "green"),
])
def test_deadline_urgency(offset, colour) -> None:
    assert deadline_urgency(NOW + offset, NOW) == colour


def test_count_by_status() -> None:
    assignments = [
        Assignment(id="a", title="A", due_date=NOW - timedelta(days=2)),
        Assignment(id="b", title="B", due_date=NOW + timedelta(days=1)),
        Assignment(id="c", title="C", due_date=NOW + timedelta(days=2)),
        Assignment(id="d", title="D", due_date=NOW + timedelta(days=9)),
    ]
    assert count_by_status(assignments, NOW) == {
        AssignmentStatus.ACTIVE: 1,
        AssignmentStatus.DUE_SOON: 2,
        AssignmentStatus.OVERDUE: 1,
    }


# -----------------------------
# Submissions
# -----------------------------

def test_classify_submission() -> None:
    assignment = Assignment(id="a1", title="Essay", due_date=NOW + timedelta(days=1))
    submissions = [Submission(student="s1", submitted_at=NOW)]

    assert classify_submission(assignment, submissions, "s1", NOW) is SubmissionStatus.SUBMITTED
    assert classify_submission(assignment, submissions, "s2", NOW) is SubmissionStatus.PENDING
    after_due = NOW + timedelta(days=1, seconds=1)
    assert classify_submission(assignment, submissions, "s2", after_due) is SubmissionStatus.OVERDUE
    assert classify_submission(assignment, submissions, "s1", after_due) is SubmissionStatus.SUBMITTED


def test_submission_status_ignores_grading() -> None:
    assignment = Assignment(id="a1", title="Essay", due_date=NOW - timedelta(days=1))
    submissions = [Submission(student="s1", is_graded=False)]
    assert classify_submission(assignment, submissions, "s1", NOW) is SubmissionStatus.SUBMITTED


def test_late_submission_flag() -> None:
    assert is_late_submission(NOW + timedelta(minutes=1), NOW) is True
    assert is_late_submission(NOW, NOW) is False


def test_summarize_submissions() -> None:
    assignments = [
        Assignment(id="a", title="A", due_date=NOW - timedelta(days=1), submissions=[Submission(student="s1")]),
        Assignment(id="b", title="B", due_date=NOW - timedelta(days=1)),
        Assignment(id="c", title="C", due_date=NOW + timedelta(days=1)),
        Assignment(id="d", title="D", due_date=NOW + timedelta(days=4)),
    ]
    assert summarize_submissions(assignments, "s1", NOW) == {
        SubmissionStatus.SUBMITTED: 1,
        SubmissionStatus.PENDING: 2,
        SubmissionStatus.OVERDUE: 1,
    }


def test_upcoming_deadlines() -> None:
    """Only unsubmitted work due within the window, soonest first."""
    assignments = [
        Assignment(id="far", title="Far", due_date=NOW + timedelta(days=10)),
        Assignment(id="soon", title="Soon", due_date=NOW + timedelta(days=2)),
        Assignment(id="sooner", title="Sooner", due_date=NOW + timedelta(hours=3)),
        Assignment(id="done", title="Done", due_date=NOW + timedelta(days=1),
                   submissions=[Submission(student="s1")]),
        Assignment(id="past", title="Past", due_date=NOW - timedelta(days=2)),
    ]

    upcoming = upcoming_deadlines(assignments, "s1", NOW)
    assert [a.id for a in upcoming] == ["sooner", "soon"]
    assert len(upcoming_deadlines(assignments, "s1", NOW, limit=1)) == 1


def test_grading_helpers() -> None:
    submissions = [Submission(student="a", is_graded=True, marks=45), Submission(student="b")]
    assert grading_counts(submissions) == {"graded": 1, "ungraded": 1}
    assert grade_percentage(45, 60) == 75
    assert grade_percentage(1, 8) == 13
    assert grade_percentage(5, 0) == 0


# -----------------------------
# Attendance
# -----------------------------

def test_aggregate_of_no_records_is_all_zero() -> None:
    assert aggregate_attendance([]) == AttendanceAggregate(0, 0, 0, 0, 0)


def test_late_does_not_count_as_present() -> None:
    """3 present and 1 late out of 4 is 75%."""
    aggregate = aggregate_attendance(attendance("present", "present", "present", "late"))

    assert aggregate.total_classes == 4
    assert aggregate.present_days == 3
    assert aggregate.late_days == 1
    assert aggregate.absent_days == 0
    assert aggregate.attendance_percentage == 75


def test_percentage_rounds_half_up() -> None:
    # 1 of 8 is 12.5%
    records = attendance("present", *["absent"] * 7)
    assert aggregate_attendance(records).attendance_percentage == 13
    # 2 of 3 is 66.67%
    assert aggregate_attendance(attendance("present", "present", "absent")).attendance_percentage == 67
    # 1 of 3 is 33.33%
    assert aggregate_attendance(attendance("present", "late", "absent")).attendance_percentage == 33


def test_aggregate_accepts_a_generator() -> None:
    aggregate = aggregate_attendance(r for r in attendance("present", "absent"))
    assert aggregate.total_classes == 2
    assert aggregate.attendance_percentage == 50


def test_session_stats_count_late_as_attended() -> None:
    stats = session_stats(attendance("present", "late", "absent", "absent"))
    assert stats.total_students == 4
    assert stats.late_count == 1
    assert stats.attendance_percentage == 50
    assert session_stats([]).attendance_percentage == 0


@pytest.mark.parametrize("percentage,band", [(100, "success"), (75, "success"), (74, "warning"), (50, "warning"), (49, "error")])
def test_attendance_band(percentage, band) -> None:
    assert attendance_band(percentage) == band


def test_records_between() -> None:
    records = attendance("present", "absent", "late", "present")
    window = records_between(records, start=NOW - timedelta(days=2), end=NOW - timedelta(days=1))
    assert [r.status for r in window] == [AttendanceStatus.ABSENT, AttendanceStatus.LATE]
    assert len(records_between(records)) == 4


def test_round_half_up() -> None:
    assert round_half_up(1, 2) == 1
    assert round_half_up(5, 2) == 3
    assert round_half_up(250, 100) == 3
    assert round_half_up(249, 100) == 2
