# -*- coding: utf-8 -*-
"""
Status derivation for assignments, submissions and attendance.

Every function here is pure: the current instant is always passed in as
``now`` and nothing reads the system clock, so the same record can be
classified at any point in time. Day differences use calendar-day ceiling,
so a deadline later today is 0 days away rather than already past.
"""
from __future__ import annotations

import math
import typing as t
from collections import Counter
from datetime import datetime, timedelta
from fractions import Fraction

from .models import (
    Assignment,
    AssignmentStatus,
    AttendanceAggregate,
    AttendanceRecord,
    AttendanceStatus,
    SessionStats,
    Submission,
    SubmissionStatus,
)


ONE_DAY = timedelta(days=1)

# Deadlines this many days out (or fewer) are flagged as due soon
DUE_SOON_DAYS = 3

# Attendance percentage thresholds for the success / warning bands
GOOD_ATTENDANCE = 75
FAIR_ATTENDANCE = 50


def round_half_up(numerator: t.Union[int, float], denominator: t.Union[int, float]) -> int:
    """Round ``numerator / denominator`` to the nearest int, halves going up.

    Uses exact fractions so 1/8 of 100 rounds to 13, not 12.
    """
    value = Fraction(numerator) / Fraction(denominator)
    return math.floor(value + Fraction(1, 2))


# -----------------------------
# Assignments
# -----------------------------

def days_remaining(due_date: datetime, now: datetime) -> int:
    """Whole days until ``due_date``, rounded up; negative once past by a day."""
    return math.ceil((due_date - now) / ONE_DAY)


def classify_assignment(due_date: datetime, now: datetime) -> AssignmentStatus:
    """
    Classify an assignment by how far away its deadline is.

    :param due_date: The assignment's due date.
    :param now: The current instant.
    :return: OVERDUE below 0 days, DUE_SOON for 0 to 3 days, ACTIVE beyond.
    """
    diff_days = days_remaining(due_date, now)
    if diff_days < 0:
        return AssignmentStatus.OVERDUE
    if diff_days <= DUE_SOON_DAYS:
        return AssignmentStatus.DUE_SOON
    return AssignmentStatus.ACTIVE


def is_overdue(due_date: datetime, now: datetime) -> bool:
    """True once ``now`` is strictly past the due instant."""
    return now > due_date


def deadline_urgency(due_date: datetime, now: datetime) -> str:
    """Colour for a deadline: red, orange, yellow or green."""
    diff_days = days_remaining(due_date, now)
    if diff_days <= 0:
        return "red"
    if diff_days <= 2:
        return "orange"
    if diff_days <= 5:
        return "yellow"
    return "green"


def count_by_status(
        assignments: t.Iterable[Assignment],
        now: datetime
) -> dict[AssignmentStatus, int]:
    counts = {status: 0 for status in AssignmentStatus}
    for assignment in assignments:
        counts[classify_assignment(assignment.due_date, now)] += 1
    return counts


# -----------------------------
# Submissions
# -----------------------------

def has_submitted(submissions: t.Iterable[Submission], student_id: str) -> bool:
    return any(submission.student == student_id for submission in submissions)


def classify_submission(
        assignment: Assignment,
        submissions: t.Iterable[Submission],
        student_id: str,
        now: datetime
) -> SubmissionStatus:
    """
    Classify one student's standing on one assignment.

    :param assignment: The assignment being looked at.
    :param submissions: Every submission made for it.
    :param student_id: The student to classify.
    :param now: The current instant.
    :return: SUBMITTED if the student handed anything in, otherwise OVERDUE
        once the due instant has passed, else PENDING.
    """
    if has_submitted(submissions, student_id):
        return SubmissionStatus.SUBMITTED
    if is_overdue(assignment.due_date, now):
        return SubmissionStatus.OVERDUE
    return SubmissionStatus.PENDING


def is_late_submission(submitted_at: datetime, due_date: datetime) -> bool:
    return submitted_at > due_date


def summarize_submissions(
        assignments: t.Iterable[Assignment],
        student_id: str,
        now: datetime
) -> dict[SubmissionStatus, int]:
    """Tally a student's submitted, pending and overdue assignments."""
    counts = {status: 0 for status in SubmissionStatus}
    for assignment in assignments:
        status = classify_submission(assignment, assignment.submissions, student_id, now)
        counts[status] += 1
    return counts


def upcoming_deadlines(
        assignments: t.Iterable[Assignment],
        student_id: str,
        now: datetime,
        window_days: int = 7,
        limit: int = 5
) -> list[Assignment]:
    """Unsubmitted assignments due within ``window_days``, soonest first."""
    upcoming = [
        assignment for assignment in assignments
        if 0 <= days_remaining(assignment.due_date, now) <= window_days
        and not has_submitted(assignment.submissions, student_id)
    ]
    upcoming.sort(key=lambda assignment: assignment.due_date)
    return upcoming[:limit]


def grade_percentage(marks: float, total_marks: float) -> int:
    if total_marks <= 0:
        return 0
    return round_half_up(marks * 100, total_marks)


def grading_counts(submissions: t.Iterable[Submission]) -> dict[str, int]:
    counts = {"graded": 0, "ungraded": 0}
    for submission in submissions:
        counts["graded" if submission.is_graded else "ungraded"] += 1
    return counts


# -----------------------------
# Attendance
# -----------------------------

def _status_counts(records: t.Iterable[AttendanceRecord]) -> tuple[int, Counter]:
    counts: Counter = Counter()
    total = 0
    for record in records:
        counts[record.status] += 1
        total += 1
    return total, counts


def aggregate_attendance(records: t.Iterable[AttendanceRecord]) -> AttendanceAggregate:
    """
    Count a student's attendance records and compute their attendance rate.

    Only ``present`` counts towards the percentage. No records gives an
    all-zero aggregate.

    :param records: The student's attendance records.
    :return: The aggregate.
    """
    total, counts = _status_counts(records)
    present = counts[AttendanceStatus.PRESENT]
    return AttendanceAggregate(
        total_classes=total,
        present_days=present,
        absent_days=counts[AttendanceStatus.ABSENT],
        late_days=counts[AttendanceStatus.LATE],
        attendance_percentage=round_half_up(present * 100, total) if total > 0 else 0,
    )


def session_stats(records: t.Iterable[AttendanceRecord]) -> SessionStats:
    """Statistics for one lecture's attendance sheet.

    Unlike ``aggregate_attendance``, late students count as attended.
    """
    total, counts = _status_counts(records)
    present = counts[AttendanceStatus.PRESENT]
    late = counts[AttendanceStatus.LATE]
    return SessionStats(
        total_students=total,
        present_count=present,
        absent_count=counts[AttendanceStatus.ABSENT],
        late_count=late,
        attendance_percentage=round_half_up((present + late) * 100, total) if total > 0 else 0,
    )


def attendance_band(percentage: float) -> str:
    if percentage >= GOOD_ATTENDANCE:
        return "success"
    if percentage >= FAIR_ATTENDANCE:
        return "warning"
    return "error"


def records_between(
        records: t.Iterable[AttendanceRecord],
        start: t.Optional[datetime] = None,
        end: t.Optional[datetime] = None
) -> list[AttendanceRecord]:
    """Records dated within ``[start, end]``; open ends are unbounded."""
    return [
        record for record in records
        if (start is None or record.date >= start)
        and (end is None or record.date <= end)
    ]
