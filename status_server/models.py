"""
Data models for assignment, submission and attendance status.

This module contains the dataclasses and enumerations consumed and produced by
the status derivation functions. Statuses are never stored on the records;
they are recomputed from the record and the current instant on every read.
"""
from __future__ import annotations

import typing as t
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class AssignmentStatus(Enum):
    """Due-date classification of an assignment."""
    ACTIVE = "active"
    DUE_SOON = "due-soon"
    OVERDUE = "overdue"

    def __str__(self) -> str:
        return self.value


class SubmissionStatus(Enum):
    """Where one student stands on one assignment."""
    SUBMITTED = "submitted"
    PENDING = "pending"
    OVERDUE = "overdue"

    def __str__(self) -> str:
        return self.value


class AttendanceStatus(Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"

    def __str__(self) -> str:
        return self.value


@dataclass
class Submission:
    """A student's hand-in. Grading state is carried here, not derived."""
    student: str
    submitted_at: t.Optional[datetime] = None
    is_graded: bool = False
    marks: t.Optional[float] = None
    feedback: str = ""


@dataclass
class Assignment:
    """An assignment with its due date and the submissions made so far."""
    id: str
    title: str
    due_date: datetime
    total_marks: float = 100
    class_ref: str = ""
    submissions: list[Submission] = field(default_factory=list)


@dataclass
class AttendanceRecord:
    """One student's attendance at one lecture. Read only."""
    date: datetime
    status: AttendanceStatus
    subject: str = ""
    time_slot: str = ""
    notes: str = ""


@dataclass
class AttendanceAggregate:
    """Counts and percentage over a set of attendance records."""
    total_classes: int = 0
    present_days: int = 0
    absent_days: int = 0
    late_days: int = 0
    attendance_percentage: int = 0


@dataclass
class SessionStats:
    """Statistics for one marked attendance sheet; late counts as attended."""
    total_students: int = 0
    present_count: int = 0
    absent_count: int = 0
    late_count: int = 0
    attendance_percentage: int = 0
