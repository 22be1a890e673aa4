# -*- coding: utf-8 -*-
"""
Turn raw API payloads into the dataclasses the schedule core works with.

Validation happens here, at the boundary. A collection that fails to validate,
or that never arrived, becomes an empty ``FetchResult`` carrying the error
message, so the derivation functions only ever see well-formed records.
"""
from __future__ import annotations

import logging
import typing as t
from dataclasses import dataclass, field

from pydantic import BaseModel, ValidationError

from status_server.models import Assignment, AttendanceRecord, AttendanceStatus, Submission
from timetable_server.models import LectureEntry
from .models import (
    AssignmentRecord,
    AttendanceRecordModel,
    LectureRecord,
    SubmissionRecord,
)


logger = logging.getLogger(__name__)

T = t.TypeVar("T")
M = t.TypeVar("M", bound=BaseModel)


@dataclass
class FetchResult(t.Generic[T]):
    """A complete collection of records, or nothing plus the reason why."""
    records: list[T] = field(default_factory=list)
    error: t.Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, error: str) -> "FetchResult[T]":
        return cls(records=[], error=error)


def _pydantic_to_dataclass_lecture(record: LectureRecord) -> LectureEntry:
    return LectureEntry(
        id=record.id,
        day=record.day,
        slot=record.time,
        subject=record.subject,
        room=record.room,
        teacher_name=record.teacher,
        class_ref=record.class_ref,
        start_time=record.start_time,
        notes=record.notes,
    )


def _pydantic_to_dataclass_submission(record: SubmissionRecord) -> Submission:
    return Submission(
        student=record.student,
        submitted_at=record.submitted_at,
        is_graded=record.is_graded,
        marks=record.marks,
        feedback=record.feedback,
    )


def _pydantic_to_dataclass_assignment(record: AssignmentRecord) -> Assignment:
    return Assignment(
        id=record.id,
        title=record.title,
        due_date=record.due_date,
        total_marks=record.total_marks,
        class_ref=record.class_ref,
        submissions=[_pydantic_to_dataclass_submission(s) for s in record.submissions],
    )


def _pydantic_to_dataclass_attendance(record: AttendanceRecordModel) -> AttendanceRecord:
    return AttendanceRecord(
        date=record.date,
        status=AttendanceStatus(record.status),
        subject=record.subject,
        time_slot=record.time_slot,
        notes=record.notes,
    )


def _validate_all(
        raw: t.Any,
        model: type[M],
        convert: t.Callable[[M], T],
        kind: str
) -> FetchResult[T]:
    if raw is None:
        return FetchResult.failed(f"No {kind} data received")
    if not isinstance(raw, list):
        return FetchResult.failed(f"Expected a list of {kind}, got {type(raw).__name__}")
    try:
        records = [convert(model.model_validate(item)) for item in raw]
    except ValidationError as e:
        logger.warning("Rejected %s payload: %s", kind, e)
        return FetchResult.failed(f"Invalid {kind} data: {e.error_count()} error(s)")
    return FetchResult(records=records)


def load_lectures(raw: t.Any) -> FetchResult[LectureEntry]:
    return _validate_all(raw, LectureRecord, _pydantic_to_dataclass_lecture, "lectures")


def load_assignments(raw: t.Any) -> FetchResult[Assignment]:
    return _validate_all(raw, AssignmentRecord, _pydantic_to_dataclass_assignment, "assignments")


def load_attendance(raw: t.Any) -> FetchResult[AttendanceRecord]:
    return _validate_all(raw, AttendanceRecordModel, _pydantic_to_dataclass_attendance, "attendance")

