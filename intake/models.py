"""
Pydantic models for raw records delivered by the REST API.

These mirror the JSON the school API returns (camelCase keys, ISO dates) and
reject malformed records before anything reaches the timetable grid or the
status derivation functions.
"""
from __future__ import annotations

import typing as t
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator

from timetable_server.models import is_valid_clock, is_valid_slot


AttendanceStatusLiteral = t.Literal["present", "absent", "late"]


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps from the API are UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class LectureRecord(ApiModel):
    """A timetable entry as returned by the timetable endpoints."""
    id: str
    day: str
    time: str                                       # "HH:MM - HH:MM"
    subject: str
    room: str = ""
    teacher: str = ""                               # teacher display name
    class_ref: str = Field(default="", alias="class")
    start_time: str = Field(default="", alias="startTime")
    notes: str = ""

    @field_validator("time")
    @classmethod
    def _check_time(cls, value: str) -> str:
        if not is_valid_slot(value):
            raise ValueError('Time must be in format "HH:MM - HH:MM"')
        return value.strip()

    @field_validator("start_time")
    @classmethod
    def _check_start_time(cls, value: str) -> str:
        # Blank means "use the slot start"
        if value.strip() and not is_valid_clock(value):
            raise ValueError('Start time must be in format "HH:MM"')
        return value.strip()


class SubmissionRecord(ApiModel):
    student: str
    submitted_at: t.Optional[datetime] = Field(default=None, alias="submittedAt")
    is_graded: bool = Field(default=False, alias="isGraded")
    marks: t.Optional[float] = Field(default=None, ge=0)
    feedback: str = ""

    @field_validator("submitted_at")
    @classmethod
    def _normalize(cls, value: t.Optional[datetime]) -> t.Optional[datetime]:
        return _as_utc(value) if value is not None else None


class AssignmentRecord(ApiModel):
    id: str
    title: str
    due_date: datetime = Field(alias="dueDate")
    total_marks: float = Field(default=100, alias="totalMarks", ge=1)
    class_ref: str = Field(default="", alias="class")
    submissions: list[SubmissionRecord] = Field(default_factory=list)

    @field_validator("due_date")
    @classmethod
    def _normalize(cls, value: datetime) -> datetime:
        return _as_utc(value)


class AttendanceRecordModel(ApiModel):
    date: datetime
    status: AttendanceStatusLiteral = "absent"
    subject: str = ""
    time_slot: str = Field(default="", alias="timeSlot")
    notes: str = ""

    @field_validator("date")
    @classmethod
    def _normalize(cls, value: datetime) -> datetime:
        return _as_utc(value)


class ScheduleSettings(ApiModel):
    """The day and time slot axes as a single blob."""
    days: list[str] = Field(default_factory=list)
    slots: list[str] = Field(default_factory=list)


class Snapshot(ApiModel):
    """Everything one dashboard view needs, as fetched in one go."""
    settings: ScheduleSettings = Field(default_factory=ScheduleSettings)
    lectures: list[dict[str, t.Any]] = Field(default_factory=list)
    assignments: list[dict[str, t.Any]] = Field(default_factory=list)
    attendance: list[dict[str, t.Any]] = Field(default_factory=list)
