# -*- coding: utf-8 -*-
import typing as t
from dataclasses import asdict
from datetime import datetime, timezone

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from intake.convert import FetchResult, load_assignments, load_attendance
from .models import Assignment
from .status import (
    aggregate_attendance,
    attendance_band,
    classify_assignment,
    classify_submission,
    count_by_status,
    days_remaining,
    deadline_urgency,
    grading_counts,
    session_stats,
    summarize_submissions,
    upcoming_deadlines,
)

mcp = FastMCP("StatusServer")


def _parse_instant(value: str, name: str = "date") -> datetime:
    """Parse a required ISO instant; naive values are taken as UTC."""
    if not value or not value.strip():
        raise ToolError(f"Missing {name}")
    try:
        moment = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError as e:
        raise ToolError(f"Invalid {name}: {value!r}") from e
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def _resolve_now(now: t.Optional[str] = None) -> datetime:
    """Parse an ISO instant, or take the current UTC time when none is given."""
    if not now:
        return datetime.now(timezone.utc)
    return _parse_instant(now, "now")


def _unwrap(result: FetchResult) -> list:
    if not result.ok:
        raise ToolError(result.error)
    return result.records


def _format_date(moment: datetime) -> str:
    hour = moment.hour % 12 or 12
    return f"{moment:%a} {moment.month}/{moment.day} {hour}:{moment:%M %p}"


def _assignment_status(due_date: str, now: t.Optional[str] = None) -> str:
    due = _parse_instant(due_date, "due date")
    return classify_assignment(due, _resolve_now(now)).value


def _submission_status(
        assignment: dict[str, t.Any],
        student_id: str,
        now: t.Optional[str] = None
) -> str:
    records: list[Assignment] = _unwrap(load_assignments([assignment]))
    record = records[0]
    return classify_submission(record, record.submissions, student_id, _resolve_now(now)).value


def _summarize_attendance(records: list[dict[str, t.Any]]) -> dict[str, t.Any]:
    aggregate = aggregate_attendance(_unwrap(load_attendance(records)))
    summary = asdict(aggregate)
    summary["band"] = attendance_band(aggregate.attendance_percentage)
    return summary


def _summarize_session(records: list[dict[str, t.Any]]) -> dict[str, int]:
    return asdict(session_stats(_unwrap(load_attendance(records))))


def _format_assignment_status(
        assignments: list[Assignment],
        now: datetime,
        student_id: str = ""
) -> str:
    """
    Format assignments as a table with their derived status.

    With a ``student_id`` the table shows that student's submission status,
    otherwise the due-date classification and grading progress.
    """
    if not assignments:
        return "📚 No assignments found."

    ordered = sorted(assignments, key=lambda a: a.due_date)

    lines = []
    lines.append("📚 ASSIGNMENT STATUS")
    lines.append("=" * 100)
    lines.append(f"{'#':<4} {'Title':<35} {'Due':<20} {'Days':<6} {'Status':<12} {'Urgency':<8} {'Graded':<10}")
    lines.append("-" * 100)

    for idx, assignment in enumerate(ordered, 1):
        title = assignment.title[:34] if len(assignment.title) > 34 else assignment.title
        if student_id:
            status = classify_submission(assignment, assignment.submissions, student_id, now).value
        else:
            status = classify_assignment(assignment.due_date, now).value
        graded = grading_counts(assignment.submissions)
        lines.append(
            f"{idx:<4} {title:<35} {_format_date(assignment.due_date):<20} "
            f"{days_remaining(assignment.due_date, now):<6} {status:<12} "
            f"{deadline_urgency(assignment.due_date, now):<8} "
            f"{graded['graded']}/{graded['graded'] + graded['ungraded']:<8}"
        )

    lines.append("=" * 100)
    lines.append(f"Total: {len(ordered)} assignment(s)")

    if student_id:
        counts = summarize_submissions(ordered, student_id, now)
    else:
        counts = count_by_status(ordered, now)
    lines.append("  ".join(f"{status.value}: {count}" for status, count in counts.items()))
    return "\n".join(lines)


def _show_assignment_status(
        assignments: list[dict[str, t.Any]],
        student_id: str = "",
        now: t.Optional[str] = None
) -> str:
    records = _unwrap(load_assignments(assignments))
    return _format_assignment_status(records, _resolve_now(now), student_id)


def _upcoming_deadlines(
        assignments: list[dict[str, t.Any]],
        student_id: str,
        now: t.Optional[str] = None,
        window_days: int = 7
) -> list[dict[str, t.Any]]:
    moment = _resolve_now(now)
    records = _unwrap(load_assignments(assignments))
    return [
        {
            "id": a.id,
            "title": a.title,
            "dueDate": a.due_date.isoformat(),
            "daysRemaining": days_remaining(a.due_date, moment),
        }
        for a in upcoming_deadlines(records, student_id, moment, window_days=window_days)
    ]


# -----------------------------
# MCP Tool Registration
# -----------------------------

@mcp.tool()
def get_assignment_status(due_date: str, now: str = "") -> str:
    """Classifies a due date as active, due-soon or overdue.

    :param due_date: Due date in ISO format.
    :param now: Instant to classify at, ISO format (optional, defaults to now).
    :return: The status value.
    """
    return _assignment_status(due_date, now or None)


@mcp.tool()
def get_submission_status(assignment: dict[str, t.Any], student_id: str, now: str = "") -> str:
    """Classifies a student's standing on an assignment as submitted, pending or overdue."""
    return _submission_status(assignment, student_id, now or None)


@mcp.tool()
def summarize_attendance(records: list[dict[str, t.Any]]) -> dict[str, t.Any]:
    """Counts present, absent and late records and computes the attendance rate."""
    return _summarize_attendance(records)


@mcp.tool()
def summarize_session(records: list[dict[str, t.Any]]) -> dict[str, int]:
    """Statistics for one attendance sheet, counting late students as attended."""
    return _summarize_session(records)


@mcp.tool()
def show_assignment_status(
        assignments: list[dict[str, t.Any]],
        student_id: str = "",
        now: str = ""
) -> str:
    """Displays assignments with their derived status, soonest due first."""
    return _show_assignment_status(assignments, student_id, now or None)


@mcp.tool()
def list_upcoming_deadlines(
        assignments: list[dict[str, t.Any]],
        student_id: str,
        now: str = "",
        window_days: int = 7
) -> list[dict[str, t.Any]]:
    """Lists a student's unsubmitted assignments due within the next week."""
    return _upcoming_deadlines(assignments, student_id, now or None, window_days)


if __name__ == "__main__":
    mcp.run()
