# -*- coding: utf-8 -*-
"""Tests for the status tool functions working on raw JSON records."""
from datetime import datetime, timezone

import pytest
from fastmcp.exceptions import ToolError

from status_server import server


NOW = "2024-05-06T12:00:00Z"

ASSIGNMENTS = [
    {"id": "a1", "title": "Essay", "dueDate": "2024-05-07T12:00:00Z",
     "submissions": [{"student": "s1", "submittedAt": "2024-05-06T08:00:00Z", "isGraded": True, "marks": 80}]},
    {"id": "a2", "title": "Lab report", "dueDate": "2024-05-01T12:00:00Z"},
    {"id": "a3", "title": "Project", "dueDate": "2024-05-20T12:00:00Z"},
]


def test_assignment_status() -> None:
    assert server._assignment_status("2024-05-08T12:00:00Z", NOW) == "due-soon"
    assert server._assignment_status("2024-05-01T12:00:00", NOW) == "overdue"
    assert server._assignment_status("2024-06-01T12:00:00Z", NOW) == "active"


def test_assignment_status_needs_a_due_date() -> None:
    with pytest.raises(ToolError, match="Missing due date"):
        server._assignment_status("", NOW)


def test_assignment_status_rejects_malformed_due_date() -> None:
    with pytest.raises(ToolError, match="Invalid due date"):
        server._assignment_status("next friday", NOW)


def test_malformed_now_is_a_tool_error() -> None:
    with pytest.raises(ToolError, match="Invalid now"):
        server._assignment_status("2024-05-08T12:00:00Z", "noon")


def test_format_date_drops_leading_zeros() -> None:
    moment = datetime(2024, 5, 7, 9, 5, tzinfo=timezone.utc)
    assert server._format_date(moment) == "Tue 5/7 9:05 AM"
    assert server._format_date(moment.replace(hour=0)) == "Tue 5/7 12:05 AM"


def test_submission_status() -> None:
    assert server._submission_status(ASSIGNMENTS[0], "s1", NOW) == "submitted"
    assert server._submission_status(ASSIGNMENTS[0], "s2", NOW) == "pending"
    assert server._submission_status(ASSIGNMENTS[1], "s2", NOW) == "overdue"


def test_summarize_attendance() -> None:
    summary = server._summarize_attendance([
        {"date": "2024-05-01", "status": "present"},
        {"date": "2024-05-02", "status": "present"},
        {"date": "2024-05-03", "status": "present"},
        {"date": "2024-05-04", "status": "late"},
    ])

    assert summary == {
        "total_classes": 4,
        "present_days": 3,
        "absent_days": 0,
        "late_days": 1,
        "attendance_percentage": 75,
        "band": "success",
    }


def test_summarize_session() -> None:
    stats = server._summarize_session([
        {"date": "2024-05-01", "status": "present"},
        {"date": "2024-05-01", "status": "late"},
    ])
    assert stats["attendance_percentage"] == 100


def test_invalid_records_raise_tool_error() -> None:
    with pytest.raises(ToolError, match="Invalid attendance data"):
        server._summarize_attendance([{"date": "yesterday", "status": "present"}])


def test_show_assignment_status_for_student() -> None:
    text = server._show_assignment_status(ASSIGNMENTS, student_id="s2", now=NOW)

    assert "ASSIGNMENT STATUS" in text
    assert "Total: 3 assignment(s)" in text
    assert "submitted: 0  pending: 2  overdue: 1" in text
    # soonest due first
    assert text.index("Lab report") < text.index("Essay") < text.index("Project")


def test_show_assignment_status_overview() -> None:
    text = server._show_assignment_status(ASSIGNMENTS, now=NOW)
    assert "active: 1  due-soon: 1  overdue: 1" in text


def test_show_assignment_status_empty() -> None:
    assert server._show_assignment_status([], now=NOW) == "📚 No assignments found."


def test_upcoming_deadlines() -> None:
    upcoming = server._upcoming_deadlines(ASSIGNMENTS, "s2", NOW)
    assert [item["id"] for item in upcoming] == ["a1"]
    assert upcoming[0]["daysRemaining"] == 1
