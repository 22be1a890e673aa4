# -*- coding: utf-8 -*-
"""
MCP tools over the timetable grid and its schedule settings.

One catalog is shared by every grid in the session, the same way the day and
time slot settings are shared by every class a teacher opens. Grids are kept
per owner (a class or a teacher reference). The underscore functions hold the
logic and raise ``ScheduleError``; the registered tools translate those into
tool errors for the client.
"""
from __future__ import annotations

import logging
import typing as t
from datetime import datetime

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from .catalog import SlotCatalog, synthesize_slot
from .errors import ScheduleError
from .grid import TimetableGrid
from .lectures import next_lecture_today
from .models import LectureEntry
from .store import JsonFileStore, KeyValueStore


logger = logging.getLogger(__name__)

mcp = FastMCP("TimetableServer")


class Session:
    """The catalog plus one grid per owner."""

    def __init__(self, store: t.Optional[KeyValueStore] = None) -> None:
        self.catalog = SlotCatalog.load(store) if store is not None else SlotCatalog()
        self.grids: dict[str, TimetableGrid] = {}

    def grid(self, owner: str) -> TimetableGrid:
        if owner not in self.grids:
            self.grids[owner] = TimetableGrid(self.catalog, owner=owner)
        return self.grids[owner]


_session: t.Optional[Session] = None


def get_session() -> Session:
    global _session
    if _session is None:
        _session = Session(JsonFileStore())
    return _session


def reset_session(store: t.Optional[KeyValueStore] = None) -> Session:
    """Start over with a fresh catalog read from ``store`` and no lectures."""
    global _session
    _session = Session(store)
    return _session


# -----------------------------
# Schedule settings
# -----------------------------

def _get_schedule_settings() -> dict[str, list[str]]:
    return get_session().catalog.to_dict()


def _add_day(label: str) -> dict[str, list[str]]:
    catalog = get_session().catalog
    catalog.add_day(label)
    return catalog.to_dict()


def _remove_day(label: str) -> dict[str, list[str]]:
    catalog = get_session().catalog
    catalog.remove_day(label)
    return catalog.to_dict()


def _add_time_slot(label: str) -> dict[str, list[str]]:
    catalog = get_session().catalog
    catalog.add_slot(label)
    return catalog.to_dict()


def _remove_time_slot(label: str) -> dict[str, list[str]]:
    catalog = get_session().catalog
    catalog.remove_slot(label)
    return catalog.to_dict()


def _generate_time_slot(start_time: str, end_time: str) -> str:
    return synthesize_slot(start_time, end_time)


# -----------------------------
# Lectures
# -----------------------------

def _schedule_lecture(
        owner: str,
        lecture_id: str,
        day: str,
        time: str,
        subject: str,
        room: str = "",
        teacher: str = "",
        class_ref: str = "",
        start_time: str = "",
        notes: str = ""
) -> LectureEntry:
    entry = LectureEntry(
        id=lecture_id,
        day=day,
        slot=time,
        subject=subject,
        room=room,
        teacher_name=teacher,
        class_ref=class_ref or owner,
        start_time=start_time,
        notes=notes,
    )
    return get_session().grid(owner).upsert(entry)


def _unschedule_lecture(owner: str, lecture_id: str) -> bool:
    return get_session().grid(owner).remove(lecture_id) is not None


def _get_cell(owner: str, day: str, time: str) -> t.Optional[LectureEntry]:
    return get_session().grid(owner).cell_at(day, time)


def _list_day_lectures(owner: str, day: str) -> list[LectureEntry]:
    return list(get_session().grid(owner).entries_for_day(day))


def _next_lecture(owner: str, now: t.Optional[str] = None) -> t.Optional[LectureEntry]:
    if not now:
        moment = datetime.now()
    else:
        try:
            moment = datetime.fromisoformat(now)
        except ValueError as e:
            raise ToolError(f"Invalid now: {now!r}") from e
    return next_lecture_today(get_session().grid(owner), moment)


def format_timetable(grid: TimetableGrid) -> str:
    """Format a grid as a plain text table, one row per time slot."""
    days = grid.catalog.days
    slots = grid.catalog.slots
    if not days or not slots:
        return "🗓️ No schedule configured. Add days and time slots first."

    width = 16
    rule = 16 + (width + 1) * len(days)
    lines = []
    lines.append(f"🗓️ TIMETABLE{' - ' + grid.owner if grid.owner else ''}")
    lines.append("=" * rule)
    lines.append(f"{'Time':<16}" + "".join(f" {day[:width]:<{width}}" for day in days))
    lines.append("-" * rule)

    for slot, cells in grid.rows():
        row = f"{slot[:15]:<16}"
        for entry in cells:
            text = entry.display_name if entry else "—"
            row += f" {text[:width]:<{width}}"
        lines.append(row)

    orphans = grid.orphans()
    lines.append("=" * rule)
    lines.append(f"Total: {len(grid) - len(orphans)} lecture(s)")
    if orphans:
        lines.append(f"Hidden: {len(orphans)} lecture(s) on removed days or time slots")
    return "\n".join(lines)


def _show_timetable(owner: str) -> str:
    return format_timetable(get_session().grid(owner))


def _call(func: t.Callable[..., t.Any], *args: t.Any, **kwargs: t.Any) -> t.Any:
    try:
        return func(*args, **kwargs)
    except ScheduleError as e:
        raise ToolError(str(e)) from e


# -----------------------------
# MCP Tool Registration
# -----------------------------

@mcp.tool()
def get_schedule_settings() -> dict[str, list[str]]:
    """Lists the configured days and time slots, slots in start time order."""
    return _get_schedule_settings()


@mcp.tool()
def add_day(label: str) -> dict[str, list[str]]:
    """Adds a day column to the timetable.

    :param label: Day label, e.g. "Saturday".
    :return: The updated schedule settings.
    """
    return _call(_add_day, label)


@mcp.tool()
def remove_day(label: str) -> dict[str, list[str]]:
    """Removes a day column. Lectures on that day are kept but hidden."""
    return _call(_remove_day, label)


@mcp.tool()
def add_time_slot(label: str) -> dict[str, list[str]]:
    """Adds a time slot row, e.g. "09:00 - 10:30"."""
    return _call(_add_time_slot, label)


@mcp.tool()
def remove_time_slot(label: str) -> dict[str, list[str]]:
    """Removes a time slot row. Lectures in it are kept but hidden."""
    return _call(_remove_time_slot, label)


@mcp.tool()
def generate_time_slot(start_time: str, end_time: str) -> str:
    """Builds a time slot label from a start and an end time."""
    return _call(_generate_time_slot, start_time, end_time)


@mcp.tool()
def schedule_lecture(
        owner: str,
        lecture_id: str,
        day: str,
        time: str,
        subject: str,
        room: str = "",
        teacher: str = "",
        class_ref: str = "",
        start_time: str = "",
        notes: str = ""
) -> LectureEntry:
    """Places or updates a lecture in an owner's timetable.

    :param owner: Class or teacher the timetable belongs to.
    :param lecture_id: Lecture id; reusing an id edits that lecture.
    :param day: Day label.
    :param time: Time slot label.
    :param subject: Subject taught.
    :param room: Room (optional).
    :param teacher: Teacher name (optional).
    :param class_ref: Class reference (optional, defaults to owner).
    :param start_time: "HH:MM" start (optional, defaults to the slot start).
    :param notes: Free text notes (optional).
    :return: The stored lecture.
    """
    return _call(
        _schedule_lecture, owner, lecture_id, day, time, subject,
        room=room, teacher=teacher, class_ref=class_ref, start_time=start_time, notes=notes,
    )


@mcp.tool()
def unschedule_lecture(owner: str, lecture_id: str) -> bool:
    """Deletes a lecture from an owner's timetable."""
    return _unschedule_lecture(owner, lecture_id)


@mcp.tool()
def get_cell(owner: str, day: str, time: str) -> t.Optional[LectureEntry]:
    """Returns the lecture in one cell, if any."""
    return _get_cell(owner, day, time)


@mcp.tool()
def list_day_lectures(owner: str, day: str) -> list[LectureEntry]:
    """Lists an owner's lectures on one day in time slot order."""
    return _list_day_lectures(owner, day)


@mcp.tool()
def next_lecture(owner: str, now: str = "") -> t.Optional[LectureEntry]:
    """Finds the next lecture today.

    :param owner: Class or teacher the timetable belongs to.
    :param now: ISO datetime to use as the current instant (optional).
    :return: The next lecture, or None.
    """
    return _next_lecture(owner, now or None)


@mcp.tool()
def show_timetable(owner: str) -> str:
    """Displays an owner's timetable as a text grid."""
    return _show_timetable(owner)


if __name__ == "__main__":
    mcp.run()
