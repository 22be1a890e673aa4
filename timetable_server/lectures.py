"""Helpers for picking out the next lecture of the day."""
from __future__ import annotations

import typing as t
from datetime import datetime

from .models import LectureEntry

if t.TYPE_CHECKING:
    from .grid import TimetableGrid


WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def to_minutes(hhmm: str) -> int:
    """Convert "HH:MM" to minutes since midnight.

    :raises ValueError: If the string is not two colon-separated integers.
    """
    hours, minutes = hhmm.strip().split(":", 1)
    return int(hours) * 60 + int(minutes)


def minutes_since_midnight(moment: datetime) -> int:
    return moment.hour * 60 + moment.minute


def day_label(moment: datetime) -> str:
    return WEEKDAYS[moment.weekday()]


def sort_by_start_time(lectures: t.Iterable[LectureEntry]) -> list[LectureEntry]:
    """Order lectures by start time, keeping the given order for ties."""
    return sorted(lectures, key=lambda lecture: to_minutes(lecture.start_time))


def find_next(
        lectures: t.Sequence[LectureEntry],
        now_minutes: int
) -> t.Optional[LectureEntry]:
    """
    Find the first lecture that has not started yet.

    ``lectures`` must already be in ascending start time order; use
    ``sort_by_start_time`` when the source does not guarantee it. A lecture
    starting exactly at ``now_minutes`` counts as started.

    :param lectures: One day's lectures, sorted by start time.
    :param now_minutes: Minutes since midnight.
    :return: The next lecture, or None if all have started or there are none.
    """
    for lecture in lectures:
        if to_minutes(lecture.start_time) > now_minutes:
            return lecture
    return None


def next_lecture_today(grid: "TimetableGrid", now: datetime) -> t.Optional[LectureEntry]:
    """Next lecture on ``now``'s weekday according to the grid."""
    todays = sort_by_start_time(grid.entries_for_day(day_label(now)))
    return find_next(todays, minutes_since_midnight(now))
