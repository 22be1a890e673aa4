"""
Data models for the weekly timetable.

This module contains the dataclass used to represent one scheduled lecture
and the helpers that read "HH:MM - HH:MM" time slot labels.
"""
from __future__ import annotations

import re
import typing as t
from dataclasses import dataclass


# "HH:MM" on a 24 hour clock, hour may be one digit
CLOCK = r"([0-1]?[0-9]|2[0-3]):[0-5][0-9]"

# Same shape the timetable records are validated against upstream,
# e.g. "09:00 - 10:30" or "9:00-10:30"
SLOT_PATTERN = re.compile(rf"^(?P<start>{CLOCK})\s*-\s*(?P<end>{CLOCK})$")

CLOCK_PATTERN = re.compile(rf"^{CLOCK}$")

SLOT_SEPARATOR = " - "


@dataclass
class LectureEntry:
    """
    One scheduled lecture, positioned on the grid by (day, slot).

    Identity is ``id``, not the cell it sits in.
    """
    id: str
    day: str
    slot: str                   # "HH:MM - HH:MM"
    subject: str
    room: str = ""
    teacher_name: str = ""
    class_ref: str = ""
    start_time: str = ""        # "HH:MM" 24h, defaults to the slot start
    notes: str = ""

    def __post_init__(self) -> None:
        if not self.start_time:
            self.start_time = slot_start(self.slot)

    @property
    def cell(self) -> tuple[str, str]:
        return self.day, self.slot

    @property
    def display_name(self) -> str:
        return f"{self.subject} - {self.room}" if self.room else self.subject


def slot_start(label: str) -> str:
    """Return the start substring of a slot label, used as its sort key.

    >>> slot_start("09:00 - 10:30")
    '09:00'
    """
    return label.split("-", 1)[0].strip()


def parse_slot(label: str) -> t.Optional[tuple[str, str]]:
    """
    Split a strict "HH:MM - HH:MM" label into its start and end.

    :param label: The time slot label.
    :return: ``(start, end)`` or None when the label does not match.
    """
    match = SLOT_PATTERN.match(label.strip())
    if not match:
        return None
    return match.group("start"), match.group("end")


def is_valid_slot(label: str) -> bool:
    return parse_slot(label) is not None


def is_valid_clock(value: str) -> bool:
    """True for an "HH:MM" time of day such as "09:00" or "9:00"."""
    return CLOCK_PATTERN.match(value.strip()) is not None
