"""
Errors raised by the timetable grid and the slot catalog.

None of these are fatal: the grid and the catalog stay in their last valid
state after a rejected operation and the caller reports the message back to
whoever asked for the change.
"""


class ScheduleError(Exception):
    """Base class for rejected schedule operations."""


class SlotConflictError(ScheduleError):
    """A different lecture already occupies the requested cell."""

    def __init__(self, day: str, slot: str, occupant_id: str, entry_id: str) -> None:
        self.day = day
        self.slot = slot
        self.occupant_id = occupant_id
        self.entry_id = entry_id
        super().__init__(
            f"Cell {day} / {slot} is already taken by lecture {occupant_id!r}; "
            f"cannot place lecture {entry_id!r} there"
        )


class InvalidRangeError(ScheduleError, ValueError):
    """A time slot was requested without both a start and an end time."""


class DuplicateAxisLabelError(ScheduleError):
    """The day or time slot label is already on its axis."""

    def __init__(self, axis: str, label: str) -> None:
        self.axis = axis
        self.label = label
        super().__init__(f"{axis.capitalize()} {label!r} already exists")


class InvalidLabelError(ScheduleError, ValueError):
    """An axis label was blank after trimming."""
