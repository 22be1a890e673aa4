# -*- coding: utf-8 -*-
"""
The day and time slot axes of the timetable.

A ``SlotCatalog`` is handed to the grid explicitly and written back to its
store after every mutation. Removing a label from an axis never touches the
lectures scheduled on it; see ``TimetableGrid.orphans``.
"""
from __future__ import annotations

import json
import logging
import typing as t

from .errors import DuplicateAxisLabelError, InvalidLabelError, InvalidRangeError
from .models import SLOT_SEPARATOR, slot_start
from .store import DAYS_KEY, SLOTS_KEY, KeyValueStore


logger = logging.getLogger(__name__)


def _unique(labels: t.Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for label in labels:
        if label not in seen:
            seen.add(label)
            result.append(label)
    return result


def _read_labels(store: KeyValueStore, key: str) -> list[str]:
    raw = store.get(key)
    if raw is None:
        return []
    # Browser-style stores keep the list as a JSON string
    if isinstance(raw, str):
        raw = json.loads(raw)
    return [str(label) for label in raw]


def synthesize_slot(start_time: t.Optional[str], end_time: t.Optional[str]) -> str:
    """
    Build a time slot label from a start and an end time.

    Either order is accepted, so "22:00" to "01:00" gives an overnight slot.

    :param start_time: Start time, e.g. "09:00".
    :param end_time: End time, e.g. "10:30".
    :return: The label, e.g. "09:00 - 10:30".
    :raises InvalidRangeError: If either endpoint is missing or blank.
    """
    if not start_time or not start_time.strip() or not end_time or not end_time.strip():
        raise InvalidRangeError("Both a start time and an end time are required")
    return f"{start_time.strip()}{SLOT_SEPARATOR}{end_time.strip()}"


class SlotCatalog:
    """Ordered, unique day labels and time slot labels."""

    def __init__(
        self,
        days: t.Iterable[str] = (),
        slots: t.Iterable[str] = (),
        store: t.Optional[KeyValueStore] = None,
    ) -> None:
        self._days = _unique(days)
        self._slots = _unique(slots)
        self.store = store

    @classmethod
    def load(cls, store: KeyValueStore) -> "SlotCatalog":
        """Read both axes from ``store``. Missing keys give empty axes."""
        return cls(
            days=_read_labels(store, DAYS_KEY),
            slots=_read_labels(store, SLOTS_KEY),
            store=store,
        )

    @property
    def days(self) -> list[str]:
        return list(self._days)

    @property
    def slots(self) -> list[str]:
        # sorted() is stable, so equal start times keep insertion order
        return sorted(self._slots, key=slot_start)

    def has_day(self, label: str) -> bool:
        return label in self._days

    def has_slot(self, label: str) -> bool:
        return label in self._slots

    def add_day(self, label: str) -> str:
        label = self._clean(label, "day")
        if label in self._days:
            logger.warning("Rejected duplicate day %r", label)
            raise DuplicateAxisLabelError("day", label)
        self._days.append(label)
        self.save()
        return label

    def remove_day(self, label: str) -> bool:
        label = label.strip()
        if label not in self._days:
            return False
        self._days.remove(label)
        self.save()
        return True

    def add_slot(self, label: str) -> str:
        label = self._clean(label, "time slot")
        if label in self._slots:
            logger.warning("Rejected duplicate time slot %r", label)
            raise DuplicateAxisLabelError("time slot", label)
        self._slots.append(label)
        self.save()
        return label

    def remove_slot(self, label: str) -> bool:
        label = label.strip()
        if label not in self._slots:
            return False
        self._slots.remove(label)
        self.save()
        return True

    def add_slot_range(self, start_time: str, end_time: str) -> str:
        """Synthesize a slot label from two times and add it to the axis."""
        return self.add_slot(synthesize_slot(start_time, end_time))

    def save(self) -> None:
        """Write both axes to the store, if one is attached.

        Nothing waits on the write: a failing store is logged and the
        in-memory catalog stays authoritative.
        """
        if self.store is None:
            return
        try:
            self.store.set(DAYS_KEY, list(self._days))
            self.store.set(SLOTS_KEY, list(self._slots))
        except OSError as e:
            logger.error("Could not persist schedule settings: %s", e)

    def to_dict(self) -> dict[str, list[str]]:
        return {"days": self.days, "slots": self.slots}

    @staticmethod
    def _clean(label: str, axis: str) -> str:
        cleaned = (label or "").strip()
        if not cleaned:
            raise InvalidLabelError(f"A {axis} label cannot be blank")
        return cleaned

    def __repr__(self) -> str:
        return f"SlotCatalog(days={self.days!r}, slots={self.slots!r})"
