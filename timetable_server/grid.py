# -*- coding: utf-8 -*-
"""
Sparse (day, slot) -> lecture occupancy for one class or teacher.

The grid reads its axes from a ``SlotCatalog`` on every query, so editing the
catalog never rewrites stored lectures. A lecture whose day or slot has been
removed from the catalog stays in the grid, reachable by id and listed by
``orphans()``, and shows up again once the label is restored.
"""
from __future__ import annotations

import logging
import typing as t

from .catalog import SlotCatalog
from .errors import SlotConflictError
from .models import LectureEntry


logger = logging.getLogger(__name__)

Cell = tuple[str, str]


class TimetableGrid:
    """At most one ``LectureEntry`` per (day, slot) cell."""

    def __init__(self, catalog: SlotCatalog, owner: str = "") -> None:
        self.catalog = catalog
        self.owner = owner
        self._cells: dict[Cell, LectureEntry] = {}
        self._positions: dict[str, Cell] = {}

    @classmethod
    def from_entries(
        cls,
        catalog: SlotCatalog,
        entries: t.Iterable[LectureEntry],
        owner: str = "",
    ) -> "TimetableGrid":
        """Build a grid from fetched lectures.

        :raises SlotConflictError: If two lectures share a cell.
        """
        grid = cls(catalog, owner=owner)
        for entry in entries:
            grid.upsert(entry)
        return grid

    def upsert(self, entry: LectureEntry) -> LectureEntry:
        """
        Place a new lecture or replace an existing one with the same id.

        Moving a lecture to another cell vacates its previous cell.

        :param entry: The lecture to store.
        :return: The stored lecture.
        :raises SlotConflictError: If a lecture with another id holds the cell.
        """
        target = entry.cell
        occupant = self._cells.get(target)
        if occupant is not None and occupant.id != entry.id:
            logger.warning(
                "Conflict in %s at %s / %s: %s vs %s",
                self.owner or "timetable", entry.day, entry.slot, occupant.id, entry.id,
            )
            raise SlotConflictError(entry.day, entry.slot, occupant.id, entry.id)

        previous = self._positions.get(entry.id)
        if previous is not None and previous != target:
            del self._cells[previous]

        self._cells[target] = entry
        self._positions[entry.id] = target
        logger.debug("Placed lecture %s at %s / %s", entry.id, entry.day, entry.slot)
        return entry

    def remove(self, entry_id: str) -> t.Optional[LectureEntry]:
        """Delete the lecture with ``entry_id``. Unknown ids are ignored."""
        cell = self._positions.pop(entry_id, None)
        if cell is None:
            return None
        return self._cells.pop(cell)

    def cell_at(self, day: str, slot: str) -> t.Optional[LectureEntry]:
        return self._cells.get((day, slot))

    def get(self, entry_id: str) -> t.Optional[LectureEntry]:
        cell = self._positions.get(entry_id)
        return self._cells[cell] if cell is not None else None

    def entries_for_day(self, day: str) -> t.Iterator[LectureEntry]:
        """Yield the lectures on ``day`` in time axis order.

        Nothing is yielded for a day that is not on the catalog's day axis.
        """
        if not self.catalog.has_day(day):
            return
        for slot in self.catalog.slots:
            entry = self._cells.get((day, slot))
            if entry is not None:
                yield entry

    def rows(self) -> t.Iterator[tuple[str, list[t.Optional[LectureEntry]]]]:
        """Yield ``(slot, cells)`` per time slot, one cell per catalog day."""
        days = self.catalog.days
        for slot in self.catalog.slots:
            yield slot, [self._cells.get((day, slot)) for day in days]

    def orphans(self) -> list[LectureEntry]:
        """Lectures whose day or slot is no longer on the catalog's axes."""
        days = set(self.catalog.days)
        slots = set(self.catalog.slots)
        return [
            entry for (day, slot), entry in self._cells.items()
            if day not in days or slot not in slots
        ]

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> t.Iterator[LectureEntry]:
        return iter(list(self._cells.values()))

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self._positions
