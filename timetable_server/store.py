# -*- coding: utf-8 -*-
"""
Key-value stores holding the schedule settings blob.

The catalog only ever needs ``get`` and ``set`` of a JSON-serializable value
under a string key. ``MemoryStore`` keeps everything in a dict for tests and
single-process sessions; ``JsonFileStore`` mirrors the dict to one JSON file.
"""
from __future__ import annotations

import json
import logging
import os
import typing as t
from pathlib import Path


logger = logging.getLogger(__name__)

# Where the schedule settings live when no explicit path is given
SCHEDULE_STORE_PATH = os.getenv("SCHEDULE_STORE_PATH", "schedule_settings.json")

DAYS_KEY = "customDays"
SLOTS_KEY = "customTimeSlots"


class KeyValueStore(t.Protocol):
    """Anything that can hold JSON values under string keys."""

    def get(self, key: str, default: t.Any = None) -> t.Any: ...

    def set(self, key: str, value: t.Any) -> None: ...


class MemoryStore:
    """In-memory store, one dict per instance."""

    def __init__(self, initial: t.Optional[dict[str, t.Any]] = None) -> None:
        self.data: dict[str, t.Any] = dict(initial or {})

    def get(self, key: str, default: t.Any = None) -> t.Any:
        return self.data.get(key, default)

    def set(self, key: str, value: t.Any) -> None:
        self.data[key] = value


class JsonFileStore:
    """Store backed by a single JSON object on disk.

    The file is read lazily on first access and rewritten in full on every
    ``set``. A missing file reads as an empty store.
    """

    def __init__(self, path: t.Union[str, Path, None] = None) -> None:
        self.path = Path(path or SCHEDULE_STORE_PATH)
        self._data: t.Optional[dict[str, t.Any]] = None

    def _load(self) -> dict[str, t.Any]:
        if self._data is None:
            if self.path.is_file():
                with open(self.path, "r", encoding="utf-8") as f:
                    loaded = json.load(f)
                self._data = loaded if isinstance(loaded, dict) else {}
            else:
                self._data = {}
        return self._data

    def get(self, key: str, default: t.Any = None) -> t.Any:
        return self._load().get(key, default)

    def set(self, key: str, value: t.Any) -> None:
        data = self._load()
        data[key] = value
        if self.path.parent and not self.path.parent.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        logger.debug("Wrote %s to %s", key, self.path)
