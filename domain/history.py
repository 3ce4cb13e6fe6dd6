from __future__ import annotations

import json
import uuid
from dataclasses import asdict
from datetime import datetime
from typing import Any, Protocol

import structlog

from domain.entities import DerivedMetrics, HistoryEntry


log = structlog.get_logger(__name__)

HISTORY_LIMIT = 10


class HistoryStorage(Protocol):
    """Keyed storage for the serialized history array."""

    def load(self) -> str | None: ...

    def save(self, raw: str) -> None: ...

    def clear(self) -> None: ...


def _integral(value: Any) -> int:
    number = float(value)
    if not number.is_integer():
        raise ValueError(f"not a whole number: {value!r}")
    return int(number)


def _entry_from_dict(data: Any) -> HistoryEntry | None:
    if not isinstance(data, dict):
        return None
    try:
        return HistoryEntry(
            id=str(data["id"]),
            date=str(data["date"]),
            bmi=float(data["bmi"]),
            bmr=_integral(data["bmr"]),
            tdee=_integral(data["tdee"]),
            weight=float(data["weight"]),
        )
    except (KeyError, TypeError, ValueError):
        return None


def parse_history(raw: str | None) -> list[HistoryEntry]:
    """Decode a stored history array; anything unreadable yields an empty list."""
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except ValueError as e:
        log.warning("history_parse_failed", error=str(e))
        return []
    if not isinstance(data, list):
        log.warning("history_parse_failed", error="not an array")
        return []
    entries = [e for e in (_entry_from_dict(item) for item in data) if e is not None]
    if len(entries) != len(data):
        log.warning("history_entries_dropped", dropped=len(data) - len(entries))
    return entries


class HistoryStore:
    def __init__(self, storage: HistoryStorage, limit: int = HISTORY_LIMIT) -> None:
        self.storage = storage
        self.limit = limit
        self._entries = parse_history(storage.load())[-limit:]

    @property
    def entries(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    def save(self, metrics: DerivedMetrics, weight: float, *, now: datetime | None = None) -> HistoryEntry:
        now = now or datetime.now()
        entry = HistoryEntry(
            id=uuid.uuid4().hex,
            date=now.strftime("%d.%m"),
            bmi=metrics.bmi,
            bmr=metrics.bmr,
            tdee=metrics.tdee,
            weight=weight,
        )
        entries = [*self._entries, entry][-self.limit:]
        self.storage.save(json.dumps([asdict(e) for e in entries], ensure_ascii=False))
        self._entries = entries
        log.info("history_saved", entry_id=entry.id, size=len(entries))
        return entry

    def clear(self) -> None:
        self.storage.clear()
        self._entries = []
        log.info("history_cleared")
