from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence

from ..core.enums import ChargeEffect
from ..core.exceptions import AlreadyMarkedError, NotMarkedError
from .model import AttendanceDay

logger = logging.getLogger(__name__)


def _parse_effect(raw, date: str, name: str) -> Optional[ChargeEffect]:
    if not raw:
        return None
    try:
        return ChargeEffect(raw)
    except ValueError:
        logger.warning("Unknown charge effect %r for %r on %s treated as unrecorded", raw, name, date)
        return None


class AttendanceIndex:
    """Date -> names present that day, at most one mark per (date, name).

    Each mark also remembers the ChargeEffect it produced (None when unknown,
    e.g. history loaded from a store that never kept it). A date whose last
    name is removed is dropped from the index.
    """

    def __init__(self):
        self._days: dict[str, dict[str, Optional[ChargeEffect]]] = {}

    @classmethod
    def load(
        cls,
        names_by_date: Mapping[str, Sequence[str]],
        effects_by_date: Optional[Mapping[str, Mapping[str, str]]] = None,
    ) -> "AttendanceIndex":
        index = cls()
        effects_by_date = effects_by_date or {}
        for date, names in names_by_date.items():
            recorded = effects_by_date.get(date) or {}
            day: dict[str, Optional[ChargeEffect]] = {}
            for name in names:
                if name in day:
                    logger.warning("Duplicate mark for %r on %s ignored while loading", name, date)
                    continue
                day[name] = _parse_effect(recorded.get(name), date, name)
            if day:
                index._days[date] = day
        return index

    def __len__(self) -> int:
        return len(self._days)

    def dates(self) -> list[str]:
        return list(self._days)

    def has_day(self, date: str) -> bool:
        return date in self._days

    def is_marked(self, date: str, name: str) -> bool:
        return name in self._days.get(date, {})

    def names_on(self, date: str) -> list[str]:
        return list(self._days.get(date, {}))

    def effects_on(self, date: str) -> dict[str, Optional[ChargeEffect]]:
        return dict(self._days.get(date, {}))

    def effect_of(self, date: str, name: str) -> Optional[ChargeEffect]:
        return self._days.get(date, {}).get(name)

    def day(self, date: str) -> Optional[AttendanceDay]:
        marks = self._days.get(date)
        if not marks:
            return None
        return AttendanceDay(date=date, names=tuple(marks), effects=dict(marks))

    def total_for(self, name: str) -> int:
        return sum(1 for marks in self._days.values() if name in marks)

    def mark(self, date: str, name: str, effect: Optional[ChargeEffect] = None) -> None:
        marks = self._days.setdefault(date, {})
        if name in marks:
            raise AlreadyMarkedError(f"{name} is already marked present on {date}")
        marks[name] = effect

    def unmark(self, date: str, name: str) -> Optional[ChargeEffect]:
        marks = self._days.get(date)
        if not marks or name not in marks:
            raise NotMarkedError(f"{name} is not marked present on {date}")
        effect = marks.pop(name)
        if not marks:
            del self._days[date]
        return effect

    def purge_student(self, name: str) -> list[str]:
        """Remove `name` from every date; returns the dates that changed."""
        affected: list[str] = []
        for date in list(self._days):
            marks = self._days[date]
            if name not in marks:
                continue
            del marks[name]
            affected.append(date)
            if not marks:
                del self._days[date]
        return affected
