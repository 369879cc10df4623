from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import DayAlert, PackLevel, StudentState
from ..students.model import Student


@dataclass(frozen=True)
class StudentRow:
    """Read-model for student tables (balances plus attendance total)."""

    name: str
    pack: int
    debt: int
    total_classes: int
    pack_level: PackLevel
    state: StudentState


@dataclass(frozen=True)
class DayEntry:
    name: str
    pack: Optional[int]
    debt: Optional[int]
    alert: Optional[DayAlert] = None


@dataclass(frozen=True)
class DayView:
    date: str
    display_date: str
    entries: list[DayEntry] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.entries)

    @property
    def alerts(self) -> list[DayEntry]:
        return [e for e in self.entries if e.alert is not None]


@dataclass(frozen=True)
class HistoryDay:
    date: str
    display_date: str
    names: list[str]


@dataclass(frozen=True)
class SearchResult:
    query: str
    matches: list[Student]
    exact: Optional[Student] = None

    @property
    def can_create(self) -> bool:
        """True when the typed name matches no active student exactly."""
        return bool(self.query) and self.exact is None
