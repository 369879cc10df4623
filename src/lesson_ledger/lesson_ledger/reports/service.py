from __future__ import annotations

from typing import Optional

from ..common.datetime_utils import dates_of_week, format_date
from ..common.validators import require_iso_date
from ..core.constants import DEFAULT_LOW_PACK_THRESHOLD
from ..core.enums import DayAlert, PackLevel
from ..ledger.state import LedgerState
from ..students.model import Student
from .model import DayEntry, DayView, HistoryDay, SearchResult, StudentRow


class ReportService:
    """Read-only views over a LedgerState. Never mutates it."""

    def __init__(self, state: LedgerState, *, low_pack_threshold: int = DEFAULT_LOW_PACK_THRESHOLD):
        self._state = state
        self._low = int(low_pack_threshold)

    def weekly_counts(self, week_id: Optional[str]) -> dict[str, int]:
        """Marks per student over an ISO week, most classes first.

        Ties are ordered by name so the output is deterministic.
        """
        counts: dict[str, int] = {}
        with self._state.lock:
            for date in dates_of_week(week_id):
                for name in self._state.attendance.names_on(date):
                    counts[name] = counts.get(name, 0) + 1
        return dict(sorted(counts.items(), key=lambda kv: (-kv[1], kv[0])))

    def total_classes_for_student(self, name: str) -> int:
        with self._state.lock:
            return self._state.attendance.total_for(name)

    def partition_by_active(self) -> tuple[list[Student], list[Student]]:
        with self._state.lock:
            students = self._state.students.students()
        active = [s for s in students if s.active]
        inactive = [s for s in students if not s.active]
        return active, inactive

    def pack_level(self, pack: int) -> PackLevel:
        if pack <= 0:
            return PackLevel.DANGER
        if pack <= self._low:
            return PackLevel.WARN
        return PackLevel.OK

    def student_rows(self, *, active: bool = True) -> list[StudentRow]:
        actives, inactives = self.partition_by_active()
        with self._state.lock:
            return [
                StudentRow(
                    name=s.name,
                    pack=s.pack,
                    debt=s.debt,
                    total_classes=self._state.attendance.total_for(s.name),
                    pack_level=self.pack_level(s.pack),
                    state=s.state,
                )
                for s in (actives if active else inactives)
            ]

    def day_attendance(self, date) -> DayView:
        date = require_iso_date(date)
        entries: list[DayEntry] = []
        with self._state.lock:
            for name in self._state.attendance.names_on(date):
                s = self._state.students.get(name)
                if s is None:
                    entries.append(DayEntry(name=name, pack=None, debt=None))
                    continue
                entries.append(DayEntry(name=name, pack=s.pack, debt=s.debt, alert=self._alert_for(s)))
        return DayView(date=date, display_date=format_date(date), entries=entries)

    def _alert_for(self, s: Student) -> Optional[DayAlert]:
        if s.debt > 0:
            return DayAlert.DEBT
        if s.pack == 0:
            return DayAlert.EMPTY_PACK
        if s.pack <= self._low:
            return DayAlert.LOW_PACK
        return None

    def week_history(self, week_id: Optional[str]) -> list[HistoryDay]:
        """Days of the week that have attendance, newest first."""
        with self._state.lock:
            days = [
                HistoryDay(date=d, display_date=format_date(d), names=self._state.attendance.names_on(d))
                for d in dates_of_week(week_id)
                if self._state.attendance.has_day(d)
            ]
        days.sort(key=lambda h: h.date, reverse=True)
        return days

    def search_active(self, query: str) -> SearchResult:
        q = (query or "").strip()
        if not q:
            return SearchResult(query="", matches=[])
        needle = q.lower()
        active, _ = self.partition_by_active()
        matches = [s for s in active if needle in s.name.lower()]
        exact = next((s for s in matches if s.name.lower() == needle), None)
        return SearchResult(query=q, matches=matches, exact=exact)
