from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional, Sequence

from ..attendance.index import AttendanceIndex
from ..students.ledger import StudentLedger
from ..students.model import Student


@dataclass
class LedgerState:
    """One consistency domain: all students plus the attendance index.

    Passed explicitly to the engine and the reporter. Every mutation happens
    under `lock`.
    """

    students: StudentLedger = field(default_factory=StudentLedger)
    attendance: AttendanceIndex = field(default_factory=AttendanceIndex)
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    @classmethod
    def from_records(
        cls,
        students: Iterable[Student],
        names_by_date: Mapping[str, Sequence[str]],
        effects_by_date: Optional[Mapping[str, Mapping[str, str]]] = None,
    ) -> "LedgerState":
        return cls(
            students=StudentLedger(students),
            attendance=AttendanceIndex.load(names_by_date, effects_by_date),
        )

    def replace_with(self, other: "LedgerState") -> None:
        """Swap in freshly loaded contents, keeping this object (and its lock)."""
        with self.lock:
            self.students = other.students
            self.attendance = other.attendance
