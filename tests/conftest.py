from __future__ import annotations

import threading
from typing import Optional

import pytest

from lesson_ledger.ledger.engine import AccountingEngine
from lesson_ledger.ledger.state import LedgerState
from lesson_ledger.ledger.strategies.exact_strategy import ExactRefundStrategy
from lesson_ledger.students.model import Student


class InMemoryStudents:
    def __init__(self, students=()):
        self._lock = threading.Lock()
        self._next_id = 1
        self.docs: dict[int, dict] = {}
        self.calls: list[tuple] = []
        for s in students:
            self.docs[self._allocate()] = s.to_document()

    def _allocate(self) -> int:
        sid = self._next_id
        self._next_id += 1
        return sid

    def list_all(self):
        return [Student(student_id=sid, **doc) for sid, doc in self.docs.items()]

    def create(self, data: dict) -> int:
        with self._lock:
            sid = self._allocate()
            self.docs[sid] = dict(data)
            self.calls.append(("create", sid))
            return sid

    def update(self, student_id, fields: dict) -> None:
        with self._lock:
            self.docs[student_id].update(fields)
            self.calls.append(("update", student_id, dict(fields)))

    def delete(self, student_id) -> None:
        with self._lock:
            del self.docs[student_id]
            self.calls.append(("delete", student_id))


class InMemoryAttendance:
    def __init__(self, names: Optional[dict] = None, effects: Optional[dict] = None):
        self._lock = threading.Lock()
        self.names: dict[str, list[str]] = {d: list(n) for d, n in (names or {}).items()}
        self.effects: dict[str, dict[str, str]] = {d: dict(e) for d, e in (effects or {}).items()}
        self.calls: list[tuple] = []

    def list_all(self):
        return {d: list(n) for d, n in self.names.items()}

    def list_effects(self):
        return {d: dict(e) for d, e in self.effects.items()}

    def set(self, date, names, effects=None) -> None:
        with self._lock:
            self.names[date] = list(names)
            self.effects[date] = dict(effects or {})
            self.calls.append(("set", date, list(names)))

    def delete(self, date) -> None:
        with self._lock:
            self.names.pop(date, None)
            self.effects.pop(date, None)
            self.calls.append(("delete", date))


@pytest.fixture
def students_repo():
    return InMemoryStudents()


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def state():
    return LedgerState()


@pytest.fixture
def engine(state):
    return AccountingEngine(state, refund_strategy=ExactRefundStrategy())


@pytest.fixture
def add_student(state):
    """Put a student straight into the ledger with the given balances."""

    def _add(name: str, pack: int = 0, debt: int = 0, active: bool = True, student_id=None) -> Student:
        state.students.create(name, pack, student_id=student_id or name.lower())
        if debt:
            state.students.set_debt(name, debt)
        if not active:
            state.students.set_active(name, False)
        return state.students.require(name)

    return _add


@pytest.fixture
def make_students_repo():
    return InMemoryStudents


@pytest.fixture
def make_attendance_repo():
    return InMemoryAttendance
