from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..core.constants import DEFAULT_PERSIST_WORKERS
from ..students.repository import StudentRepository
from .engine import AccountingEngine, Reconciliation
from .operations import (
    CommandResult,
    CreateStudent,
    DeleteAttendance,
    DeleteStudent,
    PersistOp,
    SetAttendance,
    UpdateStudent,
)
from .state import LedgerState
from .strategies.base import RefundStrategy

logger = logging.getLogger(__name__)


class LedgerService:
    """Use case layer: run engine commands, then write the results to the stores.

    Local state is committed before any write is issued. The writes of one
    command go out concurrently; a failing write is re-raised once all of them
    have finished and the local state is not rolled back. The exception is a
    failed student create, which is undone locally before re-raising.

    Day documents are written from the current state under a per-date lock,
    not from the snapshot a command emitted.
    """

    def __init__(
        self,
        students: StudentRepository,
        attendance: AttendanceRepository,
        *,
        state: Optional[LedgerState] = None,
        refund_strategy: Optional[RefundStrategy] = None,
        workers: int = DEFAULT_PERSIST_WORKERS,
    ):
        self._students = students
        self._attendance = attendance
        self._workers = max(1, int(workers))
        self._date_locks: dict[str, threading.Lock] = {}
        self._date_locks_guard = threading.Lock()
        self._engine = AccountingEngine(state or LedgerState(), refund_strategy=refund_strategy)

    @property
    def engine(self) -> AccountingEngine:
        return self._engine

    @property
    def state(self) -> LedgerState:
        return self._engine.state

    def load(self) -> LedgerState:
        """Replace the in-memory state with what the stores hold."""
        with ThreadPoolExecutor(max_workers=3) as pool:
            students_f = pool.submit(self._students.list_all)
            names_f = pool.submit(self._attendance.list_all)
            effects_f = pool.submit(self._attendance.list_effects)
            loaded = LedgerState.from_records(students_f.result(), names_f.result(), effects_f.result())

        self.state.replace_with(loaded)
        logger.info("Loaded %d student(s) and %d attendance day(s)", len(loaded.students), len(loaded.attendance))
        return self.state

    # --- Commands ---

    def mark_attendance(self, date, name: str) -> CommandResult:
        return self._run(self._engine.mark_attendance, date, name)

    def unmark_attendance(self, date, name: str) -> CommandResult:
        return self._run(self._engine.unmark_attendance, date, name)

    def create_student(self, name: str, initial_pack=0) -> CommandResult:
        return self._run(self._engine.create_student, name, initial_pack)

    def reactivate_or_create(self, name: str, initial_pack=0, *, confirmed: bool = True) -> CommandResult:
        return self._run(self._engine.reactivate_or_create, name, initial_pack, confirmed=confirmed)

    def set_active(self, name: str, active: bool) -> CommandResult:
        return self._run(self._engine.set_active, name, active)

    def toggle_active(self, name: str) -> CommandResult:
        return self._run(self._engine.toggle_active, name)

    def delete_student(self, name: str, *, confirmed: bool) -> CommandResult:
        return self._run(self._engine.delete_student, name, confirmed=confirmed)

    def recharge(self, name: str, amount) -> CommandResult:
        return self._run(self._engine.recharge, name, amount)

    def pay_debt(self, name: str, amount) -> CommandResult:
        return self._run(self._engine.pay_debt, name, amount)

    def set_pack(self, name: str, value) -> CommandResult:
        return self._run(self._engine.set_pack, name, value)

    def set_debt(self, name: str, value) -> CommandResult:
        return self._run(self._engine.set_debt, name, value)

    def reconcile(self, name: str) -> Reconciliation:
        return self._engine.reconcile(name)

    # --- Persistence ---

    def _run(self, command, *args, **kwargs) -> CommandResult:
        # A new student is stored before the lock is released, so no other
        # command ever sees a student without a store id.
        with self.state.lock:
            result = self._store_creates(command(*args, **kwargs))
        self.persist([op for op in result.operations if not isinstance(op, CreateStudent)])
        return result

    def _store_creates(self, result: CommandResult) -> CommandResult:
        for op in result.operations:
            if not isinstance(op, CreateStudent):
                continue
            try:
                student_id = self._students.create(op.data)
            except Exception:
                self.state.students.remove(op.name)
                logger.error("Storing new student %r failed; local create undone", op.name)
                raise
            student = self.state.students.assign_id(op.name, student_id)
            if result.student is not None and result.student.name == op.name:
                result = replace(result, student=student)
        return result

    def persist(self, operations: Sequence[PersistOp]) -> None:
        if not operations:
            return
        with ThreadPoolExecutor(max_workers=min(self._workers, len(operations))) as pool:
            futures = [pool.submit(self._apply, op) for op in operations]

        errors = [f.exception() for f in futures if f.exception() is not None]
        for err in errors:
            logger.error("Persistence write failed; local state is ahead of the store: %s", err)
        if errors:
            raise errors[0]

    def _apply(self, op: PersistOp) -> None:
        if isinstance(op, UpdateStudent):
            student_id = op.student_id if op.student_id is not None else self._current_id(op.name)
            if student_id is None:
                raise LookupError(f"Student {op.name!r} has no store id; update {op.fields} not written")
            self._students.update(student_id, op.fields)
        elif isinstance(op, DeleteStudent):
            if op.student_id is None:
                logger.warning("Student %r was never stored; nothing to delete", op.name)
                return
            self._students.delete(op.student_id)
        elif isinstance(op, (SetAttendance, DeleteAttendance)):
            self._write_day(op.date)
        else:
            raise TypeError(f"Unsupported persistence operation: {op!r}")

    def _write_day(self, date: str) -> None:
        """Write the day as it stands now, one writer per date at a time.

        The document is rebuilt under the date lock, so the last write for a
        date always carries every change made before it started.
        """
        with self._date_lock(date):
            with self.state.lock:
                day = self.state.attendance.day(date)
            if day is None:
                self._attendance.delete(date)
            else:
                self._attendance.set(date, list(day.names), day.effects_document())

    def _date_lock(self, date: str) -> threading.Lock:
        with self._date_locks_guard:
            return self._date_locks.setdefault(date, threading.Lock())

    def _current_id(self, name: str):
        with self.state.lock:
            student = self.state.students.get(name)
        return student.student_id if student else None
