from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..common.validators import require_iso_date, require_non_empty
from ..core.exceptions import AlreadyMarkedError, InactiveError, NotMarkedError
from ..students.model import Student
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
from .strategies.exact_strategy import ExactRefundStrategy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Reconciliation:
    """Attendance history next to the balances it should explain."""

    name: str
    classes_attended: int
    pack: int
    debt: int


class AccountingEngine:
    """Mutates students and attendance in lockstep.

    Each command runs to completion under the state lock, validates before
    touching anything, and returns the persistence operations the store still
    needs. It never performs I/O itself.
    """

    def __init__(self, state: LedgerState, *, refund_strategy: Optional[RefundStrategy] = None):
        self._state = state
        self._refund = refund_strategy or ExactRefundStrategy()

    @property
    def state(self) -> LedgerState:
        return self._state

    # --- Attendance ---

    def mark_attendance(self, date, name: str) -> CommandResult:
        date = require_iso_date(date)
        name = require_non_empty(name, "Student name")
        with self._state.lock:
            student = self._state.students.require(name)
            if not student.active:
                raise InactiveError(f"{name} is inactive; reactivate before marking attendance")
            if self._state.attendance.is_marked(date, name):
                logger.info("Attendance already recorded for %r on %s", name, date)
                raise AlreadyMarkedError(f"{name} is already marked present on {date}")

            student, effect = self._state.students.charge(name)
            self._state.attendance.mark(date, name, effect)
            logger.info("Marked %r on %s (charged %s)", name, date, effect.value)

            return CommandResult(
                student=student,
                operations=(self._balance_op(student, effect.value), self._day_op(date)),
                effect=effect,
                affected_dates=(date,),
            )

    def unmark_attendance(self, date, name: str) -> CommandResult:
        date = require_iso_date(date)
        name = require_non_empty(name, "Student name")
        with self._state.lock:
            if not self._state.attendance.is_marked(date, name):
                logger.info("No attendance to remove for %r on %s", name, date)
                raise NotMarkedError(f"{name} is not marked present on {date}")

            recorded = self._state.attendance.unmark(date, name)
            ops: list[PersistOp] = []
            refund = None
            student = self._state.students.get(name)
            if student is not None:
                refund = self._refund.decide_refund(student=student, recorded=recorded)
                student = self._state.students.refund(name, refund)
                ops.append(self._balance_op(student, refund.value))
            ops.append(self._day_op(date))
            logger.info("Unmarked %r on %s (refunded %s)", name, date, refund.value if refund else "nothing")

            return CommandResult(student=student, operations=tuple(ops), effect=refund, affected_dates=(date,))

    # --- Students ---

    def create_student(self, name: str, initial_pack=0) -> CommandResult:
        with self._state.lock:
            student = self._state.students.create(name, initial_pack)
            logger.info("Created student %r with pack %d", student.name, student.pack)
            return CommandResult(student=student, operations=(CreateStudent(student.name, student.to_document()),))

    def reactivate_or_create(self, name: str, initial_pack=0, *, confirmed: bool = True) -> CommandResult:
        """Search-box flow: select an active student, revive an inactive one, or create."""
        name = require_non_empty(name, "Student name")
        with self._state.lock:
            existing = self._state.students.get(name)
            if existing is None:
                return self.create_student(name, initial_pack)
            if existing.active or not confirmed:
                return CommandResult(student=existing)
            return self.set_active(name, True)

    def set_active(self, name: str, active: bool) -> CommandResult:
        with self._state.lock:
            before = self._state.students.require(name)
            student = self._state.students.set_active(name, active)
            if student == before:
                return CommandResult(student=student)
            logger.info("Student %r is now %s", name, "active" if student.active else "inactive")
            return CommandResult(student=student, operations=(self._balance_op(student, "active"),))

    def toggle_active(self, name: str) -> CommandResult:
        with self._state.lock:
            return self.set_active(name, not self._state.students.require(name).active)

    def delete_student(self, name: str, *, confirmed: bool) -> CommandResult:
        """Remove a student and every attendance mark of theirs.

        `confirmed` is the user's decision, obtained by the caller beforehand.
        Balances are discarded with the record, not refunded.
        """
        if not confirmed:
            logger.info("Deletion of %r not confirmed; nothing changed", name)
            return CommandResult(student=None)
        with self._state.lock:
            student = self._state.students.require(name)
            affected = self._state.attendance.purge_student(name)
            self._state.students.remove(name)
            logger.info("Deleted student %r (%d attendance day(s) affected)", name, len(affected))

            ops: list[PersistOp] = [DeleteStudent(student.student_id, name)]
            ops.extend(self._day_op(d) for d in affected)
            return CommandResult(student=None, operations=tuple(ops), affected_dates=tuple(affected))

    # --- Administrative balance changes ---

    def recharge(self, name: str, amount) -> CommandResult:
        with self._state.lock:
            student = self._state.students.recharge(name, amount)
            logger.info("Recharged %r; pack is now %d", name, student.pack)
            return CommandResult(student=student, operations=(self._balance_op(student, "pack"),))

    def pay_debt(self, name: str, amount) -> CommandResult:
        with self._state.lock:
            student = self._state.students.pay_debt(name, amount)
            logger.info("Debt payment for %r; debt is now %d", name, student.debt)
            return CommandResult(student=student, operations=(self._balance_op(student, "debt"),))

    def set_pack(self, name: str, value) -> CommandResult:
        with self._state.lock:
            student = self._state.students.set_pack(name, value)
            return CommandResult(student=student, operations=(self._balance_op(student, "pack"),))

    def set_debt(self, name: str, value) -> CommandResult:
        with self._state.lock:
            student = self._state.students.set_debt(name, value)
            return CommandResult(student=student, operations=(self._balance_op(student, "debt"),))

    def reconcile(self, name: str) -> Reconciliation:
        with self._state.lock:
            student = self._state.students.require(name)
            return Reconciliation(
                name=name,
                classes_attended=self._state.attendance.total_for(name),
                pack=student.pack,
                debt=student.debt,
            )

    # --- Helpers ---

    def _balance_op(self, student: Student, field_name: str) -> UpdateStudent:
        return UpdateStudent(student.student_id, student.name, {field_name: getattr(student, field_name)})

    def _day_op(self, date: str) -> PersistOp:
        day = self._state.attendance.day(date)
        if day is None:
            return DeleteAttendance(date)
        return SetAttendance(date=date, names=day.names, effects=day.effects_document())
