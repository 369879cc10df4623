from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Optional

from ..common.validators import (
    clamp_non_negative,
    require_non_empty,
    require_non_negative_int,
    require_positive_int,
)
from ..core.enums import ChargeEffect
from ..core.exceptions import (
    DuplicateNameError,
    InvalidAmountError,
    NotFoundError,
    OverpaymentError,
)
from .model import Student, StudentId


class StudentLedger:
    """In-memory owner of every student's pack and debt balances.

    Students are keyed by exact (case-sensitive) name. Stored instances are
    immutable and replaced on every change, so a Student handed out earlier is
    a stable snapshot.
    """

    def __init__(self, students: Iterable[Student] = ()):
        self._by_name: dict[str, Student] = {}
        for s in students:
            self._by_name[s.name] = s

    def __contains__(self, name: str) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return len(self._by_name)

    def get(self, name: str) -> Optional[Student]:
        return self._by_name.get(name)

    def require(self, name: str) -> Student:
        student = self._by_name.get(name)
        if student is None:
            raise NotFoundError(f"Student {name!r} does not exist")
        return student

    def students(self) -> list[Student]:
        return sorted(self._by_name.values(), key=lambda s: (s.name.casefold(), s.name))

    def _put(self, student: Student) -> Student:
        self._by_name[student.name] = student
        return student

    def create(self, name: str, initial_pack=0, *, student_id: Optional[StudentId] = None) -> Student:
        name = require_non_empty(name, "Student name")
        if name in self._by_name:
            raise DuplicateNameError(f"A student named {name!r} already exists")
        return self._put(Student(student_id=student_id, name=name, pack=clamp_non_negative(initial_pack)))

    def assign_id(self, name: str, student_id: StudentId) -> Student:
        return self._put(replace(self.require(name), student_id=student_id))

    def set_active(self, name: str, active: bool) -> Student:
        student = self.require(name)
        if student.active == bool(active):
            return student
        return self._put(replace(student, active=bool(active)))

    def recharge(self, name: str, amount) -> Student:
        amount = require_positive_int(amount)
        student = self.require(name)
        return self._put(replace(student, pack=student.pack + amount))

    def pay_debt(self, name: str, amount) -> Student:
        amount = require_positive_int(amount)
        student = self.require(name)
        if amount > student.debt:
            raise OverpaymentError(
                f"Debt of {name!r} is {student.debt} class(es); cannot pay {amount}"
            )
        return self._put(replace(student, debt=student.debt - amount))

    def set_pack(self, name: str, value) -> Student:
        value = require_non_negative_int(value, "pack")
        return self._put(replace(self.require(name), pack=value))

    def set_debt(self, name: str, value) -> Student:
        value = require_non_negative_int(value, "debt")
        return self._put(replace(self.require(name), debt=value))

    def charge(self, name: str) -> tuple[Student, ChargeEffect]:
        """Consume one class: drain pack first, otherwise accrue one debt unit."""
        student = self.require(name)
        if student.pack > 0:
            return self._put(replace(student, pack=student.pack - 1)), ChargeEffect.PACK
        return self._put(replace(student, debt=student.debt + 1)), ChargeEffect.DEBT

    def refund(self, name: str, effect: ChargeEffect) -> Student:
        """Give one class back to the balance named by `effect`."""
        student = self.require(name)
        if effect == ChargeEffect.PACK:
            return self._put(replace(student, pack=student.pack + 1))
        if student.debt < 1:
            raise InvalidAmountError(f"{name!r} has no debt to refund")
        return self._put(replace(student, debt=student.debt - 1))

    def remove(self, name: str) -> Student:
        student = self.require(name)
        del self._by_name[name]
        return student
