from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

from ..core.enums import ChargeEffect
from ..students.model import Student, StudentId


@dataclass(frozen=True)
class CreateStudent:
    name: str
    data: dict


@dataclass(frozen=True)
class UpdateStudent:
    student_id: Optional[StudentId]
    name: str
    fields: dict


@dataclass(frozen=True)
class DeleteStudent:
    student_id: Optional[StudentId]
    name: str


@dataclass(frozen=True)
class SetAttendance:
    date: str
    names: tuple[str, ...]
    effects: dict = field(default_factory=dict)


@dataclass(frozen=True)
class DeleteAttendance:
    date: str


PersistOp = Union[CreateStudent, UpdateStudent, DeleteStudent, SetAttendance, DeleteAttendance]


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one engine command.

    `student` is the post-command snapshot (None when the student is gone or
    nothing happened); `operations` are the writes the store still needs, in
    emission order but with no ordering dependency between them.
    """

    student: Optional[Student]
    operations: tuple[PersistOp, ...] = ()
    effect: Optional[ChargeEffect] = None
    affected_dates: tuple[str, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.operations)
