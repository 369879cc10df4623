from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from ..core.enums import StudentState

StudentId = Union[int, str]


@dataclass(frozen=True)
class Student:
    """Domain entity: a student and their class balances.

    Note: Plain data object (no storage code). `student_id` is None until the
    store has assigned one.
    """

    student_id: Optional[StudentId]
    name: str
    pack: int = 0
    debt: int = 0
    active: bool = True

    @property
    def state(self) -> StudentState:
        if not self.active:
            return StudentState.INACTIVE
        if self.debt > 0:
            return StudentState.IN_DEBT
        if self.pack > 0:
            return StudentState.CREDITED
        return StudentState.NEUTRAL

    def to_document(self) -> dict:
        """Fields persisted by a StudentRepository (everything but the id)."""
        return {"name": self.name, "pack": self.pack, "debt": self.debt, "active": self.active}
