from __future__ import annotations

from typing import Protocol, Sequence

from .model import Student, StudentId


class StudentRepository(Protocol):
    """Repository interface for students.

    Note (DIP): the service layer depends on this interface, not on a concrete
    store. Writes are last-write-wins per student.
    """

    def list_all(self) -> Sequence[Student]:
        raise NotImplementedError

    def create(self, data: dict) -> StudentId:
        """Insert a student document and return the id the store assigned."""

        raise NotImplementedError

    def update(self, student_id: StudentId, fields: dict) -> None:
        """Partial update: only the given fields are written."""

        raise NotImplementedError

    def delete(self, student_id: StudentId) -> None:
        raise NotImplementedError
