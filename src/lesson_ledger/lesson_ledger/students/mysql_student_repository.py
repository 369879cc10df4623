from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Student, StudentId
from .repository import StudentRepository

# Student fields -> columns; anything else is rejected on update.
_COLUMNS = {"name": "name", "pack": "pack", "debt": "debt", "active": "is_active"}


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, name, pack, debt, is_active
                FROM students
                ORDER BY name
                """
            )
            return [
                Student(
                    student_id=int(r["student_id"]),
                    name=r["name"],
                    pack=int(r["pack"] or 0),
                    debt=int(r["debt"] or 0),
                    active=bool(r.get("is_active", True)),
                )
                for r in fetchall(cur)
            ]

    def create(self, data: dict) -> StudentId:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO students(name, pack, debt, is_active)
                VALUES(%s,%s,%s,%s)
                """,
                (
                    data["name"],
                    int(data.get("pack", 0)),
                    int(data.get("debt", 0)),
                    1 if data.get("active", True) else 0,
                ),
            )
            return int(cur.lastrowid)

    def update(self, student_id: StudentId, fields: dict) -> None:
        unknown = set(fields) - set(_COLUMNS)
        if unknown:
            raise ValueError(f"Unsupported student fields: {sorted(unknown)}")
        if not fields:
            return

        assignments = ", ".join(f"{_COLUMNS[k]}=%s" for k in fields)
        values = [int(v) if k == "active" else v for k, v in fields.items()]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE students SET {assignments} WHERE student_id=%s", (*values, student_id))

    def delete(self, student_id: StudentId) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE student_id=%s", (student_id,))
