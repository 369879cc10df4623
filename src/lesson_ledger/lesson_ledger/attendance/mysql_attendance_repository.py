from __future__ import annotations

from typing import Mapping, Optional, Sequence

from ..common.datetime_utils import to_iso
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, load_json
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    """One row per class date; `names` and `effects` are JSON documents."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _rows(self):
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT day, names, effects FROM attendance ORDER BY day")
            return fetchall(cur)

    def list_all(self) -> Mapping[str, Sequence[str]]:
        out: dict[str, list[str]] = {}
        for r in self._rows():
            names = load_json(r["names"], [])
            if names:
                out[to_iso(r["day"])] = [str(n) for n in names]
        return out

    def list_effects(self) -> Mapping[str, Mapping[str, str]]:
        out: dict[str, dict[str, str]] = {}
        for r in self._rows():
            effects = load_json(r.get("effects"), {})
            if effects:
                out[to_iso(r["day"])] = {str(k): str(v) for k, v in effects.items()}
        return out

    def set(self, date: str, names: Sequence[str], effects: Optional[Mapping[str, str]] = None) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(day, names, effects)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE names=VALUES(names), effects=VALUES(effects)
                """,
                (date, dump_json(list(names)), dump_json(dict(effects or {}))),
            )

    def delete(self, date: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance WHERE day=%s", (date,))
