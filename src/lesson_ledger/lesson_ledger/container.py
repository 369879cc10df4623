from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .core.constants import DEFAULT_LOW_PACK_THRESHOLD, DEFAULT_PERSIST_WORKERS
from .database.connection import DBConfig, DatabaseConnection
from .ledger.factory import RefundStrategyFactory
from .ledger.service import LedgerService
from .reports.service import ReportService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    students_repo: StudentRepository
    attendance_repo: AttendanceRepository

    ledger_service: LedgerService
    report_service: ReportService


def build_services(
    students_repo: StudentRepository,
    attendance_repo: AttendanceRepository,
    *,
    conn: Optional[DatabaseConnection] = None,
    unmark_policy: str = "exact",
    low_pack_threshold: int = DEFAULT_LOW_PACK_THRESHOLD,
    persist_workers: int = DEFAULT_PERSIST_WORKERS,
) -> Container:
    ledger_service = LedgerService(
        students_repo,
        attendance_repo,
        refund_strategy=RefundStrategyFactory().for_policy(unmark_policy),
        workers=persist_workers,
    )
    report_service = ReportService(ledger_service.state, low_pack_threshold=low_pack_threshold)

    return Container(
        conn=conn,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        ledger_service=ledger_service,
        report_service=report_service,
    )


def build_container(*, db_config: dict, **options) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return build_services(
        MySQLStudentRepository(conn),
        MySQLAttendanceRepository(conn),
        conn=conn,
        **options,
    )
