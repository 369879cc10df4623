from __future__ import annotations

import logging
from typing import Optional

import mysql.connector
from flask import Flask, jsonify, request

from ..common.datetime_utils import current_week_id, dates_of_week, today_iso
from ..container import Container
from ..core.exceptions import DomainError, DuplicateNameError, IdempotencyNotice, NotFoundError
from ..students.model import Student
from .operations import CommandResult

logger = logging.getLogger(__name__)


def _student_json(s: Optional[Student]) -> Optional[dict]:
    if s is None:
        return None
    return {
        "id": s.student_id,
        "name": s.name,
        "pack": s.pack,
        "debt": s.debt,
        "active": s.active,
        "state": s.state.value,
    }


def _result_json(result: CommandResult) -> dict:
    return {
        "student": _student_json(result.student),
        "effect": result.effect.value if result.effect else None,
        "changed": result.changed,
        "dates": list(result.affected_dates),
    }


def _truthy(value) -> bool:
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def register(app: Flask, container: Container) -> None:
    ledger = container.ledger_service
    reports = container.report_service

    @app.errorhandler(DomainError)
    def domain_error(e: DomainError):
        if isinstance(e, NotFoundError):
            status = 404
        elif isinstance(e, (DuplicateNameError, IdempotencyNotice)):
            status = 409
        else:
            status = 400
        return jsonify({"error": str(e), "kind": type(e).__name__}), status

    @app.errorhandler(mysql.connector.Error)
    def store_error(e: mysql.connector.Error):
        # Local state keeps the change, except for an undone student create.
        logger.error("Store write failed: %s", e)
        return jsonify({"error": "The store write failed", "persisted": False}), 502

    def _body() -> dict:
        return request.get_json(silent=True) or {}

    # --- Students ---

    @app.get("/api/students")
    def list_students():
        active = request.args.get("status", "active") != "inactive"
        rows = reports.student_rows(active=active)
        return jsonify(
            [
                {
                    "name": r.name,
                    "pack": r.pack,
                    "debt": r.debt,
                    "total_classes": r.total_classes,
                    "pack_level": r.pack_level.value,
                    "state": r.state.value,
                }
                for r in rows
            ]
        )

    @app.post("/api/students")
    def create_student():
        data = _body()
        if _truthy(data.get("reactivate", False)):
            result = ledger.reactivate_or_create(
                data.get("name", ""),
                data.get("pack", 0),
                confirmed=_truthy(data.get("confirm", True)),
            )
        else:
            result = ledger.create_student(data.get("name", ""), data.get("pack", 0))
        return jsonify(_result_json(result)), 201 if result.changed else 200

    @app.post("/api/students/<name>/active")
    def set_active(name: str):
        data = _body()
        if "active" in data:
            result = ledger.set_active(name, _truthy(data["active"]))
        else:
            result = ledger.toggle_active(name)
        return jsonify(_result_json(result))

    @app.post("/api/students/<name>/recharge")
    def recharge(name: str):
        return jsonify(_result_json(ledger.recharge(name, _body().get("amount"))))

    @app.post("/api/students/<name>/pay-debt")
    def pay_debt(name: str):
        return jsonify(_result_json(ledger.pay_debt(name, _body().get("amount"))))

    @app.delete("/api/students/<name>")
    def delete_student(name: str):
        result = ledger.delete_student(name, confirmed=_truthy(request.args.get("confirm", "0")))
        return jsonify(_result_json(result))

    # --- Attendance ---

    @app.post("/api/attendance")
    def mark_attendance():
        data = _body()
        result = ledger.mark_attendance(data.get("date") or today_iso(), data.get("name", ""))
        return jsonify(_result_json(result)), 201

    @app.delete("/api/attendance/<date>/<path:name>")
    def unmark_attendance(date: str, name: str):
        return jsonify(_result_json(ledger.unmark_attendance(date, name)))

    @app.get("/api/attendance/<date>")
    def day_attendance(date: str):
        view = reports.day_attendance(date)
        return jsonify(
            {
                "date": view.date,
                "display_date": view.display_date,
                "count": view.count,
                "entries": [
                    {
                        "name": e.name,
                        "pack": e.pack,
                        "debt": e.debt,
                        "alert": e.alert.value if e.alert else None,
                    }
                    for e in view.entries
                ],
            }
        )

    # --- Weeks ---

    @app.get("/api/weeks/current")
    def current_week():
        week_id = current_week_id()
        return jsonify({"week": week_id, "dates": dates_of_week(week_id)})

    @app.get("/api/weeks/<week_id>/summary")
    def weekly_summary(week_id: str):
        counts = reports.weekly_counts(week_id)
        return jsonify({"week": week_id, "counts": [{"name": n, "count": c} for n, c in counts.items()]})

    @app.get("/api/weeks/<week_id>/history")
    def week_history(week_id: str):
        days = reports.week_history(week_id)
        return jsonify(
            {
                "week": week_id,
                "days": [{"date": d.date, "display_date": d.display_date, "names": d.names} for d in days],
            }
        )

    @app.get("/api/search")
    def search():
        result = reports.search_active(request.args.get("q", ""))
        return jsonify(
            {
                "query": result.query,
                "matches": [_student_json(s) for s in result.matches],
                "can_create": result.can_create,
            }
        )
