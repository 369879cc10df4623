from __future__ import annotations

from types import SimpleNamespace

import pytest

from lesson_ledger.container import build_services
from lesson_ledger.main import create_app


@pytest.fixture
def client(students_repo, attendance_repo):
    container = build_services(students_repo, attendance_repo, persist_workers=2)
    settings = SimpleNamespace(SECRET_KEY="test-secret", TESTING=True, LOG_LEVEL="WARNING")
    app = create_app(settings=settings, container=container)
    return app.test_client()


def test_create_and_mark_flow(client):
    created = client.post("/api/students", json={"name": "Ana", "pack": 1})
    assert created.status_code == 201
    assert created.get_json()["student"]["id"] == 1

    marked = client.post("/api/attendance", json={"date": "2026-10-19", "name": "Ana"})
    assert marked.status_code == 201
    assert marked.get_json()["effect"] == "pack"

    day = client.get("/api/attendance/2026-10-19").get_json()
    assert day["count"] == 1
    assert day["entries"][0] == {"name": "Ana", "pack": 0, "debt": 0, "alert": "EMPTY_PACK"}


def test_domain_errors_map_to_status_codes(client):
    client.post("/api/students", json={"name": "Ana", "pack": 0})

    assert client.post("/api/students", json={"name": "Ana"}).status_code == 409
    assert client.post("/api/attendance", json={"date": "2026-10-19", "name": "Nobody"}).status_code == 404

    client.post("/api/attendance", json={"date": "2026-10-19", "name": "Ana"})
    again = client.post("/api/attendance", json={"date": "2026-10-19", "name": "Ana"})
    assert again.status_code == 409
    assert again.get_json()["kind"] == "AlreadyMarkedError"

    overpay = client.post("/api/students/Ana/pay-debt", json={"amount": 5})
    assert overpay.status_code == 400
    assert overpay.get_json()["kind"] == "OverpaymentError"


def test_unmark_and_weekly_summary(client):
    client.post("/api/students", json={"name": "Ana", "pack": 3})
    client.post("/api/students", json={"name": "Bruno", "pack": 3})
    client.post("/api/attendance", json={"date": "2026-10-19", "name": "Ana"})
    client.post("/api/attendance", json={"date": "2026-10-19", "name": "Bruno"})
    client.post("/api/attendance", json={"date": "2026-10-21", "name": "Ana"})

    summary = client.get("/api/weeks/2026-W43/summary").get_json()
    assert summary["counts"] == [{"name": "Ana", "count": 2}, {"name": "Bruno", "count": 1}]

    removed = client.delete("/api/attendance/2026-10-21/Ana").get_json()
    assert removed["student"]["pack"] == 2

    history = client.get("/api/weeks/2026-W43/history").get_json()
    assert [d["date"] for d in history["days"]] == ["2026-10-19"]


def test_delete_requires_confirmation(client):
    client.post("/api/students", json={"name": "Ana", "pack": 3})

    kept = client.delete("/api/students/Ana").get_json()
    assert kept["changed"] is False

    gone = client.delete("/api/students/Ana?confirm=1").get_json()
    assert gone["changed"] is True
    assert client.get("/api/students").get_json() == []


def test_toggle_recharge_and_search(client):
    client.post("/api/students", json={"name": "Ana", "pack": 0})

    recharged = client.post("/api/students/Ana/recharge", json={"amount": 4}).get_json()
    assert recharged["student"]["pack"] == 4

    off = client.post("/api/students/Ana/active", json={"active": False}).get_json()
    assert off["student"]["state"] == "INACTIVE"
    assert client.get("/api/search?q=an").get_json()["matches"] == []

    revived = client.post("/api/students", json={"name": "Ana", "reactivate": True}).get_json()
    assert revived["student"]["active"] is True
    assert client.get("/api/search?q=an").get_json()["can_create"] is True
