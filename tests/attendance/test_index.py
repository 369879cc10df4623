from __future__ import annotations

import pytest

from lesson_ledger.attendance.index import AttendanceIndex
from lesson_ledger.core.enums import ChargeEffect
from lesson_ledger.core.exceptions import AlreadyMarkedError, NotMarkedError


def test_mark_twice_same_day_is_rejected():
    index = AttendanceIndex()
    index.mark("2026-10-19", "Ana")

    with pytest.raises(AlreadyMarkedError):
        index.mark("2026-10-19", "Ana")
    assert index.names_on("2026-10-19") == ["Ana"]


def test_names_keep_marking_order():
    index = AttendanceIndex()
    for name in ["Carla", "Ana", "Bruno"]:
        index.mark("2026-10-19", name)
    assert index.names_on("2026-10-19") == ["Carla", "Ana", "Bruno"]


def test_unmark_last_name_removes_the_day():
    index = AttendanceIndex()
    index.mark("2026-10-19", "Ana", ChargeEffect.DEBT)

    assert index.unmark("2026-10-19", "Ana") == ChargeEffect.DEBT
    assert not index.has_day("2026-10-19")
    assert index.dates() == []


def test_unmark_absent_reports_not_marked():
    index = AttendanceIndex()
    index.mark("2026-10-19", "Ana")

    with pytest.raises(NotMarkedError):
        index.unmark("2026-10-19", "Bruno")
    with pytest.raises(NotMarkedError):
        index.unmark("2026-10-20", "Ana")
    assert index.names_on("2026-10-19") == ["Ana"]


def test_purge_student_returns_affected_dates_and_drops_empty_days():
    index = AttendanceIndex.load(
        {
            "2026-10-19": ["Ana", "Bruno"],
            "2026-10-20": ["Ana"],
            "2026-10-21": ["Bruno"],
        }
    )

    affected = index.purge_student("Ana")

    assert affected == ["2026-10-19", "2026-10-20"]
    assert index.names_on("2026-10-19") == ["Bruno"]
    assert not index.has_day("2026-10-20")
    assert index.total_for("Ana") == 0
    assert index.total_for("Bruno") == 2


def test_load_keeps_recorded_effects_and_skips_duplicates():
    index = AttendanceIndex.load(
        {"2026-10-19": ["Ana", "Ana", "Bruno"], "2026-10-20": []},
        {"2026-10-19": {"Ana": "pack"}},
    )

    assert index.names_on("2026-10-19") == ["Ana", "Bruno"]
    assert index.effect_of("2026-10-19", "Ana") == ChargeEffect.PACK
    assert index.effect_of("2026-10-19", "Bruno") is None
    assert not index.has_day("2026-10-20")


def test_load_treats_unknown_effect_as_unrecorded():
    index = AttendanceIndex.load(
        {"2026-10-19": ["Ana", "Bruno"]},
        {"2026-10-19": {"Ana": "voucher", "Bruno": "debt"}},
    )

    assert index.names_on("2026-10-19") == ["Ana", "Bruno"]
    assert index.effect_of("2026-10-19", "Ana") is None
    assert index.effect_of("2026-10-19", "Bruno") == ChargeEffect.DEBT


def test_day_read_model():
    index = AttendanceIndex()
    index.mark("2026-10-19", "Ana", ChargeEffect.PACK)
    index.mark("2026-10-19", "Bruno")

    day = index.day("2026-10-19")

    assert day.names == ("Ana", "Bruno")
    assert day.effects_document() == {"Ana": "pack"}
    assert index.day("2026-10-20") is None
