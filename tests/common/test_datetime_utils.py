from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from lesson_ledger.common.datetime_utils import dates_of_week, format_date, iso_week_of, parse_iso_date


@pytest.mark.parametrize(
    "day, expected",
    [
        ("2026-10-19", "2026-W43"),
        ("2024-01-01", "2024-W01"),
        ("2021-01-01", "2020-W53"),
        ("2021-01-03", "2020-W53"),
        ("2021-01-04", "2021-W01"),
        ("2024-12-30", "2025-W01"),
        ("2026-01-01", "2026-W01"),
        ("2025-12-29", "2026-W01"),
    ],
)
def test_iso_week_of_matches_iso_8601(day, expected):
    assert iso_week_of(day) == expected


def test_iso_week_of_accepts_date_and_datetime():
    assert iso_week_of(date(2026, 10, 25)) == "2026-W43"
    assert iso_week_of(datetime(2026, 10, 25, 23, 59)) == "2026-W43"


def test_dates_of_week_monday_to_sunday():
    assert dates_of_week("2026-W43") == [
        "2026-10-19",
        "2026-10-20",
        "2026-10-21",
        "2026-10-22",
        "2026-10-23",
        "2026-10-24",
        "2026-10-25",
    ]


def test_dates_of_week_crosses_year_boundary():
    assert dates_of_week("2020-W53") == [
        "2020-12-28",
        "2020-12-29",
        "2020-12-30",
        "2020-12-31",
        "2021-01-01",
        "2021-01-02",
        "2021-01-03",
    ]


@pytest.mark.parametrize("week_id", ["", None, "2026", "2026-43", "W43", "2026-W", "2026-W00", "2025-W53", "2026-W54"])
def test_dates_of_week_invalid_ids_give_empty_list(week_id):
    assert dates_of_week(week_id) == []


def test_every_date_falls_inside_its_own_week():
    d = date(2019, 12, 20)
    while d <= date(2021, 1, 10):
        week = dates_of_week(iso_week_of(d))
        assert d.isoformat() in week
        assert len(week) == 7
        monday = parse_iso_date(week[0])
        assert monday.weekday() == 0
        assert [parse_iso_date(x) for x in week] == [monday + timedelta(days=i) for i in range(7)]
        d += timedelta(days=1)


def test_format_date_for_display():
    assert format_date("2026-02-05") == "05/02/2026"
