from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Optional, Union

from ..core.constants import DATE_FORMAT, DISPLAY_DATE_FORMAT

DateLike = Union[date, datetime, str]

_WEEK_ID = re.compile(r"^\s*(\d{4})-W(\d{1,2})\s*$")


def parse_iso_date(value: DateLike) -> date:
    """Parse YYYY-MM-DD string into date (dates/datetimes pass through)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value.strip(), DATE_FORMAT).date()


def to_iso(value: DateLike) -> str:
    return parse_iso_date(value).strftime(DATE_FORMAT)


def format_date(value: DateLike) -> str:
    """YYYY-MM-DD -> DD/MM/YYYY for display."""
    return parse_iso_date(value).strftime(DISPLAY_DATE_FORMAT)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_iso() -> str:
    return now_local().date().strftime(DATE_FORMAT)


def iso_week_of(value: DateLike) -> str:
    """ISO-8601 week id ("YYYY-Www") of a calendar date.

    Weeks run Monday to Sunday and week 1 is the week holding the year's first
    Thursday, so the year part is the ISO year: 2021-01-01 is "2020-W53".
    """
    iso_year, iso_week, _ = parse_iso_date(value).isocalendar()
    return f"{iso_year}-W{iso_week:02d}"


def current_week_id() -> str:
    return iso_week_of(now_local())


def parse_week_id(week_id: Optional[str]) -> Optional[tuple[int, int]]:
    """Return (iso_year, iso_week) or None when the id is empty or malformed."""
    if not week_id:
        return None
    m = _WEEK_ID.match(week_id)
    if not m:
        return None
    return int(m.group(1)), int(m.group(2))


def dates_of_week(week_id: Optional[str]) -> list[str]:
    """The seven ISO dates, Monday through Sunday, of an ISO week id.

    Invalid ids (including week 53 of a 52-week year) give an empty list.
    """
    parsed = parse_week_id(week_id)
    if parsed is None:
        return []
    year, week = parsed
    try:
        monday = date.fromisocalendar(year, week, 1)
    except ValueError:
        return []
    return [(monday + timedelta(days=i)).strftime(DATE_FORMAT) for i in range(7)]
