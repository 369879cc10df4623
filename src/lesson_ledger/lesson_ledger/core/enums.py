from __future__ import annotations

from enum import Enum


class ChargeEffect(str, Enum):
    """Which balance a single attendance mark changed."""

    PACK = "pack"
    DEBT = "debt"


class StudentState(str, Enum):
    """Balance state of a student, as shown in reports."""

    CREDITED = "CREDITED"
    NEUTRAL = "NEUTRAL"
    IN_DEBT = "IN_DEBT"
    INACTIVE = "INACTIVE"


class UnmarkPolicy(str, Enum):
    """How an unmark decides which balance to refund."""

    EXACT = "exact"
    HEURISTIC = "heuristic"


class PackLevel(str, Enum):
    DANGER = "danger"
    WARN = "warn"
    OK = "ok"


class DayAlert(str, Enum):
    DEBT = "DEBT"
    LOW_PACK = "LOW_PACK"
    EMPTY_PACK = "EMPTY_PACK"
