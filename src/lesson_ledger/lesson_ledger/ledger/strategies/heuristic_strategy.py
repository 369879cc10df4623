from __future__ import annotations

from typing import Optional

from ...core.enums import ChargeEffect
from ...students.model import Student
from .base import RefundStrategy


class HeuristicRefundStrategy(RefundStrategy):
    """Drain debt first, otherwise credit the pack.

    Ignores what the mark actually charged, so a recharge or debt payment
    between mark and unmark can credit the wrong balance.
    """

    def decide_refund(self, *, student: Student, recorded: Optional[ChargeEffect]) -> ChargeEffect:
        if student.debt > 0:
            return ChargeEffect.DEBT
        return ChargeEffect.PACK
