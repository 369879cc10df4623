from __future__ import annotations

import logging
from typing import Optional

from ...core.enums import ChargeEffect
from ...students.model import Student
from .base import RefundStrategy
from .heuristic_strategy import HeuristicRefundStrategy

logger = logging.getLogger(__name__)


class ExactRefundStrategy(RefundStrategy):
    """Undo exactly what the mark charged.

    A mark that created debt which has since been paid is credited to the pack
    instead. Marks without a recorded effect fall back to the heuristic.
    """

    def __init__(self, fallback: Optional[RefundStrategy] = None):
        self._fallback = fallback or HeuristicRefundStrategy()

    def decide_refund(self, *, student: Student, recorded: Optional[ChargeEffect]) -> ChargeEffect:
        if recorded is None:
            logger.warning("No recorded charge for a mark of %r; refunding heuristically", student.name)
            return self._fallback.decide_refund(student=student, recorded=None)
        if recorded == ChargeEffect.DEBT and student.debt > 0:
            return ChargeEffect.DEBT
        return ChargeEffect.PACK
