from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ...core.enums import ChargeEffect
from ...students.model import Student


class RefundStrategy(ABC):
    """Strategy Pattern: decide which balance an unmark gives the class back to."""

    @abstractmethod
    def decide_refund(self, *, student: Student, recorded: Optional[ChargeEffect]) -> ChargeEffect:
        raise NotImplementedError
