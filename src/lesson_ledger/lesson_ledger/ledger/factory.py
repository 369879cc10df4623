from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..core.enums import UnmarkPolicy
from ..core.exceptions import ValidationError
from .strategies.base import RefundStrategy
from .strategies.exact_strategy import ExactRefundStrategy
from .strategies.heuristic_strategy import HeuristicRefundStrategy


@dataclass
class RefundStrategyFactory:
    """Factory Pattern: choose the refund strategy from the configured policy."""

    def for_policy(self, policy: Union[UnmarkPolicy, str]) -> RefundStrategy:
        try:
            policy = UnmarkPolicy(str(getattr(policy, "value", policy)).lower())
        except ValueError:
            raise ValidationError(f"Unknown unmark policy: {policy!r}") from None

        if policy == UnmarkPolicy.HEURISTIC:
            return HeuristicRefundStrategy()
        return ExactRefundStrategy()
