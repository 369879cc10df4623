from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import ChargeEffect


@dataclass(frozen=True)
class AttendanceDay:
    """Read-model of one calendar date: who was present, in marking order."""

    date: str
    names: tuple[str, ...]
    effects: dict[str, Optional[ChargeEffect]] = field(default_factory=dict, compare=False)

    def effects_document(self) -> dict[str, str]:
        """Known effects only, as plain strings for storage."""
        return {n: e.value for n, e in self.effects.items() if e is not None}
