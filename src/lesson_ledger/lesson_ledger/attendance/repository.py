from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence


class AttendanceRepository(Protocol):
    """Date-keyed attendance documents (one document per day).

    Writes replace the whole document for a date (last write wins).
    """

    def list_all(self) -> Mapping[str, Sequence[str]]:
        raise NotImplementedError

    def list_effects(self) -> Mapping[str, Mapping[str, str]]:
        """Per date, the charge effect ("pack"/"debt") recorded for each name.

        Stores that never recorded effects return an empty mapping.
        """

        raise NotImplementedError

    def set(self, date: str, names: Sequence[str], effects: Optional[Mapping[str, str]] = None) -> None:
        raise NotImplementedError

    def delete(self, date: str) -> None:
        raise NotImplementedError
