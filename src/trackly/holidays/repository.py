from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence


class HolidayRepository(Protocol):
    def list_between(self, *, start: date, end: date) -> Sequence[date]:
        raise NotImplementedError

    def add(self, day: date) -> bool:
        """Insert the day if missing; returns False when it already existed."""

        raise NotImplementedError

    def remove(self, day: date) -> bool:
        raise NotImplementedError
