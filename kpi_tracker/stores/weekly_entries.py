"""Weekly entry store — one self-report per employee per week by convention."""

import logging
from typing import Iterator

from ..models import WeeklyEntry

logger = logging.getLogger(__name__)


class WeeklyEntryStore:
    def __init__(self, entries: list[WeeklyEntry] | None = None) -> None:
        self._entries: list[WeeklyEntry] = list(entries or [])

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[WeeklyEntry]:
        return iter(list(self._entries))

    def all(self) -> list[WeeklyEntry]:
        return list(self._entries)

    def add(self, entry: WeeklyEntry) -> None:
        # Duplicate (employee_id, week) pairs are allowed
        self._entries.append(entry)

    def replace(self, id: str, entry: WeeklyEntry) -> None:
        """Swap the whole record with ``id`` for ``entry``; no-op if absent.

        This is not a merge. Build ``entry`` from the old record, e.g. with
        ``dataclasses.replace(old, performance_rating=4, updated_at=now)``.
        """
        for index, existing in enumerate(self._entries):
            if existing.id == id:
                self._entries[index] = entry
                return
        logger.debug("replace: no weekly entry with id %s", id)

    def get_by_employee(self, employee_id: str) -> list[WeeklyEntry]:
        return [entry for entry in self._entries if entry.employee_id == employee_id]

    def get_by_week(self, employee_id: str, week: str) -> WeeklyEntry | None:
        """First entry for ``employee_id`` in ``week``, or None."""
        return next(
            (
                entry
                for entry in self._entries
                if entry.employee_id == employee_id and entry.week == week
            ),
            None,
        )

    def get_all_by_week(self, week: str) -> list[WeeklyEntry]:
        return [entry for entry in self._entries if entry.week == week]
