"""
KPI store — owns KPI definitions plus an append-only list of KPI entries.

The entry list here lives only in memory. The durable copy of the same
submissions is ``KPIEntryCache``; the two are written side by side by
``Workspace.submit_kpi_entry`` and never reconciled.

Status model: active -> inactive via ``archive``. Re-activation is possible
through ``merge_update(id, status="active")`` but nothing calls it.
"""

import dataclasses
import logging
from typing import Any, Iterator

from ..models import KPI, KPIEntry

logger = logging.getLogger(__name__)


class KPIStore:
    def __init__(
        self,
        kpis: list[KPI] | None = None,
        entries: list[KPIEntry] | None = None,
    ) -> None:
        self._kpis: list[KPI] = list(kpis or [])
        self._entries: list[KPIEntry] = list(entries or [])

    def __len__(self) -> int:
        return len(self._kpis)

    def __iter__(self) -> Iterator[KPI]:
        return iter(list(self._kpis))

    def all(self) -> list[KPI]:
        return list(self._kpis)

    def active(self) -> list[KPI]:
        return [kpi for kpi in self._kpis if kpi.is_active]

    def entries(self) -> list[KPIEntry]:
        return list(self._entries)

    def add(self, kpi: KPI) -> None:
        self._kpis.append(kpi)

    def merge_update(self, id: str, **fields: Any) -> None:
        """Merge ``fields`` into the KPI with ``id``; no-op if absent."""
        for index, kpi in enumerate(self._kpis):
            if kpi.id == id:
                self._kpis[index] = dataclasses.replace(kpi, **fields)
                return
        logger.debug("merge_update: no KPI with id %s", id)

    def archive(self, id: str, end_date: str | None = None) -> None:
        """Soft-archive: flip ``status`` to inactive.

        ``end_date`` is only written when supplied; callers archiving from a
        form are expected to pass it.
        """
        fields: dict[str, Any] = {"status": "inactive"}
        if end_date is not None:
            fields["end_date"] = end_date
        self.merge_update(id, **fields)

    def add_entry(self, entry: KPIEntry) -> None:
        self._entries.append(entry)

    def get_by_id(self, id: str) -> KPI | None:
        return next((kpi for kpi in self._kpis if kpi.id == id), None)

    def get_by_name(self, name: str) -> KPI | None:
        return next((kpi for kpi in self._kpis if kpi.name == name), None)

    def get_by_employee(self, employee_id: str) -> list[KPI]:
        """KPIs whose assignment list contains ``employee_id``."""
        return [kpi for kpi in self._kpis if employee_id in kpi.assigned_employees]

    def get_entries_by_kpi(self, kpi_id: str) -> list[KPIEntry]:
        return [entry for entry in self._entries if entry.kpi_id == kpi_id]

    def get_entries_by_employee(self, employee_id: str) -> list[KPIEntry]:
        return [entry for entry in self._entries if entry.employee_id == employee_id]
