"""
Workspace — the data layer a view is handed at application start.

Owns one instance of each store plus the durable KPI entry cache, and is
the only place that looks across stores: the KPI entry submission flow,
read-only join queries, the employee-delete policy, and CSV import/export
against the currently loaded collections.
"""

import dataclasses
import logging
from datetime import date
from typing import Any

from . import codecs
from .models import KPI, Employee, KPIEntry, WeeklyEntry, new_id, utc_now_iso
from .stores import (
    EmployeeStore,
    EmployeeStoreProtocol,
    KPIEntryCache,
    KPIStore,
    KPIStoreProtocol,
    WeeklyEntryStore,
    WeeklyEntryStoreProtocol,
)

logger = logging.getLogger(__name__)


class CSVImportError(ValueError):
    """A CSV import failed as a whole; nothing was added."""


class Workspace:
    def __init__(
        self,
        employees: EmployeeStoreProtocol | None = None,
        kpis: KPIStoreProtocol | None = None,
        weekly_entries: WeeklyEntryStoreProtocol | None = None,
        kpi_cache: KPIEntryCache | None = None,
    ) -> None:
        self.employees = employees if employees is not None else EmployeeStore()
        self.kpis = kpis if kpis is not None else KPIStore()
        self.weekly_entries = weekly_entries if weekly_entries is not None else WeeklyEntryStore()
        self.kpi_cache = kpi_cache if kpi_cache is not None else KPIEntryCache()

    # ------------------------------------------------------------------
    # Write flows
    # ------------------------------------------------------------------

    def submit_kpi_entry(
        self,
        kpi_id: str,
        employee_id: str,
        value: float,
        week: str,
        notes: str | None = None,
    ) -> KPIEntry:
        """Record one KPI observation in both the KPI store and the cache."""
        self.kpi_cache.initialize()
        entry = KPIEntry(
            id=new_id(),
            kpi_id=kpi_id,
            employee_id=employee_id,
            value=value,
            week=week,
            notes=notes,
            created_at=utc_now_iso(),
        )
        self.kpis.add_entry(entry)
        self.kpi_cache.add_entry(entry)
        return entry

    def update_kpi(self, id: str, **fields: Any) -> None:
        """Merge ``fields`` into a KPI and refresh ``updated_at``."""
        fields.setdefault("updated_at", utc_now_iso())
        self.kpis.merge_update(id, **fields)

    def archive_kpi(self, id: str, end_date: str | None = None) -> None:
        """Soft-archive a KPI, closing it today unless ``end_date`` is given."""
        self.kpis.archive(id, end_date=end_date or date.today().isoformat())
        self.kpis.merge_update(id, updated_at=utc_now_iso())

    def update_weekly_entry(self, id: str, **fields: Any) -> WeeklyEntry | None:
        """Edit a weekly entry by replacing it with a copy carrying ``fields``."""
        existing = next((e for e in self.weekly_entries.all() if e.id == id), None)
        if existing is None:
            return None
        fields.setdefault("updated_at", utc_now_iso())
        updated = dataclasses.replace(existing, **fields)
        self.weekly_entries.replace(id, updated)
        return updated

    def remove_employee(self, id: str, cascade: bool = False) -> None:
        """Delete an employee.

        With ``cascade=False`` this is ``EmployeeStore.remove``: reports and
        KPI assignments keep pointing at the removed id. With
        ``cascade=True`` the employee's direct reports lose their
        ``manager_id`` and the id is pulled from every KPI assignment.
        Entries are history and are never touched.
        """
        self.employees.remove(id)
        if not cascade:
            return

        reports = self.employees.get_by_manager(id)
        for report in reports:
            self.employees.merge_update(report.id, manager_id=None)

        touched = 0
        for kpi in self.kpis.get_by_employee(id):
            assigned = [emp_id for emp_id in kpi.assigned_employees if emp_id != id]
            self.update_kpi(kpi.id, assigned_employees=assigned)
            touched += 1

        logger.info(
            "Removed employee %s: cleared manager on %d reports, unassigned from %d KPIs",
            id,
            len(reports),
            touched,
        )

    # ------------------------------------------------------------------
    # Cross-store queries
    # ------------------------------------------------------------------

    def manager_of(self, employee_id: str) -> Employee | None:
        employee = self.employees.get_by_id(employee_id)
        if employee is None or employee.manager_id is None:
            return None
        return self.employees.get_by_id(employee.manager_id)

    def team_of(self, manager_id: str) -> list[Employee]:
        """All employees below ``manager_id``, breadth first.

        Manager cycles are not prevented elsewhere, so visited ids are
        tracked.
        """
        team: list[Employee] = []
        seen = {manager_id}
        queue = [manager_id]
        while queue:
            current = queue.pop(0)
            for report in self.employees.get_by_manager(current):
                if report.id in seen:
                    continue
                seen.add(report.id)
                team.append(report)
                queue.append(report.id)
        return team

    def employees_for_kpi(self, kpi_id: str) -> list[Employee]:
        """Assigned employees of a KPI that still exist."""
        kpi = self.kpis.get_by_id(kpi_id)
        if kpi is None:
            return []
        found = (self.employees.get_by_id(emp_id) for emp_id in kpi.assigned_employees)
        return [emp for emp in found if emp is not None]

    def kpis_for_employee(self, employee_id: str, active_only: bool = False) -> list[KPI]:
        kpis = self.kpis.get_by_employee(employee_id)
        if active_only:
            kpis = [kpi for kpi in kpis if kpi.is_active]
        return kpis

    def dangling_references(self) -> dict[str, list[tuple[str, str]]]:
        """Weak references whose target no longer exists.

        Returns ``{"managers": [(employee_id, manager_id)], "assignments":
        [(kpi_id, employee_id)]}``.
        """
        known = {emp.id for emp in self.employees.all()}
        managers = [
            (emp.id, emp.manager_id)
            for emp in self.employees.all()
            if emp.manager_id is not None and emp.manager_id not in known
        ]
        assignments = [
            (kpi.id, emp_id)
            for kpi in self.kpis.all()
            for emp_id in kpi.assigned_employees
            if emp_id not in known
        ]
        return {"managers": managers, "assignments": assignments}

    # ------------------------------------------------------------------
    # CSV import / export
    # ------------------------------------------------------------------

    def export_employees_csv(self) -> str:
        return codecs.export_employees_csv(self.employees.all())

    def export_kpis_csv(self) -> str:
        return codecs.export_kpis_csv(self.kpis.all(), self.employees.all())

    def export_weekly_entries_csv(self) -> str:
        return codecs.export_weekly_entries_csv(
            self.weekly_entries.all(), self.kpis.all(), self.employees.all()
        )

    def import_employees_csv(self, text: str, link_managers_in_file: bool = False) -> list[Employee]:
        """Parse and add employees; managers resolve against those loaded.

        A manager listed in the same file is not loaded yet when its
        reports are parsed. With ``link_managers_in_file=True`` the file is
        resolved a second time after the rows are added, filling in any
        ``manager_id`` that is still unset.
        """
        try:
            employees = codecs.parse_employees_csv(text, self.employees.all())
        except Exception as exc:
            logger.exception("Employee CSV import failed")
            raise CSVImportError("Employee import failed") from exc
        for employee in employees:
            self.employees.add(employee)

        if not link_managers_in_file:
            return employees

        # Same text, same row order: rows pair up one to one
        relinked = codecs.parse_employees_csv(text, self.employees.all())
        for employee, linked in zip(employees, relinked):
            if employee.manager_id is None and linked.manager_id is not None:
                self.employees.merge_update(employee.id, manager_id=linked.manager_id)
        return [self.employees.get_by_id(employee.id) for employee in employees]

    def import_kpis_csv(self, text: str) -> list[KPI]:
        try:
            kpis = codecs.parse_kpis_csv(text, self.employees.all())
        except Exception as exc:
            logger.exception("KPI CSV import failed")
            raise CSVImportError("KPI import failed") from exc
        for kpi in kpis:
            self.kpis.add(kpi)
        return kpis

    def import_weekly_entries_csv(self, text: str) -> list[WeeklyEntry]:
        try:
            entries = codecs.parse_weekly_entries_csv(
                text, self.kpis.all(), self.employees.all()
            )
        except Exception as exc:
            logger.exception("Weekly entry CSV import failed")
            raise CSVImportError("Weekly entry import failed") from exc
        for entry in entries:
            self.weekly_entries.add(entry)
        return entries
