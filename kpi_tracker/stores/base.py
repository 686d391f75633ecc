"""
Store interfaces.

Consumers (the workspace, views, reports) depend on these protocols rather
than on the in-memory classes, so a store can be backed by a remote API or
another persistence layer without touching its callers.
"""

from typing import Any, Protocol, runtime_checkable

from ..models import KPI, Employee, KPIEntry, WeeklyEntry


@runtime_checkable
class EmployeeStoreProtocol(Protocol):
    def add(self, employee: Employee) -> None: ...

    def merge_update(self, id: str, **fields: Any) -> None: ...

    def remove(self, id: str) -> None: ...

    def get_by_id(self, id: str) -> Employee | None: ...

    def get_by_employee_code(self, employee_id: str) -> Employee | None: ...

    def get_by_manager(self, manager_id: str) -> list[Employee]: ...

    def get_by_department(self, department: str) -> list[Employee]: ...

    def departments(self) -> list[str]: ...

    def all(self) -> list[Employee]: ...


@runtime_checkable
class KPIStoreProtocol(Protocol):
    def add(self, kpi: KPI) -> None: ...

    def merge_update(self, id: str, **fields: Any) -> None: ...

    def archive(self, id: str, end_date: str | None = None) -> None: ...

    def add_entry(self, entry: KPIEntry) -> None: ...

    def get_by_id(self, id: str) -> KPI | None: ...

    def get_by_name(self, name: str) -> KPI | None: ...

    def get_by_employee(self, employee_id: str) -> list[KPI]: ...

    def get_entries_by_kpi(self, kpi_id: str) -> list[KPIEntry]: ...

    def get_entries_by_employee(self, employee_id: str) -> list[KPIEntry]: ...

    def entries(self) -> list[KPIEntry]: ...

    def active(self) -> list[KPI]: ...

    def all(self) -> list[KPI]: ...


@runtime_checkable
class WeeklyEntryStoreProtocol(Protocol):
    def add(self, entry: WeeklyEntry) -> None: ...

    def replace(self, id: str, entry: WeeklyEntry) -> None: ...

    def get_by_employee(self, employee_id: str) -> list[WeeklyEntry]: ...

    def get_by_week(self, employee_id: str, week: str) -> WeeklyEntry | None: ...

    def get_all_by_week(self, week: str) -> list[WeeklyEntry]: ...

    def all(self) -> list[WeeklyEntry]: ...
