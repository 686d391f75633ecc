"""
Employee store — owns the in-memory Employee collection.

The store trusts its inputs: no validation, no uniqueness check on insert,
no cascade on delete. A removed manager leaves ``manager_id`` references
dangling; ``Workspace.remove_employee`` is where cascading is decided.
"""

import dataclasses
import logging
from typing import Any, Iterator

from ..models import Employee

logger = logging.getLogger(__name__)


class EmployeeStore:
    def __init__(self, employees: list[Employee] | None = None) -> None:
        self._employees: list[Employee] = list(employees or [])

    def __len__(self) -> int:
        return len(self._employees)

    def __iter__(self) -> Iterator[Employee]:
        return iter(list(self._employees))

    def all(self) -> list[Employee]:
        """Snapshot of the collection in insertion order."""
        return list(self._employees)

    def add(self, employee: Employee) -> None:
        self._employees.append(employee)

    def merge_update(self, id: str, **fields: Any) -> None:
        """Merge ``fields`` into the employee with ``id``; no-op if absent.

        ``total_package`` is not recomputed here. Callers changing salary or
        superannuation must pass a fresh ``total_package`` too.
        """
        for index, employee in enumerate(self._employees):
            if employee.id == id:
                self._employees[index] = dataclasses.replace(employee, **fields)
                return
        logger.debug("merge_update: no employee with id %s", id)

    def remove(self, id: str) -> None:
        self._employees = [emp for emp in self._employees if emp.id != id]

    def get_by_id(self, id: str) -> Employee | None:
        return next((emp for emp in self._employees if emp.id == id), None)

    def get_by_employee_code(self, employee_id: str) -> Employee | None:
        """Look up by the human-facing ``employee_id`` code (first match)."""
        return next(
            (emp for emp in self._employees if emp.employee_id == employee_id),
            None,
        )

    def get_by_manager(self, manager_id: str) -> list[Employee]:
        return [emp for emp in self._employees if emp.manager_id == manager_id]

    def get_by_department(self, department: str) -> list[Employee]:
        return [emp for emp in self._employees if emp.department == department]

    def departments(self) -> list[str]:
        """Distinct departments in first-seen order."""
        return list(dict.fromkeys(emp.department for emp in self._employees))
