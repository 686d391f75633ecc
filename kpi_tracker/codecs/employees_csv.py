"""
Employee CSV codec.

Managers are written as the manager's own ``Employee ID`` code because the
internal id is not portable between datasets. On import the code is looked
up in the employees already loaded; a code that cannot be resolved leaves
``manager_id`` as None.
"""

import logging
from typing import Iterable

import pandas as pd

from ..config import EMPLOYEE_CSV_HEADERS, EMPLOYEE_STATUSES
from ..models import Employee, Superannuation, compute_total_package, new_id
from .utils import (
    cell,
    optional_text,
    parse_float,
    read_csv_text,
    warn_if_unexpected,
    write_csv_text,
)

logger = logging.getLogger(__name__)


def export_employees_csv(employees: Iterable[Employee]) -> str:
    """Serialise ``employees`` to CSV text with the standard header."""
    employees = list(employees)
    codes_by_id = {emp.id: emp.employee_id for emp in employees}

    rows = []
    for employee in employees:
        rows.append({
            "Name": employee.name,
            "Employee ID": employee.employee_id,
            "Department": employee.department,
            "Status": employee.status,
            "Start Date": employee.start_date,
            "End Date": employee.end_date or "",
            "Salary": float(employee.salary),
            "Superannuation Rate": float(employee.superannuation.contribution),
            "Bonus Potential": float(employee.bonus_potential),
            "Manager Employee ID": codes_by_id.get(employee.manager_id, ""),
        })

    frame = pd.DataFrame(rows, columns=EMPLOYEE_CSV_HEADERS)
    logger.info("Exported %d employees to CSV", len(frame))
    return write_csv_text(frame)


def parse_employees_csv(
    text: str,
    existing_employees: Iterable[Employee] = (),
) -> list[Employee]:
    """Build new Employee records from CSV text.

    Every row gets a fresh id and an empty ``kpis`` list. ``total_package``
    is recomputed from salary and superannuation rate. Malformed numbers
    become NaN and are passed through.
    """
    ids_by_code = {}
    for emp in existing_employees:
        ids_by_code.setdefault(emp.employee_id, emp.id)

    frame = read_csv_text(text)
    employees = []
    for row in frame.to_dict("records"):
        salary = parse_float(cell(row, "Salary"))
        super_rate = parse_float(cell(row, "Superannuation Rate"))

        code = cell(row, "Employee ID")
        status = warn_if_unexpected(cell(row, "Status"), EMPLOYEE_STATUSES, "status", code)

        manager_code = cell(row, "Manager Employee ID")
        manager_id = ids_by_code.get(manager_code) if manager_code else None
        if manager_code and manager_id is None:
            logger.warning(
                "Manager '%s' for employee '%s' is not loaded; leaving it unset",
                manager_code,
                code,
            )

        employees.append(Employee(
            id=new_id(),
            employee_id=code,
            name=cell(row, "Name"),
            department=cell(row, "Department"),
            status=status,
            start_date=cell(row, "Start Date"),
            end_date=optional_text(cell(row, "End Date")),
            salary=salary,
            superannuation=Superannuation(contribution=super_rate),
            bonus_potential=parse_float(cell(row, "Bonus Potential")),
            total_package=compute_total_package(salary, super_rate),
            manager_id=manager_id,
            kpis=[],
        ))

    logger.info("Parsed %d employees from CSV", len(employees))
    return employees
