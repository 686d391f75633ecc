"""
Data transforms: flatten store contents into long fact tables and an
employee dimension for reporting.

Weekly entries carry KPI values in a nested list; ``build_fact_weekly_kpi_values``
melts them into one row per (entry, KPI). Standalone KPI entries are kept in
their own table — the two sources are never merged.
"""

import logging
from typing import Iterable

import pandas as pd

from .models import KPI, Employee, KPIEntry, WeeklyEntry, week_start

logger = logging.getLogger(__name__)


def to_week_start(week: str) -> pd.Timestamp:
    """Monday of ``week`` as a Timestamp; NaT for malformed week strings."""
    try:
        return pd.Timestamp(week_start(week))
    except (ValueError, AttributeError):
        logger.warning("Could not parse week value: %s", week)
        return pd.NaT


def build_dim_employee(employees: Iterable[Employee]) -> pd.DataFrame:
    """Employee dimension table.

    Returns
    -------
    DataFrame with columns:
        employee_id, employee_code, name, department, status, manager_id,
        salary, total_package
    """
    columns = [
        "employee_id", "employee_code", "name", "department", "status",
        "manager_id", "salary", "total_package",
    ]
    rows = [
        {
            "employee_id": emp.id,
            "employee_code": emp.employee_id,
            "name": emp.name,
            "department": emp.department,
            "status": emp.status,
            "manager_id": emp.manager_id,
            "salary": emp.salary,
            "total_package": emp.total_package,
        }
        for emp in employees
    ]
    dim = pd.DataFrame(rows, columns=columns)
    logger.info("Built dim_employee with %d rows", len(dim))
    return dim


def build_fact_weekly_entries(
    weekly_entries: Iterable[WeeklyEntry],
    employees: Iterable[Employee],
) -> pd.DataFrame:
    """One row per weekly entry, joined to its employee.

    Entries whose employee is unknown keep NaN employee attributes.

    Returns
    -------
    DataFrame with columns:
        entry_id, employee_id, name, department, manager_id, week,
        week_start, performance_rating, capacity_percentage
    """
    columns = [
        "entry_id", "employee_id", "name", "department", "manager_id",
        "week", "week_start", "performance_rating", "capacity_percentage",
    ]
    rows = [
        {
            "entry_id": entry.id,
            "employee_id": entry.employee_id,
            "week": entry.week,
            "week_start": to_week_start(entry.week),
            "performance_rating": entry.performance_rating,
            "capacity_percentage": entry.capacity_percentage,
        }
        for entry in weekly_entries
    ]
    fact = pd.DataFrame(
        rows,
        columns=["entry_id", "employee_id", "week", "week_start",
                 "performance_rating", "capacity_percentage"],
    )

    dim = build_dim_employee(employees)[["employee_id", "name", "department", "manager_id"]]
    fact = fact.merge(dim, on="employee_id", how="left")[columns]

    logger.info("Built fact_weekly_entries with %d rows", len(fact))
    return fact


def build_fact_weekly_kpi_values(
    weekly_entries: Iterable[WeeklyEntry],
    kpis: Iterable[KPI],
) -> pd.DataFrame:
    """Melt each weekly entry's KPI values into a long table.

    Values for KPIs that are no longer defined are dropped.

    Returns
    -------
    DataFrame with columns:
        entry_id, employee_id, week, week_start, kpi_id, kpi_name, value
    """
    names = {kpi.id: kpi.name for kpi in kpis}
    rows = []
    for entry in weekly_entries:
        for kpi_value in entry.kpi_entries:
            if kpi_value.kpi_id not in names:
                continue
            rows.append({
                "entry_id": entry.id,
                "employee_id": entry.employee_id,
                "week": entry.week,
                "week_start": to_week_start(entry.week),
                "kpi_id": kpi_value.kpi_id,
                "kpi_name": names[kpi_value.kpi_id],
                "value": kpi_value.value,
            })

    fact = pd.DataFrame(
        rows,
        columns=["entry_id", "employee_id", "week", "week_start", "kpi_id", "kpi_name", "value"],
    )
    logger.info("Built fact_weekly_kpi_values with %d rows", len(fact))
    return fact


def build_fact_kpi_entries(
    kpi_entries: Iterable[KPIEntry],
    kpis: Iterable[KPI],
) -> pd.DataFrame:
    """Standalone KPI entries joined to their KPI definition.

    Entries for unknown KPIs are dropped.

    Returns
    -------
    DataFrame with columns:
        entry_id, kpi_id, kpi_name, unit, preferred_trend, target_value,
        employee_id, week, week_start, value
    """
    by_id = {kpi.id: kpi for kpi in kpis}
    rows = []
    for entry in kpi_entries:
        kpi = by_id.get(entry.kpi_id)
        if kpi is None:
            continue
        rows.append({
            "entry_id": entry.id,
            "kpi_id": kpi.id,
            "kpi_name": kpi.name,
            "unit": kpi.unit,
            "preferred_trend": kpi.preferred_trend,
            "target_value": kpi.target_value,
            "employee_id": entry.employee_id,
            "week": entry.week,
            "week_start": to_week_start(entry.week),
            "value": entry.value,
        })

    fact = pd.DataFrame(
        rows,
        columns=[
            "entry_id", "kpi_id", "kpi_name", "unit", "preferred_trend",
            "target_value", "employee_id", "week", "week_start", "value",
        ],
    )
    logger.info("Built fact_kpi_entries with %d rows", len(fact))
    return fact
