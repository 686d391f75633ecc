"""
Weekly entry CSV codec (generic variant).

The fixed columns are followed by one ``KPI: <name>`` column per known KPI;
a cell holds that KPI's reported value or is left empty. On import the
column names are matched against the KPIs currently loaded and unknown
columns are ignored.
"""

import logging
from typing import Iterable

import numpy as np
import pandas as pd

from ..config import (
    CAPACITY_RANGE,
    KPI_COLUMN_PREFIX,
    PERFORMANCE_RATING_RANGE,
    WEEKLY_ENTRY_CSV_HEADERS,
)
from ..models import KPI, Employee, KPIValue, WeeklyEntry, new_id, utc_now_iso
from .utils import (
    cell,
    optional_text,
    parse_float,
    parse_int,
    read_csv_text,
    warn_if_out_of_range,
    write_csv_text,
)

logger = logging.getLogger(__name__)


def kpi_column(kpi: KPI) -> str:
    return f"{KPI_COLUMN_PREFIX}{kpi.name}"


def export_weekly_entries_csv(
    entries: Iterable[WeeklyEntry],
    kpis: Iterable[KPI],
    employees: Iterable[Employee],
) -> str:
    """Serialise weekly entries, one trailing column per KPI in ``kpis``.

    ``Employee ID`` carries the employee's code; entries whose employee is
    not in ``employees`` get an empty cell.
    """
    kpis = list(kpis)
    codes_by_id = {emp.id: emp.employee_id for emp in employees}
    columns = WEEKLY_ENTRY_CSV_HEADERS + [kpi_column(kpi) for kpi in kpis]

    rows = []
    for entry in entries:
        record = {
            "Week": entry.week,
            "Employee ID": codes_by_id.get(entry.employee_id, ""),
            "Performance Rating": entry.performance_rating,
            "Rating Justification": entry.rating_justification,
            "Capacity %": entry.capacity_percentage,
            "Capacity Factors": entry.capacity_factors or "",
            "Weekly Reflection": entry.weekly_reflection or "",
            "Support Needed": entry.support_needed or "",
        }
        for kpi in kpis:
            value = entry.value_for(kpi.id)
            record[kpi_column(kpi)] = np.nan if value is None else float(value)
        rows.append(record)

    frame = pd.DataFrame(rows, columns=columns)
    logger.info("Exported %d weekly entries with %d KPI columns", len(frame), len(kpis))
    return write_csv_text(frame)


def parse_weekly_entries_csv(
    text: str,
    kpis: Iterable[KPI],
    employees: Iterable[Employee],
) -> list[WeeklyEntry]:
    """Build new WeeklyEntry records from CSV text.

    Empty KPI cells are left out of ``kpi_entries``. An employee code that
    is not loaded leaves ``employee_id`` as None.
    """
    kpis_by_name = {}
    for kpi in kpis:
        kpis_by_name.setdefault(kpi.name, kpi)
    ids_by_code = {}
    for emp in employees:
        ids_by_code.setdefault(emp.employee_id, emp.id)

    frame = read_csv_text(text)

    kpi_columns: dict[str, str] = {}
    for column in frame.columns:
        if not column.startswith(KPI_COLUMN_PREFIX):
            continue
        name = column[len(KPI_COLUMN_PREFIX):]
        if name in kpis_by_name:
            kpi_columns[column] = kpis_by_name[name].id
        else:
            logger.warning("Ignoring column for unknown KPI '%s'", name)

    now = utc_now_iso()
    entries = []
    for row in frame.to_dict("records"):
        code = cell(row, "Employee ID")
        employee_id = ids_by_code.get(code)
        if employee_id is None:
            logger.warning("Weekly entry employee '%s' is not loaded; leaving it unset", code)

        kpi_values = [
            KPIValue(kpi_id=kpi_id, value=parse_float(cell(row, column)))
            for column, kpi_id in kpi_columns.items()
            if cell(row, column).strip()
        ]

        entries.append(WeeklyEntry(
            id=new_id(),
            employee_id=employee_id,
            week=cell(row, "Week"),
            kpi_entries=kpi_values,
            performance_rating=warn_if_out_of_range(
                parse_int(cell(row, "Performance Rating")),
                PERFORMANCE_RATING_RANGE,
                "Performance rating",
                code,
            ),
            rating_justification=cell(row, "Rating Justification"),
            capacity_percentage=warn_if_out_of_range(
                parse_int(cell(row, "Capacity %")), CAPACITY_RANGE, "Capacity", code
            ),
            capacity_factors=optional_text(cell(row, "Capacity Factors")),
            weekly_reflection=optional_text(cell(row, "Weekly Reflection")),
            support_needed=optional_text(cell(row, "Support Needed")),
            created_at=now,
        ))

    logger.info("Parsed %d weekly entries from CSV", len(entries))
    return entries
