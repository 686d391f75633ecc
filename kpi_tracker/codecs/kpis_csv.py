"""
KPI CSV codec.

Assigned employees are written as a ``;``-joined list of employee codes in a
single quoted cell. Codes that do not match a loaded employee are dropped on
import, as are internal ids with no matching employee on export.
"""

import logging
from typing import Iterable

import pandas as pd

from ..config import (
    KPI_CSV_HEADERS,
    KPI_STATUSES,
    KPI_UNITS,
    LIST_DELIMITER,
    PREFERRED_TRENDS,
    TIME_PERIODS,
)
from ..models import KPI, Employee, new_id, utc_now_iso
from .utils import (
    cell,
    optional_text,
    parse_float,
    read_csv_text,
    split_list,
    warn_if_unexpected,
    write_csv_text,
)

logger = logging.getLogger(__name__)


def export_kpis_csv(kpis: Iterable[KPI], employees: Iterable[Employee]) -> str:
    codes_by_id = {emp.id: emp.employee_id for emp in employees}

    rows = []
    for kpi in kpis:
        codes = [codes_by_id[emp_id] for emp_id in kpi.assigned_employees if emp_id in codes_by_id]
        rows.append({
            "Name": kpi.name,
            "Description": kpi.description,
            "Target Value": float(kpi.target_value),
            "Unit": kpi.unit,
            "Preferred Trend": kpi.preferred_trend,
            "Time Period": kpi.time_period,
            "Status": kpi.status,
            "Start Date": kpi.start_date,
            "End Date": kpi.end_date or "",
            "Assigned Employee IDs": LIST_DELIMITER.join(codes),
        })

    frame = pd.DataFrame(rows, columns=KPI_CSV_HEADERS)
    logger.info("Exported %d KPIs to CSV", len(frame))
    return write_csv_text(frame)


def parse_kpis_csv(text: str, employees: Iterable[Employee]) -> list[KPI]:
    """Build new KPI records from CSV text.

    ``created_at`` and ``updated_at`` are both stamped with the import time.
    """
    ids_by_code = {}
    for emp in employees:
        ids_by_code.setdefault(emp.employee_id, emp.id)

    now = utc_now_iso()
    frame = read_csv_text(text)
    kpis = []
    for row in frame.to_dict("records"):
        name = cell(row, "Name")

        assigned = []
        for code in split_list(cell(row, "Assigned Employee IDs"), LIST_DELIMITER):
            if code in ids_by_code:
                assigned.append(ids_by_code[code])
            else:
                logger.warning("Dropping unknown employee '%s' from KPI '%s'", code, name)

        kpis.append(KPI(
            id=new_id(),
            name=name,
            description=cell(row, "Description"),
            target_value=parse_float(cell(row, "Target Value")),
            unit=warn_if_unexpected(cell(row, "Unit"), KPI_UNITS, "unit", name),
            preferred_trend=warn_if_unexpected(
                cell(row, "Preferred Trend"), PREFERRED_TRENDS, "preferred trend", name
            ),
            time_period=warn_if_unexpected(
                cell(row, "Time Period"), TIME_PERIODS, "time period", name
            ),
            status=warn_if_unexpected(cell(row, "Status"), KPI_STATUSES, "status", name),
            start_date=cell(row, "Start Date"),
            end_date=optional_text(cell(row, "End Date")),
            assigned_employees=assigned,
            created_at=now,
            updated_at=now,
        ))

    logger.info("Parsed %d KPIs from CSV", len(kpis))
    return kpis
