"""
Dashboard-ready output functions.

These are the entry points for a reports page. Each takes a ``Workspace``
and returns plain dicts or DataFrames suitable for cards, charts and
tables. Filters mirror the reports page: department, manager, and an
inclusive week range (``YYYY-Www`` strings).
"""

import logging
from pathlib import Path

import pandas as pd

from .performance import rating_band, summarise_kpi_attainment
from .transforms import (
    build_fact_kpi_entries,
    build_fact_weekly_entries,
    build_fact_weekly_kpi_values,
)
from .workspace import Workspace

logger = logging.getLogger(__name__)


def _filter_weeks(df: pd.DataFrame, start_week: str | None, end_week: str | None) -> pd.DataFrame:
    # ISO week strings are zero-padded, so string order is calendar order
    if start_week:
        df = df[df["week"] >= start_week]
    if end_week:
        df = df[df["week"] <= end_week]
    return df


def _filtered_weekly_entries(
    workspace: Workspace,
    department: str | None = None,
    manager_id: str | None = None,
    start_week: str | None = None,
    end_week: str | None = None,
) -> pd.DataFrame:
    fact = build_fact_weekly_entries(workspace.weekly_entries.all(), workspace.employees.all())
    # Entries for unknown employees cannot be attributed to a team
    fact = fact[fact["name"].notna()]
    if department:
        fact = fact[fact["department"] == department]
    if manager_id:
        fact = fact[fact["manager_id"] == manager_id]
    return _filter_weeks(fact, start_week, end_week)


def _mean(series: pd.Series) -> float:
    return float(series.mean()) if len(series) else 0.0


def get_performance_summary(
    workspace: Workspace,
    department: str | None = None,
    manager_id: str | None = None,
    start_week: str | None = None,
    end_week: str | None = None,
) -> dict:
    """Headline figures for the top-level dashboard cards.

    Returns
    -------
    Dict with structure:
    {
        "avg_rating": 3.8,        # one decimal, 0.0 when no entries
        "avg_capacity": 82,       # whole percent
        "active_employees": 12,
        "total_entries": 40,
    }
    """
    entries = _filtered_weekly_entries(workspace, department, manager_id, start_week, end_week)
    active = [emp for emp in workspace.employees.all() if emp.status == "active"]

    return {
        "avg_rating": round(_mean(entries["performance_rating"]), 1),
        "avg_capacity": int(round(_mean(entries["capacity_percentage"]))),
        "active_employees": len(active),
        "total_entries": len(entries),
    }


def get_department_overview(
    workspace: Workspace,
    start_week: str | None = None,
    end_week: str | None = None,
) -> pd.DataFrame:
    """One row per department.

    Returns
    -------
    DataFrame with columns:
        department, employee_count, avg_rating, avg_capacity,
        entries_count, rating_band
    """
    columns = [
        "department", "employee_count", "avg_rating", "avg_capacity",
        "entries_count", "rating_band",
    ]
    entries = _filtered_weekly_entries(workspace, start_week=start_week, end_week=end_week)

    rows = []
    for department in workspace.employees.departments():
        headcount = len(workspace.employees.get_by_department(department))
        dept_entries = entries[entries["department"] == department]
        avg_rating = round(_mean(dept_entries["performance_rating"]), 1)
        rows.append({
            "department": department,
            "employee_count": headcount,
            "avg_rating": avg_rating,
            "avg_capacity": int(round(_mean(dept_entries["capacity_percentage"]))),
            "entries_count": len(dept_entries),
            "rating_band": rating_band(avg_rating),
        })

    return pd.DataFrame(rows, columns=columns)


def get_team_performance(
    workspace: Workspace,
    department: str | None = None,
    manager_id: str | None = None,
    start_week: str | None = None,
    end_week: str | None = None,
) -> pd.DataFrame:
    """Average rating and capacity per employee, for a bar chart.

    Returns
    -------
    DataFrame with columns:
        employee_id, name, rating, capacity, entries
    """
    entries = _filter_weeks(
        build_fact_weekly_entries(workspace.weekly_entries.all(), workspace.employees.all()),
        start_week,
        end_week,
    )

    rows = []
    for employee in workspace.employees.all():
        if department and employee.department != department:
            continue
        if manager_id and employee.manager_id != manager_id:
            continue
        own = entries[entries["employee_id"] == employee.id]
        rows.append({
            "employee_id": employee.id,
            "name": employee.name,
            "rating": round(_mean(own["performance_rating"]), 1),
            "capacity": int(round(_mean(own["capacity_percentage"]))),
            "entries": len(own),
        })

    return pd.DataFrame(rows, columns=["employee_id", "name", "rating", "capacity", "entries"])


def get_kpi_trends(
    workspace: Workspace,
    start_week: str | None = None,
    end_week: str | None = None,
) -> pd.DataFrame:
    """Average weekly-entry value per KPI per week, for a line chart.

    Returns
    -------
    Wide DataFrame: week, week_start, then one column per KPI name. Weeks
    where a KPI has no values hold NaN.
    """
    long = _filter_weeks(
        build_fact_weekly_kpi_values(workspace.weekly_entries.all(), workspace.kpis.all()),
        start_week,
        end_week,
    )
    if long.empty:
        return pd.DataFrame(columns=["week", "week_start"])

    wide = long.pivot_table(
        index=["week", "week_start"],
        columns="kpi_name",
        values="value",
        aggfunc="mean",
    ).reset_index()
    wide.columns.name = None
    return wide.sort_values("week").reset_index(drop=True)


def get_kpi_attainment(workspace: Workspace, source: str = "store") -> pd.DataFrame:
    """Per-KPI, per-week attainment against target with RAG status.

    Parameters
    ----------
    source : "store" reads the KPI store's in-memory entries, "cache" the
             durable KPI entry cache.
    """
    if source == "cache":
        entries = workspace.kpi_cache.entries
    elif source == "store":
        entries = workspace.kpis.entries()
    else:
        raise ValueError(f"Unknown KPI entry source: {source!r}")

    return summarise_kpi_attainment(build_fact_kpi_entries(entries, workspace.kpis.all()))


def get_available_weeks(workspace: Workspace) -> list[str]:
    """Sorted list of weeks that have any entry, for UI dropdowns."""
    weeks = {entry.week for entry in workspace.weekly_entries.all()}
    weeks.update(entry.week for entry in workspace.kpis.entries())
    return sorted(weeks)


def export_reports_xlsx(workspace: Workspace, path: str | Path) -> Path:
    """Write every report to one Excel workbook, a sheet per report."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    summary = pd.DataFrame([get_performance_summary(workspace)])
    sheets = {
        "Summary": summary,
        "Departments": get_department_overview(workspace),
        "Team": get_team_performance(workspace).drop(columns=["employee_id"]),
        "KPI Trends": get_kpi_trends(workspace),
        "KPI Attainment": get_kpi_attainment(workspace),
    }

    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for sheet_name, frame in sheets.items():
            frame.to_excel(writer, index=False, sheet_name=sheet_name)

            worksheet = writer.sheets[sheet_name]
            for column in worksheet.columns:
                lengths = [len(str(cell.value)) for cell in column if cell.value is not None]
                width = max(lengths, default=0)
                worksheet.column_dimensions[column[0].column_letter].width = min(width + 2, 50)

    logger.info("Wrote %d report sheets to %s", len(sheets), path)
    return path
