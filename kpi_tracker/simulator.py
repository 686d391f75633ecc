"""
Simulated data generator for the KPI tracker.

Builds a small, realistic team — departments, a management chain, KPIs,
weekly KPI entries and weekly self-reports — for demos and the smoke-test
pipeline. All values are synthetic.
"""

from datetime import date, timedelta

import numpy as np

from .config import CAPACITY_RANGE, PERFORMANCE_RATING_RANGE
from .models import (
    KPI,
    Employee,
    KPIValue,
    Superannuation,
    WeeklyEntry,
    compute_total_package,
    iso_week,
    new_id,
    utc_now_iso,
)
from .stores import KPIEntryCache, MemoryStorage
from .workspace import Workspace

# Seed for reproducibility
DEFAULT_SEED = 42

# ---------------------------------------------------------------------------
# Team roster: code, name, department, salary, super %, bonus, manager code
# ---------------------------------------------------------------------------
_EMPLOYEES = [
    ("E001", "Priya Raman", "Operations", 165_000, 11.5, 20_000, None),
    ("E002", "Tom Walsh", "Support", 118_000, 11.5, 10_000, "E001"),
    ("E003", "Ana Souza", "Support", 82_000, 11.5, 4_000, "E002"),
    ("E004", "Liam O'Connor", "Support", 79_500, 11.5, 4_000, "E002"),
    ("E005", "Mei Chen", "Sales", 124_000, 11.5, 25_000, "E001"),
    ("E006", "Kwame Mensah", "Sales", 91_000, 11.5, 15_000, "E005"),
    ("E007", "Sofia Rossi", "Sales", 88_000, 11.5, 15_000, "E005"),
    ("E008", "Noah Fischer", "Engineering", 142_000, 11.5, 12_000, "E001"),
    ("E009", "Aisha Khan", "Engineering", 121_000, 11.5, 8_000, "E008"),
]

# ---------------------------------------------------------------------------
# KPIs: name, description, target, unit, trend, period, department,
#       typical value, std
# ---------------------------------------------------------------------------
_KPIS = [
    ("Tickets Closed", "Support tickets resolved", 50, "number", "higher", "weekly",
     "Support", 48, 6),
    ("First Response Hours", "Median hours to first reply", 4, "number", "lower", "weekly",
     "Support", 4.3, 0.8),
    ("Revenue Booked", "New contract value booked", 40_000, "currency", "higher", "weekly",
     "Sales", 38_500, 7_000),
    ("Win Rate", "Closed-won share of qualified deals", 25, "percentage", "higher", "monthly",
     "Sales", 24, 4),
    ("Change Failure Rate", "Deployments causing an incident", 10, "percentage", "lower",
     "monthly", "Engineering", 9, 3),
]

_JUSTIFICATIONS = [
    "Met most targets despite a short week",
    "Strong week, cleared the backlog",
    "Blocked on a dependency for two days",
    "Steady progress on planned work",
]

_CAPACITY_FACTORS = [None, "Annual leave", "On-call rotation", "Training"]

# Simulated staff never self-rate below 2 or report under 60% capacity
_RATING_FLOOR = 2
_CAPACITY_FLOOR = 60


def generate_weeks(n_weeks: int = 8, start: date = date(2026, 1, 5)) -> list[str]:
    """Consecutive ISO week strings starting at ``start``."""
    return [iso_week(start + timedelta(weeks=i)) for i in range(n_weeks)]


def generate_employees() -> list[Employee]:
    """Simulated roster with manager links resolved to internal ids."""
    ids = {code: new_id() for code, *_ in _EMPLOYEES}
    employees = []
    for code, name, department, salary, super_rate, bonus, manager_code in _EMPLOYEES:
        employees.append(Employee(
            id=ids[code],
            employee_id=code,
            name=name,
            department=department,
            status="active",
            start_date="2023-02-01",
            salary=float(salary),
            superannuation=Superannuation(contribution=super_rate),
            bonus_potential=float(bonus),
            total_package=compute_total_package(salary, super_rate),
            manager_id=ids[manager_code] if manager_code else None,
        ))
    return employees


def generate_kpis(employees: list[Employee]) -> list[KPI]:
    """One KPI per definition, assigned to everyone in its department."""
    now = utc_now_iso()
    kpis = []
    for name, description, target, unit, trend, period, department, *_ in _KPIS:
        kpis.append(KPI(
            id=new_id(),
            name=name,
            description=description,
            target_value=float(target),
            unit=unit,
            preferred_trend=trend,
            time_period=period,
            status="active",
            start_date="2026-01-01",
            assigned_employees=[emp.id for emp in employees if emp.department == department],
            created_at=now,
            updated_at=now,
        ))
    return kpis


def _simulated_value(rng: np.random.Generator, typical: float, std: float) -> float:
    return round(max(float(typical + rng.normal(0, std)), 0.0), 2)


def build_demo_workspace(
    seed: int = DEFAULT_SEED,
    n_weeks: int = 8,
    kpi_cache: KPIEntryCache | None = None,
) -> Workspace:
    """Return a Workspace filled with a simulated team.

    Every assigned employee submits one KPI entry per KPI per week (through
    the normal submission flow, so the cache is filled too) and one weekly
    self-report bundling the same values.

    ``kpi_cache`` defaults to an in-memory cache so demos never touch the
    durable cache on disk.
    """
    rng = np.random.default_rng(seed)
    workspace = Workspace(kpi_cache=kpi_cache or KPIEntryCache(storage=MemoryStorage()))

    employees = generate_employees()
    for employee in employees:
        workspace.employees.add(employee)

    kpis = generate_kpis(employees)
    for kpi in kpis:
        workspace.kpis.add(kpi)

    params = {name: (typical, std) for name, *_, typical, std in _KPIS}

    for week in generate_weeks(n_weeks):
        for employee in employees:
            values = []
            for kpi in workspace.kpis_for_employee(employee.id):
                typical, std = params[kpi.name]
                value = _simulated_value(rng, typical, std)
                workspace.submit_kpi_entry(kpi.id, employee.id, value, week)
                values.append(KPIValue(kpi_id=kpi.id, value=value))

            if not values:
                # Managers without individual KPIs skip the weekly report
                continue

            workspace.weekly_entries.add(WeeklyEntry(
                id=new_id(),
                employee_id=employee.id,
                week=week,
                kpi_entries=values,
                performance_rating=int(rng.integers(_RATING_FLOOR, PERFORMANCE_RATING_RANGE[1] + 1)),
                rating_justification=str(rng.choice(_JUSTIFICATIONS)),
                capacity_percentage=int(rng.integers(_CAPACITY_FLOOR, CAPACITY_RANGE[1] + 1)),
                capacity_factors=_CAPACITY_FACTORS[int(rng.integers(0, len(_CAPACITY_FACTORS)))],
                created_at=utc_now_iso(),
            ))

    return workspace
