"""
Pytest configuration and shared fixtures for KPI Tracker tests.

This file provides:
- Entity factories for employees, KPIs and entries
- Stores and a Workspace backed by in-memory cache storage
"""

import pytest

from kpi_tracker import Workspace
from kpi_tracker.models import (
    KPI,
    Employee,
    KPIEntry,
    KPIValue,
    Superannuation,
    WeeklyEntry,
    compute_total_package,
    new_id,
    utc_now_iso,
)
from kpi_tracker.stores import KPIEntryCache, MemoryStorage

# ============================================================================
# Entity factories
# ============================================================================


def make_employee(**overrides) -> Employee:
    salary = overrides.pop("salary", 90_000.0)
    contribution = overrides.pop("contribution", 11.5)
    fields = {
        "id": new_id(),
        "employee_id": "E100",
        "name": "Jordan Lee",
        "department": "Support",
        "status": "active",
        "start_date": "2024-01-15",
        "salary": salary,
        "superannuation": Superannuation(contribution=contribution),
        "bonus_potential": 5_000.0,
        "total_package": compute_total_package(salary, contribution),
    }
    fields.update(overrides)
    return Employee(**fields)


def make_kpi(**overrides) -> KPI:
    now = utc_now_iso()
    fields = {
        "id": new_id(),
        "name": "Tickets Closed",
        "description": "Support tickets resolved",
        "target_value": 50.0,
        "unit": "number",
        "preferred_trend": "higher",
        "time_period": "weekly",
        "status": "active",
        "start_date": "2024-01-01",
        "assigned_employees": [],
        "created_at": now,
        "updated_at": now,
    }
    fields.update(overrides)
    return KPI(**fields)


def make_kpi_entry(**overrides) -> KPIEntry:
    fields = {
        "id": new_id(),
        "kpi_id": "kpi-1",
        "employee_id": "emp-1",
        "value": 42.0,
        "week": "2024-W10",
        "created_at": utc_now_iso(),
    }
    fields.update(overrides)
    return KPIEntry(**fields)


def make_weekly_entry(**overrides) -> WeeklyEntry:
    fields = {
        "id": new_id(),
        "employee_id": "emp-1",
        "week": "2024-W10",
        "kpi_entries": [KPIValue(kpi_id="kpi-1", value=42.0)],
        "performance_rating": 4,
        "rating_justification": "Solid week",
        "capacity_percentage": 80,
        "created_at": utc_now_iso(),
    }
    fields.update(overrides)
    return WeeklyEntry(**fields)


# ============================================================================
# Store fixtures
# ============================================================================

@pytest.fixture
def storage():
    """In-memory storage shared by caches within one test."""
    return MemoryStorage()


@pytest.fixture
def kpi_cache(storage):
    return KPIEntryCache(storage=storage)


@pytest.fixture
def workspace(kpi_cache):
    """Empty workspace whose cache never touches disk."""
    return Workspace(kpi_cache=kpi_cache)


@pytest.fixture
def team(workspace):
    """A manager with two reports in two departments, loaded in the workspace."""
    manager = make_employee(employee_id="E001", name="Priya Raman", department="Operations")
    alice = make_employee(employee_id="E002", name="Alice Ng", manager_id=manager.id)
    bob = make_employee(
        employee_id="E003", name="Bob Stone", department="Sales", manager_id=manager.id
    )
    for employee in (manager, alice, bob):
        workspace.employees.add(employee)
    return {"manager": manager, "alice": alice, "bob": bob}
