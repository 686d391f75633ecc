"""
Entity model: employees, KPI definitions, KPI entries and weekly entries.

Entities are frozen dataclasses. Stores never mutate a record in place;
they swap in a new instance (``dataclasses.replace``) so any field a caller
did not touch stays identical to its previous value.

Cross-entity references (``manager_id``, ``assigned_employees``, ``kpi_id``,
``employee_id``) are weak: nothing here checks that the target exists.
"""

import re
import uuid
from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timezone
from typing import Any

_WEEK_PATTERN = re.compile(r"^(\d{4})-W(\d{2})$")


def new_id() -> str:
    """Return a fresh opaque internal identifier."""
    return str(uuid.uuid4())


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def iso_week(day: date) -> str:
    """Return the ISO week string (``YYYY-Www``) containing ``day``."""
    year, week, _ = day.isocalendar()
    return f"{year}-W{week:02d}"


def week_start(week: str) -> date:
    """Return the Monday of an ISO week string such as ``2024-W10``.

    Raises ValueError for strings that are not ``YYYY-Www``.
    """
    match = _WEEK_PATTERN.match(week.strip())
    if match is None:
        raise ValueError(f"Not an ISO week string: {week!r}")
    year, number = int(match.group(1)), int(match.group(2))
    return date.fromisocalendar(year, number, 1)


def compute_total_package(salary: float, contribution: float) -> float:
    """Salary plus superannuation, ``salary * (1 + contribution / 100)``."""
    return salary * (1 + contribution / 100)


# ---------------------------------------------------------------------------
# Employees
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Superannuation:
    contribution: float  # percent of salary


@dataclass(frozen=True)
class Employee:
    """A team member.

    ``total_package`` is written by whoever creates or edits the record
    (see ``compute_total_package``); the store never recomputes it.
    ``kpis`` is informational and not kept in sync with KPI assignments.
    """

    id: str
    employee_id: str
    name: str
    department: str
    status: str
    start_date: str
    salary: float
    superannuation: Superannuation
    bonus_potential: float
    total_package: float
    end_date: str | None = None
    manager_id: str | None = None
    kpis: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# KPIs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class KPI:
    """A metric definition with a target and a reporting cadence.

    ``preferred_trend`` says whether higher or lower values are better; it
    is read by reports and never enforced.
    """

    id: str
    name: str
    description: str
    target_value: float
    unit: str
    preferred_trend: str
    time_period: str
    status: str
    start_date: str
    created_at: str
    updated_at: str
    end_date: str | None = None
    assigned_employees: list[str] = field(default_factory=list)

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class KPIEntry:
    """One numeric observation of a KPI for one employee in one week."""

    id: str
    kpi_id: str
    employee_id: str
    value: float
    week: str
    created_at: str
    notes: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "KPIEntry":
        return cls(
            id=data["id"],
            kpi_id=data["kpi_id"],
            employee_id=data["employee_id"],
            value=data["value"],
            week=data["week"],
            created_at=data["created_at"],
            notes=data.get("notes"),
        )


# ---------------------------------------------------------------------------
# Weekly entries
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class KPIValue:
    kpi_id: str
    value: float


@dataclass(frozen=True)
class WeeklyEntry:
    """An employee's weekly self-report.

    ``kpi_entries`` duplicates values that may also exist as standalone
    ``KPIEntry`` records; the two are not reconciled.
    """

    id: str
    employee_id: str | None
    week: str
    kpi_entries: list[KPIValue]
    performance_rating: int
    rating_justification: str
    capacity_percentage: int
    created_at: str
    capacity_factors: str | None = None
    weekly_reflection: str | None = None
    support_needed: str | None = None
    updated_at: str | None = None

    def value_for(self, kpi_id: str) -> float | None:
        """Return the reported value for ``kpi_id``, or None."""
        for kpi_value in self.kpi_entries:
            if kpi_value.kpi_id == kpi_id:
                return kpi_value.value
        return None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
