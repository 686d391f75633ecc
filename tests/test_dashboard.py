"""
Reporting tests: performance classification, dashboard outputs, the Excel
report export and the simulated demo workspace.

Run with:
    pytest tests/test_dashboard.py -v
"""

import math
from datetime import date

import pandas as pd
import pytest

from kpi_tracker.config import (
    CAPACITY_RANGE,
    EMPLOYEE_STATUSES,
    KPI_STATUSES,
    KPI_UNITS,
    PERFORMANCE_RATING_RANGE,
    PREFERRED_TRENDS,
    TIME_PERIODS,
)
from kpi_tracker.dashboard import (
    export_reports_xlsx,
    get_available_weeks,
    get_department_overview,
    get_kpi_attainment,
    get_kpi_trends,
    get_performance_summary,
    get_team_performance,
)
from kpi_tracker.models import KPIValue
from kpi_tracker.performance import calc_variance, classify_performance, rating_band
from kpi_tracker.simulator import build_demo_workspace, generate_weeks
from kpi_tracker.transforms import to_week_start
from tests.conftest import make_kpi, make_weekly_entry


@pytest.fixture
def reporting(workspace, team):
    """Team fixture plus weekly reports and KPI entries across two weeks."""
    tickets = make_kpi(name="Tickets Closed", target_value=50.0, preferred_trend="higher")
    response = make_kpi(name="Response Hours", target_value=4.0, preferred_trend="lower")
    workspace.kpis.add(tickets)
    workspace.kpis.add(response)

    alice, bob = team["alice"], team["bob"]
    workspace.weekly_entries.add(make_weekly_entry(
        employee_id=alice.id, week="2024-W10", performance_rating=4, capacity_percentage=80,
        kpi_entries=[KPIValue(kpi_id=tickets.id, value=40.0)],
    ))
    workspace.weekly_entries.add(make_weekly_entry(
        employee_id=alice.id, week="2024-W11", performance_rating=5, capacity_percentage=90,
        kpi_entries=[KPIValue(kpi_id=tickets.id, value=55.0)],
    ))
    workspace.weekly_entries.add(make_weekly_entry(
        employee_id=bob.id, week="2024-W10", performance_rating=2, capacity_percentage=60,
        kpi_entries=[KPIValue(kpi_id=tickets.id, value=60.0)],
    ))
    # Orphaned report from an unknown employee
    workspace.weekly_entries.add(make_weekly_entry(
        employee_id=None, week="2024-W10", performance_rating=1, capacity_percentage=10,
        kpi_entries=[],
    ))

    workspace.submit_kpi_entry(tickets.id, alice.id, 40.0, "2024-W10")
    workspace.submit_kpi_entry(tickets.id, bob.id, 50.0, "2024-W10")
    workspace.submit_kpi_entry(tickets.id, alice.id, 49.0, "2024-W11")
    workspace.submit_kpi_entry(response.id, bob.id, 3.0, "2024-W10")

    return {**team, "tickets": tickets, "response": response}


# ============================================================================
# Performance functions
# ============================================================================


class TestPerformance:
    """Tests for variance, RAG and rating bands."""

    @pytest.mark.parametrize(
        "actual, target, trend, expected",
        [
            (50, 50, "higher", "green"),
            (48, 50, "higher", "amber"),
            (40, 50, "higher", "red"),
            (47.5, 50, "higher", "amber"),
            (60, 50, "lower", "red"),
            (3, 4, "lower", "green"),
            (4, 4, "lower", "green"),
            (4.1, 4, "lower", "amber"),
            (5, 4, "lower", "red"),
            (float("nan"), 4, "lower", "grey"),
            (3, 0, "higher", "grey"),
        ],
    )
    def test_classify_performance(self, actual, target, trend, expected):
        assert classify_performance(actual, target, trend) == expected

    def test_calc_variance(self):
        assert calc_variance(45, 50) == (-5, -10.0)
        assert calc_variance(5, 0) == (5, None)

    def test_rating_band(self):
        assert rating_band(4.0) == "good"
        assert rating_band(3.0) == "fair"
        assert rating_band(2.9) == "poor"

    def test_to_week_start(self):
        """Week strings map to Mondays; bad values to NaT."""
        assert to_week_start("2024-W10") == pd.Timestamp("2024-03-04")
        assert to_week_start("week ten") is pd.NaT


# ============================================================================
# Dashboard outputs
# ============================================================================


class TestDashboard:
    """Tests for the report functions on a hand-built workspace."""

    def test_performance_summary(self, workspace, reporting):
        """Orphaned reports are left out of the averages."""
        summary = get_performance_summary(workspace)

        assert summary == {
            "avg_rating": 3.7,
            "avg_capacity": 77,
            "active_employees": 3,
            "total_entries": 3,
        }

    def test_performance_summary_filters(self, workspace, reporting):
        support = get_performance_summary(workspace, department="Support")
        assert (support["avg_rating"], support["avg_capacity"], support["total_entries"]) == (4.5, 85, 2)

        managed = get_performance_summary(workspace, manager_id=reporting["manager"].id)
        assert managed["total_entries"] == 3

        later = get_performance_summary(workspace, start_week="2024-W11")
        assert (later["avg_rating"], later["total_entries"]) == (5.0, 1)

    def test_performance_summary_empty(self, workspace):
        summary = get_performance_summary(workspace)
        assert summary["avg_rating"] == 0.0
        assert summary["total_entries"] == 0

    def test_department_overview(self, workspace, reporting):
        overview = get_department_overview(workspace).set_index("department")

        assert list(overview.index) == ["Operations", "Support", "Sales"]
        assert overview.loc["Operations", "entries_count"] == 0
        assert overview.loc["Support", "avg_rating"] == 4.5
        assert overview.loc["Support", "rating_band"] == "good"
        assert overview.loc["Sales", "avg_capacity"] == 60
        assert overview.loc["Sales", "rating_band"] == "poor"

    def test_team_performance(self, workspace, reporting):
        team = get_team_performance(workspace, manager_id=reporting["manager"].id)

        assert list(team["name"]) == ["Alice Ng", "Bob Stone"]
        alice = team.iloc[0]
        assert (alice["rating"], alice["capacity"], alice["entries"]) == (4.5, 85, 2)

    def test_kpi_trends(self, workspace, reporting):
        """Weekly KPI values are averaged per week."""
        trends = get_kpi_trends(workspace)

        assert list(trends["week"]) == ["2024-W10", "2024-W11"]
        assert list(trends["Tickets Closed"]) == [50.0, 55.0]

    def test_kpi_trends_empty(self, workspace):
        assert list(get_kpi_trends(workspace).columns) == ["week", "week_start"]

    def test_kpi_attainment(self, workspace, reporting):
        """Mean per KPI per week, classified against target."""
        attainment = get_kpi_attainment(workspace)

        rows = list(attainment[["week", "kpi_name", "actual", "entries", "rag"]].itertuples(index=False))
        assert [tuple(row) for row in rows] == [
            ("2024-W10", "Response Hours", 3.0, 1, "green"),
            ("2024-W10", "Tickets Closed", 45.0, 2, "red"),
            ("2024-W11", "Tickets Closed", 49.0, 1, "amber"),
        ]
        assert attainment.loc[1, "variance_pct"] == pytest.approx(-10.0)

    def test_kpi_attainment_from_cache_matches_store(self, workspace, reporting):
        store = get_kpi_attainment(workspace, source="store")
        cache = get_kpi_attainment(workspace, source="cache")
        pd.testing.assert_frame_equal(store, cache)

    def test_kpi_attainment_unknown_source(self, workspace):
        with pytest.raises(ValueError):
            get_kpi_attainment(workspace, source="server")

    def test_available_weeks(self, workspace, reporting):
        assert get_available_weeks(workspace) == ["2024-W10", "2024-W11"]

    def test_export_reports_xlsx(self, workspace, reporting, tmp_path):
        """Every report lands on its own sheet."""
        path = export_reports_xlsx(workspace, tmp_path / "out" / "reports.xlsx")

        sheets = pd.read_excel(path, sheet_name=None, engine="openpyxl")

        assert list(sheets) == ["Summary", "Departments", "Team", "KPI Trends", "KPI Attainment"]
        assert len(sheets["Departments"]) == 3
        assert sheets["Summary"].loc[0, "total_entries"] == 3


# ============================================================================
# Simulator
# ============================================================================


class TestSimulator:
    """Tests for the demo workspace generator."""

    def test_generate_weeks(self):
        assert generate_weeks(3, date(2026, 1, 5)) == ["2026-W02", "2026-W03", "2026-W04"]

    def test_demo_counts(self):
        """Nine staff, five KPIs; managers without KPIs skip weekly reports."""
        workspace = build_demo_workspace(n_weeks=2)

        assert len(workspace.employees) == 9
        assert len(workspace.kpis) == 5
        assert len(workspace.kpis.entries()) == 28
        assert len(workspace.kpi_cache.entries) == 28
        assert len(workspace.weekly_entries) == 16
        assert workspace.dangling_references() == {"managers": [], "assignments": []}

    def test_demo_is_deterministic(self):
        """Same seed, same values."""
        first = build_demo_workspace(seed=7, n_weeks=3)
        second = build_demo_workspace(seed=7, n_weeks=3)

        assert [e.value for e in first.kpis.entries()] == [e.value for e in second.kpis.entries()]
        assert [e.performance_rating for e in first.weekly_entries] == [
            e.performance_rating for e in second.weekly_entries
        ]

    def test_demo_uses_known_enumerations(self):
        """Generated records stay within the configured enumerations and scales."""
        workspace = build_demo_workspace(n_weeks=3)

        assert {emp.status for emp in workspace.employees} <= set(EMPLOYEE_STATUSES)
        for kpi in workspace.kpis:
            assert kpi.unit in KPI_UNITS
            assert kpi.preferred_trend in PREFERRED_TRENDS
            assert kpi.time_period in TIME_PERIODS
            assert kpi.status in KPI_STATUSES
        low, high = PERFORMANCE_RATING_RANGE
        assert all(low <= e.performance_rating <= high for e in workspace.weekly_entries)
        low, high = CAPACITY_RANGE
        assert all(low <= e.capacity_percentage <= high for e in workspace.weekly_entries)

    def test_demo_values_are_non_negative(self):
        workspace = build_demo_workspace()
        assert all(entry.value >= 0 and not math.isnan(entry.value) for entry in workspace.kpis.entries())
