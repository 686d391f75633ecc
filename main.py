"""
KPI Tracker — end-to-end smoke-test pipeline.

Builds a simulated team, exports every entity to CSV, re-imports the files
into a fresh workspace, syncs the KPI entry cache and prints report
summaries.

Usage:
    python main.py
"""

import asyncio
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent))

from kpi_tracker import Workspace
from kpi_tracker.codecs import read_import_file, write_export
from kpi_tracker.config import EXPORT_DIR
from kpi_tracker.dashboard import (
    export_reports_xlsx,
    get_available_weeks,
    get_department_overview,
    get_kpi_attainment,
    get_kpi_trends,
    get_performance_summary,
)
from kpi_tracker.simulator import build_demo_workspace
from kpi_tracker.stores import KPIEntryCache, MemoryStorage

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Run the full data-layer pipeline and print smoke-test outputs."""

    print("=" * 70)
    print("  KPI TRACKER — Team Performance Data Layer")
    print("  Pipeline Smoke Test")
    print("=" * 70)
    print()

    # ------------------------------------------------------------------
    # 1. Build simulated data
    # ------------------------------------------------------------------
    print("[ 1 ] BUILDING SIMULATED TEAM")
    print("-" * 40)

    source = build_demo_workspace()
    print(f"\nEmployees: {len(source.employees)}")
    print(f"KPIs: {len(source.kpis)}")
    print(f"KPI entries (store): {len(source.kpis.entries())}")
    print(f"KPI entries (cache): {len(source.kpi_cache.entries)}, "
          f"pending sync: {source.kpi_cache.get_pending_count()}")
    print(f"Weekly entries: {len(source.weekly_entries)}")

    # ------------------------------------------------------------------
    # 2. CSV export
    # ------------------------------------------------------------------
    print("\n")
    print("[ 2 ] EXPORTING CSV")
    print("-" * 40)

    paths = {
        "employees": write_export("employees", source.export_employees_csv(), EXPORT_DIR),
        "kpis": write_export("kpis", source.export_kpis_csv(), EXPORT_DIR),
        "weekly-entries": write_export(
            "weekly-entries", source.export_weekly_entries_csv(), EXPORT_DIR
        ),
    }
    for kind, path in paths.items():
        print(f"  {kind:15s} -> {path}")

    # ------------------------------------------------------------------
    # 3. CSV import into a fresh workspace
    # ------------------------------------------------------------------
    print("\n")
    print("[ 3 ] RE-IMPORTING CSV")
    print("-" * 40)

    target = Workspace(kpi_cache=KPIEntryCache(storage=MemoryStorage()))
    # Managers are listed in the same file as their reports
    target.import_employees_csv(read_import_file(paths["employees"]), link_managers_in_file=True)
    target.import_kpis_csv(read_import_file(paths["kpis"]))
    target.import_weekly_entries_csv(read_import_file(paths["weekly-entries"]))

    print(f"\nEmployees: {len(target.employees)}")
    print(f"KPIs: {len(target.kpis)}")
    print(f"Weekly entries: {len(target.weekly_entries)}")

    # ------------------------------------------------------------------
    # 4. Cache sync
    # ------------------------------------------------------------------
    print("\n")
    print("[ 4 ] SYNCING KPI ENTRY CACHE")
    print("-" * 40)

    result = asyncio.run(source.kpi_cache.sync_entries())
    print(f"\n  Sync result: {result.value if result else 'nothing pending'}")
    print(f"  Pending after sync: {source.kpi_cache.get_pending_count()}")
    print(f"  Last sync: {source.kpi_cache.last_sync}")

    # ------------------------------------------------------------------
    # 5. Dashboard outputs
    # ------------------------------------------------------------------
    print("\n")
    print("[ 5 ] DASHBOARD OUTPUTS")
    print("-" * 40)

    weeks = get_available_weeks(source)
    print(f"\nAvailable weeks: {weeks}")

    print("\nPerformance summary:")
    for key, value in get_performance_summary(source).items():
        print(f"  {key:18s} | {value}")

    print("\nDepartment overview:")
    print(get_department_overview(source).to_string(index=False))

    print("\nKPI trends:")
    print(get_kpi_trends(source).drop(columns=["week_start"]).round(1).to_string(index=False))

    latest = weeks[-1] if weeks else None
    attainment = get_kpi_attainment(source)
    print(f"\nKPI attainment — {latest}:")
    if not attainment.empty:
        latest_rows = attainment[attainment["week"] == latest]
        print(latest_rows[["kpi_name", "actual", "target", "variance_pct", "rag"]]
              .round(2).to_string(index=False))

    workbook = export_reports_xlsx(source, EXPORT_DIR / "reports.xlsx")
    print(f"\nReport workbook: {workbook}")

    # ------------------------------------------------------------------
    # 6. Acceptance checks
    # ------------------------------------------------------------------
    print("\n")
    print("[ 6 ] ACCEPTANCE CHECKS")
    print("-" * 40)

    check1 = len(target.employees) == len(source.employees)
    print(f"\n  [{'PASS' if check1 else 'FAIL'}] Employee round-trip: "
          f"{len(target.employees)} of {len(source.employees)}")

    source_tuples = sorted(
        (e.employee_id, e.department, e.salary, e.superannuation.contribution)
        for e in source.employees
    )
    target_tuples = sorted(
        (e.employee_id, e.department, e.salary, e.superannuation.contribution)
        for e in target.employees
    )
    check2 = source_tuples == target_tuples
    print(f"  [{'PASS' if check2 else 'FAIL'}] Employee fields preserved through CSV")

    managed = sum(1 for e in target.employees if e.manager_id is not None)
    expected_managed = sum(1 for e in source.employees if e.manager_id is not None)
    check3 = managed == expected_managed
    print(f"  [{'PASS' if check3 else 'FAIL'}] Manager links resolved: {managed} of {expected_managed}")

    check4 = source.kpi_cache.get_pending_count() == 0
    print(f"  [{'PASS' if check4 else 'FAIL'}] Pending queue empty after sync")

    check5 = len(target.weekly_entries) == len(source.weekly_entries)
    print(f"  [{'PASS' if check5 else 'FAIL'}] Weekly entry round-trip: "
          f"{len(target.weekly_entries)} of {len(source.weekly_entries)}")

    print("\n" + "=" * 70)
    print("  Pipeline complete.")
    print("=" * 70)


if __name__ == "__main__":
    main()
