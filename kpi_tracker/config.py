"""
Configuration: file paths, cache storage key, CSV layouts, enumerations.

CSV header lists are the external file contract; their order is the column
order written on export. Import locates columns by header name.
"""

from pathlib import Path

# ---------------------------------------------------------------------------
# File paths: adjust these if the data directory moves
# ---------------------------------------------------------------------------
DATA_DIR = Path(__file__).resolve().parent.parent / "data"

CACHE_DIR = DATA_DIR / "cache"
EXPORT_DIR = DATA_DIR / "exports"

# ---------------------------------------------------------------------------
# Durable KPI entry cache
# ---------------------------------------------------------------------------
CACHE_STORAGE_KEY = "kpi-entries-cache"
CACHE_VERSION = 1

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------
EMPLOYEE_STATUSES = ("active", "inactive")
KPI_STATUSES = ("active", "inactive")
KPI_UNITS = ("number", "percentage", "currency")
PREFERRED_TRENDS = ("higher", "lower")
TIME_PERIODS = ("weekly", "monthly", "quarterly", "yearly")

PERFORMANCE_RATING_RANGE = (1, 5)
CAPACITY_RANGE = (0, 100)

# ---------------------------------------------------------------------------
# CSV layouts
# ---------------------------------------------------------------------------
LIST_DELIMITER = ";"
KPI_COLUMN_PREFIX = "KPI: "

EMPLOYEE_CSV_HEADERS = [
    "Name",
    "Employee ID",
    "Department",
    "Status",
    "Start Date",
    "End Date",
    "Salary",
    "Superannuation Rate",
    "Bonus Potential",
    "Manager Employee ID",
]

KPI_CSV_HEADERS = [
    "Name",
    "Description",
    "Target Value",
    "Unit",
    "Preferred Trend",
    "Time Period",
    "Status",
    "Start Date",
    "End Date",
    "Assigned Employee IDs",
]

# Followed by one "KPI: <name>" column per known KPI
WEEKLY_ENTRY_CSV_HEADERS = [
    "Week",
    "Employee ID",
    "Performance Rating",
    "Rating Justification",
    "Capacity %",
    "Capacity Factors",
    "Weekly Reflection",
    "Support Needed",
]

# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------
# Percentage-point tolerance either side of target for amber classification
AMBER_BAND_PCT = 5.0

# Average weekly rating thresholds for the department overview
RATING_GOOD = 4.0
RATING_FAIR = 3.0
