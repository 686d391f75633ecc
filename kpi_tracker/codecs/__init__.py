"""CSV import/export for employees, KPIs and weekly entries."""

from .employees_csv import export_employees_csv, parse_employees_csv
from .files import export_filename, read_import_file, write_export
from .kpis_csv import export_kpis_csv, parse_kpis_csv
from .weekly_csv import export_weekly_entries_csv, parse_weekly_entries_csv

__all__ = [
    "export_employees_csv",
    "parse_employees_csv",
    "export_kpis_csv",
    "parse_kpis_csv",
    "export_weekly_entries_csv",
    "parse_weekly_entries_csv",
    "export_filename",
    "write_export",
    "read_import_file",
]
