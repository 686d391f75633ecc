"""
KPI Tracker — team performance data layer

In-memory stores for employees, KPIs, KPI entries and weekly self-reports,
a durable write-through cache of KPI entries with a pending-sync queue, and
CSV import/export that reconciles internal ids with human-facing codes.

To start a session:
    Build a ``Workspace`` once and hand it to every view. It owns the stores
    and the cache; views never construct stores themselves.

To connect a real backend:
    Implement ``sync.SyncProvider.push`` and pass the provider to
    ``KPIEntryCache``. The dedup and queue logic stays unchanged.

To add a report:
    Build a fact table in ``transforms`` and expose a function in
    ``dashboard`` that takes a ``Workspace`` and returns a DataFrame.
"""

from .workspace import CSVImportError, Workspace

__all__ = ["Workspace", "CSVImportError"]
