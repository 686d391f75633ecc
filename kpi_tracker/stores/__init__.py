"""In-memory entity stores and the durable KPI entry cache."""

from .base import EmployeeStoreProtocol, KPIStoreProtocol, WeeklyEntryStoreProtocol
from .employees import EmployeeStore
from .kpi_cache import KPIEntryCache
from .kpis import KPIStore
from .storage import JsonFileStorage, MemoryStorage
from .weekly_entries import WeeklyEntryStore

__all__ = [
    "EmployeeStore",
    "KPIStore",
    "WeeklyEntryStore",
    "KPIEntryCache",
    "JsonFileStorage",
    "MemoryStorage",
    "EmployeeStoreProtocol",
    "KPIStoreProtocol",
    "WeeklyEntryStoreProtocol",
]
