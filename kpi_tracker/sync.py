"""
Sync providers for the KPI entry cache.

A provider receives the pending queue and answers either COMMITTED (the
cache may drop those entries from the queue) or RETRY_LATER (keep them).
``LocalSyncProvider`` stands in until a real backend exists: it accepts
every batch immediately.
"""

import logging
from enum import Enum
from typing import Protocol

from .models import KPIEntry

logger = logging.getLogger(__name__)


class SyncResult(str, Enum):
    COMMITTED = "committed"
    RETRY_LATER = "retry_later"


class SyncProvider(Protocol):
    async def push(self, pending: list[KPIEntry]) -> SyncResult: ...


class LocalSyncProvider:
    """No remote endpoint: every push succeeds at once."""

    async def push(self, pending: list[KPIEntry]) -> SyncResult:
        logger.info("Marked %d KPI entries as synced (no remote configured)", len(pending))
        return SyncResult.COMMITTED
