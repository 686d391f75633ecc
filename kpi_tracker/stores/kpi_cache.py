"""
Durable write-through cache of KPI entries with a pending-sync queue.

Every accepted entry is appended to ``entries`` and ``pending_sync`` and the
whole state is written to storage as one versioned JSON blob:

    {"version": 1, "state": {"entries": [...], "last_sync": "...",
                             "pending_sync": [...]}}

The cache rehydrates from storage when constructed. A blob that cannot be
decoded, or carries a different version, is discarded and the cache starts
empty. Write failures are logged and otherwise ignored; the in-memory state
remains authoritative for the session.
"""

import json
import logging
from typing import Any

from ..config import CACHE_DIR, CACHE_STORAGE_KEY, CACHE_VERSION
from ..models import KPIEntry, utc_now_iso
from ..sync import LocalSyncProvider, SyncProvider, SyncResult
from .storage import JsonFileStorage, Storage

logger = logging.getLogger(__name__)


class KPIEntryCache:
    def __init__(
        self,
        storage: Storage | None = None,
        sync_provider: SyncProvider | None = None,
        key: str = CACHE_STORAGE_KEY,
        version: int = CACHE_VERSION,
    ) -> None:
        self._storage = storage if storage is not None else JsonFileStorage(CACHE_DIR)
        self._sync_provider = sync_provider if sync_provider is not None else LocalSyncProvider()
        self._key = key
        self._version = version

        self._entries: list[KPIEntry] = []
        self._pending: list[KPIEntry] = []
        self._last_sync: str = utc_now_iso()
        self._initialized = False

        self._rehydrate()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def entries(self) -> list[KPIEntry]:
        return list(self._entries)

    @property
    def pending_sync(self) -> list[KPIEntry]:
        return list(self._pending)

    @property
    def last_sync(self) -> str:
        return self._last_sync

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        """One-time setup hook for views; repeated calls do nothing."""
        if self._initialized:
            return
        self._initialized = True
        logger.debug("KPI entry cache initialised with %d entries", len(self._entries))

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def add_entry(self, entry: KPIEntry) -> None:
        """Cache ``entry`` and queue it for sync. Known ids are ignored."""
        if any(existing.id == entry.id for existing in self._entries):
            logger.debug("KPI entry %s already cached", entry.id)
            return
        self._entries.append(entry)
        self._pending.append(entry)
        self._persist()

    async def sync_entries(self) -> SyncResult | None:
        """Push the pending queue through the sync provider.

        Returns None when nothing was pending. Entries leave the queue only
        on COMMITTED; RETRY_LATER or a provider error keeps them for the
        next attempt.
        """
        if not self._pending:
            return None

        batch = list(self._pending)
        try:
            result = await self._sync_provider.push(batch)
        except Exception:
            logger.exception("Failed to sync %d KPI entries; keeping them queued", len(batch))
            return SyncResult.RETRY_LATER

        if result is not SyncResult.COMMITTED:
            logger.warning("Sync deferred for %d KPI entries", len(batch))
            return result

        # Entries added while the push was in flight stay queued
        pushed = {entry.id for entry in batch}
        self._pending = [entry for entry in self._pending if entry.id not in pushed]
        self._last_sync = utc_now_iso()
        self._persist()
        logger.info("Synced %d KPI entries", len(batch))
        return result

    def clear(self) -> None:
        """Drop every cached entry and delete the persisted blob."""
        self._entries = []
        self._pending = []
        self._last_sync = utc_now_iso()
        try:
            self._storage.remove_item(self._key)
        except OSError:
            logger.exception("Failed to remove KPI entry cache '%s'", self._key)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_pending_count(self) -> int:
        return len(self._pending)

    def get_entries_by_kpi(self, kpi_id: str) -> list[KPIEntry]:
        return [entry for entry in self._entries if entry.kpi_id == kpi_id]

    def get_entries_by_employee(self, employee_id: str) -> list[KPIEntry]:
        return [entry for entry in self._entries if entry.employee_id == employee_id]

    def get_entries_by_week(self, week: str) -> list[KPIEntry]:
        return [entry for entry in self._entries if entry.week == week]

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _snapshot(self) -> dict[str, Any]:
        return {
            "version": self._version,
            "state": {
                "entries": [entry.to_dict() for entry in self._entries],
                "last_sync": self._last_sync,
                "pending_sync": [entry.to_dict() for entry in self._pending],
            },
        }

    def _persist(self) -> None:
        try:
            self._storage.set_item(self._key, json.dumps(self._snapshot()))
        except (OSError, TypeError, ValueError):
            logger.exception("Failed to save KPI entry cache '%s'", self._key)

    def _rehydrate(self) -> None:
        try:
            raw = self._storage.get_item(self._key)
        except (OSError, ValueError):
            # ValueError covers undecodable bytes in a file-backed blob
            logger.exception("Failed to read KPI entry cache '%s'; starting empty", self._key)
            return
        if raw is None:
            return

        try:
            blob = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("KPI entry cache '%s' is not valid JSON; starting empty", self._key)
            return

        if not isinstance(blob, dict) or blob.get("version") != self._version:
            logger.warning(
                "KPI entry cache '%s' has version %r, expected %d; starting empty",
                self._key,
                blob.get("version") if isinstance(blob, dict) else None,
                self._version,
            )
            return

        state = blob.get("state") or {}
        try:
            entries = [KPIEntry.from_dict(item) for item in state.get("entries", [])]
            pending = [KPIEntry.from_dict(item) for item in state.get("pending_sync", [])]
        except (AttributeError, KeyError, TypeError):
            logger.warning("KPI entry cache '%s' has malformed entries; starting empty", self._key)
            return

        self._entries = entries
        self._pending = pending
        self._last_sync = state.get("last_sync") or self._last_sync
        logger.info(
            "Rehydrated KPI entry cache: %d entries, %d pending",
            len(self._entries),
            len(self._pending),
        )
