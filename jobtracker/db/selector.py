"""Process-wide storage backend selection.

The selector is the only place that knows which adapter is active.  On first
access it reads ``settings.STORAGE_PLATFORM``, builds the matching adapter,
initializes it once and caches it for the rest of the process.  A failed
initialization still marks the selector ready (degraded) so startup is never
blocked; data calls then fail with ``BackendUnavailable``.
"""

from __future__ import annotations

import asyncio
import logging

from jobtracker.core.config import Settings, settings
from jobtracker.db.base import StorageAdapter
from jobtracker.db.document import SupabaseAdapter
from jobtracker.db.kv import FileKeyValueStore, KeyValueAdapter
from jobtracker.db.sqlite import SqliteAdapter

logger = logging.getLogger(__name__)


def create_adapter(config: Settings) -> StorageAdapter:
    """Build (without initializing) the adapter for the configured platform."""
    platform = config.STORAGE_PLATFORM
    if platform == "native":
        return SqliteAdapter(config.SQLITE_PATH)
    if platform == "web":
        return KeyValueAdapter(FileKeyValueStore(config.KV_STORE_DIR))
    if platform == "cloud":
        return SupabaseAdapter()
    raise ValueError(f"Unknown storage platform: {platform}")


class BackendSelector:
    """Lazily creates and caches the single active adapter."""

    def __init__(self, config: Settings | None = None) -> None:
        self._config = config
        self._adapter: StorageAdapter | None = None
        self._lock = asyncio.Lock()
        self.ready = False
        self.degraded = False

    @property
    def backend(self) -> str | None:
        return self._adapter.backend if self._adapter is not None else None

    async def get_adapter(self) -> StorageAdapter:
        """Return the active adapter, creating and initializing it once."""
        if self._adapter is not None:
            return self._adapter
        async with self._lock:
            if self._adapter is None:
                adapter = create_adapter(self._config or settings)
                await adapter.initialize()
                self.degraded = not adapter.initialized
                self.ready = True
                self._adapter = adapter
                if self.degraded:
                    logger.warning(
                        "storage_degraded",
                        extra={"backend": adapter.backend},
                    )
                else:
                    logger.info(
                        "storage_selected",
                        extra={"backend": adapter.backend},
                    )
        return self._adapter

    async def reset(self) -> None:
        """Close and forget the cached adapter (shutdown and tests)."""
        if self._adapter is not None:
            await self._adapter.close()
        self._adapter = None
        self._lock = asyncio.Lock()
        self.ready = False
        self.degraded = False


# Module-level selector instance (singleton)
selector = BackendSelector()
