"""Business rule layer facade.

Bundles every service over one adapter.  ``get_tracker()`` resolves the
adapter through the process-wide selector once and reuses the facade, so
callers receive the rule layer by injection instead of looking the backend
up on every call.
"""

from __future__ import annotations

from jobtracker.db.base import StorageAdapter
from jobtracker.db.selector import selector
from jobtracker.services.applications import ApplicationService
from jobtracker.services.history import HistoryRecorder
from jobtracker.services.jobs import JobService
from jobtracker.services.messages import MessageService
from jobtracker.services.seed import SeedService
from jobtracker.services.users import UserService


class Tracker:
    """All rule-layer services sharing one adapter."""

    def __init__(self, adapter: StorageAdapter) -> None:
        self.adapter = adapter
        self.history = HistoryRecorder(adapter)
        self.users = UserService(adapter)
        self.jobs = JobService(adapter)
        self.applications = ApplicationService(adapter, self.jobs, self.history)
        self.messages = MessageService(adapter, self.applications)
        self.seed = SeedService(adapter, self.users, self.applications)


_tracker: Tracker | None = None


async def get_tracker() -> Tracker:
    """Return the tracker bound to the selected adapter, creating it once."""
    global _tracker
    adapter = await selector.get_adapter()
    if _tracker is None or _tracker.adapter is not adapter:
        _tracker = Tracker(adapter)
    return _tracker


async def close_tracker() -> None:
    """Flush pending history writes, then release the adapter."""
    global _tracker
    if _tracker is not None:
        await _tracker.history.drain()
        _tracker = None
    await selector.reset()
