"""
Dashboard view-state holder.

Holds the single current Snapshot the view reads. The snapshot is only ever
replaced as a whole; a failed refresh keeps the last good one.
"""
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from marketdash.models import Snapshot

logger = logging.getLogger(__name__)


class DashboardStatus(str, Enum):
    LOADING = "loading"
    READY = "ready"
    STALE = "stale"
    ERROR = "error"


class DashboardState:
    """Current snapshot plus error and last-update bookkeeping."""

    def __init__(self):
        self.snapshot: Optional[Snapshot] = None
        self.last_error: Optional[str] = None
        self.last_updated: Optional[datetime] = None

    def apply(self, snapshot: Snapshot):
        """Replace the current snapshot and clear any error."""
        self.snapshot = snapshot
        self.last_error = None
        self.last_updated = snapshot.fetched_at

    def record_failure(self, error: Exception):
        """Record a failed refresh; the current snapshot, if any, is kept."""
        self.last_error = str(error)
        if self.snapshot is None:
            logger.error(f"Initial dashboard load failed: {error}")
        else:
            logger.warning(f"Dashboard refresh failed, keeping snapshot from {self.last_updated}: {error}")

    def reset(self):
        self.snapshot = None
        self.last_error = None
        self.last_updated = None

    @property
    def status(self) -> DashboardStatus:
        if self.snapshot is None:
            return DashboardStatus.ERROR if self.last_error else DashboardStatus.LOADING
        return DashboardStatus.STALE if self.last_error else DashboardStatus.READY

    @property
    def is_connected(self) -> bool:
        """True while the latest tick succeeded with every slot live."""
        return self.snapshot is not None and self.last_error is None and not self.snapshot.degraded

    def last_update_label(self, now: Optional[datetime] = None) -> str:
        """Human-readable age of the current snapshot (e.g., '12s ago', '3m ago')."""
        if self.last_updated is None:
            return "Never"
        now = now or datetime.now(timezone.utc)
        seconds = max(0, int((now - self.last_updated).total_seconds()))
        if seconds < 60:
            return f"{seconds}s ago"
        minutes = seconds // 60
        if minutes < 60:
            return f"{minutes}m ago"
        return f"{minutes // 60}h ago"


# Global instance read by the HTTP surface
dashboard_state = DashboardState()
