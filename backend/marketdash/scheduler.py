"""
Background task that keeps the dashboard snapshot fresh.
"""
import asyncio
import logging
from enum import Enum
from typing import Optional
from marketdash.aggregator import DashboardAggregator
from marketdash.config import settings
from marketdash.errors import FetchError, RefreshError
from marketdash.services.registry import build_aggregator
from marketdash.state import DashboardState, dashboard_state

logger = logging.getLogger(__name__)


class SchedulerStatus(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    ERROR = "error"


class RefreshScheduler:
    """Refresh the dashboard once immediately, then at a fixed interval."""

    def __init__(self, aggregator: DashboardAggregator, state: DashboardState, interval_seconds: float = 30.0):
        """
        Initialize the refresh scheduler.

        Args:
            aggregator: Produces one snapshot per tick
            state: View-state holder the snapshots are applied to
            interval_seconds: Time between ticks (default: 30 seconds)
        """
        self.aggregator = aggregator
        self.state = state
        self.interval_seconds = interval_seconds
        self.status = SchedulerStatus.IDLE
        self.is_running = False
        self.task: Optional[asyncio.Task] = None
        # Bumped by stop(); a tick only applies its result if the generation is unchanged
        self._generation = 0

    async def tick(self) -> bool:
        """
        Run one refresh cycle.

        Returns:
            bool: True if a snapshot was applied to the state
        """
        generation = self._generation
        self.status = SchedulerStatus.FETCHING

        try:
            snapshot = await self.aggregator.refresh()
        except (RefreshError, FetchError) as e:
            if generation != self._generation:
                logger.info("Discarding failed refresh that finished after stop")
                return False
            self.status = SchedulerStatus.ERROR
            self.state.record_failure(e)
            return False

        if generation != self._generation:
            logger.info("Discarding snapshot that arrived after stop")
            return False

        self.state.apply(snapshot)
        self.status = SchedulerStatus.IDLE
        return True

    async def run(self):
        """Run the refresh task periodically."""
        self.is_running = True
        logger.info(f"Dashboard refresh task started (interval: {self.interval_seconds}s)")

        while self.is_running:
            try:
                await self.tick()
            except Exception as e:
                logger.error(f"Error in dashboard refresh task: {e}", exc_info=True)
                self.state.record_failure(e)

            # Error is per tick; wait for the next one idle
            self.status = SchedulerStatus.IDLE
            await asyncio.sleep(self.interval_seconds)

    def start(self):
        """Start the background task."""
        if self.task is None or self.task.done():
            self.task = asyncio.create_task(self.run())
            logger.info("Dashboard refresh background task scheduled")

    async def stop(self):
        """Stop the background task. Safe to call repeatedly and while a tick is in flight."""
        self.is_running = False
        self._generation += 1
        if self.task:
            self.task.cancel()
            try:
                await self.task
            except asyncio.CancelledError:
                pass
            self.task = None
        self.status = SchedulerStatus.IDLE
        logger.info("Dashboard refresh background task stopped")


# Global instance
refresh_scheduler = RefreshScheduler(
    aggregator=build_aggregator(settings),
    state=dashboard_state,
    interval_seconds=settings.refresh_interval_seconds,
)
