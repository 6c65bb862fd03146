"""Session reaper - periodically removes sessions past either expiry clock."""

import asyncio

from prometheus_client import Counter

from sessionstore.core.logging import get_logger
from sessionstore.domain import StorageUnavailableError
from sessionstore.stores.base import SessionStore

logger = get_logger("reaper")

# How often to sweep (in seconds)
DEFAULT_INTERVAL_SECONDS = 600  # 10 minutes

SWEEPS_TOTAL = Counter(
    "session_reaper_sweeps_total",
    "Completed session sweep cycles by outcome",
    ["outcome"],
)
REMOVED_TOTAL = Counter(
    "session_reaper_removed_total",
    "Sessions removed by the reaper",
)


class SessionReaper:
    """Background task sweeping expired sessions at a fixed interval.

    A failed sweep is logged and skipped; the next tick is the retry.
    ``stop()`` cancels the task and waits for it, so shutdown and test
    teardown are deterministic.
    """

    def __init__(
        self,
        store: SessionStore,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._store = store
        self._interval = interval_seconds
        self._task: asyncio.Task[None] | None = None

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the background sweep task."""
        if self.running:
            logger.warning("Session reaper is already running")
            return

        self._task = asyncio.create_task(self._reap_loop(), name="session-reaper")
        logger.info(f"Session reaper started (interval: {self._interval}s)")

    async def stop(self) -> None:
        """Stop the background sweep task."""
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Session reaper stopped")

    async def _reap_loop(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                await self.run_once()
            except Exception:
                SWEEPS_TOTAL.labels(outcome="failure").inc()
                logger.exception(
                    "Unexpected error in session reaper",
                    extra={"outcome": "failure"},
                )

    async def run_once(self) -> int | None:
        """Run a single sweep.

        Returns:
            Number of sessions removed, or None if the store was unavailable.
        """
        try:
            removed = await self._store.sweep_expired()
        except StorageUnavailableError as e:
            SWEEPS_TOTAL.labels(outcome="failure").inc()
            logger.error(
                f"Unable to clear expired sessions: {e}",
                extra={"outcome": "failure"},
            )
            return None

        SWEEPS_TOTAL.labels(outcome="success").inc()
        REMOVED_TOTAL.inc(removed)
        if removed > 0:
            logger.info(
                f"Cleared {removed} expired sessions",
                extra={"outcome": "success", "removed": removed},
            )
        else:
            logger.debug(
                "No expired sessions to clear",
                extra={"outcome": "success", "removed": 0},
            )
        return removed
