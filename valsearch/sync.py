"""
File: sync.py
Purpose: Single-flight, staleness-gated trigger for ingestion passes.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Optional

from .instrumentation import SYNC_PASSES

log = logging.getLogger("valsearch.sync")

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SyncCoordinator:
    """
    Owns the sync state (idle/running, last successful completion).

    request_sync() starts a background pass only when no pass is running and
    the index is stale. The running check and the task spawn happen without
    an intervening await, so two requests on the same loop can never both
    start a pass.
    """

    def __init__(
        self,
        run_pass: Callable[[], Awaitable[Any]],
        stale_after: timedelta = timedelta(minutes=60),
        clock: Clock = utcnow,
    ):
        self._run_pass = run_pass
        self._stale_after = stale_after
        self._clock = clock
        self._task: Optional[asyncio.Task] = None
        self.last_completed_at: Optional[datetime] = None

    @property
    def running(self) -> bool:
        return self._task is not None

    def is_stale(self) -> bool:
        """True when no pass has completed yet or the last one is older than the staleness window."""
        if self.last_completed_at is None:
            return True
        return self._clock() - self.last_completed_at > self._stale_after

    def request_sync(self) -> None:
        """Start a pass if allowed; otherwise do nothing. Never blocks, never reports."""
        if self.running:
            log.debug("Sync requested while a pass is running; ignoring")
            return
        if not self.is_stale():
            log.debug("Sync requested but index is fresh; ignoring",
                      extra={"last_completed_at": self.last_completed_at.isoformat()})
            return
        self._task = asyncio.create_task(self._run(), name="valsearch-sync")

    async def _run(self) -> None:
        try:
            await self._run_pass()
        except asyncio.CancelledError:
            SYNC_PASSES.labels(outcome="cancelled").inc()
            log.warning("Sync pass cancelled")
            raise
        except Exception:
            SYNC_PASSES.labels(outcome="failed").inc()
            log.exception("Sync pass failed")
        else:
            self.last_completed_at = self._clock()
            SYNC_PASSES.labels(outcome="ok").inc()
        finally:
            self._task = None

    async def wait(self) -> None:
        """Block until the in-flight pass (if any) finishes."""
        task = self._task
        if task is not None:
            await asyncio.wait([task])

    async def stop(self) -> None:
        """Cancel the in-flight pass (if any) and wait for it to unwind."""
        task = self._task
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            # the pass unwound as asked; only propagate if stop() itself was cancelled
            if asyncio.current_task().cancelling():
                raise
        finally:
            # a task cancelled before it started never reaches _run's finally
            self._task = None
