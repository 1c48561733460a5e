"""Background task for periodic overload checks.

This module provides an asyncio task that polls an admission guard at a
fixed interval, keeps the latest verdict, and notifies listeners whenever
the host enters or leaves the overloaded state.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from ..domain.models import OverloadThresholds, OverloadVerdict

if TYPE_CHECKING:
    from ..application.admission_guard import AdmissionGuard

logger = logging.getLogger(__name__)

VerdictListener = Callable[[OverloadVerdict], Awaitable[None] | None]


class OverloadWatchTask:
    """Background task that re-evaluates the overload verdict periodically."""

    def __init__(
        self,
        guard: AdmissionGuard,
        interval: float = 5.0,
        thresholds: OverloadThresholds | None = None,
    ):
        """Initialize the watch task.

        Args:
            guard: Admission guard to poll
            interval: Seconds between two checks (default: 5)
            thresholds: Limits to check against, or None for the guard's defaults
        """
        if interval <= 0:
            raise ValueError(f"Watch interval must be positive, got {interval}")
        self.guard = guard
        self.interval = interval
        self.thresholds = thresholds
        self._listeners: list[VerdictListener] = []
        self._last_verdict: OverloadVerdict | None = None
        self._task: asyncio.Task | None = None
        self._stop_event = asyncio.Event()

    @property
    def last_verdict(self) -> OverloadVerdict | None:
        """Most recent verdict, or None before the first check."""
        return self._last_verdict

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def add_listener(self, listener: VerdictListener) -> None:
        """Register a callback fired when the overloaded state flips.

        The first verdict always counts as a change. Listeners may be plain
        functions or coroutine functions.
        """
        self._listeners.append(listener)

    async def run_once(self) -> OverloadVerdict:
        """Check the guard immediately.

        Returns:
            OverloadVerdict: The fresh verdict
        """
        verdict = self.guard.check(self.thresholds)
        previous = self._last_verdict
        self._last_verdict = verdict

        if previous is None or previous.overloaded != verdict.overloaded:
            if verdict.overloaded:
                logger.warning(f"Host entered overloaded state: {verdict.reason.value}")
            elif previous is not None:
                logger.info("Host recovered from overload")
            await self._notify(verdict)

        return verdict

    async def _notify(self, verdict: OverloadVerdict) -> None:
        for listener in self._listeners:
            try:
                result = listener(verdict)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(f"Overload listener {listener!r} failed: {e}")

    async def _run_periodic_check(self) -> None:
        """Run the check periodically until stopped."""
        logger.info(f"Starting overload watch task (interval: {self.interval}s)")

        while not self._stop_event.is_set():
            try:
                await self.run_once()
            except Exception as e:
                logger.error(f"Unexpected error in overload watch task: {e}")

            try:
                # Wait for the interval or stop event
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval)
            except TimeoutError:
                pass

        logger.info("Overload watch task stopped")

    def start(self) -> None:
        """Start the background watch task."""
        if self._task is None or self._task.done():
            self._stop_event.clear()
            self._task = asyncio.create_task(self._run_periodic_check())
            logger.info("Background overload watch task started")

    async def stop(self) -> None:
        """Stop the background watch task."""
        if self._task and not self._task.done():
            self._stop_event.set()
            await self._task
            self._task = None
            logger.info("Background overload watch task stopped")
