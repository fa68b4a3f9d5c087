"""
Step Timer and Step Clock

AsyncioStepTimer arms one-shot callbacks on the running event loop.
StepClock decides how long to wait before the next step.

Two timing modes:
- rearm (default): wait a full step interval after each step's work
  completes. The achieved period is interval + processing time; drift
  accumulates and is not corrected.
- drift_corrected: anchor-based scheduling. Step n is due at
  anchor + n * interval; the wait is shortened by however late the
  current step ran. Large drift resets the anchor instead of bursting
  steps to catch up (same policy as a clockSkipTicks-style reset).
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from enum import Enum

from ..protocols import ScheduledStep

logger = logging.getLogger(__name__)


class TimingMode(str, Enum):
    """How the step loop computes its re-arm delay"""
    REARM = "rearm"
    DRIFT_CORRECTED = "drift_corrected"


class AsyncioStepTimer:
    """StepTimer backed by loop.call_later()."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledStep:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)

    def now(self) -> float:
        # Same clock as the default asyncio loop.time()
        return time.monotonic()


class StepClock:
    """
    Computes re-arm delays for the step loop.

    Call start() when a session begins, mark_step() at the top of every
    step, next_delay() after the step's work, reset() when stopping.
    """

    DRIFT_RESET_THRESHOLD_MS: float = 50.0  # Reset if drift exceeds 50ms
    DRIFT_WARNING_THRESHOLD_MS: float = 20.0  # Log warning if drift exceeds 20ms

    def __init__(
        self,
        mode: TimingMode = TimingMode.REARM,
        now: Callable[[], float] = time.monotonic,
    ):
        self._mode = TimingMode(mode)
        self._now = now

        self._anchor_time: float | None = None
        self._step_count: int = 0

        self._drift_stats: dict[str, float | int] = {
            "reset_count": 0,
            "max_drift_ms": 0.0,
            "last_reset_drift_ms": 0.0,
        }

    @property
    def mode(self) -> TimingMode:
        return self._mode

    @property
    def anchor_time(self) -> float | None:
        return self._anchor_time

    @property
    def step_count(self) -> int:
        return self._step_count

    def start(self) -> None:
        """Anchor the clock at the current time."""
        self._anchor_time = self._now()
        self._step_count = 0

    def reset(self) -> None:
        """Drop the anchor (playback stopped)."""
        self._anchor_time = None
        self._step_count = 0

    def mark_step(self, interval: float) -> float:
        """
        Measure how late the current step is running.

        Args:
            interval: Step interval in seconds

        Returns:
            Drift in milliseconds (0.0 in rearm mode)
        """
        if self._mode is TimingMode.REARM or self._anchor_time is None:
            return 0.0

        current_time = self._now()
        expected_time = self._anchor_time + (self._step_count * interval)
        drift_ms = (current_time - expected_time) * 1000

        if abs(drift_ms) > self._drift_stats["max_drift_ms"]:
            self._drift_stats["max_drift_ms"] = abs(drift_ms)

        if abs(drift_ms) > self.DRIFT_RESET_THRESHOLD_MS:
            self._handle_drift_reset(drift_ms, current_time)
        elif abs(drift_ms) > self.DRIFT_WARNING_THRESHOLD_MS:
            logger.debug(f"Step drift warning: {drift_ms:.1f}ms")

        return drift_ms

    def next_delay(self, interval: float) -> float:
        """
        Delay in seconds before the next step.

        Args:
            interval: Step interval in seconds
        """
        self._step_count += 1

        if self._mode is TimingMode.REARM or self._anchor_time is None:
            return interval

        expected_next = self._anchor_time + (self._step_count * interval)
        return max(0.0, expected_next - self._now())

    def _handle_drift_reset(self, drift_ms: float, current_time: float) -> None:
        """Re-anchor at the current time instead of catching up."""
        direction = "behind" if drift_ms > 0 else "ahead"
        logger.warning(
            f"Step drift reset: {drift_ms:.1f}ms {direction} "
            f"(threshold: {self.DRIFT_RESET_THRESHOLD_MS}ms)"
        )

        self._drift_stats["reset_count"] = int(self._drift_stats["reset_count"]) + 1
        self._drift_stats["last_reset_drift_ms"] = drift_ms

        self._anchor_time = current_time
        self._step_count = 0

    def get_drift_stats(self) -> dict[str, float | int | str]:
        """Get drift statistics for monitoring."""
        return {
            **self._drift_stats,
            "mode": self._mode.value,
            "current_step_count": self._step_count,
        }
