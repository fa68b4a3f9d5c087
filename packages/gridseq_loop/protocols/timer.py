"""
Timer Protocols for gridseq_loop.

The step loop is a re-arming timer: each step schedules the next one.
Abstracting the timer lets tests fire steps by hand.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable


@runtime_checkable
class ScheduledStep(Protocol):
    """Handle to a pending step (asyncio.TimerHandle satisfies this)."""

    def cancel(self) -> None:
        """Cancel the pending callback. Idempotent and synchronous."""
        ...

    def cancelled(self) -> bool:
        """Whether cancel() has been called."""
        ...


@runtime_checkable
class StepTimer(Protocol):
    """
    Schedules one-shot callbacks on the host event loop.

    Implementations:
        - AsyncioStepTimer: loop.call_later()
        - MockStepTimer: Test double with manual firing
    """

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledStep:
        """Run callback once after delay seconds."""
        ...

    def now(self) -> float:
        """Monotonic time in seconds."""
        ...
