"""
In-Process IPC for Gridseq

A host application (GUI, TUI, notebook) talks to the engine through
asyncio queues on the same event loop: commands go in through
InProcessCommandSource, state events come out of InProcessStateSink.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

# Default queue size; drop-oldest keeps memory bounded
_DEFAULT_QUEUE_SIZE = 64


class NoopCommandSource:
    """CommandSource that never yields commands.

    Used when the host drives the engine through its public methods.
    """

    def connect(self) -> None:
        pass

    def disconnect(self) -> None:
        pass

    def register_handler(self, command: str, handler: Any) -> None:
        """No-op handler registration."""
        pass

    async def process_commands(self) -> int:
        return 0

    @property
    def is_connected(self) -> bool:
        """Always connected (no-op)."""
        return True


class InProcessCommandSource:
    """CommandSource backed by an asyncio.Queue.

    submit() enqueues a command and returns a future that resolves to
    the handler's return value (normally a CommandResult) once the
    engine's command loop has processed it.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[tuple[str, dict[str, Any], asyncio.Future[Any] | None]] = (
            asyncio.Queue()
        )
        self._handlers: dict[str, Callable[[dict[str, Any]], Any]] = {}
        self._connected = False

    def connect(self) -> None:
        self._connected = True

    def disconnect(self) -> None:
        self._connected = False
        # Fail anything still waiting so callers are not left hanging
        while not self._queue.empty():
            _, _, future = self._queue.get_nowait()
            if future is not None and not future.done():
                future.cancel()

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def register_handler(
        self, command_type: str, handler: Callable[[dict[str, Any]], Any]
    ) -> None:
        """
        Register a handler for a command type

        Args:
            command_type: Command type string (e.g., "play", "toggle")
            handler: Callback taking payload dict, usually returning a CommandResult
        """
        self._handlers[command_type] = handler

    def submit(
        self, command_type: str, payload: dict[str, Any] | None = None
    ) -> asyncio.Future[Any]:
        """
        Queue a command for the engine.

        Must be called from the engine's event loop thread.

        Returns:
            Future resolving to the handler result
        """
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._queue.put_nowait((command_type, payload or {}, future))
        return future

    def send(self, command_type: str, payload: dict[str, Any] | None = None) -> None:
        """Queue a command without waiting for its result (fire-and-forget)."""
        self._queue.put_nowait((command_type, payload or {}, None))

    async def process_commands(self) -> int:
        """
        Process queued commands using registered handlers

        Returns:
            Number of commands processed
        """
        processed = 0

        while not self._queue.empty():
            cmd_type, payload, future = self._queue.get_nowait()
            handler = self._handlers.get(cmd_type)

            if handler is None:
                logger.warning(f"No handler for command type: {cmd_type}")
                if future is not None and not future.done():
                    future.set_exception(KeyError(f"Unknown command: {cmd_type}"))
                continue

            try:
                result = handler(payload)
            except Exception as e:
                logger.error(f"Handler error for '{cmd_type}': {e}")
                if future is not None and not future.done():
                    future.set_exception(e)
            else:
                if future is not None and not future.done():
                    future.set_result(result)
            processed += 1

        return processed


class InProcessStateSink:
    """StateSink backed by an asyncio.Queue.

    The presentation layer reads from .queue; this class pushes events
    into it.  When the queue is full the oldest entry is dropped
    (drop-oldest) so a slow consumer never back-pressures the step loop.
    """

    def __init__(self, maxsize: int = _DEFAULT_QUEUE_SIZE) -> None:
        self._queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=maxsize)

    # ----------------------------------------------------------
    # Public accessors
    # ----------------------------------------------------------

    @property
    def queue(self) -> asyncio.Queue[dict[str, Any]]:
        return self._queue

    @property
    def is_connected(self) -> bool:
        """Always connected (in-process)."""
        return True

    # ----------------------------------------------------------
    # Lifecycle
    # ----------------------------------------------------------

    def connect(self) -> None:
        """No-op connect (already initialized in __init__)."""
        pass

    def disconnect(self) -> None:
        """No-op disconnect."""
        pass

    # ----------------------------------------------------------
    # StateSink protocol methods
    # ----------------------------------------------------------

    async def send_playhead(self, column: int | None, rows: list[int]) -> None:
        """Send the sounding column (None clears the playhead)."""
        self._push({"type": "playhead", "data": {"column": column, "rows": list(rows)}})

    async def send_status(self, status: dict[str, Any]) -> None:
        """Send status update."""
        self._push({"type": "status", "data": dict(status)})

    async def send_grid(self, cells: list[list[bool]]) -> None:
        """Send grid snapshot."""
        self._push({"type": "grid", "data": {"cells": [list(row) for row in cells]}})

    async def send_error(self, code: str, message: str) -> None:
        """Send error notification."""
        self._push({
            "type": "error",
            "data": {
                "code": code,
                "message": message,
            }
        })

    async def send(self, event_type: str, data: dict[str, Any]) -> None:
        """Generic send."""
        self._push({"type": event_type, "data": data})

    # ----------------------------------------------------------
    # Helpers
    # ----------------------------------------------------------

    def _push(self, event: dict[str, Any]) -> None:
        """Push event, dropping oldest if queue is full."""
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            # drop oldest
            try:
                self._queue.get_nowait()
            except asyncio.QueueEmpty:
                pass
            try:
                self._queue.put_nowait(event)
            except asyncio.QueueFull:
                pass
