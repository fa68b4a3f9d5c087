"""
IPC Protocols

Abstract interfaces between the sequencer engine and its presentation layer.

This module defines two protocol interfaces:
- CommandSource: Engine side (receives user commands)
- StateSink: Engine side (publishes playhead, status and grid state)

Data Flow:
    presentation                  gridseq_loop
    ────────────                  ────────────
    commands      ─── queue ──►  CommandSource
    display       ◄── queue ───  StateSink
"""

from __future__ import annotations

from typing import Any, Callable, Protocol, runtime_checkable


@runtime_checkable
class CommandSource(Protocol):
    """
    Command receiver interface (presentation → engine).

    Implementations:
        - InProcessCommandSource: asyncio.Queue fed by the host application
        - NoopCommandSource: Never yields commands
        - MockCommandSource: Test double for unit tests
    """

    def connect(self) -> None:
        """Connect to command source."""
        ...

    def disconnect(self) -> None:
        """Disconnect from command source."""
        ...

    def register_handler(
        self,
        command_type: str,
        handler: Callable[[dict[str, Any]], Any],
    ) -> None:
        """
        Register a handler for a command type.

        Args:
            command_type: Command type (e.g., "play", "stop", "toggle")
            handler: Callback taking the payload dict, may return a CommandResult
        """
        ...

    async def process_commands(self) -> int:
        """
        Process all pending commands.

        Returns:
            Number of commands processed
        """
        ...

    @property
    def is_connected(self) -> bool:
        """Whether connected to command source."""
        ...


@runtime_checkable
class StateSink(Protocol):
    """
    State publisher interface (engine → presentation).

    Implementations:
        - InProcessStateSink: asyncio.Queue with drop-oldest
        - MockStateSink: Test double for unit tests
    """

    def connect(self) -> None:
        """Connect to state sink."""
        ...

    def disconnect(self) -> None:
        """Disconnect from state sink."""
        ...

    async def send(self, msg_type: str, payload: dict[str, Any]) -> None:
        """
        Send state message.

        Args:
            msg_type: Message type (e.g., "playhead", "status")
            payload: Message payload
        """
        ...

    async def send_playhead(self, column: int | None, rows: list[int]) -> None:
        """
        Send the currently sounding column.

        Args:
            column: Column being played, or None to clear all markers
            rows: Rows sounding in that column
        """
        ...

    async def send_status(self, status: dict[str, Any]) -> None:
        """
        Send status update.

        Args:
            status: Transport, bpm, step interval, key and controls_enabled
        """
        ...

    async def send_grid(self, cells: list[list[bool]]) -> None:
        """Send a grid snapshot after a grid mutation."""
        ...

    async def send_error(self, code: str, message: str) -> None:
        """
        Send error notification.

        Args:
            code: Error code
            message: Error message
        """
        ...

    @property
    def is_connected(self) -> bool:
        """Whether connected to state sink."""
        ...
