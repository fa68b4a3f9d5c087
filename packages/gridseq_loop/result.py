"""
Command result type for error handling.

Handlers report success or failure with a CommandResult rather than
raising, so a bad command never stops the engine.
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class CommandResult:
    """
    Result of a command execution.

    Attributes:
        success: True if command succeeded, False otherwise
        message: Optional error or informational message
        data: Optional result data (e.g. error code, new state)
    """

    success: bool
    message: str | None = None
    data: dict[str, Any] | None = None

    @classmethod
    def ok(cls, message: str | None = None, data: dict[str, Any] | None = None) -> "CommandResult":
        """Create a successful result."""
        return cls(success=True, message=message, data=data)

    @classmethod
    def error(cls, message: str, data: dict[str, Any] | None = None) -> "CommandResult":
        """Create an error result."""
        return cls(success=False, message=message, data=data)
