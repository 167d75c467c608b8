"""Errors raised on the tool-call path.

Every ``ToolError`` is turned into an error result by the dispatcher, so none
of them reach the protocol layer as an unhandled exception.
"""
from __future__ import annotations


class ToolError(Exception):
    """Base class for failures reported back to the caller as tool results."""


class InvalidArgumentError(ToolError):
    pass


class UnknownToolError(ToolError):
    def __init__(self, name: str, available: list[str]):
        self.name = name
        self.available = list(available)
        super().__init__(f"Unknown tool '{name}'. Available tools: {', '.join(self.available)}")


class ExecutionSetupError(ToolError):
    """The scratch area could not be prepared or the child could not be spawned."""
