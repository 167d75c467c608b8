"""Deno-backed MCP server exposing a single ``execute_typescript`` tool."""

from .types import ExecutionRequest, ExecutionResult, ToolDescriptor, ToolResult

__all__ = ["ExecutionRequest", "ExecutionResult", "ToolDescriptor", "ToolResult"]

__version__ = "0.1.0"
