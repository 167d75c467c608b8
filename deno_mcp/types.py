from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ExecutionRequest:
    code: str


@dataclass(frozen=True)
class ExecutionResult:
    """Captured outcome of one Deno child process."""
    stdout: str
    stderr: str
    exit_code: int


@dataclass(frozen=True)
class ToolResult:
    text: str
    is_error: bool = False


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str
    input_schema: dict[str, Any] = field(default_factory=dict)
