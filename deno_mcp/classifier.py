"""Turn a finished Deno run into the text the MCP client sees.

Classification is a plain substring check on stderr: any failure whose
output mentions one of the permission markers is reported as a permission
problem, even when the marker appears for an unrelated reason.
"""
from __future__ import annotations

from .errors import ExecutionSetupError
from .types import ExecutionResult, ToolResult

NO_OUTPUT_MESSAGE = "Code executed successfully (no output)"

# Deno 1.x reports "PermissionDenied"; Deno 2 renamed the error class to "NotCapable".
PERMISSION_MARKERS = ("PermissionDenied", "permission denied", "NotCapable")

PERMISSION_GUIDANCE = (
    "To grant permissions, restart the MCP server with appropriate flags "
    "like --allow-net, --allow-read, or --allow-write"
)


def is_permission_error(stderr: str) -> bool:
    return any(marker in stderr for marker in PERMISSION_MARKERS)


def classify_outcome(result: ExecutionResult) -> ToolResult:
    if result.exit_code == 0:
        return ToolResult(text=result.stdout or NO_OUTPUT_MESSAGE)

    if is_permission_error(result.stderr):
        return ToolResult(
            text=f"Permission denied error:\n{result.stderr}\n\n{PERMISSION_GUIDANCE}",
            is_error=True,
        )

    return ToolResult(text=f"Error (exit code {result.exit_code}):\n{result.stderr}", is_error=True)


def classify_setup_error(error: ExecutionSetupError) -> ToolResult:
    return ToolResult(text=f"Execution error: {error}", is_error=True)
