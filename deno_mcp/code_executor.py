from __future__ import annotations

import os
import subprocess
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

from loguru import logger

from .errors import ExecutionSetupError, InvalidArgumentError
from .types import ExecutionResult

if TYPE_CHECKING:
    from .config import ServerConfig

SCRIPT_NAME = "main.ts"
TIMEOUT_EXIT_CODE = 124


class DenoCodeExecutor:
    def __init__(
        self,
        *,
        deno_path: str = "deno",
        permission_flags: Sequence[str] = (),
        timeout_seconds: float | None = None,
        working_dir: Path | None = None,
    ):
        self.deno_path = deno_path
        self.permission_flags = tuple(permission_flags)
        self.timeout_seconds = timeout_seconds
        self.working_dir = working_dir

    @classmethod
    def from_config(cls, config: "ServerConfig") -> "DenoCodeExecutor":
        return cls(
            deno_path=config.deno_path,
            permission_flags=config.permission_flags,
            timeout_seconds=config.timeout_seconds,
            working_dir=config.working_dir,
        )

    def build_command(self, script_path: Path) -> list[str]:
        return [
            self.deno_path,
            "run",
            "--no-check",
            "--no-prompt",
            *self.permission_flags,
            str(script_path),
        ]

    def run(self, code: str) -> ExecutionResult:
        """Run ``code`` as a fresh Deno script and capture its output.

        Raises:
            InvalidArgumentError: ``code`` is not a string; nothing is spawned.
            ExecutionSetupError: the scratch directory or the child process
                could not be created.
        """
        if not isinstance(code, str):
            raise InvalidArgumentError("'code' argument must be a string.")

        try:
            with tempfile.TemporaryDirectory(prefix="deno-mcp-") as tmpdir:
                tmp_path = Path(tmpdir) / SCRIPT_NAME
                tmp_path.write_text(code, encoding="utf-8")
                cmd = self.build_command(tmp_path)
                logger.debug("Spawning {}", cmd)

                try:
                    proc = subprocess.run(
                        cmd,
                        cwd=str(self.working_dir) if self.working_dir else None,
                        env=dict(os.environ),
                        stdin=subprocess.DEVNULL,
                        text=True,
                        encoding="utf-8",
                        errors="replace",
                        capture_output=True,
                        timeout=self.timeout_seconds,
                    )
                except subprocess.TimeoutExpired:
                    logger.warning("Script killed after {}s", self.timeout_seconds)
                    return ExecutionResult(
                        stdout="",
                        stderr=f"Execution timed out after {self.timeout_seconds:g}s",
                        exit_code=TIMEOUT_EXIT_CODE,
                    )

                logger.debug("deno exited with code {}", proc.returncode)
                return ExecutionResult(
                    stdout=proc.stdout or "",
                    stderr=proc.stderr or "",
                    exit_code=int(proc.returncode),
                )
        except (OSError, ValueError, OverflowError) as e:
            logger.warning("Execution setup failed: {}", e)
            raise ExecutionSetupError(str(e)) from e
