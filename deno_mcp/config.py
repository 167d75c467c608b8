"""Server configuration.

Values come from the process environment (optionally seeded from a ``.env``
file) and from command-line flags. The resulting ``ServerConfig`` is built
once at startup and passed to everything that needs it.
"""
from __future__ import annotations

import argparse
import math
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Sequence

from dotenv import load_dotenv

PERMISSION_NAMES = ("net", "read", "write", "env", "run", "sys", "ffi", "import")


def _env_bool(name: str, *, default: bool = False) -> bool:
    """Parse environment variable as boolean."""
    value = os.getenv(name)
    if value is None:
        return default
    cleaned = value.strip().lower()
    if not cleaned:
        return default
    if cleaned in {"1", "true", "yes", "y", "on"}:
        return True
    if cleaned in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _parse_timeout(value: str | float | None) -> float | None:
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid timeout: {value!r}") from None
    if not math.isfinite(seconds):
        raise ValueError(f"Timeout must be finite, got {value!r}")
    if seconds <= 0:
        raise ValueError(f"Timeout must be positive, got {value!r}")
    return seconds


def validate_permission_flags(flags: Sequence[str]) -> tuple[str, ...]:
    cleaned: list[str] = []
    for flag in flags:
        flag = flag.strip()
        if not flag:
            continue
        if flag != "-A" and not flag.startswith(("--allow-", "--deny-")):
            raise ValueError(f"Not a Deno permission flag: {flag!r}")
        if flag not in cleaned:
            cleaned.append(flag)
    return tuple(cleaned)


@dataclass(frozen=True)
class ServerConfig:
    deno_path: str = "deno"
    permission_flags: tuple[str, ...] = ()
    timeout_seconds: float | None = None
    working_dir: Path | None = None
    log_level: str = "INFO"
    debug: bool = False

    def __post_init__(self):
        object.__setattr__(self, "permission_flags", validate_permission_flags(self.permission_flags))
        object.__setattr__(self, "timeout_seconds", _parse_timeout(self.timeout_seconds))
        if self.debug:
            object.__setattr__(self, "log_level", "DEBUG")

    @classmethod
    def from_env(cls) -> "ServerConfig":
        permissions = os.getenv("deno_mcp_permissions") or ""
        working_dir = os.getenv("deno_mcp_working_dir")
        return cls(
            deno_path=os.getenv("deno_mcp_deno_path") or "deno",
            permission_flags=tuple(permissions.split(",")),
            timeout_seconds=_parse_timeout(os.getenv("deno_mcp_timeout_seconds")),
            working_dir=Path(working_dir) if working_dir else None,
            log_level=(os.getenv("deno_mcp_log_level") or "INFO").upper(),
            debug=_env_bool("deno_mcp_debug", default=False),
        )


def load_env(env_path: Path | None = None) -> None:
    if env_path is None:
        env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(env_path)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deno-mcp",
        description="MCP server that executes TypeScript/JavaScript with Deno.",
    )
    parser.add_argument(
        "-A",
        "--allow-all",
        dest="permissions",
        action="append_const",
        const="--allow-all",
        help="Grant every permission to executed code",
    )
    for name in PERMISSION_NAMES:
        parser.add_argument(
            f"--allow-{name}",
            dest=f"allow_{name}",
            nargs="?",
            const="",
            default=None,
            metavar="LIST",
            help=f"Forwarded to deno as --allow-{name}[=LIST]",
        )
    parser.add_argument("--deno-path", default=None, help="Path to the deno executable")
    parser.add_argument("--timeout", default=None, help="Kill scripts running longer than this many seconds")
    parser.add_argument("--working-dir", default=None, help="Working directory for executed scripts")
    parser.add_argument("--log-level", default=None, help="Log level (default: INFO)")
    parser.add_argument("--debug", action="store_true", help="Shortcut for --log-level DEBUG")
    return parser


def permission_flags_from_args(args: argparse.Namespace) -> list[str]:
    flags = list(args.permissions or [])
    for name in PERMISSION_NAMES:
        value = getattr(args, f"allow_{name}")
        if value is None:
            continue
        flags.append(f"--allow-{name}={value}" if value else f"--allow-{name}")
    return flags


def config_from_args(argv: Sequence[str] | None = None, *, base: ServerConfig | None = None) -> ServerConfig:
    """Overlay command-line flags on top of ``base`` (environment config by default)."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    try:
        if base is None:
            base = ServerConfig.from_env()

        changes: dict = {
            "permission_flags": base.permission_flags + tuple(permission_flags_from_args(args)),
        }
        if args.deno_path:
            changes["deno_path"] = args.deno_path
        if args.timeout is not None:
            changes["timeout_seconds"] = _parse_timeout(args.timeout)
        if args.working_dir:
            changes["working_dir"] = Path(args.working_dir)
        if args.log_level:
            changes["log_level"] = args.log_level.upper()
        if args.debug:
            changes["debug"] = True
        return replace(base, **changes)
    except ValueError as e:
        parser.error(str(e))
