# file: deno_mcp/logger.py

import sys

from loguru import logger

# stdout carries the JSON-RPC stream, so logs only ever go to stderr
logger.remove()
logger.add(sys.stderr, level="INFO")


def configure_logging(level: str = "INFO") -> None:
    """
    Replace the default sink with a stderr sink at ``level``.

    Args:
        level: Any loguru level name, e.g. "DEBUG" or "WARNING".
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}",
    )
