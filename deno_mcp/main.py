from __future__ import annotations

import asyncio
import sys
from typing import Sequence

from loguru import logger

from .config import config_from_args, load_env
from .logger import configure_logging
from .server import run_stdio


def main(argv: Sequence[str] | None = None) -> int:
    load_env()
    config = config_from_args(argv)
    configure_logging(config.log_level)
    try:
        asyncio.run(run_stdio(config))
    except KeyboardInterrupt:
        logger.info("Shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
