# helios_bot/logging_setup.py

from __future__ import annotations

import logging
import sys

NOISY_LOGGERS = ("web3", "urllib3", "aiohttp", "asyncio")


def setup_logging(level: str | int = logging.INFO) -> None:
    """Configure the console handler. Call once, before the first log line."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root.addHandler(handler)
    root.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
