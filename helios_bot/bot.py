# helios_bot/bot.py

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

from .client import ChainClient
from .config import ConfigError, Settings, load_settings
from .logging_setup import setup_logging
from .scheduler import schedule_daily_runs

logger = logging.getLogger(__name__)


def print_banner(client: ChainClient, settings: Settings) -> None:
    logger.info("=================================================")
    logger.info("===      Helios Full Automation Bot START     ===")
    logger.info("=================================================")
    logger.info("Loaded account: %s", client.address)
    logger.info("Bot will run multiple task schedules in parallel.")
    if settings.test_mode:
        logger.info("🧪 Test mode: a single session runs, then the bot exits.")


async def main(settings: Settings) -> int:
    client = await ChainClient.connect(settings)
    print_banner(client, settings)
    sessions = 1 if settings.test_mode else None
    return await schedule_daily_runs(client, settings, sessions=sessions)


def run(env_file: str | Path | None = None) -> None:
    """Console entry point."""
    try:
        settings = load_settings(env_file)
    except ConfigError as exc:
        setup_logging()
        logger.error("❌ %s", exc)
        sys.exit(1)

    setup_logging(settings.log_level)
    try:
        asyncio.run(main(settings))
    except ConnectionError as exc:
        logger.error("❌ %s", exc)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Stopped.")


if __name__ == "__main__":
    run()
