# helios_bot/__init__.py

from __future__ import annotations

from .client import ChainClient
from .config import ConfigError, Settings, load_settings
from .scheduler import run_sub_scheduler, schedule_daily_runs

__all__ = [
    "ChainClient",
    "ConfigError",
    "Settings",
    "load_settings",
    "run_sub_scheduler",
    "schedule_daily_runs",
]
