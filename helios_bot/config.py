# helios_bot/config.py

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from dotenv import dotenv_values
from eth_utils import is_hexstr
from web3 import Web3

# --- 1. Schedule ---

# Main tasks: 10 runs, 1h 5m apart
MAIN_RUNS_PER_SESSION = 10
# Token deploy: 3 runs, 1h 5m apart
TOKEN_RUNS_PER_SESSION = 3
RUN_INTERVAL_MINUTES = 65
DELAY_BETWEEN_TASKS_SECONDS = 10
DELAY_BETWEEN_SUBTASKS_SECONDS = 5

SESSION_PERIOD_SECONDS = 24 * 60 * 60

# --- 2. Fees and transport ---

HIGH_GAS_PRICE_GWEI = 200
RPC_TIMEOUT_SECONDS = 180

DEFAULT_ENV_FILE_NAME = ".env"

TRUE_VALUES = ("1", "true", "yes", "on")


class ConfigError(Exception):
    """Raised when the environment does not describe a usable bot."""


@dataclass(frozen=True)
class Settings:
    rpc_url: str
    private_key: str
    chain_id: int = 0
    gas_price_wei: int = Web3.to_wei(HIGH_GAS_PRICE_GWEI, "gwei")
    main_runs: int = MAIN_RUNS_PER_SESSION
    token_runs: int = TOKEN_RUNS_PER_SESSION
    run_interval_seconds: float = RUN_INTERVAL_MINUTES * 60
    task_delay_seconds: float = DELAY_BETWEEN_TASKS_SECONDS
    rpc_timeout_seconds: float = RPC_TIMEOUT_SECONDS
    test_mode: bool = False
    log_level: str = "INFO"


def normalize_private_key(key: str) -> str:
    key = key.strip()
    if not key.startswith("0x"):
        key = "0x" + key
    return key


def _number(env: Mapping[str, str], name: str, default, cast=int):
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None
    if value < 0:
        raise ConfigError(f"{name} must not be negative, got {raw!r}")
    return value


def load_settings(
        env_file: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
) -> Settings:
    """Build Settings from a .env file overlaid with the process environment.

    Values already present in the environment win over the file, the same
    way ``load_dotenv`` behaves without ``override``.
    """
    path = Path(env_file) if env_file is not None else Path.cwd() / DEFAULT_ENV_FILE_NAME
    env: dict[str, str] = {}
    if path.exists():
        env.update({k: v for k, v in dotenv_values(path).items() if v is not None})
    env.update(os.environ if environ is None else environ)

    rpc_url = (env.get("RPC_URL") or "").strip()
    private_key = (env.get("PRIVATE_KEY") or "").strip()
    if not rpc_url or not private_key:
        raise ConfigError("Missing RPC_URL or PRIVATE_KEY in .env")
    private_key = normalize_private_key(private_key)
    if len(private_key) != 66 or not is_hexstr(private_key):
        raise ConfigError("PRIVATE_KEY is not a valid hex key")

    gas_price_gwei = _number(env, "GAS_PRICE_GWEI", HIGH_GAS_PRICE_GWEI, float)
    run_interval_minutes = _number(env, "RUN_INTERVAL_MINUTES", RUN_INTERVAL_MINUTES, float)

    return Settings(
        rpc_url=rpc_url,
        private_key=private_key,
        chain_id=_number(env, "CHAIN_ID", 0),
        gas_price_wei=int(Web3.to_wei(gas_price_gwei, "gwei")),
        main_runs=_number(env, "MAIN_RUNS", MAIN_RUNS_PER_SESSION),
        token_runs=_number(env, "TOKEN_RUNS", TOKEN_RUNS_PER_SESSION),
        run_interval_seconds=run_interval_minutes * 60,
        task_delay_seconds=_number(env, "TASK_DELAY_SECONDS", DELAY_BETWEEN_TASKS_SECONDS, float),
        test_mode=(env.get("TEST_MODE") or "").strip().lower() in TRUE_VALUES,
        log_level=(env.get("LOG_LEVEL") or "INFO").strip().upper(),
    )
