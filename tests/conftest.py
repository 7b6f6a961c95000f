# tests/conftest.py

from __future__ import annotations

import pytest

from helios_bot import config
from helios_bot.config import Settings

from .fakes import FakeChainClient, FakeSleep

TEST_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        rpc_url="http://localhost:8545",
        private_key=TEST_KEY,
        chain_id=42000,
        main_runs=2,
        token_runs=1,
        run_interval_seconds=0,
        task_delay_seconds=0,
    )


@pytest.fixture()
def client() -> FakeChainClient:
    return FakeChainClient()


@pytest.fixture()
def fake_sleep() -> FakeSleep:
    return FakeSleep()


@pytest.fixture(autouse=True)
def no_subtask_delay(monkeypatch: pytest.MonkeyPatch) -> None:
    """claim_and_burn pauses between steps; keep tests instant."""
    monkeypatch.setattr(config, "DELAY_BETWEEN_SUBTASKS_SECONDS", 0)
