# tests/test_tasks.py

from __future__ import annotations

import logging

import pytest

from helios_bot import config, tasks

from .fakes import FakeChainClient, FakeSleep


@pytest.mark.asyncio
async def test_deploy_counter_contract_logs_address(caplog) -> None:
    client = FakeChainClient()

    with caplog.at_level(logging.INFO, logger="helios_bot.tasks"):
        await tasks.deploy_counter_contract(client)

    assert client.methods() == ["deploy_contract", "wait_for_transaction_receipt"]
    assert client.calls[0].kwargs["bytecode"] == tasks.COUNTER_BYTECODE
    assert "0x000000000000000000000000000000000000c0de" in caplog.text


@pytest.mark.asyncio
async def test_reverted_receipt_is_logged_not_raised(caplog) -> None:
    client = FakeChainClient(status=0)

    with caplog.at_level(logging.INFO, logger="helios_bot.tasks"):
        await tasks.mint_nft(client)

    assert "❌ NFT mint failed." in caplog.text
    assert "✅" not in caplog.text


@pytest.mark.asyncio
async def test_client_errors_propagate() -> None:
    client = FakeChainClient(fail_on="send_transaction")

    with pytest.raises(RuntimeError, match="send_transaction exploded"):
        await tasks.mint_nft(client)


@pytest.mark.asyncio
async def test_create_token_arguments() -> None:
    client = FakeChainClient()

    await tasks.create_token(client)

    call = client.calls[0]
    assert call.method == "write_contract"
    assert call.kwargs["address"] == tasks.TOKEN_DEPLOYER_ADDRESS
    assert call.kwargs["function_name"] == "createErc20"
    name, symbol, denom, total_supply, decimals, logo = call.kwargs["args"]
    assert name.startswith("AutoToken") and 0 <= int(name[len("AutoToken"):]) <= 9999
    assert symbol.startswith("ATK") and 0 <= int(symbol[3:]) <= 999
    assert denom.startswith(f"a{symbol.lower()}-")
    assert total_supply == 1_000_000 * 10 ** 18
    assert decimals == 18
    assert logo == ""


@pytest.mark.asyncio
async def test_claim_and_burn_runs_four_steps_in_order() -> None:
    client = FakeChainClient()

    await tasks.claim_and_burn(client)

    sends = [c.kwargs for c in client.calls if c.method == "send_transaction"]
    assert [(s["to"], s["data"]) for s in sends] == [(to, data) for _, to, data in tasks.CLAIM_AND_BURN_STEPS]
    assert client.methods().count("wait_for_transaction_receipt") == 4


@pytest.mark.asyncio
async def test_claim_and_burn_pauses_between_steps_only(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "DELAY_BETWEEN_SUBTASKS_SECONDS", 5)
    client = FakeChainClient()
    pauses = FakeSleep()

    await tasks.claim_and_burn(client, sleep=pauses)

    assert pauses.calls == [5, 5, 5]
    assert client.methods().count("send_transaction") == 4


@pytest.mark.asyncio
async def test_swap_approves_when_allowance_is_short() -> None:
    client = FakeChainClient(allowance=0)

    await tasks.swap_tokens(client)

    assert client.methods() == [
        "read_contract",
        "write_contract",
        "wait_for_transaction_receipt",
        "write_contract",
        "wait_for_transaction_receipt",
    ]
    approve, swap = [c.kwargs for c in client.calls if c.method == "write_contract"]
    assert approve["function_name"] == "approve"
    assert approve["args"] == [tasks.SWAP_ROUTER_ADDRESS, tasks.MAX_UINT256]
    assert swap["function_name"] == "exactInputSingle"
    (params,) = swap["args"]
    assert params[0] == tasks.HLS_TOKEN_ADDRESS
    assert params[1] == tasks.WETH_TOKEN_ADDRESS
    assert params[2] == 3000
    assert params[3] == client.address
    assert params[5] == 10 ** 18
    assert params[6:] == (0, 0)


@pytest.mark.asyncio
async def test_swap_skips_approval_when_already_approved(caplog) -> None:
    client = FakeChainClient(allowance=tasks.MAX_UINT256)

    with caplog.at_level(logging.INFO, logger="helios_bot.tasks"):
        await tasks.swap_tokens(client)

    assert client.methods() == ["read_contract", "write_contract", "wait_for_transaction_receipt"]
    assert "Token already approved" in caplog.text


@pytest.mark.asyncio
async def test_mintpad_uses_fresh_salt_each_call() -> None:
    client = FakeChainClient()

    await tasks.create_mintpad_nft(client)
    await tasks.create_mintpad_nft(client)

    first, second = [c.kwargs["data"] for c in client.calls if c.method == "send_transaction"]
    assert first != second
    assert len(first) == len(tasks.MINTPAD_TEMPLATE_DATA)


def test_mintpad_payload_replaces_segment_after_marker() -> None:
    marker = "ab" * 20
    template = "0x" + "11" * 4 + marker + "22" * 32 + "33" * 4
    salt = "f" * 64

    payload = tasks.build_mintpad_payload(template, salt, marker=marker)

    assert payload == "0x" + "11" * 4 + marker + salt + "33" * 4


def test_mintpad_template_is_valid_hex() -> None:
    body = tasks.MINTPAD_TEMPLATE_DATA[2:]
    assert len(body) % 2 == 0
    bytes.fromhex(body)


@pytest.mark.parametrize(
    "template, salt",
    [
        ("0x" + "00" * 64, "f" * 64),
        ("0x" + tasks.MINTPAD_SALT_MARKER + "00" * 32, "f" * 10),
    ],
)
def test_mintpad_payload_rejects_bad_input(template, salt) -> None:
    with pytest.raises(ValueError):
        tasks.build_mintpad_payload(template, salt)
