# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from hexbytes import HexBytes

FAKE_ADDRESS = "0x81860e8FEC3115E6809BE409cF5059A91b7bE83E"


@dataclass
class Call:
    method: str
    kwargs: dict[str, Any]


@dataclass
class FakeChainClient:
    """
    Stand-in for ChainClient.

    - Records every submit/read/wait call in order
    - Answers receipts with ``status`` (1 = success, 0 = reverted)
    - ``fail_on`` names a method that raises instead of answering
    """

    status: int = 1
    allowance: int = 0
    fail_on: str | None = None
    address: str = FAKE_ADDRESS
    calls: list[Call] = field(default_factory=list)
    block_number: int = 100

    def _record(self, method: str, **kwargs: Any) -> HexBytes:
        self.calls.append(Call(method, kwargs))
        if self.fail_on == method:
            raise RuntimeError(f"{method} exploded")
        return HexBytes(len(self.calls).to_bytes(32, "big"))

    def methods(self) -> list[str]:
        return [c.method for c in self.calls]

    async def send_transaction(self, to: str, data: str, value: int = 0) -> HexBytes:
        return self._record("send_transaction", to=to, data=data, value=value)

    async def write_contract(self, address, abi, function_name, args=()) -> HexBytes:
        return self._record("write_contract", address=address, function_name=function_name, args=list(args))

    async def deploy_contract(self, abi, bytecode, args=()) -> HexBytes:
        return self._record("deploy_contract", bytecode=bytecode, args=list(args))

    async def read_contract(self, address, abi, function_name, args=()):
        self._record("read_contract", address=address, function_name=function_name, args=list(args))
        return self.allowance

    async def wait_for_transaction_receipt(self, tx_hash):
        self._record("wait_for_transaction_receipt", tx_hash=tx_hash)
        self.block_number += 1
        return {
            "status": self.status,
            "blockNumber": self.block_number,
            "transactionHash": tx_hash,
            "contractAddress": "0x000000000000000000000000000000000000c0de",
        }


class FakeSleep:
    """Records requested pauses without waiting."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
