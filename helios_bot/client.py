# helios_bot/client.py

from __future__ import annotations

import asyncio
import logging
from typing import Any, Sequence

import aiohttp
from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_utils import to_checksum_address
from hexbytes import HexBytes
from web3 import AsyncHTTPProvider, AsyncWeb3

from .config import Settings

logger = logging.getLogger(__name__)


class ChainClient:
    """Wallet + public client pair for one account on one chain.

    Every transaction goes out as a legacy tx with the configured fixed gas
    price. Nonce lookup, signing and submission happen under one lock so
    concurrent schedulers sharing the account never reuse a pending nonce.
    """

    def __init__(
            self,
            w3: AsyncWeb3,
            account: LocalAccount,
            *,
            chain_id: int,
            gas_price: int,
            receipt_timeout: float = 180,
    ) -> None:
        self.w3 = w3
        self.account = account
        self.chain_id = chain_id
        self.gas_price = gas_price
        self.receipt_timeout = receipt_timeout
        self._send_lock = asyncio.Lock()

    @property
    def address(self) -> str:
        return self.account.address

    @classmethod
    async def connect(cls, settings: Settings) -> "ChainClient":
        """Open the RPC transport, check it answers and resolve the chain id."""
        provider = AsyncHTTPProvider(
            settings.rpc_url,
            request_kwargs={"timeout": aiohttp.ClientTimeout(total=settings.rpc_timeout_seconds)},
        )
        w3 = AsyncWeb3(provider)
        if not await w3.is_connected():
            raise ConnectionError(f"Could not connect to RPC endpoint {settings.rpc_url}")

        chain_id = settings.chain_id or await w3.eth.chain_id
        account = Account.from_key(settings.private_key)
        logger.info("✅ Connected to %s (chain id %s)", settings.rpc_url, chain_id)
        return cls(
            w3,
            account,
            chain_id=chain_id,
            gas_price=settings.gas_price_wei,
            receipt_timeout=settings.rpc_timeout_seconds,
        )

    def _tx_params(self) -> dict[str, Any]:
        return {
            "from": self.address,
            "gasPrice": self.gas_price,
            "chainId": self.chain_id,
        }

    async def _sign_and_send(self, transaction: dict[str, Any] | None = None, *, call=None) -> HexBytes:
        """Fill in nonce and gas, sign locally and submit.

        ``call`` is a contract function or constructor; web3 encodes it and
        estimates gas through ``build_transaction``.
        """
        async with self._send_lock:
            params = self._tx_params()
            params["nonce"] = await self.w3.eth.get_transaction_count(self.address, "pending")
            if call is not None:
                transaction = await call.build_transaction(params)
            else:
                transaction = {**params, **(transaction or {})}
                if "gas" not in transaction:
                    transaction["gas"] = await self.w3.eth.estimate_gas(transaction)
            signed = self.account.sign_transaction(transaction)
            return await self.w3.eth.send_raw_transaction(signed.raw_transaction)

    async def send_transaction(self, to: str, data: str, value: int = 0) -> HexBytes:
        return await self._sign_and_send({
            "to": to_checksum_address(to),
            "data": data,
            "value": value,
        })

    async def write_contract(
            self,
            address: str,
            abi: list[dict],
            function_name: str,
            args: Sequence[Any] = (),
    ) -> HexBytes:
        contract = self.w3.eth.contract(address=to_checksum_address(address), abi=abi)
        return await self._sign_and_send(call=contract.get_function_by_name(function_name)(*args))

    async def deploy_contract(
            self,
            abi: list[dict],
            bytecode: str,
            args: Sequence[Any] = (),
    ) -> HexBytes:
        contract = self.w3.eth.contract(abi=abi, bytecode=bytecode)
        return await self._sign_and_send(call=contract.constructor(*args))

    async def read_contract(
            self,
            address: str,
            abi: list[dict],
            function_name: str,
            args: Sequence[Any] = (),
    ) -> Any:
        contract = self.w3.eth.contract(address=to_checksum_address(address), abi=abi)
        return await contract.get_function_by_name(function_name)(*args).call()

    async def wait_for_transaction_receipt(self, tx_hash: HexBytes):
        return await self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.receipt_timeout)
