# helios_bot/tasks.py

"""On-chain actions run by the schedulers.

Each task submits through the ChainClient, waits for the receipt and logs
the outcome. A reverted transaction is only logged; client and network
errors propagate to the scheduler.
"""

from __future__ import annotations

import asyncio
import logging
import random
import secrets
import time

from eth_utils import encode_hex
from web3 import Web3

from . import config
from .client import ChainClient

logger = logging.getLogger(__name__)

MAX_UINT256 = 2 ** 256 - 1

# --- 1. Contracts and payloads ---

COUNTER_ABI = [
    {"inputs": [], "name": "count", "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}], "stateMutability": "view", "type": "function"},
    {"inputs": [], "name": "increment", "outputs": [], "stateMutability": "nonpayable", "type": "function"},
]
COUNTER_BYTECODE = '0x608060405234801561001057600080fd5b50610100806100206000396000f3fe6080604052348015600f57600080fd5b506004361060325760003560e01c806360fe47b11460375780638381f58a146059575b600080fd5b605760048036038101906053565b6076565b005b605f607e565b604051606c9190608d565b60405180910390f35b60008054905090565b60005481565b600080546001019055565b608791905b80821115609d576000818152602081019051609392919160010160a3565b505050565b60006020828403121560b457600080fd5b503591905056fea2646970667358221220a2e51921201a9160358e2d46e279a1f7344b5fb227f722955f240214a1c09b3064736f6c63430008090033'

TOKEN_DEPLOYER_ADDRESS = '0x0000000000000000000000000000000000000806'
TOKEN_DEPLOYER_ABI = [
    {
        "inputs": [
            {"internalType": "string", "name": "name", "type": "string"},
            {"internalType": "string", "name": "symbol", "type": "string"},
            {"internalType": "string", "name": "denom", "type": "string"},
            {"internalType": "uint256", "name": "totalSupply", "type": "uint256"},
            {"internalType": "uint8", "name": "decimals", "type": "uint8"},
            {"internalType": "string", "name": "logoBase64", "type": "string"},
        ],
        "name": "createErc20",
        "outputs": [{"internalType": "address", "name": "tokenAddress", "type": "address"}],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]
TOKEN_DECIMALS = 18
TOKEN_TOTAL_SUPPLY = 1_000_000

NFT_CONTRACT_ADDRESS = '0x9b0C569E2F63CEC5066f9f13C78bA0C6777322aa'
NFT_MINT_DATA = '0x57bc3d7800000000000000000000000081860e8fec3115e6809be409cf5059a91b7be83e00000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000001000000000000000000000000eeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeee000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000e0000000000000000000000000000000000000000000000000000000000000018000000000000000000000000000000000000000000000000000000000000000800000000000000000000000000000000000000000000000000000000000000000ffffffffffffffffffffffffffffffffffffffffffffffffffffffffffffffff000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000'

# (label, contract, calldata) in execution order
CLAIM_AND_BURN_STEPS = [
    ('Claiming ORE', '0x0B1Bb8520a3443b43FA66B123f6C69aEBa41e7Cc', '0x4e71d92d'),
    ('Claiming MLUNARI', '0xEb3D9727D5bcAf5F792FA2eCFF73f6A9448c036B',
     '0x1e83409a000000000000000000000000c36e9b957e218cda978bd1b95745f15d8cedb3c4'),
    ('Approving ORE for burn', '0xC36e9B957E218cDa978bd1B95745f15d8CEDb3C4',
     '0x095ea7b3000000000000000000000000eb3d9727d5bcaf5f792fa2ecff73f6a9448c036b0000000000000000000000000000000000000000000000000de0b6b3a7640000'),
    ('Burning ORE', '0xEb3D9727D5bcAf5F792FA2eCFF73f6A9448c036B',
     '0xf4ec95d5000000000000000000000000c36e9b957e218cda978bd1b95745f15d8cedb3c40000000000000000000000000000000000000000000000000de0b6b3a7640000'),
]

SWAP_ROUTER_ADDRESS = '0x512320fC42aCFAdc0f6aDA03626a76eD726fDA63'
HLS_TOKEN_ADDRESS = '0xD4949664cD82660AaE99bEdc034a0deA8A0bd517'
WETH_TOKEN_ADDRESS = '0x80b5a32E4F032B2a058b4F29EC95EEfEEB87aDcd'
SWAP_FEE_TIER = 3000
SWAP_AMOUNT_IN = 1
SWAP_DEADLINE_SECONDS = 600
ERC20_ABI = [
    {"type": "function", "name": "allowance", "stateMutability": "view",
     "inputs": [{"name": "owner", "type": "address"}, {"name": "spender", "type": "address"}],
     "outputs": [{"name": "", "type": "uint256"}]},
    {"type": "function", "name": "approve", "stateMutability": "nonpayable",
     "inputs": [{"name": "spender", "type": "address"}, {"name": "amount", "type": "uint256"}],
     "outputs": [{"name": "", "type": "bool"}]},
]
SWAP_ROUTER_ABI = [
    {
        "type": "function",
        "name": "exactInputSingle",
        "stateMutability": "payable",
        "inputs": [{
            "components": [
                {"internalType": "address", "name": "tokenIn", "type": "address"},
                {"internalType": "address", "name": "tokenOut", "type": "address"},
                {"internalType": "uint24", "name": "fee", "type": "uint24"},
                {"internalType": "address", "name": "recipient", "type": "address"},
                {"internalType": "uint256", "name": "deadline", "type": "uint256"},
                {"internalType": "uint256", "name": "amountIn", "type": "uint256"},
                {"internalType": "uint256", "name": "amountOutMinimum", "type": "uint256"},
                {"internalType": "uint160", "name": "sqrtPriceLimitX96", "type": "uint160"},
            ],
            "internalType": "struct ISwapRouter.ExactInputSingleParams",
            "name": "params",
            "type": "tuple",
        }],
        "outputs": [{"internalType": "uint256", "name": "amountOut", "type": "uint256"}],
    },
]

MINTPAD_CONTRACT_ADDRESS = '0xaaae0243007AA3000000d8e8bEeF0a944A0d3900'
# Wallet address embedded in the template; the 32-byte salt follows it.
MINTPAD_SALT_MARKER = '81860e8fec3115e6809be409cf5059a91b7be83e'
MINTPAD_TEMPLATE_DATA = '0x00000000000000000000000000000000000000000000000000000000000000000000006081860e8fec3115e6809be409cf5059a91b7be83ebbda4e0bb46bd9a50509b579000000000000000000000000000000000000000000000000000000000099000000000000000000000000000000000000000000000000000000000000000002440000000100000000000000000000000000000000000000000000000000000000000000c00000000000000000000000000000000000000000000000000000000000000100000000000000000000000000000000000000000000000000000000018cf78900000000000000000000000000000000000000000000000000000000000000000000000018000402ee0000000081860e8fec3115e6809be409cf5059a91b7be83e0000000000000000000000000000000000000000000000000000000000000140000000000000000000000000000000000000000000000000000000000000000561776461770000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000003415744000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000e00000000000000000000000000000000000000000000000000000000000000060000000000000000000000000000000000000000000000000000000000000008000000000000000000000000000000000000000000000000000000000000000c00000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000868747470733a2f2f000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000000'


# --- 2. Helpers ---

def _succeeded(receipt) -> bool:
    return receipt["status"] == 1


def build_mintpad_payload(template: str, salt_hex: str, marker: str = MINTPAD_SALT_MARKER) -> str:
    """Return ``template`` with the 64 hex chars after ``marker`` replaced by ``salt_hex``."""
    if len(salt_hex) != 64:
        raise ValueError(f"salt must be 32 bytes (64 hex chars), got {len(salt_hex)}")
    position = template.find(marker)
    if position < 0:
        raise ValueError("salt marker not found in Mintpad template")
    start = position + len(marker)
    return template[:start] + salt_hex + template[start + 64:]


async def send_subtask(client: ChainClient, to: str, data: str) -> bool:
    tx_hash = await client.send_transaction(to=to, data=data)
    receipt = await client.wait_for_transaction_receipt(tx_hash)
    if _succeeded(receipt):
        logger.info("    ✅ Success! Block: %s", receipt["blockNumber"])
        return True
    logger.warning("    ❌ Failed.")
    return False


# --- 3. Tasks ---

async def deploy_counter_contract(client: ChainClient) -> None:
    logger.info("--- TASK 1: Deploying a new Smart Contract ---")
    tx_hash = await client.deploy_contract(abi=COUNTER_ABI, bytecode=COUNTER_BYTECODE)
    logger.info("  ⛓  Deploy Tx Hash: %s", encode_hex(tx_hash))
    receipt = await client.wait_for_transaction_receipt(tx_hash)

    if _succeeded(receipt):
        logger.info("  ✅ Contract Deployed! Address: %s, Block: %s",
                    receipt["contractAddress"], receipt["blockNumber"])
    else:
        logger.warning("  ❌ Contract deployment failed.")


async def create_token(client: ChainClient) -> None:
    """Create a randomly named ERC20 through the token deployer precompile."""
    logger.info("--- TASK 2: Creating a new ERC20 Token ---")
    name = f"AutoToken{random.randint(0, 9999)}"
    symbol = f"ATK{random.randint(0, 999)}"
    denom = f"a{symbol.lower()}-{int(time.time() * 1000)}"
    total_supply = Web3.to_wei(TOKEN_TOTAL_SUPPLY, "ether")

    tx_hash = await client.write_contract(
        address=TOKEN_DEPLOYER_ADDRESS,
        abi=TOKEN_DEPLOYER_ABI,
        function_name="createErc20",
        args=[name, symbol, denom, total_supply, TOKEN_DECIMALS, ""],
    )
    logger.info("  ⛓  Tx Hash: %s", encode_hex(tx_hash))
    receipt = await client.wait_for_transaction_receipt(tx_hash)

    if _succeeded(receipt):
        logger.info("  ✅ Token %s (%s) Created! Block: %s", name, symbol, receipt["blockNumber"])
    else:
        logger.warning("  ❌ Token creation failed.")


async def mint_nft(client: ChainClient) -> None:
    logger.info("--- TASK 3: Minting an NFT ---")
    tx_hash = await client.send_transaction(to=NFT_CONTRACT_ADDRESS, data=NFT_MINT_DATA)
    logger.info("  ⛓  Tx Hash: %s", encode_hex(tx_hash))
    receipt = await client.wait_for_transaction_receipt(tx_hash)

    if _succeeded(receipt):
        logger.info("  ✅ NFT Minted! Block: %s", receipt["blockNumber"])
    else:
        logger.warning("  ❌ NFT mint failed.")


async def claim_and_burn(client: ChainClient, *, sleep=asyncio.sleep) -> None:
    """Claim ORE and MLUNARI, then approve and burn ORE."""
    logger.info("--- TASK 4: Claim & Burn Sequence (%d Steps) ---", len(CLAIM_AND_BURN_STEPS))
    for number, (label, to, data) in enumerate(CLAIM_AND_BURN_STEPS, start=1):
        if number > 1:
            await sleep(config.DELAY_BETWEEN_SUBTASKS_SECONDS)
        logger.info("  ➡️  %d. %s...", number, label)
        await send_subtask(client, to, data)


async def swap_tokens(client: ChainClient) -> None:
    """Swap HLS for WETH, approving the router first when the allowance is short."""
    logger.info("--- TASK 5: Swapping HLS for WETH ---")
    amount_in = Web3.to_wei(SWAP_AMOUNT_IN, "ether")

    allowance = await client.read_contract(
        address=HLS_TOKEN_ADDRESS,
        abi=ERC20_ABI,
        function_name="allowance",
        args=[client.address, SWAP_ROUTER_ADDRESS],
    )
    if allowance < amount_in:
        logger.info("  - Approving token for swap...")
        approve_hash = await client.write_contract(
            address=HLS_TOKEN_ADDRESS,
            abi=ERC20_ABI,
            function_name="approve",
            args=[SWAP_ROUTER_ADDRESS, MAX_UINT256],
        )
        approve_receipt = await client.wait_for_transaction_receipt(approve_hash)
        if _succeeded(approve_receipt):
            logger.info("  ✅ Approval complete.")
        else:
            logger.warning("  ❌ Approval failed.")
    else:
        logger.info("  - Token already approved.")

    logger.info("  - Executing swap...")
    deadline = int(time.time()) + SWAP_DEADLINE_SECONDS
    # ExactInputSingleParams, in struct order
    swap_params = (
        HLS_TOKEN_ADDRESS,
        WETH_TOKEN_ADDRESS,
        SWAP_FEE_TIER,
        client.address,
        deadline,
        amount_in,
        0,
        0,
    )
    swap_hash = await client.write_contract(
        address=SWAP_ROUTER_ADDRESS,
        abi=SWAP_ROUTER_ABI,
        function_name="exactInputSingle",
        args=[swap_params],
    )
    receipt = await client.wait_for_transaction_receipt(swap_hash)

    if _succeeded(receipt):
        logger.info("  ✅ Swap successful! Block: %s", receipt["blockNumber"])
    else:
        logger.warning("  ❌ Swap failed.")


async def create_mintpad_nft(client: ChainClient) -> None:
    logger.info("--- TASK 6: Creating Mintpad NFT (Dynamic Salt) ---")
    salt = secrets.token_hex(32)
    data = build_mintpad_payload(MINTPAD_TEMPLATE_DATA, salt)
    logger.info("  - Generated new salt: %s...", salt[:10])

    tx_hash = await client.send_transaction(to=MINTPAD_CONTRACT_ADDRESS, data=data)
    logger.info("  ⛓  Tx Hash: %s", encode_hex(tx_hash))
    receipt = await client.wait_for_transaction_receipt(tx_hash)

    if _succeeded(receipt):
        logger.info("  ✅ Mintpad NFT Created! Block: %s", receipt["blockNumber"])
    else:
        logger.warning("  ❌ Mintpad NFT creation failed.")


MAIN_TASKS = [
    deploy_counter_contract,
    mint_nft,
    claim_and_burn,
    swap_tokens,
    create_mintpad_nft,
]
TOKEN_TASKS = [create_token]
