"""
Shared fixtures: an in-memory stand-in for Web3Client and ContractRegistry
"""

import asyncio
from typing import Any, Callable, Dict, List, Optional

import pytest
from eth_account import Account
from eth_utils import keccak, to_checksum_address
from web3 import Web3

from ..config import Config, LOCAL_CHAIN_1ST_ACCOUNT_PK
from ..contracts import ABIS, Artifact, ContractNotConfiguredError


def run(coro):
    return asyncio.run(coro)


class FakeClient:
    """Records writes and answers reads from plain dictionaries"""

    def __init__(self):
        self.account = Account.from_key(LOCAL_CHAIN_1ST_ACCOUNT_PK)
        self.address = self.account.address
        self.minted = set()
        self.views: Dict[str, Any] = {
            "hasMinted": lambda user, challenge_id: challenge_id in self.minted,
        }
        self.on_transact: Dict[str, Callable[..., None]] = {}
        self.transactions: List[tuple] = []
        self.raw_transactions: List[tuple] = []
        self.raw_calls: Dict[str, bytes] = {}
        self.deployments: List[tuple] = []
        self.simulations: List[tuple] = []
        self.storage: Dict[int, bytes] = {}
        self.blocks: Dict[int, Dict[str, Any]] = {}
        self.block_number = 1_000
        self.mined = 0
        self.transfer_logs: List[Dict[str, Any]] = []
        self.log_queries: List[tuple] = []
        self.log_error: Optional[Callable[[int, int], Optional[Exception]]] = None

    def contract(self, address, abi):
        return Web3().eth.contract(address=to_checksum_address(address), abi=abi)

    async def call_function(self, address, abi, function_name, args=None):
        value = self.views[function_name]
        if callable(value):
            return value(*(args or []))
        return value

    async def call_raw(self, to, data):
        return self.raw_calls.get(data, b"")

    async def simulate(self, address, abi, function_name, args=None):
        self.simulations.append((function_name, list(args or [])))

    async def transact(self, address, abi, function_name, args=None, gas=None):
        self.transactions.append((function_name, list(args or []), gas))
        hook = self.on_transact.get(function_name)
        if hook:
            hook(*(args or []))
        return {"status": 1, "blockNumber": self.block_number}

    async def send_raw(self, to, data, gas=None):
        self.raw_transactions.append((to, data))
        hook = self.on_transact.get("raw")
        if hook:
            hook(data)
        return {"status": 1, "blockNumber": self.block_number}

    async def deploy_contract(self, abi, bytecode, args=None):
        address = to_checksum_address(keccak(text=f"deployment-{len(self.deployments)}")[12:])
        self.deployments.append((bytecode, list(args or []), address))
        hook = self.on_transact.get("deploy_contract")
        if hook:
            hook(address, *(args or []))
        return {"status": 1, "contractAddress": address}

    async def get_storage_at(self, address, slot):
        return self.storage.get(slot, b"\x00" * 32)

    async def get_block_number(self):
        return self.block_number

    async def get_block(self, block_number):
        return self.blocks[block_number]

    async def mine_block(self):
        self.mined += 1
        self.block_number += 1

    async def wait_for_block(self, target_block):
        self.block_number = max(self.block_number, target_block)
        return self.block_number

    async def get_transfer_logs(self, address, abi, recipient, from_block, to_block):
        self.log_queries.append((from_block, to_block))
        if self.log_error:
            error = self.log_error(from_block, to_block)
            if error:
                raise error
        return [
            log for log in self.transfer_logs
            if from_block <= log["blockNumber"] <= to_block
        ]


class FakeRegistry:
    """Deterministic addresses and empty-but-valid artifacts"""

    def __init__(self):
        self.artifacts_loaded: List[str] = []

    def address(self, name):
        return to_checksum_address(keccak(text=name)[12:])

    def abi(self, name):
        if name not in ABIS:
            raise ContractNotConfiguredError(f"No ABI known for {name}")
        return ABIS[name]

    def load_artifact(self, name):
        self.artifacts_loaded.append(name)
        return Artifact(name=name, abi=[], bytecode="0x6080604052")


@pytest.fixture
def config():
    return Config(local=True, lookback_blocks=5_000_000)


@pytest.fixture
def client():
    return FakeClient()


@pytest.fixture
def registry():
    return FakeRegistry()
