"""
Web3 Client for the CTF solver - Blockchain interaction wrapper
"""

import asyncio
import logging
from typing import Dict, Any, Optional, List, Union

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_utils import to_checksum_address
from web3 import Web3
from web3.contract import Contract

from .config import Config


class TransactionFailedError(Exception):
    """A mined transaction reverted"""

    def __init__(self, tx_hash: str, description: str = "Transaction"):
        self.tx_hash = tx_hash
        super().__init__(f"{description} failed: {tx_hash}")


class Web3Client:
    """
    Web3 wrapper for blockchain interactions

    Features:
    - Signed transactions from the configured wallet
    - Contract deployment with constructor arguments
    - View calls, dry-run calls and raw storage reads
    - Waiting for future blocks (polling, or mining on a local node)
    """

    def __init__(self, config: Config):
        self.config = config
        self.logger = logging.getLogger(__name__)

        self.chain_config = config.get_chain_config(config.chain_id)
        self.account: LocalAccount = Account.from_key(config.private_key)

        self._w3: Optional[Web3] = None

    @property
    def address(self) -> str:
        return self.account.address

    def get_web3(self) -> Web3:
        """Get Web3 connection for the active chain"""

        if self._w3 is not None:
            return self._w3

        rpc_url = self.chain_config.get("rpc_url")
        if not rpc_url:
            raise ConnectionError(f"No RPC URL configured for chain {self.config.chain_id}")

        w3 = Web3(Web3.HTTPProvider(rpc_url))

        if not w3.is_connected():
            raise ConnectionError(f"Failed to connect to chain {self.config.chain_id} RPC: {rpc_url}")

        self._w3 = w3
        self.logger.info(f"Connected to {self.chain_config['name']}: block {w3.eth.block_number}")
        return w3

    def contract(self, address: str, abi: List[Dict[str, Any]]) -> Contract:
        """Contract instance bound to the active connection"""
        return self.get_web3().eth.contract(address=to_checksum_address(address), abi=abi)

    async def get_block_number(self) -> int:
        return self.get_web3().eth.block_number

    async def get_block(self, block_number: Union[int, str]) -> Dict[str, Any]:
        """Fetch a block header (without transactions)"""
        return self.get_web3().eth.get_block(block_number, full_transactions=False)

    async def get_storage_at(self, address: str, slot: int) -> bytes:
        """Read a raw storage slot"""
        return bytes(self.get_web3().eth.get_storage_at(to_checksum_address(address), slot))

    async def call_function(
        self,
        address: str,
        abi: List[Dict[str, Any]],
        function_name: str,
        args: Optional[List[Any]] = None,
    ) -> Any:
        """Call a contract view function"""
        contract = self.contract(address, abi)
        function = contract.get_function_by_name(function_name)
        return function(*(args or [])).call({"from": self.address})

    async def call_raw(self, to: str, data: str) -> bytes:
        """eth_call with raw calldata"""
        result = self.get_web3().eth.call({
            "from": self.address,
            "to": to_checksum_address(to),
            "data": data,
        })
        return bytes(result)

    async def simulate(
        self,
        address: str,
        abi: List[Dict[str, Any]],
        function_name: str,
        args: Optional[List[Any]] = None,
    ) -> None:
        """Dry-run a state-changing call; raises if it would revert"""
        contract = self.contract(address, abi)
        function = contract.get_function_by_name(function_name)
        function(*(args or [])).call({"from": self.address})

    def _base_transaction(self, nonce: Optional[int] = None) -> Dict[str, Any]:
        w3 = self.get_web3()
        return {
            "from": self.address,
            "nonce": nonce if nonce is not None else w3.eth.get_transaction_count(self.address, "pending"),
            "chainId": self.config.chain_id,
            "gasPrice": w3.eth.gas_price,
        }

    async def _send(self, tx: Dict[str, Any], description: str) -> Dict[str, Any]:
        """Sign, send and wait for a transaction receipt"""
        w3 = self.get_web3()

        if "gas" not in tx:
            tx["gas"] = w3.eth.estimate_gas(tx)

        signed = self.account.sign_transaction(tx)
        tx_hash = w3.eth.send_raw_transaction(signed.raw_transaction)
        self.logger.info(f"   TX: {Web3.to_hex(tx_hash)}")

        receipt = w3.eth.wait_for_transaction_receipt(tx_hash)
        if receipt["status"] != 1:
            raise TransactionFailedError(Web3.to_hex(tx_hash), description)

        self.logger.info(f"   ✅ Mining complete - Block: {receipt['blockNumber']}")
        return receipt

    async def transact(
        self,
        address: str,
        abi: List[Dict[str, Any]],
        function_name: str,
        args: Optional[List[Any]] = None,
        gas: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Send a contract function call and wait for it to be mined"""
        contract = self.contract(address, abi)
        function = contract.get_function_by_name(function_name)

        tx_params = self._base_transaction()
        if gas is not None:
            tx_params["gas"] = gas

        tx = function(*(args or [])).build_transaction(tx_params)
        return await self._send(tx, f"{function_name}()")

    async def send_raw(self, to: str, data: str, gas: Optional[int] = None) -> Dict[str, Any]:
        """Send a transaction with hand-built calldata"""
        tx = self._base_transaction()
        tx.update({"to": to_checksum_address(to), "data": data, "value": 0})
        if gas is not None:
            tx["gas"] = gas
        return await self._send(tx, f"call to {to}")

    async def deploy_contract(
        self,
        abi: List[Dict[str, Any]],
        bytecode: str,
        args: Optional[List[Any]] = None,
    ) -> Dict[str, Any]:
        """Deploy a contract; the receipt carries ``contractAddress``"""
        factory = self.get_web3().eth.contract(abi=abi, bytecode=bytecode)
        tx = factory.constructor(*(args or [])).build_transaction(self._base_transaction())
        receipt = await self._send(tx, "Deployment")

        if not receipt.get("contractAddress"):
            raise TransactionFailedError(Web3.to_hex(receipt["transactionHash"]), "Deployment")

        return receipt

    async def mine_block(self) -> None:
        """Mine one block on a local hardhat node"""
        self.get_web3().provider.make_request("evm_mine", [])

    async def wait_for_block(self, target_block: int) -> int:
        """
        Wait until the chain reaches ``target_block``

        Local nodes are mined forward; remote chains are polled at a fixed
        interval with no upper bound (callers enforce their own deadline).
        """
        current = await self.get_block_number()

        if current >= target_block:
            return current

        if self.chain_config.get("can_mine"):
            blocks_to_mine = target_block - current
            self.logger.info(f"   ⛏️ Local environment: Mining {blocks_to_mine} blocks...")
            for _ in range(blocks_to_mine):
                await self.mine_block()
            return await self.get_block_number()

        self.logger.info(f"   ⏳ Waiting for block {target_block}...")
        while current < target_block:
            remaining = target_block - current
            self.logger.info(
                f"      Remaining {remaining} blocks (~{remaining * self.config.block_poll_interval:.0f} seconds)"
            )
            await asyncio.sleep(self.config.block_poll_interval)
            current = await self.get_block_number()

        self.logger.info(f"      New block: {current}")
        return current

    async def get_transfer_logs(
        self,
        address: str,
        abi: List[Dict[str, Any]],
        recipient: str,
        from_block: int,
        to_block: int,
    ) -> List[Dict[str, Any]]:
        """ERC721 Transfer events to ``recipient`` within a block range"""
        contract = self.contract(address, abi)
        return list(contract.events.Transfer.get_logs(
            argument_filters={"to": to_checksum_address(recipient)},
            from_block=from_block,
            to_block=to_block,
        ))
