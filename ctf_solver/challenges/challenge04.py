"""
Challenge 4 - Encoding

mintFlag(minter, signature) accepts an EIP-191 signature over
keccak256(abi.encode("BG CTF Challenge 4", msg.sender)) from any registered
minter. The deploy script registers an account derived from the public
hardhat mnemonic, so its key is known.
"""

from typing import Optional

from eth_abi import encode
from eth_account import Account
from eth_account.messages import encode_defunct
from eth_account.signers.local import LocalAccount
from eth_utils import keccak

from ..config import HARDHAT_MNEMONIC
from .base import BaseChallenge, ChallengeResult

MESSAGE_TAG = "BG CTF Challenge 4"
MINTER_INDEX = 12
MINTER_SEARCH_RANGE = 20

Account.enable_unaudited_hdwallet_features()


def derive_hardhat_account(index: int) -> LocalAccount:
    return Account.from_mnemonic(HARDHAT_MNEMONIC, account_path=f"m/44'/60'/0'/0/{index}")


def message_hash(sender: str) -> bytes:
    """keccak256(abi.encode("BG CTF Challenge 4", sender))"""
    return keccak(encode(["string", "address"], [MESSAGE_TAG, sender]))


def sign_mint_message(minter: LocalAccount, sender: str) -> bytes:
    """Sign the raw 32-byte hash with the EIP-191 personal-message prefix"""
    signed = minter.sign_message(encode_defunct(primitive=message_hash(sender)))
    return bytes(signed.signature)


class SignatureChallenge(BaseChallenge):
    """Forge a minter signature with a key derived from the hardhat mnemonic"""

    challenge_id = 4

    def get_name(self) -> str:
        return "Encoding"

    def get_description(self) -> str:
        return "Sign abi.encode('BG CTF Challenge 4', msg.sender) with the hardhat minter key"

    async def find_minter(self) -> Optional[LocalAccount]:
        """Account #12 is the registered minter; scan the first 20 otherwise"""
        minter = derive_hardhat_account(MINTER_INDEX)
        if await self.call("Challenge4", "isMinter", [minter.address]):
            return minter

        self.logger.warning(f"❌ Account #{MINTER_INDEX} is not registered as minter")
        self.logger.info("🔍 Checking other account indices...")

        for index in range(MINTER_SEARCH_RANGE):
            if index == MINTER_INDEX:
                continue
            candidate = derive_hardhat_account(index)
            if await self.call("Challenge4", "isMinter", [candidate.address]):
                self.logger.info(f"✅ Found minter! Index {index}: {candidate.address}")
                return candidate

        return None

    async def execute(self) -> ChallengeResult:
        completed = await self.check_already_completed()
        if completed:
            return completed

        minter = await self.find_minter()
        if minter is None:
            return self._create_result(
                False,
                error_message="Minter account not found; re-run the deploy script to add a minter",
            )

        self.logger.info(f"📝 Minter address: {minter.address}")
        signature = sign_mint_message(minter, self.client.address)
        self.logger.info(f"📝 Signature: 0x{signature.hex()}")

        await self.transact("Challenge4", "mintFlag", [minter.address, signature])

        return self._create_result(True, {
            "minter": minter.address,
            "signature": "0x" + signature.hex(),
        })
