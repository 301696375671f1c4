"""
Challenge 11 - CREATE2 prediction

mintFlag requires msg.sender != tx.origin and
(lastByte(msg.sender) & 0x15) == (lastByte(tx.origin) & 0x15). A caller
contract is deployed through CREATE2 at a salt chosen so its address matches.
"""

from ..create2 import LAST_BYTE_MASK, find_salt, last_byte_matches
from .base import BaseChallenge, ChallengeError, ChallengeResult


class Create2Challenge(BaseChallenge):
    """Grind a CREATE2 salt for a caller whose address bits match our EOA"""

    challenge_id = 11

    def get_name(self) -> str:
        return "CREATE2 Prediction"

    def get_description(self) -> str:
        return "Deploy C11Caller via C11Factory at an address matching lastByte & 0x15"

    async def execute(self) -> ChallengeResult:
        if not await self.has_minted(1):
            raise ChallengeError("This address has not completed Challenge 1")

        completed = await self.check_already_completed()
        if completed:
            return completed

        factory_artifact = self.registry.load_artifact("C11Factory")
        caller_artifact = self.registry.load_artifact("C11Caller")

        self.logger.info("🏗️ Deploying Factory contract...")
        receipt = await self.client.deploy_contract(factory_artifact.abi, factory_artifact.bytecode)
        factory_address = receipt["contractAddress"]
        self.logger.info(f"✅ Factory: {factory_address}")

        eoa = self.client.address
        want_bits = int(eoa[-2:], 16) & LAST_BYTE_MASK
        self.logger.info(f"🔍 Searching for address with bits 0x{want_bits:02x} (EOA last byte 0x{eoa[-2:]})")

        salt, caller_address = find_salt(
            factory_address,
            caller_artifact.bytecode,
            lambda candidate: last_byte_matches(candidate, eoa),
        )

        self.logger.info(f"🎯 Deploying Caller at {caller_address}...")
        await self.client.transact(
            factory_address, factory_artifact.abi, "deploy", [salt, caller_artifact.bytecode]
        )

        self.logger.info("🚀 Executing mintFlag() through Caller...")
        await self.client.transact(
            caller_address, caller_artifact.abi, "run", [self.registry.address("Challenge11")]
        )

        data = {
            "factory_address": factory_address,
            "caller_address": caller_address,
            "salt": "0x" + salt.hex(),
        }
        if not await self.has_minted():
            return self._create_result(False, data, error_message="Transaction succeeded but flag was not minted")

        return self._create_result(True, data)
