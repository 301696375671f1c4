"""
Challenge 12 - RLP header verification

preMintFlag() records the current block; mintFlag(header) then needs the RLP
header of recorded block + 2, checked against blockhash(), which only covers
the last 256 blocks.
"""

from ..header import reconstruct_from_block
from .base import BaseChallenge, ChallengeError, ChallengeResult

TARGET_OFFSET = 2


class HeaderProofChallenge(BaseChallenge):
    """Rebuild the exact header RLP of a future block and submit it"""

    challenge_id = 12

    def get_name(self) -> str:
        return "RLP Verification"

    def get_description(self) -> str:
        return "Record a block with preMintFlag(), then submit the RLP header of block + 2"

    async def recorded_block(self) -> int:
        return await self.call("Challenge12", "blockNumber", [self.client.address])

    async def pre_mint(self) -> int:
        self.logger.info("📝 Step 1: Execute preMintFlag()")
        await self.transact("Challenge12", "preMintFlag")
        recorded = await self.recorded_block()
        self.logger.info(f"   📌 Recorded block: {recorded}")
        return recorded

    async def ensure_pre_mint(self) -> int:
        """Reuse the recorded block while it is still inside the blockhash window"""
        recorded = await self.recorded_block()
        if recorded == 0:
            return await self.pre_mint()

        current = await self.client.get_block_number()
        self.logger.info(f"📝 Existing preMint block: {recorded} (current {current})")
        if current > recorded + self.config.header_deadline_blocks:
            self.logger.info(f"   ⚠️ {self.config.header_deadline_blocks} block deadline expired, re-executing")
            return await self.pre_mint()

        return recorded

    async def execute(self) -> ChallengeResult:
        completed = await self.check_already_completed()
        if completed:
            return completed

        pre_mint_block = await self.ensure_pre_mint()
        target_block = pre_mint_block + TARGET_OFFSET
        deadline = pre_mint_block + self.config.header_deadline_blocks

        self.logger.info(f"📝 Step 2: Target block {target_block}")
        current = await self.client.wait_for_block(target_block)
        if current > deadline:
            raise ChallengeError(f"{self.config.header_deadline_blocks} block deadline exceeded")

        block = await self.client.get_block(target_block)
        match = reconstruct_from_block(block)
        header_rlp = match.encoding
        self.logger.info(f"   📦 RLP: {len(header_rlp)} bytes, {match.attempts} candidate(s) tried")

        # blockhash() of the target is only available once a later block exists
        if self.config.local:
            await self.client.mine_block()

        challenge_address = self.registry.address("Challenge12")
        abi = self.registry.abi("Challenge12")

        self.logger.info("🔍 Pre-checking mintFlag()...")
        await self.client.simulate(challenge_address, abi, "mintFlag", [header_rlp])

        self.logger.info("📝 Step 3: Execute mintFlag()")
        await self.transact("Challenge12", "mintFlag", [header_rlp])

        return self._create_result(True, {
            "pre_mint_block": pre_mint_block,
            "target_block": target_block,
            "included_fields": list(match.included),
        })
