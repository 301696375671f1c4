"""
Challenge 10 - Give 1 Get 1

Sending the Challenge 1 flag to NFTFlags with the Challenge 9 token id as
``data`` triggers onERC721Received, which mints the Challenge 10 flag.
"""

from typing import Dict, List, Optional, Tuple

from eth_abi import encode
from web3.exceptions import ContractLogicError, Web3RPCError

from .base import BaseChallenge, ChallengeError, ChallengeResult

SMALL_CHUNK_SIZE = 1_000
RANGE_TOO_LARGE = "Block range is too large"


class TokenExchangeChallenge(BaseChallenge):
    """Locate flag token ids from Transfer logs and exchange via safeTransferFrom"""

    challenge_id = 10

    def get_name(self) -> str:
        return "Give 1 Get 1"

    def get_description(self) -> str:
        return "safeTransferFrom(me, NFTFlags, token1, abi.encode(token9))"

    def get_requirements(self) -> List[int]:
        return [1, 9]

    async def _scan_range(self, from_block: int, to_block: int) -> List[Dict]:
        nft_flags = self.registry.address("NFTFlags")
        abi = self.registry.abi("NFTFlags")

        try:
            return await self.client.get_transfer_logs(
                nft_flags, abi, self.client.address, from_block, to_block
            )
        except Web3RPCError as e:
            if RANGE_TOO_LARGE not in str(e) or self.config.local:
                raise

        self.logger.info(f"      ⚠️ Reducing chunk size to {SMALL_CHUNK_SIZE} and retrying...")
        logs: List[Dict] = []
        for small_from in range(from_block, to_block, SMALL_CHUNK_SIZE):
            small_to = min(small_from + SMALL_CHUNK_SIZE, to_block)
            try:
                logs.extend(await self.client.get_transfer_logs(
                    nft_flags, abi, self.client.address, small_from, small_to
                ))
            except Web3RPCError as e:
                self.logger.warning(f"         ⚠️ Skipping blocks {small_from}-{small_to}: {str(e)[:80]}")
        return logs

    async def collect_transfer_logs(self) -> List[Dict]:
        """Transfer events to our address over the lookback window"""
        chain_config = self.config.get_chain_config(self.config.chain_id)
        current_block = await self.client.get_block_number()

        if self.config.local:
            start_block = 0
        elif current_block > self.config.lookback_blocks:
            start_block = current_block - self.config.lookback_blocks
        else:
            start_block = chain_config["deploy_block"]

        chunk_size = chain_config["log_chunk_size"]
        self.logger.info(f"🔍 Scanning Transfer events from block {start_block} to {current_block}")
        self.logger.info(f"   📝 Chunk size: {chunk_size} blocks")

        all_logs: List[Dict] = []
        for chunk_number, from_block in enumerate(range(start_block, current_block, chunk_size), 1):
            to_block = min(from_block + chunk_size, current_block)
            if chunk_number % 10 == 1:
                self.logger.info(f"   📦 Processing chunk {chunk_number} ({from_block} - {to_block})...")

            logs = await self._scan_range(from_block, to_block)
            if logs:
                self.logger.info(f"      ✅ Found {len(logs)} Transfer events")
            all_logs.extend(logs)

        self.logger.info(f"   ✅ Found total of {len(all_logs)} Transfer events")
        return all_logs

    async def find_flag_tokens(self, logs: List[Dict]) -> Dict[int, int]:
        """Map challenge id -> token id for tokens we still own"""
        me = self.client.address.lower()
        tokens: Dict[int, int] = {}
        seen = set()

        for log in logs:
            token_id = log["args"]["tokenId"]
            if token_id in seen:
                continue
            seen.add(token_id)

            try:
                owner = await self.call("NFTFlags", "ownerOf", [token_id])
            except ContractLogicError:
                # Burned
                continue
            if owner.lower() != me:
                continue

            try:
                challenge_id: Optional[int] = await self.call("NFTFlags", "tokenIdToChallengeId", [token_id])
            except ContractLogicError:
                challenge_id = None

            self.logger.info(
                f"   - TokenID {token_id}: "
                f"{f'Challenge {challenge_id}' if challenge_id is not None else 'Challenge ID unknown'} (owned)"
            )
            if challenge_id is not None:
                tokens.setdefault(challenge_id, token_id)

        return tokens

    async def execute(self) -> ChallengeResult:
        completed = await self.check_already_completed()
        if completed:
            return completed

        missing = [cid for cid in self.get_requirements() if not await self.has_minted(cid)]
        if missing:
            raise ChallengeError(
                f"Missing required flags: {', '.join(f'Challenge {cid}' for cid in missing)}"
            )
        self.logger.info("✅ Confirmed required NFTs (Challenge 1, Challenge 9)")

        tokens = await self.find_flag_tokens(await self.collect_transfer_logs())
        token1, token9 = self._required_tokens(tokens)
        self.logger.info(f"   - Challenge 1: TokenID {token1}")
        self.logger.info(f"   - Challenge 9: TokenID {token9}")

        data = encode(["uint256"], [token9])
        nft_flags = self.registry.address("NFTFlags")
        self.logger.info(f"🎯 Sending Challenge 1 NFT to NFTFlags with data 0x{data.hex()}")
        await self.transact("NFTFlags", "safeTransferFrom", [self.client.address, nft_flags, token1, data])

        if not await self.has_minted():
            return self._create_result(
                False,
                {"token1": token1, "token9": token9},
                error_message="Transaction succeeded but flag was not minted",
            )

        return self._create_result(True, {"token1": token1, "token9": token9})

    def _required_tokens(self, tokens: Dict[int, int]) -> Tuple[int, int]:
        if 1 not in tokens or 9 not in tokens:
            missing = [str(cid) for cid in (1, 9) if cid not in tokens]
            raise ChallengeError(
                f"Token ids for challenge(s) {', '.join(missing)} not found in the last "
                f"{self.config.lookback_blocks} blocks (raise LOOKBACK_BLOCKS)"
            )
        return tokens[1], tokens[9]
