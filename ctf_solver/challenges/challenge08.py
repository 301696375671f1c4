"""
Challenge 8 - Unverified contract
"""

from .base import BaseChallenge, ChallengeResult

NFT_CONTRACT_SELECTOR = "0xd56d229d"  # nftContract()
MINT_FLAG_SELECTOR = "0x8fd628f0"     # recovered from the bytecode dispatcher


def mint_calldata(address: str) -> str:
    """Selector followed by the caller address left-padded to 32 bytes"""
    return MINT_FLAG_SELECTOR + address[2:].lower().rjust(64, "0")


class RawSelectorChallenge(BaseChallenge):
    """Call an unverified contract by its raw function selector"""

    challenge_id = 8

    def get_name(self) -> str:
        return "Unverified Contract"

    def get_description(self) -> str:
        return "Call selector 0x8fd628f0 with our own address as argument"

    async def execute(self) -> ChallengeResult:
        completed = await self.check_already_completed()
        if completed:
            return completed

        challenge_address = self.registry.address("Challenge8")

        nft_contract = await self.client.call_raw(challenge_address, NFT_CONTRACT_SELECTOR)
        self.logger.info(f"📊 NFT contract address (encoded): 0x{nft_contract.hex()}")

        calldata = mint_calldata(self.client.address)
        self.logger.info(f"🎯 Calling {MINT_FLAG_SELECTOR} (mintFlag) with {self.client.address}")
        await self.client.send_raw(challenge_address, calldata)

        return self._create_result(True, {"calldata": calldata})
