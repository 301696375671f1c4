"""
Challenge 2 - msg.sender != tx.origin
"""

from .base import BaseChallenge, ChallengeResult


class OriginCheckChallenge(BaseChallenge):
    """
    justCallMe() rejects calls where msg.sender == tx.origin, so the call is
    relayed through a freshly deployed solution contract.
    """

    challenge_id = 2

    def get_name(self) -> str:
        return "msg.sender != tx.origin"

    def get_description(self) -> str:
        return "Call justCallMe() through an intermediate contract"

    async def execute(self) -> ChallengeResult:
        completed = await self.check_already_completed()
        if completed:
            return completed

        challenge_address = self.registry.address("Challenge2")
        artifact = self.registry.load_artifact("Challenge2Solution")

        self.logger.info("📝 Deploying Solver contract...")
        receipt = await self.client.deploy_contract(artifact.abi, artifact.bytecode, [challenge_address])
        solver_address = receipt["contractAddress"]
        self.logger.info(f"   📍 Solver address: {solver_address}")

        self.logger.info("📝 Calling callChallenge()...")
        await self.client.transact(solver_address, artifact.abi, "callChallenge")

        return self._create_result(True, {"solver_address": solver_address})
