"""
Challenge 1 - Name Registration
"""

from .base import BaseChallenge, ChallengeResult


class NameRegistrationChallenge(BaseChallenge):
    """Register a builder name with registerMe()"""

    challenge_id = 1

    def get_name(self) -> str:
        return "Name Registration"

    def get_description(self) -> str:
        return "Register by passing a name to registerMe()"

    async def execute(self) -> ChallengeResult:
        current_name = await self.call("Challenge1", "builderNames", [self.client.address])

        if current_name:
            self.logger.info(f"✅ Already registered as {current_name!r}")
            return self._create_result(True, {"builder_name": current_name}, already_completed=True)

        self.logger.info(f"   Name: {self.config.builder_name}")
        receipt = await self.transact("Challenge1", "registerMe", [self.config.builder_name])

        registered_name = await self.call("Challenge1", "builderNames", [self.client.address])
        self.logger.info(f"📝 Registered name: {registered_name}")

        return self._create_result(True, {
            "builder_name": registered_name,
            "block_number": receipt["blockNumber"],
        })
