"""
Base classes for challenge solvers
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Any, Optional, List
import logging
import time

from ..config import Config
from ..contracts import ContractRegistry
from ..web3_client import Web3Client


class ChallengeError(Exception):
    """A challenge precondition or postcondition does not hold"""


@dataclass
class ChallengeResult:
    """Standard result format for all challenges"""
    success: bool
    data: Dict[str, Any] = field(default_factory=dict)
    error_message: Optional[str] = None
    execution_time: float = 0.0
    challenge_id: int = 0
    already_completed: bool = False


class BaseChallenge(ABC):
    """Base class for all challenge solvers"""

    challenge_id: int = 0

    def __init__(self, config: Config, client: Web3Client, registry: ContractRegistry):
        self.config = config
        self.client = client
        self.registry = registry
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @abstractmethod
    async def execute(self) -> ChallengeResult:
        """
        Solve the challenge

        Network errors and reverted transactions propagate; ``run`` turns
        them into a failed ChallengeResult.
        """
        pass

    @abstractmethod
    def get_name(self) -> str:
        """Get challenge name"""
        pass

    @abstractmethod
    def get_description(self) -> str:
        """Get a short description of the exploit"""
        pass

    def get_requirements(self) -> List[int]:
        """Challenges whose flags must be held first"""
        return [1] if self.challenge_id != 1 else []

    async def run(self) -> ChallengeResult:
        """Execute with timing and uniform error reporting"""
        start_time = time.time()

        self.logger.info(f"🚀 Challenge {self.challenge_id} - {self.get_name()}")
        self.logger.info(f"🌐 Network: {self.config.network_name}")
        self.logger.info(f"📍 Wallet: {self.client.address}")
        self.logger.info(f"📚 Solution: {self.get_description()}")

        try:
            result = await self.execute()
        except Exception as e:
            self.logger.error(f"❌ Error: {str(e)}")
            return self._create_result(
                False,
                error_message=str(e),
                execution_time=time.time() - start_time,
            )

        result.execution_time = time.time() - start_time
        if result.success:
            self.logger.info(f"🎉 Challenge {self.challenge_id} complete!")
        else:
            self.logger.error(f"❌ Challenge {self.challenge_id} failed: {result.error_message}")
        return result

    async def has_minted(self, challenge_id: Optional[int] = None) -> bool:
        """Authoritative completion status from NFTFlags"""
        return bool(await self.client.call_function(
            self.registry.address("NFTFlags"),
            self.registry.abi("NFTFlags"),
            "hasMinted",
            [self.client.address, challenge_id or self.challenge_id],
        ))

    async def check_already_completed(self) -> Optional[ChallengeResult]:
        """Return a success result when the flag is already held"""
        if await self.has_minted():
            self.logger.info(f"✅ This address has already obtained Challenge {self.challenge_id} NFT")
            return self._create_result(True, already_completed=True)
        return None

    async def call(self, contract_name: str, function_name: str, args: Optional[List[Any]] = None) -> Any:
        """View call on a registered challenge contract"""
        return await self.client.call_function(
            self.registry.address(contract_name),
            self.registry.abi(contract_name),
            function_name,
            args,
        )

    async def transact(
        self,
        contract_name: str,
        function_name: str,
        args: Optional[List[Any]] = None,
        gas: Optional[int] = None,
    ) -> Dict[str, Any]:
        """State-changing call on a registered challenge contract"""
        self.logger.info(f"📝 Executing {function_name}()...")
        return await self.client.transact(
            self.registry.address(contract_name),
            self.registry.abi(contract_name),
            function_name,
            args,
            gas=gas,
        )

    def _create_result(
        self,
        success: bool,
        data: Optional[Dict[str, Any]] = None,
        error_message: Optional[str] = None,
        execution_time: float = 0.0,
        already_completed: bool = False,
    ) -> ChallengeResult:
        """Helper to create standardized ChallengeResult"""
        return ChallengeResult(
            success=success,
            data=data or {},
            error_message=error_message,
            execution_time=execution_time,
            challenge_id=self.challenge_id,
            already_completed=already_completed,
        )
