"""
Sequential challenge runner
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional

from .challenges import CHALLENGES, BaseChallenge, ChallengeResult
from .config import Config
from .contracts import ContractRegistry
from .web3_client import Web3Client

# Challenges 1-9 unlock the later ones, so a failure there stops the run
LAST_PREREQUISITE_CHALLENGE = 9


def is_yes(answer: str) -> bool:
    return answer.strip().lower() in ("y", "yes")


@dataclass
class RunSummary:
    """Outcome of a runner invocation"""
    results: List[ChallengeResult] = field(default_factory=list)
    execution_time: float = 0.0
    cancelled: bool = False
    aborted: bool = False

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.success)

    @property
    def exit_code(self) -> int:
        return 1 if self.failed > 0 else 0


class ChallengeRunner:
    """
    Runs challenges in order with the abort/continue policy

    - a failed prerequisite (1-9) stops the run
    - a failed later challenge (10-12) asks whether to continue
    """

    def __init__(
        self,
        config: Config,
        client: Optional[Web3Client] = None,
        registry: Optional[ContractRegistry] = None,
        input_func: Callable[[str], str] = input,
    ):
        self.config = config
        self.client = client or Web3Client(config)
        self.registry = registry or ContractRegistry(config)
        self.input_func = input_func
        self.logger = logging.getLogger(__name__)

    def build(self, challenge_id: int) -> BaseChallenge:
        if challenge_id not in CHALLENGES:
            raise ValueError(f"Unknown challenge: {challenge_id}")
        return CHALLENGES[challenge_id](self.config, self.client, self.registry)

    def confirm(self, prompt: str) -> bool:
        return is_yes(self.input_func(prompt))

    async def run(self, selected: Optional[Iterable[int]] = None, assume_yes: bool = False) -> RunSummary:
        challenge_ids = sorted(set(selected)) if selected else sorted(CHALLENGES)
        for challenge_id in challenge_ids:
            if challenge_id not in CHALLENGES:
                raise ValueError(f"Unknown challenge: {challenge_id}")

        self.logger.info("🚀 Running BuidlGuidl CTF challenges")
        self.logger.info(f"🌐 Network: {self.config.network_name}")
        self.logger.info(f"📍 Wallet: {self.client.address}")
        self.logger.info(f"🎯 Challenges: {', '.join(str(cid) for cid in challenge_ids)}")

        summary = RunSummary()

        if not assume_yes and not self.confirm("Do you want to continue? (y/n): "):
            self.logger.info("❌ Execution cancelled")
            summary.cancelled = True
            return summary

        start_time = time.time()

        for challenge_id in challenge_ids:
            challenge = self.build(challenge_id)
            result = await challenge.run()
            summary.results.append(result)

            if result.success:
                continue

            if challenge_id <= LAST_PREREQUISITE_CHALLENGE:
                self.logger.error(
                    f"⚠️ Challenge {challenge_id} failed. Challenges 1-9 are prerequisites, stopping."
                )
                summary.aborted = True
                break

            if challenge_id != challenge_ids[-1] and not self.confirm(
                f"Challenge {challenge_id} failed. Continue with the next challenge? (y/n): "
            ):
                self.logger.info("⏹️ Stopped by user")
                summary.aborted = True
                break

        summary.execution_time = time.time() - start_time
        return summary

    def print_summary(self, summary: RunSummary):
        """Print run summary"""

        print("\n" + "=" * 60)
        print("BUIDLGUIDL CTF SUMMARY")
        print("=" * 60)
        print(f"Network: {self.config.network_name}")
        print(f"Total time: {summary.execution_time:.1f}s")
        print(f"Succeeded: {summary.succeeded}")
        print(f"Failed: {summary.failed}")

        if summary.results:
            print("\nResults:")
            for result in summary.results:
                name = self.build(result.challenge_id).get_name()
                status = "✅" if result.success else "❌"
                note = " (already completed)" if result.already_completed else ""
                line = f"  {status} Challenge {result.challenge_id:>2}: {name}{note} [{result.execution_time:.1f}s]"
                if result.error_message:
                    line += f" - {result.error_message}"
                print(line)

        if summary.aborted:
            print("\nRun stopped before all selected challenges were attempted")

        print("=" * 60)
