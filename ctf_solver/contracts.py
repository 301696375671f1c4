"""
Contract addresses, ABI fragments and compiled hardhat artifacts
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, List, Optional, Sequence, Tuple

from eth_utils import to_checksum_address

from .config import Config


class ContractNotConfiguredError(Exception):
    """Address or artifact for a contract is not available"""


def _params(types: Sequence[Tuple[str, str]]) -> List[Dict[str, str]]:
    return [{"name": name, "type": type_, "internalType": type_} for name, type_ in types]


def _function(
    name: str,
    inputs: Sequence[Tuple[str, str]] = (),
    outputs: Sequence[Tuple[str, str]] = (),
    mutability: str = "nonpayable",
) -> Dict[str, Any]:
    return {
        "name": name,
        "type": "function",
        "stateMutability": mutability,
        "inputs": _params(inputs),
        "outputs": _params(outputs),
    }


TRANSFER_EVENT = {
    "name": "Transfer",
    "type": "event",
    "anonymous": False,
    "inputs": [
        {"name": "from", "type": "address", "indexed": True},
        {"name": "to", "type": "address", "indexed": True},
        {"name": "tokenId", "type": "uint256", "indexed": True},
    ],
}

# Minimal ABIs: only what the solvers call
ABIS: Dict[str, List[Dict[str, Any]]] = {
    "NFTFlags": [
        _function("hasMinted", [("user", "address"), ("challengeId", "uint256")], [("", "bool")], "view"),
        _function("balanceOf", [("owner", "address")], [("", "uint256")], "view"),
        _function("ownerOf", [("tokenId", "uint256")], [("", "address")], "view"),
        _function("tokenIdToChallengeId", [("", "uint256")], [("", "uint256")], "view"),
        _function(
            "safeTransferFrom",
            [("from", "address"), ("to", "address"), ("tokenId", "uint256"), ("data", "bytes")],
        ),
        TRANSFER_EVENT,
    ],
    "Challenge1": [
        _function("registerMe", [("builderName", "string")]),
        _function("builderNames", [("", "address")], [("", "string")], "view"),
    ],
    "Challenge2": [
        _function("justCallMe"),
    ],
    "Challenge3": [
        _function("mintFlag"),
    ],
    "Challenge4": [
        _function("isMinter", [("", "address")], [("", "bool")], "view"),
        _function("mintFlag", [("_minter", "address"), ("signature", "bytes")]),
    ],
    "Challenge5": [
        _function("points", [("", "address")], [("", "uint256")], "view"),
        _function("claimPoints"),
        _function("resetPoints"),
        _function("mintFlag"),
    ],
    "Challenge6": [
        _function("count", [], [("", "uint256")], "view"),
    ],
    "Challenge7": [
        _function("owner", [], [("", "address")], "view"),
        _function("mintFlag"),
        # Lives on Challenge7Delegate, reached through the fallback
        _function("claimOwnership"),
    ],
    "Challenge8": [],
    "Challenge9": [
        _function("mintFlag", [("_password", "bytes32")]),
    ],
    "Challenge11": [
        _function("mintFlag"),
    ],
    "Challenge12": [
        _function("preMintFlag"),
        _function("mintFlag", [("_headerRlpBytes", "bytes")]),
        _function("blockNumber", [("", "address")], [("", "uint256")], "view"),
    ],
}


@dataclass
class Artifact:
    """Compiled contract loaded from a hardhat artifact"""
    name: str
    abi: List[Dict[str, Any]]
    bytecode: str


class ContractRegistry:
    """
    Resolves challenge contract addresses and solver artifacts

    Addresses come from the chain table in Config first, then from the
    deployments file written by the hardhat workspace:
    ``{"<chainId>": {"<ContractName>": {"address": "0x..."}}}``
    """

    def __init__(self, config: Config):
        self.config = config
        self.logger = logging.getLogger(__name__)
        self._deployments: Optional[Dict[str, Any]] = None

    def _load_deployments(self) -> Dict[str, Any]:
        """Load deployments from disk once"""
        if self._deployments is not None:
            return self._deployments

        deployments_file = Path(self.config.deployments_file)
        if not deployments_file.exists():
            self.logger.warning(f"Deployments file not found: {deployments_file}")
            self._deployments = {}
            return self._deployments

        with open(deployments_file, 'r') as f:
            self._deployments = json.load(f)

        return self._deployments

    def address(self, name: str) -> str:
        """Checksummed address of a deployed contract on the active chain"""
        chain_config = self.config.get_chain_config(self.config.chain_id)
        fixed = chain_config.get("challenge_addresses", {}).get(name)
        if fixed:
            return to_checksum_address(fixed)

        chain_deployments = self._load_deployments().get(str(self.config.chain_id), {})
        entry = chain_deployments.get(name)
        if isinstance(entry, dict):
            entry = entry.get("address")

        if not entry:
            raise ContractNotConfiguredError(
                f"{name} is not deployed on chain {self.config.chain_id} "
                f"(checked {self.config.deployments_file})"
            )

        return to_checksum_address(entry)

    def abi(self, name: str) -> List[Dict[str, Any]]:
        """Minimal ABI for a challenge contract"""
        if name not in ABIS:
            raise ContractNotConfiguredError(f"No ABI known for {name}")
        return ABIS[name]

    def load_artifact(self, name: str) -> Artifact:
        """Load ``<artifacts_dir>/<name>.sol/<name>.json``"""
        artifact_path = Path(self.config.artifacts_dir) / f"{name}.sol" / f"{name}.json"
        if not artifact_path.exists():
            raise ContractNotConfiguredError(
                f"{name} artifact not found at {artifact_path}. Compile with hardhat: yarn compile"
            )

        with open(artifact_path, 'r') as f:
            data = json.load(f)

        bytecode = data.get("bytecode", "")
        if not bytecode or bytecode == "0x":
            raise ContractNotConfiguredError(f"{name} artifact has no bytecode")

        return Artifact(name=name, abi=data.get("abi", []), bytecode=bytecode)
