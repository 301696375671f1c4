"""
Configuration management for the CTF solver
"""

import os
from dataclasses import dataclass
from typing import Optional, Dict, Any
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

OPTIMISM_CHAIN_ID = 10
HARDHAT_CHAIN_ID = 31337

# Hardhat account #0, only ever used against a local node
LOCAL_CHAIN_1ST_ACCOUNT_PK = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
HARDHAT_MNEMONIC = "test test test test test test test test test test test junk"


@dataclass
class Config:
    """Configuration for the CTF solver"""

    # Network selection
    local: bool = False

    # Wallet
    private_key: str = os.getenv("__RUNTIME_DEPLOYER_PRIVATE_KEY", "")

    # RPC endpoints
    optimism_rpc_url: str = os.getenv("OPTIMISM_RPC_URL", "https://mainnet.optimism.io")
    local_rpc_url: str = os.getenv("LOCAL_RPC_URL", "http://127.0.0.1:8545")

    # Deployment data produced by the hardhat workspace
    deployments_file: str = os.getenv("CTF_DEPLOYMENTS_FILE", "deployments.json")
    artifacts_dir: str = os.getenv("CTF_ARTIFACTS_DIR", "../hardhat/artifacts/contracts")

    # Challenge tuning
    lookback_blocks: int = int(os.getenv("LOOKBACK_BLOCKS", "5000000"))
    log_chunk_size: int = 10_000
    block_poll_interval: float = 2.0  # Optimism produces a block every ~2s
    header_deadline_blocks: int = 256  # blockhash() only sees the last 256 blocks
    builder_name: str = os.getenv("CTF_BUILDER_NAME", "BuidlGuidl_CTF_Player")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "ctf_solver.log")

    def __post_init__(self):
        """Always use the hardhat key on a local chain"""
        if self.local:
            self.private_key = LOCAL_CHAIN_1ST_ACCOUNT_PK

    @property
    def chain_id(self) -> int:
        return HARDHAT_CHAIN_ID if self.local else OPTIMISM_CHAIN_ID

    @property
    def network_name(self) -> str:
        return "Local (31337)" if self.local else "Optimism"

    def validate(self) -> bool:
        """Validate configuration"""
        if not self.private_key:
            raise ValueError(
                "__RUNTIME_DEPLOYER_PRIVATE_KEY is required for Optimism network"
            )

        if not self.get_chain_config(self.chain_id).get("rpc_url"):
            raise ValueError(f"No RPC URL configured for chain {self.chain_id}")

        if self.lookback_blocks <= 0:
            raise ValueError("LOOKBACK_BLOCKS must be positive")

        return True

    def get_chain_config(self, chain_id: int) -> Dict[str, Any]:
        """Get chain-specific configuration"""
        chain_configs = {
            OPTIMISM_CHAIN_ID: {
                "name": "Optimism",
                "rpc_url": self.optimism_rpc_url,
                "can_mine": False,
                # Earliest block worth scanning for NFTFlags transfers
                "deploy_block": 118_000_000,
                "log_chunk_size": self.log_chunk_size,
                "challenge_addresses": {
                    "Challenge1": "0xfa2Aad507B1Fa963A1fd6F8a491A7088Cd4538A5",
                    "Challenge2": "0x0b997E0a306c47EEc755Df75fad7F41977C5582d",
                },
            },
            HARDHAT_CHAIN_ID: {
                "name": "Local",
                "rpc_url": self.local_rpc_url,
                "can_mine": True,
                "deploy_block": 0,
                "log_chunk_size": 500_000,
                "challenge_addresses": {
                    "Challenge1": "0x9fE46736679d2D9a65F0992F2272dE9f3c7fa6e0",
                    "Challenge2": "0xCf7Ed3AccA5a467e9e704C703E8D87F634fB0Fc9",
                },
            },
        }

        return chain_configs.get(chain_id, {})

    @classmethod
    def from_env(cls, local: bool = False, private_key: Optional[str] = None) -> 'Config':
        """Create config from environment variables"""
        config = cls(local=local)
        if private_key and not local:
            config.private_key = private_key
        return config
