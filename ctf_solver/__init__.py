"""
BuidlGuidl CTF solver

Solves the twelve BuidlGuidl CTF challenges on Optimism or a local hardhat
node, including block header RLP reconstruction for Challenge 12.
"""

__version__ = "0.1.0"

from .config import Config
from .runner import ChallengeRunner, RunSummary
from .web3_client import Web3Client

__all__ = [
    "ChallengeRunner",
    "Config",
    "RunSummary",
    "Web3Client",
]
