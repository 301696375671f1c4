#!/usr/bin/env python3
"""
BuidlGuidl CTF solver
Main entry point for solving the challenges in sequence

Usage:
    python main.py                     # Optimism, all challenges
    python main.py --local             # local hardhat node
    python main.py --challenge 12      # a single challenge
    python main.py --block-info 1234   # dump a block as JSON
"""

import asyncio
import argparse
import logging
import sys

from web3 import Web3

from ctf_solver import ChallengeRunner, Config, Web3Client


def setup_logging(level: str = "INFO", log_file: str = "ctf_solver.log"):
    """Configure logging for the application"""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_file)
        ]
    )


async def print_block_info(config: Config, block_number: int):
    """Print a block as returned by eth_getBlockByNumber"""

    client = Web3Client(config)
    block = await client.get_block(block_number)
    print(Web3.to_json(dict(block)))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="BuidlGuidl CTF solver (Optimism or local hardhat node)"
    )

    parser.add_argument("--local", action="store_true",
                        help="Use the local hardhat node (chain 31337) and its account #0")
    parser.add_argument("--challenge", type=int, action="append", default=None,
                        choices=range(1, 13), metavar="N",
                        help="Challenge number to run (repeatable, default: all)")
    parser.add_argument("-y", "--yes", action="store_true",
                        help="Skip the confirmation prompt")
    parser.add_argument("--block-info", type=int, default=None, metavar="BLOCK",
                        help="Print block information as JSON and exit")

    # Logging
    parser.add_argument("--log-level", type=str, default=None,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Log level (default from config)")

    return parser


async def main():
    """Main entry point"""

    parser = build_parser()
    args = parser.parse_args()

    try:
        config = Config.from_env(local=args.local)

        # Use config log level if not provided via CLI
        log_level = args.log_level if args.log_level is not None else config.log_level

        config.validate()

    except Exception as e:
        setup_logging("ERROR")
        logger = logging.getLogger(__name__)
        logger.error(f"Configuration error: {str(e)}")
        print("\nRequired environment variables:")
        print("  __RUNTIME_DEPLOYER_PRIVATE_KEY (Optimism only)")
        print("  OPTIMISM_RPC_URL (optional)")
        print("  CTF_DEPLOYMENTS_FILE, CTF_ARTIFACTS_DIR (optional)")
        sys.exit(1)

    setup_logging(log_level, config.log_file)
    logger = logging.getLogger(__name__)

    if args.block_info is not None:
        await print_block_info(config, args.block_info)
        return

    runner = ChallengeRunner(config)

    try:
        summary = await runner.run(args.challenge, assume_yes=args.yes)
    except ConnectionError as e:
        logger.error(f"❌ {str(e)}")
        sys.exit(1)

    if summary.cancelled:
        return

    runner.print_summary(summary)
    sys.exit(summary.exit_code)


def cli():
    """Console script entry point"""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\n👋 Interrupted")
        sys.exit(0)


if __name__ == "__main__":
    cli()
