#!/usr/bin/env python3
"""Entry point for fetching Subscan events from the command line.

Walks the requested events from a start block up to the current block and
prints each event as one JSON line on stdout.
"""

import argparse
import asyncio
import json
import logging
import os
import sys

# Configure logging before any other imports create loggers
def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the application.

    Args:
        level: Logging level as string (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    log_level: int = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr
    )

# Get logger for this module
logger = logging.getLogger(__name__)

from subscan_events.config import SubscanEventsConfig
from subscan_events.event_fetcher import SubscanEventFetcher
from subscan_events.utils.chain_utility import ChainUtility


def build_parser() -> argparse.ArgumentParser:
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        description="Fetch pallet events and their parameters from Subscan",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""Environment Variables:
  SUBSCAN_NETWORK   - Subscan network (e.g. spiritnet), NONE to disable
  SUBSCAN_SECRET    - Subscan API key
  NODE_RPC_URL      - HTTP RPC endpoint of a node of the same chain
  NODE_TYPE         - substrate or evm (default: substrate)
  QUERY_INTERVAL    - Seconds between Subscan calls (default: 1.0)
  BLOCK_RANGE_SIZE  - Blocks per events query (default: 100000)
  MAX_ROWS          - Events per page (default: 100)
  REQUEST_TIMEOUT   - HTTP timeout in seconds (default: 30)
  LOG_LEVEL         - Logging level (can be overridden with --log-level)
        """
    )
    parser.add_argument("--module", required=True, help="Pallet name, e.g. did")
    parser.add_argument("--event-id", required=True, help="Event name, e.g. DidCreated")
    parser.add_argument(
        "--start-block",
        type=int,
        default=0,
        help="Block to start fetching from (default: 0)"
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("LOG_LEVEL", "INFO"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging level (default: INFO)"
    )
    return parser


async def main() -> None:
    """Load configuration from environment and print the fetched events.

    Raises:
        SystemExit: On configuration or runtime errors
    """
    args: argparse.Namespace = build_parser().parse_args()

    setup_logging(args.log_level)

    try:
        config: SubscanEventsConfig = SubscanEventsConfig.from_env()
    except ValueError as e:
        logger.error(f"Configuration Error: {e}")
        logger.error("Please check your environment variables:")
        logger.error("  - SUBSCAN_NETWORK: Subscan network, or NONE")
        logger.error("  - SUBSCAN_SECRET: Subscan API key")
        logger.error("  - NODE_RPC_URL: Node RPC endpoint")
        sys.exit(1)

    config.log_config()

    try:
        chain = None
        if config.node:
            chain = ChainUtility(config.node, request_timeout=config.fetch.request_timeout)
        fetcher = SubscanEventFetcher(config, chain)

        fetched = 0
        async for event in fetcher.event_generator(
            args.module, args.event_id, args.start_block
        ):
            print(json.dumps(event.to_dict()), flush=True)
            fetched += 1

        logger.info(f"Fetched {fetched} \"{args.module}.{args.event_id}\" events")

    except (KeyboardInterrupt, asyncio.CancelledError):
        # asyncio.run delivers Ctrl-C to the main task as a cancellation
        logger.info("Received interrupt signal, stopping...")
        sys.exit(0)

    except Exception as e:
        logger.error(f"Fatal Error: {e}", exc_info=True)
        sys.exit(1)


def run() -> None:
    """Run main() and exit cleanly when interrupted outside the main task."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Received interrupt signal, stopping...")
        sys.exit(0)


if __name__ == "__main__":
    run()
