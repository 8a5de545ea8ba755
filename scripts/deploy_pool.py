#!/usr/bin/env python3
"""Create two test tokens and a pool over them, seed liquidity, save a record.

Usage:
    # Deploy with default seed liquidity and write deployments/pool.json
    python scripts/deploy_pool.py

    # Custom seed amounts and a demo swap of 100 token0
    python scripts/deploy_pool.py --seed0 1000 --seed1 2000 --swap 100
"""

import argparse
import json
import logging
import sys
import time
from datetime import UTC, datetime
from pathlib import Path

import structlog

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from amm.events import FanOutEventSink, InMemoryEventLog, LoggingEventSink  # noqa: E402
from amm.ledger import InMemoryTokenLedger  # noqa: E402
from amm.pool import Pool  # noqa: E402

TOKEN_A = "0x00000000000000000000000000000000000000aa"
TOKEN_B = "0x00000000000000000000000000000000000000bb"
DEPLOYER = "0x00000000000000000000000000000000000000d0"

# Matches the 18-decimal test tokens (1,000,000 each minted to the deployer)
DECIMALS = 18
INITIAL_SUPPLY = 1_000_000 * 10**DECIMALS


def main() -> int:
    """Main entry point for the deployment script."""
    parser = argparse.ArgumentParser(
        description="Deploy a constant-product pool over two in-memory test tokens",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--seed0",
        type=int,
        default=1000,
        help="Whole token0 units deposited as initial liquidity (default: 1000)",
    )
    parser.add_argument(
        "--seed1",
        type=int,
        default=2000,
        help="Whole token1 units deposited as initial liquidity (default: 2000)",
    )
    parser.add_argument(
        "--swap",
        type=int,
        default=0,
        help="Whole token0 units to swap after seeding (default: 0, no swap)",
    )
    parser.add_argument(
        "--protocol-fee",
        type=int,
        default=0,
        help="Protocol fee in basis points, sent to the deployer (default: 0)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=project_root / "deployments" / "pool.json",
        help="Where to write the deployment record",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )
    logger = structlog.get_logger()

    ledger = InMemoryTokenLedger()
    for token in (TOKEN_A, TOKEN_B):
        ledger.mint(token, DEPLOYER, INITIAL_SUPPLY)

    event_log = InMemoryEventLog()
    pool = Pool(
        token0=TOKEN_A,
        token1=TOKEN_B,
        controller=DEPLOYER,
        ledger=ledger,
        events=FanOutEventSink(event_log, LoggingEventSink()),
    )
    logger.info("pool_deployed", pool=pool.address, token0=pool.token0, token1=pool.token1)

    if args.protocol_fee:
        pool.set_protocol_fee(DEPLOYER, args.protocol_fee)
        pool.set_fee_recipient(DEPLOYER, DEPLOYER)

    seed0, seed1 = args.seed0 * 10**DECIMALS, args.seed1 * 10**DECIMALS
    ledger.approve(TOKEN_A, DEPLOYER, pool.address, seed0)
    ledger.approve(TOKEN_B, DEPLOYER, pool.address, seed1)
    pool.add_liquidity(DEPLOYER, seed0, seed1)

    if args.swap:
        amount_in = args.swap * 10**DECIMALS
        ledger.approve(TOKEN_A, DEPLOYER, pool.address, amount_in)
        pool.swap(DEPLOYER, TOKEN_A, amount_in, 0, deadline=int(time.time()) + 300)

    record = {
        "deployer": DEPLOYER,
        "pool": pool.address,
        "state": pool.snapshot().model_dump(by_alias=True),
        "events": [event.signature() for event in event_log.events],
        "timestamp": datetime.now(UTC).isoformat(),
    }
    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_text(json.dumps(record, indent=2))

    reserve0, reserve1 = pool.reserves()
    print(f"Pool:      {pool.address}")
    print(f"token0:    {pool.token0}")
    print(f"token1:    {pool.token1}")
    print(f"Reserves:  {reserve0} / {reserve1}")
    print(f"Shares:    {pool.total_shares()}")
    print(f"Record saved to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
