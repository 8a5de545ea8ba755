"""Factory functions for creating ledgers and pools in tests.

Usage:
    from tests.helpers import make_pool

    pool, ledger, events = make_pool()
    pool.add_liquidity(USER1, 1000, 2000)
"""

from amm.config import DEFAULT_POOL_CONFIG, PoolConfig
from amm.events import InMemoryEventLog
from amm.guards import FixedClock
from amm.ledger import InMemoryTokenLedger
from amm.pool import Pool
from amm.safe_int import UINT256_MAX
from tests.helpers.constants import LP, NOW, OWNER, TOKEN_A, TOKEN_B, USER1, USER2

# Starting balance of every test account in both tokens
DEFAULT_BALANCE = 10**30


def funded_ledger(
    holders: tuple[str, ...] = (USER1, USER2, LP),
    balance: int = DEFAULT_BALANCE,
) -> InMemoryTokenLedger:
    """Ledger where each holder owns ``balance`` of TOKEN_A and TOKEN_B."""
    ledger = InMemoryTokenLedger()
    for holder in holders:
        ledger.mint(TOKEN_A, holder, balance)
        ledger.mint(TOKEN_B, holder, balance)
    return ledger


def approve_pool(
    ledger: InMemoryTokenLedger,
    pool: Pool,
    holders: tuple[str, ...] = (USER1, USER2, LP),
    amount: int = UINT256_MAX,
) -> None:
    """Grant the pool an allowance on both tokens for each holder."""
    for holder in holders:
        ledger.approve(pool.token0, holder, pool.address, amount)
        ledger.approve(pool.token1, holder, pool.address, amount)


def make_pool(
    config: PoolConfig = DEFAULT_POOL_CONFIG,
    ledger: InMemoryTokenLedger | None = None,
    now: int = NOW,
) -> tuple[Pool, InMemoryTokenLedger, InMemoryEventLog]:
    """Create an empty TOKEN_A/TOKEN_B pool controlled by OWNER.

    All default holders are funded and have approved the pool.

    Returns:
        Tuple of (pool, ledger, event_log)
    """
    if ledger is None:
        ledger = funded_ledger()
    events = InMemoryEventLog()
    pool = Pool(
        TOKEN_A,
        TOKEN_B,
        OWNER,
        ledger,
        config=config,
        clock=FixedClock(now),
        events=events,
    )
    approve_pool(ledger, pool)
    return pool, ledger, events
