"""Pool accounting and pricing engine."""

from amm.pool.liquidity import BurnPlan, LiquidityEngine, MintPlan
from amm.pool.pool import Pool, derive_pool_address
from amm.pool.state import PoolState
from amm.pool.swap import SwapEngine, SwapQuote, get_amount_in, get_amount_out

__all__ = [
    # State
    "PoolState",
    # Engines
    "LiquidityEngine",
    "MintPlan",
    "BurnPlan",
    "SwapEngine",
    "SwapQuote",
    "get_amount_out",
    "get_amount_in",
    # Facade
    "Pool",
    "derive_pool_address",
]
