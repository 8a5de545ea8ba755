"""Constant-product AMM pool engine."""

from amm.pool import Pool, PoolState

__version__ = "0.1.0"
__all__ = ["Pool", "PoolState", "__version__"]
