"""Pool engine configuration."""

from dataclasses import dataclass
from enum import Enum

from amm.constants import MAX_PROTOCOL_FEE_BPS, TRADING_FEE_BPS


class DepositPolicy(str, Enum):
    """How a subsequent deposit off the current reserve ratio is settled.

    DONATE pulls both amounts in full; the part beyond the ratio mints no
    shares and stays in the pool for existing holders.
    REFUND_EXCESS pulls only the ratio-matching amounts, so the depositor
    keeps the excess.
    """

    DONATE = "donate"
    REFUND_EXCESS = "refund_excess"


@dataclass(frozen=True)
class PoolConfig:
    """Engine parameters fixed for the lifetime of a pool.

    Attributes:
        trading_fee_bps: Fee retained by the pool on swap input (default: 30)
        max_protocol_fee_bps: Ceiling accepted by set_protocol_fee (default: 1000)
        deposit_policy: Settlement of imbalanced deposits (default: DONATE)
        check_invariants: Re-verify share and reserve invariants after every
            committed mutation.
    """

    trading_fee_bps: int = TRADING_FEE_BPS
    max_protocol_fee_bps: int = MAX_PROTOCOL_FEE_BPS
    deposit_policy: DepositPolicy = DepositPolicy.DONATE
    check_invariants: bool = True

    def __post_init__(self) -> None:
        if not 0 <= self.trading_fee_bps < 10_000:
            raise ValueError(f"trading_fee_bps must be in [0, 10000), got {self.trading_fee_bps}")
        if not 0 <= self.max_protocol_fee_bps <= 10_000:
            raise ValueError(
                f"max_protocol_fee_bps must be in [0, 10000], got {self.max_protocol_fee_bps}"
            )


# Default configuration instance
DEFAULT_POOL_CONFIG = PoolConfig()
