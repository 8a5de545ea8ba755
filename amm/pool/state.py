"""Pool state: reserves, shares and the pause flag.

PoolState is plain data. The liquidity engine writes reserves and shares,
the swap engine writes reserves only, and the pool facade flips ``paused``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from amm.errors import ArithmeticInvalidState
from amm.models.types import normalize_address


@dataclass
class PoolState:
    """Accounting state of one two-asset pool.

    Invariants:
        sum(share_of.values()) == total_shares
        total_shares == 0 exactly when reserve0 == reserve1 == 0
    Holders with a zero balance are removed from ``share_of``.
    """

    reserve0: int = 0
    reserve1: int = 0
    total_shares: int = 0
    share_of: dict[str, int] = field(default_factory=dict)
    paused: bool = False

    @property
    def is_empty(self) -> bool:
        return self.total_shares == 0

    @property
    def k(self) -> int:
        """Constant-product value reserve0 * reserve1."""
        return self.reserve0 * self.reserve1

    def shares_of(self, holder: str) -> int:
        return self.share_of.get(normalize_address(holder), 0)

    def get_reserves(self, zero_for_one: bool) -> tuple[int, int]:
        """Reserves ordered as (reserve_in, reserve_out)."""
        if zero_for_one:
            return self.reserve0, self.reserve1
        return self.reserve1, self.reserve0

    def credit_shares(self, holder: str, shares: int) -> None:
        holder = normalize_address(holder)
        self.share_of[holder] = self.share_of.get(holder, 0) + shares
        self.total_shares += shares

    def debit_shares(self, holder: str, shares: int) -> None:
        holder = normalize_address(holder)
        remaining = self.share_of.get(holder, 0) - shares
        if remaining < 0:
            raise ArithmeticInvalidState(f"Share balance of {holder} would go negative")
        if remaining:
            self.share_of[holder] = remaining
        else:
            self.share_of.pop(holder, None)
        self.total_shares -= shares

    def check_invariants(self) -> None:
        """Verify share sums, empty-or-funded reserves and non-negativity.

        Raises:
            ArithmeticInvalidState: If any invariant is violated
        """
        if min(self.reserve0, self.reserve1, self.total_shares) < 0:
            raise ArithmeticInvalidState(
                f"Negative pool state: reserves=({self.reserve0}, {self.reserve1}), "
                f"total_shares={self.total_shares}"
            )
        if any(balance <= 0 for balance in self.share_of.values()):
            raise ArithmeticInvalidState("Share balances must be positive")
        share_sum = sum(self.share_of.values())
        if share_sum != self.total_shares:
            raise ArithmeticInvalidState(
                f"Share balances sum to {share_sum}, total_shares is {self.total_shares}"
            )
        reserves_empty = self.reserve0 == 0 and self.reserve1 == 0
        reserves_funded = self.reserve0 > 0 and self.reserve1 > 0
        if self.total_shares == 0 and not reserves_empty:
            raise ArithmeticInvalidState(
                f"Pool has no shares but holds reserves ({self.reserve0}, {self.reserve1})"
            )
        if self.total_shares > 0 and not reserves_funded:
            raise ArithmeticInvalidState(
                f"Pool has {self.total_shares} shares but reserves ({self.reserve0}, {self.reserve1})"
            )
