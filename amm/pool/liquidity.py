"""Share minting and burning.

First deposit:      shares = isqrt(amount0 * amount1)
Later deposits:     shares = min(amount0 * T / reserve0, amount1 * T / reserve1)
Withdrawal:         amount_i = reserve_i * shares / T

All divisions floor, so rounding always favours the shares already in the
pool. Every operation is split into ``prepare_*`` (pure, returns a plan) and
``apply_*`` (commits the plan) so the pool facade can move tokens in between.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from amm.config import DEFAULT_POOL_CONFIG, DepositPolicy, PoolConfig
from amm.errors import ArithmeticInvalidState, InsufficientLiquidityMinted, InsufficientShares
from amm.math import isqrt, mul_div
from amm.pool.state import PoolState
from amm.safe_int import S

logger = structlog.get_logger()


@dataclass(frozen=True)
class MintPlan:
    """Outcome of a deposit, computed against one reserve snapshot.

    Attributes:
        amount0: Token0 actually taken from the depositor
        amount1: Token1 actually taken from the depositor
        shares: Shares minted to the depositor
        excess0: Token0 offered but not taken (REFUND_EXCESS only)
        excess1: Token1 offered but not taken (REFUND_EXCESS only)
        total_shares_before: Pool total shares the plan was computed against
    """

    amount0: int
    amount1: int
    shares: int
    excess0: int = 0
    excess1: int = 0
    total_shares_before: int = 0


@dataclass(frozen=True)
class BurnPlan:
    """Outcome of a withdrawal, computed against one reserve snapshot."""

    shares: int
    amount0: int
    amount1: int
    total_shares_before: int


class LiquidityEngine:
    """Computes and commits deposits and withdrawals on a PoolState."""

    def __init__(self, state: PoolState, config: PoolConfig = DEFAULT_POOL_CONFIG) -> None:
        self.state = state
        self.config = config

    # --- Deposits ---

    def prepare_add(self, amount0: int, amount1: int) -> MintPlan:
        """Compute the shares a deposit would mint without touching state.

        Raises:
            InsufficientLiquidityMinted: If either amount is not positive, or
                the deposit would mint zero shares
        """
        if amount0 <= 0 or amount1 <= 0:
            raise InsufficientLiquidityMinted(
                f"Deposit amounts must be positive, got ({amount0}, {amount1})"
            )

        state = self.state
        total = state.total_shares
        if total == 0:
            shares = isqrt((S(amount0) * S(amount1)).value)
            plan = MintPlan(amount0=amount0, amount1=amount1, shares=shares)
        elif self.config.deposit_policy is DepositPolicy.REFUND_EXCESS:
            plan = self._balanced_deposit(amount0, amount1)
        else:
            shares = S(mul_div(amount0, total, state.reserve0)).min(
                mul_div(amount1, total, state.reserve1)
            ).value
            plan = MintPlan(amount0=amount0, amount1=amount1, shares=shares, total_shares_before=total)

        if plan.shares == 0:
            raise InsufficientLiquidityMinted(
                f"Deposit ({amount0}, {amount1}) would mint zero shares"
            )
        self._check_post_mint_totals(plan)
        return plan

    def _check_post_mint_totals(self, plan: MintPlan) -> tuple[int, int]:
        """Range-check reserves and share supply after a mint.

        Raises:
            Uint256Overflow: If any total would leave the uint256 domain
        """
        state = self.state
        reserve0 = (S(state.reserve0) + plan.amount0).value
        reserve1 = (S(state.reserve1) + plan.amount1).value
        S(state.total_shares) + plan.shares
        return reserve0, reserve1

    def _balanced_deposit(self, amount0: int, amount1: int) -> MintPlan:
        """Trim the deposit to the current reserve ratio.

        Takes all of whichever side is the binding constraint and the
        ratio-matching amount (floored) of the other side.
        """
        state = self.state
        total = state.total_shares
        amount1_optimal = mul_div(amount0, state.reserve1, state.reserve0)
        if amount1_optimal <= amount1:
            used0, used1 = amount0, amount1_optimal
        else:
            used0, used1 = mul_div(amount1, state.reserve0, state.reserve1), amount1

        if used0 == 0 or used1 == 0:
            shares = 0
        else:
            shares = S(mul_div(used0, total, state.reserve0)).min(
                mul_div(used1, total, state.reserve1)
            ).value
        return MintPlan(
            amount0=used0,
            amount1=used1,
            shares=shares,
            excess0=amount0 - used0,
            excess1=amount1 - used1,
            total_shares_before=total,
        )

    def apply_add(self, plan: MintPlan, depositor: str) -> None:
        """Commit a MintPlan produced against the current state."""
        state = self.state
        if plan.total_shares_before != state.total_shares:
            raise ArithmeticInvalidState("Mint plan was computed against a different state")
        # All new values are range-checked before the first write
        reserve0, reserve1 = self._check_post_mint_totals(plan)
        state.reserve0, state.reserve1 = reserve0, reserve1
        state.credit_shares(depositor, plan.shares)
        logger.debug(
            "liquidity_minted",
            depositor=depositor,
            amount0=plan.amount0,
            amount1=plan.amount1,
            shares=plan.shares,
        )

    def add_liquidity(self, amount0: int, amount1: int, depositor: str) -> MintPlan:
        """Prepare and commit a deposit in one step."""
        plan = self.prepare_add(amount0, amount1)
        self.apply_add(plan, depositor)
        return plan

    # --- Withdrawals ---

    def prepare_remove(self, shares: int, withdrawer: str) -> BurnPlan:
        """Compute the reserves a share burn would pay out.

        Raises:
            InsufficientShares: If shares is not positive or exceeds the
                withdrawer's balance
        """
        if shares <= 0:
            raise InsufficientShares(f"Share amount must be positive, got {shares}")
        owned = self.state.shares_of(withdrawer)
        if shares > owned:
            raise InsufficientShares(f"Requested {shares} shares, holder owns {owned}")

        state = self.state
        total = state.total_shares
        return BurnPlan(
            shares=shares,
            amount0=mul_div(state.reserve0, shares, total),
            amount1=mul_div(state.reserve1, shares, total),
            total_shares_before=total,
        )

    def apply_remove(self, plan: BurnPlan, withdrawer: str) -> None:
        """Commit a BurnPlan produced against the current state."""
        state = self.state
        if plan.total_shares_before != state.total_shares:
            raise ArithmeticInvalidState("Burn plan was computed against a different state")
        reserve0 = (S(state.reserve0) - plan.amount0).value
        reserve1 = (S(state.reserve1) - plan.amount1).value

        state.debit_shares(withdrawer, plan.shares)
        state.reserve0, state.reserve1 = reserve0, reserve1
        logger.debug(
            "liquidity_burned",
            withdrawer=withdrawer,
            amount0=plan.amount0,
            amount1=plan.amount1,
            shares=plan.shares,
        )

    def remove_liquidity(self, shares: int, withdrawer: str) -> BurnPlan:
        """Prepare and commit a withdrawal in one step."""
        plan = self.prepare_remove(shares, withdrawer)
        self.apply_remove(plan, withdrawer)
        return plan
