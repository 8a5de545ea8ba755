"""Constant-product swap pricing.

Pricing follows x * y = k with the trading fee taken from the input first:

    amount_in_after_fee = amount_in * (10000 - fee_bps) / 10000
    amount_out = reserve_out * amount_in_after_fee / (reserve_in + amount_in_after_fee)

Both divisions floor, so (reserve_in + amount_in) * (reserve_out - amount_out)
never drops below reserve_in * reserve_out.

The protocol fee is carved from the computed output: the pool always pays
out the full ``gross_amount_out``, split between the trader and the fee
recipient. Reserve accounting is therefore identical with or without a
protocol fee.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from amm.config import DEFAULT_POOL_CONFIG, PoolConfig
from amm.constants import BPS_DENOMINATOR, TRADING_FEE_BPS
from amm.errors import (
    ArithmeticInvalidState,
    InsufficientInputAmount,
    InsufficientOutputAmount,
)
from amm.fees import FeeController
from amm.guards import check_token
from amm.models.types import normalize_address
from amm.pool.state import PoolState
from amm.safe_int import UINT256_MAX, S

logger = structlog.get_logger()


def get_amount_out(
    amount_in: int,
    reserve_in: int,
    reserve_out: int,
    fee_bps: int = TRADING_FEE_BPS,
) -> int:
    """Calculate output amount using the constant product formula.

    Args:
        amount_in: Input token amount
        reserve_in: Reserve of input token in pool
        reserve_out: Reserve of output token in pool
        fee_bps: Trading fee deducted from the input (default 30 = 0.3%)

    Returns:
        Output token amount, before any protocol fee

    Raises:
        ArithmeticInvalidState: If either reserve is zero
    """
    if reserve_in <= 0 or reserve_out <= 0:
        raise ArithmeticInvalidState(
            f"Cannot price a swap against empty reserves ({reserve_in}, {reserve_out})"
        )
    if amount_in <= 0:
        return 0

    amount_in_after_fee = S(amount_in) * (BPS_DENOMINATOR - fee_bps) // BPS_DENOMINATOR
    numerator = S(reserve_out) * amount_in_after_fee
    denominator = S(reserve_in) + amount_in_after_fee

    return (numerator // denominator).value


def get_amount_in(
    amount_out: int,
    reserve_in: int,
    reserve_out: int,
    fee_bps: int = TRADING_FEE_BPS,
) -> int:
    """Calculate the smallest input that yields at least ``amount_out``.

    Inverse of get_amount_out with both steps rounded up.

    Returns:
        Required input token amount, or UINT256_MAX if amount_out is not
        below reserve_out (the pool can never pay it)

    Raises:
        ArithmeticInvalidState: If either reserve is zero
    """
    if reserve_in <= 0 or reserve_out <= 0:
        raise ArithmeticInvalidState(
            f"Cannot price a swap against empty reserves ({reserve_in}, {reserve_out})"
        )
    if amount_out <= 0:
        return 0
    if amount_out >= reserve_out:
        return UINT256_MAX

    after_fee = (S(reserve_in) * amount_out).ceiling_div(S(reserve_out) - amount_out)
    return (after_fee * BPS_DENOMINATOR).ceiling_div(BPS_DENOMINATOR - fee_bps).value


@dataclass(frozen=True)
class SwapQuote:
    """Full breakdown of one swap, computed against one reserve snapshot.

    Attributes:
        token_in: Input token (normalized)
        token_out: Output token (normalized)
        amount_in: Amount taken from the trader
        amount_in_after_fee: Input that is priced after the trading fee
        gross_amount_out: Amount leaving the pool
        protocol_fee: Part of gross_amount_out sent to the fee recipient
        amount_out: Part of gross_amount_out sent to the trader
        fee_recipient: Receiver of protocol_fee (None when not collected)
        reserve_in: Input reserve the quote was computed against
        reserve_out: Output reserve the quote was computed against
    """

    token_in: str
    token_out: str
    amount_in: int
    amount_in_after_fee: int
    gross_amount_out: int
    protocol_fee: int
    amount_out: int
    fee_recipient: str | None
    reserve_in: int
    reserve_out: int
    zero_for_one: bool

    @property
    def reserve_in_after(self) -> int:
        return self.reserve_in + self.amount_in

    @property
    def reserve_out_after(self) -> int:
        return self.reserve_out - self.gross_amount_out


class SwapEngine:
    """Prices and commits swaps on a PoolState."""

    def __init__(
        self,
        state: PoolState,
        fees: FeeController,
        token0: str,
        token1: str,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
    ) -> None:
        self.state = state
        self.fees = fees
        self.token0 = normalize_address(token0)
        self.token1 = normalize_address(token1)
        self.config = config

    def quote(self, token_in: str, amount_in: int) -> SwapQuote:
        """Price a swap without touching state.

        Raises:
            InvalidToken: If token_in is not one of the pool's tokens
            InsufficientInputAmount: If amount_in is not positive
            ArithmeticInvalidState: If the pool has no liquidity
        """
        token_in = check_token(token_in, self.token0, self.token1)
        if amount_in <= 0:
            raise InsufficientInputAmount(f"Swap input must be positive, got {amount_in}")

        zero_for_one = token_in == self.token0
        token_out = self.token1 if zero_for_one else self.token0
        reserve_in, reserve_out = self.state.get_reserves(zero_for_one)
        fee_bps = self.config.trading_fee_bps

        gross_amount_out = get_amount_out(amount_in, reserve_in, reserve_out, fee_bps)
        protocol_fee = self.fees.protocol_fee_on(gross_amount_out)
        fee_config = self.fees.config

        quote = SwapQuote(
            token_in=token_in,
            token_out=token_out,
            amount_in=amount_in,
            amount_in_after_fee=(S(amount_in) * (BPS_DENOMINATOR - fee_bps) // BPS_DENOMINATOR).value,
            gross_amount_out=gross_amount_out,
            protocol_fee=protocol_fee,
            amount_out=gross_amount_out - protocol_fee,
            fee_recipient=fee_config.fee_recipient if protocol_fee > 0 else None,
            reserve_in=reserve_in,
            reserve_out=reserve_out,
            zero_for_one=zero_for_one,
        )
        logger.debug(
            "swap_quoted",
            token_in=token_in,
            amount_in=amount_in,
            gross_amount_out=gross_amount_out,
            protocol_fee=protocol_fee,
        )
        return quote

    def prepare_swap(self, token_in: str, amount_in: int, min_amount_out: int) -> SwapQuote:
        """Quote a swap and enforce the trader's minimum output.

        Raises:
            InsufficientOutputAmount: If the trader would receive nothing or
                less than min_amount_out
        """
        quote = self.quote(token_in, amount_in)
        if quote.gross_amount_out == 0:
            raise InsufficientOutputAmount(f"Swap of {amount_in} would return nothing")
        if quote.amount_out < min_amount_out:
            raise InsufficientOutputAmount(
                f"Output {quote.amount_out} below minimum {min_amount_out}"
            )
        self._check_post_swap_reserves(quote)
        return quote

    @staticmethod
    def _check_post_swap_reserves(quote: SwapQuote) -> tuple[int, int]:
        """Validate the reserves a quote would leave behind.

        Each reserve must stay a uint256. k itself may exceed uint256 once
        both reserves pass 2^128, so it is compared on plain ints.

        Returns:
            (reserve_in, reserve_out) after the swap

        Raises:
            Uint256Overflow: If reserve_in would leave the uint256 domain
            ArithmeticInvalidState: If the swap would decrease k
        """
        reserve_in = (S(quote.reserve_in) + quote.amount_in).value
        reserve_out = (S(quote.reserve_out) - quote.gross_amount_out).value
        if reserve_in * reserve_out < quote.reserve_in * quote.reserve_out:
            raise ArithmeticInvalidState("Swap would decrease the constant product")
        return reserve_in, reserve_out

    def apply_swap(self, quote: SwapQuote) -> None:
        """Commit a quote produced against the current reserves."""
        state = self.state
        if state.get_reserves(quote.zero_for_one) != (quote.reserve_in, quote.reserve_out):
            raise ArithmeticInvalidState("Swap quote was computed against different reserves")

        reserve_in, reserve_out = self._check_post_swap_reserves(quote)
        if quote.zero_for_one:
            state.reserve0, state.reserve1 = reserve_in, reserve_out
        else:
            state.reserve1, state.reserve0 = reserve_in, reserve_out

    def swap(self, token_in: str, amount_in: int, min_amount_out: int, trader: str) -> SwapQuote:
        """Prepare and commit a swap in one step."""
        quote = self.prepare_swap(token_in, amount_in, min_amount_out)
        self.apply_swap(quote)
        logger.debug("swap_applied", trader=trader, amount_out=quote.amount_out)
        return quote
