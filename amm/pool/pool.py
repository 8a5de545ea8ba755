"""Two-asset constant-product pool.

Pool is the public surface of the engine. Each mutating call runs as one
critical section:

    guards -> engine.prepare_* -> token transfers -> engine.apply_* -> events

Nothing is written to PoolState until every transfer has succeeded. If a
transfer fails, or the commit itself fails its range checks, transfers
already made for the same call are reversed and the error propagates to the
caller.
"""

from __future__ import annotations

import hashlib
import threading
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from amm.config import DEFAULT_POOL_CONFIG, PoolConfig
from amm.errors import ArithmeticInvalidState, InvalidRecipient, TransferFailed
from amm.events import (
    ControlTransferred,
    EventSink,
    InMemoryEventLog,
    LiquidityAdded,
    LiquidityRemoved,
    PoolEvent,
    PoolPaused,
    PoolUnpaused,
    ProtocolFeeCollected,
    Swapped,
)
from amm.fees import FeeConfiguration, FeeController
from amm.guards import (
    Clock,
    SystemClock,
    check_deadline,
    is_controller,
    require_controller,
    require_not_paused,
)
from amm.ledger import TokenLedger
from amm.models.snapshot import PoolSnapshot
from amm.models.types import normalize_address
from amm.pool.liquidity import BurnPlan, LiquidityEngine, MintPlan
from amm.pool.state import PoolState
from amm.pool.swap import SwapEngine, SwapQuote

logger = structlog.get_logger()


def derive_pool_address(token0: str, token1: str) -> str:
    """Deterministic pool address for a token pair (order-sensitive)."""
    digest = hashlib.sha256(
        (normalize_address(token0) + normalize_address(token1)).encode()
    ).hexdigest()
    return "0x" + digest[:40]


@dataclass(frozen=True)
class _Transfer:
    """One token movement made on behalf of a pool operation."""

    token: str
    sender: str
    recipient: str
    amount: int
    # Pulls spend the sender's allowance; pushes come from the pool's balance
    pull: bool = False

    def execute(self, ledger: TokenLedger) -> None:
        if self.pull:
            ledger.transfer_from(self.token, self.sender, self.recipient, self.amount)
        else:
            ledger.transfer(self.token, self.sender, self.recipient, self.amount)

    def revert(self, ledger: TokenLedger) -> None:
        ledger.transfer(self.token, self.recipient, self.sender, self.amount)


class Pool:
    """Constant-product pool over ``token0`` and ``token1``.

    Args:
        token0: First pool asset
        token1: Second pool asset
        controller: Identity allowed to change fees, pause and hand over control
        ledger: Token ledger used to move real balances
        address: Pool identity on the ledger (derived from the tokens if omitted)
        config: Engine parameters
        fees: Initial protocol fee settings
        clock: Time source for deadline checks
        events: Sink receiving every emitted event
        state: Existing state to resume from (fresh, empty state if omitted)
    """

    def __init__(
        self,
        token0: str,
        token1: str,
        controller: str,
        ledger: TokenLedger,
        address: str | None = None,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
        fees: FeeConfiguration | None = None,
        clock: Clock | None = None,
        events: EventSink | None = None,
        state: PoolState | None = None,
    ) -> None:
        token0 = normalize_address(token0, validate=True)
        token1 = normalize_address(token1, validate=True)
        if token0 == token1:
            raise ValueError(f"Pool tokens must differ, got {token0} twice")

        self.token0 = token0
        self.token1 = token1
        self.address = normalize_address(address or derive_pool_address(token0, token1), validate=True)
        self._controller = normalize_address(controller, validate=True)
        self.ledger = ledger
        self.config = config
        self.clock = clock if clock is not None else SystemClock()
        self.events = events if events is not None else InMemoryEventLog()

        self.state = state if state is not None else PoolState()
        self.state.check_invariants()
        self.fees = FeeController(fees, max_protocol_fee_bps=config.max_protocol_fee_bps)
        self.liquidity = LiquidityEngine(self.state, config)
        self.swaps = SwapEngine(self.state, self.fees, token0, token1, config)

        # One lock serializes every read-modify-write on this pool
        self._lock = threading.Lock()

    # --- Read accessors ---

    @property
    def controller(self) -> str:
        return self._controller

    def is_controller(self, caller: str) -> bool:
        return is_controller(caller, self._controller)

    def reserves(self) -> tuple[int, int]:
        with self._lock:
            return self.state.reserve0, self.state.reserve1

    def total_shares(self) -> int:
        with self._lock:
            return self.state.total_shares

    def shares_of(self, holder: str) -> int:
        with self._lock:
            return self.state.shares_of(holder)

    @property
    def paused(self) -> bool:
        return self.state.paused

    @property
    def protocol_fee_bps(self) -> int:
        return self.fees.config.protocol_fee_bps

    @property
    def fee_recipient(self) -> str | None:
        return self.fees.config.fee_recipient

    def quote(self, token_in: str, amount_in: int) -> SwapQuote:
        """Price a swap against current reserves without executing it."""
        with self._lock:
            return self.swaps.quote(token_in, amount_in)

    def quote_add_liquidity(self, amount0: int, amount1: int) -> MintPlan:
        with self._lock:
            return self.liquidity.prepare_add(amount0, amount1)

    def quote_remove_liquidity(self, shares: int, holder: str) -> BurnPlan:
        with self._lock:
            return self.liquidity.prepare_remove(shares, holder)

    # --- Liquidity ---

    def add_liquidity(
        self,
        depositor: str,
        amount0: int,
        amount1: int,
        deadline: int | None = None,
    ) -> MintPlan:
        """Deposit both tokens and mint shares to ``depositor``.

        Returns:
            The committed MintPlan (amounts taken and shares minted)

        Raises:
            Paused, DeadlineExpired, InsufficientLiquidityMinted,
            TransferFailed, ArithmeticInvalidState
        """
        depositor = normalize_address(depositor, validate=True)
        with self._lock:
            require_not_paused(self.state)
            check_deadline(deadline, self.clock)
            plan = self.liquidity.prepare_add(amount0, amount1)
            self._settle(
                [
                    _Transfer(self.token0, depositor, self.address, plan.amount0, pull=True),
                    _Transfer(self.token1, depositor, self.address, plan.amount1, pull=True),
                ],
                commit=lambda: self.liquidity.apply_add(plan, depositor),
            )
            self._after_commit(LiquidityAdded(depositor, plan.amount0, plan.amount1, plan.shares))

        logger.info(
            "liquidity_added",
            pool=self.address,
            depositor=depositor,
            amount0=plan.amount0,
            amount1=plan.amount1,
            shares=plan.shares,
        )
        return plan

    def remove_liquidity(
        self,
        withdrawer: str,
        shares: int,
        deadline: int | None = None,
    ) -> BurnPlan:
        """Burn ``shares`` and pay the pro-rata reserves to ``withdrawer``.

        Raises:
            Paused, DeadlineExpired, InsufficientShares, TransferFailed,
            ArithmeticInvalidState
        """
        withdrawer = normalize_address(withdrawer, validate=True)
        with self._lock:
            require_not_paused(self.state)
            check_deadline(deadline, self.clock)
            plan = self.liquidity.prepare_remove(shares, withdrawer)
            self._settle(
                [
                    _Transfer(self.token0, self.address, withdrawer, plan.amount0),
                    _Transfer(self.token1, self.address, withdrawer, plan.amount1),
                ],
                commit=lambda: self.liquidity.apply_remove(plan, withdrawer),
            )
            self._after_commit(LiquidityRemoved(withdrawer, plan.amount0, plan.amount1, plan.shares))

        logger.info(
            "liquidity_removed",
            pool=self.address,
            withdrawer=withdrawer,
            amount0=plan.amount0,
            amount1=plan.amount1,
            shares=plan.shares,
        )
        return plan

    # --- Swaps ---

    def swap(
        self,
        trader: str,
        token_in: str,
        amount_in: int,
        min_amount_out: int,
        deadline: int,
    ) -> SwapQuote:
        """Sell ``amount_in`` of ``token_in`` for the other pool token.

        Returns:
            The committed SwapQuote; ``amount_out`` is what the trader received

        Raises:
            Paused, DeadlineExpired, InvalidToken, InsufficientInputAmount,
            InsufficientOutputAmount, TransferFailed, ArithmeticInvalidState
        """
        trader = normalize_address(trader, validate=True)
        with self._lock:
            require_not_paused(self.state)
            check_deadline(deadline, self.clock)
            quote = self.swaps.prepare_swap(token_in, amount_in, min_amount_out)

            transfers = [
                _Transfer(quote.token_in, trader, self.address, quote.amount_in, pull=True),
                _Transfer(quote.token_out, self.address, trader, quote.amount_out),
            ]
            if quote.fee_recipient is not None:
                transfers.append(
                    _Transfer(quote.token_out, self.address, quote.fee_recipient, quote.protocol_fee)
                )
            self._settle(transfers, commit=lambda: self.swaps.apply_swap(quote))
            self._after_commit(
                Swapped(trader, quote.token_in, quote.amount_in, quote.token_out, quote.amount_out)
            )
            if quote.fee_recipient is not None:
                self.events.emit(
                    ProtocolFeeCollected(quote.fee_recipient, quote.token_out, quote.protocol_fee)
                )

        logger.info(
            "swap_executed",
            pool=self.address,
            trader=trader,
            token_in=quote.token_in,
            amount_in=quote.amount_in,
            token_out=quote.token_out,
            amount_out=quote.amount_out,
            protocol_fee=quote.protocol_fee,
        )
        return quote

    # --- Administration ---

    def set_protocol_fee(self, caller: str, new_bps: int) -> None:
        """Raises:
        Unauthorized: If caller is not the controller
        FeeTooHigh: If new_bps exceeds the configured ceiling
        """
        with self._lock:
            require_controller(caller, self._controller)
            self.events.emit(self.fees.set_protocol_fee(new_bps))

    def set_fee_recipient(self, caller: str, new_recipient: str | None) -> None:
        """Raises:
        Unauthorized: If caller is not the controller
        InvalidRecipient: If new_recipient is the pool's own address
        """
        with self._lock:
            require_controller(caller, self._controller)
            if new_recipient is not None and normalize_address(new_recipient) == self.address:
                raise InvalidRecipient(f"Pool {self.address} cannot collect its own protocol fee")
            self.events.emit(self.fees.set_fee_recipient(new_recipient))

    def pause(self, caller: str) -> None:
        """Block liquidity and swap operations until unpaused.

        Pausing an already paused pool changes nothing and emits nothing.
        """
        with self._lock:
            require_controller(caller, self._controller)
            if self.state.paused:
                return
            self.state.paused = True
            self.events.emit(PoolPaused(normalize_address(caller)))
        logger.warning("pool_paused", pool=self.address, caller=caller)

    def unpause(self, caller: str) -> None:
        with self._lock:
            require_controller(caller, self._controller)
            if not self.state.paused:
                return
            self.state.paused = False
            self.events.emit(PoolUnpaused(normalize_address(caller)))
        logger.info("pool_unpaused", pool=self.address, caller=caller)

    def transfer_control(self, caller: str, new_controller: str) -> None:
        """Hand the controller role to ``new_controller``."""
        new_controller = normalize_address(new_controller, validate=True)
        with self._lock:
            require_controller(caller, self._controller)
            previous, self._controller = self._controller, new_controller
            self.events.emit(ControlTransferred(previous, new_controller))
        logger.info("control_transferred", pool=self.address, previous=previous, new=new_controller)

    # --- Persistence ---

    def snapshot(self) -> PoolSnapshot:
        """Capture the committed state in its persisted layout."""
        with self._lock:
            state = self.state
            return PoolSnapshot(
                token0=self.token0,
                token1=self.token1,
                controller=self._controller,
                reserve0=str(state.reserve0),
                reserve1=str(state.reserve1),
                total_shares=str(state.total_shares),
                share_of={holder: str(balance) for holder, balance in state.share_of.items()},
                protocol_fee_bps=self.fees.config.protocol_fee_bps,
                fee_recipient=self.fees.config.fee_recipient,
                paused=state.paused,
            )

    @classmethod
    def from_snapshot(
        cls,
        snapshot: PoolSnapshot,
        ledger: TokenLedger,
        **kwargs,
    ) -> Pool:
        """Rebuild a pool from a snapshot.

        Raises:
            ArithmeticInvalidState: If the snapshot violates pool invariants
        """
        state = PoolState(
            reserve0=int(snapshot.reserve0),
            reserve1=int(snapshot.reserve1),
            total_shares=int(snapshot.total_shares),
            share_of={holder: int(balance) for holder, balance in snapshot.share_of.items()},
            paused=snapshot.paused,
        )
        fees = FeeConfiguration(snapshot.protocol_fee_bps, snapshot.fee_recipient)
        return cls(
            snapshot.token0,
            snapshot.token1,
            snapshot.controller,
            ledger,
            fees=fees,
            state=state,
            **kwargs,
        )

    # --- Internals ---

    def _settle(self, transfers: list[_Transfer], commit: Callable[[], None]) -> None:
        """Execute transfers in order, then ``commit`` the state change.

        If a transfer is rejected or the commit fails its range checks, the
        completed transfers are reversed and PoolState is left untouched.
        """
        completed: list[_Transfer] = []
        try:
            for transfer in transfers:
                if transfer.amount == 0:
                    continue
                transfer.execute(self.ledger)
                completed.append(transfer)
            commit()
        except (TransferFailed, ArithmeticInvalidState):
            for transfer in reversed(completed):
                transfer.revert(self.ledger)
            logger.warning(
                "transfers_reverted",
                pool=self.address,
                completed=len(completed),
                requested=len(transfers),
            )
            raise

    def _after_commit(self, event: PoolEvent) -> None:
        if self.config.check_invariants:
            self.state.check_invariants()
        self.events.emit(event)
