"""API endpoints for a single pool."""

import os

import structlog
from fastapi import APIRouter, Depends, HTTPException

from amm.events import InMemoryEventLog
from amm.ledger import InMemoryTokenLedger
from amm.models.api import (
    AddLiquidityRequest,
    ApproveRequest,
    ControllerRequest,
    EventRecord,
    FeeRecipientRequest,
    LiquidityResponse,
    MintRequest,
    ProtocolFeeRequest,
    QuoteRequest,
    RemoveLiquidityRequest,
    SharesResponse,
    SwapRequest,
    SwapResponse,
    TransferControlRequest,
)
from amm.models.snapshot import PoolSnapshot
from amm.models.types import is_valid_address, normalize_address
from amm.pool import BurnPlan, MintPlan, Pool, SwapQuote

logger = structlog.get_logger()

router = APIRouter()

# Pool configuration from environment variables
DEFAULT_TOKEN0 = "0x1000000000000000000000000000000000000000"
DEFAULT_TOKEN1 = "0x2000000000000000000000000000000000000000"
DEFAULT_CONTROLLER = "0x3000000000000000000000000000000000000000"

_default_pool: Pool | None = None


def _create_default_pool() -> Pool:
    """Create the service pool over an in-memory ledger.

    Tokens and controller come from AMM_TOKEN0, AMM_TOKEN1 and
    AMM_CONTROLLER.
    """
    pool = Pool(
        token0=os.environ.get("AMM_TOKEN0", DEFAULT_TOKEN0),
        token1=os.environ.get("AMM_TOKEN1", DEFAULT_TOKEN1),
        controller=os.environ.get("AMM_CONTROLLER", DEFAULT_CONTROLLER),
        ledger=InMemoryTokenLedger(),
    )
    logger.info("pool_created", pool=pool.address, token0=pool.token0, token1=pool.token1)
    return pool


def get_pool() -> Pool:
    """Dependency provider for the pool instance.

    Override this in tests to inject a prepared pool:
        app.dependency_overrides[get_pool] = lambda: pool
    """
    global _default_pool
    if _default_pool is None:
        _default_pool = _create_default_pool()
    return _default_pool


def _liquidity_response(plan: MintPlan | BurnPlan) -> LiquidityResponse:
    return LiquidityResponse(
        amount0=str(plan.amount0),
        amount1=str(plan.amount1),
        shares=str(plan.shares),
    )


def _swap_response(quote: SwapQuote) -> SwapResponse:
    return SwapResponse(
        token_in=quote.token_in,
        token_out=quote.token_out,
        amount_in=str(quote.amount_in),
        amount_out=str(quote.amount_out),
        protocol_fee=str(quote.protocol_fee),
        gross_amount_out=str(quote.gross_amount_out),
    )


def _dev_ledger(pool: Pool) -> InMemoryTokenLedger:
    if not isinstance(pool.ledger, InMemoryTokenLedger):
        raise HTTPException(status_code=404, detail="Pool ledger does not support direct access")
    return pool.ledger


# --- Pool state ---


@router.get("/pool", response_model_by_alias=True)
async def get_pool_state(pool: Pool = Depends(get_pool)) -> PoolSnapshot:
    return pool.snapshot()


@router.get("/pool/shares/{holder}")
async def get_shares(holder: str, pool: Pool = Depends(get_pool)) -> SharesResponse:
    if not is_valid_address(holder):
        raise HTTPException(status_code=422, detail=f"Invalid address: {holder}")
    holder = normalize_address(holder)
    return SharesResponse(holder=holder, shares=str(pool.shares_of(holder)))


@router.get("/events")
async def get_events(pool: Pool = Depends(get_pool)) -> list[EventRecord]:
    """Events emitted so far, oldest first (in-memory event log only)."""
    if not isinstance(pool.events, InMemoryEventLog):
        raise HTTPException(status_code=404, detail="Pool event sink is not queryable")
    return [
        EventRecord(
            event=event.name,
            signature=event.signature(),
            fields=dict(event.__dict__),
            data=event.encode(),
        )
        for event in pool.events.events
    ]


# --- Trading ---


@router.post("/quote", response_model_by_alias=True)
async def quote(request: QuoteRequest, pool: Pool = Depends(get_pool)) -> SwapResponse:
    return _swap_response(pool.quote(request.token_in, int(request.amount_in)))


@router.post("/swap", response_model_by_alias=True)
async def swap(request: SwapRequest, pool: Pool = Depends(get_pool)) -> SwapResponse:
    result = pool.swap(
        trader=request.trader,
        token_in=request.token_in,
        amount_in=int(request.amount_in),
        min_amount_out=int(request.min_amount_out),
        deadline=request.deadline,
    )
    return _swap_response(result)


# --- Liquidity ---


@router.post("/liquidity/add")
async def add_liquidity(request: AddLiquidityRequest, pool: Pool = Depends(get_pool)) -> LiquidityResponse:
    plan = pool.add_liquidity(
        depositor=request.depositor,
        amount0=int(request.amount0),
        amount1=int(request.amount1),
        deadline=request.deadline,
    )
    return _liquidity_response(plan)


@router.post("/liquidity/remove")
async def remove_liquidity(
    request: RemoveLiquidityRequest, pool: Pool = Depends(get_pool)
) -> LiquidityResponse:
    plan = pool.remove_liquidity(
        withdrawer=request.withdrawer,
        shares=int(request.shares),
        deadline=request.deadline,
    )
    return _liquidity_response(plan)


# --- Administration ---


@router.post("/admin/protocol-fee", status_code=204)
async def set_protocol_fee(request: ProtocolFeeRequest, pool: Pool = Depends(get_pool)) -> None:
    pool.set_protocol_fee(request.caller, request.bps)


@router.post("/admin/fee-recipient", status_code=204)
async def set_fee_recipient(request: FeeRecipientRequest, pool: Pool = Depends(get_pool)) -> None:
    pool.set_fee_recipient(request.caller, request.recipient)


@router.post("/admin/pause", status_code=204)
async def pause(request: ControllerRequest, pool: Pool = Depends(get_pool)) -> None:
    pool.pause(request.caller)


@router.post("/admin/unpause", status_code=204)
async def unpause(request: ControllerRequest, pool: Pool = Depends(get_pool)) -> None:
    pool.unpause(request.caller)


@router.post("/admin/transfer-control", status_code=204)
async def transfer_control(request: TransferControlRequest, pool: Pool = Depends(get_pool)) -> None:
    pool.transfer_control(request.caller, request.new_controller)


# --- Development ledger ---


@router.post("/ledger/mint", status_code=204)
async def mint(request: MintRequest, pool: Pool = Depends(get_pool)) -> None:
    _dev_ledger(pool).mint(request.token, request.holder, int(request.amount))


@router.post("/ledger/approve", status_code=204)
async def approve(request: ApproveRequest, pool: Pool = Depends(get_pool)) -> None:
    """Let the pool pull up to ``amount`` of ``token`` from ``owner``."""
    _dev_ledger(pool).approve(request.token, request.owner, pool.address, int(request.amount))


@router.get("/ledger/balance/{token}/{holder}")
async def balance(token: str, holder: str, pool: Pool = Depends(get_pool)) -> dict[str, str]:
    return {"balance": str(_dev_ledger(pool).balance_of(token, holder))}
