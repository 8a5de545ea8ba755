"""Pydantic request/response models for the pool HTTP API.

Field names are camelCase on the wire and snake_case in Python.
"""

from pydantic import BaseModel, Field

from amm.models.types import Address, Uint256


class AddLiquidityRequest(BaseModel):
    depositor: Address
    amount0: Uint256
    amount1: Uint256
    deadline: int | None = Field(default=None, description="Unix timestamp (seconds)")


class RemoveLiquidityRequest(BaseModel):
    withdrawer: Address
    shares: Uint256
    deadline: int | None = Field(default=None, description="Unix timestamp (seconds)")


class LiquidityResponse(BaseModel):
    """Amounts moved and shares minted or burned."""

    amount0: Uint256
    amount1: Uint256
    shares: Uint256


class QuoteRequest(BaseModel):
    token_in: Address = Field(alias="tokenIn")
    amount_in: Uint256 = Field(alias="amountIn")

    model_config = {"populate_by_name": True}


class SwapRequest(BaseModel):
    trader: Address
    token_in: Address = Field(alias="tokenIn")
    amount_in: Uint256 = Field(alias="amountIn")
    min_amount_out: Uint256 = Field(default="0", alias="minAmountOut")
    deadline: int = Field(description="Unix timestamp (seconds)")

    model_config = {"populate_by_name": True}


class SwapResponse(BaseModel):
    """Breakdown of a quoted or executed swap."""

    token_in: Address = Field(alias="tokenIn")
    token_out: Address = Field(alias="tokenOut")
    amount_in: Uint256 = Field(alias="amountIn")
    amount_out: Uint256 = Field(alias="amountOut", description="Amount paid to the trader")
    protocol_fee: Uint256 = Field(alias="protocolFee")
    gross_amount_out: Uint256 = Field(alias="grossAmountOut")

    model_config = {"populate_by_name": True}


class SharesResponse(BaseModel):
    holder: Address
    shares: Uint256


class ProtocolFeeRequest(BaseModel):
    caller: Address
    bps: int = Field(ge=0, description="Protocol fee in basis points")


class FeeRecipientRequest(BaseModel):
    caller: Address
    recipient: Address | None = None


class ControllerRequest(BaseModel):
    caller: Address


class TransferControlRequest(BaseModel):
    caller: Address
    new_controller: Address = Field(alias="newController")

    model_config = {"populate_by_name": True}


class MintRequest(BaseModel):
    token: Address
    holder: Address
    amount: Uint256


class ApproveRequest(BaseModel):
    token: Address
    owner: Address
    amount: Uint256


class EventRecord(BaseModel):
    """One emitted event with its ABI-encoded payload."""

    event: str
    signature: str
    fields: dict[str, str | int | bool]
    data: str


class ErrorResponse(BaseModel):
    error: str
    detail: str
