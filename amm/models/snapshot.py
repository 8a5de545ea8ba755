"""Persisted pool state layout.

A PoolSnapshot is the storage form of one pool: every field needed to
rebuild an identical Pool. Amounts are decimal strings so uint256 values
survive JSON round trips.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from amm.constants import MAX_PROTOCOL_FEE_BPS
from amm.models.types import Address, Uint256, normalize_address


class PoolSnapshot(BaseModel):
    """Serializable copy of a pool's committed state."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    token0: Address
    token1: Address
    controller: Address
    reserve0: Uint256 = "0"
    reserve1: Uint256 = "0"
    total_shares: Uint256 = Field(default="0", alias="totalShares")
    share_of: dict[str, Uint256] = Field(default_factory=dict, alias="shareOf")
    protocol_fee_bps: int = Field(default=0, ge=0, le=MAX_PROTOCOL_FEE_BPS, alias="protocolFeeBps")
    fee_recipient: Address | None = Field(default=None, alias="feeRecipient")
    paused: bool = False

    @field_validator("share_of")
    @classmethod
    def normalize_holders(cls, value: dict[str, str]) -> dict[str, str]:
        """Lowercase holder addresses and drop zero balances."""
        return {
            normalize_address(holder, validate=True): balance
            for holder, balance in value.items()
            if int(balance) != 0
        }

    @field_validator("fee_recipient")
    @classmethod
    def normalize_fee_recipient(cls, value: str | None) -> str | None:
        return normalize_address(value) if value is not None else None
