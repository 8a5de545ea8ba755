"""Protocol fee configuration and validated updates."""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from amm.constants import BPS_DENOMINATOR, MAX_PROTOCOL_FEE_BPS, ZERO_ADDRESS
from amm.errors import ArithmeticInvalidState, FeeTooHigh
from amm.events import FeeRecipientChanged, ProtocolFeeChanged
from amm.models.types import normalize_address
from amm.safe_int import S

logger = structlog.get_logger()


def _normalize_recipient(recipient: str | None) -> str | None:
    """Lowercase a recipient address; the zero address means no recipient."""
    if recipient is None:
        return None
    recipient = normalize_address(recipient, validate=True)
    return None if recipient == ZERO_ADDRESS else recipient


@dataclass(frozen=True)
class FeeConfiguration:
    """Current protocol fee settings.

    Attributes:
        protocol_fee_bps: Share of swap output sent to the recipient, in bps
        fee_recipient: Receiver of protocol fees; None disables collection
    """

    protocol_fee_bps: int = 0
    fee_recipient: str | None = None

    @property
    def collects(self) -> bool:
        """True if swaps currently carve out a protocol fee."""
        return self.protocol_fee_bps > 0 and self.fee_recipient is not None


class FeeController:
    """Owns the FeeConfiguration read by the swap engine.

    Writes are validated here; whether the caller may write at all is decided
    by the controller gate before these methods run.
    """

    def __init__(
        self,
        config: FeeConfiguration | None = None,
        max_protocol_fee_bps: int = MAX_PROTOCOL_FEE_BPS,
    ) -> None:
        self.max_protocol_fee_bps = max_protocol_fee_bps
        config = config or FeeConfiguration()
        self._validate_bps(config.protocol_fee_bps)
        self._config = FeeConfiguration(
            config.protocol_fee_bps, _normalize_recipient(config.fee_recipient)
        )

    @property
    def config(self) -> FeeConfiguration:
        return self._config

    def _validate_bps(self, bps: int) -> None:
        if bps < 0:
            raise ArithmeticInvalidState(f"Protocol fee cannot be negative: {bps}")
        if bps > self.max_protocol_fee_bps:
            raise FeeTooHigh(f"Protocol fee {bps} bps exceeds {self.max_protocol_fee_bps} bps")

    def set_protocol_fee(self, new_bps: int) -> ProtocolFeeChanged:
        """Replace the protocol fee rate.

        Raises:
            FeeTooHigh: If new_bps exceeds the ceiling
            ArithmeticInvalidState: If new_bps is negative
        """
        self._validate_bps(new_bps)
        old_bps = self._config.protocol_fee_bps
        self._config = FeeConfiguration(new_bps, self._config.fee_recipient)
        logger.info("protocol_fee_set", old_bps=old_bps, new_bps=new_bps)
        return ProtocolFeeChanged(old_bps=old_bps, new_bps=new_bps)

    def set_fee_recipient(self, new_recipient: str | None) -> FeeRecipientChanged:
        """Replace (or clear, with None) the protocol fee recipient."""
        new_recipient = _normalize_recipient(new_recipient)
        old_recipient = self._config.fee_recipient
        self._config = FeeConfiguration(self._config.protocol_fee_bps, new_recipient)
        logger.info("fee_recipient_set", old_recipient=old_recipient, new_recipient=new_recipient)
        return FeeRecipientChanged(
            old_recipient=old_recipient or ZERO_ADDRESS,
            new_recipient=new_recipient or ZERO_ADDRESS,
        )

    def protocol_fee_on(self, gross_amount_out: int) -> int:
        """Protocol fee carved from a swap's gross output (floor)."""
        if not self._config.collects:
            return 0
        return (S(gross_amount_out) * self._config.protocol_fee_bps // BPS_DENOMINATOR).value
