"""Tests for protocol fee configuration."""

import pytest

from amm.constants import ZERO_ADDRESS
from amm.errors import ArithmeticInvalidState, FeeTooHigh
from amm.events import FeeRecipientChanged, ProtocolFeeChanged
from amm.fees import FeeConfiguration, FeeController
from tests.helpers import FEE_RECEIVER, USER1


class TestFeeConfiguration:
    """Tests for FeeConfiguration defaults."""

    def test_defaults(self):
        config = FeeConfiguration()
        assert config.protocol_fee_bps == 0
        assert config.fee_recipient is None
        assert not config.collects

    def test_collects_needs_rate_and_recipient(self):
        assert not FeeConfiguration(100).collects
        assert not FeeConfiguration(0, FEE_RECEIVER).collects
        assert FeeConfiguration(100, FEE_RECEIVER).collects

    def test_frozen(self):
        config = FeeConfiguration()
        with pytest.raises(AttributeError):
            config.protocol_fee_bps = 5  # type: ignore[misc]


class TestSetProtocolFee:
    """Tests for FeeController.set_protocol_fee."""

    def test_returns_change_event(self):
        fees = FeeController()
        assert fees.set_protocol_fee(100) == ProtocolFeeChanged(old_bps=0, new_bps=100)
        assert fees.set_protocol_fee(30) == ProtocolFeeChanged(old_bps=100, new_bps=30)
        assert fees.config.protocol_fee_bps == 30

    def test_ceiling_inclusive(self):
        fees = FeeController()
        fees.set_protocol_fee(1000)
        assert fees.config.protocol_fee_bps == 1000

    def test_above_ceiling(self):
        fees = FeeController()
        with pytest.raises(FeeTooHigh):
            fees.set_protocol_fee(1001)
        assert fees.config.protocol_fee_bps == 0

    def test_negative(self):
        with pytest.raises(ArithmeticInvalidState):
            FeeController().set_protocol_fee(-1)

    def test_custom_ceiling(self):
        fees = FeeController(max_protocol_fee_bps=50)
        with pytest.raises(FeeTooHigh):
            fees.set_protocol_fee(51)

    def test_invalid_initial_config(self):
        with pytest.raises(FeeTooHigh):
            FeeController(FeeConfiguration(protocol_fee_bps=2000))

    def test_initial_recipient_normalized(self):
        fees = FeeController(FeeConfiguration(100, FEE_RECEIVER.upper().replace("0X", "0x")))
        assert fees.config.fee_recipient == FEE_RECEIVER
        assert FeeController(FeeConfiguration(100, ZERO_ADDRESS)).config.collects is False

    def test_recipient_kept(self):
        fees = FeeController(FeeConfiguration(0, FEE_RECEIVER))
        fees.set_protocol_fee(10)
        assert fees.config.fee_recipient == FEE_RECEIVER


class TestSetFeeRecipient:
    """Tests for FeeController.set_fee_recipient."""

    def test_set_and_replace(self):
        fees = FeeController()
        assert fees.set_fee_recipient(FEE_RECEIVER) == FeeRecipientChanged(ZERO_ADDRESS, FEE_RECEIVER)
        assert fees.set_fee_recipient(USER1) == FeeRecipientChanged(FEE_RECEIVER, USER1)
        assert fees.config.fee_recipient == USER1

    def test_clear_with_none(self):
        fees = FeeController(FeeConfiguration(0, FEE_RECEIVER))
        assert fees.set_fee_recipient(None) == FeeRecipientChanged(FEE_RECEIVER, ZERO_ADDRESS)
        assert fees.config.fee_recipient is None

    def test_zero_address_clears(self):
        fees = FeeController(FeeConfiguration(0, FEE_RECEIVER))
        fees.set_fee_recipient(ZERO_ADDRESS)
        assert fees.config.fee_recipient is None

    def test_normalizes(self):
        fees = FeeController()
        fees.set_fee_recipient(FEE_RECEIVER.upper().replace("0X", "0x"))
        assert fees.config.fee_recipient == FEE_RECEIVER

    def test_invalid_address(self):
        with pytest.raises(ValueError):
            FeeController().set_fee_recipient("0x12")


class TestProtocolFeeOn:
    """Tests for FeeController.protocol_fee_on."""

    def test_floor(self):
        fees = FeeController(FeeConfiguration(100, FEE_RECEIVER))
        assert fees.protocol_fee_on(180) == 1
        assert fees.protocol_fee_on(99) == 0
        assert fees.protocol_fee_on(10_000) == 100

    def test_disabled_without_recipient(self):
        assert FeeController(FeeConfiguration(1000)).protocol_fee_on(10_000) == 0

    def test_max_rate(self):
        fees = FeeController(FeeConfiguration(1000, FEE_RECEIVER))
        assert fees.protocol_fee_on(1234) == 123
