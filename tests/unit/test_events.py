"""Tests for pool events and sinks."""

from unittest.mock import MagicMock

import pytest
from eth_abi import decode  # type: ignore[attr-defined]

from amm.constants import ZERO_ADDRESS
from amm.events import (
    EventSink,
    FanOutEventSink,
    FeeRecipientChanged,
    InMemoryEventLog,
    LiquidityAdded,
    LoggingEventSink,
    PoolPaused,
    ProtocolFeeChanged,
    Swapped,
)
from tests.helpers import FEE_RECEIVER, OWNER, TOKEN_A, TOKEN_B, USER1, USER2


class TestEncoding:
    """Events ABI-encode in signature order."""

    def test_signature(self):
        event = Swapped(USER2, TOKEN_A, 100, TOKEN_B, 180)
        assert event.signature() == "Swapped(address,address,uint256,address,uint256)"

    def test_encode_decodes_back(self):
        event = LiquidityAdded(USER1, 1000, 2000, 1414)
        data = event.encode()
        assert data.startswith("0x")
        assert len(data) == 2 + 4 * 64
        decoded = decode(list(event.abi_types), bytes.fromhex(data[2:]))
        # eth_abi returns checksummed addresses
        assert decoded[0].lower() == USER1
        assert decoded[1:] == (1000, 2000, 1414)

    def test_renamed_events(self):
        assert ProtocolFeeChanged(0, 100).signature() == "ProtocolFeeSet(uint16,uint16)"
        assert FeeRecipientChanged(ZERO_ADDRESS, FEE_RECEIVER).signature() == "FeeToSet(address,address)"

    def test_as_dict(self):
        assert PoolPaused(OWNER).as_dict() == {"event_name": "Paused", "account": OWNER}

    def test_frozen(self):
        event = PoolPaused(OWNER)
        with pytest.raises(AttributeError):
            event.account = USER1  # type: ignore[misc]


class TestSinks:
    def test_in_memory_log(self):
        log = InMemoryEventLog()
        assert len(log) == 0
        assert log.last() is None
        log.emit(PoolPaused(OWNER))
        log.emit(LiquidityAdded(USER1, 1, 2, 1))
        assert len(log) == 2
        assert log.of_type(PoolPaused) == [PoolPaused(OWNER)]
        assert log.last() == LiquidityAdded(USER1, 1, 2, 1)

    def test_events_returns_copy(self):
        log = InMemoryEventLog()
        log.emit(PoolPaused(OWNER))
        log.events.clear()
        assert len(log) == 1

    def test_logging_sink(self):
        LoggingEventSink().emit(PoolPaused(OWNER))

    def test_fan_out_preserves_order(self):
        first, second = MagicMock(), MagicMock()
        sink = FanOutEventSink(first, second)
        event = PoolPaused(OWNER)
        sink.emit(event)
        first.emit.assert_called_once_with(event)
        second.emit.assert_called_once_with(event)

    def test_protocol(self):
        assert isinstance(InMemoryEventLog(), EventSink)
        assert isinstance(FanOutEventSink(), EventSink)
