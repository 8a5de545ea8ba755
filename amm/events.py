"""Pool events and event sinks.

Events are frozen dataclasses. Field order is part of the contract with
indexers: it matches the on-chain event signature and is the order used by
``encode()`` when producing ABI data.
"""

from __future__ import annotations

from dataclasses import astuple, dataclass
from typing import ClassVar, Protocol, runtime_checkable

import structlog
from eth_abi import encode  # type: ignore[attr-defined]

logger = structlog.get_logger()


@dataclass(frozen=True)
class PoolEvent:
    """Base class for events emitted by a pool."""

    name: ClassVar[str] = "PoolEvent"
    abi_types: ClassVar[tuple[str, ...]] = ()

    def values(self) -> tuple:
        """Event fields in signature order."""
        return astuple(self)

    def signature(self) -> str:
        """Solidity-style event signature, e.g. ``Swapped(address,...)``."""
        return f"{self.name}({','.join(self.abi_types)})"

    def encode(self) -> str:
        """ABI-encode the event fields as a 0x-prefixed hex string."""
        return "0x" + encode(list(self.abi_types), list(self.values())).hex()

    def as_dict(self) -> dict[str, object]:
        return {"event_name": self.name, **self.__dict__}


@dataclass(frozen=True)
class LiquidityAdded(PoolEvent):
    name: ClassVar[str] = "LiquidityAdded"
    abi_types: ClassVar[tuple[str, ...]] = ("address", "uint256", "uint256", "uint256")

    provider: str
    amount0: int
    amount1: int
    shares: int


@dataclass(frozen=True)
class LiquidityRemoved(PoolEvent):
    name: ClassVar[str] = "LiquidityRemoved"
    abi_types: ClassVar[tuple[str, ...]] = ("address", "uint256", "uint256", "uint256")

    provider: str
    amount0: int
    amount1: int
    shares: int


@dataclass(frozen=True)
class Swapped(PoolEvent):
    name: ClassVar[str] = "Swapped"
    abi_types: ClassVar[tuple[str, ...]] = (
        "address",
        "address",
        "uint256",
        "address",
        "uint256",
    )

    trader: str
    token_in: str
    amount_in: int
    token_out: str
    amount_out: int


@dataclass(frozen=True)
class ProtocolFeeCollected(PoolEvent):
    name: ClassVar[str] = "ProtocolFeeCollected"
    abi_types: ClassVar[tuple[str, ...]] = ("address", "address", "uint256")

    recipient: str
    token: str
    amount: int


@dataclass(frozen=True)
class ProtocolFeeChanged(PoolEvent):
    name: ClassVar[str] = "ProtocolFeeSet"
    abi_types: ClassVar[tuple[str, ...]] = ("uint16", "uint16")

    old_bps: int
    new_bps: int


@dataclass(frozen=True)
class FeeRecipientChanged(PoolEvent):
    """Recipient change; a cleared recipient is reported as the zero address."""

    name: ClassVar[str] = "FeeToSet"
    abi_types: ClassVar[tuple[str, ...]] = ("address", "address")

    old_recipient: str
    new_recipient: str


@dataclass(frozen=True)
class PoolPaused(PoolEvent):
    name: ClassVar[str] = "Paused"
    abi_types: ClassVar[tuple[str, ...]] = ("address",)

    account: str


@dataclass(frozen=True)
class PoolUnpaused(PoolEvent):
    name: ClassVar[str] = "Unpaused"
    abi_types: ClassVar[tuple[str, ...]] = ("address",)

    account: str


@dataclass(frozen=True)
class ControlTransferred(PoolEvent):
    name: ClassVar[str] = "OwnershipTransferred"
    abi_types: ClassVar[tuple[str, ...]] = ("address", "address")

    previous_controller: str
    new_controller: str


@runtime_checkable
class EventSink(Protocol):
    """Append-only destination for pool events."""

    def emit(self, event: PoolEvent) -> None: ...


class InMemoryEventLog:
    """Event sink that keeps every event in emission order."""

    def __init__(self) -> None:
        self._events: list[PoolEvent] = []

    def emit(self, event: PoolEvent) -> None:
        self._events.append(event)

    @property
    def events(self) -> list[PoolEvent]:
        return list(self._events)

    def of_type(self, event_type: type[PoolEvent]) -> list[PoolEvent]:
        return [e for e in self._events if isinstance(e, event_type)]

    def last(self) -> PoolEvent | None:
        return self._events[-1] if self._events else None

    def __len__(self) -> int:
        return len(self._events)


class LoggingEventSink:
    """Event sink that writes each event to the structured log."""

    def emit(self, event: PoolEvent) -> None:
        logger.info("pool_event", **event.as_dict())


class FanOutEventSink:
    """Forward each event to several sinks in order."""

    def __init__(self, *sinks: EventSink) -> None:
        self.sinks = sinks

    def emit(self, event: PoolEvent) -> None:
        for sink in self.sinks:
            sink.emit(event)
