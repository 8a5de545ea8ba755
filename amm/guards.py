"""Precondition checks run before any pool mutation.

All guards are stateless: they read the context handed to them (clock,
token pair, pause flag, controller identity) and either return or raise.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import structlog

from amm.errors import DeadlineExpired, InvalidToken, Paused, Unauthorized
from amm.models.types import normalize_address

if TYPE_CHECKING:
    from amm.pool.state import PoolState

logger = structlog.get_logger()


@runtime_checkable
class Clock(Protocol):
    """Source of the current time in unix seconds."""

    def now(self) -> int: ...


class SystemClock:
    """Wall-clock time, truncated to whole seconds like a block timestamp."""

    def now(self) -> int:
        return int(time.time())


class FixedClock:
    """Clock pinned to a settable timestamp."""

    def __init__(self, timestamp: int = 0) -> None:
        self.timestamp = timestamp

    def now(self) -> int:
        return self.timestamp

    def advance(self, seconds: int) -> None:
        self.timestamp += seconds


def check_deadline(deadline: int | None, clock: Clock) -> None:
    """Reject an operation whose deadline lies in the past.

    A deadline equal to the current time is still accepted. ``None`` means
    the caller did not supply one.

    Raises:
        DeadlineExpired: If clock.now() > deadline
    """
    if deadline is None:
        return
    now = clock.now()
    if now > deadline:
        logger.warning("deadline_expired", deadline=deadline, now=now)
        raise DeadlineExpired(f"Deadline {deadline} expired at {now}")


def check_token(token: str, token0: str, token1: str) -> str:
    """Validate that ``token`` is one of the pool's assets.

    Returns:
        The normalized token address

    Raises:
        InvalidToken: If token is neither token0 nor token1
    """
    token_norm = normalize_address(token)
    if token_norm not in (normalize_address(token0), normalize_address(token1)):
        raise InvalidToken(f"Token {token} not in pool")
    return token_norm


def require_not_paused(state: PoolState) -> None:
    """Raises:
    Paused: If the pool is paused
    """
    if state.paused:
        raise Paused("Pool is paused")


def is_controller(caller: str, controller: str) -> bool:
    """True if ``caller`` is the pool's controller identity."""
    return normalize_address(caller) == normalize_address(controller)


def require_controller(caller: str, controller: str) -> None:
    """Raises:
    Unauthorized: If caller is not the controller
    """
    if not is_controller(caller, controller):
        logger.warning("unauthorized_caller", caller=caller)
        raise Unauthorized(f"Caller {caller} is not the controller")
