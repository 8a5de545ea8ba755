"""Tests for precondition guards."""

import pytest

from amm.errors import DeadlineExpired, InvalidToken, Paused, Unauthorized
from amm.guards import (
    Clock,
    FixedClock,
    SystemClock,
    check_deadline,
    check_token,
    is_controller,
    require_controller,
    require_not_paused,
)
from amm.pool import PoolState
from tests.helpers import NOW, OTHER_TOKEN, OWNER, TOKEN_A, TOKEN_B, USER1


class TestClocks:
    def test_fixed_clock(self):
        clock = FixedClock(NOW)
        assert clock.now() == NOW
        clock.advance(30)
        assert clock.now() == NOW + 30

    def test_system_clock_is_integer_seconds(self):
        assert isinstance(SystemClock().now(), int)
        assert SystemClock().now() > NOW

    def test_protocol(self):
        assert isinstance(FixedClock(), Clock)
        assert isinstance(SystemClock(), Clock)


class TestCheckDeadline:
    """Deadlines in the past are rejected; now is still in time."""

    def test_future(self):
        check_deadline(NOW + 1, FixedClock(NOW))

    def test_equal_to_now(self):
        check_deadline(NOW, FixedClock(NOW))

    def test_past(self):
        with pytest.raises(DeadlineExpired):
            check_deadline(NOW - 1, FixedClock(NOW))

    def test_none_skips_check(self):
        check_deadline(None, FixedClock(NOW))


class TestCheckToken:
    def test_returns_normalized(self):
        assert check_token(TOKEN_B.upper().replace("0X", "0x"), TOKEN_A, TOKEN_B) == TOKEN_B

    def test_foreign_token(self):
        with pytest.raises(InvalidToken):
            check_token(OTHER_TOKEN, TOKEN_A, TOKEN_B)


class TestGates:
    """Pause and controller gates."""

    def test_not_paused(self):
        require_not_paused(PoolState())

    def test_paused(self):
        with pytest.raises(Paused):
            require_not_paused(PoolState(paused=True))

    def test_controller(self):
        assert is_controller(OWNER, OWNER)
        assert is_controller(OWNER.upper().replace("0X", "0x"), OWNER)
        assert not is_controller(USER1, OWNER)
        require_controller(OWNER, OWNER)

    def test_not_controller(self):
        with pytest.raises(Unauthorized):
            require_controller(USER1, OWNER)
