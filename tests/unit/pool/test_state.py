"""Tests for PoolState bookkeeping and invariant checks."""

import pytest

from amm.errors import ArithmeticInvalidState
from amm.pool import PoolState
from tests.helpers import USER1, USER2


class TestShareBookkeeping:
    """Crediting and debiting shares."""

    def test_credit_shares(self):
        state = PoolState()
        state.credit_shares(USER1, 100)
        state.credit_shares(USER2, 50)
        state.credit_shares(USER1, 10)
        assert state.shares_of(USER1) == 110
        assert state.shares_of(USER2) == 50
        assert state.total_shares == 160

    def test_debit_to_zero_removes_holder(self):
        """Holders with a zero balance are dropped from share_of."""
        state = PoolState()
        state.credit_shares(USER1, 100)
        state.debit_shares(USER1, 100)
        assert USER1 not in state.share_of
        assert state.total_shares == 0

    def test_debit_more_than_owned(self):
        state = PoolState()
        state.credit_shares(USER1, 5)
        with pytest.raises(ArithmeticInvalidState):
            state.debit_shares(USER1, 6)

    def test_holder_lookup_is_case_insensitive(self):
        state = PoolState()
        state.credit_shares(USER1.upper().replace("0X", "0x"), 7)
        assert state.shares_of(USER1) == 7

    def test_get_reserves_orientation(self):
        state = PoolState(reserve0=100, reserve1=200)
        assert state.get_reserves(zero_for_one=True) == (100, 200)
        assert state.get_reserves(zero_for_one=False) == (200, 100)

    def test_k(self):
        assert PoolState(reserve0=100, reserve1=200).k == 20_000


class TestInvariantChecks:
    """check_invariants rejects inconsistent states."""

    def test_empty_state_is_valid(self):
        PoolState().check_invariants()

    def test_funded_state_is_valid(self):
        state = PoolState(reserve0=1000, reserve1=2000, total_shares=1414, share_of={USER1: 1414})
        state.check_invariants()

    def test_share_sum_mismatch(self):
        """Balances must sum to total_shares."""
        state = PoolState(reserve0=1000, reserve1=2000, total_shares=1414, share_of={USER1: 1000})
        with pytest.raises(ArithmeticInvalidState, match="sum"):
            state.check_invariants()

    def test_reserves_without_shares(self):
        """No shares means no reserves."""
        state = PoolState(reserve0=5, reserve1=0)
        with pytest.raises(ArithmeticInvalidState):
            state.check_invariants()

    def test_shares_with_one_empty_reserve(self):
        """Outstanding shares need both reserves funded."""
        state = PoolState(reserve0=5, reserve1=0, total_shares=1, share_of={USER1: 1})
        with pytest.raises(ArithmeticInvalidState):
            state.check_invariants()

    def test_negative_values(self):
        state = PoolState(reserve0=-1, reserve1=10, total_shares=1, share_of={USER1: 1})
        with pytest.raises(ArithmeticInvalidState):
            state.check_invariants()

    def test_zero_balance_entry(self):
        state = PoolState(reserve0=1, reserve1=1, total_shares=1, share_of={USER1: 1, USER2: 0})
        with pytest.raises(ArithmeticInvalidState):
            state.check_invariants()
