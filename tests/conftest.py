"""Pytest configuration and fixtures."""

import pytest

from amm.events import InMemoryEventLog
from amm.ledger import InMemoryTokenLedger
from amm.pool import Pool
from tests.helpers.constants import USER1
from tests.helpers.factories import make_pool


@pytest.fixture
def pool_bundle() -> tuple[Pool, InMemoryTokenLedger, InMemoryEventLog]:
    """An empty pool with its ledger and event log."""
    return make_pool()


@pytest.fixture
def pool(pool_bundle) -> Pool:
    """An empty TOKEN_A/TOKEN_B pool controlled by OWNER."""
    return pool_bundle[0]


@pytest.fixture
def ledger(pool_bundle) -> InMemoryTokenLedger:
    """The funded ledger backing ``pool``."""
    return pool_bundle[1]


@pytest.fixture
def event_log(pool_bundle) -> InMemoryEventLog:
    """The event log receiving ``pool`` events."""
    return pool_bundle[2]


@pytest.fixture
def seeded_pool(pool: Pool) -> Pool:
    """``pool`` after USER1 deposited (1000, 2000)."""
    pool.add_liquidity(USER1, 1000, 2000)
    return pool
