"""Test helpers module for shared test utilities.

- constants: Identities, token addresses and common amounts
- factories: Pool and ledger factory functions
"""

from tests.helpers.constants import (
    FEE_RECEIVER,
    LP,
    NOW,
    OTHER_TOKEN,
    OWNER,
    TOKEN_A,
    TOKEN_B,
    USER1,
    USER2,
    WAD,
)
from tests.helpers.factories import approve_pool, funded_ledger, make_pool

__all__ = [
    # Constants
    "TOKEN_A",
    "TOKEN_B",
    "OTHER_TOKEN",
    "OWNER",
    "USER1",
    "USER2",
    "LP",
    "FEE_RECEIVER",
    "NOW",
    "WAD",
    # Factories
    "make_pool",
    "funded_ledger",
    "approve_pool",
]
