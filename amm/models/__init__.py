"""Pydantic models for pool persistence and the HTTP API."""

from amm.models.snapshot import PoolSnapshot
from amm.models.types import Address, Uint256, is_valid_address, normalize_address

__all__ = [
    "Address",
    "Uint256",
    "PoolSnapshot",
    "is_valid_address",
    "normalize_address",
]
