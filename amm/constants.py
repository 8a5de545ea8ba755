"""Pool protocol constants.

Centralizes fee parameters and well-known addresses.
"""

# Basis-point denominator (1 bp = 0.01%)
BPS_DENOMINATOR = 10_000

# Trading fee retained by the pool on every swap input (30 bps = 0.30%)
TRADING_FEE_BPS = 30

# Ceiling for the protocol fee carved from swap output (1000 bps = 10%)
MAX_PROTOCOL_FEE_BPS = 1_000

# Encodes "no fee recipient" in events and on the wire
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
