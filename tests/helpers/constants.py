"""Identities and amounts shared across tests (all addresses lowercase)."""

TOKEN_A = "0x1111111111111111111111111111111111111111"
TOKEN_B = "0x2222222222222222222222222222222222222222"
OTHER_TOKEN = "0x3333333333333333333333333333333333333333"

OWNER = "0x00000000000000000000000000000000000000a1"
USER1 = "0x00000000000000000000000000000000000000b1"
USER2 = "0x00000000000000000000000000000000000000b2"
LP = "0x00000000000000000000000000000000000000c1"
FEE_RECEIVER = "0x00000000000000000000000000000000000000fe"

# Fixed "current time" for deadline checks
NOW = 1_700_000_000

# One whole 18-decimal token
WAD = 10**18
