"""Protocol fee handling.

Usage:
    from amm.fees import FeeController

    fees = FeeController()
    event = fees.set_protocol_fee(100)
    fee = fees.protocol_fee_on(gross_amount_out)
"""

from amm.fees.controller import FeeConfiguration, FeeController

__all__ = ["FeeConfiguration", "FeeController"]
