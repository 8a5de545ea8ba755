"""Mathematical utilities for the pool engine.

This package provides exact integer primitives for reserve and share math:
- isqrt: floor square root by Babylonian iteration
- mul_div: checked (a * b) // c with floor or ceiling rounding
"""

from amm.math.integer import isqrt, mul_div

__all__ = ["isqrt", "mul_div"]
