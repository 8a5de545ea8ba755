"""Exact integer math for share minting and pricing.

Nothing here touches floating point. Every product runs through SafeInt so
an intermediate that leaves the uint256 domain raises instead of wrapping.
"""

from amm.safe_int import S


def isqrt(value: int) -> int:
    """Floor of the square root of an unsigned integer.

    Babylonian (Newton) iteration starting from the value itself; the loop
    ends as soon as the candidate stops decreasing, which leaves the floor
    of the true root. Exact for perfect squares.

    Args:
        value: Non-negative integer

    Returns:
        The largest r with r * r <= value

    Raises:
        Underflow: If value is negative
    """
    y = S(value).value
    if y > 3:
        z = y
        x = y // 2 + 1
        while x < z:
            z = x
            x = (y // x + x) // 2
        return z
    if y != 0:
        return 1
    return 0


def mul_div(a: int, b: int, denominator: int, *, round_up: bool = False) -> int:
    """Compute (a * b) / denominator with checked arithmetic.

    Args:
        a: First factor
        b: Second factor
        denominator: Divisor
        round_up: Round toward +inf instead of flooring

    Returns:
        The quotient as an int

    Raises:
        DivisionByZero: If denominator is zero
        Uint256Overflow: If a * b exceeds uint256
    """
    product = S(a) * S(b)
    if round_up:
        return product.ceiling_div(denominator).value
    return (product // denominator).value
