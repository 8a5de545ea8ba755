"""Pool error classes.

Every failure rejects the whole requested operation; none of these errors
leave partial state behind. Each class carries a stable ``code`` that matches
the revert reason reported by the on-chain pool.
"""


class PoolError(Exception):
    """Base error for pool operations."""

    code = "POOL_ERROR"


class InvalidToken(PoolError):
    """Asset is neither of the pool's two configured tokens."""

    code = "INVALID_TOKEN"


class DeadlineExpired(PoolError):
    """Caller-supplied deadline has already passed."""

    code = "DEADLINE_EXPIRED"


class InsufficientOutputAmount(PoolError):
    """Computed swap output is below the caller's minimum (slippage)."""

    code = "INSUFFICIENT_OUTPUT_AMOUNT"


class InsufficientInputAmount(PoolError):
    """Swap input must be positive."""

    code = "INSUFFICIENT_INPUT_AMOUNT"


class InsufficientLiquidityMinted(PoolError):
    """Deposit would mint zero shares."""

    code = "INSUFFICIENT_LIQUIDITY_MINTED"


class InsufficientShares(PoolError):
    """Withdrawal requests more shares than the holder owns."""

    code = "INSUFFICIENT_SHARES"


class FeeTooHigh(PoolError):
    """Protocol fee above the 10% ceiling."""

    code = "FEE_TOO_HIGH"


class InvalidRecipient(PoolError):
    """Protocol fee recipient cannot be the pool itself."""

    code = "INVALID_RECIPIENT"


class Unauthorized(PoolError):
    """Caller is not the pool controller."""

    code = "UNAUTHORIZED"


class Paused(PoolError):
    """Mutating operation attempted while the pool is paused."""

    code = "PAUSED"


class TransferFailed(PoolError):
    """Token ledger rejected a transfer."""

    code = "TRANSFER_FAILED"


class ArithmeticInvalidState(PoolError, ArithmeticError):
    """Division by zero, underflow or uint256 overflow in pool math.

    Also raised when a swap is priced against an empty pool or when a
    restored state violates the pool invariants.
    """

    code = "ARITHMETIC_INVALID_STATE"
