"""Token ledger collaborator.

The pool never holds real balances itself; it asks a ledger to move tokens.
``TokenLedger`` is the narrow interface the pool depends on.
``InMemoryTokenLedger`` is an ERC20-style reference implementation with
balances and allowances per token, used by tests, the API and scripts.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Protocol, runtime_checkable

import structlog

from amm.errors import TransferFailed
from amm.models.types import normalize_address

logger = structlog.get_logger()


@runtime_checkable
class TokenLedger(Protocol):
    """Balance ledger for the pool's two tokens.

    Both transfer methods raise TransferFailed when the move is rejected and
    leave balances untouched in that case.
    """

    def transfer_from(self, token: str, owner: str, recipient: str, amount: int) -> None:
        """Move ``amount`` from ``owner`` to ``recipient`` using an allowance
        granted by ``owner`` to the recipient."""
        ...

    def transfer(self, token: str, sender: str, recipient: str, amount: int) -> None:
        """Move ``amount`` from ``sender``'s own balance to ``recipient``."""
        ...

    def balance_of(self, token: str, holder: str) -> int: ...


class InMemoryTokenLedger:
    """ERC20-style balances and allowances held in dictionaries.

    Allowances are keyed by (token, owner, spender). ``transfer_from`` spends
    the allowance ``owner`` granted to ``recipient``, which is how the pool
    pulls deposits and swap inputs.
    """

    def __init__(self) -> None:
        self._balances: dict[str, dict[str, int]] = defaultdict(dict)
        self._allowances: dict[tuple[str, str, str], int] = {}

    def mint(self, token: str, holder: str, amount: int) -> None:
        """Credit newly issued tokens to ``holder``."""
        if amount < 0:
            raise ValueError(f"Cannot mint a negative amount: {amount}")
        token, holder = normalize_address(token), normalize_address(holder)
        balances = self._balances[token]
        balances[holder] = balances.get(holder, 0) + amount

    def approve(self, token: str, owner: str, spender: str, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"Cannot approve a negative amount: {amount}")
        key = (normalize_address(token), normalize_address(owner), normalize_address(spender))
        self._allowances[key] = amount

    def allowance(self, token: str, owner: str, spender: str) -> int:
        key = (normalize_address(token), normalize_address(owner), normalize_address(spender))
        return self._allowances.get(key, 0)

    def balance_of(self, token: str, holder: str) -> int:
        return self._balances[normalize_address(token)].get(normalize_address(holder), 0)

    def total_supply(self, token: str) -> int:
        return sum(self._balances[normalize_address(token)].values())

    def transfer(self, token: str, sender: str, recipient: str, amount: int) -> None:
        self._move(normalize_address(token), normalize_address(sender), normalize_address(recipient), amount)

    def transfer_from(self, token: str, owner: str, recipient: str, amount: int) -> None:
        token = normalize_address(token)
        owner, recipient = normalize_address(owner), normalize_address(recipient)
        key = (token, owner, recipient)
        allowed = self._allowances.get(key, 0)
        if amount > allowed:
            logger.warning(
                "transfer_rejected",
                reason="insufficient_allowance",
                token=token,
                owner=owner,
                amount=amount,
                allowance=allowed,
            )
            raise TransferFailed(f"Allowance {allowed} below transfer amount {amount}")
        self._move(token, owner, recipient, amount)
        self._allowances[key] = allowed - amount

    def _move(self, token: str, sender: str, recipient: str, amount: int) -> None:
        if amount < 0:
            raise TransferFailed(f"Cannot transfer a negative amount: {amount}")
        balances = self._balances[token]
        available = balances.get(sender, 0)
        if amount > available:
            logger.warning(
                "transfer_rejected",
                reason="insufficient_balance",
                token=token,
                sender=sender,
                amount=amount,
                balance=available,
            )
            raise TransferFailed(f"Balance {available} below transfer amount {amount}")
        balances[sender] = available - amount
        balances[recipient] = balances.get(recipient, 0) + amount
