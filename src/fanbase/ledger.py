"""Currency ledger - the funds collaborator used by paid marketplace actions.

The marketplace only needs three things from a currency: a free balance,
an affordability check and a transfer. Currency is the protocol a host
implements; Ledger is the in-process implementation.

Balances are stored as int (discrete currency units) - no precision issues.
"""

# All balance mutations go through here.
# Never allow negative balances - fail loud.
from __future__ import annotations

import logging
from typing import Protocol

from ..config import get_validated_config
from ..config_schema import CurrencyConfig

logger = logging.getLogger(__name__)


class Currency(Protocol):
    """Funds-transfer interface consumed by the marketplace."""

    def free_balance(self, account: str) -> int: ...

    def can_afford(self, account: str, amount: int, keep_alive: bool = True) -> bool: ...

    def transfer(self, from_id: str, to_id: str, amount: int, keep_alive: bool = True) -> bool: ...


class Ledger:
    """
    Tracks currency balances per account.

    With keep_alive, a transfer must leave the payer with at least
    existential_deposit; otherwise the payer may be drained to zero.
    """

    balances: dict[str, int]
    existential_deposit: int

    def __init__(self, existential_deposit: int = 0) -> None:
        if existential_deposit < 0:
            raise ValueError(f"existential_deposit must be >= 0, got {existential_deposit}")
        self.balances = {}
        self.existential_deposit = existential_deposit

    @classmethod
    def from_config(cls, currency_config: CurrencyConfig | None = None) -> Ledger:
        """Create Ledger from the currency section of the config."""
        cfg = currency_config or get_validated_config().currency
        return cls(existential_deposit=cfg.existential_deposit)

    def create_principal(self, account: str, starting_balance: int = 0) -> None:
        """Create an account with a starting balance."""
        if starting_balance < 0:
            raise ValueError(f"starting_balance must be >= 0, got {starting_balance}")
        self.balances[account] = starting_balance

    def free_balance(self, account: str) -> int:
        """Get balance (0 for unknown accounts)."""
        return self.balances.get(account, 0)

    def can_afford(self, account: str, amount: int, keep_alive: bool = True) -> bool:
        """Check whether account can pay amount.

        With keep_alive the remaining balance must cover the existential
        deposit. A zero amount is always affordable.
        """
        if amount < 0:
            return False
        if amount == 0:
            return True
        remaining = self.free_balance(account) - amount
        if remaining < 0:
            return False
        if keep_alive and remaining < self.existential_deposit:
            return False
        return True

    def credit(self, account: str, amount: int) -> None:
        """Add funds to account (from deposits, faucets, tests)."""
        if amount < 0:
            raise ValueError(f"credit amount must be >= 0, got {amount}")
        self.balances[account] = self.free_balance(account) + amount

    def transfer(self, from_id: str, to_id: str, amount: int, keep_alive: bool = True) -> bool:
        """Move amount between accounts. Returns False if the payer cannot afford it.

        Auto-creates recipient with 0 balance if not exists.
        """
        if not self.can_afford(from_id, amount, keep_alive=keep_alive):
            logger.info(
                "Transfer of %d from %s to %s refused (balance %d)",
                amount, from_id, to_id, self.free_balance(from_id),
            )
            return False
        if amount == 0 or from_id == to_id:
            return True
        self.balances[from_id] = self.free_balance(from_id) - amount
        self.balances[to_id] = self.free_balance(to_id) + amount
        return True

    def get_all_balances(self) -> dict[str, int]:
        """Get snapshot of all balances."""
        return dict(self.balances)
