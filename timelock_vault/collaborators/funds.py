"""
Value movement between external wallets and the vault system
"""

import logging
import threading
from typing import Dict, Optional, Protocol

logger = logging.getLogger(__name__)


class TransferError(Exception):
    """Raised by a FundsTransfer when value could not be moved"""


class FundsTransfer(Protocol):
    def deposit(self, account: str, amount: int) -> None: ...

    def payout(self, account: str, amount: int) -> None: ...


class InMemoryFunds:
    """
    External wallets plus the system's liquidity pool.

    Deposits move value from an account wallet into the pool; payouts move it
    back out. In unmetered mode wallets are not checked on deposit.
    """

    def __init__(self, balances: Optional[Dict[str, int]] = None, unmetered: bool = False):
        self.balances: Dict[str, int] = dict(balances or {})
        self.unmetered = unmetered
        self.liquidity = 0
        self._lock = threading.Lock()

    def fund(self, account: str, amount: int) -> None:
        """Credit an external wallet"""
        if amount <= 0:
            raise ValueError("Funding amount must be positive")
        with self._lock:
            self.balances[account] = self.balances.get(account, 0) + amount

    def wallet_balance(self, account: str) -> int:
        return self.balances.get(account, 0)

    def deposit(self, account: str, amount: int) -> None:
        with self._lock:
            available = self.balances.get(account, 0)
            if not self.unmetered:
                if available < amount:
                    raise TransferError(
                        f"Wallet {account[:8]} holds {available}, cannot deposit {amount}"
                    )
                self.balances[account] = available - amount
            self.liquidity += amount
        logger.debug("Escrowed %d from %s", amount, account)

    def payout(self, account: str, amount: int) -> None:
        with self._lock:
            if self.liquidity < amount:
                raise TransferError(
                    f"Insufficient liquidity: need {amount}, have {self.liquidity}"
                )
            self.liquidity -= amount
            self.balances[account] = self.balances.get(account, 0) + amount
        logger.debug("Paid %d to %s", amount, account)
