"""
Vault registry - one time-locked vault per account

Every operation runs under a single registry lock. Preconditions are checked
first, external value movement happens next, and ledger state is committed only
once the transfer has succeeded, so a rejected or failed call leaves no trace.
"""

import logging
import threading
from typing import Dict, Optional

from .access import AccessControl
from .accounts import SYSTEM_ACCOUNT
from .collaborators.clock import Clock
from .collaborators.funds import FundsTransfer, TransferError
from .collaborators.notifications import EventKind, LoggingSink, NotificationSink
from .errors import (
    EmptyBalance,
    InsufficientBalance,
    InvalidInput,
    NotAuthorized,
    StillLocked,
    TooEarly,
    TransferFailed,
    VaultAlreadyActive,
    VaultInactive,
    VaultNotFound,
)
from .ledger import TransactionLog, TransactionRecord
from .rules import LockRules
from .stats import ContractStats
from .vault import Vault, VaultInfo

logger = logging.getLogger(__name__)


def _require_amount(amount) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidInput("Amount must be an integer number of units")
    if amount <= 0:
        raise InvalidInput(f"Amount must be positive, got {amount}")


def _require_account(account, label: str = "Account") -> None:
    if not isinstance(account, str) or not account.strip():
        raise InvalidInput(f"{label} cannot be empty")


class VaultRegistry:
    """Custody ledger enforcing time locks, emergency penalties and beneficiary claims"""

    def __init__(
        self,
        owner: str,
        clock: Clock,
        funds: FundsTransfer,
        notifications: Optional[NotificationSink] = None,
        rules: Optional[LockRules] = None,
        transactions: Optional[TransactionLog] = None,
    ):
        self.access = AccessControl(owner)
        self.clock = clock
        self.funds = funds
        self.notifications = notifications if notifications is not None else LoggingSink()
        self.rules = rules or LockRules.standard()
        self.transactions = transactions if transactions is not None else TransactionLog()

        self._vaults: Dict[str, Vault] = {}
        self._total_vaults = 0
        self._total_locked = 0
        self._lock = threading.RLock()

        logger.info(
            "VaultRegistry initialized. Owner: %s, lock window: %d-%d days, penalty: %d bps",
            owner,
            self.rules.min_lock_days,
            self.rules.max_lock_days,
            self.rules.penalty_bps,
        )

    def _active_vault(self, account: str) -> Vault:
        vault = self._vaults.get(account)
        if vault is None:
            logger.warning("No vault for %s", account)
            raise VaultNotFound(f"No vault exists for {account}")
        if not vault.is_active:
            logger.warning("Vault for %s is inactive", account)
            raise VaultInactive(f"Vault for {account} is no longer active")
        return vault

    def _move_funds(self, direction: str, account: str, amount: int) -> None:
        try:
            if direction == "deposit":
                self.funds.deposit(account, amount)
            else:
                self.funds.payout(account, amount)
        except TransferError as exc:
            logger.error("%s of %d for %s failed: %s", direction.capitalize(), amount, account, exc)
            raise TransferFailed(str(exc)) from exc

    def _record(self, from_account: str, to_account: str, amount: int, description: str,
                account: Optional[str] = None) -> None:
        record = TransactionRecord(
            from_account=from_account,
            to_account=to_account,
            amount=amount,
            timestamp=self.clock.now(),
            description=description,
        )
        self.transactions.append(record, account=account)

    def _notify(self, kind: EventKind, payload: dict) -> None:
        # Sink failures never undo or mask a committed operation
        try:
            self.notifications.emit(kind, payload)
        except Exception:
            logger.exception("Notification %s dropped", kind.value)

    def _drain(self, vault: Vault) -> int:
        balance = vault.balance
        vault.balance = 0
        vault.is_active = False
        self._total_locked -= balance
        return balance

    def create_vault(self, account: str, lock_days: int, name: str, amount: int,
                     beneficiary: Optional[str] = None) -> Vault:
        """Open a vault holding amount until lock_days have passed"""
        _require_account(account)
        _require_amount(amount)
        self.rules.check_lock_days(lock_days)
        if not isinstance(name, str) or not name.strip():
            raise InvalidInput("Vault name cannot be empty")
        if beneficiary is not None:
            _require_account(beneficiary, "Beneficiary")

        with self._lock:
            existing = self._vaults.get(account)
            if existing is not None and existing.is_active:
                logger.warning("Account %s already has an active vault", account)
                raise VaultAlreadyActive(f"Account {account} already has an active vault")

            self._move_funds("deposit", account, amount)

            now = self.clock.now()
            vault = Vault(
                owner=account,
                balance=amount,
                unlock_time=now + self.rules.lock_seconds(lock_days),
                is_active=True,
                vault_name=name,
                beneficiary=beneficiary or account,
                created_at=now,
            )
            self._vaults[account] = vault
            self._total_vaults += 1
            self._total_locked += amount
            self._record(account, SYSTEM_ACCOUNT, amount, f"Vault created: {name}")

            logger.info(
                "Vault '%s' created for %s with %d locked for %d days",
                name, account, amount, lock_days,
            )
            self._notify(EventKind.VAULT_CREATED, {
                'account': account,
                'amount': amount,
                'unlock_time': vault.unlock_time,
                'vault_name': name,
            })
            self._notify(EventKind.BENEFICIARY_SET, {
                'account': account,
                'beneficiary': vault.beneficiary,
            })
            return Vault.from_dict(vault.to_dict())

    def deposit(self, account: str, amount: int) -> int:
        """Add amount to an active vault and return the new balance"""
        _require_amount(amount)

        with self._lock:
            vault = self._active_vault(account)
            self._move_funds("deposit", account, amount)

            vault.balance += amount
            self._total_locked += amount
            self._record(account, SYSTEM_ACCOUNT, amount, "Deposit to vault")

            logger.info("Deposited %d into vault of %s (balance %d)", amount, account, vault.balance)
            self._notify(EventKind.DEPOSIT, {'account': account, 'amount': amount})
            return vault.balance

    def withdraw(self, account: str, amount: int) -> int:
        """Withdraw after unlock; returns the remaining balance"""
        _require_amount(amount)

        with self._lock:
            vault = self._active_vault(account)
            if amount > vault.balance:
                logger.warning("Withdrawal of %d exceeds balance %d for %s", amount, vault.balance, account)
                raise InsufficientBalance(f"Insufficient balance: need {amount}, have {vault.balance}")

            now = self.clock.now()
            if now < vault.unlock_time:
                logger.warning("Vault of %s locked for %d more seconds", account, vault.unlock_time - now)
                raise StillLocked(f"Vault unlocks at {vault.unlock_time}, now {now}")

            self._move_funds("payout", account, amount)

            vault.balance -= amount
            self._total_locked -= amount
            if vault.balance == 0:
                vault.is_active = False
            self._record(SYSTEM_ACCOUNT, account, amount, "Withdrawal from vault", account=account)

            logger.info("Withdrew %d from vault of %s (balance %d)", amount, account, vault.balance)
            self._notify(EventKind.WITHDRAWAL, {'account': account, 'amount': amount})
            return vault.balance

    def emergency_withdraw(self, account: str) -> int:
        """Drain the vault immediately, forfeiting the penalty; returns the payout"""
        with self._lock:
            vault = self._active_vault(account)
            if vault.balance == 0:
                raise EmptyBalance(f"Vault for {account} holds no funds")

            penalty = self.rules.calculate_penalty(vault.balance)
            payout = vault.balance - penalty
            self._move_funds("payout", account, payout)

            self._drain(vault)
            self._record(
                SYSTEM_ACCOUNT, account, payout,
                f"Emergency withdrawal (penalty {penalty})", account=account,
            )

            logger.info("Emergency withdrawal for %s: paid %d, penalty %d", account, payout, penalty)
            self._notify(EventKind.EMERGENCY_WITHDRAWAL, {
                'account': account,
                'amount': payout,
                'penalty': penalty,
            })
            return payout

    def claim_as_beneficiary(self, caller: str, owner: str) -> int:
        """Beneficiary takes the full balance once the grace period has passed"""
        with self._lock:
            vault = self._vaults.get(owner)
            if vault is None:
                logger.warning("No vault for %s", owner)
                raise VaultNotFound(f"No vault exists for {owner}")
            if caller != vault.beneficiary:
                logger.warning("%s is not the beneficiary of %s", caller, owner)
                raise NotAuthorized(f"{caller} is not the beneficiary of this vault")
            vault = self._active_vault(owner)
            if vault.balance == 0:
                raise EmptyBalance(f"Vault for {owner} holds no funds")

            now = self.clock.now()
            opens_after = self.rules.claim_opens_at(vault.unlock_time)
            if now <= opens_after:
                logger.warning("Beneficiary claim on %s before %d", owner, opens_after)
                raise TooEarly(f"Beneficiary claims open after {opens_after}, now {now}")

            amount = vault.balance
            self._move_funds("payout", caller, amount)

            self._drain(vault)
            self._record(SYSTEM_ACCOUNT, caller, amount, "Beneficiary claim", account=owner)

            logger.info("Beneficiary %s claimed %d from vault of %s", caller, amount, owner)
            self._notify(EventKind.WITHDRAWAL, {'account': caller, 'amount': amount})
            return amount

    def update_beneficiary(self, account: str, new_beneficiary: str) -> None:
        with self._lock:
            vault = self._active_vault(account)
            _require_account(new_beneficiary, "Beneficiary")

            vault.beneficiary = new_beneficiary
            logger.info("Beneficiary of %s set to %s", account, new_beneficiary)
            self._notify(EventKind.BENEFICIARY_SET, {
                'account': account,
                'beneficiary': new_beneficiary,
            })

    def extend_lock(self, account: str, additional_days: int) -> int:
        """Push the unlock time out; extensions accumulate without a cap"""
        with self._lock:
            vault = self._active_vault(account)
            self.rules.check_lock_days(additional_days, "Extension")

            vault.unlock_time += self.rules.lock_seconds(additional_days)
            logger.info("Lock of %s extended by %d days to %d", account, additional_days, vault.unlock_time)
            self._notify(EventKind.LOCK_EXTENDED, {
                'account': account,
                'additional_days': additional_days,
                'unlock_time': vault.unlock_time,
            })
            return vault.unlock_time

    def get_vault_info(self, account: str) -> VaultInfo:
        with self._lock:
            vault = self._vaults.get(account)
            if vault is None:
                raise VaultNotFound(f"No vault exists for {account}")
            return VaultInfo.from_vault(vault, self.clock.now(), self.rules.day_seconds)

    def has_active_vault(self, account: str) -> bool:
        with self._lock:
            vault = self._vaults.get(account)
            return vault is not None and vault.is_active

    def get_stats(self) -> ContractStats:
        with self._lock:
            contract_balance = sum(v.balance for v in self._vaults.values() if v.is_active)
            return ContractStats(
                contract_balance=contract_balance,
                total_vaults=self._total_vaults,
                total_locked=self._total_locked,
            )

    @property
    def total_vaults(self) -> int:
        with self._lock:
            return self._total_vaults

    @property
    def total_locked(self) -> int:
        with self._lock:
            return self._total_locked

    def get_transaction_count(self, account: str) -> int:
        with self._lock:
            return self.transactions.count(account)

    def get_transaction(self, account: str, index: int) -> TransactionRecord:
        with self._lock:
            return self.transactions.get(account, index)

    @property
    def owner(self) -> str:
        return self.access.owner

    def authorize(self, caller: str, target: str) -> None:
        self.access.authorize(caller, target)

    def revoke(self, caller: str, target: str) -> None:
        self.access.revoke(caller, target)

    def is_authorized(self, account: str) -> bool:
        return self.access.is_authorized(account)
