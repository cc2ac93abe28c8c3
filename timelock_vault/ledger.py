"""
Append-only per-account transaction history
"""

import hashlib
import json
import threading
from dataclasses import dataclass, asdict
from typing import Dict, List, Optional, Tuple

from .errors import InvalidInput, OutOfRange


@dataclass(frozen=True)
class TransactionRecord:
    """A single balance-affecting event"""
    from_account: str
    to_account: str
    amount: int  # smallest unit
    timestamp: int
    description: str
    executed: bool = True

    def to_dict(self) -> dict:
        return asdict(self)


class TransactionLog:
    """
    Ordered, append-only history kept per account.

    Records are frozen and there is no way to remove or replace one, so an
    account's history only ever grows.
    """

    def __init__(self):
        self._records: Dict[str, List[TransactionRecord]] = {}
        self._lock = threading.Lock()

    def append(self, record: TransactionRecord, account: Optional[str] = None) -> int:
        """Append record to account's history (defaults to the sender) and return its index"""
        key = account if account is not None else record.from_account
        with self._lock:
            entries = self._records.setdefault(key, [])
            entries.append(record)
            return len(entries) - 1

    def count(self, account: str) -> int:
        with self._lock:
            return len(self._records.get(account, ()))

    def get(self, account: str, index: int) -> TransactionRecord:
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidInput("Transaction index must be an integer")
        with self._lock:
            entries = self._records.get(account, [])
            if not (0 <= index < len(entries)):
                raise OutOfRange(
                    f"Transaction index {index} out of range for {len(entries)} records"
                )
            return entries[index]

    def history(self, account: str) -> Tuple[TransactionRecord, ...]:
        with self._lock:
            return tuple(self._records.get(account, ()))

    def digest(self, account: str) -> str:
        """Chained hash over the account's history, for audit comparison"""
        hasher = hashlib.sha256()
        hasher.update(b"TIMELOCK_VAULT_LOG_V1")
        hasher.update(account.encode())

        for record in self.history(account):
            hasher.update(json.dumps(record.to_dict(), sort_keys=True).encode())

        return hasher.hexdigest()
