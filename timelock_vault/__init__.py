"""
Time-Locked Vault Ledger - per-account custody with time locks,
emergency exits and beneficiary claims
"""

from .registry import VaultRegistry
from .vault import Vault, VaultInfo
from .rules import LockRules
from .ledger import TransactionLog, TransactionRecord
from .access import AccessControl
from .stats import ContractStats
from .accounts import AccountKey, SYSTEM_ACCOUNT

__version__ = "0.1.0"
__all__ = [
    "VaultRegistry",
    "Vault",
    "VaultInfo",
    "LockRules",
    "TransactionLog",
    "TransactionRecord",
    "AccessControl",
    "ContractStats",
    "AccountKey",
    "SYSTEM_ACCOUNT"
]
