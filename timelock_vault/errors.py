"""
Error taxonomy for vault ledger operations
"""


class VaultError(Exception):
    """Base class for every rejected ledger operation"""


class InvalidInput(VaultError, ValueError):
    """Malformed arguments: non-positive amounts, out-of-range durations, empty names"""


class VaultAlreadyActive(InvalidInput):
    """Account tried to open a second vault while one is still active"""


class VaultInactive(VaultError):
    """Vault exists but has been drained"""


class VaultNotFound(VaultInactive):
    """Account has never opened a vault"""


class InsufficientBalance(VaultError):
    pass


class EmptyBalance(VaultError):
    pass


class StillLocked(VaultError):
    """Owner withdrawal attempted before the unlock time"""


class TooEarly(VaultError):
    """Beneficiary claim attempted before the grace period elapsed"""


class NotAuthorized(VaultError):
    pass


class OutOfRange(VaultError, IndexError):
    """Transaction log index past the end of an account's history"""


class TransferFailed(VaultError):
    """External funds movement failed; the ledger was left untouched"""
