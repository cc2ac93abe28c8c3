import os
from dataclasses import dataclass

from .errors import InvalidInput


@dataclass
class LockRules:
    """Time-lock and penalty policy applied by the vault registry"""

    # Lock window bounds, in days
    min_lock_days: int
    max_lock_days: int

    # Emergency exit
    penalty_bps: int  # basis points (1000 = 10%)

    # Beneficiary claims open this long after unlock
    grace_period_days: int

    day_seconds: int

    @classmethod
    def standard(cls) -> 'LockRules':
        """Create the standard rules: 1-365 day locks, 10% penalty, 30 day grace"""
        return cls(
            min_lock_days=1,
            max_lock_days=365,
            penalty_bps=1000,
            grace_period_days=30,
            day_seconds=86400
        )

    @classmethod
    def from_env(cls, environ=None) -> 'LockRules':
        """Standard rules with TIMELOCK_VAULT_* environment overrides"""
        environ = os.environ if environ is None else environ
        rules = cls.standard()

        overrides = {
            'min_lock_days': 'TIMELOCK_VAULT_MIN_LOCK_DAYS',
            'max_lock_days': 'TIMELOCK_VAULT_MAX_LOCK_DAYS',
            'penalty_bps': 'TIMELOCK_VAULT_PENALTY_BPS',
            'grace_period_days': 'TIMELOCK_VAULT_GRACE_DAYS',
            'day_seconds': 'TIMELOCK_VAULT_DAY_SECONDS',
        }
        for attr, var in overrides.items():
            if var in environ:
                setattr(rules, attr, int(environ[var]))

        rules.validate()
        return rules

    def validate(self) -> None:
        if not (1 <= self.min_lock_days <= self.max_lock_days):
            raise ValueError("Lock day bounds must satisfy 1 <= min <= max")
        if not (0 <= self.penalty_bps <= 10_000):
            raise ValueError("Penalty must be between 0 and 10000 basis points")
        if self.grace_period_days < 0 or self.day_seconds <= 0:
            raise ValueError("Grace period and day length must be non-negative and positive")

    def calculate_penalty(self, balance: int) -> int:
        """Penalty forfeited by an emergency withdrawal of balance"""
        return (balance * self.penalty_bps) // 10_000

    def check_lock_days(self, days, label: str = "Lock duration") -> None:
        """Reject day counts outside the configured window"""
        if isinstance(days, bool) or not isinstance(days, int):
            raise InvalidInput(f"{label} must be an integer number of days")
        if not (self.min_lock_days <= days <= self.max_lock_days):
            raise InvalidInput(
                f"{label} must be between {self.min_lock_days} and {self.max_lock_days} days, got {days}"
            )

    def lock_seconds(self, days: int) -> int:
        return days * self.day_seconds

    def claim_opens_at(self, unlock_time: int) -> int:
        """Last timestamp at which a beneficiary claim is still too early"""
        return unlock_time + self.grace_period_days * self.day_seconds
