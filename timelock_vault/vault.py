from dataclasses import dataclass, asdict


@dataclass
class Vault:
    """Per-account custody record"""
    owner: str
    balance: int  # smallest unit
    unlock_time: int
    is_active: bool
    vault_name: str
    beneficiary: str
    created_at: int

    def to_dict(self) -> dict:
        """Serialize vault to dictionary"""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'Vault':
        """Deserialize vault from dictionary"""
        return cls(**data)


@dataclass(frozen=True)
class VaultInfo:
    """Read-only snapshot returned to callers"""
    balance: int
    unlock_time: int
    is_active: bool
    vault_name: str
    beneficiary: str
    days_left: int

    @classmethod
    def from_vault(cls, vault: Vault, now: int, day_seconds: int) -> 'VaultInfo':
        days_left = max(0, (vault.unlock_time - now) // day_seconds)
        return cls(
            balance=vault.balance,
            unlock_time=vault.unlock_time,
            is_active=vault.is_active,
            vault_name=vault.vault_name,
            beneficiary=vault.beneficiary,
            days_left=days_left
        )

    def to_dict(self) -> dict:
        return asdict(self)
