from dataclasses import dataclass, asdict


@dataclass(frozen=True)
class ContractStats:
    """Aggregate view over the vault table"""
    contract_balance: int  # recomputed sum of active balances
    total_vaults: int
    total_locked: int

    def is_reconciled(self) -> bool:
        return self.contract_balance == self.total_locked

    def to_dict(self) -> dict:
        return asdict(self)
