#!/usr/bin/env python3
"""
Example: Opening vaults and reading them back
"""

from timelock_vault import AccountKey, LockRules, VaultRegistry
from timelock_vault.collaborators import InMemoryFunds, ManualClock

def main():
    print("=== Creating Time-Locked Vaults ===")
    print()

    print("🔑 Generating account keys...")
    accounts = {}
    for name in ["Operator", "Alice", "Bob"]:
        _, account_id = AccountKey.generate_key_pair()
        accounts[name] = account_id
        print(f"   {name}: {account_id[:16]}...")
    print()

    rules = LockRules.standard()
    print("📋 Lock Rules:")
    print(f"   Lock window: {rules.min_lock_days}-{rules.max_lock_days} days")
    print(f"   Emergency penalty: {rules.penalty_bps / 100}%")
    print(f"   Beneficiary grace period: {rules.grace_period_days} days")
    print()

    funds = InMemoryFunds({accounts["Alice"]: 50_000, accounts["Bob"]: 50_000})
    registry = VaultRegistry(accounts["Operator"], ManualClock(), funds, rules=rules)

    registry.create_vault(accounts["Alice"], 90, "College fund", 25_000, beneficiary=accounts["Bob"])
    registry.create_vault(accounts["Bob"], 365, "Long haul", 40_000)

    print("🏗️  Vaults Created Successfully!")
    for name in ["Alice", "Bob"]:
        info = registry.get_vault_info(accounts[name])
        print(f"   {name}: {info.vault_name}")
        print(f"      Balance: {info.balance:,}")
        print(f"      Days left: {info.days_left}")
        print(f"      Beneficiary: {info.beneficiary[:16]}...")
    print()

    stats = registry.get_stats()
    print(f"✅ {stats.total_vaults} vaults holding {stats.total_locked:,} in total")

if __name__ == "__main__":
    main()
