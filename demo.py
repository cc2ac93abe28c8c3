#!/usr/bin/env python3
"""
Complete demo of the Time-Locked Vault Ledger
"""

from timelock_vault import AccountKey, VaultRegistry
from timelock_vault.collaborators import InMemoryFunds, ManualClock, RecordingSink
from timelock_vault.errors import StillLocked, TooEarly

def main():
    print("=" * 60)
    print("🏦 TIME-LOCKED VAULT LEDGER - COMPLETE DEMO")
    print("=" * 60)
    print()

    # Step 1: Setup
    print("🔧 STEP 1: Setting up accounts")
    print("-" * 40)

    participants = {}
    for name in ["Operator", "Alice", "Bob", "Carol"]:
        _, account_id = AccountKey.generate_key_pair()
        participants[name] = account_id
        print(f"✅ {name}: {account_id[:16]}...")

    alice, bob, carol = participants["Alice"], participants["Bob"], participants["Carol"]

    clock = ManualClock()
    funds = InMemoryFunds({alice: 10_000, bob: 5_000})
    sink = RecordingSink()
    registry = VaultRegistry(participants["Operator"], clock, funds, sink)
    print()

    # Step 2: Create vaults
    print("🏗️  STEP 2: Creating vaults")
    print("-" * 40)

    registry.create_vault(alice, lock_days=30, name="Rainy day", amount=1_000, beneficiary=carol)
    registry.create_vault(bob, lock_days=7, name="Holiday", amount=2_000)

    for name in ["Alice", "Bob"]:
        info = registry.get_vault_info(participants[name])
        print(f"✅ {name}: '{info.vault_name}' holding {info.balance:,}, {info.days_left} days left")
    print()

    # Step 3: Time-locked withdrawals
    print("💰 STEP 3: Time-locked withdrawals")
    print("-" * 40)

    try:
        registry.withdraw(alice, 500)
        print("   ❌ UNEXPECTED: Should have failed")
    except StillLocked as e:
        print(f"   ✅ EXPECTED FAILURE: {e}")

    clock.advance_days(30)
    remaining = registry.withdraw(alice, 500)
    print(f"   ✅ Alice withdrew 500 after 30 days, {remaining:,} remaining")
    print()

    # Step 4: Emergency exit
    print("🚨 STEP 4: Emergency withdrawal")
    print("-" * 40)

    registry.deposit(bob, 1_000)
    payout = registry.emergency_withdraw(bob)
    print(f"   ✅ Bob exited early: paid {payout:,} after {registry.rules.penalty_bps / 100}% penalty")
    print()

    # Step 5: Beneficiary claim
    print("🧾 STEP 5: Beneficiary claim")
    print("-" * 40)

    try:
        registry.claim_as_beneficiary(carol, alice)
        print("   ❌ UNEXPECTED: Should have failed")
    except TooEarly as e:
        print(f"   ✅ EXPECTED FAILURE: {e}")

    clock.advance_days(registry.rules.grace_period_days)
    clock.advance(1)
    claimed = registry.claim_as_beneficiary(carol, alice)
    print(f"   ✅ Carol claimed {claimed:,} from Alice's vault")
    print()

    # Step 6: Summary
    print("📈 STEP 6: System summary")
    print("-" * 40)

    stats = registry.get_stats()
    print(f"   Vaults created: {stats.total_vaults}")
    print(f"   Total locked: {stats.total_locked:,}")
    print(f"   Reconciled: {stats.is_reconciled()}")
    print(f"   Alice's log: {registry.get_transaction_count(alice)} records")
    print(f"   Notifications emitted: {len(sink.events)}")
    print()

    print("🎯 Demo completed successfully!")

if __name__ == "__main__":
    main()
