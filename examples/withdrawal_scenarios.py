#!/usr/bin/env python3
"""
Example: Walking through withdrawal outcomes
"""

from timelock_vault import AccountKey, VaultRegistry
from timelock_vault.collaborators import InMemoryFunds, ManualClock
from timelock_vault.errors import VaultError

def main():
    print("=== Testing Withdrawal Scenarios ===")
    print()

    _, operator = AccountKey.generate_key_pair()
    _, alice = AccountKey.generate_key_pair()

    clock = ManualClock()
    funds = InMemoryFunds({alice: 10_000})
    registry = VaultRegistry(operator, clock, funds)
    registry.create_vault(alice, 30, "Savings", 1_000)

    print(f"   Vault Balance: {registry.get_vault_info(alice).balance:,}")
    print()

    scenarios = [
        {'name': 'Withdraw before unlock - Should fail', 'days': 0, 'amount': 500, 'should_pass': False},
        {'name': 'Withdraw more than balance - Should fail', 'days': 30, 'amount': 5_000, 'should_pass': False},
        {'name': 'Partial withdrawal after unlock', 'days': 0, 'amount': 500, 'should_pass': True},
        {'name': 'Final withdrawal drains vault', 'days': 0, 'amount': 500, 'should_pass': True},
        {'name': 'Withdraw from drained vault - Should fail', 'days': 0, 'amount': 1, 'should_pass': False},
    ]

    for i, scenario in enumerate(scenarios, 1):
        print(f"🧪 Scenario {i}: {scenario['name']}")
        clock.advance_days(scenario['days'])

        try:
            remaining = registry.withdraw(alice, scenario['amount'])
            passed = True
            print(f"   Result: ✅ withdrew {scenario['amount']:,}, {remaining:,} remaining")
        except VaultError as e:
            passed = False
            print(f"   Result: ❌ {type(e).__name__}: {e}")

        expected = "✅" if passed == scenario['should_pass'] else "⚠️  UNEXPECTED"
        print(f"   Expected: {expected}")
        print()

    info = registry.get_vault_info(alice)
    print(f"📊 Final state: active={info.is_active}, balance={info.balance}, "
          f"log entries={registry.get_transaction_count(alice)}")

if __name__ == "__main__":
    main()
