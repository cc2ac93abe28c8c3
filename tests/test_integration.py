import json
import threading
import unittest
from timelock_vault import AccountKey, VaultRegistry
from timelock_vault.collaborators import InMemoryFunds, ManualClock, RecordingSink
from timelock_vault.errors import StillLocked, VaultError
from web_interface.app import create_app, request_message

class TestVaultLifecycle(unittest.TestCase):

    def setUp(self):
        """Set up test fixtures"""
        self.clock = ManualClock()
        self.funds = InMemoryFunds({"alice": 10_000})
        self.registry = VaultRegistry("operator", self.clock, self.funds, RecordingSink())

    def test_lock_then_drain(self):
        """Create, wait out the lock, drain in two withdrawals"""
        self.registry.create_vault("alice", 30, "Savings", 1_000)

        with self.assertRaises(StillLocked):
            self.registry.withdraw("alice", 500)

        self.clock.advance_days(30)
        self.assertEqual(self.registry.withdraw("alice", 500), 500)
        self.assertTrue(self.registry.get_vault_info("alice").is_active)
        self.assertEqual(self.registry.get_transaction_count("alice"), 2)

        self.assertEqual(self.registry.withdraw("alice", 500), 0)
        self.assertFalse(self.registry.get_vault_info("alice").is_active)
        self.assertEqual(self.registry.get_transaction_count("alice"), 3)
        self.assertEqual(self.registry.total_locked, 0)

    def test_concurrent_deposits_stay_consistent(self):
        accounts = [f"user{i}" for i in range(8)]
        for account in accounts:
            self.funds.fund(account, 10_000)
            self.registry.create_vault(account, 10, "Pool", 100)

        def worker(account):
            for _ in range(50):
                self.registry.deposit(account, 1)

        threads = [threading.Thread(target=worker, args=(a,)) for a in accounts]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        stats = self.registry.get_stats()
        self.assertEqual(stats.total_locked, len(accounts) * 150)
        self.assertTrue(stats.is_reconciled())
        for account in accounts:
            self.assertEqual(self.registry.get_transaction_count(account), 51)

class TestAccountKey(unittest.TestCase):

    def test_sign_and_verify(self):
        key = AccountKey()
        signature = key.sign_message(b"payload")

        self.assertEqual(len(key.account_id), 66)
        self.assertTrue(AccountKey.verify_signature(b"payload", signature, key.account_id))
        self.assertFalse(AccountKey.verify_signature(b"tampered", signature, key.account_id))
        self.assertFalse(AccountKey.verify_signature(b"payload", signature, AccountKey().account_id))
        self.assertFalse(AccountKey.verify_signature(b"payload", "zz", key.account_id))
        self.assertFalse(AccountKey.verify_signature(b"payload", signature, "not-a-key"))

    def test_key_pair_round_trip(self):
        private_hex, account_id = AccountKey.generate_key_pair()
        self.assertEqual(AccountKey.from_private_hex(private_hex).account_id, account_id)

class TestWebInterface(unittest.TestCase):

    def setUp(self):
        """Set up test fixtures"""
        self.owner = AccountKey()
        self.alice = AccountKey()
        self.bob = AccountKey()
        self.carol = AccountKey()
        self.clock = ManualClock()
        self.registry = VaultRegistry(
            self.owner.account_id, self.clock, InMemoryFunds(unmetered=True), RecordingSink()
        )
        self.client = create_app(self.registry).test_client()

    def signed_request(self, path, key, body, nonce=None):
        """Build raw body and headers for a request signed by key"""
        body = dict(body, account=key.account_id)
        raw = json.dumps(body).encode()
        if nonce is None:
            nonce = self.client.get(f'/api/nonce/{key.account_id}').get_json()['nonce']
        signature = key.sign_message(request_message('POST', path, nonce, raw))
        return raw, {'X-Nonce': str(nonce), 'X-Signature': signature}

    def send(self, path, raw, headers):
        return self.client.post(path, data=raw, content_type='application/json', headers=headers)

    def post(self, path, key, body):
        raw, headers = self.signed_request(path, key, body)
        return self.send(path, raw, headers)

    def test_create_and_read(self):
        resp = self.post('/api/vault/create', self.alice, {
            'lock_days': 30, 'name': 'Savings', 'amount': 1_000,
            'beneficiary': self.carol.account_id
        })
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.get_json()['success'])

        info = self.client.get(f'/api/vault/{self.alice.account_id}').get_json()
        self.assertEqual(info['balance'], 1_000)
        self.assertEqual(info['days_left'], 30)
        self.assertEqual(info['beneficiary'], self.carol.account_id)

        history = self.client.get(f'/api/vault/{self.alice.account_id}/transactions').get_json()
        self.assertEqual(history['count'], 1)
        self.assertEqual(history['digest'], self.registry.transactions.digest(self.alice.account_id))

        stats = self.client.get('/api/stats').get_json()
        self.assertEqual(stats['total_locked'], 1_000)
        self.assertEqual(stats['total_vaults'], 1)

    def test_signature_required(self):
        raw, headers = self.signed_request('/api/vault/deposit', self.alice, {'amount': 5})
        headers['X-Signature'] = self.carol.sign_message(request_message('POST', '/api/vault/deposit', 0, raw))
        self.assertEqual(self.send('/api/vault/deposit', raw, headers).status_code, 401)

        raw, headers = self.signed_request('/api/vault/deposit', self.alice, {'amount': 5})
        del headers['X-Nonce']
        self.assertEqual(self.send('/api/vault/deposit', raw, headers).status_code, 401)

        resp = self.client.post('/api/vault/deposit', json={'amount': 5})
        self.assertEqual(resp.status_code, 400)

    def test_replayed_request_rejected(self):
        self.post('/api/vault/create', self.alice, {'lock_days': 30, 'name': 'Savings', 'amount': 1_000})
        raw, headers = self.signed_request('/api/vault/beneficiary', self.alice,
                                           {'beneficiary': self.carol.account_id})
        self.assertEqual(self.send('/api/vault/beneficiary', raw, headers).status_code, 200)
        self.post('/api/vault/beneficiary', self.alice, {'beneficiary': self.bob.account_id})

        resp = self.send('/api/vault/beneficiary', raw, headers)

        self.assertEqual(resp.status_code, 401)
        info = self.registry.get_vault_info(self.alice.account_id)
        self.assertEqual(info.beneficiary, self.bob.account_id)

    def test_request_bound_to_endpoint(self):
        self.post('/api/admin/authorize', self.owner, {'target': self.carol.account_id})
        raw, headers = self.signed_request('/api/admin/authorize', self.owner,
                                           {'target': self.carol.account_id})

        resp = self.send('/api/admin/revoke', raw, headers)

        self.assertEqual(resp.status_code, 401)
        self.assertTrue(self.registry.is_authorized(self.carol.account_id))

    def test_stale_nonce_rejected(self):
        raw, headers = self.signed_request('/api/admin/authorize', self.owner,
                                           {'target': self.carol.account_id}, nonce=5)
        self.assertEqual(self.send('/api/admin/authorize', raw, headers).status_code, 200)
        self.assertEqual(self.client.get(f'/api/nonce/{self.owner.account_id}').get_json()['nonce'], 6)

        raw, headers = self.signed_request('/api/admin/revoke', self.owner,
                                           {'target': self.carol.account_id}, nonce=3)
        self.assertEqual(self.send('/api/admin/revoke', raw, headers).status_code, 401)
        self.assertTrue(self.registry.is_authorized(self.carol.account_id))

    def test_error_mapping(self):
        resp = self.post('/api/vault/withdraw', self.alice, {'amount': 5})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.get_json()['code'], 'VaultNotFound')

        self.post('/api/vault/create', self.alice, {'lock_days': 30, 'name': 'Savings', 'amount': 1_000})
        resp = self.post('/api/vault/withdraw', self.alice, {'amount': 5})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()['code'], 'StillLocked')

        resp = self.post('/api/vault/claim', self.carol, {'owner': self.alice.account_id})
        self.assertEqual(resp.status_code, 403)

        resp = self.post('/api/admin/authorize', self.alice, {'target': self.carol.account_id})
        self.assertEqual(resp.status_code, 403)

    def test_full_flow(self):
        self.post('/api/vault/create', self.alice, {'lock_days': 10, 'name': 'Savings', 'amount': 1_000})
        self.assertEqual(self.post('/api/vault/deposit', self.alice, {'amount': 500}).get_json()['balance'], 1_500)

        resp = self.post('/api/vault/beneficiary', self.alice, {'beneficiary': self.carol.account_id})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.post('/api/vault/extend', self.alice, {'additional_days': 5}).status_code, 200)

        self.clock.advance_days(15 + 30)
        self.clock.advance(1)
        resp = self.post('/api/vault/claim', self.carol, {'owner': self.alice.account_id})
        self.assertEqual(resp.get_json()['amount'], 1_500)

        self.assertEqual(self.post('/api/admin/authorize', self.owner, {'target': self.carol.account_id}).status_code, 200)
        self.assertTrue(self.registry.is_authorized(self.carol.account_id))
        self.post('/api/admin/revoke', self.owner, {'target': self.carol.account_id})
        self.assertFalse(self.registry.is_authorized(self.carol.account_id))

    def test_emergency_withdraw(self):
        self.post('/api/vault/create', self.alice, {'lock_days': 30, 'name': 'Savings', 'amount': 1_000})
        resp = self.post('/api/vault/emergency_withdraw', self.alice, {})
        self.assertEqual(resp.get_json()['payout'], 900)

if __name__ == '__main__':
    unittest.main()
