#!/usr/bin/env python3
"""
Web interface for the Time-Locked Vault Ledger

Mutating requests carry the caller's account id in the JSON body, an X-Nonce
header holding a per-account counter that must strictly increase, and an
X-Signature header holding that account's signature over request_message().
"""

import logging
import os
import threading
from functools import wraps
from typing import Dict

from flask import Flask, current_app, g, jsonify, request

from timelock_vault import AccountKey, LockRules, VaultRegistry
from timelock_vault.collaborators import InMemoryFunds, LoggingSink, SystemClock
from timelock_vault.errors import NotAuthorized, VaultError, VaultNotFound

logger = logging.getLogger(__name__)


def _status_for(error: VaultError) -> int:
    if isinstance(error, NotAuthorized):
        return 403
    if isinstance(error, VaultNotFound):
        return 404
    return 400


def build_default_registry() -> VaultRegistry:
    """Registry backed by the system clock and an unmetered in-memory escrow"""
    owner = os.environ.get("TIMELOCK_VAULT_OWNER")
    if not owner:
        _, owner = AccountKey.generate_key_pair()
        logger.info("No TIMELOCK_VAULT_OWNER set, generated owner %s", owner)

    return VaultRegistry(
        owner=owner,
        clock=SystemClock(),
        funds=InMemoryFunds(unmetered=True),
        notifications=LoggingSink(),
        rules=LockRules.from_env(),
    )


def request_message(method: str, path: str, nonce: int, body: bytes) -> bytes:
    """Bytes a caller signs: binds the body to one endpoint and one nonce"""
    return f"{method.upper()}\n{path}\n{nonce}\n".encode() + body


class NonceTracker:
    """
    Track the last accepted request nonce per account

    A nonce is accepted only if it is greater than every nonce previously
    accepted for the same account.
    """

    def __init__(self):
        self.nonces: Dict[str, int] = {}
        self.lock = threading.Lock()

    def get_next_nonce(self, account: str) -> int:
        with self.lock:
            return self.nonces.get(account, -1) + 1

    def accept(self, account: str, nonce: int) -> bool:
        """Record nonce for account, or return False if it was already used or is stale"""
        with self.lock:
            if nonce <= self.nonces.get(account, -1):
                return False
            self.nonces[account] = nonce
            return True


def _rejected(account: str, reason: str):
    logger.warning("Rejected request from %s: %s", account, reason)
    return jsonify({'success': False, 'error': reason}), 401


def signed(view):
    """Require a fresh nonce and a valid X-Signature from the account named in the body"""
    @wraps(view)
    def wrapper(*args, **kwargs):
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or not data.get('account'):
            return jsonify({'success': False, 'error': 'JSON body with account required'}), 400
        account = data['account']

        try:
            nonce = int(request.headers.get('X-Nonce', ''))
        except ValueError:
            return _rejected(account, 'Missing or malformed nonce')

        message = request_message(request.method, request.path, nonce, request.get_data())
        signature = request.headers.get('X-Signature', '')
        if not AccountKey.verify_signature(message, signature, account):
            return _rejected(account, 'Invalid signature')

        if not current_app.config['NONCES'].accept(account, nonce):
            return _rejected(account, 'Nonce already used')

        g.data = data
        g.account = account
        return view(*args, **kwargs)
    return wrapper


def create_app(registry: VaultRegistry = None) -> Flask:
    app = Flask(__name__)
    app.config['REGISTRY'] = registry if registry is not None else build_default_registry()
    app.config['NONCES'] = NonceTracker()

    def vaults() -> VaultRegistry:
        return app.config['REGISTRY']

    @app.errorhandler(VaultError)
    def handle_vault_error(error):
        return jsonify({
            'success': False,
            'error': str(error),
            'code': type(error).__name__
        }), _status_for(error)

    @app.route('/api/vault/create', methods=['POST'])
    @signed
    def create_vault():
        """Open a vault for the signing account"""
        data = g.data
        vault = vaults().create_vault(
            g.account,
            lock_days=data.get('lock_days'),
            name=data.get('name', ''),
            amount=data.get('amount'),
            beneficiary=data.get('beneficiary')
        )
        return jsonify({'success': True, 'vault': vault.to_dict()})

    @app.route('/api/vault/deposit', methods=['POST'])
    @signed
    def deposit():
        balance = vaults().deposit(g.account, g.data.get('amount'))
        return jsonify({'success': True, 'balance': balance})

    @app.route('/api/vault/withdraw', methods=['POST'])
    @signed
    def withdraw():
        remaining = vaults().withdraw(g.account, g.data.get('amount'))
        return jsonify({'success': True, 'remaining_balance': remaining})

    @app.route('/api/vault/emergency_withdraw', methods=['POST'])
    @signed
    def emergency_withdraw():
        payout = vaults().emergency_withdraw(g.account)
        return jsonify({'success': True, 'payout': payout})

    @app.route('/api/vault/claim', methods=['POST'])
    @signed
    def claim():
        """Beneficiary claim against the vault of body['owner']"""
        amount = vaults().claim_as_beneficiary(g.account, g.data.get('owner', ''))
        return jsonify({'success': True, 'amount': amount})

    @app.route('/api/vault/beneficiary', methods=['POST'])
    @signed
    def update_beneficiary():
        vaults().update_beneficiary(g.account, g.data.get('beneficiary'))
        return jsonify({'success': True})

    @app.route('/api/vault/extend', methods=['POST'])
    @signed
    def extend_lock():
        unlock_time = vaults().extend_lock(g.account, g.data.get('additional_days'))
        return jsonify({'success': True, 'unlock_time': unlock_time})

    @app.route('/api/admin/authorize', methods=['POST'])
    @signed
    def authorize():
        vaults().authorize(g.account, g.data.get('target', ''))
        return jsonify({'success': True})

    @app.route('/api/admin/revoke', methods=['POST'])
    @signed
    def revoke():
        vaults().revoke(g.account, g.data.get('target', ''))
        return jsonify({'success': True})

    @app.route('/api/vault/<account>')
    def get_vault(account):
        """Get vault information"""
        info = vaults().get_vault_info(account)
        return jsonify(info.to_dict())

    @app.route('/api/vault/<account>/transactions')
    def get_transactions(account):
        registry = vaults()
        records = registry.transactions.history(account)
        return jsonify({
            'account': account,
            'count': len(records),
            'digest': registry.transactions.digest(account),
            'transactions': [r.to_dict() for r in records]
        })

    @app.route('/api/nonce/<account>')
    def get_nonce(account):
        """Next nonce the account must sign with"""
        return jsonify({'account': account, 'nonce': app.config['NONCES'].get_next_nonce(account)})

    @app.route('/api/stats')
    def get_stats():
        return jsonify(vaults().get_stats().to_dict())

    return app


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    port = int(os.environ.get("PORT", 10000))
    create_app().run(
        host="0.0.0.0",
        port=port,
        debug=False
    )
