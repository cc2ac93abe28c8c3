"""
Account identities backed by secp256k1 keys
"""

import hashlib
from typing import Optional, Tuple

from ecdsa import SigningKey, VerifyingKey, SECP256k1, BadSignatureError, MalformedPointError

# Counterparty used for value entering or leaving the vault system
SYSTEM_ACCOUNT = "system"


class AccountKey:
    """Key pair whose compressed public key is the account identifier"""

    def __init__(self, private_key: Optional[bytes] = None):
        if private_key:
            self.private_key = SigningKey.from_string(private_key, curve=SECP256k1)
        else:
            self.private_key = SigningKey.generate(curve=SECP256k1)

        self.public_key = self.private_key.get_verifying_key()

    @property
    def account_id(self) -> str:
        """Compressed public key in hex format"""
        return self.public_key.to_string("compressed").hex()

    def sign_message(self, message: bytes) -> str:
        """Sign message and return signature in hex"""
        return self.private_key.sign(message, hashfunc=hashlib.sha256).hex()

    @staticmethod
    def verify_signature(message: bytes, signature_hex: str, account_id: str) -> bool:
        """Check that signature_hex over message was made by account_id's key"""
        try:
            vk = VerifyingKey.from_string(bytes.fromhex(account_id), curve=SECP256k1)
            return vk.verify(bytes.fromhex(signature_hex), message, hashfunc=hashlib.sha256)
        except (BadSignatureError, MalformedPointError, ValueError):
            return False

    @classmethod
    def from_private_hex(cls, private_hex: str) -> 'AccountKey':
        return cls(bytes.fromhex(private_hex))

    @staticmethod
    def generate_key_pair() -> Tuple[str, str]:
        """Generate new key pair and return (private_key_hex, account_id)"""
        key = AccountKey()
        return key.private_key.to_string().hex(), key.account_id
