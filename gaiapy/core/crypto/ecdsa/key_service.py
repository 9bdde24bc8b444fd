"""Key derivation: public keys, storage addresses and entropy."""
import hashlib
import os
from Crypto.Hash import RIPEMD160

from ..utils import Base58Encoder, KeyManager


class KeyService:
    """Derives public keys and addresses from secp256k1 keys."""

    ADDRESS_VERSION = b'\x00'

    def __init__(self, key_manager: KeyManager = None):
        self.key_manager = key_manager or KeyManager()

    def get_public_key(self, private_key: str, compressed: bool = True) -> str:
        """Returns the hex SEC1 public key for a hex private key."""
        key = self.key_manager.load_private_key(private_key)
        return self.key_manager.public_key_bytes(key.public_key(), compressed).hex()

    def get_address(self, public_key: str) -> str:
        """Returns the base58check address of a hex public key."""
        sha = hashlib.sha256(bytes.fromhex(public_key)).digest()
        hash160 = RIPEMD160.new(sha).digest()
        return Base58Encoder.encode_check(self.ADDRESS_VERSION + hash160)

    @staticmethod
    def random_hex(num_bytes: int) -> str:
        """Returns ``num_bytes`` of OS entropy as hex."""
        return os.urandom(num_bytes).hex()
