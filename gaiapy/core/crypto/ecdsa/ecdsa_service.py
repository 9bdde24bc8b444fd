"""ECDSA signing and verification service."""
from dataclasses import dataclass
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec

from ..utils import KeyManager


@dataclass(frozen=True)
class ECDSASignature:
    """DER signature (hex) and the compressed public key (hex) that made it."""
    signature: str
    public_key: str


class ECDSAService:
    """secp256k1 ECDSA over SHA-256."""

    def __init__(self, key_manager: KeyManager = None):
        self.key_manager = key_manager or KeyManager()

    def sign(self, private_key: str, content: bytes) -> ECDSASignature:
        """Signs content with a hex private key."""
        key = self.key_manager.load_private_key(private_key)
        signature = key.sign(content, ec.ECDSA(hashes.SHA256()))
        public_key = self.key_manager.public_key_bytes(key.public_key())
        return ECDSASignature(signature=signature.hex(), public_key=public_key.hex())

    def verify(self, content: bytes, public_key: str, signature: str) -> bool:
        """Verifies a DER hex signature; malformed input verifies as False."""
        try:
            key = self.key_manager.load_public_key(public_key)
            key.verify(bytes.fromhex(signature), content, ec.ECDSA(hashes.SHA256()))
            return True
        except (InvalidSignature, ValueError, TypeError):
            return False
