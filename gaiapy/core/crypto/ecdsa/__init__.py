"""secp256k1 keys, signatures and tokens."""
from .key_service import KeyService
from .ecdsa_service import ECDSAService, ECDSASignature
from .token_signer import TokenSigner

__all__ = [
    'KeyService',
    'ECDSAService',
    'ECDSASignature',
    'TokenSigner',
]
