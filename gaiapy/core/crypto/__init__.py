"""Crypto module: secp256k1 keys, ECDSA, ES256K tokens and ECIES."""
from .utils import Base64Encoder, Base58Encoder, KeyManager
from .ecdsa import KeyService, ECDSAService, ECDSASignature, TokenSigner
from .ecies import ECIESService, CipherObject
from .protocols import CryptoFacade
from .facade import Secp256k1Crypto

__all__ = [
    'Base64Encoder',
    'Base58Encoder',
    'KeyManager',
    'KeyService',
    'ECDSAService',
    'ECDSASignature',
    'TokenSigner',
    'ECIESService',
    'CipherObject',
    'CryptoFacade',
    'Secp256k1Crypto',
]
