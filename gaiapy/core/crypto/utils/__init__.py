"""Shared utilities for the crypto module."""
from .encoding import Base64Encoder, Base58Encoder
from .key_utils import KeyManager

__all__ = [
    'Base64Encoder',
    'Base58Encoder',
    'KeyManager',
]
