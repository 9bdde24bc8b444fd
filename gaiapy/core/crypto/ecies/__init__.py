"""ECIES encryption."""
from .ecies_service import ECIESService, CipherObject

__all__ = [
    'ECIESService',
    'CipherObject',
]
