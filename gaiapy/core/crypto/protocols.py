"""
Crypto facade protocol.

The storage engine consumes key derivation, signatures, tokens and ECIES
only through this interface, so any implementation can be injected.
"""
from typing import Any, Dict, Protocol, Union, runtime_checkable

from .ecdsa import ECDSASignature


@runtime_checkable
class CryptoFacade(Protocol):
    """Key, signature and encryption operations keyed by hex strings."""

    def get_public_key(self, private_key: str) -> str:
        """Compressed hex public key for a hex private key."""
        ...

    def get_address(self, public_key: str) -> str:
        """Storage address derived from a hex public key."""
        ...

    def random_hex(self, num_bytes: int) -> str:
        """``num_bytes`` of entropy as hex."""
        ...

    def sign(self, private_key: str, content: bytes) -> ECDSASignature:
        """Sign content."""
        ...

    def verify(self, content: bytes, public_key: str, signature: str) -> bool:
        """Verify a signature produced by ``sign``."""
        ...

    def sign_token(self, payload: Dict[str, Any], private_key: str) -> str:
        """Sign a payload as a compact token."""
        ...

    def encrypt(self, content: Union[str, bytes], recipient_public_key: str) -> Dict[str, Any]:
        """Encrypt content to a public key, returning a cipher object."""
        ...

    def decrypt(self, cipher_object: Union[str, Dict[str, Any]], private_key: str) -> Union[str, bytes]:
        """Decrypt a cipher object (or its JSON text)."""
        ...
