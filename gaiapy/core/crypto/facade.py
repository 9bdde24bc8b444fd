"""Default secp256k1 implementation of the crypto facade."""
from typing import Any, Dict, Optional, Union

from .ecdsa import KeyService, ECDSAService, ECDSASignature, TokenSigner
from .ecies import ECIESService
from .utils import KeyManager


class Secp256k1Crypto:
    """
    Crypto facade backed by ``cryptography`` and ``pycryptodome``.

    Example:
        >>> crypto = Secp256k1Crypto()
        >>> public_key = crypto.get_public_key(private_key)
        >>> crypto.get_address(public_key)
        '1...'
    """

    def __init__(
        self,
        key_service: Optional[KeyService] = None,
        ecdsa_service: Optional[ECDSAService] = None,
        ecies_service: Optional[ECIESService] = None,
        token_signer: Optional[TokenSigner] = None
    ):
        key_manager = KeyManager()
        self._keys = key_service or KeyService(key_manager)
        self._ecdsa = ecdsa_service or ECDSAService(key_manager)
        self._ecies = ecies_service or ECIESService(key_manager)
        self._tokens = token_signer or TokenSigner(key_manager)

    def get_public_key(self, private_key: str) -> str:
        return self._keys.get_public_key(private_key)

    def get_address(self, public_key: str) -> str:
        return self._keys.get_address(public_key)

    def random_hex(self, num_bytes: int) -> str:
        return self._keys.random_hex(num_bytes)

    def sign(self, private_key: str, content: bytes) -> ECDSASignature:
        return self._ecdsa.sign(private_key, content)

    def verify(self, content: bytes, public_key: str, signature: str) -> bool:
        return self._ecdsa.verify(content, public_key, signature)

    def sign_token(self, payload: Dict[str, Any], private_key: str) -> str:
        return self._tokens.sign(payload, private_key)

    def decode_token(self, token: str) -> Dict[str, Any]:
        return self._tokens.decode(token)

    def verify_token(self, token: str, public_key: str) -> bool:
        return self._tokens.verify(token, public_key)

    def encrypt(self, content: Union[str, bytes], recipient_public_key: str) -> Dict[str, Any]:
        return self._ecies.encrypt(content, recipient_public_key)

    def decrypt(self, cipher_object: Union[str, Dict[str, Any]], private_key: str) -> Union[str, bytes]:
        return self._ecies.decrypt(cipher_object, private_key)
