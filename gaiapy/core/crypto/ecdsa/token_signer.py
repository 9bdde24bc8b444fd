"""
Compact JWS tokens signed with ES256K.

Used for the hub auth handshake. Signatures are raw ``r || s`` (32 bytes
each) rather than DER, and every segment is unpadded base64url.
"""
import json
from typing import Any, Dict
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature
)

from ..utils import Base64Encoder, KeyManager


class TokenSigner:
    """Signs, decodes and verifies ES256K compact tokens."""

    HEADER = {'typ': 'JWT', 'alg': 'ES256K'}
    COORDINATE_SIZE = 32

    def __init__(self, key_manager: KeyManager = None):
        self.key_manager = key_manager or KeyManager()
        self.encoder = Base64Encoder()

    def sign(self, payload: Dict[str, Any], private_key: str) -> str:
        """Returns ``header.payload.signature`` for the payload."""
        key = self.key_manager.load_private_key(private_key)
        signing_input = '.'.join([
            self.encoder.encode(self._dumps(self.HEADER)),
            self.encoder.encode(self._dumps(payload)),
        ])

        der = key.sign(signing_input.encode(), ec.ECDSA(hashes.SHA256()))
        r, s = decode_dss_signature(der)
        raw = (r.to_bytes(self.COORDINATE_SIZE, 'big')
               + s.to_bytes(self.COORDINATE_SIZE, 'big'))

        return f"{signing_input}.{self.encoder.encode(raw)}"

    def decode(self, token: str) -> Dict[str, Any]:
        """
        Decodes a token without verifying it.

        Returns:
            Dict with 'header', 'payload' and 'signature' (base64url)

        Raises:
            ValueError: If the token is not a three-segment JWS
        """
        parts = token.split('.')
        if len(parts) != 3:
            raise ValueError(f"Token must have 3 segments, got {len(parts)}")

        return {
            'header': json.loads(self.encoder.decode(parts[0])),
            'payload': json.loads(self.encoder.decode(parts[1])),
            'signature': parts[2],
        }

    def verify(self, token: str, public_key: str) -> bool:
        """Verifies the token signature against a hex public key."""
        try:
            header, payload, signature = token.split('.')
            raw = self.encoder.decode(signature)
            if len(raw) != 2 * self.COORDINATE_SIZE:
                return False
            der = encode_dss_signature(
                int.from_bytes(raw[:self.COORDINATE_SIZE], 'big'),
                int.from_bytes(raw[self.COORDINATE_SIZE:], 'big')
            )
            key = self.key_manager.load_public_key(public_key)
            key.verify(der, f"{header}.{payload}".encode(), ec.ECDSA(hashes.SHA256()))
            return True
        except (InvalidSignature, ValueError, TypeError):
            return False

    @staticmethod
    def _dumps(data: Dict[str, Any]) -> bytes:
        return json.dumps(data, separators=(',', ':')).encode()
