"""
Data models for the storage engine.

Read results are tagged so callers can tell decrypted content from plain
content.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union
import json

Content = Union[str, bytes]

OCTET_STREAM = 'application/octet-stream'
TEXT_PLAIN = 'text/plain'
APPLICATION_JSON = 'application/json'


@dataclass(frozen=True)
class FileContent:
    """
    Content returned by a read.

    Attributes:
        data: Text (str) or binary (bytes) content
        content_type: Content-Type reported by the hub (None for local files
            and decrypted content)
    """
    data: Content
    content_type: Optional[str] = None

    @property
    def decrypted(self) -> bool:
        """True if the content passed through decryption."""
        return False

    @property
    def is_binary(self) -> bool:
        return isinstance(self.data, bytes)


@dataclass(frozen=True)
class PlainContent(FileContent):
    """Content read without decryption."""
    pass


@dataclass(frozen=True)
class DecryptedContent(FileContent):
    """Content recovered by decryption (or a local plaintext copy)."""

    @property
    def decrypted(self) -> bool:
        return True


@dataclass(frozen=True)
class SignatureEnvelope:
    """
    Signature over a stored object.

    Stored as ``<path>.sig`` for signed plaintext, or as the object itself
    for signed ciphertext (``cipher_text`` set).

    Attributes:
        signature: DER ECDSA signature (hex)
        public_key: Signer's compressed public key (hex)
        cipher_text: Signed cipher object JSON, for encrypted objects
    """
    signature: str
    public_key: str
    cipher_text: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'signature': self.signature,
            'publicKey': self.public_key,
        }
        if self.cipher_text is not None:
            result['cipherText'] = self.cipher_text
        return result

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, data: Union[str, bytes]) -> 'SignatureEnvelope':
        """
        Decode an envelope.

        Raises:
            ValueError: If the JSON is malformed or fields are missing
        """
        try:
            decoded = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ValueError(f"Signature envelope is not JSON: {e}")

        if not isinstance(decoded, dict):
            raise ValueError("Signature envelope must be a JSON object")

        signature = decoded.get('signature')
        public_key = decoded.get('publicKey')
        cipher_text = decoded.get('cipherText')
        if not isinstance(signature, str) or not isinstance(public_key, str):
            raise ValueError("Signature envelope needs 'signature' and 'publicKey'")
        if cipher_text is not None and not isinstance(cipher_text, str):
            raise ValueError("Signature envelope 'cipherText' must be a string")

        return cls(signature=signature, public_key=public_key, cipher_text=cipher_text)
