"""Encoding utilities."""
import base64
import hashlib


class Base64Encoder:
    """Base64 URL-safe encoder/decoder (JWS segments)."""

    @staticmethod
    def encode(data: bytes) -> str:
        """Encodes bytes to Base64 URL-safe without padding."""
        encoded = base64.b64encode(data).decode()
        encoded = encoded.replace('+', '-').replace('/', '_')
        encoded = encoded.rstrip('=')
        return encoded

    @staticmethod
    def decode(data: str) -> bytes:
        """Decodes Base64 URL-safe (with or without padding)."""
        data = data.replace('-', '+').replace('_', '/')
        padding = len(data) % 4
        if padding:
            data += '=' * (4 - padding)
        return base64.b64decode(data)


class Base58Encoder:
    """Bitcoin-alphabet Base58 encoder with optional checksum."""

    ALPHABET = '123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz'
    CHECKSUM_SIZE = 4

    @classmethod
    def encode(cls, data: bytes) -> str:
        """Encodes bytes to Base58, one leading '1' per leading zero byte."""
        number = int.from_bytes(data, byteorder='big')
        encoded = ''
        while number > 0:
            number, remainder = divmod(number, 58)
            encoded = cls.ALPHABET[remainder] + encoded

        leading_zeros = len(data) - len(data.lstrip(b'\0'))
        return cls.ALPHABET[0] * leading_zeros + encoded

    @classmethod
    def encode_check(cls, payload: bytes) -> str:
        """Encodes payload followed by its double-SHA256 checksum."""
        return cls.encode(payload + cls._checksum(payload))

    @classmethod
    def _checksum(cls, payload: bytes) -> bytes:
        return hashlib.sha256(hashlib.sha256(payload).digest()).digest()[:cls.CHECKSUM_SIZE]
