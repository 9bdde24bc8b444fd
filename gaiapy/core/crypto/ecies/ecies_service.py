"""
ECIES encryption over secp256k1.

Cipher objects are JSON-compatible dicts of hex fields:
``{iv, ephemeralPK, cipherText, mac, wasString}``. The ECDH shared
x-coordinate is hashed with SHA-512; the first half keys AES-256-CBC and
the second half keys HMAC-SHA256 over ``iv || ephemeralPK || cipherText``.
"""
import hashlib
import json
from typing import Any, Dict, Tuple, Union
from Crypto.Cipher import AES
from Crypto.Hash import HMAC, SHA256
from Crypto.Random import get_random_bytes
from Crypto.Util.Padding import pad, unpad
from cryptography.hazmat.primitives.asymmetric import ec

from ..utils import KeyManager

CipherObject = Dict[str, Any]


class ECIESService:
    """Encrypts to a public key and decrypts with the matching private key."""

    IV_SIZE = 16

    def __init__(self, key_manager: KeyManager = None):
        self.key_manager = key_manager or KeyManager()

    def encrypt(
        self,
        content: Union[str, bytes],
        recipient_public_key: str
    ) -> CipherObject:
        """
        Encrypt content to a hex public key.

        Args:
            content: Text (UTF-8 encoded, ``wasString`` True) or bytes
            recipient_public_key: Compressed or uncompressed hex public key

        Returns:
            Cipher object dict
        """
        was_string = isinstance(content, str)
        plaintext = content.encode('utf-8') if was_string else bytes(content)

        recipient = self.key_manager.load_public_key(recipient_public_key)
        ephemeral = ec.generate_private_key(self.key_manager.CURVE)
        shared_secret = ephemeral.exchange(ec.ECDH(), recipient)
        encryption_key, hmac_key = self._derive_keys(shared_secret)

        iv = get_random_bytes(self.IV_SIZE)
        cipher = AES.new(encryption_key, AES.MODE_CBC, iv)
        cipher_text = cipher.encrypt(pad(plaintext, AES.block_size))

        ephemeral_pk = self.key_manager.public_key_bytes(ephemeral.public_key())
        mac = HMAC.new(hmac_key, iv + ephemeral_pk + cipher_text, digestmod=SHA256).digest()

        return {
            'iv': iv.hex(),
            'ephemeralPK': ephemeral_pk.hex(),
            'cipherText': cipher_text.hex(),
            'mac': mac.hex(),
            'wasString': was_string,
        }

    def decrypt(
        self,
        cipher_object: Union[str, CipherObject],
        private_key: str
    ) -> Union[str, bytes]:
        """
        Decrypt a cipher object with a hex private key.

        Returns:
            str if the plaintext was text, else bytes

        Raises:
            ValueError: Malformed cipher object or MAC mismatch
        """
        if isinstance(cipher_object, str):
            cipher_object = json.loads(cipher_object)
        if not isinstance(cipher_object, dict):
            raise ValueError("Cipher object must be a JSON object")

        try:
            iv = bytes.fromhex(cipher_object['iv'])
            ephemeral_pk = bytes.fromhex(cipher_object['ephemeralPK'])
            cipher_text = bytes.fromhex(cipher_object['cipherText'])
            mac = bytes.fromhex(cipher_object['mac'])
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid cipher object: {e}")

        key = self.key_manager.load_private_key(private_key)
        ephemeral = self.key_manager.load_public_key(ephemeral_pk.hex())
        shared_secret = key.exchange(ec.ECDH(), ephemeral)
        encryption_key, hmac_key = self._derive_keys(shared_secret)

        # Raises ValueError on mismatch
        HMAC.new(hmac_key, iv + ephemeral_pk + cipher_text, digestmod=SHA256).verify(mac)

        cipher = AES.new(encryption_key, AES.MODE_CBC, iv)
        plaintext = unpad(cipher.decrypt(cipher_text), AES.block_size)

        if cipher_object.get('wasString', True):
            return plaintext.decode('utf-8')
        return plaintext

    @staticmethod
    def _derive_keys(shared_secret: bytes) -> Tuple[bytes, bytes]:
        digest = hashlib.sha512(shared_secret).digest()
        return digest[:32], digest[32:]
