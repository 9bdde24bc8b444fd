"""Key management utilities."""
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat


class KeyManager:
    """Loads and serialises secp256k1 keys given as hex strings."""

    CURVE = ec.SECP256K1()
    PRIVATE_KEY_HEX_LENGTH = 64
    COMPRESSED_SUFFIX = '01'

    @classmethod
    def normalize_private_key(cls, private_key: str) -> str:
        """
        Strip the optional '01' compression suffix from a hex private key.

        Raises:
            ValueError: If the key is not 32 bytes of hex
        """
        key = private_key.strip().lower()
        if (len(key) == cls.PRIVATE_KEY_HEX_LENGTH + 2
                and key.endswith(cls.COMPRESSED_SUFFIX)):
            key = key[:cls.PRIVATE_KEY_HEX_LENGTH]

        if len(key) != cls.PRIVATE_KEY_HEX_LENGTH:
            raise ValueError("Private key must be 32 bytes of hex")
        bytes.fromhex(key)
        return key

    @classmethod
    def load_private_key(cls, private_key: str) -> ec.EllipticCurvePrivateKey:
        """Loads a private key from hex."""
        value = int(cls.normalize_private_key(private_key), 16)
        return ec.derive_private_key(value, cls.CURVE)

    @classmethod
    def load_public_key(cls, public_key: str) -> ec.EllipticCurvePublicKey:
        """Loads a compressed or uncompressed SEC1 public key from hex."""
        return ec.EllipticCurvePublicKey.from_encoded_point(
            cls.CURVE, bytes.fromhex(public_key)
        )

    @staticmethod
    def public_key_bytes(
        public_key: ec.EllipticCurvePublicKey,
        compressed: bool = True
    ) -> bytes:
        """Serialises a public key as SEC1 bytes."""
        point_format = (
            PublicFormat.CompressedPoint if compressed
            else PublicFormat.UncompressedPoint
        )
        return public_key.public_bytes(Encoding.X962, point_format)
