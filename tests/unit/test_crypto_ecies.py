"""Tests for ECIES encryption."""
import json
import pytest

from gaiapy.core.crypto import ECIESService, KeyService


@pytest.fixture
def public_key(private_key):
    return KeyService().get_public_key(private_key)


class TestECIESService:
    """Test suite for ECIESService."""

    def test_cipher_object_fields(self, public_key):
        cipher = ECIESService().encrypt("hello", public_key)

        assert set(cipher) == {'iv', 'ephemeralPK', 'cipherText', 'mac', 'wasString'}
        assert cipher['wasString'] is True
        assert len(bytes.fromhex(cipher['iv'])) == 16
        assert len(bytes.fromhex(cipher['ephemeralPK'])) == 33
        assert len(bytes.fromhex(cipher['mac'])) == 32

    def test_text_roundtrip(self, private_key, public_key):
        service = ECIESService()
        assert service.decrypt(service.encrypt("héllo", public_key), private_key) == "héllo"

    def test_binary_roundtrip(self, private_key, public_key):
        service = ECIESService()
        cipher = service.encrypt(b"\x00\xffdata", public_key)

        assert cipher['wasString'] is False
        assert service.decrypt(cipher, private_key) == b"\x00\xffdata"

    def test_decrypt_accepts_json_text(self, private_key, public_key):
        service = ECIESService()
        cipher_json = json.dumps(service.encrypt("hello", public_key))

        assert service.decrypt(cipher_json, private_key) == "hello"

    def test_encryption_is_randomized(self, public_key):
        service = ECIESService()
        assert service.encrypt("a", public_key)['cipherText'] != service.encrypt("a", public_key)['cipherText']

    def test_wrong_key_fails_mac(self, public_key, other_private_key):
        service = ECIESService()
        with pytest.raises(ValueError):
            service.decrypt(service.encrypt("hello", public_key), other_private_key)

    def test_tampered_cipher_text_fails_mac(self, private_key, public_key):
        service = ECIESService()
        cipher = service.encrypt("hello world, long enough", public_key)
        flipped = bytearray(bytes.fromhex(cipher['cipherText']))
        flipped[0] ^= 1
        cipher['cipherText'] = flipped.hex()

        with pytest.raises(ValueError):
            service.decrypt(cipher, private_key)

    @pytest.mark.parametrize('cipher', ['not json', '[]', '{"iv": "00"}'])
    def test_malformed_cipher_object(self, private_key, cipher):
        with pytest.raises(ValueError):
            ECIESService().decrypt(cipher, private_key)
