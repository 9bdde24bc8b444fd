"""Tests for the StorageSession read, write and delete pipelines."""
import json
import pytest
from unittest.mock import AsyncMock, Mock

from gaiapy.core.api import HubConfig, HubResponse
from gaiapy.core.exceptions import (
    GaiaConfigurationError,
    GaiaNotAuthenticatedError,
    GaiaAccessVerificationError,
    GaiaItemNotFoundError,
    GaiaPayloadTooLargeError,
    GaiaServerError,
    GaiaInvalidResponseError,
    GaiaSignatureVerificationError,
)
from gaiapy.core.identity import UserIdentity
from gaiapy.core.session import Session
from gaiapy.core.storage import StorageSession, PlainContent, DecryptedContent


def stored(fake_hub, storage, path):
    return fake_hub.files[f"{storage.session.storage_address}/{path}"]


def store_path(storage, path):
    return f"/store/{storage.session.storage_address}/{path}"


def read_path(storage, path):
    return f"/read/{storage.session.storage_address}/{path}"


@pytest.fixture
def mock_transport():
    transport = Mock()
    transport.config = HubConfig.default()
    transport.request = AsyncMock(return_value=HubResponse(200, b'{"publicURL": "https://r/x"}'))
    return transport


@pytest.fixture
def hub_session():
    return Session(
        read_url_prefix='https://gaia.example.com/hub/',
        storage_address='1Address',
        auth_token='v1:token',
        hub_base_url='https://hub.example.com'
    )


class TestRoundTrip:
    """write_object followed by read_object with matching flags."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize('encrypt', [True, False])
    @pytest.mark.parametrize('sign', [True, False])
    @pytest.mark.parametrize('content', ['hello gaia ✓', b'\x00\x01\xfe binary'])
    async def test_roundtrip(self, storage, encrypt, sign, content):
        await storage.write_object('docs/item', content, encrypt=encrypt, sign=sign)

        result = await storage.read_object('docs/item', decrypt=encrypt, verify=sign)

        assert result.data == content
        assert result.decrypted is encrypt
        assert isinstance(result, DecryptedContent if encrypt else PlainContent)

    @pytest.mark.asyncio
    async def test_signed_plaintext_scenario(self, fake_hub, storage):
        url = await storage.write_object('notes/a.txt', 'hello', encrypt=False, sign=True)

        uploads = fake_hub.requests_to('/store/')
        assert uploads == [
            ('POST', store_path(storage, 'notes/a.txt')),
            ('POST', store_path(storage, 'notes/a.txt.sig')),
        ]
        assert url == f"{fake_hub.url}{read_path(storage, 'notes/a.txt')}"

        content = await storage.read_object('notes/a.txt', decrypt=False, verify=True)
        assert content.data == 'hello'
        assert content.decrypted is False


class TestWritePipeline:
    """Upload shapes for each encrypt/sign combination."""

    @pytest.mark.asyncio
    async def test_plain_text_content_type(self, fake_hub, storage):
        await storage.write_object('a.txt', 'hi', encrypt=False)
        assert stored(fake_hub, storage, 'a.txt') == (b'hi', 'text/plain')

    @pytest.mark.asyncio
    async def test_plain_binary_content_type(self, fake_hub, storage):
        await storage.write_object('a.bin', b'\x00hi', encrypt=False)
        assert stored(fake_hub, storage, 'a.bin') == (b'\x00hi', 'application/octet-stream')

    @pytest.mark.asyncio
    async def test_encrypted_upload_is_cipher_object(self, fake_hub, storage):
        await storage.write_object('a.txt', 'secret')
        body, content_type = stored(fake_hub, storage, 'a.txt')
        cipher = json.loads(body)

        assert content_type == 'application/json'
        assert b'secret' not in body
        assert cipher['wasString'] is True
        assert len(fake_hub.requests_to('/store/')) == 1

    @pytest.mark.asyncio
    async def test_encrypted_signed_upload_is_one_envelope(self, fake_hub, storage, crypto, private_key):
        await storage.write_object('a.txt', 'secret', sign=True)
        body, _ = stored(fake_hub, storage, 'a.txt')
        envelope = json.loads(body)

        assert set(envelope) == {'signature', 'publicKey', 'cipherText'}
        assert envelope['publicKey'] == crypto.get_public_key(private_key)
        assert crypto.verify(envelope['cipherText'].encode(), envelope['publicKey'], envelope['signature'])
        assert len(fake_hub.requests_to('/store/')) == 1

    @pytest.mark.asyncio
    async def test_signature_file_has_no_cipher_text(self, fake_hub, storage):
        await storage.write_object('a.txt', 'hi', encrypt=False, sign=True)
        body, content_type = stored(fake_hub, storage, 'a.txt.sig')

        assert content_type == 'application/json'
        assert set(json.loads(body)) == {'signature', 'publicKey'}

    @pytest.mark.asyncio
    async def test_encrypt_to_other_key(self, fake_hub, storage, crypto, other_private_key):
        other_public_key = crypto.get_public_key(other_private_key)
        await storage.write_object('shared.txt', 'for you', encryption_key=other_public_key)
        body, _ = stored(fake_hub, storage, 'shared.txt')

        assert crypto.decrypt(body.decode(), other_private_key) == 'for you'
        with pytest.raises(GaiaInvalidResponseError):
            await storage.read_object('shared.txt')

    @pytest.mark.asyncio
    async def test_signature_upload_failure_fails_write(self, fake_hub, storage):
        fake_hub.fail('POST', store_path(storage, 'a.txt.sig'), 500)

        with pytest.raises(GaiaServerError):
            await storage.write_object('a.txt', 'hi', encrypt=False, sign=True)
        assert stored(fake_hub, storage, 'a.txt') == (b'hi', 'text/plain')

    @pytest.mark.asyncio
    async def test_signature_not_uploaded_when_content_fails(self, fake_hub, storage):
        fake_hub.fail('POST', store_path(storage, 'a.txt'), 500)

        with pytest.raises(GaiaServerError):
            await storage.write_object('a.txt', 'hi', encrypt=False, sign=True)
        assert len(fake_hub.requests_to('/store/')) == 1

    @pytest.mark.asyncio
    async def test_escaped_path_roundtrip(self, storage):
        await storage.write_object('my folder/ü #1.txt', 'spaced', encrypt=False)
        result = await storage.read_object('my folder/ü #1.txt', decrypt=False)

        assert result.data == 'spaced'

    @pytest.mark.asyncio
    @pytest.mark.parametrize('status,error_class', [
        (401, GaiaAccessVerificationError),
        (413, GaiaPayloadTooLargeError),
        (500, GaiaServerError),
        (404, GaiaInvalidResponseError),
    ])
    async def test_status_mapping(self, fake_hub, storage, status, error_class):
        fake_hub.fail('POST', store_path(storage, 'a.txt'), status)

        with pytest.raises(error_class):
            await storage.write_object('a.txt', 'hi')

    @pytest.mark.asyncio
    @pytest.mark.parametrize('body', [b'{}', b'{"publicURL": ""}', b'[]', b'not json'])
    async def test_missing_public_url(self, mock_transport, hub_session, identity, body):
        mock_transport.request.return_value = HubResponse(200, body)
        storage = StorageSession(hub_session, mock_transport, identity)

        with pytest.raises(GaiaInvalidResponseError):
            await storage.write_object('a.txt', 'hi', encrypt=False)

    @pytest.mark.asyncio
    async def test_upload_request(self, mock_transport, hub_session, identity):
        storage = StorageSession(hub_session, mock_transport, identity)

        url = await storage.write_object('a b.txt', 'hi', encrypt=False)

        assert url == 'https://r/x'
        args, kwargs = mock_transport.request.call_args
        assert args == ('POST', 'https://hub.example.com/store/1Address/a%20b.txt')
        assert kwargs['token'] == 'v1:token'
        assert kwargs['content_type'] == 'text/plain'

    @pytest.mark.asyncio
    async def test_encrypt_without_private_key(self, mock_transport, hub_session):
        storage = StorageSession(hub_session, mock_transport, UserIdentity())

        with pytest.raises(GaiaNotAuthenticatedError):
            await storage.write_object('a.txt', 'hi')
        mock_transport.request.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_sign_without_private_key(self, mock_transport, hub_session):
        storage = StorageSession(hub_session, mock_transport, UserIdentity())

        with pytest.raises(GaiaNotAuthenticatedError):
            await storage.write_object('a.txt', 'hi', encrypt=False, sign=True)
        mock_transport.request.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_explicit_keys_need_no_identity(self, mock_transport, hub_session, crypto, private_key):
        storage = StorageSession(hub_session, mock_transport, UserIdentity())

        await storage.write_object(
            'a.txt', 'hi',
            encryption_key=crypto.get_public_key(private_key),
            sign=True,
            signing_key=private_key
        )
        mock_transport.request.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_invalid_encryption_key(self, mock_transport, hub_session, identity):
        storage = StorageSession(hub_session, mock_transport, identity)

        with pytest.raises(GaiaConfigurationError):
            await storage.write_object('a.txt', 'hi', encryption_key='02zz')
        mock_transport.request.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_incomplete_session(self, mock_transport, identity):
        storage = StorageSession(Session(read_url_prefix='https://r/'), mock_transport, identity)

        with pytest.raises(GaiaConfigurationError):
            await storage.write_object('a.txt', 'hi', encrypt=False)
        mock_transport.request.assert_not_awaited()


class TestReadPipeline:
    """Read modes and their failures."""

    @pytest.mark.asyncio
    async def test_plain_read_types(self, storage):
        await storage.write_object('t.txt', 'text', encrypt=False)
        await storage.write_object('b.bin', b'\x00bin', encrypt=False)

        text = await storage.read_object('t.txt', decrypt=False)
        binary = await storage.read_object('b.bin', decrypt=False)

        assert text.data == 'text' and not text.is_binary
        assert text.content_type == 'text/plain'
        assert binary.data == b'\x00bin' and binary.is_binary

    @pytest.mark.asyncio
    async def test_read_url(self, storage, fake_hub):
        url = await storage.get_read_url('dir/a b.txt')
        assert url == f"{fake_hub.url}/read/{storage.session.storage_address}/dir/a%20b.txt"

    @pytest.mark.asyncio
    @pytest.mark.parametrize('decrypt,verify', [(False, False), (False, True), (True, False), (True, True)])
    async def test_missing_object(self, storage, decrypt, verify):
        with pytest.raises(GaiaItemNotFoundError):
            await storage.read_object('missing.txt', decrypt=decrypt, verify=verify)

    @pytest.mark.asyncio
    @pytest.mark.parametrize('status,error_class', [
        (401, GaiaAccessVerificationError),
        (500, GaiaServerError),
        (413, GaiaInvalidResponseError),
    ])
    async def test_status_mapping(self, fake_hub, storage, status, error_class):
        await storage.write_object('a.txt', 'hi', encrypt=False)
        fake_hub.fail('GET', read_path(storage, 'a.txt'), status)

        with pytest.raises(error_class):
            await storage.read_object('a.txt', decrypt=False)

    @pytest.mark.asyncio
    async def test_decrypt_without_private_key(self, mock_transport, hub_session):
        storage = StorageSession(hub_session, mock_transport, UserIdentity())

        with pytest.raises(GaiaNotAuthenticatedError):
            await storage.read_object('a.txt')
        mock_transport.request.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize('verify', [False, True])
    async def test_decrypt_with_unusable_private_key(self, mock_transport, hub_session, verify):
        storage = StorageSession(hub_session, mock_transport, UserIdentity(private_key='zz'))

        with pytest.raises(GaiaConfigurationError) as exc_info:
            await storage.read_object('a.txt', verify=verify)

        assert not isinstance(exc_info.value, GaiaNotAuthenticatedError)
        mock_transport.request.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_decrypt_plaintext_body(self, storage):
        await storage.write_object('a.txt', 'not encrypted', encrypt=False)

        with pytest.raises(GaiaInvalidResponseError):
            await storage.read_object('a.txt')

    @pytest.mark.asyncio
    async def test_signature_file_missing(self, storage):
        await storage.write_object('a.txt', 'hi', encrypt=False)

        with pytest.raises(GaiaItemNotFoundError):
            await storage.read_object('a.txt', decrypt=False, verify=True)

    @pytest.mark.asyncio
    async def test_signer_mismatch(self, storage, other_private_key):
        await storage.write_object('a.txt', 'hi', encrypt=False, sign=True, signing_key=other_private_key)

        with pytest.raises(GaiaSignatureVerificationError):
            await storage.read_object('a.txt', decrypt=False, verify=True)

    @pytest.mark.asyncio
    async def test_encrypted_signer_mismatch(self, storage, other_private_key):
        await storage.write_object('a.txt', 'hi', sign=True, signing_key=other_private_key)

        with pytest.raises(GaiaSignatureVerificationError):
            await storage.read_object('a.txt', decrypt=True, verify=True)

    @pytest.mark.asyncio
    async def test_tampered_content(self, fake_hub, storage):
        await storage.write_object('a.txt', 'hi', encrypt=False, sign=True)
        key = f"{storage.session.storage_address}/a.txt"
        fake_hub.files[key] = (b'ho', 'text/plain')

        with pytest.raises(GaiaSignatureVerificationError):
            await storage.read_object('a.txt', decrypt=False, verify=True)

    @pytest.mark.asyncio
    async def test_malformed_signature_file(self, fake_hub, storage):
        await storage.write_object('a.txt', 'hi', encrypt=False)
        await storage.write_object('a.txt.sig', '{"signature": 1}', encrypt=False)

        with pytest.raises(GaiaSignatureVerificationError):
            await storage.read_object('a.txt', decrypt=False, verify=True)

    @pytest.mark.asyncio
    async def test_decrypt_verify_unsigned_object(self, storage):
        await storage.write_object('a.txt', 'hi')

        with pytest.raises(GaiaInvalidResponseError):
            await storage.read_object('a.txt', decrypt=True, verify=True)


class TestDeletePipeline:
    """Tests for delete_object."""

    @pytest.mark.asyncio
    async def test_delete(self, fake_hub, storage):
        await storage.write_object('a.txt', 'hi', encrypt=False)
        await storage.delete_object('a.txt')

        assert f"{storage.session.storage_address}/a.txt" not in fake_hub.files

    @pytest.mark.asyncio
    async def test_delete_signed(self, fake_hub, storage):
        await storage.write_object('a.txt', 'hi', encrypt=False, sign=True)
        await storage.delete_object('a.txt', was_signed=True)

        assert fake_hub.files == {}
        assert len(fake_hub.requests_to('/delete/')) == 2

    @pytest.mark.asyncio
    async def test_delete_missing(self, storage):
        with pytest.raises(GaiaItemNotFoundError):
            await storage.delete_object('missing.txt')

    @pytest.mark.asyncio
    async def test_delete_signed_missing_signature(self, fake_hub, storage):
        await storage.write_object('a.txt', 'hi', encrypt=False)

        with pytest.raises(GaiaItemNotFoundError):
            await storage.delete_object('a.txt', was_signed=True)
        assert fake_hub.files == {}

    @pytest.mark.asyncio
    async def test_other_failure_wins_over_not_found(self, fake_hub, storage):
        await storage.write_object('a.txt.sig', '{}', encrypt=False)
        fake_hub.fail('DELETE', f"/delete/{storage.session.storage_address}/a.txt.sig", 500)

        with pytest.raises(GaiaServerError):
            await storage.delete_object('a.txt', was_signed=True)

    @pytest.mark.asyncio
    async def test_delete_unauthorized(self, fake_hub, storage):
        fake_hub.fail('DELETE', f"/delete/{storage.session.storage_address}/a.txt", 401)

        with pytest.raises(GaiaAccessVerificationError):
            await storage.delete_object('a.txt')
