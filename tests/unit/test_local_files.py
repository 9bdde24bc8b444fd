"""Tests for file:// local references."""
import pytest
from pathlib import Path

from gaiapy.core.exceptions import GaiaConfigurationError
from gaiapy.core.storage import LocalFileReference, DecryptedContent, PlainContent
from gaiapy.core.storage.local_files import read_local_content


class TestLocalFileReference:
    """Tests for LocalFileReference."""

    def test_plain_path_is_not_local(self):
        assert LocalFileReference.parse('images/pic.jpg', '/base') is None

    def test_parse(self):
        reference = LocalFileReference.parse('file://images/my pic.jpg', '/base')

        assert reference.local_path == Path('/base/images/my pic.jpg')
        assert reference.storage_path == 'images/my pic.jpg'

    def test_parse_without_base_dir(self):
        reference = LocalFileReference.parse('file://tmp/x')

        assert reference.local_path == Path('/tmp/x')
        assert reference.storage_path == 'tmp/x'

    def test_only_first_prefix_rewritten(self):
        reference = LocalFileReference.parse('file://a/file://b', '/base')
        assert reference.storage_path == 'a/file://b'

    @pytest.mark.asyncio
    async def test_write_creates_parents_and_read(self, tmp_path):
        reference = LocalFileReference.parse('file://deep/dir/f.bin', str(tmp_path))
        await reference.write(b'data')

        assert reference.exists()
        assert await reference.read() == b'data'
        assert reference.read_sync() == b'data'

    @pytest.mark.asyncio
    async def test_read_missing(self, tmp_path):
        reference = LocalFileReference.parse('file://missing', str(tmp_path))

        assert not reference.exists()
        assert await reference.read() is None
        assert reference.read_sync() is None

    @pytest.mark.asyncio
    async def test_read_local_content_tags(self, tmp_path):
        (tmp_path / 'f.txt').write_bytes(b'local')

        decrypted = await read_local_content('file://f.txt', True, str(tmp_path))
        plain = await read_local_content('file://f.txt', False, str(tmp_path))

        assert isinstance(decrypted, DecryptedContent) and decrypted.data == b'local'
        assert isinstance(plain, PlainContent) and plain.data == b'local'
        assert await read_local_content('f.txt', True, str(tmp_path)) is None


class TestStorageWithLocalFiles:
    """Local references through the storage pipelines."""

    @pytest.mark.asyncio
    async def test_write_uploads_local_file(self, fake_hub, storage, tmp_path):
        (tmp_path / 'images').mkdir()
        (tmp_path / 'images' / 'pic.jpg').write_bytes(b'\xff\xd8jpeg')

        url = await storage.write_object('file://images/pic.jpg', '', encrypt=False, base_dir=str(tmp_path))

        key = f"{storage.session.storage_address}/images/pic.jpg"
        assert fake_hub.files[key] == (b'\xff\xd8jpeg', 'application/octet-stream')
        assert url.endswith('/images/pic.jpg')

    @pytest.mark.asyncio
    async def test_write_missing_local_file(self, fake_hub, storage, tmp_path):
        with pytest.raises(GaiaConfigurationError):
            await storage.write_object('file://nope.jpg', '', base_dir=str(tmp_path))

        assert fake_hub.requests_to('/store/') == []

    @pytest.mark.asyncio
    async def test_read_existing_local_file_skips_network(self, fake_hub, storage, tmp_path):
        (tmp_path / 'cached.txt').write_bytes(b'cached copy')
        before = len(fake_hub.requests)

        content = await storage.read_object('file://cached.txt', base_dir=str(tmp_path))

        assert content.data == b'cached copy'
        assert content.decrypted
        assert len(fake_hub.requests) == before

    @pytest.mark.asyncio
    async def test_read_without_local_copy_refreshes_it(self, storage, tmp_path):
        await storage.write_object('a.txt', 'remote')
        (tmp_path / 'a.txt').write_bytes(b'stale')

        content = await storage.read_object('file://a.txt', base_dir=str(tmp_path), use_local=False)

        assert content.data == 'remote'
        assert (tmp_path / 'a.txt').read_bytes() == b'remote'

    @pytest.mark.asyncio
    async def test_read_missing_local_file_fetches_and_caches(self, storage, tmp_path):
        await storage.write_object('photos/a.bin', b'\x01\x02remote')

        content = await storage.read_object('file://photos/a.bin', base_dir=str(tmp_path))

        assert content.data == b'\x01\x02remote'
        assert (tmp_path / 'photos' / 'a.bin').read_bytes() == b'\x01\x02remote'

    @pytest.mark.asyncio
    async def test_read_plain_missing_local_file_does_not_cache(self, storage, tmp_path):
        await storage.write_object('a.txt', 'remote', encrypt=False)

        content = await storage.read_object('file://a.txt', decrypt=False, base_dir=str(tmp_path))

        assert content.data == 'remote'
        assert not (tmp_path / 'a.txt').exists()
