"""
Local file references.

A storage path containing ``file://`` names a local file: the prefix is
replaced by ``<base_dir>/`` to find the file, and removed to obtain the
storage-relative path.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import aiofiles

from ..logging import get_logger
from .models import FileContent, PlainContent, DecryptedContent

FILE_PREFIX = 'file://'

logger = get_logger('gaiapy.storage')


@dataclass(frozen=True)
class LocalFileReference:
    """
    A storage path that refers to a local file.

    Attributes:
        local_path: File on disk
        storage_path: Path used on the hub
    """
    local_path: Path
    storage_path: str

    @classmethod
    def parse(cls, path: str, base_dir: str = '') -> Optional['LocalFileReference']:
        """Return the reference for ``path``, or None if it is a plain storage path."""
        if FILE_PREFIX not in path:
            return None
        return cls(
            local_path=Path(path.replace(FILE_PREFIX, f"{base_dir}/", 1)),
            storage_path=path.replace(FILE_PREFIX, '', 1),
        )

    def exists(self) -> bool:
        return self.local_path.is_file()

    async def read(self) -> Optional[bytes]:
        """
        Read the whole local file.

        Returns:
            File data or None if the file cannot be read
        """
        try:
            async with aiofiles.open(self.local_path, 'rb') as f:
                return await f.read()
        except (IOError, OSError) as e:
            logger.debug(f"Could not read local file {self.local_path}: {e}")
            return None

    def read_sync(self) -> Optional[bytes]:
        """Blocking variant of ``read`` for synchronous callers."""
        try:
            return self.local_path.read_bytes()
        except (IOError, OSError) as e:
            logger.debug(f"Could not read local file {self.local_path}: {e}")
            return None

    async def write(self, data: bytes) -> None:
        """Write data to the local file, creating parent directories."""
        self.local_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(self.local_path, 'wb') as f:
            await f.write(data)


async def read_local_content(path: str, decrypt: bool, base_dir: str = '') -> Optional[FileContent]:
    """
    Serve a read from a local file, if ``path`` references one that exists.

    Local files hold plaintext, so the result is tagged decrypted whenever
    decryption was requested.
    """
    local = LocalFileReference.parse(path, base_dir)
    if local is None or not local.exists():
        return None

    data = await local.read()
    if data is None:
        return None

    logger.debug(f"Serving {path} from local file {local.local_path}")
    return DecryptedContent(data) if decrypt else PlainContent(data)
