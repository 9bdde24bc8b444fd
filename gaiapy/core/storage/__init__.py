"""Storage engine: read, write, delete and list objects on a hub."""
from .models import (
    Content,
    FileContent,
    PlainContent,
    DecryptedContent,
    SignatureEnvelope,
    OCTET_STREAM,
    TEXT_PLAIN,
    APPLICATION_JSON,
)
from .paths import SIGNATURE_FILE_SUFFIX, escape_path, signature_path, extract_address
from .local_files import LocalFileReference, FILE_PREFIX
from .session import StorageSession

__all__ = [
    # Models
    'Content',
    'FileContent',
    'PlainContent',
    'DecryptedContent',
    'SignatureEnvelope',
    'OCTET_STREAM',
    'TEXT_PLAIN',
    'APPLICATION_JSON',

    # Paths
    'SIGNATURE_FILE_SUFFIX',
    'escape_path',
    'signature_path',
    'extract_address',

    # Local files
    'LocalFileReference',
    'FILE_PREFIX',

    # Engine
    'StorageSession',
]
