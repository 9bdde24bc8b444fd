"""
gaiapy - Async Python client for Gaia hub storage.

Usage:
    >>> from gaiapy import GaiaClient
    >>>
    >>> async with GaiaClient("my_app", private_key=key) as gaia:
    ...     await gaia.put_file("notes/a.txt", "hello")
    ...     content = await gaia.get_file("notes/a.txt")
"""
import logging
from .client import GaiaClient

# Configuration
from .core.api import (
    HubConfig,
    ProxyConfig,
    SSLConfig,
    TimeoutConfig,
    DEFAULT_HUB_URL,
)

# Session management
from .core.session import (
    SessionStorage,
    Session,
    SQLiteSession,
    MemorySession,
)

# Identity
from .core.identity import UserIdentity, MultiplayerTarget, IdentityProvider, AppURLResolver

# Results
from .core.storage import FileContent, PlainContent, DecryptedContent

# Errors
from .core.exceptions import (
    GaiaError,
    GaiaConfigurationError,
    GaiaNotAuthenticatedError,
    GaiaConnectionError,
    GaiaRequestError,
    GaiaAccessVerificationError,
    GaiaItemNotFoundError,
    GaiaPayloadTooLargeError,
    GaiaServerError,
    GaiaInvalidResponseError,
    GaiaSignatureVerificationError,
)
from .core.logging import PACKAGE_LOGGERS

__version__ = '0.1.0'


def setup_logging(level=logging.INFO):
    """
    Configure logging for gaiapy modules.

    Args:
        level: Logging level (default: logging.INFO)
    """
    for logger_name in PACKAGE_LOGGERS:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.propagate = True


__all__ = [
    'GaiaClient',
    'HubConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'DEFAULT_HUB_URL',
    'SessionStorage',
    'Session',
    'SQLiteSession',
    'MemorySession',
    'UserIdentity',
    'MultiplayerTarget',
    'IdentityProvider',
    'AppURLResolver',
    'FileContent',
    'PlainContent',
    'DecryptedContent',
    'GaiaError',
    'GaiaConfigurationError',
    'GaiaNotAuthenticatedError',
    'GaiaConnectionError',
    'GaiaRequestError',
    'GaiaAccessVerificationError',
    'GaiaItemNotFoundError',
    'GaiaPayloadTooLargeError',
    'GaiaServerError',
    'GaiaInvalidResponseError',
    'GaiaSignatureVerificationError',
    'setup_logging',
]
