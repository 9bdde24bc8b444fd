"""
Session management module.

Holds the authenticated hub session and persists it between runs.
"""
from .protocols import SessionStorage
from .models import Session
from .sqlite_session import SQLiteSession, GAIA_HUB_CONFIG_KEY
from .memory_session import MemorySession
from .cache import SessionCache

__all__ = [
    'SessionStorage',
    'Session',
    'SQLiteSession',
    'MemorySession',
    'SessionCache',
    'GAIA_HUB_CONFIG_KEY',
]
