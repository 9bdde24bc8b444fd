"""
In-memory session storage implementation.

Provides non-persistent session storage for testing and temporary use.
"""
from typing import Optional

from .protocols import SessionStorage
from .models import Session


class MemorySession(SessionStorage):
    """
    In-memory session storage.

    Data is lost when the object is destroyed.

    Example:
        >>> storage = MemorySession()
        >>> storage.save(session)
        >>> storage.load() == session
        True
    """

    def __init__(self):
        """Initialize memory session storage."""
        self._session: Optional[Session] = None

    def load(self) -> Optional[Session]:
        return self._session

    def save(self, session: Session) -> None:
        self._session = session

    def delete(self) -> None:
        self._session = None

    def exists(self) -> bool:
        return self._session is not None

    def close(self) -> None:
        """Close storage (no-op for memory storage)."""
        pass

    def __enter__(self) -> 'MemorySession':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
