"""
Session storage protocols.

Defines the interface used to persist the active hub session.
"""
from typing import Protocol, Optional, runtime_checkable
from .models import Session


@runtime_checkable
class SessionStorage(Protocol):
    """
    Protocol for session storage implementations.

    Implementations can use SQLite, JSON files, a keychain, or any other
    backend. One record is stored per storage.
    """

    def load(self) -> Optional[Session]:
        """
        Load the persisted session.

        Returns:
            Session if one is stored, None otherwise
        """
        ...

    def save(self, session: Session) -> None:
        """
        Persist a session, replacing any stored one.

        Args:
            session: Session to save
        """
        ...

    def delete(self) -> None:
        """Erase the persisted session."""
        ...

    def exists(self) -> bool:
        """
        Check if a session is stored.

        Returns:
            True if a session exists
        """
        ...

    def close(self) -> None:
        """Close storage connection and release resources."""
        ...
