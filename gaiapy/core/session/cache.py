"""
Active session cache.

Holds the session for one identity. Owned by the client that created it,
so several identities can each have their own cache.
"""
import asyncio
from typing import Optional, TYPE_CHECKING

from .models import Session
from .protocols import SessionStorage
from .memory_session import MemorySession
from ..api.config import DEFAULT_HUB_URL
from ..exceptions import GaiaNotAuthenticatedError
from ..logging import get_logger

if TYPE_CHECKING:
    from ..api.hub_connector import HubConnector
    from ..identity import IdentityProvider

logger = get_logger('gaiapy.session')


class SessionCache:
    """
    Single-slot session cache with persistence.

    Lookup order for ``get_or_create``: in-memory slot, persisted record,
    then a fresh handshake. Concurrent callers share one handshake.
    Replacement is last-writer-wins; requests already using the old
    session keep it.
    """

    def __init__(
        self,
        identity: 'IdentityProvider',
        connector: 'HubConnector',
        storage: Optional[SessionStorage] = None,
        default_hub_url: str = DEFAULT_HUB_URL
    ):
        """
        Initialize session cache.

        Args:
            identity: Source of the private key and hub URL
            connector: Performs the hub handshake
            storage: Persistence for the session (memory if omitted)
            default_hub_url: Hub used when the identity names none
        """
        self._identity = identity
        self._connector = connector
        self._storage = storage or MemorySession()
        self._default_hub_url = default_hub_url
        self._session: Optional[Session] = None
        self._lock = asyncio.Lock()

    @property
    def current(self) -> Optional[Session]:
        """The cached session, without connecting."""
        return self._session

    @property
    def storage(self) -> SessionStorage:
        return self._storage

    async def get_or_create(self) -> Session:
        """
        Return the active session, connecting if needed.

        Raises:
            GaiaNotAuthenticatedError: If the identity has no private key
            GaiaConnectionError: If the handshake fails
            GaiaConfigurationError: If the hub is unsupported
        """
        if self._session is not None:
            return self._session

        async with self._lock:
            if self._session is not None:
                return self._session

            restored = self._storage.load() if self._storage.exists() else None
            if restored is not None and restored.is_valid():
                logger.debug(f"Restored persisted session for {restored.hub_base_url}")
                self._session = restored
                return restored
            if restored is not None:
                logger.warning("Discarding incomplete persisted session")
                self._storage.delete()

            session = await self._connect()
            self.replace(session)
            return session

    async def _connect(self) -> Session:
        private_key = self._identity.private_key
        if not private_key:
            raise GaiaNotAuthenticatedError("No identity private key: sign in first")

        hub_url = self._identity.hub_url or self._default_hub_url
        return await self._connector.connect(
            hub_url,
            private_key,
            self._identity.gaia_association_token
        )

    def replace(self, session: Session) -> None:
        """Cache and persist a session, replacing any previous one."""
        self._session = session
        self._storage.save(session)

    def invalidate(self) -> None:
        """Clear the cached session and its persisted copy."""
        self._session = None
        self._storage.delete()
        logger.debug("Session invalidated")
