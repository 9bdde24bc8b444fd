"""
GaiaClient - High-level async client for Gaia hubs.

Example:
    >>> async with GaiaClient("my_app", private_key=app_private_key) as gaia:
    ...     url = await gaia.put_file("notes/a.txt", "hello")
    ...     content = await gaia.get_file("notes/a.txt")
    ...     print(content.data)
"""
from contextlib import aclosing
from pathlib import Path
from typing import Any, AsyncIterator, Callable, Dict, Optional, Union

from .core.api import HubConfig, HubConnector, HubTransport, ProxyConfig, SSLConfig, TimeoutConfig
from .core.batch import BatchTreeProcessor
from .core.crypto import CryptoFacade, Secp256k1Crypto
from .core.exceptions import GaiaItemNotFoundError
from .core.identity import IdentityProvider, AppURLResolver, MultiplayerTarget, UserIdentity
from .core.logging import get_logger
from .core.session import Session, SessionCache, SessionStorage, SQLiteSession, MemorySession
from .core.storage import Content, FileContent, StorageSession
from .core.storage.local_files import read_local_content


class GaiaClient:
    """
    High-level async client for a user's Gaia hub storage.

    The hub session is created on first use (or restored from the session
    storage) and reused until ``sign_out``.

    Session mode, persisted to ``my_app.session``:
        >>> client = GaiaClient("my_app", private_key=key)
        >>> await client.connect()

    Custom identity and configuration:
        >>> config = GaiaClient.create_config(proxy="http://proxy:8080")
        >>> client = GaiaClient(identity=profile, config=config)
    """

    def __init__(
        self,
        session: Optional[Union[str, SessionStorage]] = None,
        identity: Optional[IdentityProvider] = None,
        *,
        private_key: Optional[str] = None,
        hub_url: Optional[str] = None,
        association_token: Optional[str] = None,
        config: Optional[HubConfig] = None,
        base_path: Optional[Path] = None,
        crypto: Optional[CryptoFacade] = None,
        resolver: Optional[AppURLResolver] = None
    ):
        """
        Initialize Gaia client.

        Args:
            session: Session name (creates .session file), a SessionStorage,
                or None to keep the session in memory
            identity: Identity provider; built from ``private_key``,
                ``hub_url`` and ``association_token`` if omitted
            private_key: Hex app private key
            hub_url: Hub URL (the configured default hub if omitted)
            association_token: Gaia association token
            config: Optional hub configuration
            base_path: Base path for session files
            crypto: Crypto facade (secp256k1 default)
            resolver: Resolves other users' storage for multiplayer reads
        """
        self._config = config or HubConfig.default()
        self._logger = get_logger('gaiapy.client')

        if identity is None:
            identity = UserIdentity(
                private_key=private_key,
                hub_url=hub_url,
                gaia_association_token=association_token
            )
        self._identity = identity

        if session is None:
            self._session_storage: SessionStorage = MemorySession()
        elif isinstance(session, str):
            self._session_storage = SQLiteSession(session, base_path)
        else:
            self._session_storage = session

        self._crypto = crypto or Secp256k1Crypto()
        self._resolver = resolver
        self._transport = HubTransport(self._config)
        self._cache = SessionCache(
            identity=self._identity,
            connector=HubConnector(self._transport, self._crypto),
            storage=self._session_storage,
            default_hub_url=self._config.default_hub_url
        )

    # =========================================================================
    # Configuration helpers
    # =========================================================================

    @staticmethod
    def create_config(
        proxy: Optional[str] = None,
        proxy_user: Optional[str] = None,
        proxy_pass: Optional[str] = None,
        timeout: float = 300,
        verify_ssl: bool = True,
        user_agent: Optional[str] = None,
        default_hub_url: Optional[str] = None
    ) -> HubConfig:
        """
        Create hub configuration with common options.

        Args:
            proxy: Proxy URL (e.g., "http://proxy:8080")
            proxy_user: Proxy username
            proxy_pass: Proxy password
            timeout: Request timeout in seconds
            verify_ssl: Whether to verify SSL certificates
            user_agent: Custom user agent string
            default_hub_url: Hub used when the identity names none

        Returns:
            HubConfig instance
        """
        proxy_config = None
        if proxy:
            proxy_config = ProxyConfig(
                url=proxy,
                username=proxy_user,
                password=proxy_pass
            )

        config = HubConfig(
            proxy=proxy_config,
            timeout=TimeoutConfig(total=timeout),
            ssl=SSLConfig(verify=verify_ssl),
        )
        if user_agent:
            config.user_agent = user_agent
        if default_hub_url:
            config.default_hub_url = default_hub_url
        return config

    @property
    def config(self) -> HubConfig:
        return self._config

    @property
    def identity(self) -> IdentityProvider:
        return self._identity

    @property
    def session(self) -> Optional[Session]:
        """The active hub session, if connected."""
        return self._cache.current

    @property
    def is_connected(self) -> bool:
        return self._cache.current is not None

    @property
    def session_file(self) -> Optional[Path]:
        """Get session file path if using SQLite session."""
        if isinstance(self._session_storage, SQLiteSession):
            return self._session_storage.path
        return None

    # =========================================================================
    # Session management
    # =========================================================================

    async def connect(self) -> Session:
        """
        Restore or create the hub session.

        Returns:
            The active Session

        Raises:
            GaiaNotAuthenticatedError: If the identity has no private key
            GaiaConnectionError: If the hub handshake fails
        """
        session = await self._cache.get_or_create()
        self._logger.info(f"Connected to {session.hub_base_url} as {session.storage_address}")
        return session

    async def sign_out(self) -> None:
        """Forget the hub session, including its persisted copy."""
        self._cache.invalidate()
        self._logger.info("Signed out")

    async def _storage(self) -> StorageSession:
        session = await self._cache.get_or_create()
        return StorageSession(
            session,
            self._transport,
            self._identity,
            crypto=self._crypto,
            resolver=self._resolver
        )

    # =========================================================================
    # Files
    # =========================================================================

    async def get_file(
        self,
        path: str,
        decrypt: bool = True,
        verify: bool = False,
        multiplayer: Optional[MultiplayerTarget] = None,
        base_dir: str = ''
    ) -> FileContent:
        """
        Read a file.

        Args:
            path: Storage path, or ``file://`` local reference
            decrypt: Decrypt with the identity's private key
            verify: Check the file's signature
            multiplayer: Read another user's file instead
            base_dir: Directory local references are relative to

        Returns:
            DecryptedContent or PlainContent
        """
        local = await read_local_content(path, decrypt, base_dir)
        if local is not None:
            return local

        storage = await self._storage()
        return await storage.read_object(
            path,
            decrypt=decrypt,
            verify=verify,
            multiplayer=multiplayer,
            base_dir=base_dir,
            use_local=False
        )

    async def put_file(
        self,
        path: str,
        content: Content = b'',
        encrypt: bool = True,
        encryption_key: Optional[str] = None,
        sign: bool = False,
        signing_key: Optional[str] = None,
        base_dir: str = ''
    ) -> str:
        """
        Write a file.

        Args:
            path: Storage path, or ``file://`` local reference to upload
            content: Text or bytes (ignored for local references)
            encrypt: Encrypt before upload
            encryption_key: Recipient public key (own key if omitted)
            sign: Sign the uploaded content
            signing_key: Signing private key (own key if omitted)
            base_dir: Directory local references are relative to

        Returns:
            Public URL of the file
        """
        storage = await self._storage()
        return await storage.write_object(
            path,
            content,
            encrypt=encrypt,
            encryption_key=encryption_key,
            sign=sign,
            signing_key=signing_key,
            base_dir=base_dir
        )

    async def delete_file(
        self,
        path: str,
        was_signed: bool = False,
        ignore_missing: bool = False
    ) -> bool:
        """
        Delete a file, and its signature file when ``was_signed``.

        Args:
            path: Storage path
            was_signed: The file was written with a signature file
            ignore_missing: Treat a missing file as already deleted

        Returns:
            True if deleted, False if missing and ``ignore_missing`` is set
        """
        storage = await self._storage()
        try:
            await storage.delete_object(path, was_signed=was_signed)
        except GaiaItemNotFoundError:
            if not ignore_missing:
                raise
            self._logger.debug(f"Nothing to delete at {path}")
            return False
        return True

    async def list_files(self, callback: Callable[[str], Any]) -> int:
        """
        Call ``callback`` for each stored path until it returns a falsy value.

        Returns:
            Number of paths delivered
        """
        storage = await self._storage()
        return await storage.list_files(callback)

    async def iter_files(self) -> AsyncIterator[str]:
        """
        Iterate over stored paths, fetching pages lazily.

        Example:
            >>> async for name in gaia.iter_files():
            ...     print(name)
        """
        storage = await self._storage()
        async with aclosing(storage.iter_files()) as entries:
            async for name in entries:
                yield name

    async def perform_files(
        self,
        tree: Union[str, bytes, Dict[str, Any]],
        base_dir: str = ''
    ) -> str:
        """
        Submit a batch operation tree; ``putFile`` contents are encrypted first.

        Returns:
            Response text from the hub
        """
        storage = await self._storage()
        return await BatchTreeProcessor(storage).perform_batch(tree, base_dir=base_dir)

    async def get_app_bucket_url(self, target: MultiplayerTarget) -> str:
        """Resolve another user's storage root URL."""
        storage = StorageSession(
            self._cache.current or Session(),
            self._transport,
            self._identity,
            crypto=self._crypto,
            resolver=self._resolver
        )
        return await storage.get_app_bucket_url(target)

    # =========================================================================
    # Context manager
    # =========================================================================

    async def __aenter__(self) -> 'GaiaClient':
        """Enter async context - opens the transport and connects."""
        await self._transport.__aenter__()
        try:
            await self.connect()
        except BaseException:
            await self.close()
            raise
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context - cleanup."""
        await self.close()

    async def close(self):
        """Close the client and release resources."""
        await self._transport.close()
        self._session_storage.close()

    def __repr__(self) -> str:
        return f"GaiaClient(identity={self._identity!r}, connected={self.is_connected})"
