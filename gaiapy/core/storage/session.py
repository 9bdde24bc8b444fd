"""
Storage session.

The protocol engine for one hub session: read (fetch, verify, decrypt),
write (encrypt, sign, upload), delete, paginated listing and cross-user
address resolution.
"""
import asyncio
import json
from contextlib import aclosing
from typing import Any, AsyncIterator, Callable, Dict, List, Optional, Tuple

from ..api import HubTransport, HubResponse, HTTPStatusErrors, TimeoutConfig
from ..crypto import CryptoFacade, ECDSASignature, Secp256k1Crypto
from ..exceptions import (
    GaiaError,
    GaiaConfigurationError,
    GaiaNotAuthenticatedError,
    GaiaRequestError,
    GaiaItemNotFoundError,
    GaiaInvalidResponseError,
    GaiaSignatureVerificationError,
)
from ..identity import IdentityProvider, AppURLResolver, MultiplayerTarget
from ..logging import get_logger
from ..session.models import Session
from .local_files import LocalFileReference, read_local_content
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
from .paths import escape_path, signature_path, extract_address

logger = get_logger('gaiapy.storage')


class StorageSession:
    """
    Per-object operations against one hub session.

    Each public coroutine completes exactly once, returning a result or
    raising one ``GaiaError``. Nothing is retried.

    Example:
        >>> storage = StorageSession(session, transport, identity)
        >>> url = await storage.write_object("notes/a.txt", "hello", encrypt=False)
        >>> content = await storage.read_object("notes/a.txt", decrypt=False)
        >>> content.data
        'hello'
    """

    MAX_LIST_PAGES = 65536

    def __init__(
        self,
        session: Session,
        transport: HubTransport,
        identity: IdentityProvider,
        crypto: Optional[CryptoFacade] = None,
        resolver: Optional[AppURLResolver] = None
    ):
        """
        Initialize storage session.

        Args:
            session: Authenticated hub session
            transport: HTTP transport
            identity: Source of the caller's private key
            crypto: Crypto facade (secp256k1 default)
            resolver: Resolves other users' storage roots for multiplayer reads
        """
        self._session = session
        self._transport = transport
        self._identity = identity
        self._crypto = crypto or Secp256k1Crypto()
        self._resolver = resolver

    @property
    def session(self) -> Session:
        return self._session

    @property
    def crypto(self) -> CryptoFacade:
        return self._crypto

    # ------------------------------------------------------------------
    # Keys and URLs
    # ------------------------------------------------------------------

    def _private_key(self) -> str:
        private_key = self._identity.private_key
        if not private_key:
            raise GaiaNotAuthenticatedError("No identity private key: sign in first")
        return private_key

    def own_public_key(self) -> str:
        """Compressed public key of the signed-in identity."""
        try:
            return self._crypto.get_public_key(self._private_key())
        except ValueError as e:
            raise GaiaConfigurationError(f"Invalid identity private key: {e}")

    def _require(self, **fields: Optional[str]) -> None:
        missing = [name for name, value in fields.items() if not value]
        if missing:
            raise GaiaConfigurationError(
                f"Session is missing {', '.join(missing)}"
            )

    def _hub_url(self, endpoint: str, path: Optional[str] = None) -> str:
        session = self._session
        self._require(
            hub_base_url=session.hub_base_url,
            storage_address=session.storage_address,
            auth_token=session.auth_token
        )
        url = f"{session.hub_base_url}/{endpoint}/{session.storage_address}"
        if path is not None:
            url += f"/{escape_path(path)}"
        return url

    async def get_app_bucket_url(self, target: MultiplayerTarget) -> str:
        """
        Resolve another user's storage root through the resolver.

        Raises:
            GaiaConfigurationError: If no resolver was configured
            GaiaRequestError: If resolution fails
        """
        if self._resolver is None:
            raise GaiaConfigurationError("Multiplayer reads need an AppURLResolver")

        try:
            bucket_url = await self._resolver.get_app_bucket_url(target)
        except GaiaError:
            raise
        except Exception as e:
            raise GaiaRequestError(
                f"Could not resolve storage for {target.username}: {e}"
            ) from e

        if not bucket_url:
            raise GaiaRequestError(f"No storage found for {target.username}")
        return bucket_url

    async def get_read_url(
        self,
        path: str,
        multiplayer: Optional[MultiplayerTarget] = None
    ) -> str:
        """Public read URL of ``path`` in the caller's or another user's storage."""
        escaped = escape_path(path)

        if multiplayer is not None:
            bucket_url = await self.get_app_bucket_url(multiplayer)
            return f"{bucket_url.rstrip('/')}/{escaped}"

        self._require(
            read_url_prefix=self._session.read_url_prefix,
            storage_address=self._session.storage_address
        )
        return f"{self._session.read_url_prefix}{self._session.storage_address}/{escaped}"

    async def get_signer_address(
        self,
        multiplayer: Optional[MultiplayerTarget] = None
    ) -> str:
        """Address whose key must have signed objects read from the given storage."""
        if multiplayer is None:
            self._require(storage_address=self._session.storage_address)
            return self._session.storage_address

        bucket_url = await self.get_app_bucket_url(multiplayer)
        address = extract_address(bucket_url)
        if address is None:
            raise GaiaRequestError(f"No address in storage URL {bucket_url}")
        return address

    # ------------------------------------------------------------------
    # Read pipeline
    # ------------------------------------------------------------------

    async def read_object(
        self,
        path: str,
        decrypt: bool = True,
        verify: bool = False,
        multiplayer: Optional[MultiplayerTarget] = None,
        base_dir: str = '',
        use_local: bool = True
    ) -> FileContent:
        """
        Read an object.

        Args:
            path: Storage path, or a ``file://`` local reference
            decrypt: Decrypt the object with the caller's private key
            verify: Check the object's signature
            multiplayer: Read from another user's storage instead
            base_dir: Directory local references are relative to
            use_local: Serve an existing local copy instead of fetching

        Returns:
            DecryptedContent when decryption was requested, else PlainContent

        Raises:
            GaiaNotAuthenticatedError: Decrypt requested without a private key
            GaiaConfigurationError: Decrypt requested with an unusable private key
            GaiaSignatureVerificationError: Signer or signature mismatch
            GaiaError: Mapped transport and HTTP failures
        """
        if use_local:
            cached = await read_local_content(path, decrypt, base_dir)
            if cached is not None:
                return cached

        local = LocalFileReference.parse(path, base_dir)
        if local is not None:
            path = local.storage_path

        if not decrypt:
            if verify:
                return await self._read_verified(path, multiplayer)
            response = await self._fetch(path, multiplayer)
            return self._plain_content(response)

        # unusable keys fail here, before any request
        self.own_public_key()
        private_key = self._private_key()
        response = await self._fetch(path, multiplayer)

        if verify:
            cipher_text = await self._verified_cipher_text(response, multiplayer)
        else:
            cipher_text = response.text()

        try:
            plaintext = self._crypto.decrypt(cipher_text, private_key)
        except (ValueError, TypeError, KeyError) as e:
            raise GaiaInvalidResponseError(f"Could not decrypt {path}: {e}", response.status)

        if local is not None:
            await local.write(plaintext.encode('utf-8') if isinstance(plaintext, str) else plaintext)

        return DecryptedContent(plaintext)

    async def _fetch(
        self,
        path: str,
        multiplayer: Optional[MultiplayerTarget] = None
    ) -> HubResponse:
        url = await self.get_read_url(path, multiplayer)
        return await self._transport.request(
            'GET', url, handled_statuses=HTTPStatusErrors.READ
        )

    @staticmethod
    def _plain_content(response: HubResponse) -> PlainContent:
        if response.content_type == OCTET_STREAM:
            return PlainContent(response.body, response.content_type)
        return PlainContent(response.text(), response.content_type)

    async def _read_verified(
        self,
        path: str,
        multiplayer: Optional[MultiplayerTarget]
    ) -> PlainContent:
        """Verify-only read: content, signature file and signer address in parallel."""
        results = await asyncio.gather(
            self._fetch(path, multiplayer),
            self._fetch(signature_path(path), multiplayer),
            self.get_signer_address(multiplayer),
            return_exceptions=True
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        content, signature_file, signer_address = results

        try:
            envelope = SignatureEnvelope.from_json(signature_file.body)
        except ValueError as e:
            raise GaiaSignatureVerificationError(f"Invalid signature file for {path}: {e}")

        self._check_signature(envelope, content.body, signer_address, path)
        return self._plain_content(content)

    async def _verified_cipher_text(
        self,
        response: HubResponse,
        multiplayer: Optional[MultiplayerTarget]
    ) -> str:
        """Decode a signed cipher envelope and verify it; returns the cipher text."""
        try:
            envelope = SignatureEnvelope.from_json(response.body)
        except ValueError as e:
            raise GaiaInvalidResponseError(f"Expected a signed cipher object: {e}", response.status)
        if envelope.cipher_text is None:
            raise GaiaInvalidResponseError("Signed object has no cipherText", response.status)

        signer_address = await self.get_signer_address(multiplayer)
        self._check_signature(
            envelope, envelope.cipher_text.encode('utf-8'), signer_address, 'signed cipher object'
        )
        return envelope.cipher_text

    def _check_signature(
        self,
        envelope: SignatureEnvelope,
        content: bytes,
        expected_address: str,
        label: str
    ) -> None:
        try:
            signer_address = self._crypto.get_address(envelope.public_key)
        except ValueError as e:
            raise GaiaSignatureVerificationError(f"Invalid signer public key for {label}: {e}")

        if signer_address != expected_address:
            raise GaiaSignatureVerificationError(
                f"Signer {signer_address} of {label} does not match {expected_address}"
            )
        if not self._crypto.verify(content, envelope.public_key, envelope.signature):
            raise GaiaSignatureVerificationError(f"Invalid signature for {label}")

    # ------------------------------------------------------------------
    # Write pipeline
    # ------------------------------------------------------------------

    async def write_object(
        self,
        path: str,
        content: Content,
        encrypt: bool = True,
        encryption_key: Optional[str] = None,
        sign: bool = False,
        signing_key: Optional[str] = None,
        base_dir: str = ''
    ) -> str:
        """
        Write an object.

        Args:
            path: Storage path, or a ``file://`` local reference whose file
                is uploaded instead of ``content``
            content: Text or bytes
            encrypt: Encrypt before upload
            encryption_key: Recipient public key (own public key if omitted)
            sign: Sign the uploaded bytes
            signing_key: Signing private key (own private key if omitted)
            base_dir: Directory local references are relative to

        Returns:
            Public URL of the uploaded object

        Raises:
            GaiaConfigurationError: Missing local file or unusable keys;
                raised before any upload
            GaiaError: Mapped transport and HTTP failures
        """
        local = LocalFileReference.parse(path, base_dir)
        if local is not None:
            data = await local.read()
            if data is None:
                raise GaiaConfigurationError(f"Local file not found: {local.local_path}")
            path, content = local.storage_path, data

        if isinstance(content, str):
            original_type, payload = TEXT_PLAIN, content.encode('utf-8')
        else:
            original_type, payload = OCTET_STREAM, bytes(content)

        if encrypt:
            payload = self._encrypt(content, encryption_key)

        if sign:
            signature = self._sign(payload, signing_key)

            if encrypt:
                envelope = SignatureEnvelope(
                    signature=signature.signature,
                    public_key=signature.public_key,
                    cipher_text=payload.decode('utf-8')
                )
                return await self._upload(path, envelope.to_json().encode(), APPLICATION_JSON)

            # Signed plaintext: object first, then its signature file
            envelope = SignatureEnvelope(
                signature=signature.signature,
                public_key=signature.public_key
            )
            public_url = await self._upload(path, payload, original_type)
            await self._upload(signature_path(path), envelope.to_json().encode(), APPLICATION_JSON)
            return public_url

        if encrypt:
            return await self._upload(path, payload, APPLICATION_JSON)
        return await self._upload(path, payload, original_type)

    def _encrypt(self, content: Content, encryption_key: Optional[str]) -> bytes:
        recipient = encryption_key or self.own_public_key()
        try:
            cipher_object = self._crypto.encrypt(content, recipient)
        except ValueError as e:
            raise GaiaConfigurationError(f"Could not encrypt to {recipient}: {e}")
        return json.dumps(cipher_object).encode('utf-8')

    def _sign(self, payload: bytes, signing_key: Optional[str]) -> ECDSASignature:
        private_key = signing_key or self._private_key()
        try:
            return self._crypto.sign(private_key, payload)
        except ValueError as e:
            raise GaiaConfigurationError(f"Could not sign content: {e}")

    async def _upload(self, path: str, data: bytes, content_type: str) -> str:
        url = self._hub_url('store', path)
        response = await self._transport.request(
            'POST',
            url,
            data=data,
            content_type=content_type,
            token=self._session.auth_token,
            handled_statuses=HTTPStatusErrors.WRITE
        )

        result = response.json()
        public_url = result.get('publicURL') if isinstance(result, dict) else None
        if not isinstance(public_url, str) or not public_url:
            raise GaiaInvalidResponseError("Upload response has no publicURL", response.status)

        logger.debug(f"Stored {path} at {public_url}")
        return public_url

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    async def delete_object(self, path: str, was_signed: bool = False) -> None:
        """
        Delete an object, and its signature file when ``was_signed``.

        Both deletions run concurrently and must succeed; a missing object
        raises ``GaiaItemNotFoundError``, unless the other deletion failed
        for another reason, which is raised instead.
        """
        paths = [path, signature_path(path)] if was_signed else [path]
        results = await asyncio.gather(
            *(self._delete_item(item) for item in paths),
            return_exceptions=True
        )
        errors = [result for result in results if isinstance(result, BaseException)]
        if not errors:
            return
        for error in errors:
            if not isinstance(error, GaiaItemNotFoundError):
                raise error
        raise errors[0]

    async def _delete_item(self, path: str) -> None:
        url = self._hub_url('delete', path)
        await self._transport.request(
            'DELETE',
            url,
            token=self._session.auth_token,
            handled_statuses=HTTPStatusErrors.DELETE
        )
        logger.debug(f"Deleted {path}")

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    async def iter_files(self) -> AsyncIterator[str]:
        """
        Yield every stored path, fetching pages on demand.

        Stopping iteration early fetches no further pages.

        Raises:
            GaiaInvalidResponseError: Malformed page, or more than
                ``MAX_LIST_PAGES`` pages (``file_count`` is -1)
        """
        page: Optional[str] = None
        for _ in range(self.MAX_LIST_PAGES):
            entries, page = await self._fetch_page(page)
            for entry in entries:
                yield entry
            if page is None:
                return

        raise GaiaInvalidResponseError(
            f"Listing exceeded {self.MAX_LIST_PAGES} pages",
            file_count=-1
        )

    async def list_files(self, callback: Callable[[str], Any]) -> int:
        """
        Call ``callback`` for each stored path until it returns a falsy value.

        Returns:
            Number of entries delivered to the callback
        """
        count = 0
        async with aclosing(self.iter_files()) as entries:
            async for name in entries:
                count += 1
                if not callback(name):
                    break
        return count

    async def _fetch_page(self, page: Optional[str]) -> Tuple[List[str], Optional[str]]:
        url = self._hub_url('list-files')
        response = await self._transport.request(
            'POST',
            url,
            data=json.dumps({'page': page}).encode('utf-8'),
            content_type=APPLICATION_JSON,
            token=self._session.auth_token,
            handled_statuses=HTTPStatusErrors.LIST
        )

        result = response.json()
        if not isinstance(result, dict) or 'page' not in result:
            raise GaiaInvalidResponseError("List response has no 'page'", response.status, -1)

        entries = result.get('entries')
        next_page = result['page']
        if not isinstance(entries, list) or not all(isinstance(e, str) for e in entries):
            raise GaiaInvalidResponseError("List response has no 'entries'", response.status, -1)
        if next_page is not None and not isinstance(next_page, str):
            raise GaiaInvalidResponseError("List response 'page' is not a string", response.status, -1)

        return entries, next_page

    # ------------------------------------------------------------------
    # Batch submission
    # ------------------------------------------------------------------

    async def post_batch(
        self,
        tree: Dict[str, Any],
        timeout: Optional[TimeoutConfig] = None
    ) -> str:
        """
        Submit an already-transformed operation tree in one request.

        Returns:
            Response text from the hub
        """
        url = self._hub_url('perform-files')
        response = await self._transport.request(
            'POST',
            url,
            data=json.dumps(tree).encode('utf-8'),
            content_type=APPLICATION_JSON,
            token=self._session.auth_token,
            handled_statuses=HTTPStatusErrors.BATCH,
            timeout=timeout or self._transport.config.batch_timeout
        )
        return response.text()
