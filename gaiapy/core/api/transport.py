"""
Async HTTP transport for Gaia hubs.

One shared aiohttp session; every call maps transport failures and HTTP
statuses onto the gaiapy error classes. No request is ever retried.
"""
import json
import asyncio
from dataclasses import dataclass
from typing import Any, Collection, Dict, Optional
import aiohttp

from .config import HubConfig, TimeoutConfig
from .errors import error_for_status
from ..exceptions import GaiaRequestError, GaiaInvalidResponseError
from ..logging import get_logger

DEFAULT_CONTENT_TYPE = 'application/json'


@dataclass(frozen=True)
class HubResponse:
    """A successful (2xx) hub response."""
    status: int
    body: bytes
    content_type: str = DEFAULT_CONTENT_TYPE

    def text(self) -> str:
        """Decode the body as UTF-8."""
        try:
            return self.body.decode('utf-8')
        except UnicodeDecodeError as e:
            raise GaiaInvalidResponseError(
                f"Response body is not UTF-8: {e}", self.status
            )

    def json(self) -> Any:
        """Decode the body as JSON."""
        try:
            return json.loads(self.text())
        except json.JSONDecodeError as e:
            raise GaiaInvalidResponseError(
                f"Response body is not JSON: {e}", self.status
            )


class HubTransport:
    """
    Asynchronous HTTP transport for hub endpoints.

    Example:
        >>> async with HubTransport(HubConfig.default()) as transport:
        ...     response = await transport.request('GET', url)
    """

    def __init__(self, config: Optional[HubConfig] = None):
        """
        Initialize transport.

        Args:
            config: Hub configuration (uses defaults if not provided)
        """
        self._config = config or HubConfig.default()
        self._session: Optional[aiohttp.ClientSession] = None
        self._connector: Optional[aiohttp.TCPConnector] = None
        self._logger = get_logger('gaiapy.api')

    @property
    def config(self) -> HubConfig:
        """Get current configuration."""
        return self._config

    @property
    def closed(self) -> bool:
        return self._session is None or self._session.closed

    async def __aenter__(self) -> 'HubTransport':
        """Async context manager entry."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure session is created and open."""
        if self._session is None or self._session.closed:
            self._connector = aiohttp.TCPConnector(
                **self._config.get_connector_kwargs()
            )
            self._session = aiohttp.ClientSession(
                connector=self._connector,
                **self._config.get_session_kwargs()
            )
        return self._session

    async def close(self):
        """Close transport and release resources."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

        if self._connector and not self._connector.closed:
            await self._connector.close()
        self._connector = None

    async def request(
        self,
        method: str,
        url: str,
        *,
        data: Optional[bytes] = None,
        content_type: Optional[str] = None,
        token: Optional[str] = None,
        handled_statuses: Collection[int] = (),
        timeout: Optional[TimeoutConfig] = None
    ) -> HubResponse:
        """
        Send one request to the hub.

        Args:
            method: HTTP method
            url: Fully built, percent-encoded URL
            data: Request body
            content_type: Request Content-Type header
            token: Auth token, sent as ``Authorization: bearer <token>``
            handled_statuses: Client error statuses this operation maps
                (see ``HTTPStatusErrors``)
            timeout: Per-request timeout override

        Returns:
            HubResponse for 2xx responses

        Raises:
            GaiaRequestError: If no response was received
            GaiaError: Mapped from the response status
        """
        session = await self._ensure_session()

        headers: Dict[str, str] = {}
        if content_type:
            headers['Content-Type'] = content_type
        if token:
            headers['Authorization'] = f"bearer {token}"

        kwargs: Dict[str, Any] = {
            'data': data,
            'headers': headers,
            'proxy': self._config.proxy.to_aiohttp_proxy() if self._config.proxy else None,
        }
        if timeout is not None:
            kwargs['timeout'] = timeout.to_aiohttp_timeout()

        self._logger.debug(f"{method} {url}")

        try:
            async with session.request(method, url, **kwargs) as response:
                body = await response.read()
                status = response.status
                response_type = response.headers.get('Content-Type', DEFAULT_CONTENT_TYPE)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._logger.error(f"Network error on {method} {url}: {e}")
            raise GaiaRequestError(f"Network error: {e}")

        self._logger.debug(f"{method} {url} -> {status} ({len(body)} bytes)")

        error = error_for_status(status, handled_statuses)
        if error is not None:
            raise error

        return HubResponse(
            status=status,
            body=body,
            content_type=response_type.split(';', 1)[0].strip().lower()
        )
