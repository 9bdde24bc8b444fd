"""
Hub connection service.

Turns a hub URL and an identity key into an authenticated Session.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .transport import HubTransport
from ..crypto import CryptoFacade, Secp256k1Crypto
from ..exceptions import (
    GaiaError,
    GaiaConfigurationError,
    GaiaConnectionError,
)
from ..logging import get_logger
from ..session.models import Session

AUTH_TOKEN_VERSION = 'v1'
SALT_SIZE = 16


@dataclass(frozen=True)
class HubInfo:
    """Server-provided handshake parameters from ``/hub_info``."""
    challenge_text: Optional[str] = None
    read_url_prefix: Optional[str] = None
    latest_auth_version: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'HubInfo':
        return cls(
            challenge_text=data.get('challenge_text'),
            read_url_prefix=data.get('read_url_prefix'),
            latest_auth_version=data.get('latest_auth_version'),
        )

    def auth_version_number(self) -> int:
        """Numeric part of ``latest_auth_version`` ("v1" -> 1), 0 if unparsable."""
        try:
            return int(self.latest_auth_version[1:])
        except (TypeError, ValueError):
            return 0


class HubConnector:
    """
    Performs the one-time hub handshake.

    Any failed step aborts the handshake; nothing is retried.

    Example:
        >>> connector = HubConnector(transport)
        >>> session = await connector.connect(hub_url, private_key)
    """

    def __init__(
        self,
        transport: HubTransport,
        crypto: Optional[CryptoFacade] = None
    ):
        """
        Initialize connector.

        Args:
            transport: HTTP transport
            crypto: Crypto facade used for keys and token signing
        """
        self._transport = transport
        self._crypto = crypto or Secp256k1Crypto()
        self._logger = get_logger('gaiapy.api.connector')

    async def get_hub_info(self, hub_url: str) -> HubInfo:
        """
        Fetch ``<hub_url>/hub_info``.

        Raises:
            GaiaConnectionError: On transport, status or decode failure
        """
        try:
            response = await self._transport.request('GET', f"{hub_url}/hub_info")
            data = response.json()
        except GaiaError as e:
            raise GaiaConnectionError(f"Could not fetch hub info from {hub_url}: {e}")

        if not isinstance(data, dict):
            raise GaiaConnectionError(f"Hub info from {hub_url} is not a JSON object")

        return HubInfo.from_dict(data)

    async def connect(
        self,
        hub_url: str,
        private_key: str,
        association_token: Optional[str] = None
    ) -> Session:
        """
        Connect to a hub.

        Args:
            hub_url: Hub base URL
            private_key: Hex identity (app) private key
            association_token: Optional gaia association token

        Returns:
            Session with read prefix, address, auth token and hub URL

        Raises:
            GaiaConnectionError: If hub info cannot be fetched
            GaiaConfigurationError: If hub info is incomplete, the hub only
                supports a legacy auth version, or the key is unusable
        """
        # Step 1: Get hub info
        hub_info = await self.get_hub_info(hub_url)

        # Step 2: Validate it
        if not (hub_info.challenge_text
                and hub_info.latest_auth_version
                and hub_info.read_url_prefix):
            raise GaiaConfigurationError("Hub info is missing handshake fields")

        if hub_info.auth_version_number() < 1:
            raise GaiaConfigurationError(
                f"Unsupported hub auth version: {hub_info.latest_auth_version}"
            )

        # Step 3: Derive identity and salt
        try:
            public_key = self._crypto.get_public_key(private_key)
            address = self._crypto.get_address(public_key)
        except ValueError as e:
            raise GaiaConfigurationError(f"Invalid identity private key: {e}")
        salt = self._crypto.random_hex(SALT_SIZE)

        # Step 4: Sign the challenge
        payload: Dict[str, Any] = {
            'gaiaChallenge': hub_info.challenge_text,
            'hubUrl': hub_url,
            'iss': public_key,
            'salt': salt,
        }
        if association_token:
            payload['gaiaAssociationToken'] = association_token

        try:
            signed_token = self._crypto.sign_token(payload, private_key)
        except ValueError as e:
            raise GaiaConfigurationError(f"Could not sign hub challenge: {e}")

        self._logger.info(f"Connected to hub {hub_url} as {address}")

        return Session(
            read_url_prefix=hub_info.read_url_prefix,
            storage_address=address,
            auth_token=f"{AUTH_TOKEN_VERSION}:{signed_token}",
            hub_base_url=hub_url,
        )
