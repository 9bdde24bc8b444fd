"""Hub API module: configuration, HTTP transport and handshake."""
from .config import HubConfig, ProxyConfig, SSLConfig, TimeoutConfig, DEFAULT_HUB_URL
from .errors import HTTPStatusErrors, error_for_status
from .transport import HubTransport, HubResponse
from .hub_connector import HubConnector, HubInfo, AUTH_TOKEN_VERSION

__all__ = [
    # Configuration
    'HubConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'DEFAULT_HUB_URL',

    # Errors
    'HTTPStatusErrors',
    'error_for_status',

    # Transport
    'HubTransport',
    'HubResponse',

    # Handshake
    'HubConnector',
    'HubInfo',
    'AUTH_TOKEN_VERSION',
]
