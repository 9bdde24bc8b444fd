"""
Identity protocols.

The profile store and the naming service are external; the client only
needs the narrow interfaces below.
"""
from typing import Optional, Protocol, runtime_checkable

from .models import MultiplayerTarget


@runtime_checkable
class IdentityProvider(Protocol):
    """Source of the active identity's key and hub metadata."""

    @property
    def private_key(self) -> Optional[str]:
        """Hex app private key, None when signed out."""
        ...

    @property
    def hub_url(self) -> Optional[str]:
        """Hub URL recorded for the identity, None for the default hub."""
        ...

    @property
    def gaia_association_token(self) -> Optional[str]:
        """Association token issued at sign-in, if any."""
        ...


@runtime_checkable
class AppURLResolver(Protocol):
    """Resolves another user's app storage root (a naming-service lookup)."""

    async def get_app_bucket_url(self, target: MultiplayerTarget) -> str:
        """
        Resolve the storage root URL for a user's app.

        Args:
            target: User, app origin and zone file lookup service

        Returns:
            Read URL prefix of the user's app bucket (``<prefix><address>/``)
        """
        ...
