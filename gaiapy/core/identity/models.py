"""Identity data models."""
from dataclasses import dataclass
from typing import Optional


@dataclass
class UserIdentity:
    """
    In-memory identity.

    Attributes:
        private_key: Hex app private key (None when signed out)
        hub_url: Hub the user's app data lives on (None for the default hub)
        gaia_association_token: Association token issued at sign-in
        username: Registered name, informational only
    """
    private_key: Optional[str] = None
    hub_url: Optional[str] = None
    gaia_association_token: Optional[str] = None
    username: Optional[str] = None

    def __repr__(self) -> str:
        return (
            f"UserIdentity(username={self.username!r}, hub_url={self.hub_url!r}, "
            f"signed_in={self.private_key is not None})"
        )


@dataclass(frozen=True)
class MultiplayerTarget:
    """
    Another user's app storage root, for read-only access.

    Attributes:
        username: The other user's registered name
        app_origin: Origin of the app whose bucket is read
        zone_file_lookup_url: Naming service used to resolve the user
    """
    username: str
    app_origin: str
    zone_file_lookup_url: str
