"""
Session data models.

Contains the hub session produced by a successful handshake.
"""
from dataclasses import dataclass
from typing import Optional
import json


@dataclass(frozen=True)
class Session:
    """
    Authenticated connection to a Gaia hub.

    Immutable: a new handshake produces a new Session that replaces the
    cached one.

    Attributes:
        read_url_prefix: Public read prefix served by the hub
        storage_address: Address derived from the identity's public key
        auth_token: ``v1:``-prefixed signed token for write requests
        hub_base_url: Hub URL the handshake ran against
    """
    read_url_prefix: Optional[str] = None
    storage_address: Optional[str] = None
    auth_token: Optional[str] = None
    hub_base_url: Optional[str] = None

    def to_dict(self) -> dict:
        """
        Convert to the persisted dictionary form.

        Returns:
            Dictionary representation
        """
        return {
            'url_prefix': self.read_url_prefix,
            'address': self.storage_address,
            'token': self.auth_token,
            'server': self.hub_base_url,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Session':
        """
        Create from the persisted dictionary form.

        Args:
            data: Dictionary with session data

        Returns:
            Session instance
        """
        return cls(
            read_url_prefix=data.get('url_prefix'),
            storage_address=data.get('address'),
            auth_token=data.get('token'),
            hub_base_url=data.get('server'),
        )

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, json_str: str) -> 'Session':
        """Create from JSON string."""
        return cls.from_dict(json.loads(json_str))

    def is_valid(self) -> bool:
        """
        Check if every field needed for network operations is present.

        Returns:
            True if all fields are non-empty
        """
        return bool(
            self.read_url_prefix and
            self.storage_address and
            self.auth_token and
            self.hub_base_url
        )

    def __repr__(self) -> str:
        return (
            f"Session(hub_base_url={self.hub_base_url!r}, "
            f"storage_address={self.storage_address!r})"
        )
