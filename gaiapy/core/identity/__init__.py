"""Identity collaborators: the active user and cross-user address resolution."""
from .models import UserIdentity, MultiplayerTarget
from .protocols import IdentityProvider, AppURLResolver

__all__ = [
    'UserIdentity',
    'MultiplayerTarget',
    'IdentityProvider',
    'AppURLResolver',
]
