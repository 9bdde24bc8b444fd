"""HTTP status codes and the errors they map to."""
from typing import Collection, Dict, Optional, Type

from ...exceptions import (
    GaiaError,
    GaiaAccessVerificationError,
    GaiaItemNotFoundError,
    GaiaPayloadTooLargeError,
    GaiaServerError,
    GaiaInvalidResponseError,
)


class HTTPStatusErrors:
    """Hub HTTP status codes."""

    ERROR_CLASSES: Dict[int, Type[GaiaError]] = {
        401: GaiaAccessVerificationError,
        404: GaiaItemNotFoundError,
        413: GaiaPayloadTooLargeError,
    }

    MESSAGES: Dict[int, str] = {
        401: 'Hub rejected the auth token',
        404: 'Object not found',
        413: 'Payload too large for hub',
    }

    # Statuses each operation maps; everything else non-2xx is an invalid response
    READ = frozenset({401, 404})
    WRITE = frozenset({401, 413})
    DELETE = frozenset({401, 404})
    LIST = frozenset({401})
    BATCH = frozenset({401, 404, 413})

    @classmethod
    def get_message(cls, status: int) -> str:
        """Gets error message for a status code."""
        if status >= 500:
            return f"Hub server error: {status}"
        return cls.MESSAGES.get(status, f"Unexpected hub response: {status}")


def error_for_status(
    status: int,
    handled: Collection[int] = ()
) -> Optional[GaiaError]:
    """
    Map an HTTP status to a Gaia error.

    Args:
        status: HTTP status code
        handled: Client error statuses the calling operation maps explicitly

    Returns:
        The error to raise, or None for 2xx statuses
    """
    if 200 <= status <= 299:
        return None

    message = HTTPStatusErrors.get_message(status)

    if status >= 500:
        return GaiaServerError(message, status)

    if status in handled and status in HTTPStatusErrors.ERROR_CLASSES:
        return HTTPStatusErrors.ERROR_CLASSES[status](message, status)

    return GaiaInvalidResponseError(message, status)
