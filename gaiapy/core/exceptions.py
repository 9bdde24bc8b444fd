"""
Exceptions raised by gaiapy.

Every failed hub operation surfaces exactly one of the classes below.
"""
from typing import Optional


class GaiaError(Exception):
    """Base exception for all Gaia hub errors."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            status_code: HTTP status code of the failed response (if any)
        """
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class GaiaConfigurationError(GaiaError):
    """Missing or invalid local configuration or inputs. No request was sent."""
    pass


class GaiaNotAuthenticatedError(GaiaConfigurationError):
    """The active identity has no private key for an operation that needs one."""
    pass


class GaiaConnectionError(GaiaError):
    """The hub handshake failed."""
    pass


class GaiaRequestError(GaiaError):
    """Transport-level failure: no usable response was received."""
    pass


class GaiaAccessVerificationError(GaiaError):
    """The hub rejected the auth token (HTTP 401)."""
    pass


class GaiaItemNotFoundError(GaiaError):
    """The requested object does not exist (HTTP 404)."""
    pass


class GaiaPayloadTooLargeError(GaiaError):
    """The hub refused the upload size (HTTP 413)."""
    pass


class GaiaServerError(GaiaError):
    """The hub failed internally (HTTP 5xx)."""
    pass


class GaiaInvalidResponseError(GaiaError):
    """Malformed or unexpected response, or a protocol violation."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        file_count: Optional[int] = None
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            status_code: HTTP status code (if available)
            file_count: Entry count reported by a failed listing (-1)
        """
        self.file_count = file_count
        super().__init__(message, status_code)


class GaiaSignatureVerificationError(GaiaError):
    """Signer address mismatch or invalid signature."""
    pass
