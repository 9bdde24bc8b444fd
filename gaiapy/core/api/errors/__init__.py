"""Hub HTTP error mapping."""
from .http_errors import HTTPStatusErrors, error_for_status

__all__ = [
    'HTTPStatusErrors',
    'error_for_status',
]
