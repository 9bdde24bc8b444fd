"""Storage path and URL helpers."""
import re
from typing import Optional
from urllib.parse import quote

SIGNATURE_FILE_SUFFIX = '.sig'

# Characters left unescaped in URL paths, besides alphanumerics and "-._~"
URL_PATH_SAFE = "/!$&'()*+,;=:@"

ADDRESS_PATTERN = re.compile(r'([13][a-km-zA-HJ-NP-Z0-9]{26,35})')


def escape_path(path: str) -> str:
    """Percent-encode a storage path for use in a URL path."""
    return quote(path, safe=URL_PATH_SAFE)


def signature_path(path: str) -> str:
    """Path of the signature envelope stored next to ``path``."""
    return f"{path}{SIGNATURE_FILE_SUFFIX}"


def extract_address(url: str) -> Optional[str]:
    """Last storage address appearing in a read URL, or None."""
    matches = ADDRESS_PATTERN.findall(url)
    return matches[-1] if matches else None
