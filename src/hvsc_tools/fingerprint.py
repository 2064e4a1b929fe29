"""
Content Fingerprints
====================

The song length database identifies SID files by the MD5 digest of the
complete file, written as 32 lowercase hex digits.
"""

from pathlib import Path
from typing import Union
import hashlib

from hvsc_tools.errors import HVSCIOError

# MD5 digest size in bytes
DIGEST_SIZE = 16
# Length of the hex form used as database key
DIGEST_HEX_LEN = DIGEST_SIZE * 2


def md5_digest(data: bytes) -> str:
    """Get the lowercase hex MD5 digest of data."""
    return hashlib.md5(data).hexdigest()


def read_file(path: Union[str, Path]) -> bytes:
    """
    Read a whole file.

    Raises:
        HVSCIOError: If the file cannot be read
    """
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise HVSCIOError(f"cannot read file: {e.strerror or e}", path=str(path)) from e


def file_digest(path: Union[str, Path]) -> str:
    """
    Get the MD5 fingerprint of a file.

    Raises:
        HVSCIOError: If the file cannot be read
    """
    return md5_digest(read_file(path))
