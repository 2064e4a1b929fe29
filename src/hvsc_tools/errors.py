"""
HVSC Tools Error Hierarchy
==========================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from HVSCError, allowing callers to catch every
library failure with a single except clause if desired.

Exception Hierarchy
-------------------
HVSCError (base)
├── HVSCIOError - a document or SID file could not be opened or read
├── InvalidFormatError - bad magic, undersized header, unsupported version
├── NotFoundError - key absent from the STIL, BUGlist or song length database
├── HVSCOutOfMemoryError - allocation failure while building a parse result
└── ParseError - malformed required token
    └── TimestampError - malformed timestamp token

Error Codes
-----------
Every exception carries an ErrorCode. The codes match the numbering used by
the HVSC tooling in C, so scripts that logged numeric codes keep working,
and ErrorCode.describe() returns the canonical one-line description.

Each lookup runs against its own values: there is no shared "last error"
state, the failure travels up the call chain as the raised exception.
"""

from enum import IntEnum
from typing import Optional


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCode(IntEnum):
    """Numeric error codes attached to every HVSCError."""
    OK = 0
    OUT_OF_MEMORY = 1
    IO = 2
    FILE_TOO_LARGE = 3
    TIMESTAMP = 5
    NOT_FOUND = 6
    INVALID = 7

    def describe(self) -> str:
        """Get the human-readable description of this code."""
        descriptions = {
            ErrorCode.OK: "OK",
            ErrorCode.OUT_OF_MEMORY: "out of memory error",
            ErrorCode.IO: "I/O error",
            ErrorCode.FILE_TOO_LARGE: "file too large error",
            ErrorCode.TIMESTAMP: "timestamp parse error",
            ErrorCode.NOT_FOUND: "item not found",
            ErrorCode.INVALID: "invalid data or operation",
        }
        return descriptions[self]


# =============================================================================
# Base Exception Class
# =============================================================================

class HVSCError(Exception):
    """
    Base exception for all HVSC tools errors.

    Attributes:
        message: The error description
        code: The ErrorCode classifying this failure
        path: The file the error relates to (optional)
    """

    code: ErrorCode = ErrorCode.INVALID

    def __init__(self, message: str, path: Optional[str] = None):
        self.message = message
        self.path = path
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format as 'path: message' when a path is known."""
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message

    def describe(self) -> str:
        """Get the canonical description of this error's code."""
        return self.code.describe()


# =============================================================================
# Concrete Exceptions
# =============================================================================

class HVSCIOError(HVSCError):
    """
    A file could not be opened or read.

    The underlying OSError is chained as __cause__.
    """
    code = ErrorCode.IO


class InvalidFormatError(HVSCError):
    """
    Invalid binary data.

    Raised when decoding a SID file header that:
    - Is shorter than the minimum header size
    - Has a magic other than "PSID" or "RSID"
    - Declares an unsupported version
    """
    code = ErrorCode.INVALID


class NotFoundError(HVSCError):
    """
    Key absent from a catalog or database.

    Lookups that return Optional results report absence as None; this
    exception is raised by the convenience "get" functions only.

    Attributes:
        key: The key that was looked up
    """
    code = ErrorCode.NOT_FOUND

    def __init__(self, key: str, path: Optional[str] = None):
        self.key = key
        super().__init__(f"no entry for '{key}'", path=path)


class HVSCOutOfMemoryError(HVSCError):
    """
    Memory ran out while building a parse result.

    The partially built result is discarded before this is raised.
    """
    code = ErrorCode.OUT_OF_MEMORY


class ParseError(HVSCError):
    """
    A required token is malformed.

    Attributes:
        lineno: Line number of the offending text (optional)
    """
    code = ErrorCode.INVALID

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        lineno: Optional[int] = None,
    ):
        self.lineno = lineno
        super().__init__(message, path=path)

    def _format_message(self) -> str:
        """Format as 'path:line: message' when location is known."""
        if self.path and self.lineno is not None:
            return f"{self.path}:{self.lineno}: {self.message}"
        return super()._format_message()


class TimestampError(ParseError):
    """
    Malformed timestamp token.

    Examples:
        - "1:xx" (non-numeric seconds)
        - "1:75" (seconds out of range)
        - "2:00-1:00" (range ending before it starts)
    """
    code = ErrorCode.TIMESTAMP
