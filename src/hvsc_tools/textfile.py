"""
Line-Oriented Text Reader
=========================

The HVSC documents (STIL.txt, BUGlist.txt, Songlengths.md5) are large flat
text files that are only ever scanned from top to bottom. TextFile wraps one
open document and hands out one line at a time, tracking the line number so
parse errors can point at the offending line.

End of stream and I/O failure are kept apart:
    - read() returns None once the file has no more lines
    - read() raises HVSCIOError when the underlying read fails

Lines are decoded with a configurable encoding. The HVSC documents are
ISO-8859-1, which is also the default because it can decode any byte.

Usage Example
-------------
>>> with TextFile.open("C64Music/DOCUMENTS/STIL.txt") as stil:
...     for line in stil:
...         if line.text.startswith("/MUSICIANS/H/Hubbard_Rob/"):
...             print(line.lineno, line.text)

Each handle must be used by a single thread. Separate handles on the same
file are independent.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import IO, Iterator, Optional, Union
import logging

from hvsc_tools.errors import HVSCIOError

# Logger for this module
logger = logging.getLogger(__name__)

# Default encoding of the HVSC text documents
DEFAULT_ENCODING = "latin-1"


@dataclass(frozen=True)
class TextLine:
    """
    A single line of text with its terminator stripped.

    Attributes:
        text: Line content without "\\n" or "\\r\\n"
        lineno: 1-based line number in the source file
    """
    text: str
    lineno: int

    def is_blank(self) -> bool:
        """Check if the line is empty or holds only whitespace."""
        return not self.text.strip()


class TextFile:
    """
    Sequential reader over one text document.

    Attributes:
        path: Path of the open document (used in error messages)
        encoding: Text encoding of the document
        lineno: Number of the last line read (0 before the first read)
    """

    def __init__(self, path: Union[str, Path], encoding: str = DEFAULT_ENCODING):
        self.path = Path(path)
        self.encoding = encoding
        self.lineno = 0
        self._fp: Optional[IO[str]] = None

    @classmethod
    def open(cls, path: Union[str, Path], encoding: str = DEFAULT_ENCODING) -> "TextFile":
        """
        Open a text document for reading.

        Args:
            path: Path to the document
            encoding: Text encoding (default: latin-1)

        Returns:
            An open TextFile handle

        Raises:
            HVSCIOError: If the file cannot be opened
        """
        handle = cls(path, encoding)
        try:
            # newline="" keeps "\r\n" intact so read() strips it itself
            handle._fp = open(handle.path, "r", encoding=encoding, newline="")
        except OSError as e:
            raise HVSCIOError(f"cannot open file: {e.strerror or e}", path=str(path)) from e
        logger.debug(f"Opened {handle.path}")
        return handle

    @property
    def is_open(self) -> bool:
        """Check if the handle still holds an open file."""
        return self._fp is not None

    def read(self) -> Optional[TextLine]:
        """
        Read the next line.

        Returns:
            The next TextLine, or None at end of stream

        Raises:
            HVSCIOError: If the handle is closed or the read fails
        """
        if self._fp is None:
            raise HVSCIOError("read from closed file", path=str(self.path))

        try:
            raw = self._fp.readline()
        except (OSError, UnicodeDecodeError) as e:
            raise HVSCIOError(
                f"read failed after line {self.lineno}: {e}", path=str(self.path)
            ) from e

        if raw == "":
            return None

        self.lineno += 1
        if raw.endswith("\r\n"):
            raw = raw[:-2]
        elif raw.endswith("\n") or raw.endswith("\r"):
            raw = raw[:-1]
        return TextLine(text=raw, lineno=self.lineno)

    def close(self) -> None:
        """Close the file. Calling this more than once is harmless."""
        if self._fp is not None:
            self._fp.close()
            self._fp = None
            logger.debug(f"Closed {self.path} after {self.lineno} lines")

    def __iter__(self) -> Iterator[TextLine]:
        while True:
            line = self.read()
            if line is None:
                return
            yield line

    def __enter__(self) -> "TextFile":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()
