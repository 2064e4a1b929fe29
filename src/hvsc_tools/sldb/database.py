"""
Song Length Database
====================

Songlengths.md5 lists the playing time of every song of every SID file in
the collection, one record per line, keyed by the MD5 fingerprint of the
file:

    [Database]
    ; /MUSICIANS/H/Hubbard_Rob/Commando.sid
    0123456789abcdef0123456789abcdef=3:25 0:12 0:10.500

Lines starting with ';' are comments (each record is preceded by one
naming the SID file) and lines starting with '[' are section headers.

Unlike STIL timestamps, which are tolerated when malformed, a bad token in
this machine-generated file is an error: the lookup raises TimestampError.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union
import logging
import re

from hvsc_tools.config import HVSCConfig
from hvsc_tools.errors import NotFoundError, ParseError, TimestampError
from hvsc_tools.fingerprint import file_digest
from hvsc_tools.textfile import DEFAULT_ENCODING, TextFile
from hvsc_tools.timestamp import format_seconds, parse_simple_timestamp

# Logger for this module
logger = logging.getLogger(__name__)

# Separates the key from the song lengths
KEY_DELIMITER = "="

_TOKEN_SEPARATOR_RE = re.compile(r"[\s=]+")


@dataclass
class DurationRecord:
    """
    Song lengths of one SID file.

    Attributes:
        key: Database key (MD5 fingerprint)
        durations: Length of each song in seconds, song 1 first
    """
    key: str
    durations: list[int] = field(default_factory=list)

    def get_duration(self, song: int) -> Optional[int]:
        """
        Get the length of a song.

        Args:
            song: Song number (1-based)

        Returns:
            Length in seconds, or None if the record has no such song
        """
        if 1 <= song <= len(self.durations):
            return self.durations[song - 1]
        return None

    def to_text(self) -> str:
        """Render the record in database format."""
        return f"{self.key}{KEY_DELIMITER}" + " ".join(format_seconds(d) for d in self.durations)


def parse_record(
    text: str,
    key_len: int,
    path: Optional[str] = None,
    lineno: Optional[int] = None,
) -> DurationRecord:
    """
    Parse one database line.

    Args:
        text: The line, key included
        key_len: Width of the key field
        path: Database path for error messages (optional)
        lineno: Line number for error messages (optional)

    Returns:
        The parsed DurationRecord

    Raises:
        ParseError: If the key is not followed by '='
        TimestampError: If any song length is malformed
    """
    if text[key_len:key_len + 1] != KEY_DELIMITER:
        raise ParseError(f"expected '{KEY_DELIMITER}' after key", path=path, lineno=lineno)

    durations = []
    for token in _TOKEN_SEPARATOR_RE.split(text[key_len + 1:]):
        if not token:
            continue
        try:
            seconds, end = parse_simple_timestamp(token)
        except TimestampError as e:
            raise TimestampError(e.message, path=path, lineno=lineno) from e
        if end != len(token):
            raise TimestampError(f"invalid timestamp '{token}'", path=path, lineno=lineno)
        durations.append(seconds)

    return DurationRecord(key=text[:key_len], durations=durations)


def find_record(source: TextFile, key: str) -> Optional[DurationRecord]:
    """
    Scan a database for the record of key.

    Args:
        source: Open database, read from its current position
        key: Fixed-width key, compared against the start of each line

    Returns:
        The parsed record, or None if key is not in the database

    Raises:
        HVSCIOError: If reading fails
        ParseError: If the matching record is malformed
    """
    for line in source:
        if line.text[:len(key)] == key and line.text[len(key):len(key) + 1] == KEY_DELIMITER:
            logger.debug(f"Found '{key}' at line {line.lineno}")
            return parse_record(line.text, len(key), path=str(source.path), lineno=line.lineno)
    return None


def find_record_by_path(source: TextFile, key: str) -> Optional[DurationRecord]:
    """
    Scan a database for the record following the "; <key>" comment.

    Args:
        source: Open database, read from its current position
        key: Catalog key of the SID file, e.g. "/DEMOS/A-F/Afterburner.sid"

    Returns:
        The parsed record, or None if key is not in the database

    Raises:
        HVSCIOError: If reading fails
        ParseError: If the comment has no well-formed record after it
    """
    comment = f"; {key}"
    for line in source:
        if line.text.rstrip() != comment:
            continue
        record_line = source.read()
        if record_line is None or KEY_DELIMITER not in record_line.text:
            raise ParseError(
                f"no record after '{comment}'", path=str(source.path), lineno=line.lineno
            )
        key_len = record_line.text.index(KEY_DELIMITER)
        return parse_record(
            record_line.text, key_len, path=str(source.path), lineno=record_line.lineno
        )
    return None


def lookup_durations(source: TextFile, key: str) -> Optional[list[int]]:
    """
    Get the song lengths stored for key.

    Returns:
        Song lengths in seconds, or None if key is not in the database
    """
    record = find_record(source, key)
    return record.durations if record is not None else None


# =============================================================================
# Database
# =============================================================================

class SongLengthDatabase:
    """
    Lookups on Songlengths.md5.

    Each lookup opens its own TextFile and scans from the top.

    Attributes:
        path: Path of the database
        encoding: Text encoding of the database

    Example:
        >>> db = SongLengthDatabase("C64Music/DOCUMENTS/Songlengths.md5")
        >>> record = db.find_record("0123456789abcdef0123456789abcdef")
        >>> if record:
        ...     print(record.durations)
    """

    def __init__(self, path: Union[str, Path], encoding: str = DEFAULT_ENCODING):
        self.path = Path(path)
        self.encoding = encoding

    @classmethod
    def from_config(cls, config: HVSCConfig) -> "SongLengthDatabase":
        """Create a SongLengthDatabase for an HVSC installation."""
        return cls(config.sldb_path, encoding=config.encoding)

    def find_record(self, digest: str) -> Optional[DurationRecord]:
        """
        Look up a record by MD5 fingerprint.

        Raises:
            HVSCIOError: If the database cannot be read
            ParseError: If the record is malformed
        """
        with TextFile.open(self.path, self.encoding) as source:
            return find_record(source, digest.lower())

    def find_by_path(self, key: str) -> Optional[DurationRecord]:
        """
        Look up a record by the catalog key in its comment line.

        Raises:
            HVSCIOError: If the database cannot be read
            ParseError: If the record is malformed
        """
        with TextFile.open(self.path, self.encoding) as source:
            return find_record_by_path(source, key)

    def get_lengths(self, psid_path: Union[str, Path]) -> DurationRecord:
        """
        Look up the record of a SID file by fingerprinting it.

        Raises:
            NotFoundError: If the file's fingerprint is not in the database
            HVSCIOError: If the SID file or the database cannot be read
            ParseError: If the record is malformed
        """
        digest = file_digest(psid_path)
        logger.debug(f"MD5 of {psid_path} is {digest}")
        record = self.find_record(digest)
        if record is None:
            raise NotFoundError(digest, path=str(self.path))
        return record


def get_song_lengths(psid_path: Union[str, Path], config: HVSCConfig) -> list[int]:
    """
    Get the song lengths of a SID file.

    Args:
        psid_path: Path of the SID file
        config: HVSC installation to use

    Returns:
        Song lengths in seconds, song 1 first

    Raises:
        NotFoundError: If the SID file is not in the database
        HVSCIOError: If a file cannot be read
        ParseError: If the record is malformed
    """
    return SongLengthDatabase.from_config(config).get_lengths(psid_path).durations
