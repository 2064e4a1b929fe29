"""
HVSC Tools - Readers for the High Voltage SID Collection
========================================================

This package reads the files of the High Voltage SID Collection (HVSC),
the archive of Commodore 64 music: the SID tune files themselves and the
text documents that describe them.

Main Components
---------------
- **psid**: PSID/RSID header decoding
    Load, init and play addresses, song count, speed and chip flags

- **stil**: SID Tune Information List (STIL.txt) and BUGlist.txt
    Per-tune titles, artists, comments and known playback problems

- **sldb**: Song length database (Songlengths.md5)
    Playing time of every song, keyed by the MD5 fingerprint of the file

- **textfile**: Line-oriented reading of the HVSC documents

Quick Start
-----------
Decode a SID file header:
    >>> from hvsc_tools.psid import PsidFile
    >>> sid = PsidFile.from_file("C64Music/MUSICIANS/H/Hubbard_Rob/Commando.sid")
    >>> print(sid.header.name, sid.header.song_count)

Look up its STIL entry and song lengths:
    >>> from hvsc_tools import HVSCConfig, get_stil_entry, get_song_lengths
    >>> config = HVSCConfig(root="C64Music")
    >>> entry = get_stil_entry("C64Music/MUSICIANS/H/Hubbard_Rob/Commando.sid", config)
    >>> print(entry.to_text())
    >>> get_song_lengths("C64Music/MUSICIANS/H/Hubbard_Rob/Commando.sid", config)

Or use the command-line tool:
    $ hvscinfo -r C64Music all C64Music/MUSICIANS/H/Hubbard_Rob/Commando.sid

Reference Documentation
-----------------------
- HVSC: https://www.hvsc.c64.org/
- SID file format: https://www.hvsc.c64.org/download/C64Music/DOCUMENTS/SID_file_format.txt
- STIL format: https://www.hvsc.c64.org/download/C64Music/DOCUMENTS/STIL.faq

Version History
---------------
1.0.0 - Initial release with PSID, STIL, BUGlist and song length readers
"""

__version__ = "1.0.0"
__author__ = "HVSC Tools Contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from hvsc_tools.config import HVSCConfig
from hvsc_tools.errors import (
    ErrorCode,
    HVSCError,
    HVSCIOError,
    HVSCOutOfMemoryError,
    InvalidFormatError,
    NotFoundError,
    ParseError,
    TimestampError,
)
from hvsc_tools.textfile import TextFile, TextLine
from hvsc_tools.timestamp import Timestamp

# PSID module exports
from hvsc_tools.psid import (
    PsidFile,
    PsidFormat,
    PsidHeader,
    decode_header,
)

# STIL module exports
from hvsc_tools.stil import (
    AnnotationEntry,
    Block,
    BugEntry,
    BugList,
    Field,
    FieldType,
    StilCatalog,
    get_bug_entry,
    get_stil_entry,
    parse_entry,
)

# Song length database exports
from hvsc_tools.sldb import (
    DurationRecord,
    SongLengthDatabase,
    get_song_lengths,
)

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Configuration
    "HVSCConfig",
    # Exception hierarchy
    "ErrorCode",
    "HVSCError",
    "HVSCIOError",
    "HVSCOutOfMemoryError",
    "InvalidFormatError",
    "NotFoundError",
    "ParseError",
    "TimestampError",
    # Text input
    "TextFile",
    "TextLine",
    "Timestamp",
    # PSID
    "PsidFile",
    "PsidFormat",
    "PsidHeader",
    "decode_header",
    # STIL and BUGlist
    "AnnotationEntry",
    "Block",
    "BugEntry",
    "BugList",
    "Field",
    "FieldType",
    "StilCatalog",
    "get_bug_entry",
    "get_stil_entry",
    "parse_entry",
    # Song lengths
    "DurationRecord",
    "SongLengthDatabase",
    "get_song_lengths",
]
