"""
PSID Module - SID File Handling
===============================

This module decodes the header of PSID and RSID files, the tune format of
the High Voltage SID Collection.

Components
----------
- **header**: PsidHeader, the format enums and decode_header()
- **parser**: PsidFile (header + C64 payload) and derived display values

Example Usage
-------------
>>> from hvsc_tools.psid import PsidFile
>>> sid = PsidFile.from_file("Commando.sid")
>>> print(sid.to_text())
"""

from hvsc_tools.psid.header import (
    HEADER_MIN_SIZE,
    HEADER_V2_SIZE,
    SUPPORTED_VERSIONS,
    Clock,
    PsidFormat,
    PsidHeader,
    SidModel,
    SongSpeed,
    decode_header,
    is_valid_sid_address,
    sid_io_address,
)
from hvsc_tools.psid.parser import (
    PsidFile,
    parse_psid,
    parse_psid_file,
)

__all__ = [
    # Constants
    "HEADER_MIN_SIZE",
    "HEADER_V2_SIZE",
    "SUPPORTED_VERSIONS",
    # Enums
    "Clock",
    "PsidFormat",
    "SidModel",
    "SongSpeed",
    # Header
    "PsidHeader",
    "decode_header",
    "is_valid_sid_address",
    "sid_io_address",
    # Files
    "PsidFile",
    "parse_psid",
    "parse_psid_file",
]
