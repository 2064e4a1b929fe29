"""
SLDB Module - Song Length Database
==================================

Lookups on the HVSC song length database (Songlengths.md5).

Example Usage
-------------
>>> from hvsc_tools.sldb import get_song_lengths
>>> get_song_lengths("C64Music/MUSICIANS/H/Hubbard_Rob/Commando.sid", config)
[205, 12, 10]
"""

from hvsc_tools.sldb.database import (
    KEY_DELIMITER,
    DurationRecord,
    SongLengthDatabase,
    find_record,
    find_record_by_path,
    get_song_lengths,
    lookup_durations,
    parse_record,
)

__all__ = [
    "KEY_DELIMITER",
    "DurationRecord",
    "SongLengthDatabase",
    "find_record",
    "find_record_by_path",
    "get_song_lengths",
    "lookup_durations",
    "parse_record",
]
