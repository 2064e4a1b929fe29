"""
PSID/RSID Header Definitions
============================

This module defines the header of the SID file format used by the High
Voltage SID Collection. A SID file is a fixed-layout header followed by the
C64 binary (the payload).

Header Layout
-------------
All words are big-endian.

    Offset  Size    Description                         Version
    ------  ----    -----------                         -------
    0x00    4       Magic "PSID" or "RSID"              1+
    0x04    2       Version (1-4)                       1+
    0x06    2       Data offset (start of payload)      1+
    0x08    2       Load address (0 = in payload)       1+
    0x0A    2       Init address                        1+
    0x0C    2       Play address                        1+
    0x0E    2       Number of songs                     1+
    0x10    2       Default song (1-based)              1+
    0x12    4       Speed bits (one per song)           1+
    0x16    32      Name                                1+
    0x36    32      Author                              1+
    0x56    32      Copyright / release                 1+
    0x76    2       Flags                               2+
    0x78    1       Relocation start page               2+
    0x79    1       Relocation page length              2+
    0x7A    1       Second SID address                  2+
    0x7B    1       Third SID address                   2+

The three text fields are fixed-width and not necessarily NUL-terminated.

Extra SID Addresses
-------------------
The second and third SID address bytes hold the middle nybbles of an I/O
address: $42 means $D420. Only even values in $42-$7F ($D420-$D7E0) and
$E0-$FF ($DE00-$DFF0) are valid; anything else is stored as 0, meaning
"no extra SID".

Reference
---------
- SID file format: HVSC DOCUMENTS/SID_file_format.txt
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional
import logging
import struct

from hvsc_tools.errors import InvalidFormatError

# Logger for this module
logger = logging.getLogger(__name__)


# =============================================================================
# Layout Constants
# =============================================================================

MAGIC_LEN = 4
TEXT_LEN = 32

OFFSET_MAGIC = 0x00
OFFSET_VERSION = 0x04
OFFSET_DATA_OFFSET = 0x06
OFFSET_LOAD_ADDRESS = 0x08
OFFSET_INIT_ADDRESS = 0x0A
OFFSET_PLAY_ADDRESS = 0x0C
OFFSET_SONGS = 0x0E
OFFSET_START_SONG = 0x10
OFFSET_SPEED = 0x12
OFFSET_NAME = 0x16
OFFSET_AUTHOR = 0x36
OFFSET_COPYRIGHT = 0x56
OFFSET_FLAGS = 0x76
OFFSET_START_PAGE = 0x78
OFFSET_PAGE_LENGTH = 0x79
OFFSET_SECOND_SID = 0x7A
OFFSET_THIRD_SID = 0x7B

# Version 1 header size, the smallest valid header
HEADER_MIN_SIZE = 0x76
# Header size for version 2 and later
HEADER_V2_SIZE = 0x7C

SUPPORTED_VERSIONS = (1, 2, 3, 4)

# Base of the C64 I/O area the extra SID address bytes are relative to
SID_IO_BASE = 0xD000


# =============================================================================
# Enumeration Types
# =============================================================================

class PsidFormat(Enum):
    """
    SID file variants, identified by their magic bytes.

    PSID files run in any emulated environment, RSID files require a real
    C64 environment (CIA timers, BASIC ROM, ...).
    """
    PSID = b"PSID"
    RSID = b"RSID"

    @classmethod
    def from_magic(cls, magic: bytes) -> Optional["PsidFormat"]:
        """Identify the format from the first four bytes of a file."""
        try:
            return cls(bytes(magic))
        except ValueError:
            return None


class Clock(IntEnum):
    """Video standard the tune was written for (flags bits 2-3)."""
    UNKNOWN = 0
    PAL = 1
    NTSC = 2
    ANY = 3

    def get_description(self) -> str:
        """Get a human-readable description."""
        return {
            Clock.UNKNOWN: "unknown",
            Clock.PAL: "PAL",
            Clock.NTSC: "NTSC",
            Clock.ANY: "PAL and NTSC",
        }[self]


class SidModel(IntEnum):
    """SID chip revision the tune was written for (two flag bits)."""
    UNKNOWN = 0
    MOS6581 = 1
    MOS8580 = 2
    ANY = 3

    def get_description(self) -> str:
        """Get a human-readable description."""
        return {
            SidModel.UNKNOWN: "unknown",
            SidModel.MOS6581: "MOS6581",
            SidModel.MOS8580: "MOS8580",
            SidModel.ANY: "MOS6581 and MOS8580",
        }[self]


class SongSpeed(IntEnum):
    """Play routine timing of a song (speed bits)."""
    VBI = 0     # vertical blank interrupt, 50Hz PAL / 60Hz NTSC
    CIA = 1     # CIA timer, 60Hz unless the tune reprograms it


# =============================================================================
# Address Helpers
# =============================================================================

def is_valid_sid_address(address: int) -> bool:
    """
    Check if an extra SID address byte is valid.

    Args:
        address: Middle nybbles of the I/O address, e.g. 0x42 for $D420

    Returns:
        True if address is even and in $42-$7F or $E0-$FF
    """
    if address & 0x01:
        return False
    return 0x42 <= address <= 0x7F or 0xE0 <= address <= 0xFF


def sid_io_address(address: int) -> int:
    """Convert an extra SID address byte into its I/O address ($42 -> $D420)."""
    return SID_IO_BASE + address * 16


def _read_text(data: bytes, offset: int) -> str:
    """Copy a fixed-width text field, cutting at the first NUL."""
    raw = bytes(data[offset:offset + TEXT_LEN])
    return raw.split(b"\x00", 1)[0].decode("latin-1")


def _write_text(text: str) -> bytes:
    """Encode a text field, NUL-padded to the fixed width."""
    return text.encode("latin-1")[:TEXT_LEN].ljust(TEXT_LEN, b"\x00")


# =============================================================================
# PSID Header
# =============================================================================

@dataclass
class PsidHeader:
    """
    Decoded SID file header.

    Fields introduced by version 2 are None in a version 1 header.

    Attributes:
        format: PSID or RSID
        version: Header version (1-4)
        data_offset: Offset of the C64 binary in the file
        load_address: Load address, 0 when the payload starts with it
        init_address: Address of the init routine
        play_address: Address of the play routine (0 = tune installs an IRQ)
        song_count: Number of songs
        default_song: Song played by default (1-based)
        speed: Speed bits, one per song
        name: Tune name
        author: Composer
        copyright: Release information
        flags: Flags word (version 2+)
        start_page: Relocation start page (version 2+)
        page_length: Relocation page count (version 2+)
        second_sid_address: Validated second SID address byte, 0 for none (version 2+)
        third_sid_address: Validated third SID address byte, 0 for none (version 2+)
    """
    format: PsidFormat = PsidFormat.PSID
    version: int = 2
    data_offset: int = HEADER_V2_SIZE
    load_address: int = 0
    init_address: int = 0
    play_address: int = 0
    song_count: int = 1
    default_song: int = 1
    speed: int = 0
    name: str = ""
    author: str = ""
    copyright: str = ""
    flags: Optional[int] = None
    start_page: Optional[int] = None
    page_length: Optional[int] = None
    second_sid_address: Optional[int] = None
    third_sid_address: Optional[int] = None

    @classmethod
    def from_bytes(cls, data: bytes) -> "PsidHeader":
        """
        Decode a header from the start of a SID file.

        Args:
            data: At least the header bytes; anything after is ignored

        Returns:
            The decoded PsidHeader

        Raises:
            InvalidFormatError: If data is too short, has an unknown magic
                or an unsupported version
        """
        if len(data) < HEADER_MIN_SIZE:
            raise InvalidFormatError(
                f"header too short: need {HEADER_MIN_SIZE} bytes, got {len(data)}"
            )

        magic = bytes(data[OFFSET_MAGIC:OFFSET_MAGIC + MAGIC_LEN])
        psid_format = PsidFormat.from_magic(magic)
        if psid_format is None:
            raise InvalidFormatError(f"invalid magic {magic!r}")

        (
            version,
            data_offset,
            load_address,
            init_address,
            play_address,
            song_count,
            default_song,
            speed,
        ) = struct.unpack_from(">HHHHHHHI", data, OFFSET_VERSION)

        if version not in SUPPORTED_VERSIONS:
            raise InvalidFormatError(f"unsupported version {version}")

        header = cls(
            format=psid_format,
            version=version,
            data_offset=data_offset,
            load_address=load_address,
            init_address=init_address,
            play_address=play_address,
            song_count=song_count,
            default_song=default_song,
            speed=speed,
            name=_read_text(data, OFFSET_NAME),
            author=_read_text(data, OFFSET_AUTHOR),
            copyright=_read_text(data, OFFSET_COPYRIGHT),
        )

        if version >= 2:
            if len(data) < HEADER_V2_SIZE:
                raise InvalidFormatError(
                    f"version {version} header too short: need {HEADER_V2_SIZE} bytes, "
                    f"got {len(data)}"
                )
            (header.flags,) = struct.unpack_from(">H", data, OFFSET_FLAGS)
            header.start_page = data[OFFSET_START_PAGE]
            header.page_length = data[OFFSET_PAGE_LENGTH]
            header.second_sid_address = cls._check_sid_address(data[OFFSET_SECOND_SID], "second")
            header.third_sid_address = cls._check_sid_address(data[OFFSET_THIRD_SID], "third")

        logger.debug(
            f"Decoded {psid_format.name} v{version} header: '{header.name}' "
            f"by '{header.author}', {song_count} song(s)"
        )
        return header

    @staticmethod
    def _check_sid_address(address: int, which: str) -> int:
        """Normalize an invalid extra SID address byte to 0."""
        if address == 0 or is_valid_sid_address(address):
            return address
        logger.warning(f"Ignoring invalid {which} SID address ${address:02X}")
        return 0

    def to_bytes(self) -> bytes:
        """Serialize the header (0x76 bytes for version 1, 0x7C otherwise)."""
        result = bytearray(self.format.value)
        result.extend(struct.pack(
            ">HHHHHHHI",
            self.version,
            self.data_offset,
            self.load_address,
            self.init_address,
            self.play_address,
            self.song_count,
            self.default_song,
            self.speed,
        ))
        result.extend(_write_text(self.name))
        result.extend(_write_text(self.author))
        result.extend(_write_text(self.copyright))

        if self.version >= 2:
            result.extend(struct.pack(
                ">HBBBB",
                self.flags or 0,
                self.start_page or 0,
                self.page_length or 0,
                self.second_sid_address or 0,
                self.third_sid_address or 0,
            ))
        return bytes(result)

    # =========================================================================
    # Derived Values
    # =========================================================================

    @property
    def header_size(self) -> int:
        """Size of the header for this version."""
        return HEADER_MIN_SIZE if self.version < 2 else HEADER_V2_SIZE

    @property
    def is_rsid(self) -> bool:
        """Check if the tune needs a real C64 environment."""
        return self.format is PsidFormat.RSID

    def _flag_bits(self, shift: int) -> int:
        return ((self.flags or 0) >> shift) & 0x03

    @property
    def clock(self) -> Clock:
        """Video standard from the flags word (UNKNOWN for version 1)."""
        return Clock(self._flag_bits(2))

    @property
    def sid_model(self) -> SidModel:
        """Model of the first SID from the flags word."""
        return SidModel(self._flag_bits(4))

    @property
    def second_sid_model(self) -> SidModel:
        """Model of the second SID (version 3+)."""
        return SidModel(self._flag_bits(6)) if self.version >= 3 else SidModel.UNKNOWN

    @property
    def third_sid_model(self) -> SidModel:
        """Model of the third SID (version 4+)."""
        return SidModel(self._flag_bits(8)) if self.version >= 4 else SidModel.UNKNOWN

    def song_speed(self, song: int) -> SongSpeed:
        """
        Get the play routine timing of a song.

        Songs past 32 share the last speed bit.

        Args:
            song: Song number (1-based)
        """
        if song < 1:
            raise ValueError(f"song numbers start at 1, got {song}")
        bit = min(song - 1, 31)
        return SongSpeed((self.speed >> bit) & 0x01)

    def get_extra_sids(self) -> list[int]:
        """Get the I/O addresses of the extra SIDs, if any."""
        return [
            sid_io_address(address)
            for address in (self.second_sid_address, self.third_sid_address)
            if address
        ]


def decode_header(data: bytes) -> PsidHeader:
    """
    Decode a SID file header.

    This is a convenience function for PsidHeader.from_bytes().

    Raises:
        InvalidFormatError: If data does not start with a valid header
    """
    return PsidHeader.from_bytes(data)
