"""
SID File Parser
===============

PsidFile holds a complete SID file: the decoded header and the C64 binary
that follows it.

Usage Examples
--------------
Reading a SID file:
    >>> sid = PsidFile.from_file("C64Music/MUSICIANS/H/Hubbard_Rob/Commando.sid")
    >>> print(sid.header.name, sid.header.author)
    >>> load, end = sid.load_range()
    >>> print(f"${load:04X}-${end:04X}")

Extracting the C64 program:
    >>> sid.write_program("commando.prg")
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union
import logging
import struct

from hvsc_tools.errors import HVSCIOError, InvalidFormatError
from hvsc_tools.fingerprint import md5_digest, read_file
from hvsc_tools.psid.header import PsidHeader, sid_io_address

# Logger for this module
logger = logging.getLogger(__name__)


@dataclass
class PsidFile:
    """
    A SID file with its decoded header.

    Attributes:
        data: The raw file bytes
        path: Where the file was read from (optional)
        header: The decoded header

    Raises:
        InvalidFormatError: On construction, if the header is invalid
    """
    data: bytes = field(repr=False)
    path: Optional[Path] = None
    header: PsidHeader = field(init=False)

    def __post_init__(self) -> None:
        """Decode the header after initialization."""
        self.header = PsidHeader.from_bytes(self.data)

    @classmethod
    def from_file(cls, filepath: Union[str, Path]) -> "PsidFile":
        """
        Read and decode a SID file from disk.

        Raises:
            HVSCIOError: If the file cannot be read
            InvalidFormatError: If the file is not a SID file
        """
        filepath = Path(filepath)
        logger.debug(f"Attempting to read {filepath}")
        data = read_file(filepath)
        try:
            return cls(data=data, path=filepath)
        except InvalidFormatError as e:
            raise InvalidFormatError(e.message, path=str(filepath)) from e

    @classmethod
    def from_bytes(cls, data: bytes) -> "PsidFile":
        """Decode a SID file from raw bytes."""
        return cls(data=data)

    # =========================================================================
    # Payload
    # =========================================================================

    @property
    def payload(self) -> bytes:
        """The C64 binary following the header."""
        return self.data[self.header.data_offset:]

    def load_range(self) -> tuple[int, int]:
        """
        Get the memory range the C64 binary occupies.

        When the header's load address is 0 the binary starts with its own
        little-endian load address, which is not loaded.

        Returns:
            Tuple of (load address, end address)

        Raises:
            InvalidFormatError: If the load address is embedded but the
                payload is shorter than two bytes
        """
        payload = self.payload
        if self.header.load_address == 0:
            if len(payload) < 2:
                raise InvalidFormatError("payload too short to hold a load address")
            load = payload[0] | (payload[1] << 8)
            end = (load + len(payload) - 2 - 1) & 0xFFFF
        else:
            load = self.header.load_address
            end = (load + len(payload) - 1) & 0xFFFF
        return load, end

    def program_bytes(self) -> bytes:
        """
        Get the C64 binary as a PRG file image.

        A PRG file starts with the little-endian load address, which the
        payload already holds when the header's load address is 0.
        """
        if self.header.load_address == 0:
            return self.payload
        return struct.pack("<H", self.header.load_address) + self.payload

    def write_program(self, filepath: Union[str, Path]) -> int:
        """
        Write the C64 binary to a PRG file.

        Returns:
            Number of bytes written

        Raises:
            HVSCIOError: If the file cannot be written
        """
        program = self.program_bytes()
        try:
            Path(filepath).write_bytes(program)
        except OSError as e:
            raise HVSCIOError(f"cannot write file: {e.strerror or e}", path=str(filepath)) from e
        logger.debug(f"Wrote {len(program)} bytes to {filepath}")
        return len(program)

    def fingerprint(self) -> str:
        """Get the MD5 fingerprint used by the song length database."""
        return md5_digest(self.data)

    # =========================================================================
    # Display
    # =========================================================================

    def get_info(self) -> dict:
        """
        Get summary information about the SID file.

        Returns:
            Dictionary with header values and derived display values
        """
        header = self.header
        load, end = self.load_range()
        info = {
            "path": str(self.path) if self.path else None,
            "size": len(self.data),
            "format": header.format.name,
            "version": header.version,
            "data_offset": header.data_offset,
            "load_address": load,
            "end_address": end,
            "init_address": header.init_address,
            "play_address": header.play_address,
            "songs": header.song_count,
            "default_song": header.default_song,
            "speeds": [header.song_speed(song).name for song in range(1, header.song_count + 1)],
            "name": header.name,
            "author": header.author,
            "copyright": header.copyright,
        }
        if header.version >= 2:
            info.update({
                "flags": header.flags,
                "clock": header.clock.get_description(),
                "sid_model": header.sid_model.get_description(),
                "start_page": header.start_page,
                "page_length": header.page_length,
                "second_sid": (
                    sid_io_address(header.second_sid_address)
                    if header.second_sid_address else None
                ),
                "third_sid": (
                    sid_io_address(header.third_sid_address)
                    if header.third_sid_address else None
                ),
            })
        return info

    def to_text(self) -> str:
        """
        Render the header for display.

        Example output:
            magic      : PSID
            version    : 2
            data offset: $007c
            load       : $1000-$1fff
            ...
        """
        info = self.get_info()
        lines = []
        if info["path"]:
            lines.append(f"file name  : {info['path']}")
        lines.extend([
            f"file size  : {info['size']}",
            f"magic      : {info['format']}",
            f"version    : {info['version']}",
            f"data offset: ${info['data_offset']:04x}",
            f"load       : ${info['load_address']:04x}-${info['end_address']:04x}",
            f"init       : ${info['init_address']:04x}",
            f"play       : ${info['play_address']:04x}",
            f"songs      : {info['songs']} (default {info['default_song']})",
            f"speed      : {' '.join(info['speeds'])}",
            f"name       : {info['name']}",
            f"author     : {info['author']}",
            f"copyright  : {info['copyright']}",
        ])

        if self.header.version < 2:
            return "\n".join(lines)

        lines.extend([
            f"clock      : {info['clock']}",
            f"SID model  : {info['sid_model']}",
            f"start page : ${info['start_page'] * 256:04x}",
            f"page length: ${info['page_length'] * 256:04x}",
        ])
        for label, address in (("second SID ", info["second_sid"]), ("third SID  ", info["third_sid"])):
            if address is not None:
                lines.append(f"{label}: ${address:04x}")
            else:
                lines.append(f"{label}: none")
        return "\n".join(lines)


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_psid(data: bytes) -> PsidFile:
    """
    Decode a SID file from bytes.

    Raises:
        InvalidFormatError: If data is not a valid SID file
    """
    return PsidFile.from_bytes(data)


def parse_psid_file(filepath: Union[str, Path]) -> PsidFile:
    """
    Read and decode a SID file from disk.

    Raises:
        HVSCIOError: If the file cannot be read
        InvalidFormatError: If the file is not a valid SID file
    """
    return PsidFile.from_file(filepath)
