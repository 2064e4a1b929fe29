"""
Shared Test Fixtures
====================

Builds a small HVSC installation under tmp_path:

    C64Music/
    ├── DOCUMENTS/
    │   ├── STIL.txt
    │   ├── BUGlist.txt
    │   └── Songlengths.md5
    └── MUSICIANS/T/Test/
        ├── Tune.sid      (3 songs, STIL, BUGlist and song lengths)
        └── Single.sid    (1 song, STIL only)

SID files are assembled with struct directly so the decoder is checked
against an independent encoding of the header layout.
"""

import hashlib
import struct
from pathlib import Path
from typing import Callable

import pytest

from hvsc_tools.config import HVSCConfig


# =============================================================================
# Sample Documents
# =============================================================================

TUNE_KEY = "/MUSICIANS/T/Test/Tune.sid"
SINGLE_KEY = "/MUSICIANS/T/Test/Single.sid"

STIL_LINES = [
    "### Test ##################################",
    TUNE_KEY,
    "COMMENT: Converted from the arcade",
    "         original in 1985.",
    "(#1)",
    "  TITLE: Theme (0:30-1:45)",
    " ARTIST: Some Band",
    "(#2)",
    "  TITLE: Love Song (lyrics) [from Greatest Hits]",
    "(#3)",
    "   NAME: High score",
    " AUTHOR: Rob Hubbard",
    "",
    SINGLE_KEY,
    "  TITLE: Popcorn (1:00)",
    " ARTIST: Hot Butter",
]

BUGLIST_LINES = [
    TUNE_KEY,
    "(#2)",
    "    BUG: Tune 2 crashes after 3 minutes.",
    "         (Reported by a listener)",
    "",
]

UNKNOWN_DIGEST = "0123456789abcdef0123456789abcdef"


# =============================================================================
# PSID Builder
# =============================================================================

def build_psid(
    magic: bytes = b"PSID",
    version: int = 2,
    data_offset: int | None = None,
    load: int = 0x1000,
    init: int = 0x1000,
    play: int = 0x1003,
    songs: int = 3,
    start_song: int = 1,
    speed: int = 0,
    name: bytes = b"Test Tune",
    author: bytes = b"Test Author",
    copyright: bytes = b"2024 Test Group",
    flags: int = 0x0014,
    start_page: int = 0,
    page_length: int = 0,
    second_sid: int = 0,
    third_sid: int = 0,
    payload: bytes = bytes([0xA9, 0x00, 0x60, 0x60]),
) -> bytes:
    """Assemble a SID file image."""
    if data_offset is None:
        data_offset = 0x76 if version < 2 else 0x7C

    data = bytearray(magic)
    data += struct.pack(
        ">HHHHHHHI", version, data_offset, load, init, play, songs, start_song, speed
    )
    for text in (name, author, copyright):
        data += text[:32].ljust(32, b"\x00")
    if version >= 2:
        data += struct.pack(">HBBBB", flags, start_page, page_length, second_sid, third_sid)
    return bytes(data) + payload


@pytest.fixture
def make_psid() -> Callable[..., bytes]:
    """Factory for SID file images; keyword arguments override header fields."""
    return build_psid


# =============================================================================
# HVSC Tree
# =============================================================================

def _write_lines(path: Path, lines: list[str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(("\n".join(lines) + "\n").encode("latin-1"))


@pytest.fixture
def hvsc_root(tmp_path: Path) -> Path:
    """Create the sample HVSC installation and return its root."""
    root = tmp_path / "C64Music"

    tune = root / "MUSICIANS" / "T" / "Test" / "Tune.sid"
    tune.parent.mkdir(parents=True)
    tune.write_bytes(build_psid())
    (tune.parent / "Single.sid").write_bytes(build_psid(songs=1, name=b"Single"))

    digest = hashlib.md5(tune.read_bytes()).hexdigest()
    _write_lines(root / "DOCUMENTS" / "STIL.txt", STIL_LINES)
    _write_lines(root / "DOCUMENTS" / "BUGlist.txt", BUGLIST_LINES)
    _write_lines(root / "DOCUMENTS" / "Songlengths.md5", [
        "[Database]",
        f"; {TUNE_KEY}",
        f"{digest}=1:30 0:45.500 2:00",
        "; /MUSICIANS/O/Other/Other.sid",
        f"{UNKNOWN_DIGEST}=3:00",
    ])
    return root


@pytest.fixture
def hvsc_config(hvsc_root: Path) -> HVSCConfig:
    """HVSCConfig for the sample installation."""
    return HVSCConfig(root=hvsc_root)


@pytest.fixture
def tune_sid(hvsc_root: Path) -> Path:
    """Path of the three-song sample SID file."""
    return hvsc_root / "MUSICIANS" / "T" / "Test" / "Tune.sid"


@pytest.fixture
def single_sid(hvsc_root: Path) -> Path:
    """Path of the single-song sample SID file."""
    return hvsc_root / "MUSICIANS" / "T" / "Test" / "Single.sid"
