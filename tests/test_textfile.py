"""
Line Source Tests
=================

Tests for TextFile: line numbering, terminator handling, end of stream and
error reporting.
"""

from pathlib import Path

import pytest

from hvsc_tools.errors import ErrorCode, HVSCIOError
from hvsc_tools.textfile import TextFile, TextLine


@pytest.fixture
def text_path(tmp_path: Path) -> Path:
    path = tmp_path / "doc.txt"
    path.write_bytes(b"first\r\nsecond\n\n   \nlast")
    return path


class TestTextFileReading:
    """Tests for reading lines."""

    def test_lines_numbered_from_one(self, text_path):
        """Line numbers start at 1 and count every line."""
        with TextFile.open(text_path) as source:
            lines = list(source)
        assert [line.lineno for line in lines] == [1, 2, 3, 4, 5]

    def test_terminators_stripped(self, text_path):
        """Both CRLF and LF are removed; a missing final newline is fine."""
        with TextFile.open(text_path) as source:
            texts = [line.text for line in source]
        assert texts == ["first", "second", "", "   ", "last"]

    def test_end_of_stream_is_none(self, text_path):
        """read() returns None at the end, and keeps doing so."""
        source = TextFile.open(text_path)
        for _ in range(5):
            assert source.read() is not None
        assert source.read() is None
        assert source.read() is None
        source.close()

    def test_blank_lines(self, text_path):
        """Empty and whitespace-only lines are blank."""
        with TextFile.open(text_path) as source:
            blanks = [line.is_blank() for line in source]
        assert blanks == [False, False, True, True, False]

    def test_empty_file(self, tmp_path):
        """An empty file is at end of stream immediately."""
        path = tmp_path / "empty.txt"
        path.write_bytes(b"")
        with TextFile.open(path) as source:
            assert source.read() is None

    def test_long_line(self, tmp_path):
        """There is no maximum line length."""
        path = tmp_path / "long.txt"
        path.write_bytes(b"x" * 100000 + b"\n")
        with TextFile.open(path) as source:
            assert len(source.read().text) == 100000

    def test_latin1_default(self, tmp_path):
        """Documents are decoded as latin-1 by default."""
        path = tmp_path / "latin.txt"
        path.write_bytes(b"Andr\xe9\n")
        with TextFile.open(path) as source:
            assert source.read().text == "André"

    def test_lines_are_values(self, text_path):
        """TextLines stay valid after further reads."""
        with TextFile.open(text_path) as source:
            first = source.read()
            source.read()
        assert first == TextLine(text="first", lineno=1)


class TestTextFileErrors:
    """Tests for open/read/close failures."""

    def test_open_missing_file(self, tmp_path):
        """Opening a missing file raises HVSCIOError wrapping the OSError."""
        with pytest.raises(HVSCIOError) as exc_info:
            TextFile.open(tmp_path / "missing.txt")
        assert exc_info.value.code == ErrorCode.IO
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)
        assert "missing.txt" in str(exc_info.value)

    def test_read_after_close(self, text_path):
        """Reading a closed handle is an I/O error, not end of stream."""
        source = TextFile.open(text_path)
        source.close()
        with pytest.raises(HVSCIOError):
            source.read()

    def test_close_is_idempotent(self, text_path):
        """close() may be called repeatedly."""
        source = TextFile.open(text_path)
        source.close()
        source.close()
        assert not source.is_open

    def test_context_manager_closes(self, text_path):
        """Leaving the with block closes the file."""
        with TextFile.open(text_path) as source:
            assert source.is_open
        assert not source.is_open

    def test_decode_error(self, tmp_path):
        """Undecodable bytes are reported as an I/O error."""
        path = tmp_path / "bad.txt"
        path.write_bytes(b"\xff\xfe\n")
        with TextFile.open(path, encoding="utf-8") as source:
            with pytest.raises(HVSCIOError):
                source.read()
