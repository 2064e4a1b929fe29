"""
Song Length Database Tests
==========================

Tests for record parsing and Songlengths.md5 lookups.
"""

from pathlib import Path

import pytest

from conftest import TUNE_KEY, UNKNOWN_DIGEST
from hvsc_tools.errors import HVSCIOError, NotFoundError, ParseError, TimestampError
from hvsc_tools.sldb import (
    DurationRecord,
    SongLengthDatabase,
    find_record,
    find_record_by_path,
    get_song_lengths,
    lookup_durations,
    parse_record,
)
from hvsc_tools.textfile import TextFile

KEY = "deadbeefdeadbeefdeadbeefdeadbeef"


@pytest.fixture
def database(tmp_path: Path) -> Path:
    path = tmp_path / "Songlengths.md5"
    path.write_text("\n".join([
        "[Database]",
        "; /A.sid",
        f"{KEY}=1:30=2:45",
        "; /B.sid",
        "00000000000000000000000000000000=0:10 0:20.250 1:00:00",
        "; /C.sid",
        "11111111111111111111111111111111=1:xx",
        "; /D.sid",
    ]) + "\n")
    return path


# =============================================================================
# Record Parsing Tests
# =============================================================================

class TestParseRecord:
    """Tests for parse_record()."""

    def test_equals_separated(self):
        """'=' separates the song lengths as well as the key."""
        record = parse_record(f"{KEY}=1:30=2:45", len(KEY))
        assert record == DurationRecord(key=KEY, durations=[90, 165])

    def test_space_separated(self):
        record = parse_record(f"{KEY}=1:30 2:45  0:05", len(KEY))
        assert record.durations == [90, 165, 5]

    def test_fraction_truncated(self):
        assert parse_record(f"{KEY}=0:20.250", len(KEY)).durations == [20]

    def test_trailing_whitespace(self):
        assert parse_record(f"{KEY}=1:00 \t", len(KEY)).durations == [60]

    def test_no_lengths(self):
        assert parse_record(f"{KEY}=", len(KEY)).durations == []

    @pytest.mark.parametrize("tail", ["1:xx", "1:30 abc", "1:30x", "1:75", "-1:00"])
    def test_malformed_token(self, tail):
        """A bad token is a hard error."""
        with pytest.raises(TimestampError):
            parse_record(f"{KEY}={tail}", len(KEY))

    def test_missing_delimiter(self):
        with pytest.raises(ParseError):
            parse_record(f"{KEY} 1:30", len(KEY))

    def test_error_location(self):
        with pytest.raises(TimestampError) as exc_info:
            parse_record(f"{KEY}=1:xx", len(KEY), path="Songlengths.md5", lineno=12)
        assert str(exc_info.value).startswith("Songlengths.md5:12:")

    def test_record_helpers(self):
        record = DurationRecord(key=KEY, durations=[90, 165])
        assert record.get_duration(2) == 165
        assert record.get_duration(3) is None
        assert record.get_duration(0) is None
        assert record.to_text() == f"{KEY}=1:30 2:45"


# =============================================================================
# Lookup Tests
# =============================================================================

class TestFindRecord:
    """Tests for scanning an open database."""

    def test_find(self, database):
        with TextFile.open(database) as source:
            record = find_record(source, KEY)
        assert record.durations == [90, 165]

    def test_lookup_durations(self, database):
        with TextFile.open(database) as source:
            assert lookup_durations(source, KEY) == [90, 165]

    def test_not_found(self, database):
        with TextFile.open(database) as source:
            assert find_record(source, "f" * 32) is None

    def test_key_prefix_does_not_match(self, database):
        """The key must be followed by '='."""
        with TextFile.open(database) as source:
            assert find_record(source, KEY[:16]) is None

    def test_comments_are_not_records(self, database):
        with TextFile.open(database) as source:
            assert find_record(source, "; /A.sid") is None

    def test_malformed_match(self, database):
        with TextFile.open(database) as source:
            with pytest.raises(TimestampError) as exc_info:
                find_record(source, "1" * 32)
        assert exc_info.value.lineno == 7

    def test_find_by_path(self, database):
        with TextFile.open(database) as source:
            record = find_record_by_path(source, "/B.sid")
        assert record.key == "0" * 32
        assert record.durations == [10, 20, 3600]

    def test_find_by_path_missing(self, database):
        with TextFile.open(database) as source:
            assert find_record_by_path(source, "/Z.sid") is None

    def test_find_by_path_without_record(self, database):
        with TextFile.open(database) as source:
            with pytest.raises(ParseError):
                find_record_by_path(source, "/D.sid")


class TestSongLengthDatabase:
    """Tests for SongLengthDatabase and get_song_lengths()."""

    def test_find_record(self, database):
        db = SongLengthDatabase(database)
        assert db.find_record(KEY.upper()).durations == [90, 165]
        assert db.find_record("f" * 32) is None

    def test_find_by_path(self, hvsc_config):
        record = SongLengthDatabase.from_config(hvsc_config).find_by_path(TUNE_KEY)
        assert record.durations == [90, 45, 120]

    def test_get_lengths(self, hvsc_config, tune_sid):
        record = SongLengthDatabase.from_config(hvsc_config).get_lengths(tune_sid)
        assert record.durations == [90, 45, 120]
        assert record.key != UNKNOWN_DIGEST

    def test_get_song_lengths(self, hvsc_config, tune_sid):
        assert get_song_lengths(tune_sid, hvsc_config) == [90, 45, 120]

    def test_unknown_file(self, hvsc_config, single_sid):
        with pytest.raises(NotFoundError):
            get_song_lengths(single_sid, hvsc_config)

    def test_missing_sid_file(self, hvsc_config, tmp_path):
        with pytest.raises(HVSCIOError):
            get_song_lengths(tmp_path / "missing.sid", hvsc_config)

    def test_missing_database(self, tmp_path, tune_sid):
        with pytest.raises(HVSCIOError):
            SongLengthDatabase(tmp_path / "none.md5").get_lengths(tune_sid)
