"""
STIL Lookup Tests
=================

Tests for the paragraph locator, StilCatalog, BugList and the convenience
lookups against the sample HVSC installation from conftest.py.
"""

from pathlib import Path

import pytest

from conftest import SINGLE_KEY, TUNE_KEY
from hvsc_tools.errors import ErrorCode, HVSCIOError, NotFoundError
from hvsc_tools.stil import (
    BugList,
    BugReport,
    FieldType,
    StilCatalog,
    get_bug_entry,
    get_stil_entry,
    locate_paragraph,
    read_paragraph,
    seek_key,
)
from hvsc_tools.textfile import TextFile
from hvsc_tools.timestamp import Timestamp


@pytest.fixture
def stil_path(hvsc_root: Path) -> Path:
    return hvsc_root / "DOCUMENTS" / "STIL.txt"


# =============================================================================
# Locator Tests
# =============================================================================

class TestLocator:
    """Tests for finding paragraphs in a document."""

    def test_locate_returns_body_lines(self, stil_path):
        """The paragraph runs from after the key to the blank line."""
        with TextFile.open(stil_path) as source:
            lines = locate_paragraph(source, TUNE_KEY)
        assert lines[0].text == "COMMENT: Converted from the arcade"
        assert lines[-1].text == " AUTHOR: Rob Hubbard"
        assert len(lines) == 10
        assert lines[0].lineno == 3

    def test_locate_last_paragraph_ends_at_eof(self, stil_path):
        """End of file terminates a paragraph without losing lines."""
        with TextFile.open(stil_path) as source:
            lines = locate_paragraph(source, SINGLE_KEY)
        assert [line.text for line in lines] == ["  TITLE: Popcorn (1:00)", " ARTIST: Hot Butter"]

    def test_locate_missing_key(self, stil_path):
        with TextFile.open(stil_path) as source:
            assert locate_paragraph(source, "/NOT/THERE.sid") is None

    def test_key_must_match_whole_line(self, stil_path):
        with TextFile.open(stil_path) as source:
            assert locate_paragraph(source, "/MUSICIANS/T/Test/Tune") is None

    def test_scan_continues_from_position(self, stil_path):
        """Lookups scan forward only, from where the source stands."""
        with TextFile.open(stil_path) as source:
            assert locate_paragraph(source, SINGLE_KEY) is not None
            assert locate_paragraph(source, TUNE_KEY) is None

    def test_seek_and_read(self, stil_path):
        with TextFile.open(stil_path) as source:
            key_line = seek_key(source, TUNE_KEY)
            assert key_line.lineno == 2
            body = read_paragraph(source)
            # the blank line is consumed
            assert source.read().text == SINGLE_KEY
        assert len(body) == 10

    def test_empty_paragraph(self, tmp_path):
        path = tmp_path / "doc.txt"
        path.write_text("/A.sid\n\n/B.sid\n")
        with TextFile.open(path) as source:
            assert locate_paragraph(source, "/A.sid") == []


# =============================================================================
# Catalog Tests
# =============================================================================

class TestStilCatalog:
    """Tests for StilCatalog lookups."""

    def test_find(self, hvsc_config):
        entry = StilCatalog.from_config(hvsc_config).find(TUNE_KEY)
        assert entry.key == TUNE_KEY
        assert entry.get_tunes() == [1, 2, 3]
        assert entry.global_comment == "Converted from the arcade original in 1985."

    def test_find_single_tune(self, hvsc_config):
        entry = StilCatalog.from_config(hvsc_config).find(SINGLE_KEY)
        assert entry.get_tunes() == [1]
        title = entry.get_block(1).fields[0]
        assert (title.text, title.timestamp) == ("Popcorn", Timestamp(60))

    def test_find_missing(self, hvsc_config):
        assert StilCatalog.from_config(hvsc_config).find("/NOT/THERE.sid") is None

    def test_get_missing_raises(self, hvsc_config):
        with pytest.raises(NotFoundError) as exc_info:
            StilCatalog.from_config(hvsc_config).get("/NOT/THERE.sid")
        assert exc_info.value.key == "/NOT/THERE.sid"
        assert exc_info.value.code == ErrorCode.NOT_FOUND

    def test_read_raw(self, hvsc_config):
        lines = StilCatalog.from_config(hvsc_config).read_raw(SINGLE_KEY)
        assert [line.text for line in lines] == ["  TITLE: Popcorn (1:00)", " ARTIST: Hot Butter"]

    def test_unmerged_catalog(self, tmp_path):
        path = tmp_path / "STIL.txt"
        path.write_text("/A.sid\n  TITLE: One\n  more\n")
        entry = StilCatalog(path, merge_continuations=False).get("/A.sid")
        assert [f.kind for f in entry.get_block(1).fields] == [FieldType.TITLE, FieldType.UNTYPED]

    def test_missing_document(self, tmp_path):
        with pytest.raises(HVSCIOError):
            StilCatalog(tmp_path / "STIL.txt").find(TUNE_KEY)

    def test_get_stil_entry_by_path(self, hvsc_config, tune_sid):
        entry = get_stil_entry(tune_sid, hvsc_config)
        assert entry.key == TUNE_KEY

    def test_get_stil_entry_by_key(self, hvsc_config):
        assert get_stil_entry(SINGLE_KEY, hvsc_config).key == SINGLE_KEY

    def test_lookups_are_repeatable(self, hvsc_config):
        catalog = StilCatalog.from_config(hvsc_config)
        assert catalog.find(TUNE_KEY) == catalog.find(TUNE_KEY)


# =============================================================================
# BUGlist Tests
# =============================================================================

class TestBugList:
    """Tests for BUGlist.txt lookups."""

    def test_find_bugs(self, hvsc_config):
        bugs = BugList.from_config(hvsc_config).find_bugs(TUNE_KEY)
        assert bugs.key == TUNE_KEY
        assert bugs.reports == [
            BugReport(tune=2, text="Tune 2 crashes after 3 minutes. (Reported by a listener)"),
        ]

    def test_no_bugs(self, hvsc_config):
        assert BugList.from_config(hvsc_config).find_bugs(SINGLE_KEY) is None

    def test_get_bug_entry(self, hvsc_config, tune_sid):
        assert len(get_bug_entry(tune_sid, hvsc_config).reports) == 1

    def test_get_bug_entry_missing(self, hvsc_config, single_sid):
        with pytest.raises(NotFoundError):
            get_bug_entry(single_sid, hvsc_config)

    def test_to_text(self, hvsc_config):
        text = BugList.from_config(hvsc_config).find_bugs(TUNE_KEY).to_text()
        assert text.split("\n") == [
            f"{{File: {TUNE_KEY}}}",
            "  {#2} {bug} Tune 2 crashes after 3 minutes. (Reported by a listener)",
        ]
