"""
BUGlist Lookup
==============

BUGlist.txt uses the STIL layout with BUG fields, one paragraph per SID file
with known playback problems:

    /MUSICIANS/X/Xyz/Broken.sid
    (#2)
        BUG: The tune stops after 20 seconds because of an illegal
             opcode.

The paragraph is parsed with the STIL parser and the BUG fields are
collected per tune. Continuation lines are merged into the BUG text.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union
import logging

from hvsc_tools.config import HVSCConfig
from hvsc_tools.errors import NotFoundError
from hvsc_tools.stil.catalog import StilCatalog
from hvsc_tools.stil.records import AnnotationEntry, FieldType

# Logger for this module
logger = logging.getLogger(__name__)


@dataclass
class BugReport:
    """
    One bug note.

    Attributes:
        tune: Tune the bug applies to (0 or 1 for single-tune files)
        text: Description of the bug
    """
    tune: int
    text: str


@dataclass
class BugEntry:
    """
    The BUGlist entry of one SID file.

    Attributes:
        key: The catalog key
        reports: Bug notes in document order
        comment: Global comment of the paragraph (optional)
    """
    key: str
    reports: list[BugReport] = field(default_factory=list)
    comment: Optional[str] = None

    @classmethod
    def from_annotation(cls, entry: AnnotationEntry) -> "BugEntry":
        """Collect the BUG fields of a parsed paragraph."""
        reports = [
            BugReport(tune=tune, text=item.text)
            for tune, item in entry.iter_fields(FieldType.BUG)
        ]
        return cls(key=entry.key, reports=reports, comment=entry.global_comment)

    def to_text(self) -> str:
        """Render the entry for display."""
        lines = [f"{{File: {self.key}}}"]
        if self.comment:
            lines.append(f"{{comment}} {self.comment}")
        for report in self.reports:
            lines.append(f"  {{#{report.tune}}} {{bug}} {report.text}")
        return "\n".join(lines)


class BugList(StilCatalog):
    """Lookups on BUGlist.txt."""

    @classmethod
    def from_config(cls, config: HVSCConfig) -> "BugList":
        """Create a BugList for the BUGlist.txt of an HVSC installation."""
        return cls(config.bugs_path, encoding=config.encoding)

    def find_bugs(self, key: str) -> Optional[BugEntry]:
        """
        Look up the bug notes of a SID file.

        Args:
            key: Catalog key

        Returns:
            The BugEntry, or None if the SID file has no known bugs

        Raises:
            HVSCIOError: If the document cannot be read
        """
        entry = self.find(key)
        if entry is None:
            return None
        bugs = BugEntry.from_annotation(entry)
        logger.debug(f"'{key}': {len(bugs.reports)} bug report(s)")
        return bugs


def get_bug_entry(psid_path: Union[str, Path], config: HVSCConfig) -> BugEntry:
    """
    Get the BUGlist entry of a SID file.

    Raises:
        NotFoundError: If the SID file has no BUGlist entry
        HVSCIOError: If BUGlist.txt cannot be read
    """
    key = config.path_to_key(psid_path)
    buglist = BugList.from_config(config)
    bugs = buglist.find_bugs(key)
    if bugs is None:
        raise NotFoundError(key, path=str(buglist.path))
    return bugs
