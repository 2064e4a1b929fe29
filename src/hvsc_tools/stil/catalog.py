"""
STIL Catalog Lookup
===================

Combines the paragraph locator and the entry parser into lookups on a
STIL.txt file.

Usage Examples
--------------
Look up one entry:
    >>> catalog = StilCatalog("C64Music/DOCUMENTS/STIL.txt")
    >>> entry = catalog.find("/MUSICIANS/H/Hubbard_Rob/Commando.sid")
    >>> if entry:
    ...     print(entry.to_text())

Look up by SID file path:
    >>> config = HVSCConfig(root=Path("C64Music"))
    >>> entry = get_stil_entry("C64Music/MUSICIANS/H/Hubbard_Rob/Commando.sid", config)

Each lookup opens its own TextFile, so one catalog object can be shared
between threads.
"""

from pathlib import Path
from typing import Optional, Union
import logging

from hvsc_tools.config import HVSCConfig
from hvsc_tools.errors import NotFoundError
from hvsc_tools.stil.locator import locate_paragraph
from hvsc_tools.stil.parser import AnnotationParser
from hvsc_tools.stil.records import AnnotationEntry
from hvsc_tools.textfile import DEFAULT_ENCODING, TextFile, TextLine

# Logger for this module
logger = logging.getLogger(__name__)


class StilCatalog:
    """
    Lookups on a STIL-formatted document.

    Attributes:
        path: Path of the document
        encoding: Text encoding of the document
        merge_continuations: Passed to AnnotationParser
    """

    def __init__(
        self,
        path: Union[str, Path],
        encoding: str = DEFAULT_ENCODING,
        merge_continuations: bool = True,
    ):
        self.path = Path(path)
        self.encoding = encoding
        self.merge_continuations = merge_continuations

    @classmethod
    def from_config(cls, config: HVSCConfig) -> "StilCatalog":
        """Create a StilCatalog for the STIL.txt of an HVSC installation."""
        return cls(config.stil_path, encoding=config.encoding)

    def read_raw(self, key: str) -> Optional[list[TextLine]]:
        """
        Get the unparsed lines of an entry.

        Args:
            key: Catalog key, e.g. "/MUSICIANS/H/Hubbard_Rob/Commando.sid"

        Returns:
            The paragraph body lines, or None if key is not in the catalog

        Raises:
            HVSCIOError: If the document cannot be read
        """
        with TextFile.open(self.path, self.encoding) as source:
            return locate_paragraph(source, key)

    def find(self, key: str) -> Optional[AnnotationEntry]:
        """
        Look up and parse an entry.

        Args:
            key: Catalog key

        Returns:
            The parsed entry, or None if key is not in the catalog

        Raises:
            HVSCIOError: If the document cannot be read
            HVSCOutOfMemoryError: If parsing runs out of memory
        """
        lines = self.read_raw(key)
        if lines is None:
            return None
        parser = AnnotationParser(merge_continuations=self.merge_continuations)
        return parser.parse(lines, key=key)

    def get(self, key: str) -> AnnotationEntry:
        """
        Look up and parse an entry that must exist.

        Raises:
            NotFoundError: If key is not in the catalog
            HVSCIOError: If the document cannot be read
        """
        entry = self.find(key)
        if entry is None:
            raise NotFoundError(key, path=str(self.path))
        return entry


def get_stil_entry(psid_path: Union[str, Path], config: HVSCConfig) -> AnnotationEntry:
    """
    Get the STIL entry of a SID file.

    Args:
        psid_path: Path of the SID file (or its catalog key)
        config: HVSC installation to use

    Returns:
        The parsed entry

    Raises:
        NotFoundError: If the SID file has no STIL entry
        HVSCIOError: If STIL.txt cannot be read
    """
    key = config.path_to_key(psid_path)
    logger.debug(f"Looking up STIL entry '{key}'")
    return StilCatalog.from_config(config).get(key)
