"""
STIL Module - SID Tune Information List
=======================================

This module reads the free-text documents of the High Voltage SID
Collection: STIL.txt (per-tune comments, covers, titles) and BUGlist.txt
(known playback problems).

Components
----------
- **records**: AnnotationEntry, Block, Field and FieldType
- **locator**: finds the paragraph of one SID file in a document
- **parser**: turns paragraph lines into an AnnotationEntry
- **catalog**: StilCatalog lookups and get_stil_entry()
- **buglist**: BugList lookups and get_bug_entry()

Example Usage
-------------
>>> from hvsc_tools.stil import StilCatalog
>>> catalog = StilCatalog("C64Music/DOCUMENTS/STIL.txt")
>>> entry = catalog.get("/MUSICIANS/H/Hubbard_Rob/Commando.sid")
>>> for tune, field in entry.iter_fields():
...     print(tune, field.kind.name, field.text)
"""

from hvsc_tools.stil.records import (
    LABEL_WIDTH,
    AnnotationEntry,
    Block,
    Field,
    FieldType,
)
from hvsc_tools.stil.locator import (
    locate_paragraph,
    read_paragraph,
    seek_key,
)
from hvsc_tools.stil.parser import (
    CONTINUATION_INDENT,
    AnnotationParser,
    parse_entry,
    parse_tune_number,
)
from hvsc_tools.stil.catalog import StilCatalog, get_stil_entry
from hvsc_tools.stil.buglist import BugEntry, BugList, BugReport, get_bug_entry

__all__ = [
    # Records
    "LABEL_WIDTH",
    "AnnotationEntry",
    "Block",
    "Field",
    "FieldType",
    # Locator
    "locate_paragraph",
    "read_paragraph",
    "seek_key",
    # Parser
    "CONTINUATION_INDENT",
    "AnnotationParser",
    "parse_entry",
    "parse_tune_number",
    # Lookups
    "StilCatalog",
    "get_stil_entry",
    "BugEntry",
    "BugList",
    "BugReport",
    "get_bug_entry",
]
