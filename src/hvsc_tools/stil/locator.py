"""
STIL Paragraph Locator
======================

Finds the paragraph of one SID file in a STIL-style document and collects
its lines.

A paragraph starts at a line equal to the key and runs until the next blank
line or the end of the file. The search is a plain linear scan from the
current position of the TextFile: the documents are read once per lookup
and never indexed.
"""

from typing import Optional
import logging

from hvsc_tools.textfile import TextFile, TextLine

# Logger for this module
logger = logging.getLogger(__name__)


def seek_key(source: TextFile, key: str) -> Optional[TextLine]:
    """
    Advance source to the line that equals key.

    Args:
        source: Open document, read from its current position
        key: Exact text of the paragraph's first line

    Returns:
        The matching line, or None if end of stream came first

    Raises:
        HVSCIOError: If reading fails
    """
    for line in source:
        if line.text == key:
            logger.debug(f"Found '{key}' at line {line.lineno}")
            return line
    return None


def read_paragraph(source: TextFile) -> list[TextLine]:
    """
    Collect lines up to the next blank line or end of stream.

    The terminating blank line is consumed but not returned.

    Raises:
        HVSCIOError: If reading fails
    """
    lines: list[TextLine] = []
    for line in source:
        if line.is_blank():
            logger.debug(f"Got empty line {line.lineno} -> end of entry")
            break
        lines.append(line)
    return lines


def locate_paragraph(source: TextFile, key: str) -> Optional[list[TextLine]]:
    """
    Find the paragraph for key and return its body lines.

    Args:
        source: Open document, read from its current position
        key: Exact text of the paragraph's first line

    Returns:
        The lines following the key line, or None if key was not found

    Raises:
        HVSCIOError: If reading fails
    """
    if seek_key(source, key) is None:
        logger.debug(f"'{key}' not found in {source.path}")
        return None
    return read_paragraph(source)
