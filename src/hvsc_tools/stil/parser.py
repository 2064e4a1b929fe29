"""
STIL Entry Parser
=================

Turns the lines of one STIL paragraph into an AnnotationEntry.

The STIL grammar is written by hand and only loosely specified, so the
parser is a small line-driven state machine that accepts anything and
keeps document order.

Parser State
------------
- tune: current tune number, starts at 0 (file-wide)
- block: the block being built for the current tune
- global_comment: file-wide comment, set by a COMMENT before any tune data
- lineno: index of the next line to parse

Line Rules (first match wins)
-----------------------------
1. "(#N)" with N >= 1 switches to tune N. The block being built is
   sealed into the entry and a fresh one is opened. Switching back to a
   tune seen before continues that tune's block.
2. A line starting with a field label produces a field:
   - COMMENT also takes every following line indented by nine spaces,
     joined with single spaces. In tune 0 it becomes the global comment.
   - TITLE may end in "(M:SS)" or "(M:SS-M:SS)", which is moved into the
     field's timestamp, and may then end in "[from ALBUM]".
3. Any other line continues the previous field. With no previous field
   it becomes an UNTYPED field.
4. The first field outside the global comment moves tune 0 to tune 1, so
   single-tune entries need no "(#1)" marker.
5. At the end the block being built is always sealed, so every parsed
   entry has at least one block.

Example
-------
>>> lines = [
...     "COMMENT: Music from the game.",
...     "(#1)",
...     "  TITLE: Warhawk (0:45)",
... ]
>>> entry = parse_entry(lines, key="/MUSICIANS/H/Hubbard_Rob/Warhawk.sid")
>>> entry.global_comment
'Music from the game.'
>>> entry.blocks[0].fields[0].timestamp
Timestamp(start=45, end=-1)
"""

from typing import Optional, Sequence, Union
import logging
import re

from hvsc_tools.errors import HVSCOutOfMemoryError, TimestampError
from hvsc_tools.stil.records import (
    LABEL_WIDTH,
    AnnotationEntry,
    Block,
    Field,
    FieldType,
)
from hvsc_tools.textfile import TextLine
from hvsc_tools.timestamp import Timestamp, parse_timestamp_range

# Logger for this module
logger = logging.getLogger(__name__)

# Indent of COMMENT continuation lines
CONTINUATION_INDENT = " " * 9

_TUNE_MARKER_RE = re.compile(r"\s*\(#(\d+)\)")
_ALBUM_RE = re.compile(r"(.*?)\s*\[from (.+)\]")


def parse_tune_number(text: str) -> Optional[int]:
    """
    Parse a "(#N)" tune marker.

    Leading whitespace is allowed, anything after the closing parenthesis
    is ignored.

    Returns:
        The tune number, or None if text is not a marker for a tune >= 1
    """
    match = _TUNE_MARKER_RE.match(text)
    if match is None:
        return None
    tune = int(match.group(1))
    return tune if tune > 0 else None


class AnnotationParser:
    """
    State machine for STIL entry text.

    A parser instance can be reused: every call to parse() starts from a
    clean state.

    Attributes:
        merge_continuations: Append unlabeled lines to the previous field
            (default). When False every unlabeled line becomes its own
            UNTYPED field.

    Example:
        >>> parser = AnnotationParser()
        >>> entry = parser.parse(lines, key="/DEMOS/A-F/Afterburner.sid")
    """

    def __init__(self, merge_continuations: bool = True):
        self.merge_continuations = merge_continuations
        self._reset("", [])

    def _reset(self, key: str, lines: Sequence[str]) -> None:
        """Initialize parser state for a new entry."""
        self.key = key
        self.tune = 0
        self.lineno = 0
        self._lines = lines
        self._block = Block(tune=0)
        self._blocks: list[Block] = []
        self._index: dict[int, Block] = {}
        self._global_comment: Optional[str] = None

    def parse(
        self, lines: Sequence[Union[TextLine, str]], key: str = ""
    ) -> AnnotationEntry:
        """
        Parse the body lines of a STIL paragraph.

        Args:
            lines: Paragraph lines, without the key line
            key: Catalog key stored in the result

        Returns:
            The parsed AnnotationEntry

        Raises:
            HVSCOutOfMemoryError: If memory runs out; nothing is returned
        """
        texts = [line.text if isinstance(line, TextLine) else line for line in lines]
        self._reset(key, texts)

        try:
            while self.lineno < len(self._lines):
                self._parse_line(self._lines[self.lineno])
            self._seal_block()
            entry = AnnotationEntry(
                key=key,
                global_comment=self._global_comment,
                blocks=self._blocks,
            )
        except MemoryError as e:
            self._reset("", [])
            raise HVSCOutOfMemoryError(f"out of memory parsing entry '{key}'") from e

        self._reset("", [])
        logger.debug(f"Parsed '{key}': {len(entry.blocks)} block(s)")
        return entry

    # =========================================================================
    # Line Rules
    # =========================================================================

    def _parse_line(self, text: str) -> None:
        """Apply the first matching rule to one line and advance."""
        tune = parse_tune_number(text)
        if tune is not None:
            logger.debug(f"Got tune number {tune}")
            self._switch_tune(tune)
            self.lineno += 1
            return

        kind = FieldType.from_label(text)
        if kind is None:
            self._add_unlabeled(text.strip())
            self.lineno += 1
        elif kind is FieldType.COMMENT:
            # advances lineno past the continuation lines
            comment = self._read_comment()
            if self.tune == 0:
                self._append_global_comment(comment)
            else:
                self._add_field(Field(FieldType.COMMENT, comment))
        elif kind is FieldType.TITLE:
            self._add_field(self._parse_title(text[LABEL_WIDTH:].strip()))
            self.lineno += 1
        else:
            self._add_field(Field(kind, text[LABEL_WIDTH:].strip()))
            self.lineno += 1

    def _read_comment(self) -> str:
        """Collect a COMMENT line and its nine-space continuation lines."""
        parts = [self._lines[self.lineno][LABEL_WIDTH:].strip()]
        self.lineno += 1

        while self.lineno < len(self._lines):
            line = self._lines[self.lineno]
            if not line.startswith(CONTINUATION_INDENT):
                break
            parts.append(line[len(CONTINUATION_INDENT):].rstrip())
            self.lineno += 1

        return " ".join(part for part in parts if part)

    def _parse_title(self, text: str) -> Field:
        """Split a trailing timestamp and album off a TITLE text."""
        timestamp: Optional[Timestamp] = None
        album: Optional[str] = None

        if text.endswith(")"):
            start = text.rfind("(")
            if start > 0:
                try:
                    timestamp = parse_timestamp_range(text[start + 1:-1])
                    text = text[:start].rstrip()
                    logger.debug(f"Got timestamp {timestamp}")
                except TimestampError:
                    # "(lyrics)", "(music)" and the like are part of the title
                    logger.debug(f"Ignoring non-timestamp '{text[start:]}'")

        match = _ALBUM_RE.fullmatch(text)
        if match is not None:
            text, album = match.group(1), match.group(2)

        return Field(FieldType.TITLE, text, timestamp=timestamp, album=album)

    def _add_unlabeled(self, text: str) -> None:
        """Attach a line without a label to the entry."""
        if self.merge_continuations:
            if self.tune == 0 and self._global_comment is not None:
                self._append_global_comment(text)
                return
            if self._block.fields:
                previous = self._block.fields[-1]
                previous.text = f"{previous.text} {text}" if previous.text else text
                return
        self._add_field(Field(FieldType.UNTYPED, text))

    # =========================================================================
    # Block Handling
    # =========================================================================

    def _add_field(self, item: Field) -> None:
        """Add a field to the current block, leaving tune 0 if needed."""
        if self.tune == 0:
            # file-wide data is over, the rest describes the (only) tune
            self.tune = 1
            self._block.tune = 1
        logger.debug(f"Adding {item.kind.name} '{item.text}' to tune {self.tune}")
        self._block.add(item)

    def _append_global_comment(self, text: str) -> None:
        if self._global_comment:
            self._global_comment = f"{self._global_comment} {text}"
        else:
            self._global_comment = text

    def _switch_tune(self, tune: int) -> None:
        """Make tune the current tune, sealing the block being built."""
        if tune != self._block.tune:
            if self._block.tune == 0:
                # nothing was added to tune 0, the builder becomes this tune
                self._block.tune = tune
            else:
                self._seal_block()
                existing = self._index.get(tune)
                self._block = existing if existing is not None else Block(tune=tune)
        self.tune = tune

    def _seal_block(self) -> None:
        """Move the block being built into the entry."""
        if self._block.tune not in self._index:
            self._blocks.append(self._block)
            self._index[self._block.tune] = self._block


def parse_entry(
    lines: Sequence[Union[TextLine, str]],
    key: str = "",
    merge_continuations: bool = True,
) -> AnnotationEntry:
    """
    Parse the body lines of a STIL paragraph.

    This is a convenience function that creates an AnnotationParser.

    Args:
        lines: Paragraph lines, without the key line
        key: Catalog key stored in the result
        merge_continuations: See AnnotationParser

    Returns:
        The parsed AnnotationEntry
    """
    return AnnotationParser(merge_continuations=merge_continuations).parse(lines, key=key)
