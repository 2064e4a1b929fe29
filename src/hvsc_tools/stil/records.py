"""
STIL Record Type Definitions
============================

This module defines the data structures produced by the STIL parser.

STIL Entry Overview
-------------------
A STIL.txt entry is a paragraph that starts with the path of a SID file
and ends with a blank line:

    /MUSICIANS/H/Hubbard_Rob/Commando.sid
    COMMENT: Converted from the arcade original.
    (#1)
      TITLE: Commando theme (0:00-1:30)
     ARTIST: Rob Hubbard
    (#2)
       NAME: High score

The parsed form keeps the document order:

    AnnotationEntry
    ├── key             "/MUSICIANS/H/Hubbard_Rob/Commando.sid"
    ├── global_comment  "Converted from the arcade original."
    └── blocks
        ├── Block(tune=1): TITLE, ARTIST
        └── Block(tune=2): NAME

Field Labels
------------
Labels are right-justified in eight columns, colon included:

| Label        | FieldType | Meaning                              |
|--------------|-----------|--------------------------------------|
| " ARTIST:"   | ARTIST    | performer of a cover                 |
| " AUTHOR:"   | AUTHOR    | composer of the SID or a subtune     |
| "    BUG:"   | BUG       | bug note (BUGlist.txt only)          |
| "COMMENT:"   | COMMENT   | free text                            |
| "   NAME:"   | NAME      | (sub)tune name                       |
| "  TITLE:"   | TITLE     | title of the covered song            |

Lines without a label have type UNTYPED.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterator, Optional

from hvsc_tools.timestamp import Timestamp


# =============================================================================
# Field Types
# =============================================================================

class FieldType(IntEnum):
    """STIL field kinds, in the order of the label table."""
    ARTIST = 0
    AUTHOR = 1
    BUG = 2
    COMMENT = 3
    NAME = 4
    TITLE = 5
    UNTYPED = 6

    @property
    def label(self) -> Optional[str]:
        """Get the eight-column label, or None for UNTYPED."""
        if self is FieldType.UNTYPED:
            return None
        return f"{self.name}:".rjust(LABEL_WIDTH)

    @property
    def display(self) -> str:
        """Get the dump marker, e.g. '{ artist}'."""
        return "{" + self.name.lower().rjust(LABEL_WIDTH - 1) + "}"

    @classmethod
    def from_label(cls, text: str) -> Optional["FieldType"]:
        """
        Identify the label at the start of a line.

        Returns:
            The FieldType, or None if the line does not start with a label
        """
        return _LABELS.get(text[:LABEL_WIDTH])


# Width of a field label including the colon
LABEL_WIDTH = 8

_LABELS = {
    f"{kind.name}:".rjust(LABEL_WIDTH): kind
    for kind in FieldType
    if kind is not FieldType.UNTYPED
}


# =============================================================================
# Field and Block
# =============================================================================

@dataclass
class Field:
    """
    One field of a STIL entry.

    Attributes:
        kind: The field type
        text: Field content with the label stripped
        timestamp: Position in the tune (TITLE fields only, optional)
        album: Source of a cover, from a trailing "[from ...]" (optional)
    """
    kind: FieldType
    text: str
    timestamp: Optional[Timestamp] = None
    album: Optional[str] = None

    def to_dict(self) -> dict:
        """Get a JSON-ready representation."""
        result = {"kind": self.kind.name.lower(), "text": self.text}
        if self.timestamp is not None:
            result["timestamp"] = {"from": self.timestamp.start, "to": self.timestamp.end}
        if self.album is not None:
            result["album"] = self.album
        return result


@dataclass
class Block:
    """
    Fields belonging to one tune, in document order.

    Attributes:
        tune: Tune number, 0 for file-wide data
        fields: The fields in the order they appear in the text
    """
    tune: int = 0
    fields: list[Field] = field(default_factory=list)

    def add(self, item: Field) -> None:
        """Append a field to the block."""
        self.fields.append(item)

    def to_dict(self) -> dict:
        """Get a JSON-ready representation."""
        return {"tune": self.tune, "fields": [f.to_dict() for f in self.fields]}


# =============================================================================
# Annotation Entry
# =============================================================================

@dataclass
class AnnotationEntry:
    """
    A parsed STIL (or BUGlist) entry for one SID file.

    Attributes:
        key: The catalog key (HVSC-relative path of the SID file)
        global_comment: File-wide comment preceding the tune blocks (optional)
        blocks: One block per tune, in first-seen order
    """
    key: str
    global_comment: Optional[str] = None
    blocks: list[Block] = field(default_factory=list)

    def get_block(self, tune: int) -> Optional[Block]:
        """
        Get the block of a tune.

        Args:
            tune: Tune number

        Returns:
            The Block if the entry has one for tune, None otherwise
        """
        for block in self.blocks:
            if block.tune == tune:
                return block
        return None

    def get_tune_fields(self, tune: int) -> list[Field]:
        """
        Get every field that applies to a tune.

        Fields of a file-wide block (tune 0) apply to all tunes and come
        first, followed by the tune's own fields.

        Args:
            tune: Tune number

        Returns:
            List of fields, empty if nothing applies to the tune
        """
        result: list[Field] = []
        shared = self.get_block(0)
        if shared is not None and tune != 0:
            result.extend(shared.fields)
        block = self.get_block(tune)
        if block is not None:
            result.extend(block.fields)
        return result

    def iter_fields(self, kind: Optional[FieldType] = None) -> Iterator[tuple[int, Field]]:
        """
        Iterate over all fields of the entry.

        Args:
            kind: Only yield fields of this type (optional)

        Yields:
            Tuples of (tune number, field)
        """
        for block in self.blocks:
            for item in block.fields:
                if kind is None or item.kind == kind:
                    yield block.tune, item

    def get_tunes(self) -> list[int]:
        """Get the tune numbers of the entry's blocks."""
        return [block.tune for block in self.blocks]

    def to_text(self) -> str:
        """
        Render the entry in the dump format.

        Example output:
            {File: /MUSICIANS/H/Hubbard_Rob/Commando.sid}

            {SID-wide comment}
            Converted from the arcade original.

            {Per-tune info}

              {#1}
                {  title} Commando theme
                  {timestamp} 0:00-1:30
        """
        lines = [f"{{File: {self.key}}}"]
        if self.global_comment is not None:
            lines.append("")
            lines.append("{SID-wide comment}")
            lines.append(self.global_comment)

        lines.append("")
        lines.append("{Per-tune info}")
        lines.append("")
        for block in self.blocks:
            lines.append(f"  {{#{block.tune}}}")
            for item in block.fields:
                lines.append(f"    {item.kind.display} {item.text}")
                if item.album is not None:
                    lines.append(f"      {{album}} {item.album}")
                if item.timestamp is not None and item.timestamp.is_present:
                    lines.append(f"      {{timestamp}} {item.timestamp}")
            lines.append("")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Get a JSON-ready representation."""
        return {
            "key": self.key,
            "global_comment": self.global_comment,
            "blocks": [block.to_dict() for block in self.blocks],
        }
