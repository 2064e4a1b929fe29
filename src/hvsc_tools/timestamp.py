"""
Playback Timestamps
===================

Both the STIL and the song length database describe positions and lengths
in playback time, written as minutes and seconds.

Token Grammar
-------------
| Form      | Example    | Seconds |
|-----------|------------|---------|
| M:SS      | 1:30       | 90      |
| MM:SS     | 12:05      | 725     |
| H:MM:SS   | 1:02:03    | 3723    |
| M:SS.mmm  | 1:30.500   | 90      |

The millisecond fraction appears in current Songlengths.md5 files and is
truncated. Seconds (and minutes in the hour form) must be below 60.

A range is two tokens joined by '-': "0:30-2:15" is 30 to 135 seconds.

Timestamp Value
---------------
Timestamp(start, end) uses -1 as a sentinel on both sides:
    - no timestamp:     Timestamp(-1, -1)
    - "(0:30)":         Timestamp(30, -1)
    - "(0:30-2:15)":    Timestamp(30, 135)
"""

from dataclasses import dataclass
import re

from hvsc_tools.errors import TimestampError


# [H:]M:SS with optional .mmm fraction
_TIMESTAMP_RE = re.compile(r"(\d+):(\d{2})(?::(\d{2}))?(?:\.(\d{1,3}))?")


@dataclass(frozen=True)
class Timestamp:
    """
    A point or a range in playback time, in seconds.

    Attributes:
        start: First (or only) position, -1 when the timestamp is absent
        end: End of the range, -1 for a single point
    """
    start: int = -1
    end: int = -1

    def __post_init__(self) -> None:
        if self.end != -1 and self.end < self.start:
            raise ValueError(f"timestamp range ends before it starts: {self.start}-{self.end}")

    @property
    def is_present(self) -> bool:
        """Check if the timestamp holds a position at all."""
        return self.start >= 0

    @property
    def is_range(self) -> bool:
        """Check if the timestamp is a from-to range."""
        return self.start >= 0 and self.end >= 0

    def __str__(self) -> str:
        if not self.is_present:
            return ""
        if self.is_range:
            return f"{format_seconds(self.start)}-{format_seconds(self.end)}"
        return format_seconds(self.start)


def format_seconds(seconds: int) -> str:
    """Format a number of seconds as M:SS."""
    return f"{seconds // 60}:{seconds % 60:02d}"


def parse_simple_timestamp(text: str, pos: int = 0) -> tuple[int, int]:
    """
    Parse a single timestamp token starting at position pos.

    Args:
        text: String holding the token
        pos: Offset of the first character of the token

    Returns:
        Tuple of (seconds, offset of the first character after the token)

    Raises:
        TimestampError: If no valid token starts at pos
    """
    match = _TIMESTAMP_RE.match(text, pos)
    if match is None:
        raise TimestampError(f"invalid timestamp '{text[pos:]}'")

    first, second, third, _fraction = match.groups()
    if third is not None:
        hours, minutes, seconds = int(first), int(second), int(third)
        if minutes >= 60:
            raise TimestampError(f"invalid timestamp '{match.group(0)}': minutes out of range")
    else:
        hours, minutes, seconds = 0, int(first), int(second)

    if seconds >= 60:
        raise TimestampError(f"invalid timestamp '{match.group(0)}': seconds out of range")

    # a token glued to more digits or letters ("1:30x") is not a token
    end = match.end()
    if end < len(text) and (text[end].isalnum() or text[end] in ":."):
        raise TimestampError(f"invalid timestamp '{text[pos:]}'")

    return hours * 3600 + minutes * 60 + seconds, end


def parse_timestamp_range(text: str) -> Timestamp:
    """
    Parse a complete "A" or "A-B" timestamp string.

    Args:
        text: The text between the parentheses of a STIL timestamp

    Returns:
        A Timestamp with end set to -1 for a single point

    Raises:
        TimestampError: If text is not exactly one timestamp or one range
    """
    start, pos = parse_simple_timestamp(text)
    if pos == len(text):
        return Timestamp(start, -1)

    if text[pos] != "-":
        raise TimestampError(f"invalid timestamp '{text}'")

    end, pos = parse_simple_timestamp(text, pos + 1)
    if pos != len(text):
        raise TimestampError(f"invalid timestamp '{text}'")
    if end < start:
        raise TimestampError(f"invalid timestamp '{text}': range ends before it starts")
    return Timestamp(start, end)
