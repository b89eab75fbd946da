"""Structural parsing of NORAD Two-Line Element text.

Splits a multi-record TLE string into ``Record`` objects: an optional name
line (line 0) followed by line 1 and line 2. Only the block structure is
checked here. Field contents, checksums and column widths are left to the
orbital model, which rejects malformed numbers when it builds elements.

References:
    - Kelso, T.S. "CelesTrak TLE Format Documentation"
      https://celestrak.org/columns/v04n03/
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

logger = logging.getLogger(__name__)


class ParseError(ValueError):
    """A TLE block is structurally malformed.

    Attributes:
        line_number: 1-based line in the source text where the problem was
            found, or ``None`` when the input ended early.
    """

    def __init__(self, message: str, line_number: Optional[int] = None) -> None:
        self.line_number = line_number
        if line_number is not None:
            message = f"{message} (line {line_number})"
        super().__init__(message)


class UnexpectedLine2Error(ParseError):
    """A group started with line 2."""


class MissingLine1Error(ParseError):
    """A name line was not followed by line 1."""


class MissingLine2Error(ParseError):
    """Line 1 was not followed by line 2."""


@dataclass(frozen=True, slots=True)
class Record:
    """Raw element text for one orbital object.

    Attributes:
        name: Object name from line 0 (if present).
        line1: TLE line 1, starting with '1'.
        line2: TLE line 2, starting with '2'.
    """

    name: Optional[str]
    line1: str
    line2: str


def parse_tles(text: str) -> list[Record]:
    """Parse a string containing 2-line or 3-line TLE records.

    Args:
        text: One or more TLEs separated by newlines. Blank lines and
            surrounding whitespace are ignored.

    Returns:
        Records in the order they appear. Empty input gives an empty list.

    Raises:
        UnexpectedLine2Error: A group starts with line 2.
        MissingLine1Error: A name line is not followed by line 1.
        MissingLine2Error: Line 1 is not followed by line 2.
    """
    lines = _content_lines(text)
    records: list[Record] = []

    for lineno, first in lines:
        if first.startswith("1"):
            name = None
            line1 = first
        elif first.startswith("2"):
            raise UnexpectedLine2Error(
                "TLE group started with line 2, missing line 1", lineno
            )
        else:
            name = first
            nxt = next(lines, None)
            if nxt is None or not nxt[1].startswith("1"):
                raise MissingLine1Error(
                    "Missing or invalid line 1 after name",
                    nxt[0] if nxt else None,
                )
            line1 = nxt[1]

        nxt = next(lines, None)
        if nxt is None or not nxt[1].startswith("2"):
            raise MissingLine2Error(
                "Missing or invalid line 2", nxt[0] if nxt else None
            )

        records.append(Record(name=name, line1=line1, line2=nxt[1]))

    logger.debug("Parsed %d TLE records", len(records))
    return records


def load_tle_file(filepath: str | Path) -> list[Record]:
    """Load TLE records from a local file (2-line or 3-line format)."""
    text = Path(filepath).read_text(encoding="utf-8")
    return parse_tles(text)


# ── Private helpers ──


def _content_lines(text: str) -> Iterator[tuple[int, str]]:
    """Yield ``(line_number, stripped_line)`` for every non-blank line."""
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if line:
            yield lineno, line
