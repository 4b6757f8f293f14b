"""Abstract base class and line helpers shared by the record scanners."""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Iterable, Optional, Tuple

from ..models.core import DTPOSTED_TAG, FITID_TAG, LineKind, PostedDate


logger = logging.getLogger(__name__)

LINE_ENDINGS = ("\r\n", "\n", "\r")

MalformedDateCallback = Callable[[str, Optional[int]], None]


def split_line_ending(line: str) -> Tuple[str, str]:
    """Split a raw line into its text and its terminator ('' when absent)"""
    for ending in LINE_ENDINGS:
        if line.endswith(ending):
            return line[:-len(ending)], ending
    return line, ""


def classify_line(text: str) -> LineKind:
    """Classify a line by its tag prefix"""
    if text.startswith(DTPOSTED_TAG):
        return LineKind.DATE_POSTED
    if text.startswith(FITID_TAG):
        return LineKind.IDENTIFIER
    return LineKind.OTHER


def extract_payload(text: str, kind: LineKind) -> str:
    """Return everything after the recognized tag"""
    if kind is LineKind.DATE_POSTED:
        return text[len(DTPOSTED_TAG):]
    if kind is LineKind.IDENTIFIER:
        return text[len(FITID_TAG):]
    return text


def _parse_date_field(text: str) -> Optional[int]:
    if text and text.isascii() and text.isdigit():
        return int(text)
    return None


def parse_posted_date(payload: str,
                      line_number: Optional[int] = None,
                      on_malformed: Optional[MalformedDateCallback] = None) -> PostedDate:
    """Parse the YYYYMMDD prefix of a DTPOSTED payload.

    Anything after the first eight characters (time of day, timezone) is
    ignored. Fields that are not plain digits default to zero, giving a
    degenerate date; a warning is logged and on_malformed is called with
    the raw prefix, but nothing is raised.
    """
    raw_fields = (payload[0:4], payload[4:6], payload[6:8])
    values = [_parse_date_field(raw) for raw in raw_fields]

    if any(value is None for value in values):
        logger.warning(
            f"Malformed posted date {payload[:8]!r}"
            + (f" at line {line_number}" if line_number is not None else "")
            + ", unparseable fields default to 0"
        )
        if on_malformed is not None:
            on_malformed(payload[:8], line_number)

    year, month, day = (value if value is not None else 0 for value in values)
    return PostedDate(year, month, day)


def format_fitid_line(identifier: str, ending: str = "\n") -> str:
    return f"{FITID_TAG}{identifier}{ending}"


class LinePass(ABC):
    """Base class for a single forward pass over a line source"""

    def __init__(self, on_malformed_date: Optional[MalformedDateCallback] = None):
        self.on_malformed_date = on_malformed_date

    def parse_date(self, payload: str, line_number: Optional[int] = None) -> PostedDate:
        return parse_posted_date(payload, line_number, self.on_malformed_date)

    @abstractmethod
    def run(self, lines: Iterable[str], *args, **kwargs):
        """Consume the line source and return the pass result"""
        pass

    def scan(self, lines: Iterable[str]):
        """Yield (line_number, text, ending, kind) for each raw line"""
        for line_number, raw in enumerate(lines, 1):
            text, ending = split_line_ending(raw)
            yield line_number, text, ending, classify_line(text)
