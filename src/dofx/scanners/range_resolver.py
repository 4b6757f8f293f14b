"""Range-scoped resolver pass: rewrite FITIDs posted inside a date range."""

import logging
from typing import Dict, Iterable, Optional, TextIO

from .base import LinePass, extract_payload, format_fitid_line, parse_posted_date
from ..models.core import DateRange, LineKind, ResolveResult, Substitution
from ..utils.token_generator import FitIdGenerator


logger = logging.getLogger(__name__)


def parse_date_range(start: str, end: str) -> DateRange:
    """Build an inclusive DateRange from two YYYYMMDD strings"""
    return DateRange(parse_posted_date(start), parse_posted_date(end))


class RangeResolver(LinePass):
    """Replaces the FITID that follows an in-range DTPOSTED line.

    An in-range posted date arms a flag for the next FITID line only; that
    FITID line clears the flag whether or not it was rewritten. Repeated
    in-range occurrences of one identifier share a single replacement.
    """

    def __init__(self,
                 date_range: DateRange,
                 generator: Optional[FitIdGenerator] = None,
                 on_malformed_date=None):
        super().__init__(on_malformed_date)
        self.date_range = date_range
        self.generator = generator or FitIdGenerator()

    def run(self, lines: Iterable[str], sink: TextIO) -> ResolveResult:
        result = ResolveResult()
        replacements: Dict[str, str] = {}
        replace_next = False

        for line_number, text, ending, kind in self.scan(lines):
            output = text + ending

            if kind is LineKind.DATE_POSTED:
                posted_date = self.parse_date(extract_payload(text, kind), line_number)
                if self.date_range.contains(posted_date):
                    logger.info(f"Flagging next fitid to be replaced for date posted {posted_date}")
                    replace_next = True

            elif kind is LineKind.IDENTIFIER:
                if replace_next:
                    identifier = extract_payload(text, kind)
                    replacement = replacements.get(identifier)
                    if replacement is None:
                        replacement = self.generator.generate()
                        replacements[identifier] = replacement

                    logger.info(f"Performing transform {identifier!r} -> {replacement!r} due to flag")
                    result.substitutions.append(
                        Substitution(line_number, identifier, replacement)
                    )
                    output = format_fitid_line(replacement, ending)

                replace_next = False

            sink.write(output)
            result.lines_written += 1

        return result
