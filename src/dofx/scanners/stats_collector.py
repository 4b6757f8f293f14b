"""Statistics pass: posted date range and duplicate FITID report."""

import logging
from typing import Iterable, List, Optional

from .base import LinePass, extract_payload
from .ledger import IdentifierLedger
from ..models.core import (
    DuplicateIdentifier,
    LineKind,
    PostedDate,
    StatsReport,
    UNSET_DATE,
)


logger = logging.getLogger(__name__)


class StatsCollector(LinePass):
    """Collects the oldest/newest posted dates and duplicate identifiers"""

    def __init__(self, report_order: str = "first_seen", on_malformed_date=None):
        super().__init__(on_malformed_date)
        self.report_order = report_order

    def run(self, lines: Iterable[str]) -> StatsReport:
        """Scan the line source once and build a StatsReport.

        Nothing is written; the ledger lives only for this call.
        """
        report = StatsReport()
        ledger = IdentifierLedger()
        active_posted_date: Optional[PostedDate] = None

        for line_number, text, _ending, kind in self.scan(lines):
            report.lines_read = line_number

            if kind is LineKind.DATE_POSTED:
                posted_date = self.parse_date(extract_payload(text, kind), line_number)

                if report.lowest is None or posted_date < report.lowest:
                    report.lowest = posted_date
                if report.highest is None or posted_date > report.highest:
                    report.highest = posted_date

                active_posted_date = posted_date

            elif kind is LineKind.IDENTIFIER:
                identifier = extract_payload(text, kind)
                entry = ledger.record(identifier, active_posted_date)
                report.identifiers_seen += 1

                if entry.duplicate_count > 0:
                    logger.debug(
                        f"Duplicate fitid {identifier!r} at line {line_number} "
                        f"(occurrence {entry.occurrences})"
                    )

        report.duplicates = [
            DuplicateIdentifier(
                identifier=entry.identifier,
                occurrences=entry.occurrences,
                posted_date=entry.last_posted_date,
            )
            for entry in ledger.duplicates(self.report_order)
        ]
        return report


def _format_date(posted_date: Optional[PostedDate]) -> str:
    return (posted_date or UNSET_DATE).isoformat()


def format_report(report: StatsReport) -> List[str]:
    """Render a StatsReport as printable lines"""
    lines = [
        f"Oldest: {_format_date(report.lowest)}",
        f"Newest: {_format_date(report.highest)}",
    ]

    if report.has_duplicates:
        lines.append("")
        for duplicate in report.duplicates:
            lines.append(
                f"Duplicate fitid: {duplicate.identifier}({duplicate.occurrences}) "
                f"@ {_format_date(duplicate.posted_date)}"
            )

    return lines
