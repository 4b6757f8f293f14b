"""Tests for the statistics pass."""

from dofx.models.core import PostedDate
from dofx.scanners.ledger import IdentifierLedger
from dofx.scanners.stats_collector import StatsCollector, format_report


def as_lines(*lines):
    return [line + "\n" for line in lines]


class TestStatsCollector:
    """Test cases for StatsCollector"""

    def setup_method(self):
        """Set up test fixtures"""
        self.collector = StatsCollector()

    def test_duplicate_reported_with_last_date(self):
        """Two occurrences of ABC posted on different dates"""
        lines = as_lines(
            "<DTPOSTED>20190101",
            "<FITID>ABC",
            "<DTPOSTED>20190105",
            "<FITID>ABC",
        )
        report = self.collector.run(lines)

        assert report.lowest == PostedDate(2019, 1, 1)
        assert report.highest == PostedDate(2019, 1, 5)
        assert len(report.duplicates) == 1
        duplicate = report.duplicates[0]
        assert duplicate.identifier == "ABC"
        assert duplicate.occurrences == 2
        assert duplicate.posted_date == PostedDate(2019, 1, 5)

        assert format_report(report) == [
            "Oldest: 2019-01-01",
            "Newest: 2019-01-05",
            "",
            "Duplicate fitid: ABC(2) @ 2019-01-05",
        ]

    def test_date_tracks_last_occurrence_not_first(self):
        lines = as_lines(
            "<DTPOSTED>20190310",
            "<FITID>X",
            "<DTPOSTED>20190301",
            "<FITID>X",
            "<DTPOSTED>20190320",
            "<FITID>Y",
            "<DTPOSTED>20190305",
            "<FITID>X",
        )
        report = self.collector.run(lines)

        assert report.lowest == PostedDate(2019, 3, 1)
        assert report.highest == PostedDate(2019, 3, 20)
        assert [(d.identifier, d.occurrences, d.posted_date) for d in report.duplicates] == [
            ("X", 3, PostedDate(2019, 3, 5)),
        ]

    def test_no_identifiers_no_duplicate_section(self):
        report = self.collector.run(as_lines("<DTPOSTED>20190101", "<TRNAMT>-5.00"))

        assert report.lowest == PostedDate(2019, 1, 1)
        assert report.highest == PostedDate(2019, 1, 1)
        assert not report.has_duplicates
        assert report.identifiers_seen == 0
        assert format_report(report) == ["Oldest: 2019-01-01", "Newest: 2019-01-01"]

    def test_unique_identifiers_not_reported(self):
        report = self.collector.run(as_lines(
            "<DTPOSTED>20190101", "<FITID>A",
            "<DTPOSTED>20190102", "<FITID>B",
        ))
        assert report.duplicates == []
        assert report.identifiers_seen == 2

    def test_empty_input(self):
        report = self.collector.run([])

        assert report.lowest is None
        assert report.highest is None
        assert report.lines_read == 0
        assert format_report(report) == ["Oldest: 0000-00-00", "Newest: 0000-00-00"]

    def test_identifiers_without_posted_date(self):
        report = self.collector.run(as_lines("<FITID>A", "<FITID>A"))

        assert report.lowest is None
        assert report.duplicates[0].posted_date is None
        assert format_report(report)[-1] == "Duplicate fitid: A(2) @ 0000-00-00"

    def test_first_seen_order(self):
        lines = as_lines("<FITID>Z", "<FITID>M", "<FITID>A", "<FITID>A", "<FITID>M", "<FITID>Z")
        report = self.collector.run(lines)
        assert [d.identifier for d in report.duplicates] == ["Z", "M", "A"]

    def test_identifier_order(self):
        lines = as_lines("<FITID>Z", "<FITID>M", "<FITID>A", "<FITID>A", "<FITID>M", "<FITID>Z")
        report = StatsCollector(report_order="identifier").run(lines)
        assert [d.identifier for d in report.duplicates] == ["A", "M", "Z"]

    def test_malformed_date_is_tolerated(self):
        warnings = []
        collector = StatsCollector(on_malformed_date=lambda raw, line: warnings.append(line))
        report = collector.run(as_lines("<DTPOSTED>2019XX01", "<DTPOSTED>20190201"))

        assert report.lowest == PostedDate(2019, 0, 1)
        assert report.highest == PostedDate(2019, 2, 1)
        assert warnings == [1]

    def test_crlf_lines(self):
        report = self.collector.run(["<FITID>A\r\n", "<FITID>A\r\n"])
        assert report.duplicates[0].identifier == "A"


class TestIdentifierLedger:
    """Test cases for IdentifierLedger"""

    def test_record_counts_repeats(self):
        ledger = IdentifierLedger()
        first = ledger.record("A", PostedDate(2019, 1, 1))
        assert first.duplicate_count == 0
        assert first.occurrences == 1

        again = ledger.record("A", PostedDate(2019, 1, 9))
        assert again is first
        assert again.duplicate_count == 1
        assert again.first_posted_date == PostedDate(2019, 1, 1)
        assert again.last_posted_date == PostedDate(2019, 1, 9)

    def test_mark_seen(self):
        ledger = IdentifierLedger()
        assert ledger.mark_seen("A") is False
        assert ledger.mark_seen("A") is True
        assert "A" in ledger
        assert "B" not in ledger
        assert len(ledger) == 1

    def test_duplicates_only_repeated_entries(self):
        ledger = IdentifierLedger()
        for identifier in ["B", "A", "B", "C"]:
            ledger.record(identifier, None)
        assert [entry.identifier for entry in ledger.duplicates()] == ["B"]
