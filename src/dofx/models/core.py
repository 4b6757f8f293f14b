"""Core data models for the OFX duplicate identifier tool."""

import string
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Optional


DTPOSTED_TAG = "<DTPOSTED>"
FITID_TAG = "<FITID>"

DEFAULT_ENCODING = "iso-8859-1"
DEFAULT_OUTPUT_SUFFIX = "_cleaned"
DEFAULT_FITID_LENGTH = 9
DEFAULT_FITID_ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits

REPORT_ORDERS = ("first_seen", "identifier")
ERROR_POLICIES = ("abort", "continue")


class LineKind(Enum):
    """Classification of a record line by its tag prefix"""
    DATE_POSTED = "date_posted"
    IDENTIFIER = "identifier"
    OTHER = "other"


@dataclass(frozen=True, order=True)
class PostedDate:
    """Calendar date taken from a DTPOSTED payload.

    Fields are kept as plain integers so that a malformed payload can still
    be represented (as a degenerate date with zeroed fields) instead of
    raising. Ordering compares (year, month, day).
    """
    year: int
    month: int
    day: int

    def is_degenerate(self) -> bool:
        """True when the fields do not form a real calendar date"""
        return not (1 <= self.month <= 12 and 1 <= self.day <= 31 and self.year > 0)

    def isoformat(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    def __str__(self) -> str:
        return self.isoformat()


UNSET_DATE = PostedDate(0, 0, 0)


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of posted dates"""
    start: PostedDate
    end: PostedDate

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"Date range start {self.start} is after end {self.end}")

    def contains(self, posted_date: Optional[PostedDate]) -> bool:
        if posted_date is None:
            return False
        return self.start <= posted_date <= self.end


@dataclass
class LedgerEntry:
    """Tracking state for one identifier during a single pass.

    Attributes:
        identifier: The FITID payload
        first_posted_date: Active posted date when the identifier was first seen
        last_posted_date: Active posted date at the most recent occurrence
        duplicate_count: Number of repeat sightings (0 while unique)
        seen: Whether the identifier has been encountered
    """
    identifier: str
    first_posted_date: Optional[PostedDate] = None
    last_posted_date: Optional[PostedDate] = None
    duplicate_count: int = 0
    seen: bool = False

    @property
    def occurrences(self) -> int:
        return self.duplicate_count + 1 if self.seen else 0


@dataclass
class DuplicateIdentifier:
    """One line of the duplicate section of a statistics report"""
    identifier: str
    occurrences: int
    posted_date: Optional[PostedDate]


@dataclass
class StatsReport:
    """Result of a statistics pass over one file"""
    lowest: Optional[PostedDate] = None
    highest: Optional[PostedDate] = None
    duplicates: List[DuplicateIdentifier] = field(default_factory=list)
    lines_read: int = 0
    identifiers_seen: int = 0

    @property
    def has_duplicates(self) -> bool:
        return len(self.duplicates) > 0


@dataclass
class Substitution:
    """A rewritten FITID line"""
    line_number: int
    original: str
    replacement: str


@dataclass
class ResolveResult:
    """Result of a resolver pass"""
    lines_written: int = 0
    substitutions: List[Substitution] = field(default_factory=list)

    @property
    def substitution_count(self) -> int:
        return len(self.substitutions)


@dataclass
class ProcessingResult:
    """Result of processing one file"""
    file_path: str
    command: str
    success: bool
    processing_time: float
    output_file: Optional[str] = None
    report: Optional[StatsReport] = None
    resolve_result: Optional[ResolveResult] = None
    errors: List[str] = field(default_factory=list)


@dataclass
class DofxConfig:
    """Configuration for file processing behavior"""
    encoding: str = DEFAULT_ENCODING
    output_suffix: str = DEFAULT_OUTPUT_SUFFIX
    fitid_length: int = DEFAULT_FITID_LENGTH
    fitid_alphabet: str = DEFAULT_FITID_ALPHABET
    report_order: str = "first_seen"
    error_policy: str = "abort"
    seed: Optional[int] = None
    log_directory: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            'encoding': self.encoding,
            'output_suffix': self.output_suffix,
            'fitid_length': self.fitid_length,
            'fitid_alphabet': self.fitid_alphabet,
            'report_order': self.report_order,
            'error_policy': self.error_policy,
            'seed': self.seed,
            'log_directory': self.log_directory,
        }
