"""Line-oriented passes over OFX/QFX record lines"""

from .base import LinePass, classify_line, parse_posted_date, split_line_ending
from .ledger import IdentifierLedger
from .stats_collector import StatsCollector, format_report
from .duplicate_resolver import DuplicateResolver
from .range_resolver import RangeResolver, parse_date_range

__all__ = [
    'LinePass',
    'classify_line',
    'parse_posted_date',
    'split_line_ending',
    'IdentifierLedger',
    'StatsCollector',
    'format_report',
    'DuplicateResolver',
    'RangeResolver',
    'parse_date_range',
]
