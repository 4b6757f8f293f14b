"""Data models and structures"""

from .core import (
    DateRange,
    DofxConfig,
    DuplicateIdentifier,
    LedgerEntry,
    LineKind,
    PostedDate,
    ProcessingResult,
    ResolveResult,
    StatsReport,
    Substitution,
    UNSET_DATE,
)

__all__ = [
    'DateRange',
    'DofxConfig',
    'DuplicateIdentifier',
    'LedgerEntry',
    'LineKind',
    'PostedDate',
    'ProcessingResult',
    'ResolveResult',
    'StatsReport',
    'Substitution',
    'UNSET_DATE',
]
