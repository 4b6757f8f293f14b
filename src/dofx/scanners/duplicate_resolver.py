"""Resolver pass: rewrite repeated FITIDs to fresh random tokens."""

import logging
from typing import Iterable, Optional, TextIO

from .base import LinePass, extract_payload, format_fitid_line
from .ledger import IdentifierLedger
from ..models.core import LineKind, ResolveResult, Substitution
from ..utils.token_generator import FitIdGenerator


logger = logging.getLogger(__name__)


class DuplicateResolver(LinePass):
    """Copies lines to a sink, replacing every repeat FITID occurrence.

    The first occurrence of an identifier passes through unchanged. Each
    later occurrence gets its own newly generated token; replacements are
    not remembered, so a third occurrence differs from the second.
    """

    def __init__(self, generator: Optional[FitIdGenerator] = None, on_malformed_date=None):
        super().__init__(on_malformed_date)
        self.generator = generator or FitIdGenerator()

    def run(self, lines: Iterable[str], sink: TextIO) -> ResolveResult:
        result = ResolveResult()
        ledger = IdentifierLedger()

        for line_number, text, ending, kind in self.scan(lines):
            output = text + ending

            if kind is LineKind.IDENTIFIER:
                identifier = extract_payload(text, kind)

                if ledger.mark_seen(identifier):
                    replacement = self.generator.generate()
                    logger.info(f"Performing transform {identifier!r} -> {replacement!r}")
                    result.substitutions.append(
                        Substitution(line_number, identifier, replacement)
                    )
                    output = format_fitid_line(replacement, ending)

            sink.write(output)
            result.lines_written += 1

        return result
