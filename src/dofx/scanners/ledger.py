"""Per-pass identifier ledger."""

from typing import Dict, List, Optional

from ..models.core import LedgerEntry, PostedDate


class IdentifierLedger:
    """Tracks which identifiers have been seen during one pass.

    Entries are kept in first-seen order and are never removed.
    """

    def __init__(self):
        self._entries: Dict[str, LedgerEntry] = {}

    def __contains__(self, identifier: str) -> bool:
        entry = self._entries.get(identifier)
        return entry is not None and entry.seen

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, identifier: str) -> Optional[LedgerEntry]:
        return self._entries.get(identifier)

    def record(self, identifier: str, posted_date: Optional[PostedDate]) -> LedgerEntry:
        """Record one occurrence of an identifier.

        A repeat occurrence bumps the duplicate counter and overwrites the
        last-seen posted date; the first-seen date is kept.
        """
        entry = self._entries.get(identifier)
        if entry is None:
            entry = LedgerEntry(identifier=identifier, first_posted_date=posted_date)
            self._entries[identifier] = entry
        elif entry.seen:
            entry.duplicate_count += 1

        entry.seen = True
        entry.last_posted_date = posted_date
        return entry

    def mark_seen(self, identifier: str) -> bool:
        """Mark an identifier as seen, returning True if it already was"""
        already_seen = identifier in self
        self.record(identifier, None)
        return already_seen

    def duplicates(self, order: str = "first_seen") -> List[LedgerEntry]:
        """Entries seen more than once, in first-seen or identifier order"""
        found = [entry for entry in self._entries.values() if entry.duplicate_count > 0]
        if order == "identifier":
            found.sort(key=lambda entry: entry.identifier)
        return found
