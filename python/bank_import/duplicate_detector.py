"""
Duplicate Transaction Detector Module

Splits an imported batch into new transactions and duplicates of ones that
are already stored (or appear earlier in the same batch).
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Iterable

from .models import ImportedTransaction

logger = logging.getLogger(__name__)

# (scope_id, start_date, end_date) -> stored transaction keys in that range
ExistingKeysLookup = Callable[[str, date, date], Iterable[str]]


@dataclass(frozen=True)
class DuplicateCheckResult:
    """Result of a duplicate check. Both lists keep input order."""

    unique_transactions: tuple[ImportedTransaction, ...] = ()
    duplicate_transactions: tuple[ImportedTransaction, ...] = ()

    @property
    def unique_count(self) -> int:
        return len(self.unique_transactions)

    @property
    def duplicate_count(self) -> int:
        return len(self.duplicate_transactions)

    @property
    def total_count(self) -> int:
        return self.unique_count + self.duplicate_count

    @property
    def has_duplicates(self) -> bool:
        return bool(self.duplicate_transactions)

    @property
    def stats(self) -> dict:
        return {
            "total_checked": self.total_count,
            "unique": self.unique_count,
            "duplicates": self.duplicate_count,
            "duplicate_rate": self.duplicate_count / self.total_count if self.total_count else 0,
        }


class DuplicateDetector:
    """Detects duplicates by comparing transaction keys.

    A transaction is a duplicate if its key is already stored for the scope,
    or if an earlier transaction in the same batch has the same key. The first
    occurrence within a batch is kept as unique.
    """

    def __init__(self, existing_keys: ExistingKeysLookup):
        """Initialize the detector.

        Args:
            existing_keys: Returns the keys of stored transactions for a scope
                between two dates (inclusive). Called at most once per batch.
        """
        self.existing_keys = existing_keys

    def check_duplicates(
        self,
        scope_id: str,
        transactions: list[ImportedTransaction],
    ) -> DuplicateCheckResult:
        """Check a batch of transactions for duplicates.

        Args:
            scope_id: Business or account the transactions belong to
            transactions: Newly imported transactions

        Returns:
            DuplicateCheckResult with unique and duplicate transactions
        """
        if not transactions:
            return DuplicateCheckResult()

        start_date = min(txn.date for txn in transactions)
        end_date = max(txn.date for txn in transactions)
        stored = set(self.existing_keys(scope_id, start_date, end_date))

        unique = []
        duplicates = []
        seen_in_batch: set[str] = set()

        for txn in transactions:
            key = txn.transaction_key
            if key in stored or key in seen_in_batch:
                duplicates.append(txn)
            else:
                unique.append(txn)
            seen_in_batch.add(key)

        result = DuplicateCheckResult(
            unique_transactions=tuple(unique),
            duplicate_transactions=tuple(duplicates),
        )
        logger.debug(
            f"Duplicate check for {scope_id} ({start_date} to {end_date}): "
            f"{result.unique_count} unique, {result.duplicate_count} duplicates"
        )
        return result
