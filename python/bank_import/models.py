"""
Import Models Module

Canonical transaction shape shared by every bank parser, the parse error and
parse result records produced by the error-tolerant parser, and the staged
record a transaction becomes once imported for review.
"""

import re
import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from .categories import ExpenseCategory

_WHITESPACE = re.compile(r"\s+")


def normalize_description(description: str | None) -> str:
    """Lowercase, trim and collapse internal whitespace for keyword matching."""
    if description is None:
        return ""
    return _WHITESPACE.sub(" ", description.lower().strip())


def plain_amount(amount: Decimal) -> str:
    """Render an amount with trailing zeros stripped, never in exponent form.

    ``Decimal("100.00")`` becomes ``"100"`` and ``Decimal("-12.50")`` becomes
    ``"-12.5"``.
    """
    if amount == 0:
        return "0"
    return format(amount.normalize(), "f")


def transaction_fingerprint(txn_date: date, amount: Decimal, description: str) -> str:
    """Build the comparison key used for duplicate detection.

    Balance and reference are left out on purpose since they differ between
    re-exports of the same transaction. This is not a digest: distinct real
    transactions that share date, amount and description collide.
    """
    return f"{txn_date.isoformat()}|{plain_amount(amount)}|{normalize_description(description)}"


@dataclass(frozen=True)
class ImportedTransaction:
    """A bank transaction normalized from any supported CSV dialect.

    Amounts are signed: positive means money received, negative means money
    paid out.
    """

    date: date
    amount: Decimal
    description: str
    balance: Decimal | None = None
    reference: str | None = None

    def __post_init__(self):
        if self.date is None:
            raise ValueError("Transaction date cannot be null")
        if self.amount is None:
            raise ValueError("Transaction amount cannot be null")
        if self.description is None or not self.description.strip():
            raise ValueError("Transaction description cannot be null or blank")

    @property
    def is_income(self) -> bool:
        return self.amount > 0

    @property
    def is_expense(self) -> bool:
        """Zero-amount rows count as expenses, i.e. anything that is not income."""
        return not self.is_income

    @property
    def absolute_amount(self) -> Decimal:
        return abs(self.amount)

    @property
    def transaction_key(self) -> str:
        return transaction_fingerprint(self.date, self.amount, self.description)


@dataclass(frozen=True)
class ParseError:
    """A row that failed to parse. Line numbers are 1-based; the header is line 1."""

    line_number: int
    raw_line: str
    message: str


@dataclass(frozen=True)
class ParseResult:
    """Transactions and collected row errors for a single file."""

    transactions: tuple[ImportedTransaction, ...] = field(default_factory=tuple)
    errors: tuple[ParseError, ...] = field(default_factory=tuple)

    @property
    def success_count(self) -> int:
        return len(self.transactions)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def total_rows_processed(self) -> int:
        return self.success_count + self.error_count

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


class ReviewStatus(Enum):
    """Review state of a staged transaction."""
    PENDING = "pending"
    CATEGORIZED = "categorized"
    EXCLUDED = "excluded"

    @property
    def is_reviewed(self) -> bool:
        return self is not ReviewStatus.PENDING


@dataclass(frozen=True)
class StagedTransaction:
    """An imported transaction waiting for review.

    Every ``with_*`` method returns an updated copy; the original is never
    modified.
    """

    id: str
    scope_id: str
    import_id: str
    source_format_id: str | None
    date: date
    amount: Decimal
    description: str
    reference: str | None
    transaction_hash: str
    created_at: datetime
    updated_at: datetime
    review_status: ReviewStatus = ReviewStatus.PENDING
    income_id: str | None = None
    expense_id: str | None = None
    exclusion_reason: str | None = None
    confidence_score: float | None = None
    suggested_category: ExpenseCategory | None = None

    def __post_init__(self):
        if not self.scope_id:
            raise ValueError("scope_id cannot be empty")
        if not self.import_id:
            raise ValueError("import_id cannot be empty")
        if self.description is None or not self.description.strip():
            raise ValueError("description cannot be null or empty")
        if not self.transaction_hash:
            raise ValueError("transaction_hash cannot be empty")

    @classmethod
    def create(
        cls,
        scope_id: str,
        import_id: str,
        transaction: ImportedTransaction,
        now: datetime,
        source_format_id: str | None = None,
    ) -> "StagedTransaction":
        """Stage a freshly imported transaction in PENDING state."""
        return cls(
            id=str(uuid.uuid4()),
            scope_id=scope_id,
            import_id=import_id,
            source_format_id=source_format_id,
            date=transaction.date,
            amount=transaction.amount,
            description=transaction.description,
            reference=transaction.reference,
            transaction_hash=transaction.transaction_key,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_income(self) -> bool:
        return self.amount > 0

    @property
    def is_reviewed(self) -> bool:
        return self.review_status.is_reviewed

    def with_suggestion(
        self, category: ExpenseCategory | None, confidence: float, now: datetime
    ) -> "StagedTransaction":
        """Attach a category suggestion without changing the review status."""
        return replace(self, suggested_category=category, confidence_score=confidence, updated_at=now)

    def with_excluded(self, reason: str, now: datetime) -> "StagedTransaction":
        return replace(
            self,
            review_status=ReviewStatus.EXCLUDED,
            income_id=None,
            expense_id=None,
            exclusion_reason=reason,
            updated_at=now,
        )

    def with_categorized_as_income(self, income_id: str, now: datetime) -> "StagedTransaction":
        return replace(
            self,
            review_status=ReviewStatus.CATEGORIZED,
            income_id=income_id,
            expense_id=None,
            exclusion_reason=None,
            updated_at=now,
        )

    def with_categorized_as_expense(self, expense_id: str, now: datetime) -> "StagedTransaction":
        return replace(
            self,
            review_status=ReviewStatus.CATEGORIZED,
            income_id=None,
            expense_id=expense_id,
            exclusion_reason=None,
            updated_at=now,
        )
