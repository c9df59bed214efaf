"""
Manual Mapping Parser

Parser for CSV files whose layout is not recognised by any bank parser. The
user supplies the column positions through a ``ColumnMapping``.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..errors import RowParseError
from ..models import ImportedTransaction
from .base import BaseCSVParser

UNUSED_COLUMN = -1


class ColumnMapping(BaseModel):
    """User-supplied column positions for a manual import.

    Column indices are 0-based. ``-1`` marks an optional column as unused.
    When either ``debit_column`` or ``credit_column`` is set, the separate
    columns are used and ``amount_column`` is ignored.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    bank_name: str = "Manual Import"
    has_header_row: bool = True
    date_column: int = Field(default=0, ge=0)
    date_format: str | None = None
    description_column: int = Field(default=1, ge=0)
    amount_column: int = Field(default=2, ge=UNUSED_COLUMN)
    debit_column: int = Field(default=UNUSED_COLUMN, ge=UNUSED_COLUMN)
    credit_column: int = Field(default=UNUSED_COLUMN, ge=UNUSED_COLUMN)
    debit_is_negative: bool = True
    credit_is_positive: bool = True
    balance_column: int = Field(default=UNUSED_COLUMN, ge=UNUSED_COLUMN)
    reference_column: int = Field(default=UNUSED_COLUMN, ge=UNUSED_COLUMN)

    @field_validator("bank_name")
    @classmethod
    def _bank_name_non_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("bank_name must be non-empty")
        return v

    @field_validator("date_format")
    @classmethod
    def _blank_format_is_none(cls, v: str | None) -> str | None:
        return v or None

    @model_validator(mode="after")
    def _has_amount_source(self) -> "ColumnMapping":
        if not self.uses_separate_columns and self.amount_column < 0:
            raise ValueError("either amount_column or debit_column/credit_column must be set")
        return self

    @property
    def uses_separate_columns(self) -> bool:
        return self.debit_column >= 0 or self.credit_column >= 0

    @property
    def required_columns(self) -> list[int]:
        """Columns every data row must contain. The reference column is optional."""
        if self.uses_separate_columns:
            amount_columns = [self.debit_column, self.credit_column]
        else:
            amount_columns = [self.amount_column]
        return [
            column
            for column in [self.date_column, self.description_column, *amount_columns, self.balance_column]
            if column >= 0
        ]


class ManualMappingParser(BaseCSVParser):
    """Parser driven entirely by a user-supplied ColumnMapping."""

    BANK_NAME = "Manual Import"
    BANK_CODE = "manual"

    DATE_FORMATS = [
        "%d/%m/%Y",
        "%m/%d/%Y",
        "%Y-%m-%d",
        "%d-%b-%Y",
        "%d %b %Y",
    ]

    def __init__(self, mapping: ColumnMapping | None = None):
        self.mapping = mapping or ColumnMapping()

    @property
    def bank_name(self) -> str:
        return self.mapping.bank_name

    @property
    def has_header_row(self) -> bool:
        return self.mapping.has_header_row

    def expected_headers(self) -> list[str]:
        return []

    def can_parse(self, headers: list[str]) -> bool:
        # Never auto-detected; must be chosen explicitly
        return False

    def _date_formats(self) -> list[str]:
        if self.mapping.date_format:
            return [self.mapping.date_format, *self.DATE_FORMATS]
        return self.DATE_FORMATS

    def _parse_fields(self, fields: list[str]) -> ImportedTransaction | None:
        mapping = self.mapping
        self._require_columns(fields, max(mapping.required_columns))

        txn_date = self._parse_date(fields[mapping.date_column], self._date_formats())
        description = self._require_description(fields[mapping.description_column])
        amount = self._parse_amount(fields)

        balance = None
        if mapping.balance_column >= 0:
            balance = self._parse_balance(fields[mapping.balance_column])

        reference = None
        if mapping.reference_column >= 0:
            reference = self._field(fields, mapping.reference_column) or None

        return ImportedTransaction(
            date=txn_date,
            amount=amount,
            description=description,
            balance=balance,
            reference=reference,
        )

    def _parse_amount(self, fields: list[str]) -> Decimal:
        mapping = self.mapping
        if not mapping.uses_separate_columns:
            return self._parse_signed_amount(fields[mapping.amount_column])

        debit = self._clean_amount(self._field(fields, mapping.debit_column))
        credit = self._clean_amount(self._field(fields, mapping.credit_column))

        if debit is None and credit is None:
            raise RowParseError("No amount specified (both debit and credit are empty)")

        if debit is not None:
            return -debit if mapping.debit_is_negative else debit
        return credit if mapping.credit_is_positive else -credit
