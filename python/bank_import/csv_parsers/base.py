"""
Base CSV Parser Module

Abstract base class for bank-specific CSV parsers.
"""

import csv
import re
from abc import ABC, abstractmethod
from contextlib import closing
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Iterator

from ..errors import CsvParseError, RowParseError
from ..models import ImportedTransaction

# Currency markers, thousands separators and whitespace removed before Decimal()
_AMOUNT_NOISE = re.compile(r"GBP|Â£|£|,|\s")


def split_csv_line(line: str) -> list[str]:
    """Split one CSV line into raw fields.

    Double quotes group a field, ``""`` inside quotes is an escaped quote and a
    comma inside quotes is not a separator.
    """
    return next(csv.reader([line]), [])


def parse_header_line(line: str) -> list[str]:
    """Split a header line and trim each column name."""
    return [column.strip() for column in split_csv_line(line.lstrip("\ufeff"))]


class BaseCSVParser(ABC):
    """Abstract base class for bank CSV parsers."""

    BANK_NAME: str = "Unknown"
    BANK_CODE: str = "unknown"

    # One or more accepted header layouts, compared case-insensitively
    EXPECTED_HEADERS: tuple[tuple[str, ...], ...] = ()

    # Date format patterns to try, in order
    DATE_FORMATS = [
        "%d/%m/%Y",
        "%d-%b-%Y",
    ]

    @property
    def bank_name(self) -> str:
        return self.BANK_NAME

    @property
    def has_header_row(self) -> bool:
        return True

    @property
    def source_format_id(self) -> str:
        """Format identifier stored with staged transactions, e.g. ``csv-metro-bank``."""
        return "csv-" + re.sub(r"\s+", "-", self.bank_name.lower())

    def expected_headers(self) -> list[str]:
        """Return the primary header layout."""
        return list(self.EXPECTED_HEADERS[0]) if self.EXPECTED_HEADERS else []

    def can_parse(self, headers: list[str]) -> bool:
        """Check whether a header row belongs to this bank's export format."""
        return any(self._headers_match(layout, headers) for layout in self.EXPECTED_HEADERS)

    @staticmethod
    def _headers_match(expected: tuple[str, ...], headers: list[str]) -> bool:
        if len(headers) != len(expected):
            return False
        return all(
            want.lower() == got.strip().lower()
            for want, got in zip(expected, headers)
        )

    def parse(self, file_path: Path | str, encoding: str = "utf-8") -> list[ImportedTransaction]:
        """Parse a CSV file, failing on the first bad row.

        Args:
            file_path: Path to the CSV file
            encoding: Text encoding of the file

        Returns:
            Parsed transactions in file order

        Raises:
            CsvParseError: If the file cannot be read or any row is invalid
        """
        file_path = Path(file_path)
        transactions = []

        with closing(self.iter_data_lines(file_path, encoding)) as lines:
            for line_number, line in lines:
                try:
                    transaction = self.parse_line(line)
                except ValueError as e:
                    raise CsvParseError(str(e), file_path.name, line_number) from e
                if transaction is not None:
                    transactions.append(transaction)

        return transactions

    def iter_data_lines(self, file_path: Path, encoding: str) -> Iterator[tuple[int, str]]:
        """Yield ``(line_number, line)`` for every non-blank data line.

        The header (the first non-blank line) is skipped when the format has
        one. Line numbers are 1-based and count the header and blank lines.

        Raises:
            CsvParseError: If the file cannot be read or has no header row
        """
        line_number = 0
        header_seen = not self.has_header_row

        try:
            with open(file_path, encoding=encoding, newline="") as f:
                for raw_line in f:
                    line_number += 1
                    line = raw_line.rstrip("\r\n")
                    if line_number == 1:
                        line = line.lstrip("\ufeff")

                    if not line.strip():
                        continue

                    if not header_seen:
                        header_seen = True
                        continue

                    yield line_number, line
        except (OSError, UnicodeDecodeError, LookupError) as e:
            raise CsvParseError("Failed to read CSV file", file_path.name, line_number) from e

        if not header_seen:
            raise CsvParseError("CSV file has no header row", file_path.name)

    def parse_line(self, line: str) -> ImportedTransaction | None:
        """Parse one data line.

        Returns:
            ImportedTransaction, or None if the row is deliberately skipped

        Raises:
            RowParseError: If the row is invalid
        """
        return self._parse_fields(split_csv_line(line))

    @abstractmethod
    def _parse_fields(self, fields: list[str]) -> ImportedTransaction | None:
        """Convert the raw fields of a row into a transaction.

        Args:
            fields: Raw (untrimmed) field values

        Returns:
            ImportedTransaction or None if the row should be skipped
        """
        pass

    def _require_columns(self, fields: list[str], max_index: int) -> None:
        if len(fields) <= max_index:
            raise RowParseError(
                f"Invalid number of columns (expected at least {max_index + 1}, found {len(fields)})"
            )

    @staticmethod
    def _field(fields: list[str], index: int) -> str:
        """Return a trimmed field, or an empty string if the column is absent."""
        if 0 <= index < len(fields):
            return fields[index].strip()
        return ""

    def _parse_date(self, date_str: str, formats: list[str] | None = None) -> date:
        """Parse a date string using the parser's date format patterns.

        Raises:
            RowParseError: If the string is blank or matches no format
        """
        date_str = date_str.strip()
        if not date_str:
            raise RowParseError("Empty date not allowed")

        for fmt in formats or self.DATE_FORMATS:
            try:
                return datetime.strptime(date_str, fmt).date()
            except ValueError:
                continue

        raise RowParseError(f"Invalid date format: {date_str}")

    @staticmethod
    def _clean_amount(amount_str: str) -> Decimal | None:
        """Parse an amount string to Decimal.

        Returns:
            Parsed Decimal, or None when nothing is left after cleaning
        """
        cleaned = _AMOUNT_NOISE.sub("", amount_str).replace("\u2212", "-")
        if not cleaned:
            return None

        try:
            amount = Decimal(cleaned)
        except InvalidOperation:
            raise RowParseError(f"Invalid amount format: {amount_str.strip()}") from None

        if not amount.is_finite():
            raise RowParseError(f"Invalid amount format: {amount_str.strip()}")
        return amount

    def _parse_signed_amount(self, amount_str: str, label: str = "Amount") -> Decimal:
        """Parse a single pre-signed amount column."""
        amount = self._clean_amount(amount_str)
        if amount is None:
            raise RowParseError(f"{label} cannot be empty")
        return amount

    def _parse_out_in_amount(
        self,
        money_out: str,
        money_in: str,
        out_label: str,
        in_label: str,
    ) -> Decimal:
        """Combine separate paid-out and paid-in columns into a signed amount.

        Money out is negated, money in stays positive. A row with neither is an
        error, never a zero-amount transaction.
        """
        out_value = self._clean_amount(money_out)
        in_value = self._clean_amount(money_in)

        if out_value is None and in_value is None:
            raise RowParseError(
                f"No amount specified (both {out_label} and {in_label} are empty)"
            )

        if out_value is not None:
            return -out_value
        return in_value

    def _parse_balance(self, balance_str: str) -> Decimal | None:
        try:
            return self._clean_amount(balance_str)
        except RowParseError:
            raise RowParseError(f"Invalid balance format: {balance_str.strip()}") from None

    @staticmethod
    def _combine(primary: str, secondary: str) -> str:
        """Join two description parts as ``"primary - secondary"``, skipping blanks."""
        if primary and secondary:
            return f"{primary} - {secondary}"
        return primary or secondary

    @staticmethod
    def _require_description(description: str) -> str:
        if not description.strip():
            raise RowParseError("Empty description not allowed")
        return description.strip()


class TypedDescriptionParser(BaseCSVParser):
    """Base for dialects with a transaction type column and separate out/in columns.

    The description becomes ``"TYPE - DESCRIPTION"``, or whichever of the two is
    present when the other is blank.
    """

    COL_DATE = 0
    COL_TYPE = 1
    COL_DESCRIPTION = 2
    COL_MONEY_OUT = 3
    COL_MONEY_IN = 4
    COL_BALANCE = 5

    MONEY_OUT_LABEL = "Money Out"
    MONEY_IN_LABEL = "Money In"

    def _columns_for(self, fields: list[str]) -> tuple[int, int, int, int, int, int]:
        """Return (date, type, description, out, in, balance) column indices for a row."""
        return (
            self.COL_DATE,
            self.COL_TYPE,
            self.COL_DESCRIPTION,
            self.COL_MONEY_OUT,
            self.COL_MONEY_IN,
            self.COL_BALANCE,
        )

    def _parse_fields(self, fields: list[str]) -> ImportedTransaction | None:
        columns = self._columns_for(fields)
        col_date, col_type, col_desc, col_out, col_in, col_balance = columns
        self._require_columns(fields, max(columns))

        txn_date = self._parse_date(fields[col_date])
        description = self._require_description(
            self._combine(fields[col_type].strip(), fields[col_desc].strip())
        )
        amount = self._parse_out_in_amount(
            fields[col_out],
            fields[col_in],
            self.MONEY_OUT_LABEL,
            self.MONEY_IN_LABEL,
        )
        balance = self._parse_balance(fields[col_balance])

        return ImportedTransaction(
            date=txn_date,
            amount=amount,
            description=description,
            balance=balance,
        )
