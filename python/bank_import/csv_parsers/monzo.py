"""
Monzo CSV Parser

Parses Monzo CSV exports. Monzo appends optional columns (Currency, Local
amount, Notes, Address, ...) after the first eight, so only those are checked.

Format: Transaction ID,Date,Time,Type,Name,Emoji,Category,Amount,...
"""

from ..models import ImportedTransaction
from .base import BaseCSVParser

REQUIRED_HEADERS = (
    "Transaction ID", "Date", "Time", "Type", "Name", "Emoji", "Category", "Amount",
)


class MonzoParser(BaseCSVParser):
    """Parser for Monzo CSV exports."""

    BANK_NAME = "Monzo"
    BANK_CODE = "monzo"

    EXPECTED_HEADERS = (REQUIRED_HEADERS,)

    DATE_FORMATS = [
        "%d/%m/%Y",
        "%Y-%m-%d",
    ]

    COL_TRANSACTION_ID = 0
    COL_DATE = 1
    COL_TYPE = 3
    COL_NAME = 4
    COL_AMOUNT = 7

    def can_parse(self, headers: list[str]) -> bool:
        if len(headers) < len(REQUIRED_HEADERS):
            return False
        return self._headers_match(REQUIRED_HEADERS, headers[:len(REQUIRED_HEADERS)])

    def _parse_fields(self, fields: list[str]) -> ImportedTransaction | None:
        self._require_columns(fields, self.COL_AMOUNT)

        txn_date = self._parse_date(fields[self.COL_DATE])
        description = self._require_description(
            fields[self.COL_NAME].strip() or fields[self.COL_TYPE].strip()
        )
        amount = self._parse_signed_amount(fields[self.COL_AMOUNT], "Amount")
        transaction_id = fields[self.COL_TRANSACTION_ID].strip()

        return ImportedTransaction(
            date=txn_date,
            amount=amount,
            description=description,
            reference=transaction_id or None,
        )
