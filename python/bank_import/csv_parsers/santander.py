"""
Santander CSV Parser

Parses Santander UK CSV exports, which carry a single signed amount column.

Format: Date,Description,Amount,Balance
"""

from ..models import ImportedTransaction
from .base import BaseCSVParser


class SantanderParser(BaseCSVParser):
    """Parser for Santander CSV exports."""

    BANK_NAME = "Santander"
    BANK_CODE = "santander"

    EXPECTED_HEADERS = (
        ("Date", "Description", "Amount", "Balance"),
    )

    COL_DATE = 0
    COL_DESCRIPTION = 1
    COL_AMOUNT = 2
    COL_BALANCE = 3

    def _parse_fields(self, fields: list[str]) -> ImportedTransaction | None:
        self._require_columns(fields, self.COL_BALANCE)

        return ImportedTransaction(
            date=self._parse_date(fields[self.COL_DATE]),
            amount=self._parse_signed_amount(fields[self.COL_AMOUNT]),
            description=self._require_description(fields[self.COL_DESCRIPTION]),
            balance=self._parse_balance(fields[self.COL_BALANCE]),
        )
