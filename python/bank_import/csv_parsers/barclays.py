"""
Barclays CSV Parser

Parses Barclays current account CSV exports.

Format: Date,Description,Money Out,Money In,Balance
"""

from ..models import ImportedTransaction
from .base import BaseCSVParser


class BarclaysParser(BaseCSVParser):
    """Parser for Barclays CSV exports."""

    BANK_NAME = "Barclays"
    BANK_CODE = "barclays"

    EXPECTED_HEADERS = (
        ("Date", "Description", "Money Out", "Money In", "Balance"),
    )

    COL_DATE = 0
    COL_DESCRIPTION = 1
    COL_MONEY_OUT = 2
    COL_MONEY_IN = 3
    COL_BALANCE = 4

    def _parse_fields(self, fields: list[str]) -> ImportedTransaction | None:
        """Parse a Barclays CSV row."""
        self._require_columns(fields, self.COL_BALANCE)

        txn_date = self._parse_date(fields[self.COL_DATE])
        description = self._require_description(fields[self.COL_DESCRIPTION])
        amount = self._parse_out_in_amount(
            fields[self.COL_MONEY_OUT],
            fields[self.COL_MONEY_IN],
            "Money Out",
            "Money In",
        )
        balance = self._parse_balance(fields[self.COL_BALANCE])

        return ImportedTransaction(
            date=txn_date,
            amount=amount,
            description=description,
            balance=balance,
        )
