"""
Revolut CSV Parser

Parses Revolut account statement CSV exports.

Format: Type,Product,Started Date,Completed Date,Description,Amount,Fee,
Currency,State,Balance

Only completed GBP rows are imported. Pending, reverted and declined rows and
rows in other currencies are skipped without an error.
"""

import logging

from ..models import ImportedTransaction
from .base import BaseCSVParser

logger = logging.getLogger(__name__)

COMPLETED_STATE = "COMPLETED"
BASE_CURRENCY = "GBP"


class RevolutParser(BaseCSVParser):
    """Parser for Revolut CSV exports."""

    BANK_NAME = "Revolut"
    BANK_CODE = "revolut"

    EXPECTED_HEADERS = (
        (
            "Type", "Product", "Started Date", "Completed Date", "Description",
            "Amount", "Fee", "Currency", "State", "Balance",
        ),
    )

    DATE_FORMATS = [
        "%Y-%m-%d %H:%M:%S",
        "%Y-%m-%d %H:%M",
        "%Y-%m-%d",
    ]

    COL_TYPE = 0
    COL_COMPLETED_DATE = 3
    COL_DESCRIPTION = 4
    COL_AMOUNT = 5
    COL_CURRENCY = 7
    COL_STATE = 8
    COL_BALANCE = 9

    def _parse_fields(self, fields: list[str]) -> ImportedTransaction | None:
        self._require_columns(fields, self.COL_BALANCE)

        state = fields[self.COL_STATE].strip().upper()
        currency = fields[self.COL_CURRENCY].strip().upper()
        if state != COMPLETED_STATE or currency != BASE_CURRENCY:
            logger.debug(f"Skipping Revolut row (state={state}, currency={currency})")
            return None

        txn_date = self._parse_date(fields[self.COL_COMPLETED_DATE])
        description = self._require_description(
            fields[self.COL_DESCRIPTION].strip() or fields[self.COL_TYPE].strip()
        )
        amount = self._parse_signed_amount(fields[self.COL_AMOUNT], "Amount")
        balance = self._parse_balance(fields[self.COL_BALANCE])

        return ImportedTransaction(
            date=txn_date,
            amount=amount,
            description=description,
            balance=balance,
        )
