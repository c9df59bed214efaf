"""
Starling CSV Parser

Parses Starling Bank CSV exports.

Format: Date,Counter Party,Reference,Type,Amount (GBP),Balance (GBP)
"""

from ..models import ImportedTransaction
from .base import BaseCSVParser

NO_DESCRIPTION = "No description"


class StarlingParser(BaseCSVParser):
    """Parser for Starling CSV exports.

    Amounts are already signed. The payment reference is kept on the
    transaction.
    """

    BANK_NAME = "Starling"
    BANK_CODE = "starling"

    EXPECTED_HEADERS = (
        ("Date", "Counter Party", "Reference", "Type", "Amount (GBP)", "Balance (GBP)"),
    )

    COL_DATE = 0
    COL_COUNTER_PARTY = 1
    COL_REFERENCE = 2
    COL_TYPE = 3
    COL_AMOUNT = 4
    COL_BALANCE = 5

    def _parse_fields(self, fields: list[str]) -> ImportedTransaction | None:
        self._require_columns(fields, self.COL_BALANCE)

        txn_date = self._parse_date(fields[self.COL_DATE])
        counter_party = fields[self.COL_COUNTER_PARTY].strip()
        reference = fields[self.COL_REFERENCE].strip()
        txn_type = fields[self.COL_TYPE].strip()

        amount = self._parse_signed_amount(fields[self.COL_AMOUNT], "Amount (GBP)")
        balance = self._parse_balance(fields[self.COL_BALANCE])

        return ImportedTransaction(
            date=txn_date,
            amount=amount,
            description=self._build_description(counter_party, reference, txn_type),
            balance=balance,
            reference=reference or None,
        )

    def _build_description(self, counter_party: str, reference: str, txn_type: str) -> str:
        """Counter party and reference, falling back to the type, then a placeholder."""
        if counter_party and reference and reference != counter_party:
            return f"{counter_party} - {reference}"
        if counter_party or reference:
            return counter_party or reference
        if txn_type:
            return txn_type
        return NO_DESCRIPTION
