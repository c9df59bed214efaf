"""
Lloyds CSV Parser

Parses Lloyds Bank CSV exports. Lloyds produces two layouts:

- Simplified: Transaction Date,Transaction Type,Description,Debit,Credit,Balance
- Full: Transaction Date,Transaction Type,Sort Code,Account Number,
  Transaction Description,Debit Amount,Credit Amount,Balance
"""

from .base import TypedDescriptionParser

SIMPLIFIED_HEADERS = (
    "Transaction Date", "Transaction Type", "Description", "Debit", "Credit", "Balance",
)
FULL_HEADERS = (
    "Transaction Date", "Transaction Type", "Sort Code", "Account Number",
    "Transaction Description", "Debit Amount", "Credit Amount", "Balance",
)


class LloydsParser(TypedDescriptionParser):
    """Parser for Lloyds CSV exports (simplified and full layouts)."""

    BANK_NAME = "Lloyds"
    BANK_CODE = "lloyds"

    EXPECTED_HEADERS = (SIMPLIFIED_HEADERS, FULL_HEADERS)

    MONEY_OUT_LABEL = "Debit"
    MONEY_IN_LABEL = "Credit"

    # Full layout positions; date and type share the simplified positions
    FULL_COL_DESCRIPTION = 4
    FULL_COL_DEBIT = 5
    FULL_COL_CREDIT = 6
    FULL_COL_BALANCE = 7

    def _columns_for(self, fields: list[str]) -> tuple[int, int, int, int, int, int]:
        """Pick the layout by row width rather than re-reading the header."""
        if len(fields) >= len(FULL_HEADERS):
            return (
                self.COL_DATE,
                self.COL_TYPE,
                self.FULL_COL_DESCRIPTION,
                self.FULL_COL_DEBIT,
                self.FULL_COL_CREDIT,
                self.FULL_COL_BALANCE,
            )
        return super()._columns_for(fields)
