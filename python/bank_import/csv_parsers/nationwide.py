"""
Nationwide CSV Parser

Parses Nationwide Building Society current account CSV exports.

Format: Date,Transaction type,Description,Paid out,Paid in,Balance
"""

from .base import TypedDescriptionParser


class NationwideParser(TypedDescriptionParser):
    """Parser for Nationwide CSV exports."""

    BANK_NAME = "Nationwide"
    BANK_CODE = "nationwide"

    EXPECTED_HEADERS = (
        ("Date", "Transaction type", "Description", "Paid out", "Paid in", "Balance"),
    )

    # Nationwide's own exports use "15 Jun 2025"
    DATE_FORMATS = [
        "%d/%m/%Y",
        "%d %b %Y",
        "%d-%b-%Y",
    ]

    MONEY_OUT_LABEL = "Paid out"
    MONEY_IN_LABEL = "Paid in"
