"""
Metro Bank CSV Parser

Parses Metro Bank CSV exports.

Format: Date,Transaction type,Description,Money out,Money in,Balance
"""

from .base import TypedDescriptionParser


class MetroBankParser(TypedDescriptionParser):
    """Parser for Metro Bank CSV exports."""

    BANK_NAME = "Metro Bank"
    BANK_CODE = "metro_bank"

    EXPECTED_HEADERS = (
        ("Date", "Transaction type", "Description", "Money out", "Money in", "Balance"),
    )

    MONEY_OUT_LABEL = "Money out"
    MONEY_IN_LABEL = "Money in"
