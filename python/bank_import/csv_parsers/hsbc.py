"""
HSBC CSV Parser

Parses HSBC UK current account CSV exports.

Format: Date,Type,Description,Paid Out,Paid In,Balance
"""

from .base import TypedDescriptionParser


class HsbcParser(TypedDescriptionParser):
    """Parser for HSBC CSV exports."""

    BANK_NAME = "HSBC"
    BANK_CODE = "hsbc"

    EXPECTED_HEADERS = (
        ("Date", "Type", "Description", "Paid Out", "Paid In", "Balance"),
    )

    MONEY_OUT_LABEL = "Paid Out"
    MONEY_IN_LABEL = "Paid In"
