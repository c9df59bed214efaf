"""
Categories Module

Expense and income categories, exclusion reasons and confidence bands used
by the categorization engines.
"""

from enum import Enum

# Confidence band thresholds
HIGH_THRESHOLD = 0.90
MEDIUM_THRESHOLD = 0.60


class ExpenseCategory(Enum):
    """Allowable expense categories with their SA103 (self-employment) box."""

    COST_OF_GOODS = ("cost_of_goods", 17, "Cost of goods bought for resale")
    SUBCONTRACTOR_COSTS = ("subcontractor_costs", 18, "Construction industry subcontractor costs")
    STAFF_COSTS = ("staff_costs", 19, "Wages, salaries and other staff costs")
    TRAVEL = ("travel", 20, "Car, van and travel expenses")
    TRAVEL_MILEAGE = ("travel_mileage", 20, "Vehicle running costs and mileage")
    PREMISES = ("premises", 21, "Rent, rates, power and insurance costs")
    REPAIRS = ("repairs", 22, "Repairs and maintenance of property and equipment")
    OFFICE_COSTS = ("office_costs", 23, "Phone, fax, stationery and other office costs")
    ADVERTISING = ("advertising", 24, "Advertising and business entertainment costs")
    INTEREST = ("interest", 25, "Interest on bank and other loans")
    FINANCIAL_CHARGES = ("financial_charges", 26, "Bank, credit card and other financial charges")
    BAD_DEBTS = ("bad_debts", 27, "Irrecoverable debts written off")
    PROFESSIONAL_FEES = ("professional_fees", 28, "Accountancy, legal and other professional fees")
    OTHER_EXPENSES = ("other_expenses", 30, "Other business expenses")

    def __init__(self, code: str, box: int, label: str):
        self.code = code
        self.box = box
        self.label = label

    @property
    def sa103_box(self) -> str:
        """Box label as shown on the SA103 form, e.g. ``"Box 23"``."""
        return f"Box {self.box}"

    @classmethod
    def from_code(cls, code: str) -> "ExpenseCategory":
        """Look up a category by its code or member name (case-insensitive)."""
        wanted = code.strip().lower()
        for category in cls:
            if category.code == wanted or category.name.lower() == wanted:
                return category
        raise ValueError(f"Unknown expense category: {code}")


class IncomeCategory(Enum):
    """Income categories."""
    SALES = "sales"
    OTHER_INCOME = "other_income"

    @classmethod
    def from_code(cls, code: str) -> "IncomeCategory":
        wanted = code.strip().lower()
        for category in cls:
            if category.value == wanted or category.name.lower() == wanted:
                return category
        raise ValueError(f"Unknown income category: {code}")


class ExclusionReason(Enum):
    """Why a transaction is left out of profit and loss."""
    TRANSFER = "transfer"
    TAX_PAYMENT = "tax_payment"
    LOAN = "loan"
    CREDIT_CARD_PAYMENT = "credit_card_payment"
    CASH_WITHDRAWAL = "cash_withdrawal"

    @classmethod
    def from_code(cls, code: str) -> "ExclusionReason":
        wanted = code.strip().lower()
        for reason in cls:
            if reason.value == wanted or reason.name.lower() == wanted:
                return reason
        raise ValueError(f"Unknown exclusion reason: {code}")


class Confidence(Enum):
    """Confidence band with its representative score."""
    HIGH = 0.95
    MEDIUM = 0.75
    LOW = 0.30

    @property
    def score(self) -> float:
        return self.value

    @classmethod
    def from_score(cls, score: float) -> "Confidence":
        """Band a numeric score: above 0.90 is HIGH, 0.60 and up is MEDIUM."""
        if score > HIGH_THRESHOLD:
            return cls.HIGH
        if score >= MEDIUM_THRESHOLD:
            return cls.MEDIUM
        return cls.LOW
