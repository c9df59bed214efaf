"""
Classification Engine

Determines whether a transaction is income or an expense and suggests a
category from keyword tables.

Direction comes from the sign of the amount alone. Category suggestions use
the first matching keyword; unmatched expenses fall back to "other expenses"
at low confidence and unmatched income to "sales" at medium confidence.
"""

import logging
from dataclasses import dataclass

from .categories import Confidence, ExpenseCategory, IncomeCategory
from .models import ImportedTransaction
from .rules import RuleTable, load_category_rules

logger = logging.getLogger(__name__)

DEFAULT_EXPENSE_CATEGORY = ExpenseCategory.OTHER_EXPENSES
DEFAULT_INCOME_CATEGORY = IncomeCategory.SALES


@dataclass(frozen=True)
class CategorySuggestion:
    """A suggested category and how confident the match is."""

    category: ExpenseCategory | IncomeCategory
    confidence: Confidence
    matched_keyword: str | None = None


@dataclass(frozen=True)
class ClassificationResult:
    """Direction and suggested category for one transaction."""

    is_income: bool
    suggested_category: ExpenseCategory | None
    income_category: IncomeCategory | None
    confidence_score: float
    confidence_level: Confidence

    @property
    def is_high_confidence(self) -> bool:
        return self.confidence_level is Confidence.HIGH

    @property
    def is_suggestion_worthy(self) -> bool:
        """Worth pre-filling for the user (medium or high confidence)."""
        return self.confidence_level in (Confidence.HIGH, Confidence.MEDIUM)

    @property
    def requires_manual_review(self) -> bool:
        return self.confidence_level is Confidence.LOW


class DescriptionCategorizer:
    """Suggests expense and income categories from description keywords."""

    def __init__(
        self,
        expense_rules: RuleTable[ExpenseCategory] | None = None,
        income_rules: RuleTable[IncomeCategory] | None = None,
    ):
        if expense_rules is None or income_rules is None:
            defaults = load_category_rules()
            expense_rules = expense_rules if expense_rules is not None else defaults.expense
            income_rules = income_rules if income_rules is not None else defaults.income
        self.expense_rules = expense_rules
        self.income_rules = income_rules

    def suggest_expense_category(self, description: str | None) -> CategorySuggestion:
        rule = self.expense_rules.first_match(description)
        if rule is None:
            return CategorySuggestion(DEFAULT_EXPENSE_CATEGORY, Confidence.LOW)
        return CategorySuggestion(rule.outcome, Confidence.HIGH, rule.keyword)

    def suggest_income_category(self, description: str | None) -> CategorySuggestion:
        rule = self.income_rules.first_match(description)
        if rule is None:
            return CategorySuggestion(DEFAULT_INCOME_CATEGORY, Confidence.MEDIUM)
        return CategorySuggestion(rule.outcome, Confidence.HIGH, rule.keyword)


class ClassificationEngine:
    """Classifies transactions by direction and suggested category."""

    def __init__(self, categorizer: DescriptionCategorizer | None = None):
        self.categorizer = categorizer or DescriptionCategorizer()

    def classify(self, transaction: ImportedTransaction) -> ClassificationResult:
        """Classify a transaction.

        Args:
            transaction: Transaction to classify

        Returns:
            ClassificationResult; ``suggested_category`` is None for income
        """
        if transaction.is_income:
            suggestion = self.categorizer.suggest_income_category(transaction.description)
            return ClassificationResult(
                is_income=True,
                suggested_category=None,
                income_category=suggestion.category,
                confidence_score=suggestion.confidence.score,
                confidence_level=suggestion.confidence,
            )

        suggestion = self.categorizer.suggest_expense_category(transaction.description)
        logger.debug(
            f"Classified '{transaction.description}' as {suggestion.category.name} "
            f"({suggestion.confidence.name})"
        )
        return ClassificationResult(
            is_income=False,
            suggested_category=suggestion.category,
            income_category=None,
            confidence_score=suggestion.confidence.score,
            confidence_level=suggestion.confidence,
        )
