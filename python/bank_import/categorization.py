"""
Categorization Engine

Combines the exclusion rules and the classification engine into a single
recommendation per transaction. Exclusion is checked first; an excluded
transaction gets no category suggestion.
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from .categories import Confidence, ExclusionReason, ExpenseCategory
from .classification import ClassificationEngine
from .exclusion import ExclusionRulesEngine
from .models import ImportedTransaction, StagedTransaction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategorizationRecommendation:
    """What the engine recommends doing with a transaction."""

    is_income: bool
    should_exclude: bool
    exclusion_reason: ExclusionReason | None
    expense_category: ExpenseCategory | None
    sa103_box: str | None
    confidence_score: float
    confidence_level: Confidence

    @classmethod
    def excluded(cls, is_income: bool, reason: ExclusionReason, confidence: Confidence) -> "CategorizationRecommendation":
        return cls(
            is_income=is_income,
            should_exclude=True,
            exclusion_reason=reason,
            expense_category=None,
            sa103_box=None,
            confidence_score=confidence.score,
            confidence_level=confidence,
        )


class CategorizationEngine:
    """Produces categorization recommendations for imported transactions."""

    def __init__(
        self,
        exclusion_engine: ExclusionRulesEngine | None = None,
        classification_engine: ClassificationEngine | None = None,
    ):
        self.exclusion_engine = exclusion_engine or ExclusionRulesEngine()
        self.classification_engine = classification_engine or ClassificationEngine()

    def categorize(self, transaction: ImportedTransaction) -> CategorizationRecommendation:
        """Recommend exclusion or a category for a transaction.

        Args:
            transaction: Transaction to categorize

        Returns:
            CategorizationRecommendation. ``sa103_box`` is only set for
            expense categories.
        """
        exclusion = self.exclusion_engine.evaluate(transaction)
        if exclusion.should_exclude:
            return CategorizationRecommendation.excluded(
                transaction.is_income, exclusion.reason, exclusion.confidence
            )

        classification = self.classification_engine.classify(transaction)
        category = classification.suggested_category

        return CategorizationRecommendation(
            is_income=classification.is_income,
            should_exclude=False,
            exclusion_reason=None,
            expense_category=category,
            sa103_box=category.sa103_box if category is not None else None,
            confidence_score=classification.confidence_score,
            confidence_level=classification.confidence_level,
        )

    def apply_recommendation(
        self,
        staged: StagedTransaction,
        recommendation: CategorizationRecommendation,
        now: datetime,
    ) -> StagedTransaction:
        """Apply a recommendation to a staged transaction.

        Exclusions move the transaction to EXCLUDED with the reason name
        (e.g. ``"CASH_WITHDRAWAL"``). Expense suggestions are attached while
        the transaction stays PENDING. Income recommendations carry no
        expense category and leave the transaction unchanged.
        """
        if recommendation.should_exclude:
            return staged.with_excluded(recommendation.exclusion_reason.name, now)

        if recommendation.expense_category is not None:
            return staged.with_suggestion(
                recommendation.expense_category, recommendation.confidence_score, now
            )

        return staged
