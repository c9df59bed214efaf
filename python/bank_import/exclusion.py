"""
Exclusion Rules Engine

Flags transactions that do not belong in profit and loss (transfers between
own accounts, tax payments, loans, credit card settlements and cash
withdrawals) so they can be left out of categorization.
"""

from dataclasses import dataclass

from .categories import Confidence, ExclusionReason
from .models import ImportedTransaction
from .rules import RuleTable, load_exclusion_rules


@dataclass(frozen=True)
class ExclusionResult:
    """Outcome of an exclusion check."""

    should_exclude: bool
    reason: ExclusionReason | None = None
    matched_keyword: str | None = None

    @property
    def confidence(self) -> Confidence:
        # Keyword hits are reliable; a miss only means no rule applied
        return Confidence.HIGH if self.should_exclude else Confidence.LOW

    @classmethod
    def not_excluded(cls) -> "ExclusionResult":
        return cls(should_exclude=False)


class ExclusionRulesEngine:
    """Evaluates a transaction description against the exclusion keyword table."""

    def __init__(self, rules: RuleTable[ExclusionReason] | None = None):
        """Initialize the engine.

        Args:
            rules: Ordered exclusion table. Defaults to the packaged
                ``exclusion_rules.yaml``.
        """
        self.rules = rules if rules is not None else load_exclusion_rules()

    def evaluate(self, transaction: ImportedTransaction) -> ExclusionResult:
        return self.evaluate_description(transaction.description)

    def evaluate_description(self, description: str | None) -> ExclusionResult:
        rule = self.rules.first_match(description)
        if rule is None:
            return ExclusionResult.not_excluded()
        return ExclusionResult(
            should_exclude=True,
            reason=rule.outcome,
            matched_keyword=rule.keyword,
        )
