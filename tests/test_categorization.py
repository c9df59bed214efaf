"""
Categorization Tests

Tests for keyword rule tables, exclusion rules, classification and the
combined categorization engine.
"""

import sys
from datetime import timedelta
from decimal import Decimal
from pathlib import Path
from unittest.mock import Mock

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "python"))

from bank_import.categories import Confidence, ExclusionReason, ExpenseCategory, IncomeCategory
from bank_import.categorization import CategorizationEngine
from bank_import.classification import ClassificationEngine, DescriptionCategorizer
from bank_import.errors import RuleConfigError
from bank_import.exclusion import ExclusionResult, ExclusionRulesEngine
from bank_import.models import ReviewStatus, StagedTransaction
from bank_import.rules import (
    ImportSettings,
    RuleTable,
    load_category_rules,
    load_exclusion_rules,
    load_import_settings,
)


class TestConfidence:
    """Tests for confidence bands."""

    @pytest.mark.parametrize("score,band", [
        (0.95, Confidence.HIGH),
        (0.91, Confidence.HIGH),
        (0.90, Confidence.MEDIUM),
        (0.75, Confidence.MEDIUM),
        (0.60, Confidence.MEDIUM),
        (0.59, Confidence.LOW),
        (0.0, Confidence.LOW),
    ])
    def test_from_score(self, score, band):
        assert Confidence.from_score(score) is band

    def test_band_scores(self):
        assert Confidence.HIGH.score == 0.95
        assert Confidence.MEDIUM.score == 0.75
        assert Confidence.LOW.score == 0.30


class TestExpenseCategory:
    """Tests for SA103 box mapping."""

    @pytest.mark.parametrize("category,box", [
        (ExpenseCategory.COST_OF_GOODS, "Box 17"),
        (ExpenseCategory.STAFF_COSTS, "Box 19"),
        (ExpenseCategory.TRAVEL, "Box 20"),
        (ExpenseCategory.TRAVEL_MILEAGE, "Box 20"),
        (ExpenseCategory.PREMISES, "Box 21"),
        (ExpenseCategory.OFFICE_COSTS, "Box 23"),
        (ExpenseCategory.ADVERTISING, "Box 24"),
        (ExpenseCategory.INTEREST, "Box 25"),
        (ExpenseCategory.FINANCIAL_CHARGES, "Box 26"),
        (ExpenseCategory.PROFESSIONAL_FEES, "Box 28"),
        (ExpenseCategory.OTHER_EXPENSES, "Box 30"),
    ])
    def test_sa103_box(self, category, box):
        assert category.sa103_box == box

    def test_from_code(self):
        assert ExpenseCategory.from_code("office_costs") is ExpenseCategory.OFFICE_COSTS
        assert ExpenseCategory.from_code("TRAVEL") is ExpenseCategory.TRAVEL

        with pytest.raises(ValueError):
            ExpenseCategory.from_code("groceries")


class TestRuleTables:
    """Tests for rule loading."""

    def test_packaged_tables_load(self, config_dir):
        exclusion = load_exclusion_rules(config_dir)
        categories = load_category_rules(config_dir)

        assert len(exclusion) > 0
        assert len(categories.expense) > 0
        assert len(categories.income) == 3

    def test_tables_are_cached(self, config_dir):
        assert load_exclusion_rules(config_dir) is load_exclusion_rules(config_dir)
        assert load_exclusion_rules() is load_exclusion_rules(config_dir)

    def test_first_match_wins(self):
        table = RuleTable.of([
            ("transfer", ExclusionReason.TRANSFER),
            ("loan", ExclusionReason.LOAN),
        ])

        assert table.first_match("LOAN TRANSFER").outcome is ExclusionReason.TRANSFER

    def test_trailing_space_keywords_preserved(self, config_dir):
        keywords = [rule.keyword for rule in load_category_rules(config_dir).expense]

        assert "ee " in keywords
        assert "bp " in keywords

    def test_missing_rule_file(self, tmp_path):
        with pytest.raises(RuleConfigError, match="not found"):
            load_exclusion_rules(tmp_path)

    def test_unknown_reason(self, tmp_path):
        (tmp_path / "exclusion_rules.yaml").write_text(
            "rules:\n  - keyword: paypal\n    reason: wallet\n"
        )

        with pytest.raises(RuleConfigError, match="Unknown exclusion reason"):
            load_exclusion_rules(tmp_path)

    def test_rule_without_keyword(self, tmp_path):
        (tmp_path / "category_keywords.yaml").write_text(
            "expense:\n  - category: travel\n"
        )

        with pytest.raises(RuleConfigError, match="no keyword"):
            load_category_rules(tmp_path)

    def test_invalid_yaml(self, tmp_path):
        (tmp_path / "exclusion_rules.yaml").write_text("rules: [unclosed\n")

        with pytest.raises(RuleConfigError, match="Invalid YAML"):
            load_exclusion_rules(tmp_path)

    def test_import_settings(self, config_dir):
        settings = load_import_settings(config_dir)

        assert settings.max_file_size_bytes == 10 * 1024 * 1024
        assert settings.retention_years == 6
        assert settings.default_encoding == "utf-8"

    def test_import_settings_defaults(self, tmp_path):
        """Missing settings file falls back to defaults."""
        settings = load_import_settings(tmp_path)

        assert settings.max_file_size_bytes == 10 * 1024 * 1024
        assert settings.retention_years == 6

    def test_import_settings_partial_file_uses_defaults(self, tmp_path):
        (tmp_path / "import_settings.yaml").write_text("retention_years: 7\n")

        settings = load_import_settings(tmp_path)

        assert settings.retention_years == 7
        assert settings.max_file_size_bytes == ImportSettings().max_file_size_bytes
        assert settings.default_encoding == "utf-8"

    def test_import_settings_must_be_mapping(self, tmp_path):
        (tmp_path / "import_settings.yaml").write_text("- max_file_size_mb\n- 10\n")

        with pytest.raises(RuleConfigError, match="expected a mapping"):
            load_import_settings(tmp_path)

    def test_import_settings_bad_value(self, tmp_path):
        (tmp_path / "import_settings.yaml").write_text("max_file_size_mb: lots\n")

        with pytest.raises(RuleConfigError, match="import_settings.yaml"):
            load_import_settings(tmp_path)


class TestExclusionRulesEngine:
    """Tests for ExclusionRulesEngine."""

    @pytest.fixture
    def engine(self):
        return ExclusionRulesEngine()

    @pytest.mark.parametrize("description,reason", [
        ("TFR TO SAVINGS", ExclusionReason.TRANSFER),
        ("TRANSFER TO ISA", ExclusionReason.TRANSFER),
        ("FPO JOHN SMITH", ExclusionReason.TRANSFER),
        ("FPI ACME LTD", ExclusionReason.TRANSFER),
        ("HMRC PAYE", ExclusionReason.TAX_PAYMENT),
        ("HMRC P/MENT ON ACCT", ExclusionReason.TAX_PAYMENT),
        ("HMRC SELF ASSESSMENT", ExclusionReason.TAX_PAYMENT),
        ("LOAN CREDIT", ExclusionReason.LOAN),
        ("LOAN PAYMENT", ExclusionReason.LOAN),
        ("CC PAYMENT", ExclusionReason.CREDIT_CARD_PAYMENT),
        ("CREDIT CARD PAYMENT VISA", ExclusionReason.CREDIT_CARD_PAYMENT),
        ("ATM WITHDRAWAL LONDON", ExclusionReason.CASH_WITHDRAWAL),
        ("CASH WITHDRAWAL", ExclusionReason.CASH_WITHDRAWAL),
    ])
    def test_excluded(self, engine, make_transaction, description, reason):
        result = engine.evaluate(make_transaction(description=description))

        assert result.should_exclude is True
        assert result.reason is reason
        assert result.confidence is Confidence.HIGH

    def test_case_insensitive(self, engine, make_transaction):
        assert engine.evaluate(make_transaction(description="hmrc paye")).reason is ExclusionReason.TAX_PAYMENT

    def test_rule_order_governs(self, engine, make_transaction):
        """Loan rules come before transfer rules."""
        result = engine.evaluate(make_transaction(description="LOAN REPAYMENT TRANSFER"))

        assert result.reason is ExclusionReason.LOAN
        assert result.matched_keyword == "loan repayment"

    def test_not_excluded(self, engine, make_transaction):
        result = engine.evaluate(make_transaction(description="TESCO STORES"))

        assert result.should_exclude is False
        assert result.reason is None
        assert result.confidence is Confidence.LOW

    def test_custom_table(self, make_transaction):
        engine = ExclusionRulesEngine(RuleTable.of([("pot", ExclusionReason.TRANSFER)]))

        assert engine.evaluate(make_transaction(description="SAVINGS POT")).should_exclude is True
        assert engine.evaluate(make_transaction(description="HMRC PAYE")).should_exclude is False


class TestDescriptionCategorizer:
    """Tests for keyword category suggestions."""

    @pytest.fixture
    def categorizer(self):
        return DescriptionCategorizer()

    @pytest.mark.parametrize("description,category", [
        ("AMAZON.CO.UK", ExpenseCategory.OFFICE_COSTS),
        ("MICROSOFT 365", ExpenseCategory.OFFICE_COSTS),
        ("UBER TRIP TO CLIENT", ExpenseCategory.TRAVEL),
        ("TRAINLINE TICKET", ExpenseCategory.TRAVEL),
        ("SHELL PETROL STATION", ExpenseCategory.TRAVEL_MILEAGE),
        ("BRITISH GAS BILL", ExpenseCategory.PREMISES),
        ("ACCOUNTANT FEE", ExpenseCategory.PROFESSIONAL_FEES),
        ("MONTHLY BANK CHARGE", ExpenseCategory.FINANCIAL_CHARGES),
        ("GOOGLE ADS", ExpenseCategory.ADVERTISING),
        ("PAYROLL PROCESSING", ExpenseCategory.STAFF_COSTS),
    ])
    def test_expense_keywords(self, categorizer, description, category):
        suggestion = categorizer.suggest_expense_category(description)

        assert suggestion.category is category
        assert suggestion.confidence is Confidence.HIGH

    def test_expense_default(self, categorizer):
        suggestion = categorizer.suggest_expense_category("RANDOM VENDOR")

        assert suggestion.category is ExpenseCategory.OTHER_EXPENSES
        assert suggestion.confidence is Confidence.LOW
        assert suggestion.matched_keyword is None

    def test_short_keyword_matches_inside_words(self, categorizer):
        """Keywords are plain substrings, so "ee " also hits "coffee shop"."""
        suggestion = categorizer.suggest_expense_category("Coffee Shop")

        assert suggestion.category is ExpenseCategory.OFFICE_COSTS
        assert suggestion.matched_keyword == "ee "

    def test_keyword_file_warns_about_substring_matches(self, config_dir):
        header = (config_dir / "category_keywords.yaml").read_text(encoding="utf-8")

        assert "ignores word boundaries" in header

    def test_income_keywords(self, categorizer):
        suggestion = categorizer.suggest_income_category("INTEREST PAID")

        assert suggestion.category is IncomeCategory.OTHER_INCOME
        assert suggestion.confidence is Confidence.HIGH

    def test_income_default(self, categorizer):
        suggestion = categorizer.suggest_income_category("CLIENT PAYMENT LTD")

        assert suggestion.category is IncomeCategory.SALES
        assert suggestion.confidence is Confidence.MEDIUM

    def test_empty_description(self, categorizer):
        assert categorizer.suggest_expense_category("").category is ExpenseCategory.OTHER_EXPENSES


class TestClassificationEngine:
    """Tests for ClassificationEngine."""

    @pytest.fixture
    def engine(self):
        return ClassificationEngine()

    def test_expense_high_confidence(self, engine, make_transaction):
        result = engine.classify(make_transaction(description="AMAZON.CO.UK", amount="-12.99"))

        assert result.is_income is False
        assert result.suggested_category is ExpenseCategory.OFFICE_COSTS
        assert result.income_category is None
        assert result.confidence_level is Confidence.HIGH
        assert result.confidence_score == 0.95
        assert result.is_high_confidence is True
        assert result.requires_manual_review is False

    def test_unmatched_expense(self, engine, make_transaction):
        result = engine.classify(make_transaction(description="RANDOM VENDOR", amount="-15.00"))

        assert result.suggested_category is ExpenseCategory.OTHER_EXPENSES
        assert result.confidence_level is Confidence.LOW
        assert result.confidence_score == 0.30
        assert result.requires_manual_review is True
        assert result.is_suggestion_worthy is False

    def test_income_has_no_expense_category(self, engine, make_transaction):
        result = engine.classify(make_transaction(description="CLIENT PAYMENT LTD", amount="5000.00"))

        assert result.is_income is True
        assert result.suggested_category is None
        assert result.income_category is IncomeCategory.SALES
        assert result.confidence_level is Confidence.MEDIUM
        assert result.is_suggestion_worthy is True

    def test_direction_ignores_keywords(self, engine, make_transaction):
        """A refund keyword on a payment out is still an expense."""
        result = engine.classify(make_transaction(description="REFUND FEE", amount="-2.00"))

        assert result.is_income is False

    def test_zero_amount_is_expense(self, engine, make_transaction):
        assert engine.classify(make_transaction(amount="0")).is_income is False

    def test_uses_injected_categorizer(self, make_transaction):
        categorizer = DescriptionCategorizer(
            expense_rules=RuleTable.of([("vendor", ExpenseCategory.REPAIRS)]),
            income_rules=RuleTable(),
        )
        engine = ClassificationEngine(categorizer)

        result = engine.classify(make_transaction(description="RANDOM VENDOR", amount="-1.00"))

        assert result.suggested_category is ExpenseCategory.REPAIRS


class TestCategorizationEngine:
    """Tests for CategorizationEngine."""

    @pytest.fixture
    def engine(self):
        return CategorizationEngine(ExclusionRulesEngine(), ClassificationEngine())

    def test_business_expense(self, engine, make_transaction):
        rec = engine.categorize(make_transaction(description="UBER TRIP TO CLIENT", amount="-25.00"))

        assert rec.is_income is False
        assert rec.should_exclude is False
        assert rec.exclusion_reason is None
        assert rec.expense_category is ExpenseCategory.TRAVEL
        assert rec.sa103_box == "Box 20"
        assert rec.confidence_score > 0

    @pytest.mark.parametrize("description,box", [
        ("AMAZON OFFICE SUPPLIES", "Box 23"),
        ("BRITISH GAS BILL", "Box 21"),
        ("PAYROLL PROCESSING", "Box 19"),
        ("ACCOUNTANT FEE", "Box 28"),
        ("RANDOM VENDOR", "Box 30"),
    ])
    def test_sa103_box(self, engine, make_transaction, description, box):
        assert engine.categorize(make_transaction(description=description, amount="-10.00")).sa103_box == box

    def test_income(self, engine, make_transaction):
        rec = engine.categorize(make_transaction(description="CLIENT PAYMENT LTD", amount="5000.00"))

        assert rec.is_income is True
        assert rec.should_exclude is False
        assert rec.expense_category is None
        assert rec.sa103_box is None

    def test_transfer_excluded(self, engine, make_transaction):
        rec = engine.categorize(make_transaction(description="TFR TO SAVINGS", amount="-1000.00"))

        assert rec.should_exclude is True
        assert rec.exclusion_reason is ExclusionReason.TRANSFER
        assert rec.expense_category is None
        assert rec.sa103_box is None
        assert rec.confidence_level is Confidence.HIGH

    def test_loan_interest_is_excluded(self, engine, make_transaction):
        """Exclusion runs first, so the bare loan rule wins over the interest category."""
        rec = engine.categorize(make_transaction(description="LOAN INTEREST", amount="-40.00"))

        assert rec.should_exclude is True
        assert rec.exclusion_reason is ExclusionReason.LOAN

    def test_exclusion_short_circuits_classification(self, make_transaction):
        exclusion = Mock()
        exclusion.evaluate.return_value = ExclusionResult(True, ExclusionReason.TRANSFER, "tfr")
        classification = Mock()
        engine = CategorizationEngine(exclusion, classification)

        engine.categorize(make_transaction())

        classification.classify.assert_not_called()

    def test_apply_expense_recommendation(self, engine, make_transaction, fixed_now):
        txn = make_transaction(description="UBER LONDON", amount="-20.00")
        staged = StagedTransaction.create("business-1", "import-1", txn, fixed_now, "csv-barclays")
        later = fixed_now + timedelta(seconds=60)

        updated = engine.apply_recommendation(staged, engine.categorize(txn), later)

        assert updated.suggested_category is ExpenseCategory.TRAVEL
        assert updated.confidence_score == 0.95
        assert updated.review_status is ReviewStatus.PENDING
        assert updated.updated_at == later

    def test_apply_exclusion(self, engine, make_transaction, fixed_now):
        txn = make_transaction(description="ATM WITHDRAWAL", amount="-200.00")
        staged = StagedTransaction.create("business-1", "import-1", txn, fixed_now)

        updated = engine.apply_recommendation(staged, engine.categorize(txn), fixed_now)

        assert updated.review_status is ReviewStatus.EXCLUDED
        assert updated.exclusion_reason == "CASH_WITHDRAWAL"

    def test_apply_income_leaves_transaction(self, engine, make_transaction, fixed_now):
        txn = make_transaction(description="CLIENT PAYMENT", amount="3000.00")
        staged = StagedTransaction.create("business-1", "import-1", txn, fixed_now)

        assert engine.apply_recommendation(staged, engine.categorize(txn), fixed_now) is staged

    def test_amount_precision_does_not_matter(self, engine, make_transaction):
        first = engine.categorize(make_transaction(description="AMAZON", amount="-10"))
        second = engine.categorize(make_transaction(description="AMAZON", amount=str(Decimal("-10.000"))))

        assert first == second
