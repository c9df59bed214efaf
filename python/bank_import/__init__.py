"""
Bank statement import pipeline.

Parses UK bank CSV exports, detects duplicates and recommends how each
transaction should be categorized for self-employment (SA103) returns.
"""

# Models and errors
from .models import (
    ImportedTransaction,
    ParseError,
    ParseResult,
    ReviewStatus,
    StagedTransaction,
    normalize_description,
    transaction_fingerprint,
)
from .errors import CsvParseError, RowParseError, RuleConfigError, UnknownFormatError

# Parsing
from .csv_parsers import (
    BaseCSVParser,
    ColumnMapping,
    ErrorTolerantParser,
    FormatDetector,
    ManualMappingParser,
)

# Categorization
from .categories import Confidence, ExclusionReason, ExpenseCategory, IncomeCategory
from .rules import ImportSettings, RuleTable, load_category_rules, load_exclusion_rules, load_import_settings
from .exclusion import ExclusionResult, ExclusionRulesEngine
from .classification import ClassificationEngine, ClassificationResult, DescriptionCategorizer
from .categorization import CategorizationEngine, CategorizationRecommendation

# Import pipeline
from .duplicate_detector import DuplicateCheckResult, DuplicateDetector
from .staging import BankStatementImporter, ImportPreview, ImportSummary

__all__ = [
    # Models and errors
    "ImportedTransaction",
    "ParseError",
    "ParseResult",
    "ReviewStatus",
    "StagedTransaction",
    "normalize_description",
    "transaction_fingerprint",
    "CsvParseError",
    "RowParseError",
    "RuleConfigError",
    "UnknownFormatError",
    # Parsing
    "BaseCSVParser",
    "ColumnMapping",
    "ErrorTolerantParser",
    "FormatDetector",
    "ManualMappingParser",
    # Categorization
    "Confidence",
    "ExclusionReason",
    "ExpenseCategory",
    "IncomeCategory",
    "ImportSettings",
    "RuleTable",
    "load_category_rules",
    "load_exclusion_rules",
    "load_import_settings",
    "ExclusionResult",
    "ExclusionRulesEngine",
    "ClassificationEngine",
    "ClassificationResult",
    "DescriptionCategorizer",
    "CategorizationEngine",
    "CategorizationRecommendation",
    # Import pipeline
    "DuplicateCheckResult",
    "DuplicateDetector",
    "BankStatementImporter",
    "ImportPreview",
    "ImportSummary",
]
