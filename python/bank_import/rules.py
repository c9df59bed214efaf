"""
Keyword Rules Module

Ordered keyword tables for exclusion and category suggestion, loaded from
YAML configuration. Tables are immutable once built; the first keyword found
in a normalized description decides the outcome.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Generic, TypeVar

import yaml

from .categories import ExclusionReason, ExpenseCategory, IncomeCategory
from .errors import RuleConfigError
from .models import normalize_description

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path(__file__).parent / "config"

EXCLUSION_RULES_FILE = "exclusion_rules.yaml"
CATEGORY_KEYWORDS_FILE = "category_keywords.yaml"
IMPORT_SETTINGS_FILE = "import_settings.yaml"

T = TypeVar("T", bound=Enum)


@dataclass(frozen=True)
class KeywordRule(Generic[T]):
    """A lowercase keyword and the outcome it selects."""

    keyword: str
    outcome: T

    def matches(self, normalized_description: str) -> bool:
        return self.keyword in normalized_description


@dataclass(frozen=True)
class RuleTable(Generic[T]):
    """Ordered, immutable keyword table. Earlier rules win."""

    rules: tuple[KeywordRule[T], ...] = ()

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self):
        return iter(self.rules)

    def first_match(self, description: str | None) -> KeywordRule[T] | None:
        """Return the first rule whose keyword occurs in the description."""
        normalized = normalize_description(description)
        if not normalized:
            return None
        for rule in self.rules:
            if rule.matches(normalized):
                return rule
        return None

    @classmethod
    def of(cls, pairs: list[tuple[str, T]]) -> "RuleTable[T]":
        """Build a table from ``(keyword, outcome)`` pairs, lowercasing keywords."""
        return cls(tuple(KeywordRule(keyword.lower(), outcome) for keyword, outcome in pairs))


@dataclass(frozen=True)
class CategoryRules:
    """Expense and income keyword tables from ``category_keywords.yaml``."""

    expense: RuleTable[ExpenseCategory] = field(default_factory=RuleTable)
    income: RuleTable[IncomeCategory] = field(default_factory=RuleTable)


@dataclass(frozen=True)
class ImportSettings:
    """Limits and defaults applied by the statement importer."""

    max_file_size_bytes: int = 10 * 1024 * 1024
    retention_years: int = 6
    default_encoding: str = "utf-8"


def _resolve(config_dir: Path | str | None) -> Path:
    return Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR


def _read_yaml(config_file: Path) -> dict:
    if not config_file.exists():
        raise RuleConfigError(f"Rule file not found: {config_file}")
    try:
        with open(config_file, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise RuleConfigError(f"Invalid YAML in {config_file.name}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuleConfigError(f"{config_file.name}: expected a mapping at the top level")
    return data


def _build_table(
    entries: Any,
    outcome_key: str,
    parse_outcome: Callable[[str], T],
    source: str,
) -> RuleTable[T]:
    """Convert a YAML list of ``{keyword: ..., <outcome_key>: ...}`` into a RuleTable."""
    if not isinstance(entries, list):
        raise RuleConfigError(f"{source}: expected a list of rules")

    pairs = []
    for position, entry in enumerate(entries, start=1):
        if not isinstance(entry, dict):
            raise RuleConfigError(f"{source}: rule {position} is not a mapping")

        keyword = entry.get("keyword")
        outcome = entry.get(outcome_key)
        # Keywords keep surrounding spaces ("ee ", "bp ") since they bound short words
        if not isinstance(keyword, str) or not keyword.strip():
            raise RuleConfigError(f"{source}: rule {position} has no keyword")
        if not isinstance(outcome, str):
            raise RuleConfigError(f"{source}: rule {position} has no {outcome_key}")

        try:
            pairs.append((keyword, parse_outcome(outcome)))
        except ValueError as e:
            raise RuleConfigError(f"{source}: rule {position}: {e}") from e

    return RuleTable.of(pairs)


@lru_cache(maxsize=None)
def _load_exclusion_rules(config_dir: Path) -> RuleTable[ExclusionReason]:
    data = _read_yaml(config_dir / EXCLUSION_RULES_FILE)
    table = _build_table(
        data.get("rules"), "reason", ExclusionReason.from_code, EXCLUSION_RULES_FILE
    )
    logger.info(f"Loaded {len(table)} exclusion rules from {config_dir}")
    return table


@lru_cache(maxsize=None)
def _load_category_rules(config_dir: Path) -> CategoryRules:
    data = _read_yaml(config_dir / CATEGORY_KEYWORDS_FILE)
    rules = CategoryRules(
        expense=_build_table(
            data.get("expense"), "category", ExpenseCategory.from_code, CATEGORY_KEYWORDS_FILE
        ),
        income=_build_table(
            data.get("income", []), "category", IncomeCategory.from_code, CATEGORY_KEYWORDS_FILE
        ),
    )
    logger.info(
        f"Loaded {len(rules.expense)} expense and {len(rules.income)} income "
        f"keyword rules from {config_dir}"
    )
    return rules


def load_exclusion_rules(config_dir: Path | str | None = None) -> RuleTable[ExclusionReason]:
    """Load the exclusion keyword table.

    Tables are cached per directory, so repeated calls return the same object.

    Raises:
        RuleConfigError: If the file is missing or malformed
    """
    return _load_exclusion_rules(_resolve(config_dir).resolve())


def load_category_rules(config_dir: Path | str | None = None) -> CategoryRules:
    """Load the expense and income keyword tables.

    Raises:
        RuleConfigError: If the file is missing or malformed
    """
    return _load_category_rules(_resolve(config_dir).resolve())


def load_import_settings(config_dir: Path | str | None = None) -> ImportSettings:
    """Load importer settings, using defaults when the file is absent.

    Raises:
        RuleConfigError: If the file is not a YAML mapping or holds bad values
    """
    config_file = _resolve(config_dir) / IMPORT_SETTINGS_FILE
    defaults = _default_settings()
    if not config_file.exists():
        return defaults

    config = _read_yaml(config_file)

    try:
        if "max_file_size_mb" in config:
            max_file_size_bytes = int(float(config["max_file_size_mb"]) * 1024 * 1024)
        else:
            max_file_size_bytes = defaults.max_file_size_bytes
        retention_years = int(config.get("retention_years", defaults.retention_years))
    except (TypeError, ValueError) as e:
        raise RuleConfigError(f"{IMPORT_SETTINGS_FILE}: {e}") from e

    return ImportSettings(
        max_file_size_bytes=max_file_size_bytes,
        retention_years=retention_years,
        default_encoding=config.get("default_encoding", defaults.default_encoding),
    )


def _default_settings() -> ImportSettings:
    """Default importer settings."""
    return ImportSettings()
