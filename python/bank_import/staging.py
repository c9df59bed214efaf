"""
Bank Statement Import Module

Runs a statement file through the full import pipeline: size check, format
detection (or a manual column mapping), parsing, duplicate detection,
auto-exclusion and category suggestion, then hands each new transaction to
the caller's staging callback for review.
"""

import hashlib
import logging
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Callable

from .categorization import CategorizationEngine
from .csv_parsers import BaseCSVParser, ColumnMapping, ErrorTolerantParser, FormatDetector, ManualMappingParser
from .duplicate_detector import DuplicateDetector
from .errors import CsvParseError, UnknownFormatError
from .models import ImportedTransaction, ParseError, StagedTransaction
from .rules import ImportSettings, load_import_settings

logger = logging.getLogger(__name__)

LOCAL_USER = "local-user"
AUTO_EXCLUDED_PREFIX = "Auto-excluded: "


@dataclass(frozen=True)
class ImportSummary:
    """Audit record of a completed import.

    ``file_hash`` is the SHA-256 of the raw file so a re-import of the same
    file can be recognised. Records are kept until ``retention_until``.
    """

    import_id: str
    scope_id: str
    bank_name: str
    source_format_id: str
    file_name: str
    file_hash: str
    file_size: int
    imported_at: datetime
    retention_until: date
    total_count: int
    imported_count: int
    duplicate_count: int
    excluded_count: int
    imported_by: str = LOCAL_USER
    staged_ids: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ImportPreview:
    """What an import would do, without staging anything."""

    bank_name: str
    unique_transactions: tuple[ImportedTransaction, ...]
    duplicate_transactions: tuple[ImportedTransaction, ...]
    errors: tuple[ParseError, ...] = ()

    @property
    def total_count(self) -> int:
        return len(self.unique_transactions) + len(self.duplicate_transactions)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


class BankStatementImporter:
    """Imports bank statement CSV files into the review staging area."""

    def __init__(
        self,
        duplicate_detector: DuplicateDetector,
        stage: Callable[[StagedTransaction], None],
        format_detector: FormatDetector | None = None,
        categorization_engine: CategorizationEngine | None = None,
        settings: ImportSettings | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize the importer.

        Args:
            duplicate_detector: Detector backed by the stored transaction keys
            stage: Called once per new transaction to store it for review
            format_detector: Bank format detector
            categorization_engine: Engine used for exclusion and suggestions
            settings: Size limit, retention and encoding defaults
            clock: Returns the current time; defaults to ``datetime.now``
        """
        self.duplicate_detector = duplicate_detector
        self.stage = stage
        self.format_detector = format_detector or FormatDetector()
        self.categorization_engine = categorization_engine or CategorizationEngine()
        self.settings = settings or load_import_settings()
        self.clock = clock or datetime.now

    def import_statement(
        self,
        scope_id: str,
        file_path: Path | str,
        encoding: str | None = None,
        mapping: ColumnMapping | None = None,
    ) -> ImportSummary:
        """Import a statement file.

        Any bad row aborts the import before anything is staged.

        Args:
            scope_id: Business the statement belongs to
            file_path: Path to the CSV file
            encoding: Text encoding; defaults to the configured encoding
            mapping: Column mapping for files in an unrecognised layout

        Returns:
            ImportSummary for the import

        Raises:
            CsvParseError: If the file is too large, unreadable or has a bad row
            UnknownFormatError: If no mapping is given and the format is unknown
        """
        file_path = Path(file_path)
        encoding = encoding or self.settings.default_encoding
        file_size = self._validate_file_size(file_path)

        parser = self._select_parser(file_path, encoding, mapping)
        transactions = parser.parse(file_path, encoding)

        duplicates = self.duplicate_detector.check_duplicates(scope_id, transactions)

        now = self.clock()
        import_id = str(uuid.uuid4())
        staged_ids = []
        excluded_count = 0

        for transaction in duplicates.unique_transactions:
            staged = self._prepare(scope_id, import_id, parser, transaction, now)
            if staged.exclusion_reason is not None:
                excluded_count += 1
            self.stage(staged)
            staged_ids.append(staged.id)

        summary = ImportSummary(
            import_id=import_id,
            scope_id=scope_id,
            bank_name=parser.bank_name,
            source_format_id=parser.source_format_id,
            file_name=file_path.name,
            file_hash=self._compute_file_hash(file_path),
            file_size=file_size,
            imported_at=now,
            retention_until=_add_years(now.date(), self.settings.retention_years),
            total_count=len(transactions),
            imported_count=duplicates.unique_count,
            duplicate_count=duplicates.duplicate_count,
            excluded_count=excluded_count,
            staged_ids=tuple(staged_ids),
        )

        logger.info(
            f"Imported {file_path.name} ({parser.bank_name}): {summary.imported_count} new, "
            f"{summary.duplicate_count} duplicates, {summary.excluded_count} auto-excluded"
        )
        return summary

    def preview(
        self,
        scope_id: str,
        file_path: Path | str,
        encoding: str | None = None,
        mapping: ColumnMapping | None = None,
    ) -> ImportPreview:
        """Parse and de-duplicate a file without staging anything.

        Bad rows are reported in ``errors`` instead of aborting.
        """
        file_path = Path(file_path)
        encoding = encoding or self.settings.default_encoding
        self._validate_file_size(file_path)

        parser = self._select_parser(file_path, encoding, mapping)
        result = ErrorTolerantParser(parser).parse(file_path, encoding)
        duplicates = self.duplicate_detector.check_duplicates(scope_id, list(result.transactions))

        return ImportPreview(
            bank_name=parser.bank_name,
            unique_transactions=duplicates.unique_transactions,
            duplicate_transactions=duplicates.duplicate_transactions,
            errors=result.errors,
        )

    def _select_parser(
        self, file_path: Path, encoding: str, mapping: ColumnMapping | None
    ) -> BaseCSVParser:
        if mapping is not None:
            return ManualMappingParser(mapping)
        parser = self.format_detector.detect_format(file_path, encoding)
        if parser is None:
            raise UnknownFormatError(file_name=file_path.name)
        return parser

    def _prepare(
        self,
        scope_id: str,
        import_id: str,
        parser: BaseCSVParser,
        transaction: ImportedTransaction,
        now: datetime,
    ) -> StagedTransaction:
        """Stage a transaction with auto-exclusion or a category suggestion applied."""
        staged = StagedTransaction.create(
            scope_id=scope_id,
            import_id=import_id,
            transaction=transaction,
            now=now,
            source_format_id=parser.source_format_id,
        )

        recommendation = self.categorization_engine.categorize(transaction)
        if recommendation.should_exclude:
            return staged.with_excluded(
                AUTO_EXCLUDED_PREFIX + recommendation.exclusion_reason.name, now
            )
        return self.categorization_engine.apply_recommendation(staged, recommendation, now)

    def _validate_file_size(self, file_path: Path) -> int:
        try:
            size = file_path.stat().st_size
        except OSError as e:
            raise CsvParseError(f"Unable to read file: {file_path.name}") from e

        limit = self.settings.max_file_size_bytes
        if size > limit:
            raise CsvParseError(
                f"File size ({size} bytes) exceeds maximum allowed size ({limit} bytes)",
                file_path.name,
            )
        return size

    @staticmethod
    def _compute_file_hash(file_path: Path) -> str:
        digest = hashlib.sha256()
        with open(file_path, "rb") as f:
            for chunk in iter(lambda: f.read(65536), b""):
                digest.update(chunk)
        return digest.hexdigest()


def _add_years(start: date, years: int) -> date:
    """Add whole years, moving 29 February to 28 February when needed."""
    try:
        return start.replace(year=start.year + years)
    except ValueError:
        return start.replace(year=start.year + years, day=28)
