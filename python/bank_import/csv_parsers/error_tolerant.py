"""
Error Tolerant Parser

Wraps any bank parser so that a bad row is recorded and skipped instead of
aborting the whole file.
"""

import logging
from contextlib import closing
from pathlib import Path

from ..models import ParseError, ParseResult
from .base import BaseCSVParser

logger = logging.getLogger(__name__)


class ErrorTolerantParser:
    """Collects row-level failures into a ParseResult.

    File-level failures (unreadable file, bad encoding) still raise
    ``CsvParseError``.
    """

    def __init__(self, parser: BaseCSVParser):
        self.parser = parser

    @property
    def bank_name(self) -> str:
        return self.parser.bank_name

    def parse(self, file_path: Path | str, encoding: str = "utf-8") -> ParseResult:
        """Parse a CSV file, collecting row errors.

        Args:
            file_path: Path to the CSV file
            encoding: Text encoding of the file

        Returns:
            ParseResult with the good rows and one ParseError per bad row

        Raises:
            CsvParseError: If the file cannot be read
        """
        file_path = Path(file_path)
        transactions = []
        errors = []

        with closing(self.parser.iter_data_lines(file_path, encoding)) as lines:
            for line_number, line in lines:
                try:
                    transaction = self.parser.parse_line(line)
                except ValueError as e:
                    errors.append(ParseError(line_number=line_number, raw_line=line, message=str(e)))
                    continue
                if transaction is not None:
                    transactions.append(transaction)

        if errors:
            logger.warning(
                f"{file_path.name}: {len(errors)} row(s) could not be parsed "
                f"({self.parser.bank_name} format)"
            )

        return ParseResult(transactions=tuple(transactions), errors=tuple(errors))
