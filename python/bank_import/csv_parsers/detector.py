"""
Format Detector

Identifies which bank produced a CSV export by reading its header row and
asking each registered parser whether it recognises it.
"""

import logging
from pathlib import Path

from ..errors import UnknownFormatError
from .barclays import BarclaysParser
from .base import BaseCSVParser, parse_header_line
from .hsbc import HsbcParser
from .lloyds import LloydsParser
from .metro_bank import MetroBankParser
from .monzo import MonzoParser
from .nationwide import NationwideParser
from .revolut import RevolutParser
from .santander import SantanderParser
from .starling import StarlingParser

logger = logging.getLogger(__name__)

# Priority order; the first parser that accepts the headers wins
DEFAULT_PARSERS: tuple[type[BaseCSVParser], ...] = (
    BarclaysParser,
    HsbcParser,
    LloydsParser,
    NationwideParser,
    MetroBankParser,
    StarlingParser,
    MonzoParser,
    RevolutParser,
    SantanderParser,
)


class FormatDetector:
    """Detects the bank format of a CSV file from its header row."""

    def __init__(self, parsers: list[BaseCSVParser] | None = None):
        """Initialize the detector.

        Args:
            parsers: Parsers to try, in priority order. Defaults to one
                instance of each supported bank parser.
        """
        if parsers is None:
            parsers = [parser_cls() for parser_cls in DEFAULT_PARSERS]
        self._parsers = list(parsers)

    def available_parsers(self) -> list[BaseCSVParser]:
        return list(self._parsers)

    def bank_names(self) -> list[str]:
        return [parser.bank_name for parser in self._parsers]

    def read_headers(self, file_path: Path | str, encoding: str = "utf-8") -> list[str]:
        """Read the header row of a CSV file.

        Returns:
            Trimmed column names from the first non-blank line, or an empty
            list if the file is empty or cannot be read
        """
        file_path = Path(file_path)
        try:
            with open(file_path, encoding=encoding, newline="") as f:
                for line_number, line in enumerate(f, start=1):
                    if line_number == 1:
                        line = line.lstrip("\ufeff")
                    if line.strip():
                        return parse_header_line(line.rstrip("\r\n"))
        except (OSError, UnicodeDecodeError, LookupError) as e:
            logger.warning(f"Could not read headers from {file_path.name}: {e}")
        return []

    def detect_format(self, file_path: Path | str, encoding: str = "utf-8") -> BaseCSVParser | None:
        """Find the parser for a CSV file.

        Args:
            file_path: Path to the CSV file
            encoding: Text encoding of the file

        Returns:
            The first parser whose expected headers match, or None
        """
        headers = self.read_headers(file_path, encoding)
        if not headers:
            return None

        for parser in self._parsers:
            if parser.can_parse(headers):
                logger.info(f"Detected {parser.bank_name} format for {Path(file_path).name}")
                return parser

        logger.warning(f"Unknown CSV format for {Path(file_path).name}: {headers}")
        return None

    def detect_or_raise(self, file_path: Path | str, encoding: str = "utf-8") -> BaseCSVParser:
        """Like detect_format, but raises UnknownFormatError instead of returning None."""
        parser = self.detect_format(file_path, encoding)
        if parser is None:
            raise UnknownFormatError(
                file_name=Path(file_path).name,
                headers=self.read_headers(file_path, encoding),
            )
        return parser
