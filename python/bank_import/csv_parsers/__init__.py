"""
Bank-specific CSV parsers for UK bank statements.
"""

from .base import BaseCSVParser, TypedDescriptionParser, parse_header_line, split_csv_line
from .barclays import BarclaysParser
from .hsbc import HsbcParser
from .lloyds import LloydsParser
from .nationwide import NationwideParser
from .metro_bank import MetroBankParser
from .starling import StarlingParser
from .monzo import MonzoParser
from .revolut import RevolutParser
from .santander import SantanderParser
from .manual_mapping import ColumnMapping, ManualMappingParser
from .error_tolerant import ErrorTolerantParser
from .detector import DEFAULT_PARSERS, FormatDetector

__all__ = [
    "BaseCSVParser",
    "TypedDescriptionParser",
    "parse_header_line",
    "split_csv_line",
    "BarclaysParser",
    "HsbcParser",
    "LloydsParser",
    "NationwideParser",
    "MetroBankParser",
    "StarlingParser",
    "MonzoParser",
    "RevolutParser",
    "SantanderParser",
    "ColumnMapping",
    "ManualMappingParser",
    "ErrorTolerantParser",
    "DEFAULT_PARSERS",
    "FormatDetector",
]
