"""
Import Errors Module

Exception types raised by the bank statement import pipeline.

Two severities exist. Fatal errors (``CsvParseError`` and subclasses) abort the
whole operation. Row-level errors (``RowParseError``) are raised while parsing a
single row and are either collected into a ``ParseResult`` or escalated to a
fatal error by the strict parse loop.
"""


class CsvParseError(Exception):
    """Fatal error that aborts parsing of a whole file."""

    def __init__(
        self,
        message: str,
        file_name: str | None = None,
        line_number: int | None = None,
    ):
        self.message = message
        self.file_name = file_name
        self.line_number = line_number
        super().__init__(self._format())

    def _format(self) -> str:
        if self.file_name and self.line_number:
            return f"{self.message} ({self.file_name}, line {self.line_number})"
        if self.file_name:
            return f"{self.message} ({self.file_name})"
        return self.message


class UnknownFormatError(CsvParseError):
    """No registered bank format matches the file's header row."""

    DEFAULT_MESSAGE = (
        "Unknown CSV format. Please check the file format or use manual column mapping."
    )

    def __init__(self, file_name: str | None = None, headers: list[str] | None = None):
        self.headers = list(headers or [])
        super().__init__(self.DEFAULT_MESSAGE, file_name=file_name)


class RowParseError(ValueError):
    """A single row could not be converted into a transaction."""


class RuleConfigError(Exception):
    """A keyword rule table is missing or malformed."""
