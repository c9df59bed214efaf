"""
Pytest configuration and fixtures for bank statement import tests.
"""

import sys
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Callable

import pytest

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent

sys.path.insert(0, str(PROJECT_ROOT / "python"))

from bank_import.models import ImportedTransaction  # noqa: E402


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def config_dir() -> Path:
    """Return the packaged rule configuration directory."""
    return PROJECT_ROOT / "python" / "bank_import" / "config"


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    """Return a helper that writes CSV text to a temporary file."""

    def _write(content: str, name: str = "statement.csv", encoding: str = "utf-8") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding=encoding)
        return path

    return _write


@pytest.fixture
def make_transaction() -> Callable[..., ImportedTransaction]:
    """Return a factory for ImportedTransaction with sensible defaults."""

    def _make(
        description: str = "COFFEE SHOP",
        amount: str = "-12.50",
        txn_date: date = date(2025, 6, 15),
        balance: str | None = None,
        reference: str | None = None,
    ) -> ImportedTransaction:
        return ImportedTransaction(
            date=txn_date,
            amount=Decimal(amount),
            description=description,
            balance=Decimal(balance) if balance is not None else None,
            reference=reference,
        )

    return _make


@pytest.fixture
def fixed_now() -> datetime:
    """A fixed import timestamp."""
    return datetime(2025, 6, 15, 10, 0, 0)


@pytest.fixture
def barclays_csv() -> str:
    """Sample Barclays export with one payment and one receipt."""
    return (
        "Date,Description,Money Out,Money In,Balance\n"
        "15/06/2025,Coffee Shop,12.50,,1000.00\n"
        "16/06/2025,CLIENT PAYMENT LTD,,1500.00,2500.00\n"
        "17/06/2025,AMAZON.CO.UK,45.99,,2454.01\n"
    )
