"""Shared pytest fixtures for spendtrack tests."""

import os
import tempfile
from datetime import date
from decimal import Decimal

import pytest

from spendtrack.database.factories import create_sqlite_database
from spendtrack.domain.category import CategoryService
from spendtrack.domain.entities import Category, ProcessedExpense, SubCategory
from spendtrack.domain.expense import ExpenseService
from spendtrack.domain.summary import SummaryService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture(autouse=True)
def default_currency(monkeypatch):
    """Keep the developer's SPENDTRACK_CURRENCY out of the tests."""
    monkeypatch.delenv("SPENDTRACK_CURRENCY", raising=False)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def expense_service(temp_db):
    """Create an ExpenseService with a temporary database."""
    return ExpenseService(temp_db)


@pytest.fixture
def summary_service(temp_db):
    """Create a SummaryService with a temporary database."""
    return SummaryService(temp_db)


@pytest.fixture
def default_categories(category_service):
    """Seed the default category tree and return it."""
    category_service.ensure_defaults()
    return category_service.get_taxonomy()


@pytest.fixture
def taxonomy():
    """A small hand-built tree with fixed IDs.

    Food (order 0): Groceries [shop, market], Cafe [coffee]
    Home (order 1): Internet [inet]
    """
    return (
        Category(
            id="cat-food",
            name="Food",
            order=0,
            subcategories=(
                SubCategory(id="sub-cafe", name="Cafe", keywords=("coffee",)),
                SubCategory(id="sub-groceries", name="Groceries", keywords=("market", "shop")),
            ),
        ),
        Category(
            id="cat-home",
            name="Home",
            order=1,
            subcategories=(SubCategory(id="sub-inet", name="Internet", keywords=("inet",)),),
        ),
    )


@pytest.fixture
def make_expense():
    """Factory for processed expenses with sensible defaults."""

    def _make(expense_id, comment, day=1, amount="10.00", **overrides):
        fields = {
            "id": expense_id,
            "date": date(2025, 4, day),
            "amount": Decimal(amount),
            "currency": "BYN",
            "comment": comment,
            "full_comment": comment,
        }
        fields.update(overrides)
        return ProcessedExpense(**fields)

    return _make


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
