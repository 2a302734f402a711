"""Expense domain service."""

import logging
from datetime import date
from typing import Any, Iterable, Optional

from spendtrack.database.base import Database
from spendtrack.domain import taxonomy as tax
from spendtrack.domain.cascade import (
    Resolution,
    categorize_unidentified,
    delete_expense,
    find_expense,
    find_stale_references,
    sort_newest_first,
)
from spendtrack.domain.category import CategoryService, split_category_path
from spendtrack.domain.classifier import classify_all
from spendtrack.domain.entities import ProcessedExpense, RawExpense
from spendtrack.domain.errors import (
    NotFoundError,
    ValidationError,
    category_name_not_found,
    expense_not_found,
    subcategory_name_not_found,
)
from spendtrack.domain.parser import parse_bank_statement, parse_single, parse_tabulated
from spendtrack.domain.views import ALL, FixedView, View, select_expenses

logger = logging.getLogger(__name__)

SINGLE_FORMAT_HINT = 'AMOUNT comment, or DD.MM.YYYY AMOUNT "comment"'


class ExpenseService:
    """Service for adding, categorizing and listing expenses."""

    def __init__(self, db: Database):
        """Initialize expense service.

        Args:
            db: Database instance
        """
        self.db = db
        self.category_service = CategoryService(db)

    def _store_new(self, raws: Iterable[RawExpense]) -> list[ProcessedExpense]:
        """Classify raw expenses against the current tree and store them."""
        processed = classify_all(raws, self.db.load_taxonomy())
        self.db.save_expenses(sort_newest_first([*self.db.load_expenses(), *processed]))
        return processed

    def add_single(self, text: str, currency: Optional[str] = None) -> ProcessedExpense:
        """Parse and store one manually typed expense.

        Args:
            text: Input such as ``10.50 Обед``
            currency: Optional currency code

        Returns:
            The stored expense

        Raises:
            ValidationError: If the text matches no supported format
        """
        raw = parse_single(text, currency=currency)
        if raw is None:
            raise ValidationError(f"Unrecognized expense format. Try: {SINGLE_FORMAT_HINT}")
        return self._store_new([raw])[0]

    def import_statement(self, text: str, currency: Optional[str] = None) -> dict[str, Any]:
        """Import expenses from a pasted bank statement.

        Returns:
            Dict with import statistics:
            - imported: number of expenses stored
            - unidentified: how many of them found no category
            - errors: messages for skipped lines
        """
        errors: list[str] = []
        raws = parse_bank_statement(text, currency=currency, skipped=errors)
        return self._import(raws, errors)

    def import_tabulated(self, text: str, currency: Optional[str] = None) -> dict[str, Any]:
        """Import expenses from a categorized tab-separated table.

        Returns:
            Dict with the same statistics as import_statement
        """
        errors: list[str] = []
        raws = parse_tabulated(text, currency=currency, skipped=errors)
        return self._import(raws, errors)

    def _import(self, raws: list[RawExpense], errors: list[str]) -> dict[str, Any]:
        processed = self._store_new(raws) if raws else []
        return {
            "imported": len(processed),
            "unidentified": sum(1 for exp in processed if exp.is_unidentified),
            "errors": errors,
        }

    def get_expense(self, expense_id: str) -> Optional[ProcessedExpense]:
        """Get expense by ID.

        Args:
            expense_id: Expense ID

        Returns:
            Expense entity or None if not found
        """
        return find_expense(self.db.load_expenses(), expense_id)

    def list_expenses(
        self,
        view: Optional[View] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[ProcessedExpense]:
        """List expenses newest first.

        Args:
            view: Optional view to filter by (defaults to all expenses)
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)

        Returns:
            List of expense entities
        """
        expenses = select_expenses(self.db.load_expenses(), view or FixedView(ALL))
        if start_date is not None:
            expenses = [exp for exp in expenses if exp.date >= start_date]
        if end_date is not None:
            expenses = [exp for exp in expenses if exp.date <= end_date]
        return sort_newest_first(expenses)

    def list_unidentified(self) -> list[ProcessedExpense]:
        """List expenses waiting for manual categorization."""
        return [exp for exp in self.list_expenses() if exp.is_unidentified]

    def list_stale(self) -> list[ProcessedExpense]:
        """List expenses whose category references no longer exist."""
        return find_stale_references(self.db.load_expenses(), self.db.load_taxonomy())

    def categorize(
        self,
        expense_id: str,
        category_id: str,
        subcategory_id: Optional[str] = None,
        keyword: Optional[str] = None,
    ) -> Resolution:
        """Manually categorize an expense and propagate to identical comments.

        Raises:
            NotFoundError: If the expense, category or subcategory does not exist
        """
        resolution = categorize_unidentified(
            self.db.load_expenses(),
            self.db.load_taxonomy(),
            expense_id,
            category_id,
            subcategory_id=subcategory_id,
            keyword=keyword,
        )
        if resolution.keyword_learned:
            self.db.save_taxonomy(resolution.taxonomy)
        self.db.save_expenses(resolution.expenses)
        return resolution

    def categorize_by_path(
        self,
        expense_id: str,
        category_path: str,
        keyword: Optional[str] = None,
        create: bool = False,
    ) -> Resolution:
        """Categorize an expense by "Category > Subcategory" path.

        Args:
            expense_id: Expense ID
            category_path: Target category path
            keyword: Optional keyword to learn for the subcategory
            create: Create the category or subcategory if missing

        Raises:
            NotFoundError: If a path part is missing and create is False
        """
        category_name, sub_name = split_category_path(category_path)
        if self.get_expense(expense_id) is None:
            raise NotFoundError(expense_not_found(expense_id))

        category = self.category_service.get_category_by_name(category_name)
        if category is None:
            if not create:
                raise NotFoundError(category_name_not_found(category_name))
            category_id = self.category_service.create_category(category_name)
        else:
            category_id = category.id

        subcategory_id = None
        if sub_name is not None:
            category = self.category_service.get_category(category_id)
            sub = category.find_subcategory_by_name(sub_name)
            if sub is None:
                if not create:
                    raise NotFoundError(subcategory_name_not_found(sub_name, category.name))
                subcategory_id = self.category_service.create_subcategory(category_id, sub_name)
            else:
                subcategory_id = sub.id

        return self.categorize(expense_id, category_id, subcategory_id, keyword=keyword)

    def suggest_keyword(self, expense_id: str) -> str:
        """Suggest a keyword to learn from an expense's comment."""
        expense = self.get_expense(expense_id)
        if expense is None:
            raise NotFoundError(expense_not_found(expense_id))
        return tax.suggest_keyword(expense.full_comment)

    def delete_expense(self, expense_id: str) -> None:
        """Delete an expense permanently.

        Raises:
            NotFoundError: If the expense does not exist
        """
        self.db.save_expenses(delete_expense(self.db.load_expenses(), expense_id))

    def reset_expenses(self) -> int:
        """Delete every expense.

        Returns:
            Number of expenses deleted
        """
        count = len(self.db.load_expenses())
        self.db.save_expenses([])
        return count
