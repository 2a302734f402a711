"""Per-category spending totals."""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from spendtrack.database.base import Database
from spendtrack.domain.entities import ProcessedExpense, Taxonomy
from spendtrack.domain.views import UNIDENTIFIED_LABEL, UNKNOWN_CATEGORY_LABEL


@dataclass(frozen=True)
class CategoryTotal:
    """Spending of one category (or subcategory), split by currency."""

    label: str
    count: int
    totals: dict[str, Decimal] = field(default_factory=dict)
    subtotals: tuple["CategoryTotal", ...] = ()


def totals_by_currency(expenses: Iterable[ProcessedExpense]) -> dict[str, Decimal]:
    """Sum amounts per currency code, codes in alphabetical order."""
    totals: dict[str, Decimal] = defaultdict(Decimal)
    for expense in expenses:
        totals[expense.currency] += expense.amount
    return dict(sorted(totals.items()))


def _total(label: str, expenses: list[ProcessedExpense], subtotals=()) -> CategoryTotal:
    return CategoryTotal(
        label=label,
        count=len(expenses),
        totals=totals_by_currency(expenses),
        subtotals=tuple(subtotals),
    )


def summarize(expenses: Iterable[ProcessedExpense], taxonomy: Taxonomy) -> list[CategoryTotal]:
    """Group expenses by category in display order.

    Categories without expenses are left out. Expenses that point at a
    category no longer in the tree are reported under one "unknown" line,
    and unidentified expenses come last.
    """
    expenses = list(expenses)
    known_ids = {cat.id for cat in taxonomy}
    result = []

    for category in sorted(taxonomy, key=lambda cat: cat.order):
        in_category = [
            exp for exp in expenses if not exp.is_unidentified and exp.category_id == category.id
        ]
        if not in_category:
            continue
        subtotals = []
        for sub in category.subcategories:
            in_sub = [exp for exp in in_category if exp.subcategory_id == sub.id]
            if in_sub:
                subtotals.append(_total(sub.name, in_sub))
        result.append(_total(category.name, in_category, subtotals))

    stale = [
        exp for exp in expenses if not exp.is_unidentified and exp.category_id not in known_ids
    ]
    if stale:
        result.append(_total(UNKNOWN_CATEGORY_LABEL, stale))

    unidentified = [exp for exp in expenses if exp.is_unidentified]
    if unidentified:
        result.append(_total(UNIDENTIFIED_LABEL, unidentified))
    return result


class SummaryService:
    """Service for building spending summaries."""

    def __init__(self, db: Database):
        """Initialize summary service.

        Args:
            db: Database instance
        """
        self.db = db

    def build_summary(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[CategoryTotal]:
        """Summarize stored expenses, optionally within a date range.

        Args:
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)

        Returns:
            Category totals in display order
        """
        return summarize(self._in_range(start_date, end_date), self.db.load_taxonomy())

    def grand_total(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> dict[str, Decimal]:
        """Total of every expense in the range, per currency."""
        return totals_by_currency(self._in_range(start_date, end_date))

    def _in_range(self, start_date, end_date) -> list[ProcessedExpense]:
        expenses = self.db.load_expenses()
        if start_date is not None:
            expenses = [exp for exp in expenses if exp.date >= start_date]
        if end_date is not None:
            expenses = [exp for exp in expenses if exp.date <= end_date]
        return expenses
