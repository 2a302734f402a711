"""Re-classification and manual resolution of processed expenses.

These functions take the current expense list and taxonomy snapshot and
return new ones; callers install the results. Any function that needs a
taxonomy always receives the snapshot produced by the edit that preceded it.
"""

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Iterable, Optional

from spendtrack.domain.classifier import classify
from spendtrack.domain.entities import ProcessedExpense, RawExpense, Taxonomy
from spendtrack.domain.errors import NotFoundError, expense_not_found
from spendtrack.domain.taxonomy import add_keyword, require_category, require_subcategory
from spendtrack.utils.amount_parser import format_amount
from spendtrack.utils.date_parser import format_date_str

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """Outcome of manually categorizing an expense."""

    taxonomy: Taxonomy
    expenses: list[ProcessedExpense]
    keyword_learned: bool
    propagated_ids: tuple[str, ...] = ()


def sort_newest_first(expenses: Iterable[ProcessedExpense]) -> list[ProcessedExpense]:
    """Sort expenses by date, newest first. Equal dates keep their order."""
    return sorted(expenses, key=lambda exp: exp.date, reverse=True)


def to_raw(expense: ProcessedExpense) -> RawExpense:
    """Rebuild the raw fields of a processed expense for re-classification."""
    return RawExpense(
        id=expense.id,
        date_str=format_date_str(expense.date),
        amount_str=format_amount(expense.amount),
        currency=expense.currency,
        full_comment=expense.full_comment,
    )


def reclassify_all(
    expenses: Iterable[ProcessedExpense], taxonomy: Taxonomy, today: Optional[date] = None
) -> list[ProcessedExpense]:
    """Re-run classification over every expense against a new taxonomy.

    IDs are preserved; all derived fields are rebuilt. Predefined category
    names are not kept on processed expenses, so this is keyword-driven.
    """
    expenses = list(expenses)
    logger.debug("Re-classifying %d expenses", len(expenses))
    return sort_newest_first(classify(to_raw(exp), taxonomy, today=today) for exp in expenses)


def find_expense(expenses: Iterable[ProcessedExpense], expense_id: str) -> Optional[ProcessedExpense]:
    """Return the expense with the given ID, if any."""
    for expense in expenses:
        if expense.id == expense_id:
            return expense
    return None


def categorize_unidentified(
    expenses: Iterable[ProcessedExpense],
    taxonomy: Taxonomy,
    expense_id: str,
    category_id: str,
    subcategory_id: Optional[str] = None,
    keyword: Optional[str] = None,
) -> Resolution:
    """Manually assign a category, optionally learning a keyword.

    Steps:
    1. With a keyword and a subcategory, the keyword is added to that
       subcategory first. If that changed the keyword set, every expense is
       re-classified against the new tree before going on.
    2. The target expense gets the chosen category and subcategory.
    3. Every other still-unidentified expense whose full comment equals the
       target's (case-insensitive) gets the same assignment.

    Args:
        expenses: Current expense list
        taxonomy: Current category tree
        expense_id: Expense to categorize
        category_id: Target category
        subcategory_id: Optional target subcategory
        keyword: Optional keyword to learn

    Returns:
        Resolution with the new taxonomy and expense list

    Raises:
        NotFoundError: If the expense, category or subcategory does not exist
    """
    expenses = list(expenses)
    if find_expense(expenses, expense_id) is None:
        raise NotFoundError(expense_not_found(expense_id))
    category = require_category(taxonomy, category_id)
    if subcategory_id is not None:
        require_subcategory(category, subcategory_id)

    keyword_learned = False
    keyword = (keyword or "").strip().lower()
    if keyword and subcategory_id is not None:
        edit = add_keyword(taxonomy, category_id, subcategory_id, keyword)
        taxonomy = edit.taxonomy
        if edit.cascade:
            keyword_learned = True
            expenses = reclassify_all(expenses, taxonomy)
    elif keyword:
        logger.warning(
            "Keyword %r given for category %r without a subcategory; not saved.",
            keyword,
            category.name,
        )

    target = find_expense(expenses, expense_id)
    comment_key = target.full_comment.lower()

    propagated = []
    updated = []
    for expense in expenses:
        if expense.id == expense_id:
            expense = _assign(expense, category_id, subcategory_id)
        elif expense.is_unidentified and expense.full_comment.lower() == comment_key:
            logger.info("Categorizing %s by matching comment %r", expense.id, target.full_comment)
            expense = _assign(expense, category_id, subcategory_id)
            propagated.append(expense.id)
        updated.append(expense)

    return Resolution(
        taxonomy=taxonomy,
        expenses=sort_newest_first(updated),
        keyword_learned=keyword_learned,
        propagated_ids=tuple(propagated),
    )


def _assign(
    expense: ProcessedExpense, category_id: str, subcategory_id: Optional[str]
) -> ProcessedExpense:
    return replace(
        expense,
        category_id=category_id,
        subcategory_id=subcategory_id,
        is_unidentified=False,
    )


def delete_expense(expenses: Iterable[ProcessedExpense], expense_id: str) -> list[ProcessedExpense]:
    """Drop an expense permanently.

    Raises:
        NotFoundError: If no expense has that ID
    """
    expenses = list(expenses)
    remaining = [exp for exp in expenses if exp.id != expense_id]
    if len(remaining) == len(expenses):
        raise NotFoundError(expense_not_found(expense_id))
    return remaining


def find_stale_references(
    expenses: Iterable[ProcessedExpense], taxonomy: Taxonomy
) -> list[ProcessedExpense]:
    """List categorized expenses pointing at categories that no longer exist.

    A subcategory counts as stale when it is missing from the expense's
    category. This only reports; re-classification is what repairs them.
    """
    by_id = {cat.id: cat for cat in taxonomy}
    stale = []
    for expense in expenses:
        if expense.category_id is None:
            continue
        category = by_id.get(expense.category_id)
        if category is None or (
            expense.subcategory_id is not None
            and category.get_subcategory(expense.subcategory_id) is None
        ):
            stale.append(expense)
    return stale
