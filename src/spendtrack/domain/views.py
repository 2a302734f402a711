"""Read-only expense views.

A view is either one of the fixed screens or a single category. Category
views are keyed by ID, so a category called "all" never shadows the fixed
view of the same name.
"""

from dataclasses import dataclass
from typing import Iterable, Union

from spendtrack.domain.entities import ProcessedExpense, Taxonomy
from spendtrack.domain.taxonomy import get_category

MANAGEMENT = "management"
ALL = "all"
UNCATEGORIZED = "uncategorized"

FIXED_TAGS = (MANAGEMENT, ALL, UNCATEGORIZED)

UNIDENTIFIED_LABEL = "Неопознано"
UNKNOWN_CATEGORY_LABEL = "Неизвестная категория"
MISSING_SUBCATEGORY_LABEL = "Подкатегория не найдена"


@dataclass(frozen=True)
class FixedView:
    """One of the fixed screens."""

    tag: str

    def __post_init__(self):
        if self.tag not in FIXED_TAGS:
            raise ValueError(f"Unknown view '{self.tag}'. Expected one of: {', '.join(FIXED_TAGS)}")


@dataclass(frozen=True)
class CategoryView:
    """Expenses of a single category."""

    category_id: str


View = Union[FixedView, CategoryView]


def available_views(taxonomy: Taxonomy) -> list[View]:
    """Fixed views first, then one view per category in display order."""
    views: list[View] = [FixedView(tag) for tag in FIXED_TAGS]
    views.extend(CategoryView(cat.id) for cat in sorted(taxonomy, key=lambda cat: cat.order))
    return views


def select_expenses(expenses: Iterable[ProcessedExpense], view: View) -> list[ProcessedExpense]:
    """Filter expenses for a view.

    The management view lists the expenses waiting for manual resolution,
    like the uncategorized view.
    """
    if isinstance(view, CategoryView):
        return [exp for exp in expenses if exp.category_id == view.category_id]
    if view.tag in (MANAGEMENT, UNCATEGORIZED):
        return [exp for exp in expenses if exp.is_unidentified]
    return list(expenses)


def view_title(view: View, taxonomy: Taxonomy) -> str:
    """Human readable title for a view."""
    if isinstance(view, CategoryView):
        category = get_category(taxonomy, view.category_id)
        return category.name if category is not None else UNKNOWN_CATEGORY_LABEL
    return {
        MANAGEMENT: "Management",
        ALL: "All expenses",
        UNCATEGORIZED: "Uncategorized",
    }[view.tag]


def describe_category(expense: ProcessedExpense, taxonomy: Taxonomy) -> str:
    """Render an expense's category as ``Name`` or ``Name (Sub)``.

    Stale references are labelled rather than hidden.
    """
    if expense.is_unidentified or expense.category_id is None:
        return UNIDENTIFIED_LABEL

    category = get_category(taxonomy, expense.category_id)
    if category is None:
        return UNKNOWN_CATEGORY_LABEL

    if expense.subcategory_id is not None:
        sub = category.get_subcategory(expense.subcategory_id)
        if sub is None:
            return f"{category.name} ({MISSING_SUBCATEGORY_LABEL})"
        return f"{category.name} ({sub.name})"
    return category.name
