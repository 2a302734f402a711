"""Domain model entities for spendtrack.

These are pure data classes representing business concepts, independent of
database schema. Every entity is immutable: taxonomy edits and
re-classification build new values instead of mutating existing ones, so a
snapshot handed to the classifier never changes underneath it.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class RawExpense:
    """Freshly parsed expense fields before category assignment."""

    id: str
    date_str: str
    amount_str: str
    currency: str
    full_comment: str
    predefined_category_name: Optional[str] = None
    predefined_subcategory_name: Optional[str] = None


@dataclass(frozen=True)
class SubCategory:
    """Subcategory with its matching keywords (lowercase, sorted)."""

    id: str
    name: str
    keywords: tuple[str, ...] = ()


@dataclass(frozen=True)
class Category:
    """Main category. Subcategories are kept sorted by name."""

    id: str
    name: str
    order: int
    subcategories: tuple[SubCategory, ...] = ()

    def get_subcategory(self, subcategory_id: str) -> Optional[SubCategory]:
        """Return the subcategory with the given ID, if any."""
        for sub in self.subcategories:
            if sub.id == subcategory_id:
                return sub
        return None

    def find_subcategory_by_name(self, name: str) -> Optional[SubCategory]:
        """Return the subcategory whose name matches case-insensitively."""
        wanted = name.strip().lower()
        for sub in self.subcategories:
            if sub.name.lower() == wanted:
                return sub
        return None


# The full category tree, ordered by Category.order.
Taxonomy = tuple[Category, ...]


@dataclass(frozen=True)
class ProcessedExpense:
    """Expense record with its classification outcome."""

    id: str
    date: date
    amount: Decimal
    currency: str
    comment: str
    full_comment: str
    category_id: Optional[str] = None
    subcategory_id: Optional[str] = None
    is_unidentified: bool = True
