"""Expense classification against the category tree.

Classification precedence, first applicable wins:

1. Predefined names. A raw expense imported from a categorized table names
   its category (and maybe subcategory). If the category name resolves, the
   expense is assigned there and keyword matching is skipped, even when the
   subcategory name does not resolve.
2. Keywords. Categories in order, their subcategories in order, each
   subcategory's keywords in order: the first keyword found anywhere in the
   comment (case-insensitive) wins. There is no scoring.
3. Otherwise the expense is unidentified.

Functions here never mutate their inputs.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from spendtrack.domain.entities import Category, ProcessedExpense, RawExpense, Taxonomy
from spendtrack.utils.amount_parser import parse_magnitude
from spendtrack.utils.date_parser import parse_date_str

logger = logging.getLogger(__name__)


def find_category_by_name(taxonomy: Taxonomy, name: str) -> Optional[Category]:
    """Return the category whose name matches case-insensitively."""
    wanted = name.strip().lower()
    for category in taxonomy:
        if category.name.lower() == wanted:
            return category
    return None


def match_keyword(comment: str, taxonomy: Taxonomy) -> Optional[tuple[str, str]]:
    """Find the first (category_id, subcategory_id) with a keyword in comment."""
    haystack = comment.lower()
    for category in taxonomy:
        for sub in category.subcategories:
            for keyword in sub.keywords:
                if keyword.lower() in haystack:
                    return category.id, sub.id
    return None


def _parse_amount(amount_str: str) -> Decimal:
    try:
        return parse_magnitude(amount_str)
    except ValueError:
        logger.warning("Invalid amount %r. Using 0.", amount_str)
        return Decimal("0")


def classify(
    raw: RawExpense, taxonomy: Taxonomy, today: Optional[date] = None
) -> ProcessedExpense:
    """Build a processed expense from a raw one.

    Args:
        raw: Parsed expense fields
        taxonomy: Category tree snapshot, in display order
        today: Fallback for unparseable dates (defaults to date.today())

    Returns:
        ProcessedExpense with the same ID as the raw expense
    """
    category_id = None
    subcategory_id = None

    if raw.predefined_category_name:
        category = find_category_by_name(taxonomy, raw.predefined_category_name)
        if category is not None:
            category_id = category.id
            if raw.predefined_subcategory_name:
                sub = category.find_subcategory_by_name(raw.predefined_subcategory_name)
                if sub is not None:
                    subcategory_id = sub.id
                else:
                    logger.warning(
                        "Predefined subcategory %r not found in category %r.",
                        raw.predefined_subcategory_name,
                        category.name,
                    )
        else:
            logger.warning("Predefined category %r not found.", raw.predefined_category_name)

    if category_id is None:
        matched = match_keyword(raw.full_comment, taxonomy)
        if matched is not None:
            category_id, subcategory_id = matched

    return ProcessedExpense(
        id=raw.id,
        date=parse_date_str(raw.date_str, today=today),
        amount=_parse_amount(raw.amount_str),
        currency=raw.currency,
        comment=raw.full_comment,
        full_comment=raw.full_comment,
        category_id=category_id,
        subcategory_id=subcategory_id,
        is_unidentified=category_id is None,
    )


def classify_all(
    raws: Iterable[RawExpense], taxonomy: Taxonomy, today: Optional[date] = None
) -> list[ProcessedExpense]:
    """Classify a batch of raw expenses against one taxonomy snapshot."""
    return [classify(raw, taxonomy, today=today) for raw in raws]
