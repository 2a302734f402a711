"""Category tree edits.

Every edit is a pure function from the current taxonomy snapshot to a
TaxonomyEdit holding the new snapshot and whether existing expenses must be
re-classified against it. Invalid edits raise before anything is built, so
a rejected edit never leaves a partially changed tree behind.

Cascade policy:
- renames cascade only when the name actually changed
- deletions always cascade
- keyword add/remove cascades only when the keyword set changed
- new categories/subcategories and reordering never cascade
- resetting to defaults always cascades
"""

import re
from dataclasses import dataclass, replace
from typing import Optional

from spendtrack.domain.defaults import default_taxonomy, new_id
from spendtrack.domain.entities import Category, SubCategory, Taxonomy
from spendtrack.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    category_not_found,
    duplicate_category_name,
    duplicate_subcategory_name,
    empty_value,
    subcategory_not_found,
)


@dataclass(frozen=True)
class TaxonomyEdit:
    """Result of a taxonomy edit."""

    taxonomy: Taxonomy
    cascade: bool
    created_id: Optional[str] = None


def normalize_name(name: str, what: str = "Name") -> str:
    """Trim a category or subcategory name, rejecting empty ones."""
    trimmed = (name or "").strip()
    if not trimmed:
        raise ValidationError(empty_value(what))
    return trimmed


def normalize_keyword(keyword: str) -> str:
    """Trim and lowercase a keyword, rejecting empty ones."""
    cleaned = (keyword or "").strip().lower()
    if not cleaned:
        raise ValidationError(empty_value("Keyword"))
    return cleaned


def sort_taxonomy(categories) -> Taxonomy:
    """Order categories by rank."""
    return tuple(sorted(categories, key=lambda cat: cat.order))


def sort_subcategories(subcategories) -> tuple[SubCategory, ...]:
    """Order subcategories by name, case-insensitively."""
    return tuple(sorted(subcategories, key=lambda sub: sub.name.lower()))


def _reindex(categories) -> Taxonomy:
    return tuple(
        replace(cat, order=index) for index, cat in enumerate(sort_taxonomy(categories))
    )


def get_category(taxonomy: Taxonomy, category_id: str) -> Optional[Category]:
    """Return the category with the given ID, if any."""
    for category in taxonomy:
        if category.id == category_id:
            return category
    return None


def require_category(taxonomy: Taxonomy, category_id: str) -> Category:
    """Return the category with the given ID.

    Raises:
        NotFoundError: If no such category exists
    """
    category = get_category(taxonomy, category_id)
    if category is None:
        raise NotFoundError(category_not_found(category_id))
    return category


def require_subcategory(category: Category, subcategory_id: str) -> SubCategory:
    """Return the subcategory with the given ID inside category.

    Raises:
        NotFoundError: If the category has no such subcategory
    """
    sub = category.get_subcategory(subcategory_id)
    if sub is None:
        raise NotFoundError(subcategory_not_found(subcategory_id, category.name))
    return sub


def _with_category(taxonomy: Taxonomy, updated: Category) -> Taxonomy:
    return sort_taxonomy(updated if cat.id == updated.id else cat for cat in taxonomy)


def _with_subcategory(category: Category, updated: SubCategory) -> Category:
    return replace(
        category,
        subcategories=sort_subcategories(
            updated if sub.id == updated.id else sub for sub in category.subcategories
        ),
    )


def add_category(taxonomy: Taxonomy, name: str) -> TaxonomyEdit:
    """Append a new empty category after the last one."""
    name = normalize_name(name, "Category name")
    if any(cat.name.lower() == name.lower() for cat in taxonomy):
        raise ConflictError(duplicate_category_name(name))

    order = max((cat.order for cat in taxonomy), default=-1) + 1
    category = Category(id=new_id(), name=name, order=order)
    return TaxonomyEdit(sort_taxonomy((*taxonomy, category)), cascade=False, created_id=category.id)


def rename_category(taxonomy: Taxonomy, category_id: str, name: str) -> TaxonomyEdit:
    """Rename a category in place."""
    name = normalize_name(name, "Category name")
    category = require_category(taxonomy, category_id)
    if any(cat.id != category_id and cat.name.lower() == name.lower() for cat in taxonomy):
        raise ConflictError(duplicate_category_name(name))

    updated = _with_category(taxonomy, replace(category, name=name))
    return TaxonomyEdit(updated, cascade=category.name != name)


def delete_category(taxonomy: Taxonomy, category_id: str) -> TaxonomyEdit:
    """Remove a category and close the gap in the ordering."""
    require_category(taxonomy, category_id)
    remaining = [cat for cat in taxonomy if cat.id != category_id]
    return TaxonomyEdit(_reindex(remaining), cascade=True)


def move_category(taxonomy: Taxonomy, category_id: str, direction: str) -> TaxonomyEdit:
    """Swap a category with its neighbour ("up" or "down").

    Moving the first category up or the last one down leaves the tree
    unchanged.
    """
    if direction not in ("up", "down"):
        raise ValidationError(f"Unknown direction '{direction}'. Use 'up' or 'down'.")
    require_category(taxonomy, category_id)

    ordered = list(sort_taxonomy(taxonomy))
    index = next(i for i, cat in enumerate(ordered) if cat.id == category_id)
    target = index - 1 if direction == "up" else index + 1
    if target < 0 or target >= len(ordered):
        return TaxonomyEdit(taxonomy, cascade=False)

    ordered[index], ordered[target] = ordered[target], ordered[index]
    return TaxonomyEdit(
        tuple(replace(cat, order=position) for position, cat in enumerate(ordered)),
        cascade=False,
    )


def add_subcategory(taxonomy: Taxonomy, category_id: str, name: str) -> TaxonomyEdit:
    """Add an empty subcategory to a category."""
    name = normalize_name(name, "Subcategory name")
    category = require_category(taxonomy, category_id)
    if category.find_subcategory_by_name(name) is not None:
        raise ConflictError(duplicate_subcategory_name(name, category.name))

    sub = SubCategory(id=new_id(), name=name)
    updated = replace(category, subcategories=sort_subcategories((*category.subcategories, sub)))
    return TaxonomyEdit(_with_category(taxonomy, updated), cascade=False, created_id=sub.id)


def rename_subcategory(
    taxonomy: Taxonomy, category_id: str, subcategory_id: str, name: str
) -> TaxonomyEdit:
    """Rename a subcategory in place."""
    name = normalize_name(name, "Subcategory name")
    category = require_category(taxonomy, category_id)
    sub = require_subcategory(category, subcategory_id)
    if any(
        other.id != subcategory_id and other.name.lower() == name.lower()
        for other in category.subcategories
    ):
        raise ConflictError(duplicate_subcategory_name(name, category.name))

    updated = _with_subcategory(category, replace(sub, name=name))
    return TaxonomyEdit(_with_category(taxonomy, updated), cascade=sub.name != name)


def delete_subcategory(taxonomy: Taxonomy, category_id: str, subcategory_id: str) -> TaxonomyEdit:
    """Remove a subcategory from its category."""
    category = require_category(taxonomy, category_id)
    require_subcategory(category, subcategory_id)
    updated = replace(
        category,
        subcategories=tuple(sub for sub in category.subcategories if sub.id != subcategory_id),
    )
    return TaxonomyEdit(_with_category(taxonomy, updated), cascade=True)


def add_keyword(
    taxonomy: Taxonomy, category_id: str, subcategory_id: str, keyword: str
) -> TaxonomyEdit:
    """Teach a subcategory a new keyword.

    Adding a keyword the subcategory already has is a no-op.
    """
    keyword = normalize_keyword(keyword)
    category = require_category(taxonomy, category_id)
    sub = require_subcategory(category, subcategory_id)
    if keyword in sub.keywords:
        return TaxonomyEdit(taxonomy, cascade=False)

    updated = _with_subcategory(category, replace(sub, keywords=tuple(sorted((*sub.keywords, keyword)))))
    return TaxonomyEdit(_with_category(taxonomy, updated), cascade=True)


def remove_keyword(
    taxonomy: Taxonomy, category_id: str, subcategory_id: str, keyword: str
) -> TaxonomyEdit:
    """Forget a keyword. Removing an unknown keyword is a no-op."""
    keyword = normalize_keyword(keyword)
    category = require_category(taxonomy, category_id)
    sub = require_subcategory(category, subcategory_id)
    if keyword not in sub.keywords:
        return TaxonomyEdit(taxonomy, cascade=False)

    remaining = tuple(k for k in sub.keywords if k != keyword)
    updated = _with_subcategory(category, replace(sub, keywords=remaining))
    return TaxonomyEdit(_with_category(taxonomy, updated), cascade=True)


def reset_taxonomy() -> TaxonomyEdit:
    """Replace the whole tree with the default categories."""
    return TaxonomyEdit(default_taxonomy(), cascade=True)


_SUGGEST_SPLIT = re.compile(r'[\s,"“”.]+')
_SHOUTED = re.compile(r"^[A-ZА-ЯЁ]{2,}")


def suggest_keyword(comment: str) -> str:
    """Guess a keyword worth learning from an expense comment.

    Prefers an upper-case word such as a shop name, then a short last word,
    then a short first word. Returns an empty string when nothing fits.
    """
    words = [word for word in _SUGGEST_SPLIT.split(comment) if word]
    if not words:
        return ""

    for word in words:
        if _SHOUTED.match(word) and 2 < len(word) < 20:
            return word.lower()
    if len(words[-1]) < 15:
        return words[-1].lower()
    if len(words[0]) < 15:
        return words[0].lower()
    return ""
