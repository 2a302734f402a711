"""Category domain service."""

import logging
from typing import Optional

from spendtrack.database.base import Database
from spendtrack.domain import taxonomy as tax
from spendtrack.domain.cascade import reclassify_all
from spendtrack.domain.classifier import find_category_by_name
from spendtrack.domain.entities import Category, SubCategory, Taxonomy
from spendtrack.domain.errors import (
    NotFoundError,
    ValidationError,
    category_name_not_found,
    subcategory_name_not_found,
)

logger = logging.getLogger(__name__)

PATH_SEPARATOR = " > "


class CategoryService:
    """Service for managing the category tree.

    Each edit loads the current tree, applies a pure edit, stores the new
    tree and, when the edit asks for it, re-classifies every stored expense
    against the new tree.
    """

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_taxonomy(self) -> Taxonomy:
        """Return the current category tree in display order."""
        return self.db.load_taxonomy()

    def list_categories(self) -> list[Category]:
        """List categories in display order."""
        return list(self.get_taxonomy())

    def ensure_defaults(self) -> bool:
        """Seed the default categories into an empty database.

        Returns:
            True if defaults were created
        """
        if self.get_taxonomy():
            return False
        self.apply_edit(tax.reset_taxonomy())
        return True

    def apply_edit(self, edit: tax.TaxonomyEdit) -> tax.TaxonomyEdit:
        """Store an edited tree and cascade if the edit requires it."""
        self.db.save_taxonomy(edit.taxonomy)
        if edit.cascade:
            logger.info("Category tree changed, re-classifying expenses")
            self.db.save_expenses(reclassify_all(self.db.load_expenses(), edit.taxonomy))
        return edit

    def get_category(self, category_id: str) -> Optional[Category]:
        """Get category by ID.

        Args:
            category_id: Category ID

        Returns:
            Category entity or None if not found
        """
        return tax.get_category(self.get_taxonomy(), category_id)

    def get_category_by_name(self, name: str) -> Optional[Category]:
        """Get category by name (case-insensitive)."""
        return find_category_by_name(self.get_taxonomy(), name)

    def get_category_by_path(self, path: str) -> Optional[tuple[Category, Optional[SubCategory]]]:
        """Get category and optional subcategory by path.

        Args:
            path: "Category" or "Category > Subcategory"

        Returns:
            (category, subcategory-or-None), or None if either part is missing
        """
        try:
            return self.require_category_by_path(path)
        except NotFoundError:
            return None

    def require_category_by_path(self, path: str) -> tuple[Category, Optional[SubCategory]]:
        """Resolve a category path or raise.

        Raises:
            ValidationError: If the path is empty
            NotFoundError: If the category or subcategory does not exist
        """
        category_name, sub_name = split_category_path(path)
        category = self.get_category_by_name(category_name)
        if category is None:
            raise NotFoundError(category_name_not_found(category_name))
        if sub_name is None:
            return category, None

        sub = category.find_subcategory_by_name(sub_name)
        if sub is None:
            raise NotFoundError(subcategory_name_not_found(sub_name, category.name))
        return category, sub

    def format_category_path(self, category_id: str, subcategory_id: Optional[str] = None) -> str:
        """Get full path for a category, e.g. "Квартира > Ремонт"."""
        category = self.get_category(category_id)
        if category is None:
            return ""
        if subcategory_id is None:
            return category.name
        sub = category.get_subcategory(subcategory_id)
        if sub is None:
            return category.name
        return f"{category.name}{PATH_SEPARATOR}{sub.name}"

    def create_category(self, name: str) -> str:
        """Create a category at the end of the ordering.

        Returns:
            Category ID

        Raises:
            ValidationError: If the name is empty
            ConflictError: If the name is already taken
        """
        return self.apply_edit(tax.add_category(self.get_taxonomy(), name)).created_id

    def rename_category(self, category_id: str, name: str) -> bool:
        """Rename a category.

        Returns:
            True if expenses were re-classified
        """
        return self.apply_edit(tax.rename_category(self.get_taxonomy(), category_id, name)).cascade

    def delete_category(self, category_id: str) -> None:
        """Delete a category and re-classify expenses."""
        self.apply_edit(tax.delete_category(self.get_taxonomy(), category_id))

    def move_category(self, category_id: str, direction: str) -> None:
        """Move a category one place "up" or "down"."""
        self.apply_edit(tax.move_category(self.get_taxonomy(), category_id, direction))

    def create_subcategory(self, category_id: str, name: str) -> str:
        """Create a subcategory.

        Returns:
            Subcategory ID
        """
        return self.apply_edit(tax.add_subcategory(self.get_taxonomy(), category_id, name)).created_id

    def rename_subcategory(self, category_id: str, subcategory_id: str, name: str) -> bool:
        """Rename a subcategory.

        Returns:
            True if expenses were re-classified
        """
        edit = tax.rename_subcategory(self.get_taxonomy(), category_id, subcategory_id, name)
        return self.apply_edit(edit).cascade

    def delete_subcategory(self, category_id: str, subcategory_id: str) -> None:
        """Delete a subcategory and re-classify expenses."""
        self.apply_edit(tax.delete_subcategory(self.get_taxonomy(), category_id, subcategory_id))

    def add_keyword(self, category_id: str, subcategory_id: str, keyword: str) -> bool:
        """Add a keyword to a subcategory.

        Returns:
            True if the keyword was new (and expenses were re-classified)
        """
        edit = tax.add_keyword(self.get_taxonomy(), category_id, subcategory_id, keyword)
        return self.apply_edit(edit).cascade

    def remove_keyword(self, category_id: str, subcategory_id: str, keyword: str) -> bool:
        """Remove a keyword from a subcategory.

        Returns:
            True if the keyword existed (and expenses were re-classified)
        """
        edit = tax.remove_keyword(self.get_taxonomy(), category_id, subcategory_id, keyword)
        return self.apply_edit(edit).cascade

    def reset_to_defaults(self) -> None:
        """Replace the tree with the default categories and re-classify."""
        self.apply_edit(tax.reset_taxonomy())


def split_category_path(path: str) -> tuple[str, Optional[str]]:
    """Split "Category > Subcategory" into its parts.

    Raises:
        ValidationError: If the category part is empty
    """
    category_name, _, sub_name = (path or "").partition(PATH_SEPARATOR.strip())
    category_name = category_name.strip()
    sub_name = sub_name.strip()
    if not category_name:
        raise ValidationError("Category path cannot be empty")
    return category_name, sub_name or None
