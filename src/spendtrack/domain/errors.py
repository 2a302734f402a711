"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


def category_not_found(category_id: str) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def category_name_not_found(name: str) -> str:
    """Return message for missing category by name."""
    return f"Category '{name}' not found"


def subcategory_not_found(subcategory_id: str, category_name: str) -> str:
    """Return message for missing subcategory by ID."""
    return f"Subcategory {subcategory_id} not found in category '{category_name}'"


def subcategory_name_not_found(name: str, category_name: str) -> str:
    """Return message for missing subcategory by name."""
    return f"Subcategory '{name}' not found in category '{category_name}'"


def expense_not_found(expense_id: str) -> str:
    """Return message for missing expense."""
    return f"Expense {expense_id} not found"


def duplicate_category_name(name: str) -> str:
    """Return message for a category name that is already taken."""
    return f"Category with name '{name}' already exists"


def duplicate_subcategory_name(name: str, category_name: str) -> str:
    """Return message for a subcategory name that is already taken."""
    return f"Subcategory '{name}' already exists in category '{category_name}'"


def empty_value(what: str) -> str:
    """Return message for an empty required name or keyword."""
    return f"{what} cannot be empty"
