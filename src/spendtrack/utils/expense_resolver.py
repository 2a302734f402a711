"""Utility for resolving expense references to IDs."""

from spendtrack.domain.expense import ExpenseService
from spendtrack.domain.errors import NotFoundError, ValidationError

MIN_PREFIX_LENGTH = 4


def resolve_expense(expense_service: ExpenseService, reference: str) -> str:
    """Resolve a full expense ID or a unique ID prefix to the full ID.

    Listings show shortened IDs, so any unambiguous prefix of at least
    MIN_PREFIX_LENGTH characters is accepted.

    Args:
        expense_service: ExpenseService instance
        reference: Full ID or ID prefix

    Returns:
        Expense ID

    Raises:
        NotFoundError: If no expense matches
        ValidationError: If the prefix is too short or ambiguous
    """
    reference = reference.strip()
    if expense_service.get_expense(reference) is not None:
        return reference

    if len(reference) < MIN_PREFIX_LENGTH:
        raise ValidationError(
            f"Expense reference '{reference}' is too short (need at least {MIN_PREFIX_LENGTH} characters)"
        )

    matches = [exp.id for exp in expense_service.list_expenses() if exp.id.startswith(reference)]
    if not matches:
        raise NotFoundError(f"Expense '{reference}' not found")
    if len(matches) > 1:
        raise ValidationError(f"Expense reference '{reference}' is ambiguous ({len(matches)} matches)")
    return matches[0]
