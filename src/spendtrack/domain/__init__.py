"""Domain layer for spendtrack application."""

__all__ = ["CategoryService", "ExpenseService", "SummaryService"]


# Services import the database layer, which imports domain entities; load
# them lazily to keep `spendtrack.domain.entities` importable on its own.
def __getattr__(name):
    if name == "CategoryService":
        from spendtrack.domain.category import CategoryService
        return CategoryService
    if name == "ExpenseService":
        from spendtrack.domain.expense import ExpenseService
        return ExpenseService
    if name == "SummaryService":
        from spendtrack.domain.summary import SummaryService
        return SummaryService
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
