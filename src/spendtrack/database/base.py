"""Abstract database interface."""

from abc import ABC, abstractmethod

# Import entities directly to avoid circular import through domain/__init__.py
from spendtrack.domain.entities import ProcessedExpense, Taxonomy


class Database(ABC):
    """Abstract persistence interface for spendtrack.

    The category tree and the expense list are stored as two independent
    snapshots. Saving replaces a snapshot as a whole; there are no partial
    updates.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Taxonomy snapshot
    @abstractmethod
    def load_taxonomy(self) -> Taxonomy:
        """Load the category tree ordered by category rank."""
        pass

    @abstractmethod
    def save_taxonomy(self, taxonomy: Taxonomy) -> None:
        """Replace the stored category tree."""
        pass

    # Expense snapshot
    @abstractmethod
    def load_expenses(self) -> list[ProcessedExpense]:
        """Load all expenses in their stored order."""
        pass

    @abstractmethod
    def save_expenses(self, expenses: list[ProcessedExpense]) -> None:
        """Replace the stored expense list."""
        pass
