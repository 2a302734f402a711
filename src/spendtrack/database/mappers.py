"""Mapper functions to convert between domain models and SQLAlchemy models.

Keywords are lowercased and sorted and subcategories sorted by name on the
way in, so a stored tree always comes back in canonical form.
"""

from decimal import Decimal

from spendtrack.domain import entities as domain
from spendtrack.database.models import (
    Category as ORMCategory,
    Expense as ORMExpense,
    Keyword as ORMKeyword,
    SubCategory as ORMSubCategory,
)
from spendtrack.utils.amount_parser import format_amount


def subcategory_to_domain(orm_sub: ORMSubCategory) -> domain.SubCategory:
    """Convert SQLAlchemy SubCategory model to domain SubCategory entity."""
    keywords = {kw.keyword.strip().lower() for kw in orm_sub.keywords}
    return domain.SubCategory(
        id=orm_sub.id,
        name=orm_sub.name,
        keywords=tuple(sorted(k for k in keywords if k)),
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    subs = sorted(
        (subcategory_to_domain(sub) for sub in orm_category.subcategories),
        key=lambda sub: sub.name.lower(),
    )
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        order=orm_category.sort_order,
        subcategories=tuple(subs),
    )


def category_to_orm(category: domain.Category) -> ORMCategory:
    """Convert domain Category entity (with its subtree) to SQLAlchemy models."""
    return ORMCategory(
        id=category.id,
        name=category.name,
        sort_order=category.order,
        subcategories=[
            ORMSubCategory(
                id=sub.id,
                name=sub.name,
                keywords=[ORMKeyword(keyword=kw.lower()) for kw in sorted(set(sub.keywords))],
            )
            for sub in category.subcategories
        ],
    )


def expense_to_domain(orm_expense: ORMExpense) -> domain.ProcessedExpense:
    """Convert SQLAlchemy Expense model to domain ProcessedExpense entity."""
    return domain.ProcessedExpense(
        id=orm_expense.id,
        date=orm_expense.date,
        amount=Decimal(orm_expense.amount),
        currency=orm_expense.currency,
        comment=orm_expense.comment,
        full_comment=orm_expense.full_comment,
        category_id=orm_expense.category_id,
        subcategory_id=orm_expense.subcategory_id,
        is_unidentified=orm_expense.is_unidentified,
    )


def expense_to_orm(expense: domain.ProcessedExpense, position: int) -> ORMExpense:
    """Convert domain ProcessedExpense entity to SQLAlchemy Expense model."""
    return ORMExpense(
        id=expense.id,
        position=position,
        date=expense.date,
        amount=format_amount(expense.amount),
        currency=expense.currency,
        comment=expense.comment,
        full_comment=expense.full_comment,
        category_id=expense.category_id,
        subcategory_id=expense.subcategory_id,
        is_unidentified=expense.is_unidentified,
    )
