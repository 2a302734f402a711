"""Tests for CategoryService."""

import pytest

from spendtrack.domain.errors import ConflictError, NotFoundError, ValidationError


def test_ensure_defaults_seeds_once(category_service):
    assert category_service.ensure_defaults() is True
    assert category_service.ensure_defaults() is False
    assert [cat.name for cat in category_service.list_categories()] == [
        "Повседневные",
        "Крупные",
        "Квартира",
    ]


def test_create_category_and_subcategory(category_service):
    category_id = category_service.create_category("Путешествия")
    sub_id = category_service.create_subcategory(category_id, "Билеты")

    category = category_service.get_category(category_id)
    assert category.name == "Путешествия"
    assert category.get_subcategory(sub_id).name == "Билеты"
    assert category_service.format_category_path(category_id, sub_id) == "Путешествия > Билеты"


def test_create_duplicate_category(category_service):
    category_service.create_category("Food")
    with pytest.raises(ConflictError):
        category_service.create_category("FOOD")


def test_get_category_by_path(category_service, default_categories):
    category, sub = category_service.get_category_by_path("квартира > ремонт")

    assert category.name == "Квартира"
    assert sub.name == "Ремонт"
    assert category_service.get_category_by_path("Квартира") == (category, None)
    assert category_service.get_category_by_path("Квартира > Сад") is None
    assert category_service.get_category_by_path("Нет") is None


def test_require_category_by_path_errors(category_service, default_categories):
    with pytest.raises(NotFoundError, match="Сад"):
        category_service.require_category_by_path("Квартира > Сад")
    with pytest.raises(ValidationError):
        category_service.require_category_by_path(" > Сад")


def test_format_category_path_for_unknown_ids(category_service, default_categories):
    category = default_categories[0]

    assert category_service.format_category_path("missing") == ""
    assert category_service.format_category_path(category.id, "missing") == category.name


def test_adding_keyword_reclassifies_stored_expenses(category_service, expense_service):
    category_id = category_service.create_category("Food")
    sub_id = category_service.create_subcategory(category_id, "Cafe")
    expense = expense_service.add_single("01.04.2025 5 Coffee Point")
    assert expense.is_unidentified

    assert category_service.add_keyword(category_id, sub_id, "Coffee") is True
    assert category_service.add_keyword(category_id, sub_id, "coffee") is False

    stored = expense_service.get_expense(expense.id)
    assert stored.category_id == category_id
    assert stored.subcategory_id == sub_id


def test_removing_keyword_unidentifies(category_service, expense_service, default_categories):
    expense = expense_service.add_single("01.04.2025 2 метро")
    category, sub = category_service.require_category_by_path("Повседневные > Транспорт")
    assert expense.subcategory_id == sub.id

    assert category_service.remove_keyword(category.id, sub.id, "МЕТРО") is True
    assert category_service.remove_keyword(category.id, sub.id, "метро") is False

    assert expense_service.get_expense(expense.id).is_unidentified


def test_delete_category_reindexes_and_cascades(category_service, expense_service, default_categories):
    expense = expense_service.add_single("01.04.2025 2 метро")
    everyday = default_categories[0]

    category_service.delete_category(everyday.id)

    assert [(cat.name, cat.order) for cat in category_service.list_categories()] == [
        ("Крупные", 0),
        ("Квартира", 1),
    ]
    stored = expense_service.get_expense(expense.id)
    assert stored.is_unidentified
    assert stored.category_id is None


def test_rename_reports_cascade(category_service):
    category_id = category_service.create_category("Food")

    assert category_service.rename_category(category_id, "Food") is False
    assert category_service.rename_category(category_id, "Еда") is True
    assert category_service.get_category(category_id).name == "Еда"


def test_move_category(category_service, default_categories):
    category_service.move_category(default_categories[2].id, "up")

    assert [cat.name for cat in category_service.list_categories()] == [
        "Повседневные",
        "Квартира",
        "Крупные",
    ]


def test_reset_to_defaults_replaces_ids(category_service, expense_service, default_categories):
    expense = expense_service.add_single("01.04.2025 2 метро")

    category_service.reset_to_defaults()

    stored = expense_service.get_expense(expense.id)
    new_category, _ = category_service.require_category_by_path("Повседневные")
    assert new_category.id != default_categories[0].id
    assert stored.category_id == new_category.id
    assert not expense_service.list_stale()


def test_rejected_edit_leaves_tree_unchanged(category_service, default_categories):
    with pytest.raises(ConflictError):
        category_service.rename_category(default_categories[0].id, "Квартира")

    assert category_service.get_taxonomy() == default_categories
