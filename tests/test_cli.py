"""Tests for CLI commands."""

from spendtrack.cli.main import cli

STATEMENT = "\n".join(
    [
        "14.05.2025 20:31:24\tОплата товаров\t-8,63 BYN\t4512, POS, SHOP EVROOPT",
        "14.05.2025 21:00:00\tЗачисление\t150,00 BYN\tЗарплата",
        "15.05.2025 08:10:00\tОплата\t-1,00 BYN\tМЕТРО МИНСК",
    ]
)


def _invoke(cli_runner, temp_db, *args, **kwargs):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], **kwargs)


def test_help_does_not_need_database(cli_runner):
    result = cli_runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "import" in result.output
    assert "categorize" in result.output


class TestInitCategories:
    def test_init_categories(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "init-categories")

        assert result.exit_code == 0
        assert "Successfully created 3 categories" in result.output

    def test_init_categories_twice(self, cli_runner, temp_db):
        _invoke(cli_runner, temp_db, "init-categories")
        result = _invoke(cli_runner, temp_db, "init-categories")

        assert "already exist" in result.output.lower()

    def test_init_categories_force(self, cli_runner, temp_db, category_service):
        category_service.create_category("Своя")

        result = _invoke(cli_runner, temp_db, "init-categories", "--force")

        assert result.exit_code == 0
        assert category_service.get_category_by_name("Своя") is None


class TestAdd:
    def test_add_categorized(self, cli_runner, temp_db, default_categories):
        result = _invoke(cli_runner, temp_db, "add", "10,50", "Евроопт")

        assert result.exit_code == 0
        assert "10.50 BYN" in result.output
        assert "Повседневные > Продукты" in result.output

    def test_add_unidentified_with_currency(self, cli_runner, temp_db, expense_service):
        result = _invoke(cli_runner, temp_db, "add", "--currency", "usd", "12", "загадка")

        assert result.exit_code == 0
        assert "not identified" in result.output
        assert expense_service.list_expenses()[0].currency == "USD"

    def test_add_invalid(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "add", "просто", "текст")

        assert result.exit_code == 1
        assert "Error: Unrecognized expense format" in result.output


class TestImport:
    def test_import_statement_file(self, cli_runner, temp_db, default_categories, tmp_path):
        statement = tmp_path / "statement.txt"
        statement.write_text(STATEMENT, encoding="utf-8")

        result = _invoke(cli_runner, temp_db, "import", str(statement))

        assert result.exit_code == 0
        assert "Imported: 2 expenses" in result.output
        assert "Unidentified: 1" in result.output

    def test_import_table_from_stdin(self, cli_runner, temp_db, default_categories, expense_service):
        table = "27.04.2025\t10,75\tФикспрайс\tКвартира (Ремонт)\nbad row\n"

        result = _invoke(cli_runner, temp_db, "import", "-", "--format", "table", input=table)

        assert result.exit_code == 0
        assert "Imported: 1 expenses" in result.output
        assert "Line 2:" in result.output
        [expense] = expense_service.list_expenses()
        assert expense.category_id == default_categories[2].id

    def test_import_nothing_fails(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "import", "-", input="no expenses here\n")

        assert result.exit_code == 1
        assert "No expenses found" in result.output


class TestCategoryCommands:
    def test_list_empty(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "category", "list")

        assert result.exit_code == 0
        assert "init-categories" in result.output

    def test_list_with_keywords(self, cli_runner, temp_db, default_categories):
        result = _invoke(cli_runner, temp_db, "category", "list", "--keywords")

        assert result.exit_code == 0
        assert "Повседневные" in result.output
        assert "евроопт" in result.output

    def test_create_category_and_subcategory(self, cli_runner, temp_db, category_service):
        result = _invoke(cli_runner, temp_db, "category", "create", "Хобби")
        assert result.exit_code == 0
        assert "Created category 'Хобби'" in result.output

        result = _invoke(cli_runner, temp_db, "category", "create", "хобби > Книги")
        assert result.exit_code == 0
        assert "Created subcategory 'Хобби > Книги'" in result.output
        assert category_service.get_category_by_path("Хобби > Книги") is not None

    def test_create_duplicate(self, cli_runner, temp_db, default_categories):
        result = _invoke(cli_runner, temp_db, "category", "create", "квартира")

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_rename_subcategory(self, cli_runner, temp_db, default_categories, category_service):
        result = _invoke(cli_runner, temp_db, "category", "rename", "Квартира > Ремонт", "Стройка")

        assert result.exit_code == 0
        assert category_service.get_category_by_path("Квартира > Стройка") is not None

    def test_delete_requires_confirmation(self, cli_runner, temp_db, default_categories, category_service):
        result = _invoke(cli_runner, temp_db, "category", "delete", "Квартира", input="n\n")

        assert "Deletion cancelled" in result.output
        assert category_service.get_category_by_name("Квартира") is not None

        result = _invoke(cli_runner, temp_db, "category", "delete", "Квартира", input="y\n")

        assert result.exit_code == 0
        assert category_service.get_category_by_name("Квартира") is None

    def test_delete_unknown(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "category", "delete", "Нет", "--yes")

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_move(self, cli_runner, temp_db, default_categories, category_service):
        result = _invoke(cli_runner, temp_db, "category", "move", "Квартира", "--up")

        assert result.exit_code == 0
        assert [cat.name for cat in category_service.list_categories()][1] == "Квартира"

    def test_move_requires_direction(self, cli_runner, temp_db, default_categories):
        result = _invoke(cli_runner, temp_db, "category", "move", "Квартира")

        assert result.exit_code == 1
        assert "--up or --down" in result.output

    def test_reset(self, cli_runner, temp_db, category_service):
        category_service.create_category("Своя")

        result = _invoke(cli_runner, temp_db, "category", "reset", "--yes")

        assert result.exit_code == 0
        assert len(category_service.list_categories()) == 3


class TestKeywordCommands:
    def test_add_keyword_reclassifies(self, cli_runner, temp_db, default_categories, expense_service):
        expense = expense_service.add_single("5 Лавка Гриля")

        result = _invoke(cli_runner, temp_db, "keyword", "add", "Повседневные > Еда вне дома", "Гриля")

        assert result.exit_code == 0
        assert "Added keyword 'гриля'" in result.output
        assert expense_service.get_expense(expense.id).is_unidentified is False

    def test_add_existing_keyword(self, cli_runner, temp_db, default_categories):
        result = _invoke(cli_runner, temp_db, "keyword", "add", "Повседневные > Транспорт", "метро")

        assert result.exit_code == 0
        assert "already has keyword" in result.output

    def test_remove_keyword(self, cli_runner, temp_db, default_categories):
        result = _invoke(cli_runner, temp_db, "keyword", "remove", "Повседневные > Транспорт", "МЕТРО")

        assert result.exit_code == 0
        assert "Removed keyword 'метро'" in result.output

    def test_keyword_needs_subcategory(self, cli_runner, temp_db, default_categories):
        result = _invoke(cli_runner, temp_db, "keyword", "add", "Повседневные", "x")

        assert result.exit_code == 1
        assert "Keywords belong to subcategories" in result.output

    def test_verbose_logs_cascade(self, cli_runner, temp_db, default_categories):
        result = cli_runner.invoke(
            cli,
            ["--db-path", temp_db.database_path, "-v", "keyword", "add", "Квартира > Ремонт", "кран"],
        )

        assert result.exit_code == 0
        assert "re-classifying expenses" in result.output


class TestCategorize:
    def test_categorize_by_prefix_and_learn(self, cli_runner, temp_db, default_categories, expense_service):
        first = expense_service.add_single("01.04.2025 3 Лавка Гриля")
        twin = expense_service.add_single("02.04.2025 3 ЛАВКА ГРИЛЯ")

        result = _invoke(
            cli_runner,
            temp_db,
            "categorize",
            first.id[:8],
            "Повседневные > Еда вне дома",
            "--learn",
            "лавка",
        )

        assert result.exit_code == 0
        assert "Learned keyword 'лавка'" in result.output
        assert expense_service.get_expense(twin.id).is_unidentified is False

    def test_categorize_propagates(self, cli_runner, temp_db, default_categories, expense_service):
        first = expense_service.add_single("01.04.2025 3 Лавка Гриля")
        expense_service.add_single("02.04.2025 3 ЛАВКА ГРИЛЯ")

        result = _invoke(cli_runner, temp_db, "categorize", first.id, "Повседневные")

        assert result.exit_code == 0
        assert "Also categorized 1 expense(s)" in result.output

    def test_categorize_learn_suggested(self, cli_runner, temp_db, default_categories, expense_service):
        expense = expense_service.add_single('01.04.2025 3 "Оплата в ГРИЛЬНИЦА"')

        result = _invoke(
            cli_runner, temp_db, "categorize", expense.id, "Повседневные > Еда вне дома", "--learn-suggested"
        )

        assert result.exit_code == 0
        assert "Learned keyword 'грильница'" in result.output

    def test_categorize_create(self, cli_runner, temp_db, expense_service, category_service):
        expense = expense_service.add_single("3 книга")

        result = _invoke(cli_runner, temp_db, "categorize", expense.id, "Хобби > Книги", "--create")

        assert result.exit_code == 0
        assert category_service.get_category_by_path("Хобби > Книги") is not None

    def test_categorize_unknown_expense(self, cli_runner, temp_db, default_categories):
        result = _invoke(cli_runner, temp_db, "categorize", "zzzzzzzz", "Повседневные")

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_categorize_both_learn_options(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "categorize", "abcd", "X", "--learn", "a", "--learn-suggested")

        assert result.exit_code == 1
        assert "either --learn or --learn-suggested" in result.output


class TestView:
    def test_view_empty(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "view")

        assert result.exit_code == 0
        assert "No expenses found" in result.output

    def test_view_all_with_totals(self, cli_runner, temp_db, default_categories, expense_service):
        expense_service.add_single("01.04.2025 4,50 Евроопт")
        expense_service.add_single("02.04.2025 2 загадка")
        expense_service.add_single("03.04.2025 1 кофе", currency="USD")

        result = _invoke(cli_runner, temp_db, "view")

        assert result.exit_code == 0
        assert "All expenses: 3 expense(s)" in result.output
        assert "Повседневные (Продукты)" in result.output
        assert "Неопознано" in result.output
        assert "6.50 BYN" in result.output
        assert "1 USD" in result.output

    def test_view_category_and_dates(self, cli_runner, temp_db, default_categories, expense_service):
        expense_service.add_single("01.03.2025 4 Евроопт")
        expense_service.add_single("01.04.2025 2 Евроопт")
        expense_service.add_single("01.04.2025 9 ремонт")

        result = _invoke(
            cli_runner, temp_db, "view", "--category", "повседневные", "--start-date", "01.04.2025"
        )

        assert result.exit_code == 0
        assert "Повседневные: 1 expense(s)" in result.output

    def test_view_uncategorized(self, cli_runner, temp_db, default_categories, expense_service):
        expense_service.add_single("01.04.2025 4 Евроопт")
        expense_service.add_single("02.04.2025 2 загадка")

        result = _invoke(cli_runner, temp_db, "view", "--uncategorized")

        assert "Uncategorized: 1 expense(s)" in result.output
        assert "загадка" in result.output

    def test_view_marks_stale(self, cli_runner, temp_db, default_categories, expense_service):
        expense_service.add_single("01.04.2025 4 ремонт")
        temp_db.save_taxonomy(default_categories[:2])

        result = _invoke(cli_runner, temp_db, "view")

        assert "!Неизвестная категория" in result.output

    def test_view_unknown_category(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "view", "--category", "Нет")

        assert result.exit_code == 1

    def test_uncategorized_suggests_keywords(self, cli_runner, temp_db, expense_service):
        expense_service.add_single('01.04.2025 4 "Оплата SHOP KOPEECHKA"')

        result = _invoke(cli_runner, temp_db, "uncategorized")

        assert result.exit_code == 0
        assert "1 expense(s) need a category" in result.output
        assert "shop" in result.output

    def test_uncategorized_when_done(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "uncategorized")

        assert "All expenses are categorized" in result.output


class TestExpenseCommands:
    def test_delete(self, cli_runner, temp_db, expense_service):
        expense = expense_service.add_single("4 кофе")

        result = _invoke(cli_runner, temp_db, "expense", "delete", expense.id[:6], input="y\n")

        assert result.exit_code == 0
        assert f"Deleted expense {expense.id[:8]}" in result.output
        assert expense_service.list_expenses() == []

    def test_delete_cancelled(self, cli_runner, temp_db, expense_service):
        expense = expense_service.add_single("4 кофе")

        result = _invoke(cli_runner, temp_db, "expense", "delete", expense.id, input="n\n")

        assert "Deletion cancelled" in result.output
        assert len(expense_service.list_expenses()) == 1

    def test_reset(self, cli_runner, temp_db, expense_service):
        expense_service.add_single("4 кофе")
        expense_service.add_single("5 чай")

        result = _invoke(cli_runner, temp_db, "expense", "reset", "--yes")

        assert result.exit_code == 0
        assert "Deleted 2 expense(s)" in result.output
