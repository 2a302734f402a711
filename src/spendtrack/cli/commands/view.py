"""Expense viewing commands."""

import click

from spendtrack.cli.date_filters import resolve_cli_date_range
from spendtrack.domain import taxonomy as tax
from spendtrack.domain.category import CategoryService
from spendtrack.domain.expense import ExpenseService
from spendtrack.domain.summary import totals_by_currency
from spendtrack.domain.views import (
    ALL,
    MANAGEMENT,
    UNCATEGORIZED,
    CategoryView,
    FixedView,
    describe_category,
    view_title,
)
from spendtrack.utils.amount_parser import format_amount


def print_expense_table(expenses, taxonomy, stale_ids=frozenset()) -> None:
    """Print expenses as a table, marking stale category references with '!'."""
    click.echo("-" * 100)
    click.echo(f"{'ID':<9} {'Date':<11} {'Amount':>12} {'Cur':<4} {'Category':<30} {'Comment':<30}")
    click.echo("-" * 100)
    for exp in expenses:
        marker = "!" if exp.id in stale_ids else ""
        category = (marker + describe_category(exp, taxonomy))[:30]
        click.echo(
            f"{exp.id[:8]:<9} {exp.date.strftime('%d.%m.%Y'):<11} "
            f"{format_amount(exp.amount):>12} {exp.currency:<4} {category:<30} {exp.comment[:30]:<30}"
        )


def print_totals(expenses) -> None:
    """Print one total line per currency."""
    click.echo("-" * 100)
    for currency, total in totals_by_currency(expenses).items():
        click.echo(f"{'Total':<21} {format_amount(total):>12} {currency}")


@click.command("view")
@click.option("--category", help="Show one category by name")
@click.option("--uncategorized", is_flag=True, help="Show only unidentified expenses")
@click.option("--start-date", help="Start date (DD.MM.YYYY or relative like 'last month')")
@click.option("--end-date", help="End date (DD.MM.YYYY or relative like 'today')")
@click.option("--this-month", is_flag=True, help="Filter to current month")
@click.option("--this-year", is_flag=True, help="Filter to current year")
@click.option("--this-week", is_flag=True, help="Filter to current week")
@click.option("--last-month", is_flag=True, help="Filter to previous month")
@click.option("--last-year", is_flag=True, help="Filter to previous year")
@click.option("--last-week", is_flag=True, help="Filter to previous week")
@click.pass_context
def view_expenses(
    ctx,
    category: str | None,
    uncategorized: bool,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    this_year: bool,
    this_week: bool,
    last_month: bool,
    last_year: bool,
    last_week: bool,
):
    """View expenses, newest first, with totals per currency.

    Expenses whose category was deleted are marked with '!'.
    """
    db = ctx.obj["db"]
    service = ExpenseService(db)
    category_service = CategoryService(db)

    if category and uncategorized:
        click.echo("Error: --category and --uncategorized cannot be combined", err=True)
        ctx.exit(1)

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "this-month": this_month,
            "this-year": this_year,
            "this-week": this_week,
            "last-month": last_month,
            "last-year": last_year,
            "last-week": last_week,
        },
    )

    taxonomy = category_service.get_taxonomy()
    if category:
        found = category_service.get_category_by_name(category)
        if found is None:
            click.echo(f"Error: Category '{category}' not found", err=True)
            ctx.exit(1)
        view = CategoryView(found.id)
    elif uncategorized:
        view = FixedView(UNCATEGORIZED)
    else:
        view = FixedView(ALL)

    expenses = service.list_expenses(view=view, start_date=start, end_date=end)
    if not expenses:
        click.echo("No expenses found.")
        return

    stale_ids = frozenset(exp.id for exp in service.list_stale())
    click.echo(f"\n{view_title(view, taxonomy)}: {len(expenses)} expense(s)")
    print_expense_table(expenses, taxonomy, stale_ids)
    print_totals(expenses)


@click.command("uncategorized")
@click.pass_context
def list_uncategorized(ctx):
    """List unidentified expenses with a suggested keyword for each."""
    db = ctx.obj["db"]
    service = ExpenseService(db)

    expenses = service.list_expenses(view=FixedView(MANAGEMENT))
    if not expenses:
        click.echo("All expenses are categorized.")
        return

    click.echo(f"\n{len(expenses)} expense(s) need a category:")
    click.echo("-" * 100)
    click.echo(f"{'ID':<9} {'Date':<11} {'Amount':>12} {'Cur':<4} {'Suggested':<15} {'Comment'}")
    click.echo("-" * 100)
    for exp in expenses:
        suggestion = tax.suggest_keyword(exp.full_comment)
        click.echo(
            f"{exp.id[:8]:<9} {exp.date.strftime('%d.%m.%Y'):<11} "
            f"{format_amount(exp.amount):>12} {exp.currency:<4} {suggestion[:15]:<15} {exp.full_comment}"
        )
    click.echo("\nUse 'spendtrack categorize ID \"Category > Subcategory\" --learn KEYWORD' to resolve.")


def register_commands(cli):
    """Register view commands with main CLI."""
    cli.add_command(view_expenses)
    cli.add_command(list_uncategorized)
