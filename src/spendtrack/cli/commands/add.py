"""Add expense command."""

import click

from spendtrack.cli.error_handling import handle_domain_error
from spendtrack.domain.category import CategoryService
from spendtrack.domain.expense import ExpenseService
from spendtrack.utils.amount_parser import format_amount


@click.command("add")
@click.argument("text", nargs=-1, required=True)
@click.option(
    "--currency",
    envvar="SPENDTRACK_CURRENCY",
    help="Currency code (defaults to SPENDTRACK_CURRENCY or BYN)",
)
@click.pass_context
def add_expense(ctx, text: tuple[str, ...], currency: str | None):
    """Add a single expense typed as text.

    Examples:
        spendtrack add 10.50 Обед
        spendtrack add '15.03.2024 42,10 "Продукты на неделю"'
    """
    db = ctx.obj["db"]
    service = ExpenseService(db)
    category_service = CategoryService(db)

    try:
        expense = service.add_single(" ".join(text), currency=currency)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(
        f"Added expense {expense.id[:8]}: {expense.date.strftime('%d.%m.%Y')} "
        f"{format_amount(expense.amount)} {expense.currency} \"{expense.comment}\""
    )
    if expense.is_unidentified:
        click.echo("  Category: not identified (see 'spendtrack uncategorized')")
    else:
        path = category_service.format_category_path(expense.category_id, expense.subcategory_id)
        click.echo(f"  Category: {path}")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_expense)
