"""Manual categorization command."""

import click

from spendtrack.cli.error_handling import handle_domain_error
from spendtrack.domain.expense import ExpenseService
from spendtrack.utils.expense_resolver import resolve_expense


@click.command("categorize")
@click.argument("expense_ref")
@click.argument("category_path")
@click.option("--learn", "keyword", help="Keyword to remember for the subcategory")
@click.option(
    "--learn-suggested",
    is_flag=True,
    help="Remember the keyword suggested from the expense comment",
)
@click.option("--create", is_flag=True, help="Create the category or subcategory if missing")
@click.pass_context
def categorize_expense(
    ctx,
    expense_ref: str,
    category_path: str,
    keyword: str | None,
    learn_suggested: bool,
    create: bool,
):
    """Assign a category to an unidentified expense.

    Other unidentified expenses with the same comment get the same category.
    With --learn the keyword is saved on the subcategory, and every expense
    is re-classified before the assignment.

    Examples:
        spendtrack categorize 3f2a "Повседневные > Продукты"
        spendtrack categorize 3f2a "Повседневные > Продукты" --learn евроопт
    """
    db = ctx.obj["db"]
    service = ExpenseService(db)

    if keyword and learn_suggested:
        click.echo("Error: Use either --learn or --learn-suggested, not both", err=True)
        ctx.exit(1)

    try:
        expense_id = resolve_expense(service, expense_ref)
        if learn_suggested:
            keyword = service.suggest_keyword(expense_id) or None
            if keyword is None:
                click.echo("Warning: No keyword could be suggested for this expense", err=True)
        resolution = service.categorize_by_path(
            expense_id, category_path, keyword=keyword, create=create
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Expense {expense_id[:8]} categorized as '{category_path}'")
    if resolution.keyword_learned:
        click.echo(f"  Learned keyword '{keyword.strip().lower()}'; expenses were re-classified")
    if resolution.propagated_ids:
        click.echo(f"  Also categorized {len(resolution.propagated_ids)} expense(s) with the same comment")


def register_commands(cli):
    """Register categorize command with main CLI."""
    cli.add_command(categorize_expense)
