"""Expense management commands."""

import click

from spendtrack.cli.error_handling import handle_domain_error
from spendtrack.domain.expense import ExpenseService
from spendtrack.utils.amount_parser import format_amount
from spendtrack.utils.expense_resolver import resolve_expense


@click.group()
def expense_group():
    """Manage stored expenses."""
    pass


@expense_group.command("delete")
@click.argument("expense_ref")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_expense(ctx, expense_ref: str, yes: bool):
    """Delete an expense.

    Examples:
        spendtrack expense delete 3f2a
    """
    db = ctx.obj["db"]
    service = ExpenseService(db)

    try:
        expense_id = resolve_expense(service, expense_ref)
    except ValueError as e:
        handle_domain_error(ctx, e)

    expense = service.get_expense(expense_id)
    summary = f"{format_amount(expense.amount)} {expense.currency} \"{expense.comment}\""
    if not yes and not click.confirm(f"Are you sure you want to delete expense {summary}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_expense(expense_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted expense {expense_id[:8]}")


@expense_group.command("reset")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def reset_expenses(ctx, yes: bool):
    """Delete every stored expense. Categories are kept."""
    db = ctx.obj["db"]
    service = ExpenseService(db)

    if not yes and not click.confirm("Delete ALL expenses?"):
        click.echo("Reset cancelled.")
        return

    count = service.reset_expenses()
    click.echo(f"Deleted {count} expense(s)")


def register_commands(cli):
    """Register expense commands with main CLI."""
    cli.add_command(expense_group, name="expense")
