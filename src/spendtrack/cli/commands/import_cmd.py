"""Bulk import command."""

import click

from spendtrack.domain.expense import ExpenseService


@click.command("import")
@click.argument("source", type=click.File("r", encoding="utf-8-sig"))
@click.option(
    "--format",
    "input_format",
    type=click.Choice(["statement", "table"], case_sensitive=False),
    default="statement",
    show_default=True,
    help="'statement' for pasted bank statements, 'table' for DATE<TAB>AMOUNT<TAB>COMMENT<TAB>CATEGORY rows",
)
@click.option(
    "--currency",
    envvar="SPENDTRACK_CURRENCY",
    help="Currency for rows that do not name one",
)
@click.pass_context
def import_expenses(ctx, source, input_format: str, currency: str | None):
    """Import expenses from a file, or '-' for standard input."""
    db = ctx.obj["db"]
    service = ExpenseService(db)

    text = source.read()
    if input_format.lower() == "table":
        result = service.import_tabulated(text, currency=currency)
    else:
        result = service.import_statement(text, currency=currency)

    click.echo("\nImport complete:")
    click.echo(f"  Imported: {result['imported']} expenses")
    click.echo(f"  Unidentified: {result['unidentified']}")
    if result["errors"]:
        click.echo(f"  Skipped lines: {len(result['errors'])}")
        for error in result["errors"]:
            click.echo(f"    {error}", err=True)

    if result["imported"] == 0:
        click.echo("Error: No expenses found in input", err=True)
        ctx.exit(1)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_expenses)
