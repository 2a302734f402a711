"""Summary command."""

import click

from spendtrack.cli.date_filters import resolve_cli_date_range
from spendtrack.domain.summary import SummaryService
from spendtrack.utils.amount_parser import format_amount


def _format_totals(totals) -> str:
    return ", ".join(f"{format_amount(total)} {currency}" for currency, total in totals.items())


@click.command("summary")
@click.option("--start-date", help="Start date (DD.MM.YYYY or relative like 'last month')")
@click.option("--end-date", help="End date (DD.MM.YYYY or relative like 'today')")
@click.option("--this-month", is_flag=True, help="Filter to current month")
@click.option("--this-year", is_flag=True, help="Filter to current year")
@click.option("--this-week", is_flag=True, help="Filter to current week")
@click.option("--last-month", is_flag=True, help="Filter to previous month")
@click.option("--last-year", is_flag=True, help="Filter to previous year")
@click.option("--last-week", is_flag=True, help="Filter to previous week")
@click.option("--expand", is_flag=True, help="Show subcategory subtotals")
@click.pass_context
def summary(
    ctx,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    this_year: bool,
    this_week: bool,
    last_month: bool,
    last_year: bool,
    last_week: bool,
    expand: bool,
):
    """Show spending totals per category."""
    db = ctx.obj["db"]
    service = SummaryService(db)

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

    lines = service.build_summary(start_date=start, end_date=end)
    if not lines:
        click.echo("No expenses found.")
        return

    click.echo("\nCategory Summary:")
    click.echo("-" * 80)
    click.echo(f"{'Category':<40} {'Count':>6} {'Total':>30}")
    click.echo("-" * 80)
    for line in lines:
        click.echo(f"{line.label[:40]:<40} {line.count:>6} {_format_totals(line.totals):>30}")
        if expand:
            for sub in line.subtotals:
                click.echo(f"    {sub.label[:36]:<36} {sub.count:>6} {_format_totals(sub.totals):>30}")
    click.echo("=" * 80)
    grand_total = service.grand_total(start_date=start, end_date=end)
    click.echo(f"{'Total':<40} {sum(line.count for line in lines):>6} {_format_totals(grand_total):>30}")


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
