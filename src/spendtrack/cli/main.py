"""Main CLI entry point."""

import click

from spendtrack.cli.commands import (
    add,
    categorize,
    category,
    expense,
    import_cmd,
    init_categories,
    keyword,
    summary,
    view,
)
from spendtrack.cli.error_handling import configure_logging
from spendtrack.database.factories import create_sqlite_database


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides SPENDTRACK_DB_PATH environment variable)",
    envvar="SPENDTRACK_DB_PATH",
)
@click.option("-v", "--verbose", count=True, help="Show progress messages (-vv for debug output)")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: int):
    """Spendtrack - personal expense tracker.

    Paste single expenses or whole bank statements, and let keywords sort
    them into your categories.
    """
    ctx.ensure_object(dict)
    configure_logging(verbose)

    # Only open the database when a command runs, not for --help
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


add.register_commands(cli)
import_cmd.register_commands(cli)
categorize.register_commands(cli)
category.register_commands(cli)
keyword.register_commands(cli)
view.register_commands(cli)
summary.register_commands(cli)
expense.register_commands(cli)
init_categories.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
