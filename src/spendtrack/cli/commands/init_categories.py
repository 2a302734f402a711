"""Initialize default categories."""

import click

from spendtrack.domain.category import CategoryService


@click.command("init-categories")
@click.option("--force", is_flag=True, help="Overwrite existing categories")
@click.pass_context
def init_categories(ctx, force: bool):
    """Initialize database with the default category tree."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    if service.list_categories() and not force:
        click.echo("Categories already exist. Use --force to overwrite.")
        return

    if force:
        service.reset_to_defaults()
    else:
        service.ensure_defaults()

    categories = service.list_categories()
    subcategory_count = sum(len(cat.subcategories) for cat in categories)
    click.echo(
        f"Successfully created {len(categories)} categories "
        f"with {subcategory_count} subcategories."
    )


def register_commands(cli):
    """Register init-categories command with main CLI."""
    cli.add_command(init_categories)
