"""Keyword management commands."""

import click

from spendtrack.cli.error_handling import handle_domain_error
from spendtrack.domain.category import CategoryService


def _require_subcategory_path(ctx, service: CategoryService, path: str):
    category, sub = service.require_category_by_path(path)
    if sub is None:
        click.echo("Error: Keywords belong to subcategories; use 'Category > Subcategory'", err=True)
        ctx.exit(1)
    return category, sub


@click.group()
def keyword_group():
    """Manage subcategory keywords."""
    pass


@keyword_group.command("add")
@click.argument("path")
@click.argument("keyword")
@click.pass_context
def add_keyword(ctx, path: str, keyword: str):
    """Teach a subcategory a keyword.

    Examples:
        spendtrack keyword add "Повседневные > Продукты" евроопт
    """
    db = ctx.obj["db"]
    service = CategoryService(db)

    try:
        category, sub = _require_subcategory_path(ctx, service, path)
        added = service.add_keyword(category.id, sub.id, keyword)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if added:
        click.echo(f"Added keyword '{keyword.strip().lower()}' to '{path}'. Expenses were re-classified.")
    else:
        click.echo(f"'{path}' already has keyword '{keyword.strip().lower()}'")


@keyword_group.command("remove")
@click.argument("path")
@click.argument("keyword")
@click.pass_context
def remove_keyword(ctx, path: str, keyword: str):
    """Remove a keyword from a subcategory."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    try:
        category, sub = _require_subcategory_path(ctx, service, path)
        removed = service.remove_keyword(category.id, sub.id, keyword)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if removed:
        click.echo(f"Removed keyword '{keyword.strip().lower()}' from '{path}'. Expenses were re-classified.")
    else:
        click.echo(f"'{path}' has no keyword '{keyword.strip().lower()}'")


def register_commands(cli):
    """Register keyword commands with main CLI."""
    cli.add_command(keyword_group, name="keyword")
