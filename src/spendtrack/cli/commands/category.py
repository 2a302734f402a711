"""Category management commands."""

import click

from spendtrack.cli.error_handling import handle_domain_error
from spendtrack.domain.category import CategoryService, split_category_path
from spendtrack.domain.entities import Category


def print_category_tree(categories: list[Category], show_keywords: bool = False) -> None:
    """Print categories with their subcategories indented below."""
    for cat in categories:
        click.echo(f"{cat.name} (ID: {cat.id[:8]})")
        for sub in cat.subcategories:
            click.echo(f"  {sub.name} (ID: {sub.id[:8]})")
            if show_keywords and sub.keywords:
                click.echo(f"    keywords: {', '.join(sub.keywords)}")


@click.group()
def category_group():
    """Manage categories and subcategories."""
    pass


@category_group.command("list")
@click.option("--keywords", "show_keywords", is_flag=True, help="Show subcategory keywords")
@click.pass_context
def list_categories(ctx, show_keywords: bool):
    """List all categories in display order."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    categories = service.list_categories()
    if not categories:
        click.echo("No categories found. Run 'init-categories' to create default categories.")
        return

    click.echo("\nCategories:")
    print_category_tree(categories, show_keywords=show_keywords)


@category_group.command("create")
@click.argument("path")
@click.pass_context
def create_category(ctx, path: str):
    """Create a category, or a subcategory with "Category > Subcategory".

    Examples:
        spendtrack category create Путешествия
        spendtrack category create "Путешествия > Билеты"
    """
    db = ctx.obj["db"]
    service = CategoryService(db)

    try:
        category_name, sub_name = split_category_path(path)
        if sub_name is None:
            category_id = service.create_category(category_name)
            click.echo(f"Created category '{category_name}' (ID: {category_id[:8]})")
            return

        category, _ = service.require_category_by_path(category_name)
        sub_id = service.create_subcategory(category.id, sub_name)
        click.echo(f"Created subcategory '{category.name} > {sub_name}' (ID: {sub_id[:8]})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@category_group.command("rename")
@click.argument("path")
@click.argument("new_name")
@click.pass_context
def rename_category(ctx, path: str, new_name: str):
    """Rename the category or subcategory at PATH."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    try:
        category, sub = service.require_category_by_path(path)
        if sub is None:
            service.rename_category(category.id, new_name)
        else:
            service.rename_subcategory(category.id, sub.id, new_name)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Renamed '{path}' to '{new_name.strip()}'")


@category_group.command("delete")
@click.argument("path")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_category(ctx, path: str, yes: bool):
    """Delete a category or subcategory and re-classify expenses."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    try:
        category, sub = service.require_category_by_path(path)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(f"Are you sure you want to delete '{path}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        if sub is None:
            service.delete_category(category.id)
        else:
            service.delete_subcategory(category.id, sub.id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted '{path}'. Expenses were re-classified.")


@category_group.command("move")
@click.argument("name")
@click.option("--up", "direction", flag_value="up", help="Move one place up")
@click.option("--down", "direction", flag_value="down", help="Move one place down")
@click.pass_context
def move_category(ctx, name: str, direction: str | None):
    """Move a category one place up or down in the display order."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    if direction is None:
        click.echo("Error: Specify --up or --down", err=True)
        ctx.exit(1)

    try:
        category, sub = service.require_category_by_path(name)
        if sub is not None:
            click.echo("Error: Only categories can be moved", err=True)
            ctx.exit(1)
        service.move_category(category.id, direction)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Moved '{category.name}' {direction}")


@category_group.command("reset")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def reset_categories(ctx, yes: bool):
    """Replace every category with the defaults and re-classify expenses."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    if not yes and not click.confirm("Replace all categories with the defaults?"):
        click.echo("Reset cancelled.")
        return

    service.reset_to_defaults()
    click.echo("Categories reset to defaults. Expenses were re-classified.")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
