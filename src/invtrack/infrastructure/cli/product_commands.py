"""CLI commands for products: one-shot list, add, edit and delete."""

from __future__ import annotations

import click

from invtrack.domain.exceptions import DomainException
from invtrack.infrastructure.bootstrap import StoreContext
from invtrack.infrastructure.cli.prompter import ClickPrompter
from invtrack.infrastructure.cli.rendering import render_table


def _load_view(ctx: click.Context, prompter: ClickPrompter):
    """Mount a view and wait for the first snapshot of the collection."""
    context: StoreContext = ctx.obj
    view = context.view(prompter)
    view.mount()
    try:
        view.wait_for_sync(timeout=ctx.meta.get("timeout"))
    except TimeoutError as exc:
        view.unmount()
        raise click.ClickException(str(exc))
    except BaseException:
        view.unmount()
        raise
    return view


@click.command("list")
@click.pass_context
def product_list(ctx: click.Context) -> None:
    """List all products."""
    view = _load_view(ctx, ClickPrompter())
    try:
        render_table(view.rows())
    finally:
        view.unmount()


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--category", default="", help="Category (optional).")
@click.option("--stock", required=True, help="Units in stock.")
@click.option("--price", required=True, help="Price (e.g. 2.50).")
@click.pass_context
def product_add(
    ctx: click.Context, name: str, category: str, stock: str, price: str
) -> None:
    """Add a new product."""
    context: StoreContext = ctx.obj
    view = context.view(ClickPrompter())
    view.set_field("name", name)
    view.set_field("category", category)
    view.set_field("stock", stock)
    view.set_field("price", price)

    new_id = view.submit_new()
    if new_id is None:
        ctx.exit(1)

    click.echo(f"Product #{new_id} '{name.strip()}' added")


@click.command("edit")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--name", default=None, help="New name.")
@click.option("--category", default=None, help="New category.")
@click.option("--stock", default=None, help="New stock count.")
@click.option("--price", default=None, help="New price.")
@click.pass_context
def product_edit(
    ctx: click.Context,
    product_id: str,
    name: str | None,
    category: str | None,
    stock: str | None,
    price: str | None,
) -> None:
    """Change fields of an existing product; omitted fields keep their value."""
    view = _load_view(ctx, ClickPrompter())
    try:
        try:
            product = view.get_product(product_id)
        except DomainException as exc:
            raise click.ClickException(str(exc))

        view.request_edit(product)
        for field, value in (
            ("name", name),
            ("category", category),
            ("stock", stock),
            ("price", price),
        ):
            if value is not None:
                view.set_field(field, value)

        if not view.save_edit():
            ctx.exit(1)
    finally:
        view.unmount()

    click.echo(f"Product #{product_id} updated")


@click.command("delete")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def product_delete(ctx: click.Context, product_id: str, yes: bool) -> None:
    """Delete a product. Deleting an id that is already gone is not an error."""
    context: StoreContext = ctx.obj
    view = context.view(ClickPrompter(assume_yes=yes))
    deleted = view.request_delete(product_id)

    if deleted:
        click.echo(f"Product #{product_id} deleted")
    else:
        click.echo("Cancelled.")
